"""Postal-code (CEP) address lookup over HTTP."""

import logging

import requests

from ticketing import conf
from ticketing.domain import Address, PostalCode
from ticketing.domain.errors import (
    AddressLookupError,
    AddressNotFoundError,
    InvalidPostalCodeError,
)

logger = logging.getLogger(__name__)


class AddressLookupService:
    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session

    def lookup(self, postal_code: str) -> Address:
        """Resolve a postal code to street, neighborhood, city and state.

        Raises:
            InvalidPostalCodeError: The code does not have 8 digits.
            AddressNotFoundError: The service reports the code as unknown.
            AddressLookupError: The service could not be reached or answered garbage.
        """
        try:
            code = PostalCode.parse(postal_code)
        except ValueError as exc:
            raise InvalidPostalCodeError() from exc

        if self._session is not None:
            data = self._fetch(self._session, code)
        else:
            with requests.Session() as session:
                data = self._fetch(session, code)

        if data.get("erro"):
            raise AddressNotFoundError(code.digits)

        return Address(
            postal_code=code.format(),
            street=data.get("logradouro", ""),
            neighborhood=data.get("bairro", ""),
            city=data.get("localidade", ""),
            state=data.get("uf", ""),
        )

    def _fetch(self, session: requests.Session, code: PostalCode) -> dict:
        url = conf.address_lookup_url().format(postal_code=code.digits)
        try:
            response = session.get(url, timeout=conf.address_lookup_timeout())
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Address lookup for %s failed: %s", code.digits, exc)
            raise AddressLookupError() from exc
        if not isinstance(data, dict):
            logger.error("Address lookup for %s returned %s", code.digits, type(data).__name__)
            raise AddressLookupError()
        return data
