"""App-level constants and accessors for the TICKETING_* settings."""

from django.conf import settings

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200
DESCRIPTION_MIN_LENGTH = 10
DESCRIPTION_MAX_LENGTH = 5000
MAX_BATCHES = 50
MAX_MIN_AGE = 18

# Status given to every published (non-draft) submission.
INITIAL_MODERATION_STATUS = "pending"

CONTRACT_TABLE_PLACEHOLDER = "{{COMMISSION_TABLE}}"


def cache_timeout() -> int:
    return getattr(settings, "TICKETING_CACHE_TIMEOUT", 300)


def address_lookup_url() -> str:
    return getattr(
        settings,
        "TICKETING_ADDRESS_LOOKUP_URL",
        "https://viacep.com.br/ws/{postal_code}/json/",
    )


def address_lookup_timeout() -> float:
    return getattr(settings, "TICKETING_ADDRESS_LOOKUP_TIMEOUT", 5.0)
