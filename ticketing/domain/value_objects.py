"""Domain primitives that enforce validity at creation time.

Money, Quantity and Percentage are the only places where user-entered
display strings (with a comma or dot decimal separator) are turned into
numbers and back.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Self
from uuid import UUID

MONEY_PATTERN = re.compile(r"^\d+([.,]\d{1,2})?$")
QUANTITY_PATTERN = re.compile(r"^\d+$")
PERCENTAGE_PATTERN = re.compile(r"^\d{1,3}([.,]\d{1,2})?$")


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ContractId:
    """Unique identifier for a CommissionContract."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CommissionRangeId:
    """Unique identifier for a CommissionRange."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def parse(cls, value: str | int | Decimal) -> Self:
        """Parse a display string such as ``"12,50"`` or ``"12.5"``."""
        if isinstance(value, Decimal | int):
            return cls(amount=Decimal(value))
        text = value.strip()
        if not MONEY_PATTERN.match(text):
            raise ValueError(f"Invalid money value: {value!r}")
        return cls(amount=Decimal(text.replace(",", ".")))

    def format(self) -> str:
        """Display form with a comma decimal separator."""
        return f"{self.amount:.2f}".replace(".", ",")

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Quantity:
    """Positive integer count of tickets or people."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Quantity must be greater than zero")

    @classmethod
    def parse(cls, value: str | int) -> Self:
        if isinstance(value, int):
            return cls(value=value)
        text = value.strip()
        if not QUANTITY_PATTERN.match(text):
            raise ValueError(f"Invalid quantity: {value!r}")
        return cls(value=int(text))

    def format(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Percentage:
    """Commission rate in the half-open interval (0, 100]."""

    value: Decimal

    def __post_init__(self) -> None:
        if self.value <= 0 or self.value > 100:
            raise ValueError("Percentage must be between 0.01 and 100")

    @classmethod
    def parse(cls, value: str | int | Decimal) -> Self:
        if isinstance(value, Decimal | int):
            return cls(value=Decimal(value))
        text = value.strip()
        if not PERCENTAGE_PATTERN.match(text):
            raise ValueError(f"Invalid percentage: {value!r}")
        try:
            return cls(value=Decimal(text.replace(",", ".")))
        except InvalidOperation as exc:
            raise ValueError(f"Invalid percentage: {value!r}") from exc

    def format(self) -> str:
        return f"{self.value:.2f}".replace(".", ",")


@dataclass(frozen=True)
class PostalCode:
    """Brazilian postal code (CEP), stored as 8 digits."""

    digits: str

    def __post_init__(self) -> None:
        if len(self.digits) != 8 or not self.digits.isdigit():
            raise ValueError("Postal code must have 8 digits")

    @classmethod
    def parse(cls, value: str) -> Self:
        return cls(digits=re.sub(r"\D", "", value))

    def format(self) -> str:
        return f"{self.digits[:5]}-{self.digits[5:]}"
