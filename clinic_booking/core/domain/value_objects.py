"""
Base Value Object Classes for Domain-Driven Design

Value Objects are immutable domain primitives that have no identity.
They are compared by their values, not by reference.
"""

import re
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Self


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for all value objects.

    Value objects are:
    - Immutable (frozen=True)
    - Compared by value (dataclass equality)
    - Have no identity
    """

    def __post_init__(self):
        """Override to add validation logic."""
        self._validate()

    def _validate(self) -> None:
        """Validate the value object. Override in subclasses."""
        pass


@dataclass(frozen=True)
class PhoneNumber(ValueObject):
    """
    Phone number value object.

    Keeps a leading '+' and digits only, so "+54 9 11-1234-5678" and
    "+5491112345678" resolve to the same patient.
    """

    number: str

    _CLEANUP = re.compile(r"[\s\-().]")

    def _validate(self) -> None:
        cleaned = self._CLEANUP.sub("", self.number or "")
        object.__setattr__(self, "number", cleaned)
        digits = cleaned[1:] if cleaned.startswith("+") else cleaned
        if not digits.isdigit() or not (6 <= len(digits) <= 15):
            raise ValueError(f"Invalid phone number: {self.number!r}")

    def __str__(self) -> str:
        return self.number


class StatusEnum(str, Enum):
    """
    Base class for status enums.

    Provides common functionality for all status value objects.
    """

    @classmethod
    def values(cls) -> list[str]:
        """Get all possible values."""
        return [e.value for e in cls]

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create from string value (case-insensitive)."""
        for member in cls:
            if member.value.lower() == value.lower():
                return member
        raise ValueError(f"Invalid {cls.__name__}: {value}")
