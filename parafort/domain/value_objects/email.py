"""
Email Value Object - Immutable email with validation.
"""

import re
from dataclasses import dataclass
from ..exceptions import ValidationError


@dataclass(frozen=True)
class Email:
    """
    Immutable email value object with validation.

    Usage:
        email = Email("Owner@Example.com")
        print(email.value)   # "owner@example.com"
        print(email.domain)  # "example.com"
    """

    value: str

    # RFC 5322 simplified pattern
    EMAIL_PATTERN = re.compile(
        r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    )

    def __post_init__(self):
        if not self.value:
            raise ValidationError("Email is required", "email")

        normalized = self.value.strip().lower()

        if not self.EMAIL_PATTERN.match(normalized):
            raise ValidationError(f"Invalid email: {self.value}", "email")

        # Use object.__setattr__ because dataclass is frozen
        object.__setattr__(self, 'value', normalized)

    @classmethod
    def is_valid(cls, value) -> bool:
        return bool(value) and bool(cls.EMAIL_PATTERN.match(str(value).strip().lower()))

    @property
    def domain(self) -> str:
        return self.value.split('@')[1]

    def __str__(self) -> str:
        return self.value
