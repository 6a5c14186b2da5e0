"""Parser for provider "Special Rate Description" strings.

The provider encodes the rate type and the property in one free-text field.
Two forms are recognised, tried in order:

    starred:  "*" RATE_TYPE " - " PROPERTY [whitespace]
              e.g. "* STANDARD RATE CAMPING - Klipspringer Camps"
    split:    LEFT " - " RIGHT
              e.g. "Family Chalet - Etosha Village"

Anything else yields no match.
"""

import string
from typing import Optional

from pydantic import BaseModel

SEPARATOR = " - "
MARKER = "*"


class ParsedRateDescription(BaseModel):
    """Accommodation type and property name recovered from a description."""

    accommodation_type: str
    unit_name: str

    @property
    def full_name(self) -> str:
        return f"{self.unit_name}{SEPARATOR}{self.accommodation_type}"


def parse_starred(description: str) -> Optional[ParsedRateDescription]:
    """Apply the starred rule.

    The rate type is usually upper-case in the source and is normalised to
    capitalised words ("STANDARD RATE CAMPING" -> "Standard Rate Camping").
    """
    text = description.strip()
    if not text.startswith(MARKER):
        return None

    rate_type, separator, unit_name = text[len(MARKER):].partition(SEPARATOR)
    rate_type = rate_type.strip()
    unit_name = unit_name.strip()
    if not separator or not rate_type or not unit_name:
        return None

    return ParsedRateDescription(
        accommodation_type=string.capwords(rate_type.lower()),
        unit_name=unit_name,
    )


def parse_split(description: str) -> Optional[ParsedRateDescription]:
    """Apply the split rule: first separator wins, casing is kept."""
    left, separator, right = description.partition(SEPARATOR)
    if not separator:
        return None

    accommodation_type = left.replace(MARKER, "").strip()
    unit_name = right.strip()
    if not accommodation_type or not unit_name:
        return None

    return ParsedRateDescription(
        accommodation_type=accommodation_type,
        unit_name=unit_name,
    )


def parse_rate_description(description: str) -> Optional[ParsedRateDescription]:
    """Parse a description with the starred rule, falling back to the split rule."""
    return parse_starred(description) or parse_split(description)
