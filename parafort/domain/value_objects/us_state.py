"""
US state names and postal codes.
"""

from typing import Optional

from ..exceptions import ValidationError

STATE_CODES = {
    "Alabama": "AL", "Alaska": "AK", "Arizona": "AZ", "Arkansas": "AR",
    "California": "CA", "Colorado": "CO", "Connecticut": "CT", "Delaware": "DE",
    "Florida": "FL", "Georgia": "GA", "Hawaii": "HI", "Idaho": "ID",
    "Illinois": "IL", "Indiana": "IN", "Iowa": "IA", "Kansas": "KS",
    "Kentucky": "KY", "Louisiana": "LA", "Maine": "ME", "Maryland": "MD",
    "Massachusetts": "MA", "Michigan": "MI", "Minnesota": "MN", "Mississippi": "MS",
    "Missouri": "MO", "Montana": "MT", "Nebraska": "NE", "Nevada": "NV",
    "New Hampshire": "NH", "New Jersey": "NJ", "New Mexico": "NM", "New York": "NY",
    "North Carolina": "NC", "North Dakota": "ND", "Ohio": "OH", "Oklahoma": "OK",
    "Oregon": "OR", "Pennsylvania": "PA", "Rhode Island": "RI", "South Carolina": "SC",
    "South Dakota": "SD", "Tennessee": "TN", "Texas": "TX", "Utah": "UT",
    "Vermont": "VT", "Virginia": "VA", "Washington": "WA", "West Virginia": "WV",
    "Wisconsin": "WI", "Wyoming": "WY",
}

_NAMES_BY_CODE = {code: name for name, code in STATE_CODES.items()}
_CODES_BY_LOWER_NAME = {name.lower(): code for name, code in STATE_CODES.items()}


def normalize_state(value: Optional[str]) -> str:
    """Accepts a 2-letter code or a full state name, returns the upper-case code."""
    if not value or not str(value).strip():
        raise ValidationError("State is required", "state")

    cleaned = str(value).strip()
    if cleaned.upper() in _NAMES_BY_CODE:
        return cleaned.upper()

    code = _CODES_BY_LOWER_NAME.get(cleaned.lower())
    if not code:
        raise ValidationError(f"Unknown state: {value}", "state")
    return code


def state_name(code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    return _NAMES_BY_CODE.get(code.upper())
