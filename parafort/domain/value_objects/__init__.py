# Value Objects - Immutable domain primitives
from .email import Email
from .risk_level import RiskLevel
from .time_range import TimeRange
from .us_state import normalize_state, state_name, STATE_CODES

__all__ = ['Email', 'RiskLevel', 'TimeRange', 'normalize_state', 'state_name', 'STATE_CODES']
