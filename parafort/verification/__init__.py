"""Cross-validation of state filing data using two independent LLM providers."""
from .cross_validation import cross_validate, parse_fee
from .verifier import StateDataVerifier

__all__ = ['cross_validate', 'parse_fee', 'StateDataVerifier']
