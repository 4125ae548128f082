"""
Risk Level Value Object - Compliance risk classification of a business.
"""

from enum import Enum


class RiskLevel(str, Enum):
    """Four-level risk derived from overdue count and completion rate."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def classify(cls, overdue: int, completion_rate: float) -> 'RiskLevel':
        """First matching rule wins, checked from most to least severe."""
        if overdue > 5 or completion_rate < 50:
            return cls.CRITICAL
        elif overdue > 2 or completion_rate < 70:
            return cls.HIGH
        elif overdue > 0 or completion_rate < 85:
            return cls.MEDIUM
        else:
            return cls.LOW
