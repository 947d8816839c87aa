"""
Vaultkeeper decision logging module.
"""

from .logger import DECISION_LOGGER_NAME, DecisionLogger
from .models import DecisionEvent, DecisionOutcome

__all__ = [
    "DecisionLogger",
    "DecisionEvent",
    "DecisionOutcome",
    "DECISION_LOGGER_NAME",
]
