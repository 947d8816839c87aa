"""
Decision event models.

One event per authorization verdict. Events describe who asked for what
and the outcome; they never carry secret keys or values.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..authz.models import DenyReason, Operation


class DecisionOutcome(str, Enum):
    """Outcome recorded for a decision."""

    ALLOW = "allow"
    DENY = "deny"


class DecisionEvent(BaseModel):
    """
    A structured record of one authorization decision.

    Example:
        ```python
        {
            "operation": "write_secret",
            "outcome": "deny",
            "reason": "vault_closed",
            "user_id": "…",
            "roles": ["vault_user"],
            "vault_id": "…",
        }
        ```
    """

    operation: Operation
    outcome: DecisionOutcome
    reason: Optional[DenyReason] = None
    user_id: Optional[UUID] = None
    roles: List[str] = Field(default_factory=list)
    vault_id: Optional[UUID] = None
    target_user_id: Optional[UUID] = None
    # Set when the verdict was revised at commit time (e.g. the vault closed mid-write)
    stage: str = "decision"
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_log_dict(self) -> Dict[str, Any]:
        """JSON-friendly dict for ``LogRecord.extra``."""
        return self.model_dump(mode="json", exclude_none=True)
