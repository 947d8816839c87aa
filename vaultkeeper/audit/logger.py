"""
Decision logging for Vaultkeeper.

The operations facade reports every verdict here after the engine has
decided. Events go to the standard ``logging`` tree under
``vaultkeeper.decisions``; persistence is left to whatever handlers the
host application installs.
"""

import logging
from typing import Optional
from uuid import UUID

from ..authz.models import Verdict
from ..rbac.models import Subject
from .models import DecisionEvent, DecisionOutcome

DECISION_LOGGER_NAME = "vaultkeeper.decisions"


class DecisionLogger:
    """
    Emits one structured event per authorization decision.

    Allows are logged at INFO, denials at WARNING. The event is attached
    to the record as ``record.decision`` (a dict).

    Example:
        ```python
        vk.decisions.record(verdict, subject, vault_id=vault.id)

        # Silence for bulk jobs
        vk.decisions.disable()
        ```
    """

    def __init__(self, enabled: bool = True, logger: Optional[logging.Logger] = None) -> None:
        """
        Initialize DecisionLogger.

        Args:
            enabled: Whether events are emitted
            logger: Target logger (defaults to ``vaultkeeper.decisions``)
        """
        self._enabled = enabled
        self.logger = logger or logging.getLogger(DECISION_LOGGER_NAME)

    def disable(self) -> None:
        """Stop emitting decision events."""
        self._enabled = False

    def enable(self) -> None:
        """Resume emitting decision events."""
        self._enabled = True

    @property
    def is_enabled(self) -> bool:
        """Check if decision logging is enabled."""
        return self._enabled

    def record(
        self,
        verdict: Verdict,
        subject: Optional[Subject],
        vault_id: Optional[UUID] = None,
        target_user_id: Optional[UUID] = None,
        stage: str = "decision",
    ) -> Optional[DecisionEvent]:
        """
        Record a verdict.

        Args:
            verdict: The engine's verdict
            subject: The caller (None if unauthenticated)
            vault_id: Target vault, for vault-scoped operations
            target_user_id: Target user, for role management
            stage: "decision" for the engine's verdict, "commit" when a
                verdict was revised while applying the operation

        Returns:
            The emitted DecisionEvent, or None when disabled
        """
        if not self._enabled:
            return None

        event = DecisionEvent(
            operation=verdict.operation,
            outcome=DecisionOutcome.ALLOW if verdict.allowed else DecisionOutcome.DENY,
            reason=verdict.reason,
            user_id=subject.user_id if subject else None,
            roles=sorted(role.value for role in subject.roles) if subject else [],
            vault_id=vault_id,
            target_user_id=target_user_id,
            stage=stage,
        )

        level = logging.INFO if verdict.allowed else logging.WARNING
        self.logger.log(
            level,
            "%s %s for user=%s vault=%s%s",
            event.operation.value,
            event.outcome.value,
            event.user_id,
            event.vault_id,
            f" ({event.reason.value})" if event.reason else "",
            extra={"decision": event.to_log_dict()},
        )
        return event
