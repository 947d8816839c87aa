"""
Tests for vaultkeeper.audit module.
"""

import logging
from uuid import uuid4

import pytest

from vaultkeeper.audit.logger import DECISION_LOGGER_NAME, DecisionLogger
from vaultkeeper.audit.models import DecisionOutcome
from vaultkeeper.authz import DenyReason, Operation, Verdict
from vaultkeeper.rbac.models import Role, Subject


@pytest.fixture
def subject():
    return Subject(user_id=uuid4(), roles=frozenset({Role.VIEWER, Role.VAULT_USER}))


class TestDecisionLogger:
    """Tests for DecisionLogger class."""

    def test_allow_logged_at_info(self, subject, caplog):
        decisions = DecisionLogger()

        with caplog.at_level(logging.INFO, logger=DECISION_LOGGER_NAME):
            event = decisions.record(Verdict.allow(Operation.CREATE_VAULT), subject)

        assert event.outcome is DecisionOutcome.ALLOW
        assert event.roles == ["vault_user", "viewer"]
        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.decision["operation"] == "create_vault"
        assert record.decision["user_id"] == str(subject.user_id)
        assert "reason" not in record.decision

    def test_deny_logged_at_warning(self, subject, caplog):
        decisions = DecisionLogger()
        vault_id = uuid4()

        with caplog.at_level(logging.INFO, logger=DECISION_LOGGER_NAME):
            decisions.record(
                Verdict.deny(Operation.WRITE_SECRET, DenyReason.VAULT_CLOSED),
                subject,
                vault_id=vault_id,
            )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.decision["outcome"] == "deny"
        assert record.decision["reason"] == "vault_closed"
        assert record.decision["vault_id"] == str(vault_id)
        assert "vault_closed" in record.getMessage()

    def test_unauthenticated_subject(self, caplog):
        decisions = DecisionLogger()

        with caplog.at_level(logging.INFO, logger=DECISION_LOGGER_NAME):
            event = decisions.record(
                Verdict.deny(Operation.LIST_VAULTS, DenyReason.NOT_AUTHENTICATED), None
            )

        assert event.user_id is None
        assert event.roles == []

    def test_target_user_and_stage(self, subject):
        target = uuid4()
        event = DecisionLogger().record(
            Verdict.deny(Operation.ASSIGN_ROLE, DenyReason.INSUFFICIENT_ROLE),
            subject,
            target_user_id=target,
            stage="commit",
        )

        assert event.target_user_id == target
        assert event.stage == "commit"

    def test_disable_and_enable(self, subject, caplog):
        decisions = DecisionLogger(enabled=False)
        assert decisions.is_enabled is False

        with caplog.at_level(logging.INFO, logger=DECISION_LOGGER_NAME):
            assert decisions.record(Verdict.allow(Operation.LIST_VAULTS), subject) is None
            decisions.enable()
            assert decisions.record(Verdict.allow(Operation.LIST_VAULTS), subject) is not None
            decisions.disable()
            assert decisions.record(Verdict.allow(Operation.LIST_VAULTS), subject) is None

        assert len([r for r in caplog.records if hasattr(r, "decision")]) == 1

    def test_custom_logger(self, subject):
        logger = logging.getLogger("tests.decisions")
        decisions = DecisionLogger(logger=logger)
        assert decisions.logger is logger

    def test_event_fields_carry_no_secret_data(self):
        from vaultkeeper.audit.models import DecisionEvent

        assert not {"key", "value", "secret", "secret_value"} & set(DecisionEvent.model_fields)

    def test_client_respects_config(self, vaultkeeper_config, mock_vaultkeeper_supabase_client):
        from vaultkeeper.client import Vaultkeeper

        config = vaultkeeper_config.model_copy(update={"enable_decision_log": False})
        vk = Vaultkeeper(config=config, client=mock_vaultkeeper_supabase_client)

        assert vk.decisions.is_enabled is False
