"""
Tests for vaultkeeper.rbac module.
"""

from datetime import datetime
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import httpx
import pytest
from postgrest.exceptions import APIError

from vaultkeeper.exceptions import StorageError
from vaultkeeper.rbac.models import Role, Subject, parse_roles


class TestRoleModels:
    """Tests for role models and helpers."""

    def test_parse_roles_drops_unknown_labels(self):
        assert parse_roles(["admin", "superuser", None, "viewer"]) == frozenset(
            {Role.ADMIN, Role.VIEWER}
        )

    def test_parse_roles_is_a_set(self):
        assert parse_roles(["viewer", "viewer"]) == frozenset({Role.VIEWER})

    def test_subject_role_checks(self):
        subject = Subject(user_id=uuid4(), roles=frozenset({Role.VIEWER}))

        assert subject.has_role(Role.VIEWER)
        assert not subject.has_role(Role.ADMIN)
        assert subject.has_any_role(Role.ADMIN, Role.VIEWER)
        assert not subject.is_admin

    def test_subject_without_roles(self):
        subject = Subject(user_id=uuid4())
        assert subject.roles == frozenset()
        assert not subject.has_any_role(*Role)


class TestRoleRegistry:
    """Tests for RoleRegistry class."""

    @pytest.mark.asyncio
    async def test_get_roles(self, vaultkeeper, setup_table_mock):
        user_id = uuid4()
        query_builder = setup_table_mock(
            vaultkeeper, "user_roles", [{"role": "vault_user"}, {"role": "viewer"}]
        )

        roles = await vaultkeeper.roles.get_roles(user_id)

        assert roles == frozenset({Role.VAULT_USER, Role.VIEWER})
        query_builder.eq.assert_called_with("user_id", str(user_id))

    @pytest.mark.asyncio
    async def test_get_roles_none(self, vaultkeeper, setup_table_mock):
        setup_table_mock(vaultkeeper, "user_roles", [])

        assert await vaultkeeper.roles.get_roles(uuid4()) == frozenset()

    @pytest.mark.asyncio
    async def test_get_roles_storage_failure(self, vaultkeeper):
        query_builder = vaultkeeper.client.table("user_roles")
        query_builder.execute = AsyncMock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(StorageError):
            await vaultkeeper.roles.get_roles(uuid4())

    @pytest.mark.asyncio
    async def test_list_assignments_skips_unknown(self, vaultkeeper, setup_table_mock):
        user_id = uuid4()
        setup_table_mock(
            vaultkeeper,
            "user_roles",
            [
                {"id": str(uuid4()), "user_id": str(user_id), "role": "admin",
                 "created_at": datetime.utcnow().isoformat()},
                {"id": str(uuid4()), "user_id": str(user_id), "role": "owner",
                 "created_at": datetime.utcnow().isoformat()},
            ],
        )

        rows = await vaultkeeper.roles.list_assignments(user_id)

        assert [r.role for r in rows] == [Role.ADMIN]

    @pytest.mark.asyncio
    async def test_assign_role(self, vaultkeeper, setup_table_mock):
        user_id = uuid4()
        query_builder = setup_table_mock(
            vaultkeeper, "user_roles", [{"user_id": str(user_id), "role": "viewer"}]
        )

        change = await vaultkeeper.roles.assign(user_id, Role.VIEWER)

        assert change.changed is True
        query_builder.insert.assert_called_with({"user_id": str(user_id), "role": "viewer"})

    @pytest.mark.asyncio
    async def test_assign_duplicate_role(self, vaultkeeper):
        query_builder = vaultkeeper.client.table("user_roles")
        query_builder.execute = AsyncMock(
            side_effect=APIError({
                "code": "23505",
                "message": 'duplicate key value violates unique constraint "user_roles_user_id_role_key"',
                "details": None,
                "hint": None,
            })
        )

        change = await vaultkeeper.roles.assign(uuid4(), Role.ADMIN)

        assert change.changed is False

    @pytest.mark.asyncio
    async def test_assign_other_api_error(self, vaultkeeper):
        query_builder = vaultkeeper.client.table("user_roles")
        query_builder.execute = AsyncMock(
            side_effect=APIError({"code": "23503", "message": "foreign key violation"})
        )

        with pytest.raises(StorageError):
            await vaultkeeper.roles.assign(uuid4(), Role.ADMIN)

    @pytest.mark.asyncio
    async def test_remove_role(self, vaultkeeper, setup_table_mock):
        user_id = uuid4()
        query_builder = setup_table_mock(
            vaultkeeper, "user_roles", [{"user_id": str(user_id), "role": "viewer"}]
        )

        change = await vaultkeeper.roles.remove(user_id, Role.VIEWER)

        assert change.changed is True
        query_builder.delete.assert_called_once()
        query_builder.eq.assert_any_call("user_id", str(user_id))
        query_builder.eq.assert_any_call("role", "viewer")

    @pytest.mark.asyncio
    async def test_remove_role_not_held(self, vaultkeeper, setup_table_mock):
        setup_table_mock(vaultkeeper, "user_roles", [])

        change = await vaultkeeper.roles.remove(uuid4(), Role.VIEWER)

        assert change.changed is False

    @pytest.mark.asyncio
    async def test_list_users(self, vaultkeeper, setup_table_mock, sample_profile_data):
        other_id = str(uuid4())
        setup_table_mock(
            vaultkeeper,
            "profiles",
            [sample_profile_data, {**sample_profile_data, "id": other_id, "display_name": None}],
        )
        setup_table_mock(
            vaultkeeper,
            "user_roles",
            [
                {"user_id": sample_profile_data["id"], "role": "viewer"},
                {"user_id": sample_profile_data["id"], "role": "admin"},
            ],
        )

        users = await vaultkeeper.roles.list_users()

        assert len(users) == 2
        assert users[0].display_name == "Test User"
        assert users[0].roles == [Role.ADMIN, Role.VIEWER]
        assert users[1].roles == []

    @pytest.mark.asyncio
    async def test_list_users_empty(self, vaultkeeper):
        result = Mock(data=[])
        vaultkeeper.client.table("profiles").execute = AsyncMock(return_value=result)

        assert await vaultkeeper.roles.list_users() == []
