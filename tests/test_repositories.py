"""
Repository and service tests against an in-memory SQLite database.
"""
from datetime import datetime

import pytest
from sqlalchemy import update

from samudra.core.errors import ServerError, ValidationError
from samudra.features.permissions.repository import PermissionRepository
from samudra.features.permissions.schemas import PermissionCreate, PermissionFilter
from samudra.features.permissions.service import PermissionService
from samudra.features.roles.models import Role
from samudra.features.roles.repository import RoleRepository
from samudra.features.roles.schemas import RoleCreate, RoleUpdate
from samudra.features.roles.service import RoleService

STALE = datetime(2000, 1, 1)


def permission_values(module: str, action: str, **extra) -> dict:
    values = {
        "name": f"{action} {module}",
        "code": f"{module}_{action}",
        "module": module,
        "action": action,
    }
    values.update(extra)
    return values


@pytest.fixture
def repos(db_session):
    return PermissionRepository(db_session), RoleRepository(db_session)


class TestPermissionRepository:

    @pytest.mark.asyncio
    async def test_create_sets_defaults_and_timestamps(self, repos):
        permissions, _ = repos

        permission = await permissions.create(permission_values("USER", "READ", created_by="u1"))

        assert len(permission.id) == 26
        assert permission.is_active is True
        assert permission.is_system is False
        assert permission.created_by == "u1"
        assert permission.created_at is not None
        assert permission.updated_at is not None

    @pytest.mark.asyncio
    async def test_duplicate_code_rejected_by_unique_index(self, repos):
        permissions, _ = repos
        await permissions.create(permission_values("USER", "READ"))

        with pytest.raises(ValidationError):
            await permissions.create(permission_values("USER", "READ", name="SOMETHING ELSE"))

    @pytest.mark.asyncio
    async def test_find_all_with_filter(self, repos):
        permissions, _ = repos
        await permissions.create(permission_values("USER", "READ"))
        await permissions.create(permission_values("BRANCH", "READ", is_active=False))
        await permissions.create(permission_values("BRANCH", "CREATE"))

        everything = await permissions.find_all()
        active_reads = await permissions.find_all(PermissionFilter(is_active=True, action="READ"))

        assert [p.code for p in everything] == ["BRANCH_CREATE", "BRANCH_READ", "USER_READ"]
        assert [p.code for p in active_reads] == ["USER_READ"]

    @pytest.mark.asyncio
    async def test_find_by_ids_keeps_requested_order(self, repos):
        permissions, _ = repos
        first = await permissions.create(permission_values("USER", "READ"))
        second = await permissions.create(permission_values("USER", "UPDATE"))

        found = await permissions.find_by_ids([second.id, "unknown", first.id])

        assert [p.id for p in found] == [second.id, first.id]


class TestRoleRepository:

    @pytest.mark.asyncio
    async def test_create_keeps_permission_order(self, repos):
        permissions, roles = repos
        read = await permissions.create(permission_values("USER", "READ"))
        update = await permissions.create(permission_values("USER", "UPDATE"))

        role = await roles.create({"name": "OPS", "description": "Operations"}, [update, read])

        assert [p.id for p in role.permissions] == [update.id, read.id]
        assert [p.id for p in await roles.get_permissions(role.id)] == [update.id, read.id]

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected_by_unique_index(self, repos):
        _, roles = repos
        await roles.create({"name": "OPS"}, [])

        with pytest.raises(ValidationError):
            await roles.create({"name": "OPS"}, [])

    @pytest.mark.asyncio
    async def test_add_and_remove_permission(self, repos):
        permissions, roles = repos
        read = await permissions.create(permission_values("USER", "READ"))
        update = await permissions.create(permission_values("USER", "UPDATE"))
        role = await roles.create({"name": "OPS"}, [read])

        await roles.add_permission(role, update.id)
        assert [p.id for p in await roles.get_permissions(role.id)] == [read.id, update.id]

        await roles.remove_permission(role, read.id)
        assert [p.id for p in await roles.get_permissions(role.id)] == [update.id]

    @pytest.mark.asyncio
    async def test_adding_held_permission_hits_primary_key(self, repos):
        permissions, roles = repos
        read = await permissions.create(permission_values("USER", "READ"))
        role = await roles.create({"name": "OPS"}, [read])

        with pytest.raises(ServerError):
            await roles.add_permission(role, read.id)

    @pytest.mark.asyncio
    async def test_roles_with_permission(self, repos):
        permissions, roles = repos
        read = await permissions.create(permission_values("USER", "READ"))
        await roles.create({"name": "VIEWER"}, [read])
        await roles.create({"name": "ADMIN"}, [read])
        await roles.create({"name": "EMPTY"}, [])

        found = await roles.get_roles_with_permission(read.id)

        assert [r.name for r in found] == ["ADMIN", "VIEWER"]

    @pytest.mark.asyncio
    async def test_delete_removes_assignments(self, repos):
        permissions, roles = repos
        read = await permissions.create(permission_values("USER", "READ"))
        role = await roles.create({"name": "OPS"}, [read])

        await roles.delete(role)

        assert await roles.find_by_id(role.id) is None
        assert await roles.get_roles_with_permission(read.id) == []


class TestServicesWithDatabase:

    @pytest.mark.asyncio
    async def test_permission_and_role_lifecycle(self, repos):
        permissions, roles = repos
        permission_service = PermissionService(permissions, roles)
        role_service = RoleService(roles, permissions)

        permission = await permission_service.create_permission(
            PermissionCreate(name="Read User", module="user", action="read"), "u1"
        )
        assert permission.code == "USER_READ"
        assert (await permission_service.get_permission_by_code("user_read")).id == permission.id

        role = await role_service.create_role(
            RoleCreate(name="Auditor", description="Reads users", permissions=[permission.id]), "u1"
        )
        assert role.name == "AUDITOR"
        assert [p.code for p in role.permissions] == ["USER_READ"]

        with pytest.raises(ValidationError, match="AUDITOR"):
            await permission_service.delete_permission(permission.id)

        role = await role_service.remove_permission_from_role(role.id, permission.id, "u2")
        assert role.permissions == []
        assert role.updated_by == "u2"

        assert await permission_service.delete_permission(permission.id) is True
        assert await permission_service.permission_code_exists("USER_READ") is False

    @pytest.mark.asyncio
    async def test_update_role_replaces_permissions(self, repos):
        permissions, roles = repos
        role_service = RoleService(roles, permissions)
        read = await permissions.create(permission_values("USER", "READ"))
        update = await permissions.create(permission_values("USER", "UPDATE"))
        role = await roles.create({"name": "OPS", "description": "old"}, [read])

        updated = await role_service.update_role(
            role.id, RoleUpdate(description="new", permissions=[update.id, read.id]), "u2"
        )

        assert updated.description == "new"
        assert [p.id for p in updated.permissions] == [update.id, read.id]

    @pytest.mark.asyncio
    async def test_permission_changes_move_updated_at(self, db_session, repos):
        permissions, roles = repos
        role_service = RoleService(roles, permissions)
        read = await permissions.create(permission_values("USER", "READ"))
        role = await roles.create({"name": "OPS", "created_by": "u1", "updated_by": "u1"}, [])

        async def backdate():
            await db_session.execute(update(Role).where(Role.id == role.id).values(updated_at=STALE))

        await backdate()
        role = await role_service.add_permission_to_role(role.id, read.id, "u1")
        assert role.updated_at.replace(tzinfo=None) > STALE

        await backdate()
        role = await role_service.remove_permission_from_role(role.id, read.id, "u1")
        assert role.updated_at.replace(tzinfo=None) > STALE

        await backdate()
        role = await role_service.update_role(role.id, RoleUpdate(permissions=[read.id]), "u1")
        assert role.updated_at.replace(tzinfo=None) > STALE
        assert [p.id for p in role.permissions] == [read.id]

    @pytest.mark.asyncio
    async def test_create_role_with_unknown_permission_persists_nothing(self, repos):
        permissions, roles = repos
        role_service = RoleService(roles, permissions)
        read = await permissions.create(permission_values("USER", "READ"))

        with pytest.raises(ValidationError, match="One or more permissions are invalid"):
            await role_service.create_role(
                RoleCreate(name="Admin", description="x", permissions=[read.id, "p2"]), "u1"
            )

        assert await roles.find_by_name("ADMIN") is None
