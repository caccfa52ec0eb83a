"""
Seed script to populate the system permissions and roles.

Creates, when missing:
- one system permission per ERP module and CRUD action
- the system roles and their permission assignments

Usage:
    python -m scripts.seed_rbac
"""
import asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.database.engine import get_db, init_db
from samudra.features.permissions.models import Permission
from samudra.features.permissions.repository import PermissionRepository
from samudra.features.permissions.service import PermissionService
from samudra.features.roles.repository import RoleRepository
from samudra.features.users.schemas import SUPER_ADMIN_PERMISSION
from samudra.utils import get_logger


log = get_logger(__name__)

SEED_USER_ID = "system"

MODULES = [
    "EMPLOYEE",
    "BRANCH",
    "DIVISION",
    "POSITION",
    "SHIPMENT",
    "DELIVERY_ORDER",
    "FORWARDER",
    "PERMISSION",
    "ROLE",
]

ACTIONS = ["CREATE", "READ", "UPDATE", "DELETE"]


DEFAULT_ROLES = {
    "SUPER_ADMIN": {
        "description": "Full access to every module",
        "permissions": "ALL",  # Special case - gets all permissions
    },
    "BRANCH_MANAGER": {
        "description": "Manages branch staff and daily shipments",
        "permissions": [
            "EMPLOYEE_READ", "EMPLOYEE_UPDATE",
            "BRANCH_READ", "BRANCH_UPDATE",
            "SHIPMENT_CREATE", "SHIPMENT_READ", "SHIPMENT_UPDATE",
            "DELIVERY_ORDER_CREATE", "DELIVERY_ORDER_READ", "DELIVERY_ORDER_UPDATE",
            "FORWARDER_READ",
        ],
    },
    "VIEWER": {
        "description": "Read-only access",
        "permissions": [f"{module}_READ" for module in MODULES],
    },
}


async def seed_permissions(db: AsyncSession) -> dict[str, Permission]:
    """
    Create the system permissions, plus the ALL superuser permission.
    
    Returns:
        Dictionary mapping permission codes to Permission objects
    """
    log.info("Creating system permissions...")
    repository = PermissionRepository(db)
    permissions_map = {}

    specs = [
        (module, action, PermissionService.generate_permission_code(module, action))
        for module in MODULES
        for action in ACTIONS
    ]
    specs.append(("SYSTEM", "ALL", SUPER_ADMIN_PERMISSION))

    for module, action, code in specs:
        existing = await repository.find_by_code(code)
        if existing:
            log.debug("Permission '%s' already exists, skipping", code)
            permissions_map[code] = existing
            continue

        permissions_map[code] = await repository.create({
            "name": "ALL PERMISSIONS" if code == SUPER_ADMIN_PERMISSION else f"{action} {module.replace('_', ' ')}",
            "code": code,
            "module": module,
            "action": action,
            "description": f"{action.capitalize()} {module.lower().replace('_', ' ')} records",
            "is_system": True,
            "created_by": SEED_USER_ID,
            "updated_by": SEED_USER_ID,
        })
        log.info("Created permission: %s", code)

    log.info("Seeded %d permissions", len(permissions_map))
    return permissions_map


async def seed_roles(db: AsyncSession, permissions_map: dict[str, Permission]):
    """Create the system roles and assign their permissions."""
    log.info("Creating system roles...")
    repository = RoleRepository(db)

    for role_name, role_config in DEFAULT_ROLES.items():
        if await repository.find_by_name(role_name):
            log.debug("Role '%s' already exists, skipping", role_name)
            continue

        if role_config["permissions"] == "ALL":
            permissions = list(permissions_map.values())
        else:
            permissions = []
            for code in role_config["permissions"]:
                if code in permissions_map:
                    permissions.append(permissions_map[code])
                else:
                    log.warning("Permission '%s' not found for role '%s'", code, role_name)

        await repository.create(
            {
                "name": role_name,
                "description": role_config["description"],
                "is_system": True,
                "created_by": SEED_USER_ID,
                "updated_by": SEED_USER_ID,
            },
            permissions,
        )
        log.info("Created role '%s' with %d permissions", role_name, len(permissions))


async def main():
    """Seed permissions and roles."""
    log.info("Starting RBAC seeding...")
    await init_db()

    async for db in get_db():
        try:
            permissions_map = await seed_permissions(db)
            await seed_roles(db, permissions_map)
            await db.commit()
            log.info("RBAC seeding completed successfully")
        except Exception as e:
            log.error("Error seeding RBAC data: %s", e, exc_info=True)
            await db.rollback()
            raise

        break  # Only use first session


if __name__ == "__main__":
    asyncio.run(main())
