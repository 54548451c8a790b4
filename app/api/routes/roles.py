from fastapi import APIRouter, status
from typing import List

from app.api.deps import DbSession
from app.exceptions import NotFoundError
from app.models.role import PERMISSIONS, Role
from app.schemas.pagination import unpaginated
from app.schemas.role import (
    RoleCreate,
    RoleUpdate,
    RoleResponse,
    RoleListResponse,
    PermissionResponse,
)
from app.services.entity_store import EntityStore

router = APIRouter()


def _store(db) -> EntityStore[Role]:
    return EntityStore(db, Role, "Role")


@router.get("", response_model=RoleListResponse)
async def list_roles(db: DbSession):
    """List all back-office roles."""
    roles = await _store(db).list(order_by=(Role.nombre,))
    return RoleListResponse(
        roles=[RoleResponse.model_validate(r) for r in roles],
        **unpaginated(len(roles)),
    )


@router.get("/permissions", response_model=List[PermissionResponse])
async def list_permissions():
    """Permission catalogue a role can be granted."""
    return [PermissionResponse(id=key, name=label) for key, label in PERMISSIONS.items()]


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(role_id: int, db: DbSession):
    """Get a single role by ID."""
    return await _store(db).get_or_404(role_id)


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(role_data: RoleCreate, db: DbSession):
    """Create a new role. Names are unique."""
    return await _store(db).create(role_data.model_dump())


@router.put("/{role_id}", response_model=RoleResponse)
async def update_role(role_id: int, role_data: RoleUpdate, db: DbSession):
    """Update a role."""
    role = await _store(db).update(role_id, role_data.model_dump(exclude_unset=True))
    if role is None:
        raise NotFoundError("Role", role_id)
    return role


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(role_id: int, db: DbSession):
    """Delete a role."""
    if not await _store(db).delete(role_id):
        raise NotFoundError("Role", role_id)
