from pydantic import AfterValidator, Field, field_validator
from datetime import datetime
from typing import Annotated, Optional, List

from app.models.role import PERMISSIONS, RoleStatus
from app.schemas.pagination import ListEnvelope
from app.schemas.types import ApiModel, OptionalText


def _check_permissions(value: List[str]) -> List[str]:
    unknown = [p for p in value if p not in PERMISSIONS]
    if unknown:
        raise ValueError(f"Unknown permissions: {', '.join(unknown)}")
    # Keep order, drop repeats
    return list(dict.fromkeys(value))


PermissionList = Annotated[List[str], AfterValidator(_check_permissions)]


class RoleBase(ApiModel):
    """Base role schema."""
    nombre: str = Field(..., min_length=1, max_length=100)
    descripcion: OptionalText = None
    permisos: PermissionList = Field(default_factory=list)
    estado: RoleStatus = RoleStatus.activo


class RoleCreate(RoleBase):
    """Schema for creating a role."""
    pass


class RoleUpdate(ApiModel):
    """Schema for updating a role (all fields optional)."""
    nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    descripcion: OptionalText = None
    permisos: Optional[PermissionList] = None
    estado: Optional[RoleStatus] = None

    @field_validator("nombre", "permisos", "estado", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be cleared")
        return v


class RoleResponse(ApiModel):
    """Schema for role response."""
    id: int
    nombre: str
    descripcion: Optional[str] = None
    permisos: List[str] = Field(default_factory=list)
    estado: Optional[RoleStatus] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RoleListResponse(ListEnvelope):
    """Role list response."""
    roles: List[RoleResponse]


class PermissionResponse(ApiModel):
    id: str
    name: str
