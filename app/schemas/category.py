from pydantic import AfterValidator, Field, field_validator
from datetime import datetime
from typing import Annotated, Optional, List

from app.models.category import CATEGORY_ICONS, DEFAULT_CATEGORY_ICON
from app.schemas.pagination import ListEnvelope
from app.schemas.types import ApiModel, OptionalText, OptionalUrl


def _check_icon(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in CATEGORY_ICONS:
        raise ValueError(f"Unknown icon '{value}'. Must be one of: {', '.join(CATEGORY_ICONS)}")
    return value


IconName = Annotated[Optional[str], AfterValidator(_check_icon)]


class CategoryBase(ApiModel):
    """Base category schema."""
    nombre_categoria: str = Field(..., min_length=1, max_length=150)
    descripcion: OptionalText = None
    icono: IconName = DEFAULT_CATEGORY_ICON
    icono_url: OptionalUrl = None

    @field_validator("nombre_categoria")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name cannot be blank")
        return v


class CategoryCreate(CategoryBase):
    """Schema for creating a category."""
    pass


class CategoryUpdate(ApiModel):
    """Schema for updating a category (all fields optional)."""
    nombre_categoria: Optional[str] = Field(None, min_length=1, max_length=150)
    descripcion: OptionalText = None
    icono: IconName = None
    icono_url: OptionalUrl = None

    @field_validator("nombre_categoria")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> str:
        if v is None or not v.strip():
            raise ValueError("Category name cannot be blank")
        return v.strip()


class CategoryResponse(ApiModel):
    """Schema for category response."""
    id: int
    nombre_categoria: str
    descripcion: Optional[str] = None
    icono: Optional[str] = None
    icono_url: Optional[str] = None
    icono_efectivo: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryListResponse(ListEnvelope):
    """Category list response."""
    categories: List[CategoryResponse]
