from fastapi import APIRouter, status

from app.api.deps import DbSession
from app.exceptions import NotFoundError
from app.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryListResponse,
)
from app.schemas.pagination import unpaginated
from app.services.company_store import CategoryStore

router = APIRouter()


@router.get("", response_model=CategoryListResponse)
async def list_categories(db: DbSession):
    """List all categories, alphabetically."""
    categories = await CategoryStore(db).list()
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(c) for c in categories],
        **unpaginated(len(categories)),
    )


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, db: DbSession):
    """Get a single category by ID."""
    return await CategoryStore(db).get_or_404(category_id)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(category_data: CategoryCreate, db: DbSession):
    """Create a new category. Names are unique."""
    return await CategoryStore(db).create(category_data.model_dump())


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(category_id: int, category_data: CategoryUpdate, db: DbSession):
    """Update a category."""
    category = await CategoryStore(db).update(category_id, category_data.model_dump(exclude_unset=True))
    if category is None:
        raise NotFoundError("Category", category_id)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, db: DbSession):
    """Delete a category and remove it from every company that lists it.

    Refused with 409 while it is the only category of any company.
    """
    if not await CategoryStore(db).delete(category_id):
        raise NotFoundError("Category", category_id)
