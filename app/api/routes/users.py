from fastapi import APIRouter, status

from app.api.deps import DbSession
from app.exceptions import NotFoundError
from app.models.user import User
from app.schemas.pagination import unpaginated
from app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
)
from app.services.company_store import UserStore

router = APIRouter()


@router.get("", response_model=UserListResponse)
async def list_users(db: DbSession):
    """List all users, newest first."""
    users = await UserStore(db).list(order_by=(User.created_at.desc(), User.id.desc()))
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        **unpaginated(len(users)),
    )


@router.get("/firebase/{firebase_uid}", response_model=UserResponse)
async def get_user_by_firebase_uid(firebase_uid: str, db: DbSession):
    """Look a user up by the external auth provider's id."""
    user = await UserStore(db).get_by_firebase_uid(firebase_uid)
    if user is None:
        raise NotFoundError("User", firebase_uid)
    return user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: DbSession):
    """Get a single user by ID."""
    return await UserStore(db).get_or_404(user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, db: DbSession):
    """Create a user. E-mail and external auth id are unique."""
    return await UserStore(db).create(user_data.model_dump())


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, user_data: UserUpdate, db: DbSession):
    """Update a user."""
    user = await UserStore(db).update(user_id, user_data.model_dump(exclude_unset=True))
    if user is None:
        raise NotFoundError("User", user_id)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, db: DbSession):
    """Delete a user. Their companies stay, without an owner."""
    if not await UserStore(db).delete(user_id):
        raise NotFoundError("User", user_id)
