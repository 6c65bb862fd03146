"""User API endpoints. All routes require a live session."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from sessionstore.api.deps import get_user_store, require_session
from sessionstore.domain import NotFoundError, User
from sessionstore.schemas.user import UserCreate, UserResponse
from sessionstore.stores.base import UserStore

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_session)],
)


def _user_not_found(e: NotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    store: UserStore = Depends(get_user_store),
) -> User:
    return await store.create(User(first=data.first, last=data.last, email=data.email))


@router.get("/", response_model=UserResponse)
async def get_user_by_email(
    email: str = Query(..., min_length=3),
    store: UserStore = Depends(get_user_store),
) -> User:
    """Look up a user by email address."""
    try:
        return await store.get_by_email(email)
    except NotFoundError as e:
        raise _user_not_found(e) from e


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    store: UserStore = Depends(get_user_store),
) -> User:
    try:
        return await store.get_by_id(user_id)
    except NotFoundError as e:
        raise _user_not_found(e) from e


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    store: UserStore = Depends(get_user_store),
) -> Response:
    """Delete a user. Deleting an unknown user is not an error."""
    await store.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
