"""Identity endpoint for the signed-in user."""

from fastapi import APIRouter
from sqlalchemy import select

from api.deps import CurrentUser, DbSession
from errors import NotFoundError
from models.user import User
from schemas.base import ApiResponse, ok
from schemas.user import UserResponse

router = APIRouter()


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_me(user: CurrentUser, db: DbSession):
    """Return the account behind the request token.

    A valid token whose user row no longer exists yields 404.
    """
    result = await db.execute(select(User).where(User.id == user.id))
    account = result.scalar_one_or_none()
    if account is None:
        raise NotFoundError("User")
    return ok(UserResponse.model_validate(account))
