from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from ..database import SessionDep
from ..errors import UnauthorizedError
from ..users import service as user_service
from ..users.schema import UserCreate, UserPublic
from .service import authenticate_user, create_access_token, create_refresh_token, get_user_from_refresh_token

from .schema import AccessToken, TokenPair, TokenRefreshRequest

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: SessionDep):
    return await user_service.create_user(user_data, db)

@router.post("/login", response_model=TokenPair)
async def login(
    db: SessionDep,
    form_data: OAuth2PasswordRequestForm = Depends(),
):
    user = await authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise UnauthorizedError("Invalid credentials")

    return TokenPair(
        access_token=create_access_token(user=user),
        refresh_token=create_refresh_token(user=user),
    )

@router.post("/refresh", response_model=AccessToken)
async def refresh_access_token(
    request: TokenRefreshRequest,
    db: SessionDep
):
    # The new access token picks up the role as currently stored.
    user = await get_user_from_refresh_token(request.refresh_token, db)
    return AccessToken(access_token=create_access_token(user=user))
