from pydantic import ConfigDict

from ..models import CustomModel
from ..users.models import UserRole


class SessionClaims(CustomModel):
    """Identity carried by a valid access token."""
    email: str
    role: UserRole


class TokenRefreshRequest(CustomModel):
    refresh_token: str


class TokenPair(CustomModel):
    # OAuth2 clients expect snake_case token fields.
    model_config = ConfigDict(alias_generator=None)

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AccessToken(CustomModel):
    model_config = ConfigDict(alias_generator=None)

    access_token: str
    token_type: str = "bearer"
