"""FastAPI dependencies: get_current_principal / require_admin.

Usage in any protected router:
    from src.tcg_gateway.auth.dependencies import Principal, get_current_principal

    @router.get("/protected")
    async def protected(user: Principal = Depends(get_current_principal)):
        ...
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.tcg_common.enums import AccountClass
from src.tcg_common.errors import ForbiddenError, InvalidCredentialsError
from src.tcg_gateway.auth.jwt_handler import decode_token

# The identity provider owns the login flow; tokenUrl only feeds Swagger UI.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, as asserted by the identity provider."""

    user_id: str
    is_admin: bool = False
    account_class: AccountClass = AccountClass.INDIVIDUAL


async def get_current_principal(token: str = Depends(oauth2_scheme)) -> Principal:
    """Validate the Bearer token and return the caller. HTTP 401 on failure."""
    try:
        payload = decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    user_id = payload.get("sub")
    if not user_id:
        raise _CREDENTIALS_EXCEPTION

    try:
        account_class = AccountClass(payload.get("account_class", "individual"))
    except ValueError:
        account_class = AccountClass.INDIVIDUAL

    return Principal(
        user_id=str(user_id),
        is_admin=payload.get("role") == "admin",
        account_class=account_class,
    )


async def require_admin(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """Verify the caller carries the admin role (AppError 1002 otherwise)."""
    if not principal.is_admin:
        raise ForbiddenError()
    return principal
