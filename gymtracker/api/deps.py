"""Request dependencies: credential verification."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from gymtracker.core.errors import Forbidden, Unauthorized
from gymtracker.core.security import decode_access_token
from gymtracker.schemas.user import CurrentUser

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    """Identity from ``Authorization: Bearer <token>``.

    Missing credential -> 401. A credential that fails verification (bad
    signature, expired, malformed) -> 403, which is what existing clients expect.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Authentication required")
    try:
        return decode_access_token(credentials.credentials)
    except Unauthorized as exc:
        raise Forbidden(exc.message) from exc


def require_same_user(user_id: int, current_user: CurrentUser) -> None:
    if current_user.id != user_id:
        raise Forbidden("You do not have access to this data")
