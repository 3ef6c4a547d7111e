from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from vuestagram.core.errors import AuthenticationFailed
from vuestagram.core.security import ACCESS, decode_token
from vuestagram.db.models import User
from vuestagram.db.session import get_db

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer access token to its user or fail with E10."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationFailed()

    user_id = decode_token(credentials.credentials, ACCESS)
    user = await db.get(User, user_id)
    if not user:
        raise AuthenticationFailed("Unknown user")
    return user
