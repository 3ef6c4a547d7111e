import logging

from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vuestagram.api.deps import get_current_user
from vuestagram.core.errors import AuthenticationFailed, LoginFailed
from vuestagram.core.security import REFRESH, decode_token, verify_password
from vuestagram.core.services import build_user_info, issue_token_pair, revoke_refresh_tokens
from vuestagram.db.models import RefreshToken, User
from vuestagram.db.session import get_db
from vuestagram.schemas.auth import LoginRequest, MessageResponse, ReissueRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.account == credentials.account))
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.password):
        logger.info(f"Login failed for account '{credentials.account}'")
        raise LoginFailed()

    access_token, refresh_token = await issue_token_pair(db, user)
    return {
        "code": "0",
        "msg": "Login succeeded",
        "accessToken": access_token,
        "refreshToken": refresh_token,
        "data": await build_user_info(db, user),
    }


@router.post("/logout", response_model=MessageResponse)
async def logout(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await revoke_refresh_tokens(db, user.id)
    return {"code": "0", "msg": "Logged out"}


@router.post("/reissue", response_model=TokenResponse)
async def reissue(body: ReissueRequest, db: AsyncSession = Depends(get_db)):
    """Trade a stored refresh token for a new token pair. The old refresh token is consumed."""
    user_id = decode_token(body.refreshToken, REFRESH)

    user = await db.get(User, user_id)
    if not user:
        raise AuthenticationFailed("Unknown user")

    # consume the token in one statement so only one concurrent caller wins
    result = await db.execute(
        delete(RefreshToken).where(
            RefreshToken.token == body.refreshToken,
            RefreshToken.user_id == user_id,
        )
    )
    if result.rowcount != 1:
        await db.rollback()
        raise AuthenticationFailed("Refresh token revoked")

    access_token, refresh_token = await issue_token_pair(db, user)
    return {
        "code": "0",
        "msg": "Tokens reissued",
        "accessToken": access_token,
        "refreshToken": refresh_token,
        "data": await build_user_info(db, user),
    }
