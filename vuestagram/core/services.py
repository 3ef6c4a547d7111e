import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vuestagram.core.security import create_access_token, create_refresh_token
from vuestagram.db.models import Board, RefreshToken, User

logger = logging.getLogger(__name__)


async def count_boards(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(Board.id)).where(Board.user_id == user_id)
    )
    return result.scalar_one()


async def build_user_info(db: AsyncSession, user: User) -> dict:
    """User profile as sent to the client, with an authoritative boards_count."""
    return {
        "id": user.id,
        "account": user.account,
        "name": user.name,
        "boards_count": await count_boards(db, user.id),
        "created_at": user.created_at,
    }


async def issue_token_pair(db: AsyncSession, user: User) -> tuple[str, str]:
    """Mint an access/refresh pair and remember the refresh token."""
    access_token = create_access_token(user.id)
    refresh_token = create_refresh_token(user.id)
    db.add(RefreshToken(user_id=user.id, token=refresh_token))
    await db.commit()
    logger.info(f"Issued token pair for user {user.id}")
    return access_token, refresh_token


async def revoke_refresh_tokens(db: AsyncSession, user_id: int) -> None:
    await db.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
    await db.commit()
    logger.info(f"Revoked refresh tokens for user {user_id}")
