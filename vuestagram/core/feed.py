"""Board feed queries.

The feed is paged backward by id: the client remembers the id of the oldest
board it already has (the cursor) and asks for the next boards below it.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vuestagram.db.models import Board, User

FEED_PAGE_SIZE = 20


def _board_with_author():
    return select(Board, User.name).join(User, User.id == Board.user_id)


def serialize_board(board: Board, name: str) -> dict:
    return {
        "id": board.id,
        "content": board.content,
        "img": board.img,
        "user_id": board.user_id,
        "created_at": board.created_at,
        "updated_at": board.updated_at,
        "name": name,
    }


async def fetch_feed_page(db: AsyncSession, cursor: Optional[int] = None) -> list[dict]:
    """Return up to FEED_PAGE_SIZE boards, newest first.

    With a cursor only boards whose id is strictly below it are returned.
    An empty list means there is nothing older left.
    """
    stmt = _board_with_author()
    if cursor is not None:
        stmt = stmt.where(Board.id < cursor)
    stmt = stmt.order_by(Board.id.desc()).limit(FEED_PAGE_SIZE)

    result = await db.execute(stmt)
    return [serialize_board(board, name) for board, name in result.all()]


async def fetch_board(db: AsyncSession, board_id: int) -> Optional[dict]:
    result = await db.execute(_board_with_author().where(Board.id == board_id))
    row = result.first()
    if row is None:
        return None
    board, name = row
    return serialize_board(board, name)
