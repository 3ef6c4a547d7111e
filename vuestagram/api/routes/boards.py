import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from vuestagram.api.deps import get_current_user
from vuestagram.core.errors import ValidationFailed
from vuestagram.core.feed import fetch_board, fetch_feed_page
from vuestagram.core.storage import delete_image, detect_image_type, is_image, save_image
from vuestagram.db.models import Board, User
from vuestagram.db.session import get_db
from vuestagram.schemas.board import BoardListResponse, BoardResponse

CONTENT_MAX_LENGTH = 200

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/board", tags=["boards"])


@router.get("/{last_id}/list", response_model=BoardListResponse)
async def list_boards(
    last_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """First feed page. The cursor in the path is ignored; the newest boards are returned."""
    boards = await fetch_feed_page(db)
    return {"code": "0", "msg": "Boards loaded", "data": boards}


@router.get("/{last_id}", response_model=BoardListResponse)
async def list_more_boards(
    last_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Next feed page: boards older than last_id."""
    logger.debug(f"Loading boards below id {last_id}")
    boards = await fetch_feed_page(db, cursor=last_id)
    return {"code": "0", "msg": "More boards loaded", "data": boards}


def validate_board_input(content: Optional[str], img: Optional[UploadFile]) -> str:
    """Check the form and return the extension of the uploaded image's real format."""
    errors = {}
    if not content or not content.strip():
        errors["content"] = "required"
    elif len(content) > CONTENT_MAX_LENGTH:
        errors["content"] = f"max {CONTENT_MAX_LENGTH} characters"

    ext = None
    if img is None or not img.filename:
        errors["img"] = "required"
    elif not is_image(img):
        errors["img"] = "must be an image"
    else:
        ext = detect_image_type(img)
        if ext is None:
            errors["img"] = "unsupported image format"

    if errors:
        raise ValidationFailed("Board validation failed", errors=errors)
    return ext


@router.post("", response_model=BoardResponse)
async def store_board(
    content: Optional[str] = Form(None),
    img: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Create a board for the authenticated user from text and one image."""
    ext = validate_board_input(content, img)

    path = save_image(img, ext)
    try:
        board = Board(content=content, img=path, user_id=user.id)
        db.add(board)
        await db.commit()
        await db.refresh(board)
    except Exception:
        await db.rollback()
        delete_image(path)
        raise

    logger.info(f"User {user.id} created board {board.id}")
    return {"code": "0", "msg": "Board created", "data": await fetch_board(db, board.id)}
