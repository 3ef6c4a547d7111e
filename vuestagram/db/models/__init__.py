from vuestagram.db.models.user import User
from vuestagram.db.models.board import Board
from vuestagram.db.models.refresh_token import RefreshToken

__all__ = ["User", "Board", "RefreshToken"]
