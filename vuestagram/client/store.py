"""Client-side state store for the board app.

Holds the auth flag, the cached user profile and the in-memory board feed,
talks to the API with httpx and keeps tokens in durable storage. Failures are
terminal for the triggering action: they are reported through ``alert`` with
the server's error code (``FE99`` when there is none) and nothing is retried.
"""

import json
import logging
from typing import Callable, Optional

import httpx

from vuestagram.client.storage import LocalStorage

FALLBACK_ERROR_CODE = "FE99"

logger = logging.getLogger(__name__)


def error_code(exc: Exception) -> str:
    """Application error code carried by a failed response, or the fallback."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            code = exc.response.json().get("code")
        except (ValueError, AttributeError):
            code = None
        if code:
            return str(code)
    return FALLBACK_ERROR_CODE


def _log_alert(message: str) -> None:
    logger.warning(message)


def _parse_last_id(value: Optional[str]) -> int:
    try:
        return int(value) if value else 0
    except ValueError:
        logger.warning(f"Ignoring unreadable stored lastID {value!r}")
        return 0


class BoardStore:
    def __init__(
        self,
        http: httpx.AsyncClient,
        storage: Optional[LocalStorage] = None,
        alert: Optional[Callable[[str], None]] = None,
    ):
        self.http = http
        self.storage = storage if storage is not None else LocalStorage()
        self.alert = alert or _log_alert

        user_info = self.storage.get_item("userInfo")
        last_id = self.storage.get_item("lastID")

        self.auth_flg = bool(self.storage.get_item("accessToken"))
        self.user_info: dict = json.loads(user_info) if user_info else {}
        self.board_list: list[dict] = []
        self.last_id = _parse_last_id(last_id)
        self.no_more_board_list_flg = False
        self.route: Optional[str] = None
        self._loading_more = False

    def _auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.storage.get_item('accessToken') or ''}"}

    def _set_last_id(self, board_id: int) -> None:
        self.last_id = board_id
        self.storage.set_item("lastID", board_id)

    def _set_user_info(self, user_info: dict) -> None:
        self.user_info = user_info
        self.storage.set_item("userInfo", json.dumps(user_info))

    # ----------
    # Auth
    # ----------

    async def login(self, account: str, password: str) -> bool:
        try:
            response = await self.http.post(
                "/api/login", json={"account": account, "password": password}
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Login request failed: {e}")
            self.alert(f"Login failed: {error_code(e)}")
            return False

        body = response.json()
        self.storage.set_item("accessToken", body["accessToken"])
        self.storage.set_item("refreshToken", body["refreshToken"])
        self._set_user_info(body["data"])

        self.auth_flg = True
        self.route = "/board"
        return True

    async def logout(self) -> None:
        """Tell the server, then forget everything locally whatever it answered."""
        try:
            response = await self.http.post("/api/logout", headers=self._auth_headers())
            response.raise_for_status()
            self.alert("Logged out")
        except httpx.HTTPError as e:
            logger.error(f"Logout request failed: {e}")
            self.alert("Logout failed on the server; signed out locally")
        finally:
            self.storage.clear()
            self.auth_flg = False
            self.user_info = {}
            self.board_list = []
            self.last_id = 0
            self.no_more_board_list_flg = False
            self.route = "/login"

    async def fetch_user_info(self) -> bool:
        try:
            response = await self.http.get("/api/user", headers=self._auth_headers())
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"User info request failed: {e}")
            self.alert(f"Could not load user info ({error_code(e)})")
            return False

        self._set_user_info(response.json()["data"])
        return True

    # ------------
    # Boards
    # ------------

    async def get_board_list(self) -> bool:
        """Load the newest page, replacing the cached feed."""
        try:
            response = await self.http.get(
                f"/api/board/{self.last_id}/list", headers=self._auth_headers()
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Board list request failed: {e}")
            self.alert(f"Could not load boards ({error_code(e)})")
            return False

        data = response.json()["data"]
        self.board_list = data
        if data:
            self.no_more_board_list_flg = False
            self._set_last_id(data[-1]["id"])
        else:
            self.no_more_board_list_flg = True
        return True

    async def get_add_board_list(self) -> bool:
        """Append the page below the cursor. No-op once the feed is exhausted."""
        if self.no_more_board_list_flg or self._loading_more:
            return False

        self._loading_more = True
        try:
            response = await self.http.get(
                f"/api/board/{self.last_id}", headers=self._auth_headers()
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"More boards request failed: {e}")
            self.alert(f"Could not load boards ({error_code(e)})")
            return False
        finally:
            self._loading_more = False

        data = response.json()["data"]
        if data:
            self.board_list = self.board_list + data
            self._set_last_id(data[-1]["id"])
        else:
            self.no_more_board_list_flg = True
            self.last_id = 0
            self.storage.remove_item("lastID")
        logger.debug(f"Loaded {len(data)} more boards")
        return True

    async def store_board(
        self,
        content: str,
        img: bytes,
        filename: str,
        content_type: str = "image/png",
    ) -> bool:
        try:
            response = await self.http.post(
                "/api/board",
                data={"content": content},
                files={"img": (filename, img, content_type)},
                headers=self._auth_headers(),
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Board create request failed: {e}")
            self.alert(f"Could not create board ({error_code(e)})")
            return False

        if len(self.board_list) > 1:
            self.board_list.insert(0, response.json()["data"])
        # re-read the profile so boards_count comes from the server
        await self.fetch_user_info()
        self.route = "/board"
        return True
