from vuestagram.client.storage import LocalStorage
from vuestagram.client.store import BoardStore, FALLBACK_ERROR_CODE

__all__ = ["BoardStore", "LocalStorage", "FALLBACK_ERROR_CODE"]
