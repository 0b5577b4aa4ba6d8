from .account import Account
from .folder import Folder
from .note import Note

__all__ = [
    "Account",
    "Folder",
    "Note"
]
