"""
Persisted Token Stores

Where the client keeps its authentication token between sessions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Union

from ..config import settings

logger = logging.getLogger("wwah.tokens")


class TokenStore(Protocol):
    def get(self) -> Optional[str]:
        ...

    def delete(self) -> None:
        ...


class FileTokenStore:
    """
    Token kept in a single file. A missing, blank or unreadable file means
    no token.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path or settings.token_path)

    def get(self) -> Optional[str]:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError):
            logger.exception("Unreadable token file at %s", self.path)
            return None
        return token or None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")

    def delete(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            logger.debug("No token file to delete at %s", self.path)


class MemoryTokenStore:

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def delete(self) -> None:
        self._token = None
