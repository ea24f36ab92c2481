"""
User Store

Process-local authentication state for the client.

States
------
- unknown:          loading=True,  user=None (initial)
- anonymous:        loading=False, user=None
- authenticated:    loading=False, user=UserData

``fetch_user`` hydrates the store from the persisted token at startup,
``set_user`` applies the result of an explicit login or registration, and
``logout`` removes the token and resets the state. None of them raise.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .identity import IdentityClient
from .tokens import TokenStore

logger = logging.getLogger("wwah.user_store")

# Used when the identity service has no phone number on file
PLACEHOLDER_PHONE = 121212


class UserData(BaseModel):
    id: str = Field(..., min_length=1)
    first_name: str = ""
    last_name: str = ""
    phone: Union[int, str] = PLACEHOLDER_PHONE
    email: str = ""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_personal_info(cls, info: Dict[str, Any]) -> "UserData":
        return cls(
            id=str(info["_id"]),
            first_name=info.get("firstName") or "",
            last_name=info.get("lastName") or "",
            phone=info.get("phone") or PLACEHOLDER_PHONE,
            email=info.get("email") or "",
        )


class UserState(BaseModel):
    user: Optional[UserData] = None
    is_authenticated: bool = False
    loading: bool = True

    model_config = ConfigDict(frozen=True)


Listener = Callable[[UserState], None]


class UserStore:
    """
    Holds the current ``UserState`` and notifies subscribers on change.
    """

    def __init__(self, token_store: TokenStore, identity: IdentityClient) -> None:
        self._token_store = token_store
        self._identity = identity
        self._state = UserState()
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> UserState:
        return self._state

    @property
    def user(self) -> Optional[UserData]:
        return self._state.user

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    @property
    def loading(self) -> bool:
        return self._state.loading

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with each new state. Returns an
        unsubscribe callable.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes: Any) -> None:
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(self._state)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def set_user(self, user: Optional[UserData]) -> None:
        self._set(user=user, is_authenticated=user is not None, loading=False)

    def logout(self) -> None:
        try:
            self._token_store.delete()
        except Exception:
            logger.exception("Error removing stored token")
        self._set(user=None, is_authenticated=False, loading=False)

    async def fetch_user(self) -> None:
        """
        Hydrate from the persisted token. Failures leave the store anonymous.
        """
        try:
            token = self._token_store.get()
            if not token:
                self._set(loading=False)
                return

            self._set(loading=True)
            logger.info("Fetching user data")

            data = await self._identity.get_user_data(token)
            user = UserData.from_personal_info(data["personalInfo"])

            self._set(user=user, is_authenticated=True, loading=False)
        except Exception:
            logger.exception("Error fetching user")
            self._set(loading=False)
