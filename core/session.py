# core/session.py

"""
Explicit session handle.

Holds the current principal and its auth status, and is the single
place identity changes are announced. Resolvers and gates receive the
session they work for; nothing reads a global.
"""

from typing import Callable, List, Optional

from pydantic import BaseModel

from core.errors import NotAuthenticated
from core.logging_config import logger
from models.enums import AuthStatus


class Principal(BaseModel):
    id: str
    email: Optional[str] = None


# listener(previous_principal_id, current_principal_id)
IdentityListener = Callable[[Optional[str], Optional[str]], None]


class Session:
    def __init__(self, principal: Optional[Principal] = None):
        self._principal: Optional[Principal] = None
        self._status = AuthStatus.anonymous
        self._listeners: List[IdentityListener] = []
        if principal is not None:
            self.sign_in(principal)

    # ---------------------------------------------------------
    # State
    # ---------------------------------------------------------
    @property
    def principal(self) -> Optional[Principal]:
        return self._principal

    @property
    def principal_id(self) -> Optional[str]:
        return self._principal.id if self._principal else None

    @property
    def status(self) -> AuthStatus:
        return self._status

    def require_principal(self) -> Principal:
        if self._principal is None:
            raise NotAuthenticated()
        return self._principal

    # ---------------------------------------------------------
    # Transitions
    # ---------------------------------------------------------
    def begin_authentication(self):
        if self._principal is None:
            self._status = AuthStatus.authenticating

    def sign_in(self, principal: Principal):
        previous = self.principal_id
        self._principal = principal
        self._status = AuthStatus.authenticated
        if previous != principal.id:
            self._notify(previous, principal.id)

    def sign_out(self):
        previous = self.principal_id
        self._principal = None
        self._status = AuthStatus.anonymous
        if previous is not None:
            self._notify(previous, None)

    # ---------------------------------------------------------
    # Subscription
    # ---------------------------------------------------------
    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register for identity changes. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, previous: Optional[str], current: Optional[str]):
        logger.debug(f"Session identity changed: {previous} -> {current}")
        for listener in list(self._listeners):
            listener(previous, current)

    # ---------------------------------------------------------
    # Supabase auth events
    # ---------------------------------------------------------
    def handle_auth_event(self, event: str, auth_session) -> None:
        """
        Callback shape of supabase `auth.on_auth_state_change`.
        SIGNED_OUT (or an event without a user) clears the principal.
        """
        user = getattr(auth_session, "user", None) if auth_session else None
        if event == "SIGNED_OUT" or user is None:
            self.sign_out()
            return
        self.sign_in(Principal(id=user.id, email=getattr(user, "email", None)))
