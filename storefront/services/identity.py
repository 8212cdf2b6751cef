# storefront/services/identity.py
import threading
from typing import Any, Callable, Dict, List

from storefront.domain.schemas import User
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

IdentityListener = Callable[[User | None], None]


class IdentityContext:
    """
    Kto jest zalogowany (albo nikt).
    Stan jest zewnetrzny - sign_in/sign_out woła provider logowania,
    reconcilery tylko czytaja i subskrybuja zmiany.
    """

    def __init__(self, user: User | Dict[str, Any] | None = None):
        self._lock = threading.Lock()
        self._user = self._coerce(user)
        self._listeners: List[IdentityListener] = []

    @staticmethod
    def _coerce(user) -> User | None:
        if user is None or isinstance(user, User):
            return user
        return User.model_validate(user)

    @property
    def user(self) -> User | None:
        with self._lock:
            return self._user

    @property
    def email(self) -> str | None:
        user = self.user
        return user.email if user else None

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, user: User | Dict[str, Any]) -> None:
        user = self._coerce(user)
        with self._lock:
            if self._user is not None and self._user.email == user.email:
                return
            self._user = user
        logger.info(f"Signed in as {user.email}")
        self._notify(user)

    def sign_out(self) -> None:
        with self._lock:
            if self._user is None:
                return
            previous = self._user
            self._user = None
        logger.info(f"Signed out {previous.email}")
        self._notify(None)

    def _notify(self, user: User | None) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(user)
