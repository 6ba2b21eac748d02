"""Session / auth facade over the credential store."""
from collections.abc import Callable
import logging

from notekeeper.schemas.auth import LoginForm, SignUpForm
from notekeeper.services.credentials import CredentialStore

logger = logging.getLogger(__name__)

SessionListener = Callable[[bool], None]


class AuthSession:
    """Login state for the single local user, plus change notifications.

    Listeners receive the new authenticated flag after every successful login
    or sign-up and after every logout. They are called synchronously in
    registration order.
    """

    def __init__(self, credentials: CredentialStore):
        self._credentials = credentials
        self._listeners: list[SessionListener] = []

    async def restore(self) -> str | None:
        """Read the persisted session; called once at startup."""
        username = await self._credentials.get_session()
        if username:
            logger.info(f"Restored session for {username}")
        return username

    async def login(self, username: str, password: str) -> bool:
        """Start a session when the credentials match; otherwise change nothing."""
        if not await self._credentials.verify_credentials(username, password):
            logger.info(f"Login failed for {username}")
            return False

        await self._credentials.set_session(username)
        logger.info(f"User {username} logged in")
        self._notify(True)
        return True

    async def submit_login(self, form: LoginForm) -> bool:
        return await self.login(form.username, form.password)

    async def sign_up(self, form: SignUpForm) -> bool:
        """Register the account and log it in. False when the name is taken."""
        if not await self._credentials.register_user(form.username, form.password):
            return False

        await self._credentials.set_session(form.username)
        self._notify(True)
        return True

    async def logout(self) -> None:
        await self._credentials.set_session(None)
        logger.info("Logged out")
        self._notify(False)

    async def is_logged_in(self) -> bool:
        return await self._credentials.get_session() is not None

    async def current_user(self) -> str | None:
        return await self._credentials.get_session()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: SessionListener) -> None:
        """Remove one registration of ``listener``, if present."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self, authenticated: bool) -> None:
        for listener in list(self._listeners):
            try:
                listener(authenticated)
            except Exception:
                logger.exception(f"Session listener {listener!r} failed")
