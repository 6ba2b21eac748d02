"""Credential store: user registry and the persisted session pointer."""
import asyncio
import logging

from pydantic import ValidationError

from notekeeper.errors import StorageError, attempt
from notekeeper.schemas.user import User, UserList
from notekeeper.services.passwords import get_password_hash, needs_rehash, verify_password
from notekeeper.storage import KeyedLock, KeyValueStore

logger = logging.getLogger(__name__)

USERS_KEY = "users"
CURRENT_USER_KEY = "current_user"


class CredentialStore:
    """Owns the ``users`` registry and the ``current_user`` session pointer.

    The registry is a single JSON array rewritten in full on every change.
    Writers hold the registry lock for the whole read-modify-write.
    """

    def __init__(
        self,
        store: KeyValueStore,
        locks: KeyedLock | None = None,
        bcrypt_rounds: int = 12,
    ):
        self._store = store
        self._locks = locks or KeyedLock()
        self._bcrypt_rounds = bcrypt_rounds

    async def _load_users(self) -> list[User]:
        raw = await self._store.get(USERS_KEY)
        if raw is None:
            return []
        try:
            return UserList.validate_json(raw)
        except ValidationError as exc:
            raise StorageError(f"User registry is unreadable: {exc}", "decode") from exc

    async def _write_users(self, users: list[User]) -> None:
        await self._store.set(USERS_KEY, UserList.dump_json(users, by_alias=True).decode("utf-8"))

    async def list_users(self) -> list[User]:
        """All registered users; empty when none exist or the registry is unreadable."""
        outcome = await attempt("list users", self._load_users())
        return outcome.value if outcome.ok else []

    async def get_user(self, username: str) -> User | None:
        for user in await self.list_users():
            if user.username == username:
                return user
        return None

    async def register_user(self, username: str, password: str) -> bool:
        """Add a user. False when the username is taken or the write fails."""
        async with self._locks.hold(USERS_KEY):
            outcome = await attempt("register user", self._register(username, password))
        return bool(outcome.ok and outcome.value)

    async def _register(self, username: str, password: str) -> bool:
        users = await self._load_users()
        if any(user.username == username for user in users):
            logger.info(f"Registration rejected, username already taken: {username}")
            return False

        password_hash = await asyncio.to_thread(get_password_hash, password, self._bcrypt_rounds)
        users.append(User(username=username, password_hash=password_hash))
        await self._write_users(users)
        logger.info(f"Registered user {username}")
        return True

    async def verify_credentials(self, username: str, password: str) -> bool:
        outcome = await attempt("verify credentials", self._verify(username, password))
        return bool(outcome.ok and outcome.value)

    async def _verify(self, username: str, password: str) -> bool:
        user = next((u for u in await self._load_users() if u.username == username), None)
        if user is None:
            return False

        valid = await asyncio.to_thread(verify_password, password, user.password_hash)
        if valid and needs_rehash(user.password_hash):
            # A failed upgrade keeps the legacy hash; the login still succeeds
            await attempt("upgrade password hash", self._upgrade_hash(username, password))
        return valid

    async def _upgrade_hash(self, username: str, password: str) -> None:
        password_hash = await asyncio.to_thread(get_password_hash, password, self._bcrypt_rounds)
        async with self._locks.hold(USERS_KEY):
            users = await self._load_users()
            for index, user in enumerate(users):
                if user.username == username:
                    users[index] = user.model_copy(update={"password_hash": password_hash})
                    break
            else:
                return
            await self._write_users(users)
        logger.info(f"Upgraded legacy password hash for {username}")

    async def set_session(self, username: str | None) -> None:
        """Persist ``username`` as the logged-in user, or clear it for ``None``."""
        if username:
            call = self._store.set(CURRENT_USER_KEY, username)
        else:
            call = self._store.remove(CURRENT_USER_KEY)
        await attempt("set session", call)

    async def get_session(self) -> str | None:
        outcome = await attempt("get session", self._store.get(CURRENT_USER_KEY))
        return outcome.value if outcome.ok else None
