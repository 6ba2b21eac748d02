import asyncio
import json

import pytest

from notekeeper.services.credentials import CURRENT_USER_KEY, USERS_KEY, CredentialStore
from notekeeper.services.passwords import is_bcrypt_hash, legacy_checksum


@pytest.fixture
def credentials(store, locks):
    return CredentialStore(store, locks, bcrypt_rounds=4)


@pytest.mark.asyncio
async def test_username_can_only_be_registered_once(credentials):
    assert await credentials.register_user("alice", "secret") is True
    assert await credentials.register_user("alice", "other") is False
    assert await credentials.register_user("alice", "secret") is False

    assert [user.username for user in await credentials.list_users()] == ["alice"]


@pytest.mark.asyncio
async def test_usernames_are_case_sensitive(credentials):
    assert await credentials.register_user("alice", "secret") is True
    assert await credentials.register_user("Alice", "secret") is True


@pytest.mark.asyncio
async def test_concurrent_registrations_of_one_name_admit_one(credentials):
    results = await asyncio.gather(*(credentials.register_user("carol", f"pw{i}") for i in range(5)))

    assert results.count(True) == 1
    assert len(await credentials.list_users()) == 1


@pytest.mark.asyncio
async def test_credential_round_trip(credentials):
    await credentials.register_user("bob", "secret")

    assert await credentials.verify_credentials("bob", "secret") is True
    assert await credentials.verify_credentials("bob", "wrong") is False
    assert await credentials.verify_credentials("nobody", "x") is False


@pytest.mark.asyncio
async def test_registry_layout(credentials, store):
    await credentials.register_user("bob", "secret")

    records = json.loads(await store.get(USERS_KEY))

    assert len(records) == 1
    assert set(records[0]) == {"username", "password", "createdAt"}
    assert records[0]["username"] == "bob"
    assert records[0]["password"] != "secret"
    assert is_bcrypt_hash(records[0]["password"])
    assert isinstance(records[0]["createdAt"], int)


@pytest.mark.asyncio
async def test_legacy_hash_is_accepted_and_upgraded(credentials, store):
    legacy = [{"username": "dana", "password": legacy_checksum("hunter2"), "createdAt": 1700000000000}]
    await store.set(USERS_KEY, json.dumps(legacy))

    assert await credentials.verify_credentials("dana", "nope") is False
    assert (await credentials.get_user("dana")).password_hash == legacy_checksum("hunter2")

    assert await credentials.verify_credentials("dana", "hunter2") is True

    upgraded = await credentials.get_user("dana")
    assert is_bcrypt_hash(upgraded.password_hash)
    assert upgraded.created_at == 1700000000000
    assert await credentials.verify_credentials("dana", "hunter2") is True


@pytest.mark.asyncio
async def test_unreadable_registry_is_not_overwritten(credentials, store):
    await store.set(USERS_KEY, "{not json")

    assert await credentials.list_users() == []
    assert await credentials.register_user("erin", "secret") is False
    assert await store.get(USERS_KEY) == "{not json"


@pytest.mark.asyncio
async def test_storage_failures_become_false(failing_store):
    credentials = CredentialStore(failing_store, bcrypt_rounds=4)
    assert await credentials.register_user("frank", "secret") is True

    failing_store.fail_on = {"get", "set"}

    assert await credentials.register_user("gina", "secret") is False
    assert await credentials.verify_credentials("frank", "secret") is False
    assert await credentials.list_users() == []
    assert await credentials.get_session() is None


@pytest.mark.asyncio
async def test_session_pointer(credentials, store):
    assert await credentials.get_session() is None

    await credentials.set_session("alice")
    assert await credentials.get_session() == "alice"
    assert await store.get(CURRENT_USER_KEY) == "alice"

    await credentials.set_session(None)
    assert await credentials.get_session() is None
    assert await store.get(CURRENT_USER_KEY) is None


@pytest.mark.asyncio
async def test_lone_surrogate_password_registers_and_verifies(credentials):
    assert await credentials.register_user("zed", "ab\ud800") is True

    assert await credentials.verify_credentials("zed", "ab\ud800") is True
    assert await credentials.verify_credentials("zed", "ab") is False


@pytest.mark.asyncio
async def test_registry_lock_is_released_after_use(credentials, locks):
    await asyncio.gather(*(credentials.register_user(f"user{i}", "secret") for i in range(3)))

    assert len(locks) == 0
