"""Per-key write serialization."""
import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


@dataclass
class _Slot:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class KeyedLock:
    """Hands out one ``asyncio.Lock`` per storage key.

    Every read-modify-write of a whole stored collection runs inside
    ``hold(key)``, so concurrent saves for the same user are applied one after
    another instead of overwriting each other. Locks for different keys are
    independent, and a key's lock is dropped once nobody holds or waits on it.
    """

    def __init__(self):
        self._slots: dict[str, _Slot] = {}

    def __len__(self) -> int:
        return len(self._slots)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        slot = self._slots.get(key)
        if slot is None:
            slot = self._slots[key] = _Slot()
        slot.holders += 1
        try:
            async with slot.lock:
                yield
        finally:
            slot.holders -= 1
            if slot.holders == 0:
                del self._slots[key]
