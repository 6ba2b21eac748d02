"""Shared schema helpers."""
import time

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class CamelModel(BaseModel):
    """Model persisted with camelCase JSON keys (``createdAt``, ``imageUri``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
