import asyncio
import inspect
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel


def generate_uuid() -> str:
    return str(uuid4())


def format_value(value: Any) -> Any:
    """Turn run input or output into plain JSON-friendly data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: format_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [format_value(item) for item in value]
    return value


def is_called_from_async_context() -> bool:
    """Check for a running event loop with a coroutine somewhere up the call stack."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False

    frame = inspect.currentframe()
    while frame is not None:
        if frame.f_code.co_flags & inspect.CO_COROUTINE:
            return True
        frame = frame.f_back
    return False
