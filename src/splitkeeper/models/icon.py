"""Binary icon data that travels as base64 inside JSON."""

import base64
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer


def _decode(value: Any) -> Any:
    if isinstance(value, str):
        return base64.b64decode(value, validate=True)
    return value


def _encode(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


IconData = Annotated[
    bytes,
    BeforeValidator(_decode),
    PlainSerializer(_encode, return_type=str, when_used="json"),
]
