"""Errors raised while decoding RPC, NFSv3 and MOUNT messages."""

from __future__ import annotations

import enum
from typing import Any


class IoErrorKind(enum.Enum):
    """Category of an input/output failure."""

    UNEXPECTED_EOF = "unexpected end of file"
    INVALID_DATA = "invalid data"
    INVALID_INPUT = "invalid input"
    UNSUPPORTED = "unsupported"
    OUT_OF_MEMORY = "out of memory"
    OTHER = "other"


class RpcError(Exception):
    """Base class of every decoding error."""


class MaxElemLimit(RpcError):
    """The maximum element limit was exceeded."""


class IoError(RpcError):
    """An input/output error occurred."""

    def __init__(self, kind: IoErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


class EnumDiscMismatch(RpcError):
    """An enum discriminant on the wire has no matching variant."""


class IncorrectString(RpcError):
    """A string on the wire is not valid UTF-8."""


class IncorrectPadding(RpcError):
    """XDR padding bytes are missing."""


class ImpossibleTypeCast(RpcError):
    """A value cannot be represented in the requested type."""


class BadFileHandle(RpcError):
    """A file handle of unexpected length was encountered."""


class MessageTypeMismatch(RpcError):
    """The message is not an RPC call."""


class RpcVersionMismatch(RpcError):
    """The RPC protocol version is not supported."""

    def __init__(self, low: int, high: int) -> None:
        super().__init__(f"RPC version mismatch, supported versions {low}..{high}")
        self.low = low
        self.high = high


class AuthError(RpcError):
    """Authentication of the call failed."""

    def __init__(self, stat: Any) -> None:
        super().__init__(f"authentication error: {stat!r}")
        self.stat = stat


class ProgramMismatch(RpcError):
    """The requested RPC program is not served."""


class ProcedureMismatch(RpcError):
    """The requested procedure does not exist in the program."""


class ProgramVersionMismatch(RpcError):
    """The requested program version is not supported."""

    def __init__(self, low: int, high: int) -> None:
        super().__init__(f"program version mismatch, supported versions {low}..{high}")
        self.low = low
        self.high = high