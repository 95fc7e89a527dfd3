"""Decoding of primitive XDR data types from binary readers."""

from __future__ import annotations

import struct
from typing import BinaryIO, Callable, Optional, Type, TypeVar

from nfsmamont.errors import (
    EnumDiscMismatch,
    IncorrectPadding,
    IncorrectString,
    IoError,
    IoErrorKind,
    MaxElemLimit,
)

ALIGNMENT = 4

T = TypeVar("T")
E = TypeVar("E")


def _read_exact(src: BinaryIO, n: int) -> bytes:
    data = bytearray()
    while len(data) < n:
        chunk = src.read(n - len(data))
        if not chunk:
            raise IoError(IoErrorKind.UNEXPECTED_EOF, "failed to fill whole buffer")
        data += chunk
    return bytes(data)


def _padding_for(n: int) -> int:
    return (ALIGNMENT - n % ALIGNMENT) % ALIGNMENT


def read_padding(src: BinaryIO, n: int) -> None:
    """Skip the padding that follows ``n`` bytes of data."""
    try:
        _read_exact(src, _padding_for(n))
    except IoError as exc:
        raise IncorrectPadding() from exc


def read_u8(src: BinaryIO) -> int:
    return _read_exact(src, 1)[0]


def read_u32(src: BinaryIO) -> int:
    return struct.unpack(">I", _read_exact(src, 4))[0]


def read_u64(src: BinaryIO) -> int:
    return struct.unpack(">Q", _read_exact(src, 8))[0]


def read_bool(src: BinaryIO) -> bool:
    value = read_u32(src)
    if value == 0:
        return False
    if value == 1:
        return True
    raise EnumDiscMismatch()


def read_option(src: BinaryIO, parse: Callable[[BinaryIO], T]) -> Optional[T]:
    """Read an optional value: a boolean followed by the value when true."""
    return parse(src) if read_bool(src) else None


def read_array(src: BinaryIO, n: int) -> bytes:
    """Read a fixed-size opaque array of ``n`` bytes and its padding."""
    data = _read_exact(src, n)
    read_padding(src, n)
    return data


def read_opaque(src: BinaryIO) -> bytes:
    """Read variable-length opaque data preceded by its length."""
    size = read_size(src)
    data = _read_exact(src, size)
    read_padding(src, size)
    return data


def read_opaque_max(src: BinaryIO, max_size: int) -> bytes:
    """Read variable-length opaque data no longer than ``max_size``."""
    size = read_size(src)
    if size > max_size:
        raise MaxElemLimit()
    data = _read_exact(src, size)
    read_padding(src, size)
    return data


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise IncorrectString(str(exc)) from exc


def read_string_max(src: BinaryIO, max_size: int) -> str:
    return _decode(read_opaque_max(src, max_size))


def read_string(src: BinaryIO) -> str:
    return _decode(read_opaque(src))


def read_variant(src: BinaryIO, enum_type: Type[E]) -> E:
    """Read an enum discriminant and map it onto ``enum_type``."""
    value = read_u32(src)
    try:
        return enum_type(value)
    except ValueError as exc:
        raise EnumDiscMismatch() from exc


def read_size(src: BinaryIO) -> int:
    """Read a length encoded as an unsigned 32-bit integer."""
    return read_u32(src)