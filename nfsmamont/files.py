"""File handles, attributes, names and paths of NFSv3 and their decoders."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import BinaryIO

from nfsmamont.errors import BadFileHandle
from nfsmamont.protocol import NFS3_FHSIZE
from nfsmamont.xdr import read_array, read_size, read_string_max, read_u32, read_u64, read_variant

MAX_NAME_LEN = 255
MAX_PATH_LEN = 1024


@dataclass(frozen=True)
class FileHandle:
    """Opaque server file handle."""

    data: bytes


class FileType(enum.IntEnum):
    REGULAR = 1
    DIRECTORY = 2
    BLOCK_DEVICE = 3
    CHARACTER_DEVICE = 4
    SYMLINK = 5
    SOCKET = 6
    FIFO = 7


@dataclass(frozen=True)
class Time:
    seconds: int
    nanos: int


@dataclass(frozen=True)
class Device:
    major: int
    minor: int


@dataclass(frozen=True)
class Attr:
    file_type: FileType
    mode: int
    nlink: int
    uid: int
    gid: int
    size: int
    used: int
    device: Device
    fs_id: int
    file_id: int
    atime: Time
    mtime: Time
    ctime: Time


@dataclass(frozen=True)
class WccAttr:
    """Attributes used for weak cache consistency."""

    size: int
    mtime: Time
    ctime: Time


def parse_handle(src: BinaryIO) -> FileHandle:
    if read_size(src) != NFS3_FHSIZE:
        raise BadFileHandle()
    return FileHandle(read_array(src, NFS3_FHSIZE))


def parse_type(src: BinaryIO) -> FileType:
    return read_variant(src, FileType)


def parse_time(src: BinaryIO) -> Time:
    return Time(seconds=read_u32(src), nanos=read_u32(src))


def parse_device(src: BinaryIO) -> Device:
    return Device(major=read_u32(src), minor=read_u32(src))


def parse_attr(src: BinaryIO) -> Attr:
    return Attr(
        file_type=parse_type(src),
        mode=read_u32(src),
        nlink=read_u32(src),
        uid=read_u32(src),
        gid=read_u32(src),
        size=read_u64(src),
        used=read_u64(src),
        device=parse_device(src),
        fs_id=read_u64(src),
        file_id=read_u64(src),
        atime=parse_time(src),
        mtime=parse_time(src),
        ctime=parse_time(src),
    )


def parse_wcc_attr(src: BinaryIO) -> WccAttr:
    return WccAttr(size=read_u64(src), mtime=parse_time(src), ctime=parse_time(src))


def parse_name(src: BinaryIO) -> str:
    """Read a file name of at most ``MAX_NAME_LEN`` bytes."""
    return read_string_max(src, MAX_NAME_LEN)


def parse_path(src: BinaryIO) -> str:
    """Read a path of at most ``MAX_PATH_LEN`` bytes."""
    return read_string_max(src, MAX_PATH_LEN)