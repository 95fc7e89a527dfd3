"""Arguments of the NFSv3 procedures that create objects, list directories or write."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import BinaryIO, Optional

from nfsmamont.allocator import Slice
from nfsmamont.attributes import DirOpArgs, NewAttr, parse_new_attr
from nfsmamont.files import (
    Device,
    FileHandle,
    FileType,
    parse_device,
    parse_handle,
    parse_name,
    parse_path,
)
from nfsmamont.protocol import NFS3_COOKIEVERFSIZE
from nfsmamont.xdr import read_array, read_u32, read_u64, read_variant

_WITH_DEVICE = (FileType.BLOCK_DEVICE, FileType.CHARACTER_DEVICE)
_WITH_ATTR = _WITH_DEVICE + (FileType.SOCKET, FileType.FIFO)


@dataclass(frozen=True)
class MkDirArgs:
    """MKDIR: where to create the directory and its initial attributes."""

    object: DirOpArgs
    attr: NewAttr


@dataclass(frozen=True)
class MkNodeWhat:
    """Kind of special file to create with its attributes and device numbers.

    Block and character devices carry attributes and a device; sockets and
    FIFOs carry attributes only; other kinds carry nothing.
    """

    file_type: FileType
    attr: Optional[NewAttr] = None
    device: Optional[Device] = None

    def __post_init__(self) -> None:
        if (self.file_type in _WITH_ATTR) != (self.attr is not None):
            raise ValueError(f"attributes do not match node type {self.file_type.name}")
        if (self.file_type in _WITH_DEVICE) != (self.device is not None):
            raise ValueError(f"device does not match node type {self.file_type.name}")


@dataclass(frozen=True)
class MkNodeArgs:
    """MKNOD: where to create the special file and what it is."""

    object: DirOpArgs
    what: MkNodeWhat


@dataclass(frozen=True)
class ReadDirArgs:
    """READDIR: directory, position to resume from and reply size limit."""

    dir: FileHandle
    cookie: int
    cookie_verifier: bytes
    count: int


@dataclass(frozen=True)
class ReadDirPlusArgs:
    """READDIRPLUS: like READDIR with separate limits for names and whole reply."""

    dir: FileHandle
    cookie: int
    cookie_verifier: bytes
    dir_count: int
    max_count: int


@dataclass(frozen=True)
class SymlinkArgs:
    """SYMLINK: where to create the link, its attributes and its target."""

    object: DirOpArgs
    attr: NewAttr
    path: str


class StableHow(enum.IntEnum):
    """How far written data must reach stable storage before replying."""

    UNSTABLE = 0
    DATA_SYNC = 1
    FILE_SYNC = 2


@dataclass(frozen=True)
class WriteArgsPartial:
    """WRITE arguments before the opaque data."""

    file: FileHandle
    offset: int
    size: int
    stable: StableHow


@dataclass(frozen=True)
class WriteArgs:
    """WRITE arguments with the data held in allocator buffers."""

    file: FileHandle
    offset: int
    size: int
    stable: StableHow
    data: Slice


def _parse_dir_op(src: BinaryIO) -> DirOpArgs:
    directory = parse_handle(src)
    return DirOpArgs(directory, parse_name(src))


def parse_mk_dir_args(src: BinaryIO) -> MkDirArgs:
    target = _parse_dir_op(src)
    return MkDirArgs(object=target, attr=parse_new_attr(src))


def parse_mk_node_what(src: BinaryIO) -> MkNodeWhat:
    file_type = read_variant(src, FileType)
    if file_type in _WITH_DEVICE:
        attr = parse_new_attr(src)
        return MkNodeWhat(file_type, attr, parse_device(src))
    if file_type in _WITH_ATTR:
        return MkNodeWhat(file_type, parse_new_attr(src))
    return MkNodeWhat(file_type)


def parse_mk_node_args(src: BinaryIO) -> MkNodeArgs:
    target = _parse_dir_op(src)
    return MkNodeArgs(object=target, what=parse_mk_node_what(src))


def parse_cookie(src: BinaryIO) -> int:
    return read_u64(src)


def parse_cookie_verifier(src: BinaryIO) -> bytes:
    return read_array(src, NFS3_COOKIEVERFSIZE)


def parse_read_dir_args(src: BinaryIO) -> ReadDirArgs:
    directory = parse_handle(src)
    cookie = parse_cookie(src)
    verifier = parse_cookie_verifier(src)
    return ReadDirArgs(dir=directory, cookie=cookie, cookie_verifier=verifier, count=read_u32(src))


def parse_read_dir_plus_args(src: BinaryIO) -> ReadDirPlusArgs:
    directory = parse_handle(src)
    cookie = parse_cookie(src)
    verifier = parse_cookie_verifier(src)
    dir_count = read_u32(src)
    return ReadDirPlusArgs(
        dir=directory,
        cookie=cookie,
        cookie_verifier=verifier,
        dir_count=dir_count,
        max_count=read_u32(src),
    )


def parse_symlink_args(src: BinaryIO) -> SymlinkArgs:
    target = _parse_dir_op(src)
    attr = parse_new_attr(src)
    return SymlinkArgs(object=target, attr=attr, path=parse_path(src))


def parse_stable_how(src: BinaryIO) -> StableHow:
    return read_variant(src, StableHow)


def parse_write_args(src: BinaryIO) -> WriteArgsPartial:
    """Decode WRITE arguments up to, not including, the opaque data."""
    file = parse_handle(src)
    offset = read_u64(src)
    size = read_u32(src)
    return WriteArgsPartial(file=file, offset=offset, size=size, stable=parse_stable_how(src))