"""Settable attributes and the CREATE and SETATTR arguments of NFSv3."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from nfsmamont.files import FileHandle, Time, parse_handle, parse_name, parse_time
from nfsmamont.protocol import NFS3_CREATEVERFSIZE
from nfsmamont.xdr import read_array, read_bool, read_option, read_u32, read_u64, read_variant


class TimeHow(enum.IntEnum):
    DONT_CHANGE = 0
    SET_TO_SERVER_TIME = 1
    SET_TO_CLIENT_TIME = 2


@dataclass(frozen=True)
class SetTime:
    """How to change a timestamp; ``time`` is set only for client time."""

    how: TimeHow = TimeHow.DONT_CHANGE
    time: Optional[Time] = None

    def __post_init__(self) -> None:
        if (self.how is TimeHow.SET_TO_CLIENT_TIME) != (self.time is not None):
            raise ValueError("a time is given exactly when set to client time")


@dataclass(frozen=True)
class NewAttr:
    """Attributes to set; None leaves an attribute unchanged."""

    mode: Optional[int] = None
    uid: Optional[int] = None
    gid: Optional[int] = None
    size: Optional[int] = None
    atime: SetTime = field(default_factory=SetTime)
    mtime: SetTime = field(default_factory=SetTime)


class CreateMode(enum.IntEnum):
    UNCHECKED = 0
    GUARDED = 1
    EXCLUSIVE = 2


@dataclass(frozen=True)
class CreateHow:
    """Creation mode with initial attributes, or a verifier for exclusive creation."""

    mode: CreateMode
    attr: Optional[NewAttr] = None
    verifier: Optional[bytes] = None

    def __post_init__(self) -> None:
        if self.mode is CreateMode.EXCLUSIVE:
            if self.attr is not None or self.verifier is None:
                raise ValueError("exclusive creation takes a verifier only")
            if len(self.verifier) != NFS3_CREATEVERFSIZE:
                raise ValueError("verifier has wrong size")
        elif self.attr is None or self.verifier is not None:
            raise ValueError("unchecked and guarded creation take attributes only")


@dataclass(frozen=True)
class Guard:
    """Change time the object must have for SETATTR to proceed."""

    ctime: Time


@dataclass(frozen=True)
class DirOpArgs:
    """A name inside a directory."""

    dir: FileHandle
    name: str


@dataclass(frozen=True)
class CreateArgs:
    object: DirOpArgs
    how: CreateHow


@dataclass(frozen=True)
class SetAttrArgs:
    file: FileHandle
    new_attr: NewAttr
    guard: Optional[Guard]


def parse_nfs_time(src: BinaryIO) -> Time:
    return parse_time(src)


def parse_set_time(src: BinaryIO) -> SetTime:
    how = read_variant(src, TimeHow)
    if how is TimeHow.SET_TO_CLIENT_TIME:
        return SetTime(how, parse_nfs_time(src))
    return SetTime(how)


def parse_new_attr(src: BinaryIO) -> NewAttr:
    return NewAttr(
        mode=read_option(src, read_u32),
        uid=read_option(src, read_u32),
        gid=read_option(src, read_u32),
        size=read_option(src, read_u64),
        atime=parse_set_time(src),
        mtime=parse_set_time(src),
    )


def parse_create_how(src: BinaryIO) -> CreateHow:
    mode = read_variant(src, CreateMode)
    if mode is CreateMode.EXCLUSIVE:
        return CreateHow(mode, verifier=read_array(src, NFS3_CREATEVERFSIZE))
    return CreateHow(mode, attr=parse_new_attr(src))


def parse_create_args(src: BinaryIO) -> CreateArgs:
    directory = parse_handle(src)
    name = parse_name(src)
    return CreateArgs(object=DirOpArgs(directory, name), how=parse_create_how(src))


def parse_guard(src: BinaryIO) -> Optional[Guard]:
    return Guard(parse_nfs_time(src)) if read_bool(src) else None


def parse_set_attr_args(src: BinaryIO) -> SetAttrArgs:
    file = parse_handle(src)
    new_attr = parse_new_attr(src)
    return SetAttrArgs(file=file, new_attr=new_attr, guard=parse_guard(src))