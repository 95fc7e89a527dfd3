"""Arguments of the simpler NFSv3 procedures and their decoders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from nfsmamont.attributes import DirOpArgs
from nfsmamont.files import FileHandle, parse_handle, parse_name
from nfsmamont.xdr import read_u32, read_u64


@dataclass(frozen=True)
class AccessArgs:
    """ACCESS: the object and the bit mask of permissions to check."""

    file: FileHandle
    mask: int


@dataclass(frozen=True)
class CommitArgs:
    """COMMIT: flush ``count`` bytes starting at ``offset``."""

    file: FileHandle
    offset: int
    count: int


@dataclass(frozen=True)
class FsInfoArgs:
    root: FileHandle


@dataclass(frozen=True)
class FsStatArgs:
    root: FileHandle


@dataclass(frozen=True)
class GetAttrArgs:
    file: FileHandle


@dataclass(frozen=True)
class LinkArgs:
    """LINK: the existing file and where the new link goes."""

    file: FileHandle
    link: DirOpArgs


@dataclass(frozen=True)
class LookupArgs:
    parent: FileHandle
    name: str


@dataclass(frozen=True)
class PathConfArgs:
    file: FileHandle


@dataclass(frozen=True)
class ReadArgs:
    file: FileHandle
    offset: int
    count: int


@dataclass(frozen=True)
class ReadLinkArgs:
    file: FileHandle


@dataclass(frozen=True)
class RemoveArgs:
    object: DirOpArgs


@dataclass(frozen=True)
class RenameArgs:
    source: DirOpArgs
    target: DirOpArgs


@dataclass(frozen=True)
class RmDirArgs:
    object: DirOpArgs


def _parse_dir_op(src: BinaryIO) -> DirOpArgs:
    directory = parse_handle(src)
    return DirOpArgs(directory, parse_name(src))


def parse_access_args(src: BinaryIO) -> AccessArgs:
    file = parse_handle(src)
    return AccessArgs(file=file, mask=read_u32(src))


def parse_commit_args(src: BinaryIO) -> CommitArgs:
    file = parse_handle(src)
    offset = read_u64(src)
    return CommitArgs(file=file, offset=offset, count=read_u32(src))


def parse_fs_info_args(src: BinaryIO) -> FsInfoArgs:
    return FsInfoArgs(root=parse_handle(src))


def parse_fs_stat_args(src: BinaryIO) -> FsStatArgs:
    return FsStatArgs(root=parse_handle(src))


def parse_get_attr_args(src: BinaryIO) -> GetAttrArgs:
    return GetAttrArgs(file=parse_handle(src))


def parse_link_args(src: BinaryIO) -> LinkArgs:
    file = parse_handle(src)
    return LinkArgs(file=file, link=_parse_dir_op(src))


def parse_lookup_args(src: BinaryIO) -> LookupArgs:
    parent = parse_handle(src)
    return LookupArgs(parent=parent, name=parse_name(src))


def parse_path_conf_args(src: BinaryIO) -> PathConfArgs:
    return PathConfArgs(file=parse_handle(src))


def parse_read_args(src: BinaryIO) -> ReadArgs:
    file = parse_handle(src)
    offset = read_u64(src)
    return ReadArgs(file=file, offset=offset, count=read_u32(src))


def parse_read_link_args(src: BinaryIO) -> ReadLinkArgs:
    return ReadLinkArgs(file=parse_handle(src))


def parse_remove_args(src: BinaryIO) -> RemoveArgs:
    return RemoveArgs(object=_parse_dir_op(src))


def parse_rename_args(src: BinaryIO) -> RenameArgs:
    source = _parse_dir_op(src)
    return RenameArgs(source=source, target=_parse_dir_op(src))


def parse_rm_dir_args(src: BinaryIO) -> RmDirArgs:
    return RmDirArgs(object=_parse_dir_op(src))