"""Decoded arguments of any NFSv3 or MOUNT procedure."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Optional, Type

from nfsmamont.args_basic import (
    AccessArgs,
    CommitArgs,
    FsInfoArgs,
    FsStatArgs,
    GetAttrArgs,
    LinkArgs,
    LookupArgs,
    PathConfArgs,
    ReadArgs,
    ReadLinkArgs,
    RemoveArgs,
    RenameArgs,
    RmDirArgs,
)
from nfsmamont.args_extended import (
    MkDirArgs,
    MkNodeArgs,
    ReadDirArgs,
    ReadDirPlusArgs,
    SymlinkArgs,
    WriteArgs,
)
from nfsmamont.attributes import CreateArgs, SetAttrArgs
from nfsmamont.errors import RpcError
from nfsmamont.mount import MountArgs, UnmountArgs


class ArgumentKind(enum.Enum):
    """Procedure whose arguments an :class:`Arguments` holds."""

    NULL = "null"
    GET_ATTR = "getattr"
    SET_ATTR = "setattr"
    LOOKUP = "lookup"
    ACCESS = "access"
    READ_LINK = "readlink"
    READ = "read"
    WRITE = "write"
    CREATE = "create"
    MK_DIR = "mkdir"
    SYMLINK = "symlink"
    MK_NOD = "mknod"
    REMOVE = "remove"
    RM_DIR = "rmdir"
    RENAME = "rename"
    LINK = "link"
    READ_DIR = "readdir"
    READ_DIR_PLUS = "readdirplus"
    FS_STAT = "fsstat"
    FS_INFO = "fsinfo"
    PATH_CONF = "pathconf"
    COMMIT = "commit"
    MOUNT = "mount"
    UNMOUNT = "unmount"
    EXPORT = "export"
    DUMP = "dump"
    UNMOUNT_ALL = "unmountall"


_PAYLOAD_TYPES: Dict[ArgumentKind, Optional[Type[Any]]] = {
    ArgumentKind.NULL: None,
    ArgumentKind.GET_ATTR: GetAttrArgs,
    ArgumentKind.SET_ATTR: SetAttrArgs,
    ArgumentKind.LOOKUP: LookupArgs,
    ArgumentKind.ACCESS: AccessArgs,
    ArgumentKind.READ_LINK: ReadLinkArgs,
    ArgumentKind.READ: ReadArgs,
    ArgumentKind.WRITE: WriteArgs,
    ArgumentKind.CREATE: CreateArgs,
    ArgumentKind.MK_DIR: MkDirArgs,
    ArgumentKind.SYMLINK: SymlinkArgs,
    ArgumentKind.MK_NOD: MkNodeArgs,
    ArgumentKind.REMOVE: RemoveArgs,
    ArgumentKind.RM_DIR: RmDirArgs,
    ArgumentKind.RENAME: RenameArgs,
    ArgumentKind.LINK: LinkArgs,
    ArgumentKind.READ_DIR: ReadDirArgs,
    ArgumentKind.READ_DIR_PLUS: ReadDirPlusArgs,
    ArgumentKind.FS_STAT: FsStatArgs,
    ArgumentKind.FS_INFO: FsInfoArgs,
    ArgumentKind.PATH_CONF: PathConfArgs,
    ArgumentKind.COMMIT: CommitArgs,
    ArgumentKind.MOUNT: MountArgs,
    ArgumentKind.UNMOUNT: UnmountArgs,
    ArgumentKind.EXPORT: None,
    ArgumentKind.DUMP: None,
    ArgumentKind.UNMOUNT_ALL: None,
}


@dataclass(frozen=True)
class Arguments:
    """A procedure kind with its decoded arguments, None for procedures without any."""

    kind: ArgumentKind
    args: Any = None

    def __post_init__(self) -> None:
        expected = _PAYLOAD_TYPES[self.kind]
        if expected is None:
            if self.args is not None:
                raise ValueError(f"{self.kind.name} takes no arguments")
        elif not isinstance(self.args, expected):
            raise TypeError(
                f"{self.kind.name} expects {expected.__name__}, got {type(self.args).__name__}"
            )


async def proc_nested_errors(error: RpcError, awaitable: Awaitable[Any]) -> RpcError:
    """Await ``awaitable``; return its error if it raises one, otherwise ``error``."""
    try:
        await awaitable
    except RpcError as nested:
        return nested
    return error