"""MOUNT version 3 protocol: entries, arguments, an in-memory service and decoders."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import BinaryIO, Iterable, List, Mapping, Optional, Sequence, Tuple

from nfsmamont.files import FileHandle
from nfsmamont.protocol import MOUNT_DIRPATH_LEN, MOUNT_HOST_NAME_LEN, AuthFlavor
from nfsmamont.xdr import read_string_max


class MntError(enum.IntEnum):
    """Possible MOUNT errors; the values double as ``errno`` of raised errors."""

    PERM = 1
    NO_ENT = 2
    IO = 5
    ACCESS = 13
    NO_DIR = 20
    INVAL = 22
    NAME_TOO_LONG = 63
    NOT_SUPP = 10004
    SERVER_FAULT = 10006


@dataclass(frozen=True)
class MountEntry:
    """A client host that has mounted a directory."""

    hostname: str
    directory: str


@dataclass
class ExportEntry:
    """An exported directory and the client hosts allowed to mount it."""

    directory: str
    names: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class MountArgs:
    """Arguments of the MNT procedure."""

    path: str


@dataclass(frozen=True)
class UnmountArgs:
    """Arguments of the UMNT procedure."""

    path: str


@dataclass(frozen=True)
class MntSuccess:
    """Result of a successful MNT call."""

    file_handle: FileHandle
    auth_flavors: Tuple[AuthFlavor, ...]


@dataclass(frozen=True)
class DumpSuccess:
    """Result of DUMP: the mount list."""

    mount_list: List[MountEntry]


@dataclass(frozen=True)
class ExportSuccess:
    """Result of EXPORT: every exported directory with its allowed clients."""

    exports: List[ExportEntry]


class MountService:
    """MOUNT v3 procedures served for one client host.

    An export whose ``names`` list is empty may be mounted by any client.
    Failing MNT calls raise :class:`OSError` whose ``errno`` is a
    :class:`MntError`.
    """

    def __init__(
        self,
        exports: Iterable[ExportEntry],
        handles: Mapping[str, FileHandle],
        client: str,
        auth_flavors: Sequence[AuthFlavor] = (AuthFlavor.NONE,),
        mount_list: Optional[List[MountEntry]] = None,
    ) -> None:
        if len(client.encode("utf-8")) > MOUNT_HOST_NAME_LEN:
            raise ValueError("client host name is too long")
        self._exports = {entry.directory: entry for entry in exports}
        missing = [path for path in self._exports if path not in handles]
        if missing:
            raise ValueError(f"no file handle for exported directories: {missing}")
        self._handles = dict(handles)
        self.client = client
        self._auth_flavors = tuple(auth_flavors)
        self._mount_list: List[MountEntry] = mount_list if mount_list is not None else []

    async def null(self) -> None:
        """Do nothing; lets clients test that the server responds."""
        return None

    async def mnt(self, dirpath: str) -> MntSuccess:
        """Map an exported directory to its file handle and record the mount."""
        if len(dirpath.encode("utf-8")) > MOUNT_DIRPATH_LEN:
            raise OSError(MntError.NAME_TOO_LONG, "path name too long", dirpath)
        entry = self._exports.get(dirpath)
        if entry is None:
            raise OSError(MntError.NO_ENT, "directory is not exported", dirpath)
        if entry.names and self.client not in entry.names:
            raise OSError(MntError.ACCESS, "client may not mount directory", dirpath)
        mounted = MountEntry(hostname=self.client, directory=dirpath)
        if mounted not in self._mount_list:
            self._mount_list.append(mounted)
        return MntSuccess(file_handle=self._handles[dirpath], auth_flavors=self._auth_flavors)

    async def dump(self) -> DumpSuccess:
        """Return the list of remotely mounted file systems."""
        return DumpSuccess(mount_list=list(self._mount_list))

    async def umnt(self, dirpath: str) -> None:
        """Remove this client's mount list entry for ``dirpath``."""
        self._mount_list[:] = [
            entry
            for entry in self._mount_list
            if not (entry.hostname == self.client and entry.directory == dirpath)
        ]

    async def umntall(self) -> None:
        """Remove every mount list entry of this client."""
        self._mount_list[:] = [
            entry for entry in self._mount_list if entry.hostname != self.client
        ]

    async def export(self) -> ExportSuccess:
        """Return every exported directory with the clients allowed to mount it."""
        return ExportSuccess(
            exports=[
                ExportEntry(directory=entry.directory, names=list(entry.names))
                for entry in self._exports.values()
            ]
        )


def parse_mount(src: BinaryIO) -> MountArgs:
    """Decode the arguments of the MNT procedure."""
    return MountArgs(read_string_max(src, MOUNT_DIRPATH_LEN))


def parse_unmount(src: BinaryIO) -> UnmountArgs:
    """Decode the arguments of the UMNT procedure."""
    return UnmountArgs(read_string_max(src, MOUNT_DIRPATH_LEN))