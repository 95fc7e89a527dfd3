"""Decoding of complete ONC RPC call messages for the NFSv3 and MOUNT programs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Dict, Optional, Protocol, Tuple

from nfsmamont.allocator import Slice
from nfsmamont.args_basic import (
    parse_access_args,
    parse_commit_args,
    parse_fs_info_args,
    parse_fs_stat_args,
    parse_get_attr_args,
    parse_link_args,
    parse_lookup_args,
    parse_path_conf_args,
    parse_read_args,
    parse_read_link_args,
    parse_remove_args,
    parse_rename_args,
    parse_rm_dir_args,
)
from nfsmamont.args_extended import (
    WriteArgs,
    parse_mk_dir_args,
    parse_mk_node_args,
    parse_read_dir_args,
    parse_read_dir_plus_args,
    parse_symlink_args,
    parse_write_args,
)
from nfsmamont.arguments import ArgumentKind, Arguments, proc_nested_errors
from nfsmamont.attributes import parse_create_args, parse_set_attr_args
from nfsmamont.errors import (
    AuthError,
    IoError,
    IoErrorKind,
    MessageTypeMismatch,
    ProcedureMismatch,
    ProgramMismatch,
    ProgramVersionMismatch,
    RpcError,
    RpcVersionMismatch,
)
from nfsmamont.mount import parse_mount, parse_unmount
from nfsmamont.protocol import (
    MAX_AUTH_SIZE,
    MOUNT_PROGRAM,
    MOUNT_VERSION,
    NFS_PROGRAM,
    NFS_VERSION,
    RPC_VERSION,
    AuthFlavor,
    AuthStat,
    MountProcedure,
    NfsProcedure,
    OpaqueAuth,
    RpcBody,
)
from nfsmamont.read_buffer import AsyncByteSource, CountBuffer
from nfsmamont.xdr import ALIGNMENT, read_opaque_max, read_size, read_u32, read_variant

# Size of the record-marking header that precedes every message.
RMS_HEADER_SIZE = 4

# Largest supported frame; also the default buffer size. Enough for any call
# except the opaque data of WRITE, which goes into allocator buffers.
DEFAULT_SIZE = 2500

_Parse = Callable[[BinaryIO], Any]

_NFS_PARSERS: Dict[int, Tuple[ArgumentKind, _Parse]] = {
    NfsProcedure.GETATTR: (ArgumentKind.GET_ATTR, parse_get_attr_args),
    NfsProcedure.SETATTR: (ArgumentKind.SET_ATTR, parse_set_attr_args),
    NfsProcedure.LOOKUP: (ArgumentKind.LOOKUP, parse_lookup_args),
    NfsProcedure.ACCESS: (ArgumentKind.ACCESS, parse_access_args),
    NfsProcedure.READLINK: (ArgumentKind.READ_LINK, parse_read_link_args),
    NfsProcedure.READ: (ArgumentKind.READ, parse_read_args),
    NfsProcedure.CREATE: (ArgumentKind.CREATE, parse_create_args),
    NfsProcedure.MKDIR: (ArgumentKind.MK_DIR, parse_mk_dir_args),
    NfsProcedure.SYMLINK: (ArgumentKind.SYMLINK, parse_symlink_args),
    NfsProcedure.MKNOD: (ArgumentKind.MK_NOD, parse_mk_node_args),
    NfsProcedure.REMOVE: (ArgumentKind.REMOVE, parse_remove_args),
    NfsProcedure.RMDIR: (ArgumentKind.RM_DIR, parse_rm_dir_args),
    NfsProcedure.RENAME: (ArgumentKind.RENAME, parse_rename_args),
    NfsProcedure.LINK: (ArgumentKind.LINK, parse_link_args),
    NfsProcedure.READDIR: (ArgumentKind.READ_DIR, parse_read_dir_args),
    NfsProcedure.READDIRPLUS: (ArgumentKind.READ_DIR_PLUS, parse_read_dir_plus_args),
    NfsProcedure.FSSTAT: (ArgumentKind.FS_STAT, parse_fs_stat_args),
    NfsProcedure.FSINFO: (ArgumentKind.FS_INFO, parse_fs_info_args),
    NfsProcedure.PATHCONF: (ArgumentKind.PATH_CONF, parse_path_conf_args),
    NfsProcedure.COMMIT: (ArgumentKind.COMMIT, parse_commit_args),
}

_MOUNT_PARSERS: Dict[int, Tuple[ArgumentKind, Optional[_Parse]]] = {
    MountProcedure.NULL: (ArgumentKind.NULL, None),
    MountProcedure.MNT: (ArgumentKind.MOUNT, parse_mount),
    MountProcedure.DUMP: (ArgumentKind.DUMP, None),
    MountProcedure.UMNT: (ArgumentKind.UNMOUNT, parse_unmount),
    MountProcedure.UMNTALL: (ArgumentKind.UNMOUNT_ALL, None),
    MountProcedure.EXPORT: (ArgumentKind.EXPORT, None),
}

# Errors after which the rest of the frame is skipped so the next one can be read.
_DISCARDING_ERRORS = (
    RpcVersionMismatch,
    ProgramMismatch,
    ProcedureMismatch,
    AuthError,
    MessageTypeMismatch,
    ProgramVersionMismatch,
)


class SliceAllocator(Protocol):
    """Anything with ``async allocate(size)`` returning a :class:`Slice` or None."""

    async def allocate(self, size: int) -> Optional[Slice]:  # pragma: no cover - protocol
        ...


@dataclass(frozen=True)
class RpcMessage:
    """Program, procedure and version named by an RPC call header."""

    program: int
    procedure: int
    version: int


def parse_auth(src: BinaryIO) -> OpaqueAuth:
    """Decode an authentication flavor and its body."""
    flavor = read_variant(src, AuthFlavor)
    return OpaqueAuth(flavor=flavor, body=read_opaque_max(src, MAX_AUTH_SIZE))


class RpcParser:
    """Reads RPC call messages from a stream and decodes their arguments."""

    def __init__(
        self,
        socket: AsyncByteSource,
        allocator: SliceAllocator,
        capacity: int = DEFAULT_SIZE,
    ) -> None:
        self._allocator = allocator
        self._buffer = CountBuffer(capacity, socket)
        self._last = False
        self._current_frame_size = 0

    async def parse_message(self) -> Arguments:
        """Read one complete message and return the procedure arguments it carries."""
        await self._read_message_header()
        try:
            header = await self._parse_rpc_header()
            result = await self._parse_proc(header)
        except RpcError as err:
            replacement = await self._match_errors(err)
            if replacement is err:
                raise
            raise replacement from err
        self._finalize_parsing()
        return result

    async def _read_message_header(self) -> None:
        header = await self._buffer.parse_with_retry(read_u32)
        self._last = bool(header & 0x8000_0000)
        self._current_frame_size = header & 0x7FFF_FFFF

        if self._current_frame_size < 4:
            raise IoError(IoErrorKind.INVALID_DATA, "Frame size must include XID")
        if self._current_frame_size > DEFAULT_SIZE:
            raise IoError(IoErrorKind.INVALID_DATA, "Frame exceeds maximum supported length")
        if not self._last:
            raise IoError(IoErrorKind.UNSUPPORTED, "Fragmented messages not supported")
        await self._buffer.parse_with_retry(read_u32)  # transaction id

    async def _parse_rpc_header(self) -> RpcMessage:
        msg_type = await self._buffer.parse_with_retry(read_u32)
        if msg_type != RpcBody.CALL:
            raise MessageTypeMismatch()

        rpc_version = await self._buffer.parse_with_retry(read_u32)
        if rpc_version != RPC_VERSION:
            raise RpcVersionMismatch(RPC_VERSION, RPC_VERSION)

        program = await self._buffer.parse_with_retry(read_u32)
        version = await self._buffer.parse_with_retry(read_u32)
        procedure = await self._buffer.parse_with_retry(read_u32)

        status = await self._parse_authentication()
        if status is not AuthStat.OK:
            raise AuthError(status)
        return RpcMessage(program=program, procedure=procedure, version=version)

    async def _parse_authentication(self) -> AuthStat:
        auth = await self._buffer.parse_with_retry(parse_auth)
        if auth.flavor is AuthFlavor.NONE:
            return AuthStat.OK
        return AuthStat.BAD_CRED

    async def _parse_proc(self, head: RpcMessage) -> Arguments:
        if head.program == NFS_PROGRAM:
            if head.version != NFS_VERSION:
                raise ProgramVersionMismatch(NFS_VERSION, NFS_VERSION)
            if head.procedure == NfsProcedure.NULL:
                return Arguments(ArgumentKind.NULL)
            if head.procedure == NfsProcedure.WRITE:
                return Arguments(ArgumentKind.WRITE, await self._parse_write())
            entry = _NFS_PARSERS.get(head.procedure)
            if entry is None:
                raise ProcedureMismatch()
            kind, parse = entry
            return Arguments(kind, await self._buffer.parse_with_retry(parse))

        if head.program == MOUNT_PROGRAM:
            if head.version != MOUNT_VERSION:
                raise ProgramVersionMismatch(MOUNT_VERSION, MOUNT_VERSION)
            mount_entry = _MOUNT_PARSERS.get(head.procedure)
            if mount_entry is None:
                raise ProcedureMismatch()
            kind, mount_parse = mount_entry
            if mount_parse is None:
                return Arguments(kind)
            return Arguments(kind, await self._buffer.parse_with_retry(mount_parse))

        raise ProgramMismatch()

    async def _parse_write(self) -> WriteArgs:
        partial = await self._buffer.parse_with_retry(parse_write_args)
        size = await self._buffer.parse_with_retry(read_size)

        data = await self._allocator.allocate(max(size, 1))
        if data is None:
            raise IoError(IoErrorKind.OUT_OF_MEMORY, "cannot allocate memory")

        padding = (ALIGNMENT - size % ALIGNMENT) % ALIGNMENT
        read_sync = read_in_slice_sync(self._buffer, data, size)
        if read_sync < size:
            await read_in_slice_async(self._buffer, data, read_sync, size - read_sync)

        await self._buffer.discard_bytes(padding)
        return WriteArgs(
            file=partial.file,
            offset=partial.offset,
            size=partial.size,
            stable=partial.stable,
            data=data,
        )

    def _finalize_parsing(self) -> None:
        consumed = self._buffer.total_bytes() - RMS_HEADER_SIZE
        if consumed < 0:
            raise IoError(
                IoErrorKind.INVALID_DATA, "Consumed bytes are less than RMS header size"
            )
        if consumed != self._current_frame_size:
            raise IoError(IoErrorKind.INVALID_DATA, "Unparsed data remaining in frame")
        self._buffer.clean()
        self._current_frame_size = 0
        self._last = False

    async def _match_errors(self, error: RpcError) -> RpcError:
        if isinstance(error, _DISCARDING_ERRORS):
            return await proc_nested_errors(error, self._discard_current_message())
        return error

    async def _discard_current_message(self) -> None:
        remaining = self._current_frame_size + RMS_HEADER_SIZE - self._buffer.total_bytes()
        if remaining < 0:
            raise IoError(
                IoErrorKind.INVALID_DATA, "Consumed more bytes than RMS header suggests"
            )
        await self._buffer.discard_bytes(remaining)
        self._finalize_parsing()


def read_in_slice_sync(src: CountBuffer, target: Slice, left_size: int) -> int:
    """Copy up to ``left_size`` already buffered bytes into ``target``.

    Returns how many bytes were copied; stops early when the buffer runs dry.
    """
    real_size = 0
    for view in target:
        block_size = min(len(view), left_size - real_size)
        read_count = 0
        while read_count < block_size:
            n = src.read_from_inner(view[read_count:block_size])
            if n == 0:
                return real_size
            read_count += n
            real_size += n
    if real_size != left_size:
        raise IoError(IoErrorKind.INVALID_INPUT, "invalid amount of data read")
    return real_size


async def read_in_slice_async(
    src: CountBuffer, target: Slice, to_skip: int, to_write: int
) -> int:
    """Fill ``to_write`` bytes of ``target`` after its first ``to_skip`` bytes from the stream."""
    left_skip = to_skip
    left_write = to_write
    for view in target:
        in_current = min(left_skip, len(view))
        if left_skip > 0 and in_current == len(view):
            left_skip -= in_current
            continue
        current_write = min(left_skip + left_write, len(view) - left_skip)
        await src.read_from_async(view[left_skip:left_skip + current_write])
        if current_write > left_write:
            raise IoError(IoErrorKind.INVALID_INPUT, "invalid buffer size")
        left_write -= current_write
        left_skip = 0
    return to_write - left_write