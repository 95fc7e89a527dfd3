import io

import pytest

from nfsmamont.errors import IncorrectPadding, IoError, MaxElemLimit, RpcError
from nfsmamont.files import FileHandle
from nfsmamont.mount import (
    DumpSuccess,
    ExportEntry,
    MntError,
    MountArgs,
    MountEntry,
    MountService,
    UnmountArgs,
    parse_mount,
    parse_unmount,
)
from nfsmamont.protocol import MOUNT_DIRPATH_LEN, AuthFlavor

HANDLE = FileHandle(bytes([1, 2, 3, 4, 5, 6, 7, 8]))
OTHER_HANDLE = FileHandle(bytes([9, 10, 11, 12, 13, 14, 15, 16]))


def test_mount_basic():
    data = io.BytesIO(bytes([0, 0, 0, 6]) + b"/mnt/1" + bytes([0, 0]))
    assert parse_mount(data) == MountArgs("/mnt/1")


def test_unmount_basic():
    data = io.BytesIO(bytes([0, 0, 0, 8]) + b"/tmp/tes")
    assert parse_unmount(data) == UnmountArgs("/tmp/tes")


def test_mount_exceeds_max_length():
    size = MOUNT_DIRPATH_LEN + 1
    data = io.BytesIO(size.to_bytes(4, "big") + b"a" * size)
    with pytest.raises(MaxElemLimit):
        parse_mount(data)


def test_unmount_insufficient_data():
    data = io.BytesIO(bytes([0, 0, 0, 5]) + b"/tmp")
    with pytest.raises(IoError):
        parse_unmount(data)


def test_mount_unaligned_path():
    data = io.BytesIO(bytes([0, 0, 0, 3]) + b"/vm")
    with pytest.raises(IncorrectPadding):
        parse_mount(data)


def test_mount_error_is_rpc_error():
    data = io.BytesIO(bytes([0, 0, 0, 3]) + b"/vm")
    with pytest.raises(RpcError):
        parse_mount(data)


def _service(client="client", mount_list=None):
    exports = [
        ExportEntry("/export", ["client"]),
        ExportEntry("/public", []),
    ]
    handles = {"/export": HANDLE, "/public": OTHER_HANDLE}
    return MountService(exports, handles, client, mount_list=mount_list)


@pytest.mark.asyncio
async def test_null_returns_none():
    assert await _service().null() is None


@pytest.mark.asyncio
async def test_mnt_returns_handle_and_records_entry():
    service = _service()
    result = await service.mnt("/export")
    assert result.file_handle == HANDLE
    assert result.auth_flavors == (AuthFlavor.NONE,)
    dump = await service.dump()
    assert dump == DumpSuccess([MountEntry("client", "/export")])


@pytest.mark.asyncio
async def test_mnt_twice_records_once():
    service = _service()
    await service.mnt("/export")
    await service.mnt("/export")
    assert (await service.dump()).mount_list == [MountEntry("client", "/export")]


@pytest.mark.asyncio
async def test_mnt_unknown_directory():
    with pytest.raises(FileNotFoundError) as info:
        await _service().mnt("/missing")
    assert info.value.errno == MntError.NO_ENT


@pytest.mark.asyncio
async def test_mnt_denied_client():
    with pytest.raises(PermissionError) as info:
        await _service(client="intruder").mnt("/export")
    assert info.value.errno == MntError.ACCESS


@pytest.mark.asyncio
async def test_mnt_open_export_for_any_client():
    result = await _service(client="anyone").mnt("/public")
    assert result.file_handle == OTHER_HANDLE


@pytest.mark.asyncio
async def test_mnt_path_too_long():
    with pytest.raises(OSError) as info:
        await _service().mnt("/" + "a" * MOUNT_DIRPATH_LEN)
    assert info.value.errno == MntError.NAME_TOO_LONG


@pytest.mark.asyncio
async def test_umnt_removes_entry():
    service = _service()
    await service.mnt("/export")
    await service.mnt("/public")
    await service.umnt("/export")
    assert (await service.dump()).mount_list == [MountEntry("client", "/public")]


@pytest.mark.asyncio
async def test_umntall_removes_only_own_entries():
    shared = []
    first = _service(client="client", mount_list=shared)
    second = _service(client="other", mount_list=shared)
    await first.mnt("/export")
    await first.mnt("/public")
    await second.mnt("/public")
    await first.umntall()
    assert (await second.dump()).mount_list == [MountEntry("other", "/public")]


@pytest.mark.asyncio
async def test_export_lists_exports():
    result = await _service().export()
    assert result.exports == [
        ExportEntry("/export", ["client"]),
        ExportEntry("/public", []),
    ]


def test_missing_handle_rejected():
    with pytest.raises(ValueError):
        MountService([ExportEntry("/export", [])], {}, "client")


def test_long_client_name_rejected():
    with pytest.raises(ValueError):
        MountService([], {}, "h" * 256)