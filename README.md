# nfsmamont

Building blocks for an NFS version 3 server: an asynchronous parser for
record-marked, XDR-encoded ONC RPC call messages that covers every NFSv3
procedure and the MOUNT version 3 protocol, and a bounded buffer allocator
that holds the data of WRITE calls.

## Installation

```
pip install .
```

`pip install .[test]` also installs pytest and pytest-asyncio.

## Modules

- `nfsmamont.protocol`: program and version numbers (`NFS_PROGRAM`,
  `MOUNT_PROGRAM`, `RPC_VERSION`, ...), size limits and the wire
  enumerations `NfsProcedure`, `MountProcedure`, `AuthFlavor`, `AuthStat`,
  `AcceptStat`, `RpcBody`, `ReplyBody`, `RejectedReply` and `MountStat`,
  plus the `OpaqueAuth` and `VersionMismatch` records.
- `nfsmamont.errors`: the exceptions. All derive from `RpcError`; among them
  are `BadFileHandle`, `IncorrectPadding`, `IncorrectString`,
  `EnumDiscMismatch`, `MaxElemLimit`, `MessageTypeMismatch`,
  `RpcVersionMismatch`, `AuthError`, `ProgramMismatch`, `ProcedureMismatch`,
  `ProgramVersionMismatch` and `IoError`, which carries an `IoErrorKind`.
- `nfsmamont.xdr`: primitive readers such as `read_u32`, `read_u64`,
  `read_bool`, `read_option`, `read_array`, `read_opaque`,
  `read_opaque_max`, `read_string_max` and `read_variant`. Each takes a
  binary stream such as `io.BytesIO`; running out of data raises `IoError`
  with kind `IoErrorKind.UNEXPECTED_EOF`.
- `nfsmamont.files`: `FileHandle`, `FileType`, `Time`, `Device`, `Attr`,
  `WccAttr` and their parsers (`parse_handle`, `parse_name`, `parse_path`,
  ...). A file handle must be 8 bytes long, otherwise `BadFileHandle` is
  raised.
- `nfsmamont.attributes`: `SetTime`, `NewAttr`, `CreateHow`, `Guard`,
  `DirOpArgs` and the CREATE and SETATTR arguments with
  `parse_create_args` and `parse_set_attr_args`.
- `nfsmamont.args_basic` and `nfsmamont.args_extended`: argument records and
  parsers for the other NFSv3 procedures, for example `parse_lookup_args`,
  `parse_rename_args`, `parse_mk_node_args`, `parse_read_dir_plus_args` and
  `parse_write_args` (which stops before the opaque data).
- `nfsmamont.mount`: `parse_mount` and `parse_unmount`, the MOUNT records,
  and `MountService`, an in-memory MOUNT service for one client host that
  keeps a mount list and answers `null`, `mnt`, `dump`, `umnt`, `umntall`
  and `export`. A failing `mnt` raises `OSError` whose `errno` is a
  `MntError`.
- `nfsmamont.allocator`: `Allocator(size, count)`, a pool of `count`
  buffers of `size` bytes. `await allocate(n)` returns a `Slice` covering
  `n` bytes (waiting while buffers are in use) or `None` when `n` exceeds
  the pool's capacity. Iterating a `Slice` yields writable `memoryview`s;
  releasing it, directly or by leaving its `with` block, zeroes the
  buffers and returns them to the pool.
- `nfsmamont.read_buffer`: `CountBuffer`, the double-buffered reader the
  parser uses over any object with an `async read(n)` method.
- `nfsmamont.arguments`: `Arguments`, a decoded call as an `ArgumentKind`
  and its `args` record (`None` for procedures without arguments).
- `nfsmamont.parser`: `RpcParser`, which reads whole messages and returns
  `Arguments`.

## Parsing procedure arguments

```python
import io

from nfsmamont.args_basic import parse_lookup_args

data = bytes([
    0x00, 0x00, 0x00, 0x08, 0x01, 0x02, 0x03, 0x04,
    0x05, 0x06, 0x07, 0x08, 0x00, 0x00, 0x00, 0x04,
    *b"test",
])
args = parse_lookup_args(io.BytesIO(data))
print(args.name)  # test
```

## Parsing messages from a connection

```python
import asyncio

from nfsmamont.allocator import Allocator
from nfsmamont.errors import RpcError
from nfsmamont.parser import RpcParser


async def serve(reader: asyncio.StreamReader) -> None:
    parser = RpcParser(reader, Allocator(4096, 64))
    while True:
        try:
            arguments = await parser.parse_message()
        except RpcError as error:
            print("rejected:", error)
            continue
        print(arguments.kind, arguments.args)
```

Frames must be a single last fragment of at most 2500 bytes (the WRITE data
excepted, which goes into allocator buffers); otherwise `IoError` is raised.
Only `AUTH_NONE` credentials are accepted; any other flavor raises
`AuthError` with `AuthStat.BAD_CRED`. When a call fails at the protocol
level (wrong message type, RPC version, program, program version, procedure
or authentication), the parser skips the rest of the frame, so the next
call on the same stream can still be read.

## What it does not do

The package decodes calls only. It does not listen for connections, does
not encode or send replies, and has no file system behind the NFSv3
procedures: acting on the decoded `Arguments` is left to the caller.