"""Protocol numbers and wire enumerations of ONC RPC, NFSv3 and MOUNT."""

from __future__ import annotations

import enum
from dataclasses import dataclass

NFS_PROGRAM = 100003
NFS_VERSION = 3

NFS3_FHSIZE = 8
NFS3_COOKIEVERFSIZE = 8
NFS3_CREATEVERFSIZE = 8
NFS3_WRITEVERFSIZE = 8

RPC_VERSION = 2
MAX_AUTH_SIZE = 400

MOUNT_PROGRAM = 100005
MOUNT_VERSION = 3
MOUNT_DIRPATH_LEN = 1024
MOUNT_HOST_NAME_LEN = 255


class NfsProcedure(enum.IntEnum):
    """NFSv3 procedure numbers."""

    NULL = 0
    GETATTR = 1
    SETATTR = 2
    LOOKUP = 3
    ACCESS = 4
    READLINK = 5
    READ = 6
    WRITE = 7
    CREATE = 8
    MKDIR = 9
    SYMLINK = 10
    MKNOD = 11
    REMOVE = 12
    RMDIR = 13
    RENAME = 14
    LINK = 15
    READDIR = 16
    READDIRPLUS = 17
    FSSTAT = 18
    FSINFO = 19
    PATHCONF = 20
    COMMIT = 21


class MountProcedure(enum.IntEnum):
    """MOUNT version 3 procedure numbers."""

    NULL = 0
    MNT = 1
    DUMP = 2
    UMNT = 3
    UMNTALL = 4
    EXPORT = 5


class AcceptStat(enum.IntEnum):
    SUCCESS = 0
    PROG_UNAVAIL = 1
    PROG_MISMATCH = 2
    PROC_UNAVAIL = 3
    GARBAGE_ARGS = 4
    SYSTEM_ERR = 5


class AuthStat(enum.IntEnum):
    OK = 0
    BAD_CRED = 1
    REJECTED_CRED = 2
    BAD_VERF = 3
    REJECTED_VERF = 4
    TOO_WEAK = 5
    INVALID_RESP = 6
    FAILED = 7
    KERB_GENERIC = 8
    TIME_EXPIRE = 9
    TKT_FILE = 10
    DECODE = 11
    NET_ADDR = 12
    RPCSEC_GSS_CRED_PROBLEM = 13
    RPCSEC_GSS_CTX_PROBLEM = 14


class RpcBody(enum.IntEnum):
    CALL = 0
    REPLY = 1


class ReplyBody(enum.IntEnum):
    MSG_ACCEPTED = 0
    MSG_DENIED = 1


class AuthFlavor(enum.IntEnum):
    """Authentication flavors."""

    NONE = 0
    SYS = 1
    SHORT = 2
    DH = 3
    RPC_SEC_GSS = 6


class RejectedReply(enum.IntEnum):
    RPC_MISMATCH = 0
    AUTH_ERROR = 1


class MountStat(enum.IntEnum):
    """Status codes returned by MOUNT operations."""

    MNT_OK = 0
    MNT_ERR_PERM = 1
    MNT_ERR_NO_ENT = 2
    MNT_ERR_IO = 5
    MNT_ERR_ACCESS = 13
    MNT_ERR_NOT_DIR = 20
    MNT_ERR_INVALID = 22
    MNT_ERR_NAME_TOO_LONG = 63
    MNT_ERR_NOT_SUP = 10004
    MNT_ERR_SERVER_FAULT = 10006


@dataclass(frozen=True)
class OpaqueAuth:
    """Authentication credentials or verifier of a call."""

    flavor: AuthFlavor
    body: bytes


@dataclass(frozen=True)
class VersionMismatch:
    """Lowest and highest supported versions of a program."""

    low: int
    high: int