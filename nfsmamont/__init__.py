"""Parsing of NFSv3 and MOUNT RPC calls, with a buffer allocator for write data."""

__version__ = "0.0.0"