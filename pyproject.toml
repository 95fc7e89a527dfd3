[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nfsmamont"
version = "0.0.0"
description = "Asynchronous parsing of XDR-encoded ONC RPC calls for NFS version 3 and MOUNT servers"
requires-python = ">=3.10"
dependencies = []
keywords = ["nfs", "nfsv3", "rpc", "xdr", "mount", "parser", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Framework :: AsyncIO",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["nfsmamont"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
