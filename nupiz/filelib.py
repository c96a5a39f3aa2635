"""The ``iofile`` library: opening, reading and writing files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, BinaryIO

from nupiz.extension import NativeError, Runtime, expect_args
from nupiz.stdlib import to_string

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


@dataclass(eq=False)
class FileHandle:
    """An open (or closed) file owned by the running program."""

    fp: BinaryIO | None

    @property
    def closed(self) -> bool:
        return self.fp is None

    def close(self) -> bool:
        """Close the file; return False if it was already closed."""
        if self.fp is None:
            return False
        self.fp.close()
        self.fp = None
        return True

    def __str__(self) -> str:
        return "<file closed>" if self.closed else "<file>"


def _binary_mode(mode: str) -> str:
    if "b" in mode:
        return mode
    return mode.replace("t", "") + "b"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _expect_open(args: list, expected: int) -> BinaryIO:
    expect_args(args, expected)
    handle = args[0]
    if not isinstance(handle, FileHandle):
        raise NativeError("Expected file pointer.")
    if handle.fp is None:
        raise NativeError("File is closed. Expected open file.")
    return handle.fp


def _size(fp: BinaryIO) -> int:
    fp.seek(0, os.SEEK_END)
    size = fp.tell()
    fp.seek(0)
    return size


def _encode(value: Any) -> bytes:
    return to_string(value).encode(_ENCODING, _ERRORS)


def open_file(runtime: Runtime, args: list) -> FileHandle:
    """Open a file by name with an fopen-style mode."""
    expect_args(args, 2)
    name, mode = args
    if not isinstance(name, str) or not isinstance(mode, str):
        raise NativeError("Expected strings for arguments.")
    try:
        fp = open(name, _binary_mode(mode))
    except (OSError, ValueError) as exc:
        raise NativeError("Failed to open file.") from exc
    return FileHandle(fp)


def close_file(runtime: Runtime, args: list) -> bool:
    """Close a file; return whether it was open."""
    expect_args(args, 1)
    handle = args[0]
    if not isinstance(handle, FileHandle):
        raise NativeError("Expected file pointer.")
    return handle.close()


def read_file(runtime: Runtime, args: list) -> str:
    """Return the whole content of an open file."""
    fp = _expect_open(args, 1)
    try:
        size = _size(fp)
        data = fp.read(size)
        fp.seek(0)
    except OSError as exc:
        raise NativeError("Failed to read file.") from exc
    return data.decode(_ENCODING, _ERRORS)


def file_length(runtime: Runtime, args: list) -> float:
    """Return the size of an open file in bytes."""
    fp = _expect_open(args, 1)
    try:
        return float(_size(fp))
    except OSError as exc:
        raise NativeError("Failed to read file.") from exc


def write_file(runtime: Runtime, args: list) -> float:
    """Append the text form of a value; return the bytes written."""
    fp = _expect_open(args, 2)
    data = _encode(args[1])
    try:
        fp.seek(0, os.SEEK_END)
        written = fp.write(data)
        fp.seek(0)
    except OSError as exc:
        raise NativeError("Failed to write file.") from exc
    return float(written)


def write_file_at(runtime: Runtime, args: list) -> float:
    """Write the text form of a value at an offset from the current position."""
    fp = _expect_open(args, 3)
    if not _is_number(args[2]):
        raise NativeError("Expected index as third argument.")
    data = _encode(args[1])
    try:
        fp.seek(int(args[2]), os.SEEK_CUR)
        written = fp.write(data)
        fp.seek(0)
    except (OSError, ValueError) as exc:
        raise NativeError("Failed to write file.") from exc
    return float(written)


def write_file_byte(runtime: Runtime, args: list) -> float:
    """Append a single byte; return the number of bytes written."""
    fp = _expect_open(args, 2)
    if not _is_number(args[1]):
        raise NativeError("Expected byte as second argument.")
    byte = int(args[1]) & 0xFF
    try:
        fp.seek(0, os.SEEK_END)
        written = fp.write(bytes([byte]))
        fp.seek(0)
    except OSError as exc:
        raise NativeError("Failed to write file.") from exc
    return float(written)


_FUNCTIONS = {
    "openFile": open_file,
    "closeFile": close_file,
    "readFile": read_file,
    "fileLength": file_length,
    "writeFile": write_file,
    "writeFileAt": write_file_at,
    "writeFileByte": write_file_byte,
}


def import_file_lib(runtime: Runtime, lib: str) -> bool:
    """Initializer of the ``iofile`` library."""
    for name, func in _FUNCTIONS.items():
        runtime.define_function(lib, name, func)
    return True