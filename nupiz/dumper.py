"""Serialisation of compiled functions and values into a byte format."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, BinaryIO, Iterable, Mapping

from nupiz.chunk import Chunk, Function
from nupiz.extension import Namespace


class DumpCode(IntEnum):
    """Tags that start each serialised item."""

    NULL = 0
    NUMBER = 1
    BOOL = 2
    STRING = 3
    FUNC = 4
    CHUNK = 5
    NAMESPACE = 6


class DumpError(Exception):
    """Raised when a value of an unsupported type is dumped."""


@dataclass(eq=False)
class Upvalue:
    """A captured variable; only its closed-over value is serialised."""

    closed: Any = None


def _int(i: int) -> bytes:
    return (i & 0xFFFFFFFF).to_bytes(4, "little")


def _dump_string(text: str) -> bytes:
    raw = text.encode("utf-8")
    return bytes([DumpCode.STRING]) + _int(len(raw)) + raw


def _dump_namespace(nspace: Namespace) -> bytes:
    out = bytearray([DumpCode.NAMESPACE])
    out += _dump_string(nspace.name)
    out += _int(len(nspace.values))
    for key, value in nspace.values.items():
        out += _dump_string(key)
        out += dump_value(value)
        out.append(1 if key in nspace.publics else 0)
    return bytes(out)


def _dump_object(obj: Any) -> bytes:
    if isinstance(obj, str):
        return _dump_string(obj)
    if isinstance(obj, Function):
        return dump_function(obj)
    if isinstance(obj, Upvalue):
        return dump_value(obj.closed)
    if isinstance(obj, Namespace):
        return _dump_namespace(obj)
    raise DumpError(f"Unhandled type '{type(obj).__name__}'.")


def dump_function(func: Function) -> bytes:
    """Serialise a function with its name, arity and chunk."""
    out = bytearray([DumpCode.FUNC, func.arity & 0xFF])
    if func.name is None:
        out.append(DumpCode.NULL)
    else:
        out += _dump_string(func.name)
    out.append(func.upvalue_count & 0xFF)
    out += dump_chunk(func.chunk)
    return bytes(out)


def dump_chunk(chunk: Chunk) -> bytes:
    """Serialise line runs, constants and code of a chunk."""
    out = bytearray([DumpCode.CHUNK])
    out += _int(len(chunk.line_runs))
    for line, run in chunk.line_runs:
        out += _int(line)
        out += _int(run)
    out += dump_value_array(chunk.constants)
    out += _int(len(chunk.code))
    out += chunk.code
    return bytes(out)


def dump_value_array(values: Iterable[Any]) -> bytes:
    """Serialise a counted sequence of values."""
    items = list(values)
    out = bytearray(_int(len(items)))
    for value in items:
        out += dump_value(value)
    return bytes(out)


def dump_value(value: Any) -> bytes:
    """Serialise a single value."""
    if value is None:
        return bytes([DumpCode.NULL])
    if isinstance(value, bool):
        return bytes([DumpCode.BOOL, 1 if value else 0])
    if isinstance(value, (int, float)):
        return bytes([DumpCode.NUMBER]) + struct.pack("<d", float(value))
    return _dump_object(value)


def dump_table(table: Mapping[str, Any]) -> bytes:
    """Serialise a string-keyed table of values."""
    out = bytearray(_int(len(table)))
    for key, value in table.items():
        if not isinstance(key, str):
            raise DumpError(f"Unhandled key type '{type(key).__name__}'.")
        out += _dump_string(key)
        out += dump_value(value)
    return bytes(out)


def format_bytes(data: bytes) -> str:
    """Render bytes as space-separated zero-padded decimal numbers."""
    return " ".join(f"{byte:04d}" for byte in data)


def write_dump(fp: BinaryIO, data: bytes) -> bool:
    """Write ``data`` to a binary stream; return whether all of it was written."""
    written = fp.write(data)
    return written == len(data)