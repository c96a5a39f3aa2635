"""Bytecode chunks, opcodes and the function objects that own them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class OpCode(IntEnum):
    """Bytecode instructions."""

    CONSTANT = 0
    CONSTANT_LONG = 1
    NULL = 2
    DEFINE_GLOBAL = 3
    SET_GLOBAL = 4
    GET_GLOBAL = 5
    SET_LOCAL = 6
    GET_LOCAL = 7
    SET_UPVALUE = 8
    GET_UPVALUE = 9
    LOOP = 10
    JUMP = 11
    JUMP_IF_FALSE = 12
    JUMP_IF_TRUE = 13
    TRUE = 14
    FALSE = 15
    NOT = 16
    EQUAL = 17
    NOT_EQUAL = 18
    GREATER = 19
    GREATER_EQUAL = 20
    LESS = 21
    LESS_EQUAL = 22
    NEGATE = 23
    ADD = 24
    SUBTRACT = 25
    MULTIPLY = 26
    DIVIDE = 27
    RETURN = 28
    POP = 29
    POP_N = 30
    CLOSE_UPVALUE = 31
    CALL = 32
    CLOSURE = 33
    CLASS = 34
    METHOD = 35
    GET_PROPERTY = 36
    SET_PROPERTY = 37
    INVOKE = 38
    INHERIT = 39
    GET_SUPER = 40
    SUPER_INVOKE = 41
    MAKE_LIST = 42
    GET_INDEX = 43
    SET_INDEX = 44
    IMPORT = 45
    UNPACK = 46
    ATTRIBUTE = 47
    IMPORT_FILE = 48


def values_equal(a: Any, b: Any) -> bool:
    """Language equality: null, booleans, numbers and strings by value,
    everything else by identity."""
    if a is None or b is None:
        return a is b
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return float(a) == float(b)
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    return a is b


@dataclass(eq=False)
class Chunk:
    """A sequence of bytecode with run-length encoded line information."""

    code: bytearray = field(default_factory=bytearray)
    line_runs: list[tuple[int, int]] = field(default_factory=list)
    constants: list[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.code)

    def write(self, byte: int, line: int) -> None:
        """Append one byte emitted from source line ``line``."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"byte out of range: {byte}")
        self.code.append(int(byte))
        if self.line_runs and self.line_runs[-1][0] == line:
            last_line, run = self.line_runs[-1]
            self.line_runs[-1] = (last_line, run + 1)
        else:
            self.line_runs.append((line, 1))

    def add_constant(self, value: Any) -> int:
        """Return the index of ``value`` in the constant pool, adding it if new."""
        for index, existing in enumerate(self.constants):
            if values_equal(existing, value):
                return index
        self.constants.append(value)
        return len(self.constants) - 1

    def write_constant(self, value: Any, line: int) -> None:
        """Emit an instruction loading ``value``, using the long form past 255."""
        index = self.add_constant(value)
        if index >= 256:
            self.write(OpCode.CONSTANT_LONG, line)
            for part in index.to_bytes(4, "little")[:3]:
                self.write(part, line)
        else:
            self.write(OpCode.CONSTANT, line)
            self.write(index, line)

    def get_line(self, offset: int) -> int:
        """Return the source line of the byte at ``offset``."""
        if offset >= 0:
            remaining = offset
            for line, run in self.line_runs:
                if remaining < run:
                    return line
                remaining -= run
        raise IndexError(f"offset {offset} outside chunk")


@dataclass(eq=False)
class Function:
    """A compiled function: its arity, name, upvalue count and bytecode."""

    arity: int = 0
    name: str | None = None
    upvalue_count: int = 0
    chunk: Chunk = field(default_factory=Chunk)


@dataclass(eq=False)
class Closure:
    """A function together with its captured upvalues."""

    function: Function
    upvalues: list[Any] = field(default_factory=list)

    @property
    def upvalue_count(self) -> int:
        return self.function.upvalue_count