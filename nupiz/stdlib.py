"""The ``std`` library: printing, strings, lists and program entry."""

from __future__ import annotations

import time
from typing import Any

from nupiz.chunk import Closure, Function, values_equal
from nupiz.extension import NativeError, Runtime, expect_args


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_string(value: Any) -> str:
    """Return the textual form a value prints as."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value):
        return "%g" % value
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "[" + ", ".join(to_string(item) for item in value) + "]"
    if isinstance(value, Function):
        return "<script>" if value.name is None else f"<fn {value.name}>"
    if isinstance(value, Closure):
        return to_string(value.function)
    return str(value)


def std_print(runtime: Runtime, args: list) -> None:
    """Print the arguments separated by spaces."""
    runtime.stdout.write(" ".join(to_string(arg) for arg in args))


def std_println(runtime: Runtime, args: list) -> None:
    """Print the arguments separated by spaces, then a newline."""
    std_print(runtime, args)
    runtime.stdout.write("\n")


def as_string(runtime: Runtime, args: list) -> str:
    expect_args(args, 1)
    return to_string(args[0])


def length(runtime: Runtime, args: list) -> float:
    expect_args(args, 1)
    arg = args[0]
    if isinstance(arg, (str, list)):
        return float(len(arg))
    raise NativeError("Cannot measure length of given type.")


def _expect_list(value: Any) -> list:
    if not isinstance(value, list):
        raise NativeError("Expected a list as a first arg.")
    return value


def append(runtime: Runtime, args: list) -> float:
    expect_args(args, 2)
    items = _expect_list(args[0])
    items.append(args[1])
    return float(len(items))


def remove(runtime: Runtime, args: list) -> float:
    expect_args(args, 2)
    items = _expect_list(args[0])
    if not _is_number(args[1]):
        raise NativeError("Expected a number index as a second arg.")
    idx = int(args[1])
    if idx < 0:
        idx += len(items)
    if not 0 <= idx < len(items):
        raise NativeError("Index out of bounds.")
    del items[idx]
    return float(len(items))


def pop(runtime: Runtime, args: list) -> Any:
    expect_args(args, 1)
    items = _expect_list(args[0])
    if not items:
        raise NativeError("Given list is empty.")
    return items.pop()


def clock(runtime: Runtime, args: list) -> float:
    expect_args(args, 0)
    return time.process_time()


def as_byte(runtime: Runtime, args: list) -> float:
    expect_args(args, 1)
    arg = args[0]
    if not isinstance(arg, str) or len(arg) != 1:
        raise NativeError("Expected character as argument.")
    return float(ord(arg) & 0xFF)


def cmdargs(runtime: Runtime, args: list) -> list:
    expect_args(args, 0)
    return list(runtime.argv)


def set_main(runtime: Runtime, args: list) -> None:
    """Register the program's main function."""
    expect_args(args, 1)
    func = args[0]
    if not isinstance(func, Closure) or func.upvalue_count > 0:
        raise NativeError("Expected function.")
    if runtime.main_func is not None:
        raise NativeError("Main function already defined.")
    runtime.main_func = func.function


def slice_string(runtime: Runtime, args: list) -> str:
    expect_args(args, 3)
    text, start, end = args
    if not isinstance(text, str) or not _is_number(start) or not _is_number(end):
        raise NativeError("Expected (string, int, int) as arguments.")
    start, end = int(start), int(end)
    if start < 0:
        start += len(text) + 1
    if end < 0:
        end += len(text) + 1
    end = min(end, len(text))
    start = min(start, end)
    if start < 0 or end < 0:
        raise NativeError("Indices out of bounds.")
    return text[start:end]


def find(runtime: Runtime, args: list) -> float:
    expect_args(args, 2)
    if not isinstance(args[0], list):
        raise NativeError("Expected list as first argument.")
    for index, item in enumerate(args[0]):
        if values_equal(item, args[1]):
            return float(index)
    return -1.0


def split(runtime: Runtime, args: list) -> list:
    expect_args(args, 2)
    text, delim = args
    if not isinstance(text, str):
        raise NativeError("Expected string as first argument.")
    if not isinstance(delim, str):
        raise NativeError("Expected string as second argument.")
    if not delim:
        raise NativeError("Delimiter must not be empty.")
    return text.split(delim)


def repeat(runtime: Runtime, args: list) -> str:
    expect_args(args, 2)
    text, count = args
    if not isinstance(text, str):
        raise NativeError("Expected string as first argument.")
    if not _is_number(count):
        raise NativeError("Expected integer as second argument.")
    count = int(count)
    if count == 0:
        return ""
    if count < 0:
        raise NativeError("Repetition count must be non-negative.")
    return text * count


_FUNCTIONS = {
    "print": std_print,
    "println": std_println,
    "asString": as_string,
    "length": length,
    "append": append,
    "remove": remove,
    "pop": pop,
    "clock": clock,
    "asByte": as_byte,
    "cmdargs": cmdargs,
    "main": set_main,
    "slice": slice_string,
    "find": find,
    "split": split,
    "repeat": repeat,
}


def import_std(runtime: Runtime, lib: str) -> bool:
    """Initializer of the ``std`` library."""
    for name, func in _FUNCTIONS.items():
        runtime.define_function(lib, name, func)
    return True