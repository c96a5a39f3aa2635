"""The ``vec`` library: growable vectors of values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from nupiz.chunk import values_equal
from nupiz.extension import NativeError, Runtime, expect_args


@dataclass(eq=False)
class Vector:
    """A host-side sequence of language values."""

    items: list[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Any:
        return self.items[index]

    def __str__(self) -> str:
        return f"<vec of {len(self.items)}>"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _expect_vector(value: Any, message: str) -> Vector:
    if not isinstance(value, Vector):
        raise NativeError(message)
    return value


def _resolve_index(value: Any, size: int) -> int:
    index = int(value)
    if index < 0:
        index += size
    if not 0 <= index < size:
        raise NativeError("Index out of range.")
    return index


def vec(runtime: Runtime, args: list) -> Vector:
    """Build a vector holding the arguments."""
    return Vector(list(args))


def vec_from(runtime: Runtime, args: list) -> Vector:
    """Build a vector from the characters of a string or the items of a list."""
    expect_args(args, 1)
    source = args[0]
    if isinstance(source, (str, list)):
        return Vector(list(source))
    raise NativeError("Expected list or string as argument.")


def vec_find(runtime: Runtime, args: list) -> float:
    expect_args(args, 2)
    vector = _expect_vector(args[0], "Expected vector as argument.")
    for index, item in enumerate(vector.items):
        if values_equal(item, args[1]):
            return float(index)
    return -1.0


def vec_append(runtime: Runtime, args: list) -> None:
    expect_args(args, 2)
    vector = _expect_vector(args[0], "Expected vector for first argument.")
    vector.items.append(args[1])


def vec_pop(runtime: Runtime, args: list) -> Any:
    expect_args(args, 1)
    vector = _expect_vector(args[0], "Expected vector as argument.")
    if not vector.items:
        raise NativeError("Vector is empty.")
    return vector.items.pop()


def vec_remove(runtime: Runtime, args: list) -> None:
    expect_args(args, 2)
    vector = _expect_vector(args[0], "Expected vector as first argument.")
    if not _is_number(args[1]):
        raise NativeError("Expected a number index as a second argument.")
    del vector.items[_resolve_index(args[1], len(vector.items))]


def vec_size(runtime: Runtime, args: list) -> float:
    expect_args(args, 1)
    vector = _expect_vector(args[0], "Expected vector as argument.")
    return float(len(vector.items))


def vec_at(runtime: Runtime, args: list) -> Any:
    expect_args(args, 2)
    vector = _expect_vector(args[0], "Expected vector as first argument.")
    if not _is_number(args[1]):
        raise NativeError("Expected a number index as a second argument.")
    return vector.items[_resolve_index(args[1], len(vector.items))]


def vec_insert(runtime: Runtime, args: list) -> None:
    """Insert a value before an existing index: (vector, value, index)."""
    expect_args(args, 3)
    vector = _expect_vector(args[0], "Expected vector as first argument.")
    if not _is_number(args[2]):
        raise NativeError("Expected a number index as a second argument.")
    index = _resolve_index(args[2], len(vector.items))
    vector.items.insert(index, args[1])


_FUNCTIONS = {
    "vec": vec,
    "vecFrom": vec_from,
    "append": vec_append,
    "insert": vec_insert,
    "remove": vec_remove,
    "pop": vec_pop,
    "size": vec_size,
    "at": vec_at,
    "find": vec_find,
}


def import_vec_lib(runtime: Runtime, lib: str) -> bool:
    """Initializer of the vector library."""
    for name, func in _FUNCTIONS.items():
        runtime.define_function(lib, name, func)
    return True