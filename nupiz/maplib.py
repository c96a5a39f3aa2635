"""The ``maps`` library: hash maps keyed by language values."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, Iterator

from nupiz.chunk import values_equal
from nupiz.extension import NativeError, Runtime, expect_args
from nupiz.veclib import Vector


class _Key:
    """Wraps a value so that hashing follows language equality."""

    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value

    def __hash__(self) -> int:
        value = self.value
        if value is None:
            return hash(None)
        if isinstance(value, bool):
            return hash(("bool", value))
        if isinstance(value, (int, float)):
            return hash(float(value))
        if isinstance(value, str):
            return hash(("str", value))
        return id(value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Key) and values_equal(self.value, other.value)


class ValueMap(MutableMapping):
    """A mapping whose keys compare by language equality."""

    def __init__(self) -> None:
        self._data: dict[_Key, Any] = {}

    def __getitem__(self, key: Any) -> Any:
        return self._data[_Key(key)]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._data[_Key(key)] = value

    def __delitem__(self, key: Any) -> None:
        del self._data[_Key(key)]

    def __iter__(self) -> Iterator[Any]:
        return (wrapped.value for wrapped in self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return _Key(key) in self._data

    def __str__(self) -> str:
        return f"<map of {len(self._data)}>"


def _expect_map(value: Any, message: str = "Expected map as first argument.") -> ValueMap:
    if not isinstance(value, ValueMap):
        raise NativeError(message)
    return value


def map_new(runtime: Runtime, args: list) -> ValueMap:
    """Build a map from alternating keys and values; the first of duplicates wins."""
    if len(args) % 2 == 1:
        raise NativeError("Not every key has a value pair.")
    result = ValueMap()
    for key, value in zip(args[::2], args[1::2]):
        result.setdefault(key, value)
    return result


def map_put(runtime: Runtime, args: list) -> None:
    expect_args(args, 3)
    _expect_map(args[0])[args[1]] = args[2]


def map_emplace(runtime: Runtime, args: list) -> bool:
    """Insert only if absent; return whether the value was inserted."""
    expect_args(args, 3)
    mapping = _expect_map(args[0])
    if args[1] in mapping:
        return False
    mapping[args[1]] = args[2]
    return True


def map_get(runtime: Runtime, args: list) -> Any:
    expect_args(args, 2)
    mapping = _expect_map(args[0])
    try:
        return mapping[args[1]]
    except KeyError:
        raise NativeError("Key is not found in map.") from None


def map_remove(runtime: Runtime, args: list) -> bool:
    expect_args(args, 2)
    mapping = _expect_map(args[0])
    if args[1] not in mapping:
        return False
    del mapping[args[1]]
    return True


def map_has(runtime: Runtime, args: list) -> bool:
    expect_args(args, 2)
    return args[1] in _expect_map(args[0])


def map_keys(runtime: Runtime, args: list) -> Vector:
    expect_args(args, 1)
    mapping = _expect_map(args[0], "Expected map as argument.")
    return Vector(list(mapping))


_FUNCTIONS = {
    "map": map_new,
    "put": map_put,
    "emplace": map_emplace,
    "get": map_get,
    "remove": map_remove,
    "has": map_has,
    "keys": map_keys,
}


def import_map_lib(runtime: Runtime, lib: str) -> bool:
    """Initializer of the map library."""
    for name, func in _FUNCTIONS.items():
        runtime.define_function(lib, name, func)
    return True