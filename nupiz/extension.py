"""Runtime state and the machinery for defining and importing libraries."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence, TextIO

from nupiz.chunk import Function

Initializer = Callable[["Runtime", str], bool]
NativeFn = Callable[["Runtime", list], Any]


class NativeError(Exception):
    """Raised by a native function to report a runtime error."""


@dataclass(eq=False)
class Namespace:
    """A named collection of values, some of them public."""

    name: str
    values: dict[str, Any] = field(default_factory=dict)
    publics: set[str] = field(default_factory=set)

    def write(self, name: str, value: Any, public: bool) -> bool:
        """Define ``name``; return False if it already exists."""
        if name in self.values:
            return False
        self.values[name] = value
        if public:
            self.publics.add(name)
        return True

    def __str__(self) -> str:
        return f"<namespace {self.name}>"


@dataclass(eq=False)
class Library:
    """A library that can be imported into a runtime."""

    name: str
    initializer: Initializer
    imported: bool = False
    namespace: Namespace | None = None


@dataclass(eq=False)
class Native:
    """A function implemented by the host, callable from the language."""

    name: str
    func: NativeFn

    def __call__(self, runtime: "Runtime", args: Sequence[Any]) -> Any:
        return self.func(runtime, list(args))

    def __str__(self) -> str:
        return "<native fn>"


@dataclass(eq=False)
class Runtime:
    """Global interpreter state shared by native libraries."""

    libraries: dict[str, Library] = field(default_factory=dict)
    globals: dict[str, Any] = field(default_factory=dict)
    argv: list[str] = field(default_factory=list)
    main_func: Function | None = None
    stdout: TextIO = field(default_factory=lambda: sys.stdout)

    def define_library(self, name: str, initializer: Initializer) -> str:
        """Register a library to be imported later."""
        if name in self.libraries:
            raise ValueError(f"Library '{name}' is already defined.")
        self.libraries[name] = Library(name, initializer)
        return name

    def define_function(self, lib: str, name: str, func: NativeFn) -> str:
        """Define a native function inside an imported library."""
        return self.define_constant(lib, name, Native(name, func))

    def define_constant(self, lib: str, name: str, value: Any) -> str:
        """Define a public value inside an imported library."""
        library = self.libraries.get(lib)
        if library is None or not library.imported or library.namespace is None:
            raise LookupError(f"Undefined library '{lib}'.")
        if not library.namespace.write(name, value, True):
            raise ValueError(f"Redefinition of '{lib}.{name}'.")
        return name

    def import_library(self, name: str) -> bool:
        """Import a library, running its initializer on first import."""
        library = self.libraries.get(name)
        if library is None:
            return False
        if library.imported:
            return True
        library.imported = True
        library.namespace = Namespace(library.name)
        if not library.initializer(self, name):
            return False
        self.globals[library.name] = library.namespace
        return True


def expect_args(args: Sequence[Any], expected: int) -> None:
    """Raise NativeError unless exactly ``expected`` arguments were given."""
    if len(args) != expected:
        raise NativeError(f"Expected {expected} args, got {len(args)}.")