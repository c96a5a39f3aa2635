"""Registration of the built-in libraries."""

from __future__ import annotations

from nupiz.extension import Runtime
from nupiz.filelib import import_file_lib
from nupiz.httplib import import_http_lib
from nupiz.stdlib import import_std


def define_all_libraries(runtime: Runtime) -> None:
    """Make the built-in libraries available for import."""
    runtime.define_library("std", import_std)
    runtime.define_library("iofile", import_file_lib)
    runtime.define_library("http", import_http_lib)