# nupiz

Building blocks for the Nupiz scripting language: a tokenizer, bytecode
chunks with run-length line tables, a binary serializer for compiled
functions, a runtime that defines and imports native libraries, and the
native libraries themselves (`std`, `iofile`, `http`, vectors and maps).

## Installation

```
pip install .
```

For development and tests:

```
pip install ".[test]"
pytest
```

## Tokenizing source

```python
from nupiz.scanner import Scanner, TokenType, tokenize

for token in tokenize('let x = "hi"; // comment'):
    print(token.type, token.lexeme, token.line)
```

`tokenize` returns a list of `Token`s ending with `TokenType.EOF`;
iterating a `Scanner` yields the same tokens lazily, and
`Scanner.scan_token()` returns one at a time. Scanning never raises: an
unterminated string or an unexpected character comes back as a token of
type `TokenType.ERROR` whose `lexeme` holds the message.

## Writing bytecode

```python
from nupiz.chunk import Chunk, OpCode

chunk = Chunk()
chunk.write_constant(1.5, line=1)
chunk.write(OpCode.RETURN, line=2)
chunk.get_line(0)   # 1
```

`Chunk.write` rejects bytes outside 0–255 with `ValueError`, and
`get_line` raises `IndexError` for an offset past the end. Constants are
de-duplicated with `values_equal` (null, booleans, numbers and strings by
value, anything else by identity); once a chunk holds 256 constants,
`write_constant` switches to the `CONSTANT_LONG` form with a three-byte
little-endian index. `Function` and `Closure` hold a compiled chunk with
its arity, name and upvalue count.

## Serializing

```python
from nupiz.chunk import Function
from nupiz.dumper import dump_function, format_bytes, write_dump

data = dump_function(Function(name="main"))
print(format_bytes(data))          # "0004 0000 0003 ..."
with open("main.bin", "wb") as fp:
    write_dump(fp, data)
```

`nupiz.dumper` also offers `dump_chunk`, `dump_value`,
`dump_value_array` and `dump_table`. Each item starts with a `DumpCode`
tag; integers are four bytes little-endian and numbers are IEEE doubles.
Strings, functions, `Upvalue`s (their closed-over value) and
`Namespace`s can be dumped; anything else raises `DumpError`.

## Native libraries

A `Runtime` (in `nupiz.extension`) holds libraries, globals, the script's
command-line arguments (`argv`), the registered main function and the
stream that printing writes to (`stdout`). A library is registered with
`define_library` and initialised the first time `import_library` is
called for it; its `Namespace` then becomes a global under the library's
name.

```python
import io

from nupiz.extension import Runtime
from nupiz.manager import define_all_libraries

runtime = Runtime(argv=["script.np"], stdout=io.StringIO())
define_all_libraries(runtime)
runtime.import_library("std")
println = runtime.globals["std"].values["println"]
println(runtime, ["hello", 42])    # writes "hello 42\n"
```

`define_all_libraries` registers `std`, `iofile` and `http`. The vector
and map libraries are not registered by it; add them under a name of
your choice:

```python
from nupiz.maplib import import_map_lib
from nupiz.veclib import import_vec_lib

runtime.define_library("vec", import_vec_lib)
runtime.define_library("maps", import_map_lib)
```

Native functions take the runtime and a list of arguments, and raise
`NativeError` where the script should see a runtime error (wrong argument
count or type, index out of range, missing map key and so on).

- `nupiz.stdlib` (`std`): `print`, `println`, `asString`, `length`,
  `append`, `remove`, `pop`, `clock`, `asByte`, `cmdargs`, `main`,
  `slice`, `find`, `split`, `repeat`; `to_string` gives a value's
  printed form.
- `nupiz.filelib` (`iofile`): `openFile`, `closeFile`, `readFile`,
  `fileLength`, `writeFile`, `writeFileAt`, `writeFileByte`, working on
  `FileHandle` values.
- `nupiz.veclib`: `vec`, `vecFrom`, `append`, `insert`, `remove`, `pop`,
  `size`, `at`, `find` on `Vector` values.
- `nupiz.maplib`: `map`, `put`, `emplace`, `get`, `remove`, `has`,
  `keys` on `ValueMap`, a mapping whose keys compare by language
  equality.
- `nupiz.httplib` (`http`): `get`, `post`, `encodeUrl`, `decodeUrl`,
  `parseUrl` (which returns the host). Network failures come back as an
  error message string rather than an exception.

## HTTP client

`nupiz.httpclient` is a small HTTP/1.1 client over plain sockets:
`http_get`, `http_post`, `http_put`, `http_delete` and `http_patch`
return an `HttpResponse` with `status`, `headers`, `body`, or `error`
set on failure. It has no TLS support, so `https` URLs are only parsed,
not fetched securely. URL helpers include `parse_url` (returning
`UrlComponents`), `url_encode`, `url_decode`, `extract_host`,
`extract_path`, `extract_port`, `is_https`, `get_default_port` and
`build_http_request`.

## What this package does not do

There is no compiler from tokens to bytecode, no virtual machine that
executes chunks, and no command-line program for running scripts. The
package provides the pieces above for use from Python code.