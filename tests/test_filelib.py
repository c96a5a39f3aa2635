import pytest

from nupiz.extension import NativeError, Runtime
from nupiz.filelib import (
    FileHandle,
    close_file,
    file_length,
    import_file_lib,
    open_file,
    read_file,
    write_file,
    write_file_at,
    write_file_byte,
)


@pytest.fixture
def runtime():
    return Runtime()


def _write(runtime, path, text):
    handle = open_file(runtime, [str(path), "w"])
    write_file(runtime, [handle, text])
    close_file(runtime, [handle])


def test_write_then_read_round_trip(runtime, tmp_path):
    path = tmp_path / "a.txt"
    _write(runtime, path, "hello world")
    handle = open_file(runtime, [str(path), "r"])
    assert read_file(runtime, [handle]) == "hello world"
    # reading rewinds, so a second read returns the same
    assert read_file(runtime, [handle]) == "hello world"
    close_file(runtime, [handle])


def test_write_returns_byte_count(runtime, tmp_path):
    handle = open_file(runtime, [str(tmp_path / "b.txt"), "w"])
    assert write_file(runtime, [handle, "abcde"]) == len("abcde")
    close_file(runtime, [handle])


def test_write_appends(runtime, tmp_path):
    path = tmp_path / "c.txt"
    handle = open_file(runtime, [str(path), "w+"])
    write_file(runtime, [handle, "ab"])
    write_file(runtime, [handle, "cd"])
    assert read_file(runtime, [handle]) == "abcd"
    close_file(runtime, [handle])


def test_file_length_matches_content(runtime, tmp_path):
    path = tmp_path / "d.txt"
    _write(runtime, path, "xyz123")
    handle = open_file(runtime, [str(path), "r"])
    assert file_length(runtime, [handle]) == path.stat().st_size
    close_file(runtime, [handle])


def test_write_at_offset(runtime, tmp_path):
    path = tmp_path / "e.txt"
    _write(runtime, path, "abcd")
    handle = open_file(runtime, [str(path), "r+"])
    assert write_file_at(runtime, [handle, "XY", 1]) == 2
    assert read_file(runtime, [handle]) == "aXYd"
    close_file(runtime, [handle])


def test_write_byte(runtime, tmp_path):
    path = tmp_path / "f.bin"
    handle = open_file(runtime, [str(path), "w"])
    assert write_file_byte(runtime, [handle, 65]) == 1
    close_file(runtime, [handle])
    assert path.read_bytes() == bytes([65])


def test_write_number_uses_text_form(runtime, tmp_path):
    path = tmp_path / "g.txt"
    handle = open_file(runtime, [str(path), "w"])
    assert write_file(runtime, [handle, 3.0]) == 1
    close_file(runtime, [handle])
    assert path.read_text() == "3"


def test_close_reports_state(runtime, tmp_path):
    handle = open_file(runtime, [str(tmp_path / "h.txt"), "w"])
    assert close_file(runtime, [handle]) is True
    assert handle.closed
    assert close_file(runtime, [handle]) is False


def test_closed_file_rejected(runtime, tmp_path):
    handle = open_file(runtime, [str(tmp_path / "i.txt"), "w"])
    close_file(runtime, [handle])
    with pytest.raises(NativeError, match="File is closed"):
        read_file(runtime, [handle])


def test_open_missing_file_fails(runtime, tmp_path):
    with pytest.raises(NativeError, match="Failed to open file."):
        open_file(runtime, [str(tmp_path / "missing.txt"), "r"])


def test_open_requires_strings(runtime):
    with pytest.raises(NativeError, match="Expected strings"):
        open_file(runtime, [1.0, "r"])


def test_non_file_rejected(runtime):
    with pytest.raises(NativeError, match="Expected file pointer."):
        read_file(runtime, ["not a file"])
    with pytest.raises(NativeError, match="Expected file pointer."):
        close_file(runtime, [None])


def test_write_at_requires_number(runtime, tmp_path):
    handle = FileHandle(open(tmp_path / "j.txt", "wb"))
    with pytest.raises(NativeError, match="Expected index"):
        write_file_at(runtime, [handle, "x", "1"])
    handle.close()


def test_write_byte_requires_number(runtime, tmp_path):
    handle = FileHandle(open(tmp_path / "k.txt", "wb"))
    with pytest.raises(NativeError, match="Expected byte"):
        write_file_byte(runtime, [handle, "A"])
    handle.close()


def test_wrong_arg_count(runtime):
    with pytest.raises(NativeError, match="Expected 2 args, got 1."):
        open_file(runtime, ["x"])


def test_import_defines_functions(runtime):
    runtime.define_library("iofile", import_file_lib)
    assert runtime.import_library("iofile") is True
    names = set(runtime.globals["iofile"].values)
    assert names == {
        "openFile",
        "closeFile",
        "readFile",
        "fileLength",
        "writeFile",
        "writeFileAt",
        "writeFileByte",
    }