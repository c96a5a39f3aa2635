import pytest

from nupiz.extension import NativeError, Runtime
from nupiz.veclib import (
    Vector,
    import_vec_lib,
    vec,
    vec_append,
    vec_at,
    vec_find,
    vec_from,
    vec_insert,
    vec_pop,
    vec_remove,
    vec_size,
)


@pytest.fixture
def runtime():
    return Runtime()


def test_vec_holds_arguments(runtime):
    v = vec(runtime, [1.0, "a", None])
    assert v.items == [1.0, "a", None]
    assert vec_size(runtime, [v]) == 3


def test_vec_from_string_splits_characters(runtime):
    v = vec_from(runtime, ["abc"])
    assert v.items == ["a", "b", "c"]


def test_vec_from_list_copies(runtime):
    source = [1.0, 2.0]
    v = vec_from(runtime, [source])
    source.append(3.0)
    assert v.items == [1.0, 2.0]


def test_vec_from_rejects_other(runtime):
    with pytest.raises(NativeError, match="Expected list or string"):
        vec_from(runtime, [1.0])


def test_append_and_pop_round_trip(runtime):
    v = vec(runtime, [])
    assert vec_append(runtime, [v, "x"]) is None
    vec_append(runtime, [v, "y"])
    assert vec_pop(runtime, [v]) == "y"
    assert v.items == ["x"]


def test_pop_empty_fails(runtime):
    with pytest.raises(NativeError, match="empty"):
        vec_pop(runtime, [Vector()])


def test_find_uses_value_equality(runtime):
    v = vec(runtime, ["a", 2.0, True])
    assert vec_find(runtime, [v, 2]) == 1
    assert vec_find(runtime, [v, "a"]) == 0
    assert vec_find(runtime, [v, 1.0]) == -1


def test_at_with_negative_index(runtime):
    v = vec(runtime, ["a", "b", "c"])
    assert vec_at(runtime, [v, 0]) == "a"
    assert vec_at(runtime, [v, -1]) == "c"


def test_at_out_of_range(runtime):
    v = vec(runtime, ["a"])
    with pytest.raises(NativeError, match="Index out of range."):
        vec_at(runtime, [v, 1])


def test_remove_deletes_item(runtime):
    v = vec(runtime, ["a", "b", "c"])
    vec_remove(runtime, [v, 1])
    assert v.items == ["a", "c"]
    with pytest.raises(NativeError, match="Index out of range."):
        vec_remove(runtime, [v, 5])


def test_insert_before_index(runtime):
    v = vec(runtime, ["a", "c"])
    vec_insert(runtime, [v, "b", 1])
    assert v.items == ["a", "b", "c"]


def test_insert_at_end_rejected(runtime):
    v = vec(runtime, ["a"])
    with pytest.raises(NativeError, match="Index out of range."):
        vec_insert(runtime, [v, "b", 1])


def test_non_number_index_rejected(runtime):
    v = vec(runtime, ["a"])
    with pytest.raises(NativeError, match="number index"):
        vec_at(runtime, [v, "0"])


def test_non_vector_rejected(runtime):
    with pytest.raises(NativeError, match="Expected vector"):
        vec_size(runtime, [["a"]])


def test_wrong_arg_count(runtime):
    with pytest.raises(NativeError, match="Expected 2 args, got 1."):
        vec_append(runtime, [Vector()])


def test_import_defines_functions(runtime):
    runtime.define_library("vec", import_vec_lib)
    assert runtime.import_library("vec") is True
    names = set(runtime.globals["vec"].values)
    assert names == {
        "vec", "vecFrom", "append", "insert", "remove", "pop", "size", "at", "find",
    }