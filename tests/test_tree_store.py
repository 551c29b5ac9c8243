import pytest

from exceptions import AlreadyExists, InvalidName, NotFound
from tree_store import Directory, File, TreeStore, sanitize


@pytest.fixture
def store():
    return TreeStore()


def test_get_tree_creates_empty_root_on_first_touch(store):
    assert store.find_tree("r1") is None
    tree = store.get_tree("r1")
    assert tree == Directory()
    assert store.get_tree("r1") is tree
    assert "r1" in store


def test_create_file_creates_parents_and_empty_file(store):
    store.create_file("r1", "a/b.txt")
    assert store.get_tree("r1").to_json() == {"a": {"b.txt": ""}}
    assert store.read_file("r1", "a/b.txt") == ""


def test_create_file_twice_raises_already_exists(store):
    store.create_file("r1", "a/b.txt")
    with pytest.raises(AlreadyExists):
        store.create_file("r1", "a/b.txt")


def test_create_file_over_directory_raises_already_exists(store):
    store.create_directory("r1", "src")
    with pytest.raises(AlreadyExists):
        store.create_file("r1", "src")


def test_create_directory_is_idempotent(store):
    store.create_file("r1", "src/main.py")
    store.write_file("r1", "src/main.py", "print(1)")
    store.create_directory("r1", "src/lib/util")
    store.create_directory("r1", "src")
    assert store.get_tree("r1").to_json() == {
        "src": {"main.py": "print(1)", "lib": {"util": {}}},
    }


def test_write_then_read_round_trip(store):
    store.create_file("r1", "a/b.txt")
    store.write_file("r1", "a/b.txt", "hello")
    assert store.read_file("r1", "a/b.txt") == "hello"


def test_write_overwrites_directory_leaf(store):
    store.create_directory("r1", "a/b")
    store.write_file("r1", "a/b", "now a file")
    assert store.read_file("r1", "a/b") == "now a file"


def test_write_with_missing_parent_raises_not_found(store):
    store.get_tree("r1")
    with pytest.raises(NotFound):
        store.write_file("r1", "missing/b.txt", "x")
    assert store.get_tree("r1").to_json() == {}


def test_write_without_tree_raises_not_found(store):
    with pytest.raises(NotFound):
        store.write_file("nope", "a.txt", "x")


def test_read_file_not_found_cases(store):
    store.create_file("r1", "a/b.txt")
    with pytest.raises(NotFound):
        store.read_file("r1", "a")
    with pytest.raises(NotFound):
        store.read_file("r1", "a/c.txt")
    with pytest.raises(NotFound):
        store.read_file("r1", "a/b.txt/c")
    with pytest.raises(NotFound):
        store.read_file("other", "a/b.txt")
    assert store.find_tree("other") is None


def test_delete_directory_removes_subtree(store):
    store.create_file("r1", "a/b.txt")
    store.create_file("r1", "a/c/d.txt")
    store.create_file("r1", "keep.txt")
    store.delete_path("r1", "a")
    assert store.get_tree("r1").to_json() == {"keep.txt": ""}
    with pytest.raises(NotFound):
        store.read_file("r1", "a/b.txt")


def test_delete_empty_file(store):
    store.create_file("r1", "empty.txt")
    store.delete_path("r1", "empty.txt")
    assert store.get_tree("r1").to_json() == {}


def test_delete_missing_paths_raise_not_found(store):
    with pytest.raises(NotFound):
        store.delete_path("r1", "a")
    store.create_file("r1", "a/b.txt")
    with pytest.raises(NotFound):
        store.delete_path("r1", "a/zzz")
    with pytest.raises(NotFound):
        store.delete_path("r1", "x/b.txt")


def test_drop_tree(store):
    store.create_file("r1", "a.txt")
    store.drop_tree("r1")
    assert store.find_tree("r1") is None
    store.drop_tree("r1")


def test_sanitize_rejects_bad_names():
    with pytest.raises(InvalidName) as exc_info:
        sanitize({"bad name!": "x"})
    assert exc_info.value.name == "bad name!"


def test_sanitize_rejects_bad_nested_names():
    with pytest.raises(InvalidName):
        sanitize({"src": {"ok.py": "", "no/slash": ""}})


def test_sanitize_coerces_non_string_values():
    tree = sanitize({"ok": 42, "list": [1, 2], "none": None, "dir": {"f": "text", "n": 1.5}})
    assert tree.to_json() == {"ok": "", "list": "", "none": "", "dir": {"f": "text", "n": ""}}


def test_sanitize_heals_typed_tree_in_place():
    tree = Directory({"a.txt": File(42), "src": Directory({"b.txt": File("keep")})})
    healed = sanitize(tree)
    assert healed is tree
    assert tree.to_json() == {"a.txt": "", "src": {"b.txt": "keep"}}
