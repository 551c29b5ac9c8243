from backend import CollabBackend
from constants import DEFAULT_CODE


def test_join_creates_room_with_default_code(backend):
    code, users = backend.join("r1", "alice")
    assert code == DEFAULT_CODE == "// start code here"
    assert users == ["alice"]
    assert backend.has_room("r1")
    assert backend.trees.find_tree("r1") is not None


def test_join_is_idempotent_per_user(backend):
    backend.join("r1", "alice")
    backend.join("r1", "bob")
    _, users = backend.join("r1", "alice")
    assert set(users) == {"alice", "bob"}
    assert len(users) == 2


def test_join_returns_current_code(backend):
    backend.join("r1", "alice")
    backend.set_code("r1", "print('hi')")
    code, _ = backend.join("r1", "bob")
    assert code == "print('hi')"


def test_set_code_on_unknown_room_is_noop(backend):
    backend.set_code("ghost", "x")
    assert not backend.has_room("ghost")


def test_leave_returns_remaining_users(backend):
    backend.join("r1", "alice")
    backend.join("r1", "bob")
    assert backend.leave("r1", "alice") == ["bob"]
    assert backend.has_room("r1")


def test_last_leave_discards_room_and_tree(backend):
    backend.join("r1", "alice")
    backend.set_code("r1", "changed")
    backend.trees.create_file("r1", "a/b.txt")

    assert backend.leave("r1", "alice") == []
    assert not backend.has_room("r1")
    assert backend.trees.find_tree("r1") is None

    code, users = backend.join("r1", "carol")
    assert code == "// start code here"
    assert users == ["carol"]
    assert backend.trees.get_tree("r1").to_json() == {}


def test_leave_unknown_room(backend):
    assert backend.leave("ghost", "alice") == []


def test_record_output(backend):
    backend.join("r1", "alice")
    backend.record_output("r1", "hi\n")
    assert backend.get_room("r1").output == "hi\n"
    backend.record_output("ghost", "ignored")
    assert backend.get_room("ghost") is None


def test_custom_default_code():
    backend = CollabBackend(default_code="# python here")
    code, _ = backend.join("r1", "alice")
    assert code == "# python here"
