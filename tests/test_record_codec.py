"""Tests for payload normalization and id minting."""

from scholia.adapters.idgen import TimeRandomId
from scholia.adapters.record_codec import new_id, normalize, normalize_many
from scholia.core.model import Note


class FixedIds:
    def new_id(self):
        return "GENERATED"


def test_normalize_complete_record():
    note = normalize(
        {"id": "abc", "title": "T", "content": "C", "createdAt": 100, "updatedAt": 200}
    )
    assert note == Note(id="abc", title="T", content="C", created_at=100, updated_at=200)


def test_normalize_coerces_types():
    note = normalize({"id": 42, "title": 7, "content": None, "createdAt": "150", "updatedAt": 250.9})
    assert note.id == "42"
    assert note.title == "7"
    assert note.content == ""
    assert note.created_at == 150
    assert note.updated_at == 250


def test_normalize_generates_missing_id():
    note = normalize({"title": "x"}, id_generator=FixedIds())
    assert note.id == "GENERATED"

    note = normalize({"id": "", "title": "x"}, id_generator=FixedIds())
    assert note.id == "GENERATED"


def test_normalize_defaults_timestamps_to_now():
    note = normalize({"id": "a", "createdAt": "garbage", "updatedAt": True}, now=5000)
    assert note.created_at == 5000
    assert note.updated_at == 5000


def test_normalize_missing_created_at_follows_updated_at():
    note = normalize({"id": "1", "updatedAt": 100}, now=5000)
    assert note.created_at == 100
    assert note.updated_at == 100


def test_normalize_parses_iso_timestamps():
    note = normalize(
        {"id": "a", "createdAt": "1970-01-01T00:00:01Z", "updatedAt": "1970-01-01T00:00:02+00:00"}
    )
    assert note.created_at == 1000
    assert note.updated_at == 2000


def test_normalize_keeps_created_before_updated():
    note = normalize({"id": "a", "createdAt": 900, "updatedAt": 100})
    assert note.created_at == 900
    assert note.updated_at == 900


def test_normalize_accepts_snake_case_keys():
    note = normalize({"id": "a", "created_at": 10, "updated_at": 20})
    assert (note.created_at, note.updated_at) == (10, 20)


def test_normalize_never_raises_on_junk():
    for junk in (None, 3, "text", ["list"], {"createdAt": float("nan")}):
        note = normalize(junk, id_generator=FixedIds(), now=1)
        assert note.id == "GENERATED"
        assert note.title == ""
        assert note.created_at <= note.updated_at


def test_normalize_accepts_oversized_integers():
    huge = 10**400
    note = normalize({"id": "x", "createdAt": huge, "updatedAt": huge}, now=1)
    assert note.created_at == huge
    assert note.updated_at == huge

    note = normalize({"id": "y", "createdAt": "1e400", "updatedAt": float("inf")}, now=5)
    assert note.created_at == 5
    assert note.updated_at == 5

    note = normalize({"id": 10**5000, "title": 10**5000}, id_generator=FixedIds(), now=1)
    assert isinstance(note.id, str) and note.id
    assert isinstance(note.title, str)


def test_normalize_many_skips_non_mappings():
    notes = normalize_many([{"id": "a"}, "nope", None, {"id": "b"}])
    assert [n.id for n in notes] == ["a", "b"]
    assert normalize_many({"id": "a"}) == []


def test_to_dict_uses_canonical_keys():
    note = Note(id="a", title="t", content="c", created_at=1, updated_at=2)
    assert note.to_dict() == {
        "id": "a",
        "title": "t",
        "content": "c",
        "createdAt": 1,
        "updatedAt": 2,
    }


def test_new_id_shape_and_uniqueness():
    ids = {new_id() for _ in range(500)}
    assert len(ids) == 500
    for value in ids:
        assert value == value.upper()
        assert value.isalnum()


def test_time_random_id_suffix_length():
    gen = TimeRandomId(suffix_len=10)
    a = gen.new_id()
    b = TimeRandomId(suffix_len=2).new_id()
    assert len(a) - len(b) == 8
