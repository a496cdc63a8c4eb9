"""
Tests for document mapping and record models
"""

from bson import ObjectId

from recordstore.db.mongo import map_document
from recordstore.models import Stream, User


def test_map_document_moves_id_to_string():
    oid = ObjectId()
    doc = {"_id": oid, "login": "alice", "bio": "hi"}

    mapped = map_document(doc)

    assert mapped == {"login": "alice", "bio": "hi", "_id": str(oid)}
    assert doc["_id"] is oid


def test_map_document_round_trip():
    """Payload and identifier are recovered from the mapped record"""
    oid = ObjectId()
    payload = {"streamDate": "2024-01-01", "segments": [{"title": "intro", "minutes": 5}], "live": False}

    mapped = map_document({"_id": oid, **payload})

    assert {k: v for k, v in mapped.items() if k != "_id"} == payload
    assert mapped["_id"] == str(oid)


def test_map_document_none():
    assert map_document(None) is None


def test_user_to_document_drops_id_and_keeps_extra_fields():
    user = User.model_validate({"_id": "abc", "login": "alice", "bio": "hi", "followers": 3})

    assert user.record_id == "abc"
    assert user.to_document() == {"login": "alice", "bio": "hi", "followers": 3}


def test_stream_uses_stream_date_alias():
    stream = Stream.model_validate({"streamDate": "2024-01-01", "title": "Launch"})

    assert stream.stream_date == "2024-01-01"
    assert stream.record_id is None
    assert stream.to_document() == {"streamDate": "2024-01-01", "title": "Launch"}
    assert Stream(streamDate="2024-01-01").to_document() == {"streamDate": "2024-01-01"}
