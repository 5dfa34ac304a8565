"""
StudentIndex tests against a mocked client - request shapes, refresh policy, 404 tolerance.
"""

from unittest.mock import MagicMock

import pytest
from elasticsearch import ConflictError, NotFoundError

from student_search.search.elasticsearch_client import STUDENT_INDEX_SETTINGS, StudentIndex


def _api_error(cls, status: int, body: dict):
    return cls("error", meta=MagicMock(status=status), body=body)


def _search_response(*docs, scores=None):
    scores = scores or [1.0] * len(docs)
    return {
        "took": 1,
        "hits": {
            "total": {"value": len(docs), "relation": "eq"},
            "max_score": max((s for s in scores if s is not None), default=None),
            "hits": [
                {"_index": "student", "_id": doc["id"], "_score": score, "_source": doc}
                for doc, score in zip(docs, scores)
            ],
        },
    }


@pytest.fixture
def index(mock_es) -> StudentIndex:
    return StudentIndex(mock_es, index="student", refresh="wait_for")


def test_reset_ignores_missing_index_and_recreates(index, mock_es):
    index.reset()
    mock_es.options.assert_called_once_with(ignore_status=404)
    mock_es.indices.delete.assert_called_once_with(index="student")
    mock_es.indices.create.assert_called_once_with(index="student", settings=STUDENT_INDEX_SETTINGS)


def test_create_sends_document_with_refresh(index, mock_es, students):
    mock_es.create.return_value = {"_id": "101", "result": "created", "_version": 1}
    result = index.create(students[0])
    assert result.id == "101"
    assert result.result == "created"
    kwargs = mock_es.create.call_args.kwargs
    assert kwargs["index"] == "student"
    assert kwargs["id"] == "101"
    assert kwargs["refresh"] == "wait_for"
    assert kwargs["document"]["conductScore"] == 74


def test_create_conflict_propagates(index, mock_es, students):
    mock_es.create.side_effect = _api_error(ConflictError, 409, {"error": {"type": "version_conflict_engine_exception"}})
    with pytest.raises(ConflictError):
        index.create(students[0])


def test_bulk_create_builds_create_operations(index, mock_es, students):
    mock_es.bulk.return_value = {
        "errors": False,
        "items": [{"create": {"_id": s.id, "status": 201, "result": "created"}} for s in students],
    }
    result = index.bulk_create(students)
    operations = mock_es.bulk.call_args.kwargs["operations"]
    assert operations[0] == {"create": {"_index": "student", "_id": "101"}}
    assert operations[1]["name"] == "Dora"
    assert len(operations) == 8
    assert mock_es.bulk.call_args.kwargs["refresh"] == "wait_for"
    assert result.ids == ["101", "102", "103", "104"]
    assert result.failed == []


def test_bulk_create_reports_item_failures_without_raising(index, mock_es, students):
    conflict = {"type": "version_conflict_engine_exception", "reason": "[102]: document already exists"}
    mock_es.bulk.return_value = {
        "errors": True,
        "items": [
            {"create": {"_id": "101", "status": 201}},
            {"create": {"_id": "102", "status": 409, "error": conflict}},
        ],
    }
    result = index.bulk_create(students[:2])
    assert result.errors
    assert [item.id for item in result.failed] == ["102"]
    assert result.failed[0].error["type"] == "version_conflict_engine_exception"


def test_bulk_create_with_nothing_skips_request(index, mock_es):
    result = index.bulk_create([])
    assert result.items == []
    mock_es.bulk.assert_not_called()


def test_get_found(index, mock_es, students):
    mock_es.get.return_value = {"_id": "103", "found": True, "_source": students[2].to_document()}
    result = index.get("103")
    assert result.found
    assert result.source == students[2]


def test_get_missing_document(index, mock_es):
    mock_es.get.side_effect = _api_error(NotFoundError, 404, {"_index": "student", "_id": "999", "found": False})
    result = index.get("999")
    assert not result.found
    assert result.source is None


def test_get_missing_index_propagates(index, mock_es):
    mock_es.get.side_effect = _api_error(
        NotFoundError, 404, {"error": {"type": "index_not_found_exception"}, "status": 404}
    )
    with pytest.raises(NotFoundError):
        index.get("101")


def test_replace_indexes_whole_document(index, mock_es, students):
    mock_es.index.return_value = {"_id": "101", "result": "updated", "_version": 2}
    student = students[0]
    student.name = "Vincent Jheng"
    result = index.replace(student)
    assert result.result == "updated"
    assert mock_es.index.call_args.kwargs["document"]["name"] == "Vincent Jheng"


def test_delete_missing_document_is_tolerated(index, mock_es):
    mock_es.delete.side_effect = _api_error(NotFoundError, 404, {"_id": "999", "result": "not_found"})
    result = index.delete("999")
    assert result.result == "not_found"


def test_refresh_false_waits_fixed_delay(mock_es, students, monkeypatch):
    sleeps = []
    monkeypatch.setattr("student_search.search.elasticsearch_client.time.sleep", sleeps.append)
    mock_es.create.return_value = {"_id": "101", "result": "created"}
    index = StudentIndex(mock_es, refresh="false", visibility_delay=1.0)
    index.create(students[0])
    assert sleeps == [1.0]
    assert mock_es.create.call_args.kwargs["refresh"] == "false"


def test_wait_for_does_not_sleep(index, mock_es, students, monkeypatch):
    sleeps = []
    monkeypatch.setattr("student_search.search.elasticsearch_client.time.sleep", sleeps.append)
    mock_es.create.return_value = {"_id": "101", "result": "created"}
    index.create(students[0])
    assert sleeps == []


def test_search_translates_from_and_parses_hits(index, mock_es, students_by_id):
    mock_es.search.return_value = _search_response(
        students_by_id["103"].to_document(), students_by_id["102"].to_document(), scores=[None, None]
    )
    body = {"query": {"match_all": {}}, "sort": [{"conductScore": {"order": "desc"}}], "from": 0, "size": 2}
    result = index.search(body)
    mock_es.search.assert_called_once_with(
        index="student",
        query={"match_all": {}},
        sort=[{"conductScore": {"order": "desc"}}],
        from_=0,
        size=2,
    )
    assert [hit.id for hit in result.hits] == ["103", "102"]
    assert result.hits[0].score is None
    assert result.hits[0].source == students_by_id["103"]
    assert result.total == 2
    # caller's body is left untouched
    assert "from" in body


def test_search_rejects_source_that_is_not_a_student(index, mock_es):
    mock_es.search.return_value = {
        "hits": {"total": {"value": 1}, "max_score": 1.0, "hits": [{"_id": "x", "_score": 1.0, "_source": {"id": "x"}}]}
    }
    with pytest.raises(ValueError):
        index.search({"query": {"match_all": {}}})


def test_from_settings_uses_configured_index(mock_es, settings):
    index = StudentIndex.from_settings(settings.model_copy(update={"student_index": "student_ci"}), client=mock_es)
    assert index.index == "student_ci"
    assert index.client is mock_es


def test_refresh_targets_the_index(index, mock_es):
    index.refresh()
    mock_es.indices.refresh.assert_called_once_with(index="student")
