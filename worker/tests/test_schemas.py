"""Tests for summary and catalog schemas."""
import json

import pytest

from lecture_sync.errors import InvalidSummaryShapeError, SchemaValidationError
from lecture_sync.schemas.catalog import CatalogEntry, EntryMeta, RemoteFile, SourceInfo, SyncResult
from lecture_sync.schemas.summary import (
    ArrayField,
    MissingField,
    ObjectField,
    ScalarField,
    SummaryResult,
    TextField,
    classify_field,
    normalize_summary_field,
    truncate_summary,
    validate_summary,
)

from conftest import LONG_SUMMARY


def valid_payload(**overrides):
    data = {
        "title": "Introdução a Grafos",
        "summary": LONG_SUMMARY,
        "discipline": "Algoritmos",
        "lectureNumber": 4,
        "theme": "Grafos",
    }
    data.update(overrides)
    return data


def test_summary_result_valid():
    result = SummaryResult.model_validate(valid_payload())

    assert result.title == "Introdução a Grafos"
    assert result.lecture_number == 4
    assert result.discipline == "Algoritmos"


def test_summary_result_nullable_fields():
    result = SummaryResult.model_validate(
        valid_payload(discipline=None, theme=None, lectureNumber=None)
    )

    assert result.discipline is None
    assert result.theme is None
    assert result.lecture_number is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12", 12),
        (" 7 ", 7),
        ("3a", 3),
        ("Aula três", None),
        ("", None),
        (5, 5),
        (4.9, 4),
        (float("nan"), None),
    ],
)
def test_lecture_number_coercion(raw, expected):
    result = SummaryResult.model_validate(valid_payload(lectureNumber=raw))
    assert result.lecture_number == expected


def test_lecture_number_rejects_bool():
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_summary(valid_payload(lectureNumber=True))

    assert exc_info.value.fields == ["lectureNumber"]


def test_classify_field():
    assert classify_field("texto") == TextField("texto")
    assert classify_field(["a", "b"]) == ArrayField(["a", "b"])
    assert classify_field({"text": "a"}) == ObjectField({"text": "a"})
    assert classify_field(42) == ScalarField(42)
    assert classify_field(None) == MissingField()
    assert classify_field("") == MissingField()


def test_normalize_array_summary():
    result = normalize_summary_field({"summary": ["Parte um", "Parte dois"]})
    assert result["summary"] == "Parte um\n\nParte dois"


def test_normalize_object_with_text():
    result = normalize_summary_field({"summary": {"text": "Resumo", "content": "Outro"}})
    assert result["summary"] == "Resumo"


def test_normalize_object_with_content():
    result = normalize_summary_field({"summary": {"content": "Resumo"}})
    assert result["summary"] == "Resumo"


def test_normalize_object_without_text_serializes():
    result = normalize_summary_field({"summary": {"intro": "Olá", "fim": "Tchau"}})
    assert json.loads(result["summary"]) == {"intro": "Olá", "fim": "Tchau"}


def test_normalize_missing_uses_fallback_order():
    result = normalize_summary_field({"resumo": "Do resumo", "content": "Do content", "text": "Do text"})
    assert result["summary"] == "Do resumo"

    result = normalize_summary_field({"content": "Do content", "text": "Do text"})
    assert result["summary"] == "Do content"

    result = normalize_summary_field({"summary": None, "text": "Do text"})
    assert result["summary"] == "Do text"


def test_normalize_empty_array_uses_fallback():
    result = normalize_summary_field({"summary": [], "resumo": "Do resumo"})
    assert result["summary"] == "Do resumo"


def test_normalize_scalar_summary_rejected():
    with pytest.raises(InvalidSummaryShapeError):
        normalize_summary_field({"summary": 42})


def test_normalize_nothing_usable_rejected():
    with pytest.raises(InvalidSummaryShapeError):
        normalize_summary_field({"title": "Sem resumo"})


def test_normalize_non_string_fallback_rejected():
    with pytest.raises(InvalidSummaryShapeError):
        normalize_summary_field({"resumo": {"nested": True}})


def test_normalize_leaves_other_fields_untouched():
    data = {"summary": ["a", "b"], "title": "Título", "lectureNumber": "2", "extra": [1]}

    result = normalize_summary_field(data)

    assert result["title"] == "Título"
    assert result["lectureNumber"] == "2"
    assert result["extra"] == [1]
    # Input is not mutated
    assert data["summary"] == ["a", "b"]


def test_truncate_summary():
    summary = "a" * 4000

    truncated = truncate_summary(summary)

    assert len(truncated) == 3500
    assert truncated == "a" * 3497 + "..."


def test_truncate_summary_within_limit():
    assert truncate_summary("curto") == "curto"


def test_validate_summary_missing_title():
    payload = valid_payload()
    del payload["title"]

    with pytest.raises(SchemaValidationError) as exc_info:
        validate_summary(payload)

    assert exc_info.value.fields == ["title"]


def test_validate_summary_lists_every_field():
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_summary(valid_payload(title="curto", summary="pequeno", discipline=3))

    assert set(exc_info.value.fields) == {"title", "summary", "discipline"}
    assert "title" in str(exc_info.value)


def test_remote_file_accepts_drive_shape():
    file = RemoteFile.model_validate({"id": "abc", "name": "aula.pdf", "mimeType": "application/pdf"})

    assert file.mime_type == "application/pdf"


def test_catalog_entry_defaults():
    entry = CatalogEntry(
        title="Título da aula",
        summary="Resumo",
        source=SourceInfo(drive_file_id="abc", file_name="aula.pdf", mime_type="application/pdf"),
        meta=EntryMeta(discipline="Cálculo"),
    )

    assert entry.id
    assert entry.created_at.tzinfo is not None
    assert entry.meta.lecture_number is None


def test_sync_result_failures_not_shared():
    first = SyncResult()
    second = SyncResult()
    first.failures.append(None)

    assert second.failures == []
