from __future__ import annotations

import json
from pathlib import Path

import pytest

from persistence.disk_store import DiskHouseholdDocumentStore
from persistence.errors import FormatError, IoError, ParseError
from persistence.household_state import HouseholdDataDoc, RawText
from persistence.json_store import decode_document, encode_document, read_document, write_payload

from conftest import make_document, make_household


def test_missing_file_loads_default_document(tmp_path: Path):
    doc = read_document(tmp_path / "nope.json")
    assert doc.households == []
    assert doc.settings.theme == "light"
    assert doc.settings.auto_backup is True
    assert doc.settings.backup_count == 10
    assert doc.settings.last_file_path is None
    assert doc.version == "1.0.0"


def test_non_json_content_is_a_format_error(tmp_path: Path):
    path = tmp_path / "data.json"
    path.write_text("not json", encoding="utf-8")
    with pytest.raises(FormatError) as exc:
        read_document(path)
    assert exc.value.path == str(path)


def test_malformed_json_is_a_parse_error(tmp_path: Path):
    path = tmp_path / "data.json"
    path.write_text("{bad", encoding="utf-8")
    with pytest.raises(ParseError) as exc:
        read_document(path)
    assert "Failed to parse JSON" in exc.value.message


def test_leading_whitespace_is_not_a_data_file():
    with pytest.raises(FormatError):
        decode_document('  {"households": []}')


def test_invalid_utf8_is_a_format_error(tmp_path: Path):
    path = tmp_path / "data.json"
    path.write_bytes(b"{\xff\xfe}")
    with pytest.raises(FormatError):
        read_document(path)


def test_schema_violations_are_parse_errors():
    doc = make_document(1).to_disk_doc()
    doc["households"][0]["review_status"] = "Pending"
    with pytest.raises(ParseError):
        decode_document(json.dumps(doc))

    doc = make_document(1).to_disk_doc()
    doc["settings"]["theme"] = "solarized"
    with pytest.raises(ParseError):
        decode_document(json.dumps(doc))

    doc = make_document(1).to_disk_doc()
    doc["settings"]["backup_count"] = -1
    with pytest.raises(ParseError):
        decode_document(json.dumps(doc))


def test_duplicate_household_ids_are_rejected():
    doc = make_document(1).to_disk_doc()
    doc["households"].append(make_household(1, household_name="Impostor").model_dump(mode="json"))
    with pytest.raises(ParseError) as exc:
        decode_document(json.dumps(doc))
    assert "duplicate household id 1" in exc.value.message


def test_encode_decode_preserves_document():
    doc = make_document(1, 2, 3, theme="dark", auto_backup=False, backup_count=4, last_file_path="/tmp/x.json")
    doc.households[1].last_review_date = "2023-11-30"
    doc.households[2].review_type = "Required"
    doc.households[2].review_status = "Overdue"
    assert decode_document(encode_document(doc)) == doc


def test_encode_is_pretty_printed_in_field_order():
    text = encode_document(HouseholdDataDoc())
    assert text == (
        "{\n"
        '  "households": [],\n'
        '  "settings": {\n'
        '    "last_file_path": null,\n'
        '    "theme": "light",\n'
        '    "auto_backup": true,\n'
        '    "backup_count": 10\n'
        "  },\n"
        '  "version": "1.0.0"\n'
        "}"
    )


def test_save_document_then_load(tmp_path: Path, household_doc: HouseholdDataDoc):
    store = DiskHouseholdDocumentStore(tmp_path / "households.json")
    store.save(household_doc)
    assert store.path.read_text(encoding="utf-8") == encode_document(household_doc)
    assert store.load() == household_doc


def test_raw_text_is_written_verbatim(tmp_path: Path):
    path = tmp_path / "export.csv"
    csv = "Household,Status\r\nSmith,Completed\r\n"
    write_payload(path, RawText(csv))
    assert path.read_bytes() == csv.encode("utf-8")


def test_save_overwrites_existing_file(tmp_path: Path, household_doc: HouseholdDataDoc):
    path = tmp_path / "households.json"
    path.write_text("x" * 10_000, encoding="utf-8")
    write_payload(path, household_doc)
    assert read_document(path) == household_doc


def test_write_failure_is_an_io_error(tmp_path: Path, household_doc: HouseholdDataDoc):
    with pytest.raises(IoError) as exc:
        write_payload(tmp_path / "missing-dir" / "households.json", household_doc)
    assert "Failed to write file" in exc.value.message
