from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

from persistence.snapshots import (
    format_snapshot_timestamp,
    is_snapshot_name,
    snapshot_dir,
    snapshot_path_for,
    snapshot_stem,
)

INSTANT = datetime(2024, 3, 5, 10, 15, 30, tzinfo=timezone.utc)


def test_snapshot_path_is_sibling_of_data_file():
    assert snapshot_path_for(Path("/data/house.json"), INSTANT) == Path(
        "/data/house_backup_2024-03-05_10-15-30.json"
    )


def test_timestamp_is_rendered_in_utc():
    plus_two = timezone(timedelta(hours=2))
    assert format_snapshot_timestamp(datetime(2024, 3, 5, 12, 15, 30, tzinfo=plus_two)) == "2024-03-05_10-15-30"
    # naive values are treated as UTC
    assert format_snapshot_timestamp(datetime(2024, 3, 5, 10, 15, 30)) == "2024-03-05_10-15-30"


def test_sub_second_precision_is_dropped():
    a = snapshot_path_for(Path("/data/house.json"), INSTANT)
    b = snapshot_path_for(Path("/data/house.json"), INSTANT + timedelta(milliseconds=900))
    assert a == b


def test_stem_drops_only_final_extension():
    assert snapshot_stem(Path("/data/archive.tar.json")) == "archive.tar"
    assert snapshot_stem(Path("/data/house")) == "house"


def test_stem_falls_back_when_path_has_no_name():
    assert snapshot_stem(Path("/")) == "backup"
    assert snapshot_path_for(Path("/"), INSTANT) == Path("backup_backup_2024-03-05_10-15-30.json")


def test_relative_file_goes_to_current_directory():
    assert snapshot_dir(Path("house.json")) == Path(".")
    assert snapshot_path_for(Path("house.json"), INSTANT) == Path("house_backup_2024-03-05_10-15-30.json")


def test_snapshot_name_recognition():
    assert is_snapshot_name("house_backup_2024-03-05_10-15-30.json", "house")
    assert is_snapshot_name("house_backup_anything.json", "house")
    assert not is_snapshot_name("house.json", "house")
    assert not is_snapshot_name("house_backup_2024-03-05_10-15-30.json.tmp", "house")
    assert not is_snapshot_name("villa_backup_2024-03-05_10-15-30.json", "house")
    assert not is_snapshot_name("House_backup_2024-03-05_10-15-30.json", "house")
