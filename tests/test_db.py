from datetime import datetime, timezone
import sqlite3
from zoneinfo import ZoneInfo

import pytest

from oceagpx.db import get_conn, load_records, load_tracks, parse_local_time, records_frame

TOKYO = ZoneInfo("Asia/Tokyo")


def test_load_records_newest_first(navlog_db):
    records = load_records(navlog_db)
    assert [r.id for r in records] == [2, 1, 3, 4]
    by_id = {r.id: r for r in records}
    # LOCFIL rows are counted before the (0,0) filter
    assert by_id[1].point_count == 6
    assert by_id[2].point_count == 2
    assert by_id[3].point_count == 0
    assert by_id[3].end_time is None
    assert by_id[3].distance is None
    assert by_id[1].name == "Morning <run>"
    assert by_id[1].distance == pytest.approx(1.5)


def test_records_frame_columns(navlog_db):
    df = records_frame(navlog_db)
    assert list(df.columns) == [
        "id", "name", "start_time", "end_time", "distance", "display_flag", "point_count",
    ]
    assert len(df) == 4


def test_load_tracks_filters_and_orders(navlog_db):
    (track,) = load_tracks(navlog_db, [1], TOKYO)
    assert track.record_id == 1
    assert track.name == "Morning <run>"
    assert [(p.lat, p.lon) for p in track.points] == [
        (35.000, 135.000), (35.001, 135.001), (35.002, 135.002), (35.003, 135.003),
    ]
    assert track.points[0].time == datetime(2024, 1, 1, 9, 0, tzinfo=TOKYO)
    assert [p.speed for p in track.points] == [3.0, 3.5, 4.0, 4.5]
    times = [p.time for p in track.points]
    assert times == sorted(times)


def test_load_tracks_keeps_request_order_and_skips_unknown(navlog_db, capsys):
    tracks = load_tracks(navlog_db, [2, 99, 3, 1], TOKYO)
    assert [t.record_id for t in tracks] == [2, 3, 1]
    assert tracks[1].points == ()
    assert "record 99 not found" in capsys.readouterr().out


def test_missing_db(tmp_path):
    with pytest.raises(FileNotFoundError):
        get_conn(tmp_path / "missing.db")


def test_connection_is_read_only(navlog_db):
    conn = get_conn(navlog_db)
    try:
        with pytest.raises(sqlite3.OperationalError):
            conn.execute('DELETE FROM "LOCFIL"')
    finally:
        conn.close()


def test_parse_local_time():
    assert parse_local_time("2021-10-09 08:58:49.000", TOKYO) == datetime(2021, 10, 9, 8, 58, 49, tzinfo=TOKYO)
    aware = datetime(2021, 10, 9, tzinfo=timezone.utc)
    assert parse_local_time(aware, TOKYO) is aware
    assert parse_local_time("2021-10-09 08:58:49").tzinfo is not None


def test_null_speed_passes_through(navlog_db):
    (track,) = load_tracks(navlog_db, [4], TOKYO)
    assert [p.speed for p in track.points] == [None, 2.0]
