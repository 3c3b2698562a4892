from datetime import datetime, timedelta, timezone
import sqlite3

import pytest

from oceagpx.models import GeoPoint, Track

T0 = datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


def make_points(n, step_s=10, start=T0, lat0=35.0, lon0=135.0):
    return tuple(
        GeoPoint(lat0 + i * 0.001, lon0 + i * 0.001, start + timedelta(seconds=i * step_s), float(i))
        for i in range(n)
    )


def make_track(n, record_id=1, name="track", **kw):
    return Track(record_id, name, make_points(n, **kw))


SCHEMA = """
CREATE TABLE "LCHFIL" (
    "LCHレコードID" INTEGER PRIMARY KEY,
    "LCH記録名" TEXT,
    "LCH開始時刻" TEXT,
    "LCH終了時刻" TEXT,
    "LCH航行距離" REAL,
    "LCH表示F" INTEGER
);
CREATE TABLE "LOCFIL" (
    "LOCID" INTEGER PRIMARY KEY,
    "LOCレコードID" INTEGER,
    "LOC緯度" REAL,
    "LOC経度" REAL,
    "LOC時刻" TEXT,
    "LOC速度" REAL
);
"""


@pytest.fixture
def navlog_db(tmp_path):
    """Three records with points (one with a NULL speed), one empty record."""
    db_path = tmp_path / "navlog.db"
    conn = sqlite3.connect(str(db_path))
    conn.executescript(SCHEMA)
    conn.executemany(
        'INSERT INTO "LCHFIL" VALUES (?,?,?,?,?,?)',
        [
            (1, "Morning <run>", "2024-01-01 09:00:00.000", "2024-01-01 09:00:30.000", 1.5, 1),
            (2, "Harbor", "2024-01-03 18:00:00.000", "2024-01-03 18:00:20.000", 0.8, 1),
            (3, "Empty", "2023-12-31 08:00:00.000", None, None, 0),
            (4, "No log speed", "2022-06-01 10:00:00.000", "2022-06-01 10:00:10.000", 0.1, 1),
        ],
    )
    conn.executemany(
        'INSERT INTO "LOCFIL" ("LOCレコードID", "LOC緯度", "LOC経度", "LOC時刻", "LOC速度") VALUES (?,?,?,?,?)',
        [
            # inserted out of order on purpose
            (1, 35.002, 135.002, "2024-01-01 09:00:20.000", 4.0),
            (1, 35.000, 135.000, "2024-01-01 09:00:00.000", 3.0),
            (1, 0.0, 0.0, "2024-01-01 09:00:05.000", 0.0),
            (1, 35.001, 0.0, "2024-01-01 09:00:07.000", 0.0),
            (1, 35.001, 135.001, "2024-01-01 09:00:10.000", 3.5),
            (1, 35.003, 135.003, "2024-01-01 09:00:30.000", 4.5),
            (2, 34.500, 135.400, "2024-01-03 18:00:00.000", 1.0),
            (2, 34.501, 135.401, "2024-01-03 18:00:20.000", 1.2),
            (4, 33.900, 130.900, "2022-06-01 10:00:00.000", None),
            (4, 33.901, 130.901, "2022-06-01 10:00:10.000", 2.0),
        ],
    )
    conn.commit()
    conn.close()
    return db_path
