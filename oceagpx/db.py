from pathlib import Path
import sqlite3
from datetime import datetime, tzinfo
from typing import Iterable, List, Optional

import pandas as pd

from oceagpx.models import GeoPoint, RecordData, Track

# LCHFIL holds one row per navigation record, LOCFIL the logged fixes.
RECORDS_SQL = """
SELECT
    L."LCHレコードID" AS id,
    L."LCH記録名"     AS name,
    L."LCH開始時刻"   AS start_time,
    L."LCH終了時刻"   AS end_time,
    L."LCH航行距離"   AS distance,
    L."LCH表示F"      AS display_flag,
    COUNT(O."LOCID")  AS point_count
FROM "LCHFIL" L
LEFT JOIN "LOCFIL" O ON L."LCHレコードID" = O."LOCレコードID"
GROUP BY L."LCHレコードID"
ORDER BY L."LCH開始時刻" DESC
"""

RECORD_NAME_SQL = 'SELECT "LCH記録名" FROM "LCHFIL" WHERE "LCHレコードID" = ?'

POINTS_SQL = """
SELECT
    "LOC緯度" AS lat,
    "LOC経度" AS lon,
    "LOC時刻" AS time,
    "LOC速度" AS speed
FROM "LOCFIL"
WHERE "LOCレコードID" = ?
ORDER BY "LOC時刻" ASC
"""


def get_conn(db_path: Path) -> sqlite3.Connection:
    db_path = Path(db_path)
    if not db_path.is_file():
        raise FileNotFoundError(f"database not found: {db_path}")
    return sqlite3.connect(f"file:{db_path.resolve().as_posix()}?mode=ro", uri=True)


def parse_local_time(value, tz: Optional[tzinfo] = None) -> datetime:
    """``2021-10-09 08:58:49.000`` (local wall time) -> aware datetime."""
    dt = value if isinstance(value, datetime) else datetime.fromisoformat(str(value).strip())
    if dt.tzinfo is not None:
        return dt
    if tz is not None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone()


def _none_if_na(v):
    return None if pd.isna(v) else v


def records_frame(db_path: Path) -> pd.DataFrame:
    conn = get_conn(db_path)
    try:
        return pd.read_sql_query(RECORDS_SQL, conn)
    finally:
        conn.close()


def load_records(db_path: Path) -> List[RecordData]:
    df = records_frame(db_path)
    records = []
    for r in df.itertuples(index=False):
        flag = _none_if_na(r.display_flag)
        records.append(RecordData(
            id=int(r.id),
            name=str(r.name),
            start_time=_none_if_na(r.start_time),
            end_time=_none_if_na(r.end_time),
            distance=None if _none_if_na(r.distance) is None else float(r.distance),
            display_flag=None if flag is None else int(flag),
            point_count=int(r.point_count),
        ))
    return records


def load_tracks(db_path: Path, record_ids: Iterable[int], tz: Optional[tzinfo] = None) -> List[Track]:
    """Load tracks for ``record_ids`` in the given order.

    Unknown ids are skipped. Fixes with a zero latitude or longitude are
    dropped; points come back sorted by time.
    """
    conn = get_conn(db_path)
    try:
        tracks = []
        for record_id in record_ids:
            row = conn.execute(RECORD_NAME_SQL, (record_id,)).fetchone()
            if row is None:
                print(f"[db] record {record_id} not found; skipping")
                continue
            points = []
            for lat, lon, ts, speed in conn.execute(POINTS_SQL, (record_id,)):
                if lat is None or lon is None or ts is None:
                    continue
                p = GeoPoint(lat, lon, parse_local_time(ts, tz), speed)
                if p:
                    points.append(p)
            tracks.append(Track(record_id, row[0], tuple(points)))
        return tracks
    finally:
        conn.close()
