"""GPX 1.1 text output and export file naming."""

import re
from datetime import datetime, timezone
from typing import Iterable, Sequence
from xml.sax.saxutils import escape

from oceagpx.models import GeoPoint, Track

CREATOR = "OceaGPX"
GPX_NS = "http://www.topografix.com/GPX/1/1"

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*]')


def escape_xml(s: str) -> str:
    return escape(s, {'"': "&quot;", "'": "&apos;"})


def format_time(dt: datetime) -> str:
    """Local timestamp -> ``YYYY-MM-DDTHH:MM:SSZ`` in UTC.

    Naive datetimes are taken as system local time.
    """
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _trkpt(p: GeoPoint) -> str:
    lines = [
        f'      <trkpt lat="{p.lat}" lon="{p.lon}">',
        f"        <time>{format_time(p.time)}</time>",
    ]
    # NULL LOC速度 rows carry no speed
    if p.speed is not None:
        lines.append(f"        <speed>{p.speed}</speed>")
    lines.append("      </trkpt>")
    return "\n".join(lines)


def _trk(track: Track) -> str:
    trkpts = "\n".join(_trkpt(p) for p in track.points)
    return (
        "  <trk>\n"
        f"    <name>{escape_xml(track.name)}</name>\n"
        "    <trkseg>\n"
        f"{trkpts}\n"
        "    </trkseg>\n"
        "  </trk>"
    )


def generate_gpx(tracks: Iterable[Track]) -> str:
    body = "\n".join(_trk(t) for t in tracks)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<gpx version="1.1" creator="{CREATOR}"\n'
        f'     xmlns="{GPX_NS}">\n'
        f"{body}\n"
        "</gpx>"
    )


def sanitize_filename(name: str) -> str:
    return _UNSAFE_CHARS.sub("_", name)


def single_filename(track: Track) -> str:
    """``{name}_{YYYYMMDD}_{HHMM}.gpx`` keyed off the first point's local time."""
    safe_name = sanitize_filename(track.name)
    if track.start is None:
        return f"{safe_name}.gpx"
    return f"{safe_name}_{track.start.strftime('%Y%m%d_%H%M')}.gpx"


def merged_filename(tracks: Sequence[Track]) -> str:
    starts = [t.start for t in tracks if t.points]
    ends = [t.end for t in tracks if t.points]
    if not starts:
        return "tracks.gpx"

    start_str = min(starts).strftime("%Y%m%d")
    end_str = max(ends).strftime("%Y%m%d")
    if start_str == end_str:
        return f"tracks_{start_str}.gpx"
    return f"tracks_{start_str}_{end_str}.gpx"
