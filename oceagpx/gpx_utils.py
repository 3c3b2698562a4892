from pathlib import Path
import itertools
import math
from typing import List, Sequence, Tuple

import gpxpy

from oceagpx.models import SimplifiedTrack, Track

LatLon = Tuple[float, float]


def gpx_to_polyline(gpx_path: Path) -> List[LatLon]:
    """Track vertices of a GPX file, then route points, as (lat, lon)."""
    if not gpx_path or not Path(gpx_path).exists():
        return []
    with open(gpx_path, 'r', encoding='utf-8') as f:
        gpx = gpxpy.parse(f)
    track_pts = (p for trk in gpx.tracks for seg in trk.segments for p in seg.points)
    route_pts = (p for rte in gpx.routes for p in rte.points)
    return [
        (p.latitude, p.longitude)
        for p in itertools.chain(track_pts, route_pts)
        if p.latitude is not None and p.longitude is not None
    ]


def perpendicular_distance(p: LatLon, a: LatLon, b: LatLon) -> float:
    """Distance from ``p`` to the line through ``a`` and ``b``, in degrees.

    Flat lat/lon space, good enough for drawing. The projection is not clamped
    to the segment; a zero-length chord falls back to the distance to ``a``.
    """
    (y0, x0), (y1, x1), (y2, x2) = p, a, b
    dx, dy = x2 - x1, y2 - y1
    if dx == 0 and dy == 0:
        return math.hypot(x0 - x1, y0 - y1)
    t = ((x0 - x1) * dx + (y0 - y1) * dy) / (dx * dx + dy * dy)
    return math.hypot(x0 - (x1 + t * dx), y0 - (y1 + t * dy))


# Ramer–Douglas–Peucker simplification

def simplify(points: Sequence[LatLon], tolerance: float) -> List[LatLon]:
    """Douglas-Peucker over (lat, lon) pairs.

    Uses an explicit stack of index ranges instead of recursion; ties on the
    farthest point go to the first one found scanning left to right.
    """
    pts = list(points)
    n = len(pts)
    if n <= 2:
        return pts

    keep = [False] * n
    keep[0] = keep[-1] = True
    stack = [(0, n - 1)]
    while stack:
        start, end = stack.pop()
        max_d, idx = 0.0, start
        for i in range(start + 1, end):
            d = perpendicular_distance(pts[i], pts[start], pts[end])
            if d > max_d:
                max_d, idx = d, i
        if max_d > tolerance:
            keep[idx] = True
            stack.append((idx, end))
            stack.append((start, idx))

    return [p for p, k in zip(pts, keep) if k]


def tolerance_for(n: int) -> float:
    # bigger tracks get coarser lines; 0 means draw every point
    if n > 10000:
        return 0.0005
    if n > 5000:
        return 0.0003
    if n > 1000:
        return 0.0001
    return 0


def simplify_for_display(coords: Sequence[LatLon]) -> List[LatLon]:
    tolerance = tolerance_for(len(coords))
    if tolerance > 0:
        return simplify(coords, tolerance)
    return list(coords)


def simplify_track(track: Track) -> SimplifiedTrack:
    coords = [(p.lat, p.lon) for p in track.points]
    return SimplifiedTrack(track, tuple(simplify_for_display(coords)))
