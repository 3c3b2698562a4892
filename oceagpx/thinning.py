"""Point-count bounded thinning of tracks for GPX export."""

import math
from typing import List, Optional, Sequence, Tuple

from oceagpx.models import GeoPoint, ThinningResult, Track


def round_half_up(x: float) -> int:
    # built-in round() is banker's rounding; exported intervals round .5 up
    return int(math.floor(x + 0.5))


def estimate_interval(points: Sequence[GeoPoint]) -> Optional[int]:
    """Average seconds between consecutive points, or None for < 2 points."""
    if len(points) < 2:
        return None
    span = (points[-1].time - points[0].time).total_seconds()
    return round_half_up(span / (len(points) - 1))


def thin_points(points: Sequence[GeoPoint], max_points: int) -> ThinningResult:
    """Reduce ``points`` to ``max_points`` by fixed-stride index sampling.

    The stride is ``len(points) / max_points``; indexes ``floor(i * stride)``
    for ``i < max_points - 1`` are kept and the last point is always appended,
    so ``max_points == 1`` keeps only the last point.
    """
    points = tuple(points)
    original_count = len(points)

    if max_points <= 0 or original_count <= max_points:
        return ThinningResult(points, original_count, original_count, estimate_interval(points))

    interval = original_count / max_points
    result: List[GeoPoint] = []
    for i in range(max_points - 1):
        result.append(points[int(math.floor(i * interval))])
    if original_count:
        result.append(points[-1])

    return ThinningResult(tuple(result), original_count, len(result), estimate_interval(result))


def proportional_targets(tracks: Sequence[Track], budget: int) -> List[int]:
    """Per-track point targets sharing ``budget`` in proportion to track length.

    Every target is at least 2. Flooring makes the sum drift below ``budget``;
    that drift is left as is.
    """
    total = sum(len(t.points) for t in tracks)
    if total == 0:
        return [2] * len(tracks)
    return [max(2, len(t.points) * budget // total) for t in tracks]


def thin_tracks(
    tracks: Sequence[Track], budget: int
) -> Tuple[List[Track], int, int, Optional[int]]:
    """Thin several tracks against a shared budget for a merged export.

    Returns ``(tracks, original_total, exported_total, interval_seconds)``.
    Tracks are left untouched when there is no budget or the total already fits.
    """
    original_total = sum(len(t.points) for t in tracks)
    if budget <= 0 or original_total <= budget:
        return list(tracks), original_total, original_total, None

    thinned: List[Track] = []
    exported_total = 0
    for track, target in zip(tracks, proportional_targets(tracks, budget)):
        res = thin_points(track.points, target)
        exported_total += res.exported_count
        thinned.append(Track(track.record_id, track.name, res.points))

    total_seconds = 0.0
    total_intervals = 0
    for t in thinned:
        if len(t.points) >= 2:
            total_seconds += (t.points[-1].time - t.points[0].time).total_seconds()
            total_intervals += len(t.points) - 1
    interval = round_half_up(total_seconds / total_intervals) if total_intervals else None

    return thinned, original_total, exported_total, interval
