from pathlib import Path
from typing import Optional, Sequence

import folium

from oceagpx.config import get_timezone, load_config
from oceagpx.db import load_tracks
from oceagpx.gpx_utils import gpx_to_polyline, simplify_for_display, simplify_track
from oceagpx.models import SimplifiedTrack, Track

TRACK_COLORS = [
    "#1976d2",  # blue
    "#dc004e",  # red
    "#388e3c",  # green
    "#f57c00",  # orange
    "#7b1fa2",  # purple
    "#0097a7",  # cyan
    "#c2185b",  # pink
    "#512da8",  # deep purple
]
START_COLOR = "#4caf50"
END_COLOR = "#f44336"


def _endpoint_marker(location, fill_color: str, cfg) -> folium.CircleMarker:
    return folium.CircleMarker(
        location=location,
        radius=cfg["map"]["marker_radius"],
        color="#fff",
        weight=2,
        fill=True,
        fill_color=fill_color,
        fill_opacity=1,
    )


def build_track_map(tracks: Sequence[SimplifiedTrack], cfg) -> folium.Map:
    center = [cfg["map"]["center_lat"], cfg["map"]["center_lon"]]
    m = folium.Map(location=center, zoom_start=cfg["map"]["zoom_start"])

    lats, lons = [], []
    for i, st in enumerate(tracks):
        positions = [[lat, lon] for lat, lon in st.simplified_points]
        if not positions:
            continue
        fg = folium.FeatureGroup(name=st.track.name or f"Record {st.track.record_id}", show=True)
        folium.PolyLine(
            locations=positions,
            color=TRACK_COLORS[i % len(TRACK_COLORS)],
            weight=cfg["map"]["track_weight"],
            opacity=cfg["map"]["track_opacity"],
        ).add_to(fg)
        _endpoint_marker(positions[0], START_COLOR, cfg).add_to(fg)
        _endpoint_marker(positions[-1], END_COLOR, cfg).add_to(fg)
        fg.add_to(m)

        # bounds come from the full track when we have it
        coords = [(p.lat, p.lon) for p in st.track.points] or st.simplified_points
        lats.extend(c[0] for c in coords)
        lons.extend(c[1] for c in coords)

    if lats:
        m.fit_bounds([[min(lats), min(lons)], [max(lats), max(lons)]])
    folium.LayerControl().add_to(m)
    return m


def render_tracks(tracks: Sequence[Track], cfg, out_path: Path) -> Path:
    simplified = [simplify_track(t) for t in tracks]
    for st in simplified:
        print(f"[preview] {st.track.name}: {len(st.track.points)} -> {len(st.simplified_points)} vertices")
    m = build_track_map(simplified, cfg)
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    m.save(str(out_path))
    return out_path


def render_gpx_file(gpx_path: Path, cfg, out_path: Path) -> Path:
    """Preview an already exported GPX file the same way."""
    pts = simplify_for_display(gpx_to_polyline(Path(gpx_path)))
    st = SimplifiedTrack(Track(0, Path(gpx_path).stem), tuple(pts))
    m = build_track_map([st], cfg)
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    m.save(str(out_path))
    return out_path


def run(
    record_ids: Sequence[int],
    config_path: str = "config.yaml",
    out_path: Optional[str] = None,
    gpx_path: Optional[str] = None,
) -> Path:
    cfg = load_config(config_path)
    out_path = Path(out_path or cfg["paths"]["preview_html"])
    if gpx_path:
        written = render_gpx_file(Path(gpx_path), cfg, out_path)
    else:
        tracks = load_tracks(Path(cfg["paths"]["db_path"]), record_ids, get_timezone(cfg))
        written = render_tracks(tracks, cfg, out_path)
    print(f"[preview] wrote {written}")
    return written
