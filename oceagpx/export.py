from pathlib import Path
from typing import List, Optional, Sequence

from oceagpx.config import get_timezone, load_config
from oceagpx.db import load_tracks
from oceagpx.gpx_writer import generate_gpx, merged_filename, single_filename
from oceagpx.models import ExportResult, ThinningInfo, Track
from oceagpx.thinning import thin_points, thin_tracks


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def export_single(tracks: Sequence[Track], output_dir: Path, max_points: int) -> List[ExportResult]:
    """One GPX file per track, each thinned to ``max_points`` on its own."""
    results = []
    used = set()
    for track in tracks:
        name = single_filename(track)
        if name in used:
            # same name, same start minute: keep both files
            stem = name[:-len(".gpx")]
            renamed = f"{stem}_{track.record_id}.gpx"
            print(f"[export] {name} already written in this export; using {renamed}")
            name = renamed
        used.add(name)
        out_path = Path(output_dir) / name
        try:
            res = thin_points(track.points, max_points)
            _write(out_path, generate_gpx([Track(track.record_id, track.name, res.points)]))
        except OSError as e:
            results.append(ExportResult(success=False, error=str(e)))
            continue

        info = None
        if res.thinned:
            info = ThinningInfo(res.original_count, res.exported_count, res.interval_seconds)
        results.append(ExportResult(success=True, file_path=str(out_path), thinning_info=info))
    return results


def export_merged(tracks: Sequence[Track], output_dir: Path, max_points: int) -> ExportResult:
    """All tracks in one GPX file, sharing ``max_points`` proportionally."""
    if not tracks:
        return ExportResult(success=False, error="no records to export")

    out_path = Path(output_dir) / merged_filename(tracks)
    thinned, original_total, exported_total, interval = thin_tracks(tracks, max_points)
    try:
        _write(out_path, generate_gpx(thinned))
    except OSError as e:
        return ExportResult(success=False, error=str(e))

    info = None
    if original_total != exported_total:
        info = ThinningInfo(original_total, exported_total, interval)
    return ExportResult(success=True, file_path=str(out_path), thinning_info=info)


def _report(res: ExportResult) -> None:
    if not res.success:
        print(f"[export] failed: {res.error}")
        return
    line = f"[export] wrote {res.file_path}"
    info = res.thinning_info
    if info is not None:
        line += f" ({info.original_points} -> {info.exported_points} points"
        if info.interval_seconds is not None:
            line += f", ~{info.interval_seconds}s apart"
        line += ")"
    print(line)


def run(
    record_ids: Sequence[int],
    config_path: str = "config.yaml",
    merged: bool = False,
    output_dir: Optional[str] = None,
) -> List[ExportResult]:
    cfg = load_config(config_path)
    db_path = Path(cfg["paths"]["db_path"])
    out_dir = Path(output_dir or cfg["paths"]["output_dir"] or ".")
    max_points = int(cfg["export"]["max_points"])

    tracks = load_tracks(db_path, record_ids, get_timezone(cfg))
    if merged:
        results = [export_merged(tracks, out_dir, max_points)]
    else:
        results = export_single(tracks, out_dir, max_points)

    for res in results:
        _report(res)
    return results
