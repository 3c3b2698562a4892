from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple, Union

Number = Union[int, float]


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float
    time: datetime               # local time
    speed: Optional[Number] = 0

    def __bool__(self) -> bool:
        # (0, x) / (x, 0) means "no fix" in the source logs
        return self.lat != 0 and self.lon != 0


@dataclass(frozen=True)
class Track:
    record_id: int
    name: str
    points: Tuple[GeoPoint, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    @property
    def start(self) -> Optional[datetime]:
        return self.points[0].time if self.points else None

    @property
    def end(self) -> Optional[datetime]:
        return self.points[-1].time if self.points else None


@dataclass(frozen=True)
class RecordData:
    id: int
    name: str
    start_time: Optional[str]
    end_time: Optional[str]
    distance: Optional[float]
    display_flag: Optional[int]
    point_count: int


@dataclass(frozen=True)
class ThinningResult:
    points: Tuple[GeoPoint, ...]
    original_count: int
    exported_count: int
    interval_seconds: Optional[int] = None

    @property
    def thinned(self) -> bool:
        return self.exported_count != self.original_count


@dataclass(frozen=True)
class SimplifiedTrack:
    track: Track
    simplified_points: Tuple[Tuple[float, float], ...]


@dataclass
class ThinningInfo:
    original_points: int
    exported_points: int
    interval_seconds: Optional[int] = None


@dataclass
class ExportResult:
    success: bool
    file_path: Optional[str] = None
    error: Optional[str] = None
    thinning_info: Optional[ThinningInfo] = field(default=None)
