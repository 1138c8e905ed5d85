"""Grid-based place clustering of geotagged day buckets.

Each day is reduced to the mean of its geotagged coordinates, snapped to a
fixed-resolution lat/lon grid, and days sharing a grid cell form one cluster.
Longitude cells are not corrected for latitude.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
import math

from loguru import logger

from core.errors import UndefinedCentroidError
from core.geometry import round_half_away
from core.models import DayBucket, GeoLocation, PlaceCluster

DEFAULT_GRID_RESOLUTION_DEGREES = 0.001  # ~100m


def mean_location(points: list[GeoLocation]) -> GeoLocation:
    """Arithmetic mean of `points` (each point weighs the same).

    Clamped to the points' bounding box so rounding never places the mean
    outside its members.
    """
    if not points:
        raise UndefinedCentroidError("no coordinates to average")
    lats = [p.latitude for p in points]
    lons = [p.longitude for p in points]
    lat = min(max(math.fsum(lats) / len(lats), min(lats)), max(lats))
    lon = min(max(math.fsum(lons) / len(lons), min(lons)), max(lons))
    return GeoLocation(latitude=lat, longitude=lon)


def day_centroid(bucket: DayBucket) -> GeoLocation:
    """Mean coordinate of the day's geotagged assets."""
    points = [a.location for a in bucket.assets if a.location is not None]
    if not points:
        raise UndefinedCentroidError(f"day {bucket.date.date()} has no geotagged assets")
    return mean_location(points)


@dataclass
class ClusteringConfig:
    grid_resolution_degrees: float = DEFAULT_GRID_RESOLUTION_DEGREES


class PlaceClusteringService:
    """Clusters day buckets into places."""

    def __init__(self, config: ClusteringConfig | None = None) -> None:
        self._config = config or ClusteringConfig()

    def bucket_key(self, point: GeoLocation, grid_resolution_degrees: float | None = None) -> tuple[int, int]:
        resolution = self._resolution(grid_resolution_degrees)
        scale = 1.0 / resolution
        return (round_half_away(point.latitude * scale), round_half_away(point.longitude * scale))

    def cluster_by_place(
        self, day_buckets: Iterable[DayBucket], grid_resolution_degrees: float | None = None
    ) -> list[PlaceCluster]:
        """Group day buckets by grid cell of their centroid.

        Args:
            day_buckets: Day buckets in any order.
            grid_resolution_degrees: Cell size; defaults to the configured one.

        Returns:
            Clusters ordered by most recent member day (newest first), ties
            broken by ascending grid key.
        """
        resolution = self._resolution(grid_resolution_degrees)

        members: dict[tuple[int, int], list[tuple[DayBucket, GeoLocation]]] = defaultdict(list)
        for bucket in day_buckets:
            try:
                centroid = day_centroid(bucket)
            except UndefinedCentroidError as ex:
                logger.debug("Excluded from places: {}", ex)
                continue
            members[self.bucket_key(centroid, resolution)].append((bucket, centroid))

        clusters: list[PlaceCluster] = []
        for key, entries in members.items():
            entries.sort(key=lambda e: e[0].date, reverse=True)
            clusters.append(
                PlaceCluster(
                    days=[bucket for bucket, _ in entries],
                    centroid=mean_location([centroid for _, centroid in entries]),
                    bucket_key=key,
                )
            )

        clusters.sort(key=lambda c: c.bucket_key)
        clusters.sort(key=lambda c: c.most_recent_date, reverse=True)
        return clusters

    def _resolution(self, override: float | None) -> float:
        resolution = self._config.grid_resolution_degrees if override is None else override
        if resolution <= 0:
            raise ValueError(f"grid resolution must be positive, got {resolution}")
        return float(resolution)
