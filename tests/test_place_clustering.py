from __future__ import annotations

import pytest

from core.models import DayBucket
from core.services.place_clustering_service import (
    ClusteringConfig,
    PlaceClusteringService,
    day_centroid,
)
from core.errors import UndefinedCentroidError


def _day(utc, make_record, day: int, *coords, untagged: int = 0) -> DayBucket:
    assets = [
        make_record(f"d{day}-{i}", utc(2024, 3, day, 10 + i), location=c)
        for i, c in enumerate(coords)
    ]
    assets += [make_record(f"d{day}-u{i}", utc(2024, 3, day, 20)) for i in range(untagged)]
    return DayBucket(date=utc(2024, 3, day), assets=assets)


def test_nearby_days_merge_into_one_cluster(utc, make_record) -> None:
    days = [
        _day(utc, make_record, 1, (35.0000, 139.0000)),
        _day(utc, make_record, 2, (35.0003, 139.0002)),
    ]

    clusters = PlaceClusteringService().cluster_by_place(days, 0.001)

    assert len(clusters) == 1
    (cluster,) = clusters
    assert cluster.bucket_key == (35000, 139000)
    assert [d.date.day for d in cluster.days] == [2, 1]
    assert cluster.centroid.latitude == pytest.approx(35.00015)
    assert cluster.centroid.longitude == pytest.approx(139.0001)


def test_days_without_geotags_are_excluded(utc, make_record) -> None:
    days = [_day(utc, make_record, 1, untagged=2), _day(utc, make_record, 2, (10.0, 20.0))]

    clusters = PlaceClusteringService().cluster_by_place(days)

    assert [[d.date.day for d in c.days] for c in clusters] == [[2]]


def test_untagged_assets_travel_with_their_day(utc, make_record) -> None:
    day = _day(utc, make_record, 3, (10.0, 20.0), untagged=1)

    (cluster,) = PlaceClusteringService().cluster_by_place([day])

    assert {a.id for a in cluster.assets} == {"d3-0", "d3-u0"}


def test_cluster_centroid_weights_days_equally(utc, make_record) -> None:
    busy = _day(utc, make_record, 1, (10.0000, 20.0), (10.0000, 20.0), (10.0000, 20.0))
    quiet = _day(utc, make_record, 2, (10.0004, 20.0))

    (cluster,) = PlaceClusteringService().cluster_by_place([busy, quiet])

    assert cluster.centroid.latitude == pytest.approx(10.0002)


def test_order_is_recent_first_then_grid_key(utc, make_record) -> None:
    days = [
        _day(utc, make_record, 5, (1.0, 1.0)),
        _day(utc, make_record, 9, (2.0, 2.0)),
        DayBucket(
            date=utc(2024, 3, 9),
            assets=[make_record("x", utc(2024, 3, 9, 1), location=(0.5, 0.5))],
        ),
    ]
    service = PlaceClusteringService(ClusteringConfig(grid_resolution_degrees=0.01))

    first = service.cluster_by_place(days)
    second = service.cluster_by_place(list(reversed(days)))

    assert [c.bucket_key for c in first] == [(50, 50), (200, 200), (100, 100)]
    assert [c.bucket_key for c in second] == [c.bucket_key for c in first]
    assert [[a.id for a in c.assets] for c in first] == [[a.id for a in c.assets] for c in second]


def test_centroid_lies_within_member_bounds(utc, make_record) -> None:
    days = [
        _day(utc, make_record, 1, (48.85601, 2.35201), (48.85612, 2.35240)),
        _day(utc, make_record, 2, (48.85630, 2.35215)),
        _day(utc, make_record, 3, (48.85590, 2.35190)),
    ]

    for cluster in PlaceClusteringService().cluster_by_place(days):
        coords = [a.location for d in cluster.days for a in d.assets if a.location]
        lats = [c.latitude for c in coords]
        lons = [c.longitude for c in coords]
        assert min(lats) <= cluster.centroid.latitude <= max(lats)
        assert min(lons) <= cluster.centroid.longitude <= max(lons)


def test_centroid_of_repeated_inexact_coordinates_stays_in_bounds(utc, make_record) -> None:
    days = [_day(utc, make_record, d, (0.1, 20.1)) for d in (1, 2, 3)]

    (cluster,) = PlaceClusteringService().cluster_by_place(days)

    assert cluster.centroid.latitude == 0.1
    assert cluster.centroid.longitude == 20.1


def test_day_centroid_of_inexact_coordinates_stays_in_bounds(utc, make_record) -> None:
    day = _day(utc, make_record, 1, (0.1, 20.1), (0.1, 20.1), (0.1, 20.1))

    centroid = day_centroid(day)

    assert (centroid.latitude, centroid.longitude) == (0.1, 20.1)


def test_day_centroid_requires_a_geotag(utc, make_record) -> None:
    with pytest.raises(UndefinedCentroidError):
        day_centroid(_day(utc, make_record, 1, untagged=1))


def test_non_positive_resolution_is_rejected(utc, make_record) -> None:
    with pytest.raises(ValueError):
        PlaceClusteringService().cluster_by_place([_day(utc, make_record, 1, (1.0, 1.0))], 0)
