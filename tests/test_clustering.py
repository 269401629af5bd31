import numpy as np
import pytest

from fire_events.config import ConfigurationError
from fire_events.events import clustering
from fire_events.events.clustering import find_clusters
from fire_events.events.types import Detection


def _random_detections(seed=7, n=200):
    """Detections scattered around a few fire centers plus background noise."""
    rng = np.random.default_rng(seed)
    centers = [(-42.0, -71.5), (-42.05, -71.45), (-41.9, -71.7)]
    detections = []
    for i in range(n):
        if i % 5 == 0:
            lat = rng.uniform(-42.5, -41.5)
            lon = rng.uniform(-72.0, -71.0)
        else:
            c_lat, c_lon = centers[i % len(centers)]
            lat = c_lat + rng.normal(0, 0.005)
            lon = c_lon + rng.normal(0, 0.005)
        detections.append(Detection(lat=lat, lon=lon, radiative_power=float(rng.uniform(0, 20))))
    return detections


def test_tight_group_forms_one_cluster(make_cluster):
    detections = make_cluster(5, spacing_m=100)
    assert find_clusters(detections, eps_meters=1500, min_pts=4) == [[0, 1, 2, 3, 4]]


def test_group_below_min_pts_is_noise(make_cluster):
    detections = make_cluster(3, spacing_m=50)
    assert find_clusters(detections, eps_meters=1500, min_pts=4) == []


def test_default_parameters(make_cluster):
    assert find_clusters(make_cluster(5)) == [[0, 1, 2, 3, 4]]
    assert find_clusters(make_cluster(4)) == []


def test_separate_groups_in_index_order(make_cluster):
    first = make_cluster(5, spacing_m=100)
    second = make_cluster(6, spacing_m=100, north_m=50_000)
    clusters = find_clusters(first + second)

    assert len(clusters) == 2
    assert sorted(clusters[0]) == [0, 1, 2, 3, 4]
    assert sorted(clusters[1]) == [5, 6, 7, 8, 9, 10]


def test_noise_point_joins_later_cluster_as_border(make_detection, make_cluster):
    # Visited first with a single neighbor, so initially noise
    border = make_detection(east_m=1850)
    core = make_cluster(5, spacing_m=100)
    clusters = find_clusters([border] + core)

    assert len(clusters) == 1
    assert sorted(clusters[0]) == [0, 1, 2, 3, 4, 5]


def test_border_point_does_not_extend_cluster(make_detection, make_cluster):
    core = make_cluster(5, spacing_m=100)
    border = make_detection(east_m=1850)
    beyond = make_detection(east_m=3300)  # within eps of border only
    clusters = find_clusters(core + [border, beyond])

    assert len(clusters) == 1
    assert 6 not in clusters[0]
    assert 5 in clusters[0]


def test_chain_of_core_points_expands(make_cluster):
    detections = make_cluster(30, spacing_m=400)
    clusters = find_clusters(detections)
    assert len(clusters) == 1
    assert sorted(clusters[0]) == list(range(30))


def test_clustering_is_deterministic():
    detections = _random_detections()
    first = find_clusters(detections)
    second = find_clusters(list(detections))
    assert first == second


@pytest.mark.parametrize("min_pts", [1, 2, 4, 8])
def test_every_cluster_meets_min_pts(min_pts):
    detections = _random_detections(seed=11)
    clusters = find_clusters(detections, eps_meters=800, min_pts=min_pts)
    assert clusters
    assert all(len(members) >= min_pts for members in clusters)


def test_clusters_are_disjoint():
    clusters = find_clusters(_random_detections(seed=3))
    members = [idx for cluster in clusters for idx in cluster]
    assert len(members) == len(set(members))


def test_row_wise_neighborhoods_match_precomputed(monkeypatch):
    detections = _random_detections(seed=5)
    expected = find_clusters(detections)

    monkeypatch.setattr(clustering, "PRECOMPUTED_MATRIX_LIMIT", 0)
    assert find_clusters(detections) == expected


def test_nan_coordinates_are_noise(make_cluster):
    detections = make_cluster(5) + [Detection(lat=float("nan"), lon=-71.5)]
    assert find_clusters(detections) == [[0, 1, 2, 3, 4]]


def test_empty_input():
    assert find_clusters([]) == []


@pytest.mark.parametrize("eps", [0, -10, float("nan"), float("inf")])
def test_invalid_eps_is_rejected(make_cluster, eps):
    with pytest.raises(ConfigurationError):
        find_clusters(make_cluster(5), eps_meters=eps)


@pytest.mark.parametrize("min_pts", [0, -1, 2.5])
def test_invalid_min_pts_is_rejected(make_cluster, min_pts):
    with pytest.raises(ConfigurationError):
        find_clusters(make_cluster(5), min_pts=min_pts)


def test_invalid_parameters_rejected_even_for_empty_input():
    with pytest.raises(ConfigurationError):
        find_clusters([], eps_meters=0)
