"""
Fire Clustering Module

Groups co-located fire detections into candidate fire events using DBSCAN
with haversine (great-circle) distance.

Points are visited in ascending index order and every neighborhood is listed
in ascending index order, so identical input always yields identical clusters
in the same order. A point whose neighborhood (itself excluded) holds fewer
than min_pts detections is noise; noise can still join a cluster as a border
point but never seeds one.

The expansion is written out instead of calling sklearn.cluster.DBSCAN:
sklearn's min_samples counts the point itself (it would have to be passed
as min_pts + 1), and the explicit loop fixes which cluster claims a border
point reachable from two of them. Only the haversine distances come from
sklearn.
"""

from collections import deque
from typing import Callable, List, Sequence

import numpy as np
from sklearn.metrics import DistanceMetric

from ..config import (
    DEFAULT_EPS_METERS,
    DEFAULT_MIN_PTS,
    EARTH_RADIUS_M,
    validate_clustering_params,
)
from .geo import distance_meters
from .types import Detection

# Above this many points neighborhoods are computed row by row instead of
# from a full precomputed distance matrix
PRECOMPUTED_MATRIX_LIMIT = 1000

# Membership tags
UNASSIGNED = -2
NOISE = -1


def _haversine_distance_matrix(coords: np.ndarray) -> np.ndarray:
    """Pairwise haversine distances in meters; rows with NaN coordinates are inf."""
    n = len(coords)
    finite = np.isfinite(coords).all(axis=1)
    matrix = np.full((n, n), np.inf)

    if finite.any():
        haversine_metric = DistanceMetric.get_metric("haversine")
        coords_rad = np.radians(coords[finite])
        idx = np.flatnonzero(finite)
        matrix[np.ix_(idx, idx)] = haversine_metric.pairwise(coords_rad) * EARTH_RADIUS_M

    return matrix


def _neighborhood_finder(
    coords: np.ndarray, eps_meters: float
) -> Callable[[int], List[int]]:
    """Return a function mapping a point index to its eps-neighbors (self excluded)."""
    if len(coords) < PRECOMPUTED_MATRIX_LIMIT:
        matrix = _haversine_distance_matrix(coords)

        def neighbors(idx: int) -> List[int]:
            within = matrix[idx] <= eps_meters
            within[idx] = False
            return np.flatnonzero(within).tolist()

    else:
        lats = coords[:, 0]
        lons = coords[:, 1]

        def neighbors(idx: int) -> List[int]:
            dist = distance_meters(lats[idx], lons[idx], lats, lons)
            within = dist <= eps_meters
            within[idx] = False
            return np.flatnonzero(within).tolist()

    return neighbors


def find_clusters(
    detections: Sequence[Detection],
    eps_meters: float = DEFAULT_EPS_METERS,
    min_pts: int = DEFAULT_MIN_PTS,
) -> List[List[int]]:
    """
    Run DBSCAN over detections and return clusters as lists of indices.

    Args:
        detections: Detections to cluster; indices refer to this sequence
        eps_meters: Neighborhood radius in meters
        min_pts: Minimum number of neighbors (excluding the point itself)
            for a point to seed or extend a cluster

    Returns:
        Index groups in discovery order, each with at least min_pts members

    Raises:
        ConfigurationError: If eps_meters or min_pts is invalid
    """
    validate_clustering_params(eps_meters, min_pts)

    if len(detections) == 0:
        return []

    coords = np.array([(d.lat, d.lon) for d in detections], dtype=float)
    neighbors_of = _neighborhood_finder(coords, eps_meters)

    n = len(detections)
    visited = np.zeros(n, dtype=bool)
    labels = np.full(n, UNASSIGNED, dtype=np.int64)
    clusters: List[List[int]] = []

    for idx in range(n):
        if visited[idx]:
            continue
        visited[idx] = True

        seed_neighbors = neighbors_of(idx)
        if len(seed_neighbors) < min_pts:
            labels[idx] = NOISE
            continue

        cluster_id = len(clusters)
        members = [idx]
        labels[idx] = cluster_id

        # Breadth-first expansion; queued guards against re-adding indices
        frontier = deque(seed_neighbors)
        queued = set(seed_neighbors)
        queued.add(idx)

        while frontier:
            q = frontier.popleft()
            if not visited[q]:
                visited[q] = True
                q_neighbors = neighbors_of(q)
                if len(q_neighbors) >= min_pts:
                    for r in q_neighbors:
                        if r not in queued:
                            queued.add(r)
                            frontier.append(r)

            if labels[q] < 0:
                labels[q] = cluster_id
                members.append(q)

        clusters.append(members)

    return [members for members in clusters if len(members) >= min_pts]
