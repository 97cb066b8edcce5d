"""
Polygon geometry for destructible bodies.

An asteroid outline is stored as centroid-relative vertices plus a cached
(N, 4) edge array [ax, ay, bx, by]. Ray queries against that array bound every
crack segment to the visible outline. Degenerate outlines never raise: ray
queries report no hit and the minimum surface radius falls back to the
nominal radius.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np
from shapely.geometry import Point, Polygon

from seeded_random import RandomStream, derive_seed

logger = logging.getLogger(__name__)

Vec2 = Tuple[float, float]

PARALLEL_EPSILON = 1e-6
MIN_OUTLINE_AREA = 1e-9
OUTLINE_SALT = "outline"


@dataclass(frozen=True, eq=False)
class PolygonGeometry:
    """Immutable outline of one body, built once at spawn."""

    vertices: Tuple[Vec2, ...]
    edges: np.ndarray            # (N, 4) start/end pairs, read-only
    radius: float                # nominal radius
    min_surface_radius: float    # min centroid-to-boundary distance

    @property
    def is_degenerate(self) -> bool:
        return len(self.edges) == 0

    @property
    def outline(self) -> Polygon:
        if len(self.vertices) < 3:
            return Polygon()
        return Polygon(self.vertices)

    def safe_radius(self, margin: float) -> float:
        """Radius of the disc every crack endpoint must stay inside."""
        return max(0.0, self.min_surface_radius - margin)

    def validate_geometry(self) -> List[str]:
        """Check for outline issues.

        Returns list of warning strings (empty = ok).
        """
        issues = []
        if len(self.vertices) < 3:
            issues.append(f"Outline has {len(self.vertices)} vertices (need >= 3)")
            return issues
        if not all(math.isfinite(c) for v in self.vertices for c in v):
            issues.append("Outline has non-finite coordinates")
            return issues
        outline = self.outline
        if not outline.is_valid:
            issues.append("Outline polygon is invalid")
        if outline.area <= MIN_OUTLINE_AREA:
            issues.append(f"Outline area too small: {outline.area:.3g}")
        elif not outline.contains(Point(0.0, 0.0)):
            issues.append("Centroid lies outside outline")
        return issues


# ─── Construction ───────────────────────────────────────────────────────────


def build_polygon_edges(vertices: Sequence[Vec2]) -> np.ndarray:
    """Closed edge list [ax, ay, bx, by] for a vertex ring."""
    if len(vertices) < 3:
        return np.zeros((0, 4), dtype=float)
    pts = np.asarray(vertices, dtype=float).reshape(-1, 2)
    nxt = np.roll(pts, -1, axis=0)
    edges = np.hstack([pts, nxt])
    edges.setflags(write=False)
    return edges


def build_geometry(vertices: Sequence[Vec2], radius: float) -> PolygonGeometry:
    """Build an outline and cache its edges and minimum surface radius.

    Args:
        vertices: ring of (x, y) points relative to the centroid.
        radius: nominal radius, used as the fallback surface radius.
    """
    nominal = float(radius) if math.isfinite(radius) else 0.0
    verts = tuple((float(x), float(y)) for x, y in vertices)

    degenerate = len(verts) < 3
    if not degenerate and not all(math.isfinite(c) for v in verts for c in v):
        degenerate = True
    if not degenerate and Polygon(verts).area <= MIN_OUTLINE_AREA:
        degenerate = True

    if degenerate:
        logger.debug("Degenerate outline (%d vertices), using nominal radius", len(verts))
        empty = np.zeros((0, 4), dtype=float)
        empty.setflags(write=False)
        return PolygonGeometry(
            vertices=verts, edges=empty, radius=nominal, min_surface_radius=nominal,
        )

    edges = build_polygon_edges(verts)
    min_surface = compute_min_surface_radius(edges, nominal)
    return PolygonGeometry(
        vertices=verts, edges=edges, radius=nominal, min_surface_radius=min_surface,
    )


def regular_polygon_vertices(
    sides: int, radius: float, rotation: float = 0.0,
) -> List[Vec2]:
    """Vertices of a regular polygon centred on the origin."""
    sides = max(3, int(sides))
    return [
        (
            math.cos(rotation + (i / sides) * math.pi * 2) * radius,
            math.sin(rotation + (i / sides) * math.pi * 2) * radius,
        )
        for i in range(sides)
    ]


def generate_asteroid_vertices(radius: float, seed: int) -> List[Vec2]:
    """Seeded lumpy outline: 7-10 vertices at 78-120% of the nominal radius."""
    rng = RandomStream(derive_seed(seed, OUTLINE_SALT))
    count = 7 + math.floor(rng.next() * 4)
    vertices = []
    for i in range(count):
        angle = (i / count) * math.pi * 2
        r = radius * (0.78 + rng.next() * 0.42)
        vertices.append((math.cos(angle) * r, math.sin(angle) * r))
    return vertices


# ─── Ray queries ────────────────────────────────────────────────────────────


def _as_edge_array(edges) -> np.ndarray:
    if isinstance(edges, np.ndarray):
        return edges.reshape(-1, 4)
    if not edges:
        return np.zeros((0, 4), dtype=float)
    return np.asarray(edges, dtype=float).reshape(-1, 4)


def intersect_ray(
    edges,
    origin_x: float,
    origin_y: float,
    dir_x: float,
    dir_y: float,
) -> float:
    """Distance along a ray to the closest edge crossing.

    Solves origin + t * dir = a + u * (b - a) for every edge with 2D cross
    products and keeps hits with t >= 0 and 0 <= u <= 1.

    Returns:
        Smallest valid t, or 0.0 when nothing is hit (near-parallel edges are
        skipped).
    """
    arr = _as_edge_array(edges)
    if arr.shape[0] == 0:
        return 0.0

    ax = arr[:, 0] - origin_x
    ay = arr[:, 1] - origin_y
    seg_dx = (arr[:, 2] - origin_x) - ax
    seg_dy = (arr[:, 3] - origin_y) - ay

    denom = dir_x * seg_dy - dir_y * seg_dx
    usable = np.abs(denom) >= PARALLEL_EPSILON
    with np.errstate(divide="ignore", invalid="ignore"):
        t = (ax * seg_dy - ay * seg_dx) / denom
        u = (ax * dir_y - ay * dir_x) / denom

    hits = usable & (t >= 0) & (u >= 0) & (u <= 1)
    if not hits.any():
        return 0.0
    closest = float(t[hits].min())
    return closest if math.isfinite(closest) else 0.0


def measure_ray_distance(
    edges,
    origin_x: float,
    origin_y: float,
    angle: float,
    margin: float = 0.0,
) -> float:
    """How far a ray at `angle` can travel before coming within `margin` of the outline."""
    distance = intersect_ray(edges, origin_x, origin_y, math.cos(angle), math.sin(angle))
    if not math.isfinite(distance) or distance <= 0:
        return 0.0
    return max(0.0, distance - margin)


def compute_min_surface_radius(edges, fallback_radius: float) -> float:
    """Exact minimum distance from the centroid (origin) to any edge.

    Projects the origin onto every edge segment at once. Falls back to
    `fallback_radius` when the outline is empty or not finite.
    """
    arr = _as_edge_array(edges)
    fallback = fallback_radius if fallback_radius is not None else 0.0
    if arr.shape[0] == 0:
        return fallback

    a = arr[:, 0:2]
    d = arr[:, 2:4] - a
    length_sq = np.einsum("ij,ij->i", d, d)
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.where(length_sq > 0, -np.einsum("ij,ij->i", a, d) / length_sq, 0.0)
    t = np.clip(t, 0.0, 1.0)
    closest = a + d * t[:, None]
    distances = np.hypot(closest[:, 0], closest[:, 1])
    distances = distances[np.isfinite(distances)]
    if distances.size == 0:
        return fallback
    return float(distances.min())


def clip_ray_to_radius(x: float, y: float, angle: float, radius: float) -> float:
    """Distance along a ray from (x, y) before it leaves the origin disc of `radius`.

    Returns 0.0 when the start point is already outside the disc.
    """
    dx = math.cos(angle)
    dy = math.sin(angle)
    b = x * dx + y * dy
    c = x * x + y * y - radius * radius
    if c > 0:
        return 0.0
    disc = b * b - c
    if disc <= 0:
        return 0.0
    return max(0.0, -b + math.sqrt(disc))
