"""Tests for polygon_geometry module."""
import math

import numpy as np
import pytest
from shapely.geometry import Point

from polygon_geometry import (
    build_geometry,
    build_polygon_edges,
    clip_ray_to_radius,
    compute_min_surface_radius,
    generate_asteroid_vertices,
    intersect_ray,
    measure_ray_distance,
    regular_polygon_vertices,
)


class TestIntersectRay:
    """Test ray/edge crossing distances."""

    def test_hits_square_edge(self, square_geometry):
        assert intersect_ray(square_geometry.edges, 0, 0, 1, 0) == pytest.approx(10.0)
        assert intersect_ray(square_geometry.edges, 0, 0, 0, -1) == pytest.approx(10.0)

    def test_parallel_edge_is_skipped(self):
        edges = [(0.0, 5.0, 10.0, 5.0)]
        assert intersect_ray(edges, 0, 0, 1, 0) == 0.0

    def test_edge_behind_origin(self):
        edges = [(5.0, -1.0, 5.0, 1.0)]
        assert intersect_ray(edges, 0, 0, -1, 0) == 0.0
        assert intersect_ray(edges, 0, 0, 1, 0) == pytest.approx(5.0)

    def test_empty_edges(self):
        assert intersect_ray([], 0, 0, 1, 0) == 0.0
        assert intersect_ray(np.zeros((0, 4)), 0, 0, 1, 0) == 0.0

    def test_closest_hit_wins(self):
        edges = [(8.0, -1.0, 8.0, 1.0), (3.0, -1.0, 3.0, 1.0)]
        assert intersect_ray(edges, 0, 0, 1, 0) == pytest.approx(3.0)


class TestMeasureRayDistance:
    def test_margin_is_subtracted(self, square_geometry):
        assert measure_ray_distance(square_geometry.edges, 0, 0, 0.0, 0.65) == pytest.approx(9.35)

    def test_margin_larger_than_distance(self, square_geometry):
        assert measure_ray_distance(square_geometry.edges, 0, 0, 0.0, 20.0) == 0.0

    def test_no_hit(self):
        assert measure_ray_distance([], 0, 0, 1.0, 0.5) == 0.0


class TestMinSurfaceRadius:
    """Test the exact minimum centroid-to-boundary distance."""

    def test_square(self, square_geometry):
        assert square_geometry.min_surface_radius == pytest.approx(10.0)

    def test_octagon_is_apothem(self, octagon_geometry):
        apothem = 40.0 * math.cos(math.pi / 8)
        assert octagon_geometry.min_surface_radius == pytest.approx(apothem)

    def test_star_inner_vertex(self, concave_geometry):
        assert concave_geometry.min_surface_radius == pytest.approx(18.0)

    def test_diamond_edge_midpoint(self, diamond_geometry):
        # Closest boundary points sit mid-edge, between the vertices.
        assert diamond_geometry.min_surface_radius == pytest.approx(40.0 / math.sqrt(2))

    @pytest.mark.parametrize("seed", [1, 777, 4242, 90210])
    def test_matches_shapely_distance(self, seed):
        geometry = build_geometry(generate_asteroid_vertices(35.0, seed), 35.0)
        expected = geometry.outline.exterior.distance(Point(0.0, 0.0))
        assert geometry.min_surface_radius == pytest.approx(expected)

    def test_empty_edges_fall_back(self):
        assert compute_min_surface_radius([], 12.0) == 12.0

    def test_repeated_vertex(self):
        edges = build_polygon_edges([(10, 0), (10, 0), (0, 10), (-10, 0), (0, -10)])
        assert compute_min_surface_radius(edges, 99.0) == pytest.approx(10.0 / math.sqrt(2))

    def test_not_larger_than_nominal_for_regular_polygons(self):
        for sides in (3, 5, 6, 9, 12):
            geometry = build_geometry(regular_polygon_vertices(sides, 20.0), 20.0)
            assert 0 < geometry.min_surface_radius <= 20.0 + 1e-9


class TestBuildGeometry:
    """Test construction and degenerate handling."""

    def test_edges_are_closed_ring(self):
        edges = build_polygon_edges([(0, 0), (1, 0), (0, 1)])
        assert edges.shape == (3, 4)
        assert tuple(edges[-1]) == (0.0, 1.0, 0.0, 0.0)

    def test_edges_are_read_only(self, octagon_geometry):
        with pytest.raises(ValueError):
            octagon_geometry.edges[0, 0] = 1.0

    def test_two_vertices_is_degenerate(self):
        geometry = build_geometry([(0, 0), (1, 1)], 12.0)
        assert geometry.is_degenerate
        assert geometry.min_surface_radius == 12.0
        assert len(geometry.validate_geometry()) == 1

    def test_collinear_is_degenerate(self):
        geometry = build_geometry([(0, 0), (1, 0), (2, 0)], 5.0)
        assert geometry.is_degenerate
        assert geometry.min_surface_radius == 5.0

    def test_non_finite_is_degenerate(self):
        geometry = build_geometry([(0, 0), (float("nan"), 0), (0, 1)], 5.0)
        assert geometry.is_degenerate
        assert intersect_ray(geometry.edges, 0, 0, 1, 0) == 0.0

    def test_validate_ok(self, octagon_geometry):
        assert octagon_geometry.validate_geometry() == []

    def test_validate_centroid_outside(self):
        geometry = build_geometry([(5, 5), (10, 5), (10, 10), (5, 10)], 5.0)
        assert "Centroid lies outside outline" in geometry.validate_geometry()

    def test_outline_area(self, square_geometry):
        assert square_geometry.outline.area == pytest.approx(400.0)

    def test_safe_radius(self, square_geometry):
        assert square_geometry.safe_radius(0.65) == pytest.approx(9.35)
        assert square_geometry.safe_radius(50.0) == 0.0


class TestOutlines:
    def test_regular_polygon_minimum_sides(self):
        assert len(regular_polygon_vertices(2, 10.0)) == 3

    def test_regular_polygon_on_circle(self):
        for x, y in regular_polygon_vertices(7, 15.0, rotation=0.3):
            assert math.hypot(x, y) == pytest.approx(15.0)

    def test_asteroid_outline_is_seeded(self):
        a = generate_asteroid_vertices(35.0, 777)
        b = generate_asteroid_vertices(35.0, 777)
        assert a == b
        assert a != generate_asteroid_vertices(35.0, 778)

    def test_asteroid_outline_bounds(self):
        vertices = generate_asteroid_vertices(35.0, 4242)
        assert 7 <= len(vertices) <= 10
        for x, y in vertices:
            assert 35.0 * 0.78 - 1e-9 <= math.hypot(x, y) <= 35.0 * 1.2 + 1e-9

    def test_lumpy_outline_is_valid(self, lumpy_geometry):
        assert lumpy_geometry.validate_geometry() == []


class TestClipRay:
    """Test distance to the edge of an origin-centred disc."""

    def test_from_centre(self):
        assert clip_ray_to_radius(0, 0, 1.234, 5.0) == pytest.approx(5.0)

    def test_from_offset_point(self):
        assert clip_ray_to_radius(3, 0, 0.0, 5.0) == pytest.approx(2.0)
        assert clip_ray_to_radius(3, 0, math.pi, 5.0) == pytest.approx(8.0)

    def test_outside_disc(self):
        assert clip_ray_to_radius(6, 0, math.pi, 5.0) == 0.0
