"""
Shared test fixtures for crack and fragmentation tests.
"""
import math
import sys
from pathlib import Path

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fracture_profiles import ProfileRegistry, DEFAULT_TABLES
from fragmentation import FragmentSource
from polygon_geometry import (
    build_geometry,
    generate_asteroid_vertices,
    regular_polygon_vertices,
)


@pytest.fixture
def registry():
    """Registry built explicitly from the built-in tables."""
    return ProfileRegistry.from_mapping(DEFAULT_TABLES)


@pytest.fixture
def octagon_geometry():
    """Regular octagon of radius 40 centred on the origin."""
    return build_geometry(regular_polygon_vertices(8, 40.0), 40.0)


@pytest.fixture
def square_geometry():
    """Axis-aligned 20x20 square (apothem 10)."""
    return build_geometry([(-10, -10), (10, -10), (10, 10), (-10, 10)], 10.0 * math.sqrt(2))


@pytest.fixture
def diamond_geometry():
    """Square rotated 45 degrees; its nearest boundary points are mid-edge."""
    return build_geometry([(40, 0), (0, 40), (-40, 0), (0, -40)], 40.0)


@pytest.fixture
def lumpy_geometry():
    """Seeded irregular outline like the ones spawned in play."""
    return build_geometry(generate_asteroid_vertices(35.0, 777), 35.0)


@pytest.fixture
def concave_geometry():
    """Star-shaped outline with deep notches."""
    vertices = []
    for i in range(10):
        angle = i / 10 * math.pi * 2
        r = 40.0 if i % 2 == 0 else 18.0
        vertices.append((math.cos(angle) * r, math.sin(angle) * r))
    return build_geometry(vertices, 40.0)


@pytest.fixture
def large_source():
    """A large body at rest at (100, 200)."""
    return FragmentSource(
        size="large",
        position=(100.0, 200.0),
        velocity=(10.0, -5.0),
        radius=35.0,
        generation=0,
        wave=3,
        crack_seed=42,
        entity_id="asteroid-1",
    )
