"""
Child-body descriptors for a destroyed asteroid.

generate_fragments() is pure: it reads the parent's state and a fragment rule
set, draws from a fragment-scoped stream derived from the parent's crack seed,
and returns fresh descriptors. Spawning, id assignment and physics
registration belong to the caller.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from fracture_profiles import FragmentRuleSet, ProfileRegistry, default_registry
from seeded_random import FRAGMENT_SALT, RandomStream, derive_seed

logger = logging.getLogger(__name__)

Vec2 = Tuple[float, float]


@dataclass(frozen=True)
class FragmentSource:
    """State of the body being destroyed."""

    size: str
    position: Vec2
    velocity: Vec2
    radius: float
    generation: int = 0
    wave: int = 0
    crack_seed: int = 0
    entity_id: Optional[Union[int, str]] = None


@dataclass(frozen=True)
class FragmentDescriptor:
    position: Vec2
    velocity: Vec2
    size: str
    wave: int
    parent_id: Optional[Union[int, str]]
    generation: int


def sample_range(value: Optional[Tuple[float, float]], fallback: float, rng: RandomStream) -> float:
    """Uniform draw from [min, max]; no draw when the range is empty."""
    if value is None:
        return fallback
    low, high = value
    if not math.isfinite(low):
        low = fallback
    if not math.isfinite(high):
        high = low
    if high <= low:
        return low
    return low + (high - low) * rng.next()


def resolve_count(value: Tuple[int, int], rng: RandomStream) -> int:
    """Whole fragment count from an inclusive [min, max] range."""
    low = math.floor(value[0])
    high = math.floor(value[1])
    if high <= low:
        return max(0, low)
    return low + math.floor(rng.next() * (high - low + 1))


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def generate_fragments(
    source: FragmentSource,
    rules: Union[FragmentRuleSet, str, None] = None,
    registry: Optional[ProfileRegistry] = None,
) -> List[FragmentDescriptor]:
    """Fragments spawned when `source` is destroyed.

    Args:
        source: the destroyed body.
        rules: a rule set, or a rule-set key (unknown keys use "default").
        registry: supplies rule sets for keys and the size table.

    Returns:
        Fragment descriptors, or [] for the smallest size and past the
        rule set's generation cap.
    """
    registry = registry or default_registry()
    if not isinstance(rules, FragmentRuleSet):
        rules = registry.rules_for(rules)

    sizes = registry.sizes
    child_size = sizes.next_smaller(source.size)
    if child_size is None:
        return []

    generation = source.generation or 0
    if rules.max_generation is not None and generation + 1 > rules.max_generation:
        logger.debug(
            "Generation cap reached for %s (%d >= %d)",
            source.entity_id, generation, rules.max_generation,
        )
        return []

    rng = RandomStream(derive_seed(source.crack_seed or 0, FRAGMENT_SALT))
    count = resolve_count(rules.count_range(source.size), rng)
    if count <= 0:
        return []

    base_speed = sizes.base_speed_for(child_size)
    speed_range = rules.speed_range(child_size)
    parent_x, parent_y = source.position
    parent_vx = _finite_or_zero(source.velocity[0])
    parent_vy = _finite_or_zero(source.velocity[1])
    phase = rng.next() * math.pi * 2

    fragments = []
    for i in range(count):
        base_angle = phase + (i / max(1, count)) * math.pi * 2
        travel = base_angle + (rng.next() - 0.5) * 2 * rules.angle_jitter
        spawn = travel + (rng.next() - 0.5) * 2 * rules.radial_offset_jitter
        distance = source.radius * sample_range(rules.radial_distance_range, 0.6, rng)
        speed = base_speed * sample_range(speed_range, 1.0, rng)

        fragments.append(
            FragmentDescriptor(
                position=(
                    parent_x + math.cos(spawn) * distance,
                    parent_y + math.sin(spawn) * distance,
                ),
                velocity=(
                    math.cos(travel) * speed + parent_vx * rules.inherit_velocity,
                    math.sin(travel) * speed + parent_vy * rules.inherit_velocity,
                ),
                size=child_size,
                wave=source.wave,
                parent_id=source.entity_id,
                generation=generation + 1,
            )
        )

    logger.debug(
        "Fragmented %s %s into %d x %s (rules=%s, generation=%d)",
        source.size, source.entity_id, count, child_size, rules.key, generation + 1,
    )
    return fragments
