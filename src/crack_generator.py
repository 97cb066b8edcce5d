"""
Procedural crack layers for destructible bodies.

For one outline, seed and crack profile the generator grows a forest of crack
segments over three damage stages:

1. Main rays - stage 1 starts trunks at the centroid; later stages extend
   live trunks (continuation bias) or occasionally start new ones.
2. Branches - hang off existing segments, weighted by length and discounted
   by how many children a parent already has.
3. Micro-cracks - same mechanism, shorter and thinner, never parented on
   another micro-crack.
4. Rings - optional parent-less arcs around the centroid.

Segments reference each other by id only. Every endpoint stays inside the
disc of radius (min_surface_radius - surface_margin). All placement loops are
bounded: a stage accepts whatever it managed to place.
"""
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from fracture_profiles import (
    STAGE_COUNT,
    BurstSpec,
    CrackProfile,
    CrackStageTemplate,
    GraphGrowthRules,
    ProfileRegistry,
    SpawnSpec,
    default_registry,
)
from polygon_geometry import PolygonGeometry, clip_ray_to_radius, measure_ray_distance
from seeded_random import CRACK_SALT, UINT32_MASK, RandomStream, derive_seed

logger = logging.getLogger(__name__)

Vec2 = Tuple[float, float]

TRUNK = "trunk"
EXTENSION = "extension"
BRANCH = "branch"
MICRO = "micro"
RING = "ring"
MAIN_TYPES = (TRUNK, EXTENSION)

LENGTH_TOLERANCE = 1e-9


@dataclass(frozen=True)
class CrackSegment:
    """One straight crack line. Parent/root are ids into the pattern arena."""

    id: str
    stage: int
    type: str
    parent_id: Optional[str]
    root_id: Optional[str]   # None for rings
    start: Vec2
    end: Vec2
    width: float
    length: float
    angle: float
    children: int = 0        # children attached while its own stage was built
    continuation: int = 0    # extensions since the trunk root


@dataclass(frozen=True)
class CrackLayer:
    id: str
    stage: int
    intensity: float
    burst: BurstSpec
    segments: Tuple[CrackSegment, ...]

    @property
    def segment_ids(self) -> List[str]:
        return [s.id for s in self.segments]

    def count(self, segment_type: str) -> int:
        return sum(1 for s in self.segments if s.type == segment_type)


@dataclass(frozen=True)
class CrackPattern:
    """All three layers plus the flat segment arena and id lookup."""

    profile_key: str
    crack_seed: int
    layers: Tuple[CrackLayer, ...]
    thresholds: Tuple[float, ...]
    segments: Tuple[CrackSegment, ...] = ()
    lookup: Dict[str, CrackSegment] = field(default_factory=dict)

    def segment(self, segment_id: str) -> Optional[CrackSegment]:
        return self.lookup.get(segment_id)

    def children_of(self, segment_id: str) -> List[CrackSegment]:
        return [s for s in self.segments if s.parent_id == segment_id]

    def stage_for_health_ratio(self, ratio: float) -> int:
        return crack_stage_for_health(ratio, self.thresholds)

    def revealed_segments(self, stage: int) -> List[CrackSegment]:
        """Segments of every layer up to and including `stage`."""
        revealed = []
        for layer in self.layers[:max(0, stage)]:
            revealed.extend(layer.segments)
        return revealed


@dataclass(frozen=True)
class CrackRequest:
    """Inputs for one body in a batch run."""

    geometry: PolygonGeometry
    crack_seed: int
    profile_key: str = "default"


def crack_stage_for_health(ratio: float, thresholds: Sequence[float]) -> int:
    """Number of revealed stages for a health ratio (0 = intact)."""
    stage = 0
    for i, threshold in enumerate(thresholds):
        if ratio <= threshold:
            stage = i + 1
    return stage


# ─── Builder ────────────────────────────────────────────────────────────────


@dataclass
class _Draft:
    """Mutable segment while its stage is being built."""

    id: str
    stage: int
    type: str
    parent_id: Optional[str]
    root_id: Optional[str]
    start: Vec2
    end: Vec2
    width: float
    length: float
    angle: float
    children: int = 0
    continuation: int = 0

    def freeze(self) -> CrackSegment:
        return CrackSegment(
            id=self.id, stage=self.stage, type=self.type,
            parent_id=self.parent_id, root_id=self.root_id,
            start=self.start, end=self.end, width=self.width,
            length=self.length, angle=self.angle,
            children=self.children, continuation=self.continuation,
        )


@dataclass
class _Trunk:
    head: CrackSegment
    max_reach: float
    exhausted: bool = False
    continuation: int = 0


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


class _CrackBuilder:
    def __init__(
        self,
        geometry: PolygonGeometry,
        crack_seed: int,
        profile: CrackProfile,
        rules: GraphGrowthRules,
        rng: RandomStream,
        min_surface_radius: Optional[float] = None,
    ):
        self.geometry = geometry
        self.profile = profile
        self.rules = rules
        self.rng = rng
        self.seed = crack_seed & UINT32_MASK

        radius = geometry.radius if math.isfinite(geometry.radius) else 0.0
        surface = geometry.min_surface_radius if min_surface_radius is None else min_surface_radius
        if not surface or not math.isfinite(surface):
            surface = radius

        ratio = rules.effective_min_segment_length_ratio
        self.length_floor = radius * ratio
        self.min_segment_length = max(1.2, self.length_floor)
        self.safe_radius = max(0.0, surface - rules.surface_margin)
        self.uniform_radius = max(0.0, surface - rules.surface_margin * 1.1)

        self.base_rotation = rng.next() * math.pi * 2
        self.trunks: List[_Trunk] = []
        self.next_index = 0
        self.prefix = f"{profile.key}-{self.seed:x}"

        # per-stage state
        self.stage_number = 0
        self.stage_rotation = 0.0
        self.template: Optional[CrackStageTemplate] = None
        self.drafts: List[_Draft] = []
        self.draft_lookup: Dict[str, _Draft] = {}

    # -- sampling --

    def sample(self, value: Optional[Tuple[float, float]], fallback: float) -> float:
        if value is None:
            return fallback
        low, high = value
        if not math.isfinite(low):
            low = fallback
        if not math.isfinite(high):
            high = low
        if high <= low:
            return low
        return low + (high - low) * self.rng.next()

    def width(self, scale: float = 1.0) -> float:
        width_range = self.template.line_width_range or self.profile.line_width_range
        sampled = self.sample(width_range, 1.0)
        return max(0.35, sampled * scale)

    def reach(self, x: float, y: float, angle: float) -> float:
        """Safe travel distance: inside the outline and inside the safe disc."""
        to_surface = measure_ray_distance(
            self.geometry.edges, x, y, angle, self.rules.surface_margin,
        )
        return min(to_surface, clip_ray_to_radius(x, y, angle, self.safe_radius))

    # -- segments --

    def spawn(
        self,
        kind: str,
        start: Vec2,
        end: Vec2,
        width: float,
        angle: float,
        parent_id: Optional[str] = None,
        root_id: Optional[str] = None,
    ) -> Optional[_Draft]:
        length = math.hypot(end[0] - start[0], end[1] - start[1])
        minimum = max(self.min_segment_length * 0.5, self.length_floor)
        if not math.isfinite(length) or length + LENGTH_TOLERANCE < minimum:
            return None

        self.next_index += 1
        segment_id = f"{self.prefix}-{self.stage_number}-{self.next_index}"
        if kind == RING:
            resolved_root = None
        else:
            resolved_root = root_id or parent_id or segment_id

        draft = _Draft(
            id=segment_id, stage=self.stage_number, type=kind,
            parent_id=parent_id, root_id=resolved_root,
            start=start, end=end, width=width, length=length, angle=angle,
        )
        self.drafts.append(draft)
        self.draft_lookup[segment_id] = draft
        parent = self.draft_lookup.get(parent_id) if parent_id else None
        if parent is not None:
            parent.children += 1
        return draft

    def main_count(self) -> int:
        return sum(1 for d in self.drafts if d.type in MAIN_TYPES)

    def create_root(self, target: int) -> Optional[_Draft]:
        template = self.template
        base_angle = self.stage_rotation + (len(self.trunks) / max(1, target)) * math.pi * 2
        angle = base_angle + (self.rng.next() - 0.5) * 2 * template.angular_jitter

        max_reach = self.reach(0.0, 0.0, angle)
        if max_reach <= self.min_segment_length * 1.1:
            return None
        max_start = max(0.0, max_reach - self.min_segment_length * 0.6)
        if max_start <= 0:
            return None

        start_range = template.start_radius_range or self.profile.start_radius_range
        start_radius = _clamp(max_reach * self.sample(start_range, 0.24), 0.0, max_start)
        start_radius = max(start_radius, min(max_start, self.min_segment_length * 0.25))

        desired_end = start_radius + max_reach * self.sample(template.main_length_range, 0.6)
        desired_end = min(desired_end, max_reach)
        length = desired_end - start_radius
        if length < self.min_segment_length:
            length = min(max_reach - start_radius, self.min_segment_length)

        cos_a, sin_a = math.cos(angle), math.sin(angle)
        draft = self.spawn(
            TRUNK,
            (cos_a * start_radius, sin_a * start_radius),
            (cos_a * (start_radius + length), sin_a * (start_radius + length)),
            self.width(),
            angle,
        )
        if draft is not None:
            self.trunks.append(_Trunk(head=draft.freeze(), max_reach=max_reach))
        return draft

    def extend_trunk(self, trunk: _Trunk) -> Optional[_Draft]:
        head = self.draft_lookup.get(trunk.head.id) or trunk.head
        continuation = trunk.continuation
        angle = head.angle + (self.rng.next() - 0.5) * 2 * self.rules.continuation_jitter
        if continuation == 0 and self.rng.next() < 0.4:
            angle = head.angle

        x, y = head.end
        max_reach = self.reach(x, y, angle)
        if max_reach <= self.min_segment_length * 0.6:
            trunk.exhausted = True
            return None

        desired = min(trunk.max_reach, head.length * (0.7 + self.rng.next() * 0.5))
        length = _clamp(desired, self.min_segment_length * 0.7, max_reach)
        if length < max(self.min_segment_length * 0.6, self.length_floor):
            trunk.exhausted = True
            return None

        draft = self.spawn(
            EXTENSION,
            (x, y),
            (x + math.cos(angle) * length, y + math.sin(angle) * length),
            self.width(0.9),
            angle,
            parent_id=head.id,
            root_id=head.root_id,
        )
        if draft is None:
            trunk.exhausted = True
            return None

        trunk.continuation = continuation + 1
        draft.continuation = trunk.continuation
        trunk.head = draft.freeze()
        return draft

    def select_parent(self, is_micro: bool) -> Optional[_Draft]:
        min_parent = self.min_segment_length * (0.5 if is_micro else 0.8)
        candidates = [
            d for d in self.drafts
            if d.type != RING
            and not (is_micro and d.type == MICRO)
            and d.length > min_parent
        ]
        if not candidates:
            return None

        penalty = self.rules.micro_parent_penalty if is_micro else self.rules.branch_parent_penalty
        weights = []
        for d in candidates:
            weight = d.length / (1 + d.continuation) * penalty ** d.children
            if d.type == BRANCH:
                weight *= self.rules.child_penalty
            weights.append(max(0.01, weight))

        total = sum(weights)
        if total <= 0:
            return None
        pick = self.rng.next() * total
        for d, w in zip(candidates, weights):
            pick -= w
            if pick <= 0:
                return d
        return candidates[-1]

    def create_offshoot(self, spec: SpawnSpec, is_micro: bool) -> Optional[_Draft]:
        parent = self.select_parent(is_micro)
        if parent is None:
            return None

        spread = spec.spread if spec.spread is not None else (0.45 if is_micro else 0.32)
        offset = (self.rng.next() - 0.5) * 2 * spread

        anchor_t = spec.offset_from_start
        if anchor_t is None:
            anchor_t = 0.6 if is_micro else 0.4
        jitter = self.rules.micro_anchor_jitter if is_micro else self.rules.branch_anchor_jitter
        anchor_t = _clamp(anchor_t + (self.rng.next() - 0.5) * 2 * jitter, 0.08, 0.92)

        (x1, y1), (x2, y2) = parent.start, parent.end
        start = (x1 + (x2 - x1) * anchor_t, y1 + (y2 - y1) * anchor_t)
        angle = parent.angle + offset

        max_reach = self.reach(start[0], start[1], angle)
        if max_reach <= self.min_segment_length * (0.4 if is_micro else 0.6):
            return None

        factor = spec.length_multiplier
        if factor is None:
            factor = 0.28 if is_micro else 0.5
        desired = parent.length * factor * (0.7 + self.rng.next() * 0.5)
        min_length = max(self.length_floor, self.min_segment_length * (0.55 if is_micro else 0.8))
        max_length = max(self.min_segment_length * (0.9 if is_micro else 1.1), max_reach)
        length = min(_clamp(desired, min_length, max_length), max_reach)
        if length < max(self.length_floor, self.min_segment_length * (0.45 if is_micro else 0.7)):
            return None

        return self.spawn(
            MICRO if is_micro else BRANCH,
            start,
            (start[0] + math.cos(angle) * length, start[1] + math.sin(angle) * length),
            self.width(0.6 if is_micro else 0.72),
            angle,
            parent_id=parent.id,
            root_id=parent.root_id,
        )

    def place_offshoots(self, spec: Optional[SpawnSpec], is_micro: bool) -> int:
        target = spec.count if spec is not None else 0
        created = attempts = 0
        while created < target and attempts < target * 5:
            attempts += 1
            if self.create_offshoot(spec, is_micro) is not None:
                created += 1
        if created < target:
            logger.debug(
                "Stage %d placed %d/%d %s segments",
                self.stage_number, created, target, MICRO if is_micro else BRANCH,
            )
        return created

    def place_ring(self) -> None:
        ring = self.template.ring
        if ring is None or ring.segments <= 0:
            return
        if self.uniform_radius <= self.min_segment_length:
            return

        ring_radius = _clamp(
            self.uniform_radius * self.sample(ring.radius_range, 0.55),
            self.min_segment_length,
            self.uniform_radius,
        )
        step = math.pi * 2 / ring.segments
        ring_width = max(0.35, ring.width) if ring.width is not None else self.width(0.85)
        for i in range(ring.segments):
            arc = self.stage_rotation + i * step
            nxt = arc + step * 0.7
            start = (math.cos(arc) * ring_radius, math.sin(arc) * ring_radius)
            end = (math.cos(nxt) * ring_radius, math.sin(nxt) * ring_radius)
            self.spawn(RING, start, end, ring_width,
                       math.atan2(end[1] - start[1], end[0] - start[0]))

    # -- stages --

    def build_stage(self, index: int) -> CrackLayer:
        profile = self.profile
        template = profile.stage_template(index)
        self.template = template
        self.stage_number = index + 1
        self.drafts = []
        self.draft_lookup = {}

        if template.main_rays is not None:
            target = template.main_rays
        else:
            target = 3 if index == 0 else (len(self.trunks) or 3)
        target = max(1, int(target))

        self.stage_rotation = (
            self.base_rotation + (self.rng.next() - 0.5) * 2 * profile.rotation_jitter
        )

        if index == 0:
            attempts = 0
            while self.main_count() < target and attempts < target * 4:
                attempts += 1
                self.create_root(target)
        else:
            self.grow_mains(target)

        self.place_offshoots(template.branch, is_micro=False)
        self.place_offshoots(template.micro, is_micro=True)
        self.place_ring()

        segments = tuple(d.freeze() for d in self.drafts)
        if index < len(profile.stages):
            layer_id = template.id
        else:
            layer_id = f"{profile.key}-stage-{self.stage_number}"
        layer = CrackLayer(
            id=layer_id,
            stage=self.stage_number,
            intensity=float(template.intensity if template.intensity is not None else self.stage_number),
            burst=template.burst.resolve(len(segments)),
            segments=segments,
        )
        logger.debug(
            "Stage %d (%s): %d main/%d target, %d branch, %d micro, %d ring",
            self.stage_number, layer_id, self.main_count(), target,
            layer.count(BRANCH), layer.count(MICRO), layer.count(RING),
        )
        return layer

    def grow_mains(self, target: int) -> None:
        for trunk in list(self.trunks):
            self.extend_trunk(trunk)

        produced = self.main_count()
        guard = 0
        while produced < target and guard < target * 4:
            guard += 1
            viable = [t for t in self.trunks if not t.exhausted]
            if viable and self.rng.next() < self.rules.continuation_bias:
                trunk = viable[math.floor(self.rng.next() * len(viable))]
                if self.extend_trunk(trunk) is not None:
                    produced = self.main_count()
                    continue

            if self.rng.next() < self.rules.new_root_chance:
                self.create_root(target)
            elif self.trunks:
                trunk = self.trunks[math.floor(self.rng.next() * len(self.trunks))]
                trunk.exhausted = False
                self.extend_trunk(trunk)
            produced = self.main_count()


# ─── Public API ─────────────────────────────────────────────────────────────


def _resolve(
    profile_key: Optional[str],
    registry: Optional[ProfileRegistry],
    rules: Optional[GraphGrowthRules],
) -> Tuple[ProfileRegistry, CrackProfile, GraphGrowthRules]:
    registry = registry or default_registry()
    profile = registry.profile_for(profile_key)
    growth = rules if rules is not None else registry.growth_rules_for(profile)
    return registry, profile, growth


def _build_layers(
    geometry: PolygonGeometry,
    crack_seed: int,
    profile: CrackProfile,
    growth: GraphGrowthRules,
    rng: Optional[RandomStream],
    min_surface_radius: Optional[float],
) -> Iterator[CrackLayer]:
    stream = rng if rng is not None else RandomStream(derive_seed(crack_seed, CRACK_SALT))
    builder = _CrackBuilder(geometry, crack_seed, profile, growth, stream, min_surface_radius)
    for index in range(STAGE_COUNT):
        yield builder.build_stage(index)


def iter_crack_layers(
    geometry: PolygonGeometry,
    crack_seed: int,
    profile_key: Optional[str] = "default",
    registry: Optional[ProfileRegistry] = None,
    rules: Optional[GraphGrowthRules] = None,
    rng: Optional[RandomStream] = None,
    min_surface_radius: Optional[float] = None,
) -> Iterator[CrackLayer]:
    """Yield the three crack layers one finished stage at a time.

    Stopping iteration between layers is the only safe way to abandon a
    build part-way; each yielded layer is complete.
    """
    _, profile, growth = _resolve(profile_key, registry, rules)
    yield from _build_layers(geometry, crack_seed, profile, growth, rng, min_surface_radius)


def generate_crack_layers(
    geometry: PolygonGeometry,
    crack_seed: int,
    profile_key: Optional[str] = "default",
    registry: Optional[ProfileRegistry] = None,
    rules: Optional[GraphGrowthRules] = None,
    rng: Optional[RandomStream] = None,
    min_surface_radius: Optional[float] = None,
) -> CrackPattern:
    """Build all crack layers for one body.

    Args:
        geometry: outline built with polygon_geometry.build_geometry().
        crack_seed: determinism key for this body.
        profile_key: crack profile; unknown keys fall back to "default".
        registry: profile source (built-in tables when omitted).
        rules: growth rules override (profile-merged registry rules otherwise).
        rng: explicit crack-scoped stream; derived from the seed otherwise.
        min_surface_radius: override for the cached surface radius.

    Returns:
        CrackPattern with exactly three layers.
    """
    registry, profile, growth = _resolve(profile_key, registry, rules)
    layers = tuple(
        _build_layers(geometry, crack_seed, profile, growth, rng, min_surface_radius)
    )
    segments = tuple(s for layer in layers for s in layer.segments)
    logger.debug(
        "Crack pattern %s seed=%d: %d segments across %d layers",
        profile.key, crack_seed, len(segments), len(layers),
    )
    return CrackPattern(
        profile_key=profile.key,
        crack_seed=crack_seed,
        layers=layers,
        thresholds=tuple(registry.thresholds),
        segments=segments,
        lookup={s.id: s for s in segments},
    )


def generate_crack_layers_batch(
    requests: Sequence[CrackRequest],
    registry: Optional[ProfileRegistry] = None,
    max_workers: Optional[int] = None,
) -> List[CrackPattern]:
    """Generate patterns for independent bodies in parallel, preserving order."""
    registry = registry or default_registry()
    if not requests:
        return []
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        patterns = list(
            pool.map(
                lambda req: generate_crack_layers(
                    req.geometry, req.crack_seed, req.profile_key, registry,
                ),
                requests,
            )
        )
    logger.info("Generated %d crack patterns", len(patterns))
    return patterns
