"""
Crack profiles, fragment rule sets and the registry that serves them.

Profiles and rule sets are plain configuration data (the tables below, a
JSON file, or a mapping handed over by a configuration service). A
ProfileRegistry is built from that data once, then passed explicitly to the
generators. Every mapping it holds is a read-only view. Lookups never raise:
unknown keys resolve to the "default" entry.
"""
import json
import logging
import math
import re
from dataclasses import dataclass, field, fields, replace
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_KEY = "default"
STAGE_COUNT = 3

Range = Tuple[float, float]


def _frozen(value: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Read-only copy of a mapping."""
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True)
class GraphGrowthRules:
    """Shared tunables for crack graph growth."""

    continuation_bias: float = 0.82    # chance to extend an existing trunk
    new_root_chance: float = 0.22      # chance to start a trunk when not extending
    child_penalty: float = 0.45        # extra weight factor for branch parents
    branch_parent_penalty: float = 0.5  # per-child weight decay (branches)
    micro_parent_penalty: float = 0.35  # per-child weight decay (micro)
    min_segment_length_ratio: float = 0.12  # of nominal radius
    surface_margin: float = 0.65       # kept between endpoints and outline
    branch_anchor_jitter: float = 0.15
    micro_anchor_jitter: float = 0.22
    continuation_jitter: float = 0.5   # radians

    @property
    def effective_min_segment_length_ratio(self) -> float:
        return max(0.04, self.min_segment_length_ratio)

    def merged(self, overrides: Optional[Mapping[str, Any]]) -> "GraphGrowthRules":
        """Copy with any known field replaced from `overrides`."""
        if not overrides:
            return self
        updates = {}
        for f in fields(self):
            value = _lookup(overrides, f.name)
            if value is not None:
                updates[f.name] = float(value)
        return replace(self, **updates) if updates else self


@dataclass(frozen=True)
class SpawnSpec:
    """Branch or micro-crack spawning for one stage."""

    count: int = 0
    length_multiplier: Optional[float] = None
    spread: Optional[float] = None
    offset_from_start: Optional[float] = None


@dataclass(frozen=True)
class RingSpec:
    segments: int = 0
    radius_range: Optional[Range] = None  # fraction of the uniform radius
    width: Optional[float] = None


@dataclass(frozen=True)
class BurstSpec:
    """Visual burst handed to the renderer when a stage is revealed."""

    cracks: Optional[int] = None
    sparks: Optional[int] = None
    shards: Optional[int] = None

    def resolve(self, segment_count: int) -> "BurstSpec":
        """Fill unset counts from the number of segments in the stage."""
        return BurstSpec(
            cracks=self.cracks if self.cracks is not None else max(segment_count, 4),
            sparks=(
                self.sparks if self.sparks is not None
                else math.ceil(max(segment_count, 1) / 3)
            ),
            shards=self.shards if self.shards is not None else max(0, segment_count // 4),
        )

    def to_dict(self) -> Dict[str, Optional[int]]:
        return {"cracks": self.cracks, "sparks": self.sparks, "shards": self.shards}


@dataclass(frozen=True)
class CrackStageTemplate:
    id: str
    main_rays: Optional[int] = None
    main_length_range: Range = (0.5, 0.7)
    start_radius_range: Optional[Range] = None
    angular_jitter: float = 0.25
    branch: Optional[SpawnSpec] = None
    micro: Optional[SpawnSpec] = None
    ring: Optional[RingSpec] = None
    intensity: Optional[float] = None
    burst: BurstSpec = field(default_factory=BurstSpec)
    line_width_range: Optional[Range] = None


@dataclass(frozen=True)
class CrackProfile:
    key: str
    stages: Tuple[CrackStageTemplate, ...]
    rotation_jitter: float = 0.3
    start_radius_range: Range = (0.2, 0.32)
    line_width_range: Range = (0.8, 1.25)
    graph_rules: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "stages", tuple(self.stages))
        object.__setattr__(self, "graph_rules", _frozen(self.graph_rules))

    def stage_template(self, index: int) -> CrackStageTemplate:
        """Template for 0-based stage `index`; short profiles repeat their last stage."""
        if index < len(self.stages):
            return self.stages[index]
        return self.stages[-1]


@dataclass(frozen=True)
class FragmentRuleSet:
    key: str
    inherit_velocity: float = 0.4
    angle_jitter: float = math.pi / 6
    radial_distance_range: Range = (0.45, 0.9)
    radial_offset_jitter: float = 0.2
    speed_multiplier_by_size: Mapping[str, Range] = field(default_factory=dict)
    count_by_size: Mapping[str, Tuple[int, int]] = field(default_factory=dict)
    max_generation: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "speed_multiplier_by_size", _frozen(self.speed_multiplier_by_size))
        object.__setattr__(self, "count_by_size", _frozen(self.count_by_size))

    def count_range(self, size: str) -> Tuple[int, int]:
        return self.count_by_size.get(size) or self.count_by_size.get(DEFAULT_KEY) or (2, 3)

    def speed_range(self, size: str) -> Range:
        return (
            self.speed_multiplier_by_size.get(size)
            or self.speed_multiplier_by_size.get(DEFAULT_KEY)
            or (0.85, 1.2)
        )


@dataclass(frozen=True)
class SizeTable:
    """Size categories ordered smallest first, with per-size base speed and radius."""

    order: Tuple[str, ...] = ("small", "medium", "large")
    base_speed: Mapping[str, float] = field(
        default_factory=lambda: {"large": 25.0, "medium": 45.0, "small": 70.0}
    )
    radius: Mapping[str, float] = field(
        default_factory=lambda: {"large": 35.0, "medium": 22.0, "small": 12.0}
    )

    def __post_init__(self):
        object.__setattr__(self, "order", tuple(self.order))
        object.__setattr__(self, "base_speed", _frozen(self.base_speed))
        object.__setattr__(self, "radius", _frozen(self.radius))

    @property
    def smallest(self) -> str:
        return self.order[0]

    def next_smaller(self, size: str) -> Optional[str]:
        """Next size down, or None for the smallest (or an unknown) size."""
        if size not in self.order:
            return None
        index = self.order.index(size)
        return self.order[index - 1] if index > 0 else None

    def base_speed_for(self, size: str) -> float:
        return float(self.base_speed.get(size, 40.0))

    def radius_for(self, size: str) -> float:
        return float(self.radius.get(size, self.radius.get(self.smallest, 12.0)))


@dataclass(frozen=True)
class VariantBinding:
    crack_profile: str = DEFAULT_KEY
    fragment_profile: str = DEFAULT_KEY


@dataclass(frozen=True)
class ProfileRegistry:
    """Read-only lookup from variant keys to crack profiles and fragment rules."""

    crack_profiles: Mapping[str, CrackProfile]
    fragment_rules: Mapping[str, FragmentRuleSet]
    graph_rules: GraphGrowthRules = field(default_factory=GraphGrowthRules)
    thresholds: Tuple[float, ...] = (0.7, 0.4, 0.15)
    sizes: SizeTable = field(default_factory=SizeTable)
    variants: Mapping[str, VariantBinding] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "crack_profiles", _frozen(self.crack_profiles))
        object.__setattr__(self, "fragment_rules", _frozen(self.fragment_rules))
        object.__setattr__(self, "variants", _frozen(self.variants))
        object.__setattr__(self, "thresholds", tuple(self.thresholds))

    def profile_for(self, key: Optional[str]) -> CrackProfile:
        profile = self.crack_profiles.get(key) if key is not None else None
        if profile is None:
            logger.debug("Unknown crack profile %r, using %r", key, DEFAULT_KEY)
            return self.crack_profiles[DEFAULT_KEY]
        return profile

    def rules_for(self, key: Optional[str]) -> FragmentRuleSet:
        rules = self.fragment_rules.get(key) if key is not None else None
        if rules is None:
            logger.debug("Unknown fragment rule set %r, using %r", key, DEFAULT_KEY)
            return self.fragment_rules[DEFAULT_KEY]
        return rules

    def growth_rules_for(self, profile: CrackProfile) -> GraphGrowthRules:
        return self.graph_rules.merged(profile.graph_rules)

    def binding_for_variant(self, variant: Optional[str]) -> VariantBinding:
        binding = self.variants.get(variant) if variant is not None else None
        if binding is None:
            logger.debug("Unknown asteroid variant %r, using default keys", variant)
            return VariantBinding()
        return binding

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "ProfileRegistry":
        """Build a registry from raw configuration tables.

        Field names may be snake_case or camelCase. Raises ValueError for
        malformed tables.
        """
        if not isinstance(raw, Mapping):
            raise ValueError("Registry configuration must be a mapping")

        raw_profiles = _lookup(raw, "crack_profiles") or {}
        raw_rules = _lookup(raw, "fragment_rules") or {}
        if DEFAULT_KEY not in raw_profiles:
            raise ValueError("crack_profiles must define a 'default' entry")
        if DEFAULT_KEY not in raw_rules:
            raise ValueError("fragment_rules must define a 'default' entry")

        thresholds = tuple(float(t) for t in (_lookup(raw, "thresholds") or (0.7, 0.4, 0.15)))
        if len(thresholds) != STAGE_COUNT:
            raise ValueError(
                f"Expected {STAGE_COUNT} crack thresholds, got {len(thresholds)}"
            )

        profiles = {
            key: _parse_profile(key, value) for key, value in raw_profiles.items()
        }
        rules = {key: _parse_rules(key, value) for key, value in raw_rules.items()}
        graph_rules = GraphGrowthRules().merged(_lookup(raw, "graph_rules"))
        sizes = _parse_sizes(_lookup(raw, "sizes"))
        variants = {
            key: VariantBinding(
                crack_profile=_lookup(value, "crack_profile") or DEFAULT_KEY,
                fragment_profile=_lookup(value, "fragment_profile") or DEFAULT_KEY,
            )
            for key, value in (_lookup(raw, "variants") or {}).items()
        }

        return cls(
            crack_profiles=profiles,
            fragment_rules=rules,
            graph_rules=graph_rules,
            thresholds=thresholds,
            sizes=sizes,
            variants=variants,
        )


def load_registry(path: str) -> ProfileRegistry:
    """Load a registry from a JSON file with the same layout as DEFAULT_TABLES."""
    with Path(path).open("r", encoding="utf-8") as f:
        raw = json.load(f)
    registry = ProfileRegistry.from_mapping(raw)
    logger.info(
        "Loaded registry from %s: %d crack profiles, %d fragment rule sets",
        path, len(registry.crack_profiles), len(registry.fragment_rules),
    )
    return registry


@lru_cache(maxsize=1)
def default_registry() -> ProfileRegistry:
    """Registry built from the built-in tables."""
    return ProfileRegistry.from_mapping(DEFAULT_TABLES)


# ─── Parsing helpers ────────────────────────────────────────────────────────

_CAMEL_RE = re.compile(r"_([a-z])")


def _camel(name: str) -> str:
    return _CAMEL_RE.sub(lambda m: m.group(1).upper(), name)


def _lookup(raw: Optional[Mapping[str, Any]], name: str) -> Any:
    if not raw:
        return None
    if name in raw:
        return raw[name]
    return raw.get(_camel(name))


def _float(raw: Mapping[str, Any], name: str, default: float) -> float:
    value = _lookup(raw, name)
    return default if value is None else float(value)


def _range(value: Any, fallback: Optional[Range] = None) -> Optional[Range]:
    if value is None:
        return fallback
    if isinstance(value, (int, float)):
        return (float(value), float(value))
    items = list(value)
    if len(items) != 2:
        raise ValueError(f"Expected a [min, max] range, got {value!r}")
    return (float(items[0]), float(items[1]))


def _count(value: Any, what: str) -> int:
    count = int(round(float(value or 0)))
    if count < 0:
        raise ValueError(f"{what} must be >= 0, got {value!r}")
    return count


def _parse_spawn(raw: Optional[Mapping[str, Any]], what: str) -> Optional[SpawnSpec]:
    if not raw:
        return None
    return SpawnSpec(
        count=_count(_lookup(raw, "count"), f"{what}.count"),
        length_multiplier=_lookup(raw, "length_multiplier"),
        spread=_lookup(raw, "spread"),
        offset_from_start=_lookup(raw, "offset_from_start"),
    )


def _parse_ring(raw: Optional[Mapping[str, Any]], what: str) -> Optional[RingSpec]:
    if not raw:
        return None
    return RingSpec(
        segments=_count(_lookup(raw, "segments"), f"{what}.segments"),
        radius_range=_range(_lookup(raw, "radius_range")),
        width=_lookup(raw, "width"),
    )


def _parse_stage(profile_key: str, index: int, raw: Mapping[str, Any]) -> CrackStageTemplate:
    what = f"{profile_key} stage {index + 1}"
    main_rays = _lookup(raw, "main_rays")
    burst = _lookup(raw, "burst") or {}
    return CrackStageTemplate(
        id=_lookup(raw, "id") or f"{profile_key}-stage-{index + 1}",
        main_rays=None if main_rays is None else _count(main_rays, f"{what}.main_rays"),
        main_length_range=_range(_lookup(raw, "main_length_range"), (0.5, 0.7)),
        start_radius_range=_range(_lookup(raw, "start_radius_range")),
        angular_jitter=_float(raw, "angular_jitter", 0.25),
        branch=_parse_spawn(_lookup(raw, "branch"), f"{what}.branch"),
        micro=_parse_spawn(_lookup(raw, "micro"), f"{what}.micro"),
        ring=_parse_ring(_lookup(raw, "ring"), f"{what}.ring"),
        intensity=_lookup(raw, "intensity"),
        burst=BurstSpec(
            cracks=_lookup(burst, "cracks"),
            sparks=_lookup(burst, "sparks"),
            shards=_lookup(burst, "shards"),
        ),
        line_width_range=_range(_lookup(raw, "line_width_range")),
    )


def _parse_profile(key: str, raw: Mapping[str, Any]) -> CrackProfile:
    raw_stages = _lookup(raw, "stages") or _lookup(raw, "layers") or []
    if not raw_stages:
        raise ValueError(f"Crack profile {key!r} defines no stages")
    if len(raw_stages) > STAGE_COUNT:
        raise ValueError(
            f"Crack profile {key!r} defines {len(raw_stages)} stages (max {STAGE_COUNT})"
        )
    profile_key = _lookup(raw, "key") or key
    return CrackProfile(
        key=profile_key,
        stages=tuple(_parse_stage(profile_key, i, s) for i, s in enumerate(raw_stages)),
        rotation_jitter=_float(raw, "rotation_jitter", 0.3),
        start_radius_range=_range(_lookup(raw, "start_radius_range"), (0.2, 0.32)),
        line_width_range=_range(_lookup(raw, "line_width_range"), (0.8, 1.25)),
        graph_rules=dict(_lookup(raw, "graph_rules") or {}),
    )


def _parse_rules(key: str, raw: Mapping[str, Any]) -> FragmentRuleSet:
    counts = {}
    for size, value in (_lookup(raw, "count_by_size") or {}).items():
        low, high = _range(value)
        if low < 0 or high < 0:
            raise ValueError(f"Fragment rule set {key!r} has a negative count for {size!r}")
        counts[size] = (math.floor(low), math.floor(high))
    speeds = {
        size: _range(value)
        for size, value in (_lookup(raw, "speed_multiplier_by_size") or {}).items()
    }
    max_generation = _lookup(raw, "max_generation")
    angle_jitter = _lookup(raw, "angle_jitter")
    offset_jitter = _lookup(raw, "radial_offset_jitter")
    inherit = _lookup(raw, "inherit_velocity")
    return FragmentRuleSet(
        key=_lookup(raw, "key") or key,
        inherit_velocity=0.4 if inherit is None else float(inherit),
        angle_jitter=math.pi / 6 if angle_jitter is None else float(angle_jitter),
        radial_distance_range=_range(_lookup(raw, "radial_distance_range"), (0.45, 0.9)),
        radial_offset_jitter=0.2 if offset_jitter is None else float(offset_jitter),
        speed_multiplier_by_size=speeds,
        count_by_size=counts,
        max_generation=None if max_generation is None else int(max_generation),
    )


def _parse_sizes(raw: Optional[Mapping[str, Any]]) -> SizeTable:
    if not raw:
        return SizeTable()
    defaults = SizeTable()
    order = tuple(_lookup(raw, "order") or defaults.order)
    if not order:
        raise ValueError("sizes.order must list at least one size")
    return SizeTable(
        order=order,
        base_speed={k: float(v) for k, v in (_lookup(raw, "base_speed") or defaults.base_speed).items()},
        radius={k: float(v) for k, v in (_lookup(raw, "radius") or defaults.radius).items()},
    )


# ─── Built-in tables ────────────────────────────────────────────────────────


def _stage(
    stage_id, main_rays, main_length, start_radius, jitter,
    branch, micro, ring, intensity, burst,
):
    return {
        "id": stage_id,
        "main_rays": main_rays,
        "main_length_range": main_length,
        "start_radius_range": start_radius,
        "angular_jitter": jitter,
        "branch": dict(zip(("count", "length_multiplier", "spread", "offset_from_start"), branch)),
        "micro": dict(zip(("count", "length_multiplier", "spread"), micro)),
        "ring": dict(zip(("segments", "radius_range", "width"), ring)) if ring else None,
        "intensity": intensity,
        "burst": dict(zip(("cracks", "sparks", "shards"), burst)),
    }


DEFAULT_CRACK_PROFILES: Dict[str, Dict[str, Any]] = {
    "default": {
        "rotation_jitter": 0.28,
        "start_radius_range": [0.18, 0.32],
        "line_width_range": [0.85, 1.25],
        "stages": [
            _stage("default-stage-1", 3, [0.48, 0.62], [0.24, 0.36], 0.2,
                   (1, 0.55, 0.32, 0.45), (0, 0.35, 0.5), None, 0.6, (4, 1, 0)),
            _stage("default-stage-2", 4, [0.6, 0.8], [0.22, 0.34], 0.24,
                   (2, 0.5, 0.36, 0.38), (2, 0.32, 0.46), (5, [0.45, 0.62], 0.58),
                   0.85, (6, 2, 1)),
            _stage("default-stage-3", 5, [0.72, 0.92], [0.18, 0.28], 0.3,
                   (3, 0.46, 0.38, 0.32), (4, 0.28, 0.5), (7, [0.5, 0.72], 0.62),
                   1.0, (8, 3, 2)),
        ],
    },
    "denseCore": {
        "rotation_jitter": 0.2,
        "start_radius_range": [0.26, 0.4],
        "line_width_range": [1.1, 1.6],
        "stages": [
            _stage("denseCore-stage-1", 4, [0.5, 0.7], [0.3, 0.4], 0.16,
                   (1, 0.58, 0.22, 0.52), (1, 0.32, 0.2), (4, [0.32, 0.42], 0.5),
                   0.7, (5, 1, 1)),
            _stage("denseCore-stage-2", 5, [0.62, 0.82], [0.28, 0.38], 0.18,
                   (2, 0.5, 0.28, 0.44), (2, 0.3, 0.26), (6, [0.38, 0.55], 0.58),
                   0.95, (7, 2, 2)),
            _stage("denseCore-stage-3", 6, [0.74, 0.94], [0.26, 0.36], 0.22,
                   (3, 0.48, 0.3, 0.36), (3, 0.26, 0.28), (8, [0.42, 0.62], 0.62),
                   1.1, (9, 3, 3)),
        ],
    },
    "volatile": {
        "rotation_jitter": 0.42,
        "start_radius_range": [0.2, 0.34],
        "line_width_range": [0.8, 1.3],
        "stages": [
            _stage("volatile-stage-1", 3, [0.52, 0.7], [0.22, 0.34], 0.34,
                   (1, 0.6, 0.46, 0.4), (2, 0.32, 0.52), None, 0.75, (5, 2, 1)),
            _stage("volatile-stage-2", 4, [0.66, 0.86], [0.2, 0.34], 0.42,
                   (2, 0.55, 0.48, 0.34), (3, 0.3, 0.54), (6, [0.46, 0.66], 0.56),
                   1.0, (8, 3, 2)),
            _stage("volatile-stage-3", 5, [0.78, 1.0], [0.18, 0.3], 0.5,
                   (3, 0.5, 0.5, 0.28), (4, 0.28, 0.6), (7, [0.5, 0.7], 0.62),
                   1.2, (10, 4, 3)),
        ],
    },
    "parasite": {
        "rotation_jitter": 0.34,
        "start_radius_range": [0.24, 0.38],
        "line_width_range": [0.85, 1.3],
        "stages": [
            _stage("parasite-stage-1", 4, [0.54, 0.72], [0.26, 0.38], 0.26,
                   (1, 0.62, 0.3, 0.42), (1, 0.32, 0.34), None, 0.7, (5, 1, 1)),
            _stage("parasite-stage-2", 5, [0.66, 0.86], [0.24, 0.34], 0.32,
                   (2, 0.56, 0.34, 0.36), (2, 0.28, 0.4), (5, [0.46, 0.62], 0.52),
                   0.95, (7, 2, 2)),
            _stage("parasite-stage-3", 6, [0.78, 0.98], [0.22, 0.32], 0.36,
                   (3, 0.5, 0.36, 0.3), (3, 0.26, 0.46), (7, [0.5, 0.68], 0.58),
                   1.15, (9, 3, 3)),
        ],
    },
    "crystal": {
        "rotation_jitter": 0.18,
        "start_radius_range": [0.2, 0.3],
        "line_width_range": [0.9, 1.35],
        "stages": [
            _stage("crystal-stage-1", 4, [0.58, 0.74], [0.22, 0.3], 0.14,
                   (1, 0.5, 0.2, 0.4), (2, 0.3, 0.22), (6, [0.44, 0.6], 0.55),
                   0.75, (6, 2, 1)),
            _stage("crystal-stage-2", 6, [0.7, 0.88], [0.2, 0.28], 0.18,
                   (2, 0.46, 0.24, 0.36), (3, 0.26, 0.28), (8, [0.48, 0.66], 0.58),
                   1.0, (8, 3, 2)),
            _stage("crystal-stage-3", 8, [0.78, 0.98], [0.18, 0.26], 0.2,
                   (3, 0.44, 0.26, 0.32), (4, 0.22, 0.3), (10, [0.52, 0.7], 0.6),
                   1.2, (10, 4, 3)),
        ],
    },
}


def _rules(inherit, jitter, radial, offset, speeds, counts, max_generation=3):
    return {
        "inherit_velocity": inherit,
        "angle_jitter": jitter,
        "radial_distance_range": radial,
        "radial_offset_jitter": offset,
        "speed_multiplier_by_size": dict(zip(("large", "medium", "small"), speeds)),
        "count_by_size": dict(zip(("large", "medium", "small"), counts)),
        "max_generation": max_generation,
    }


DEFAULT_FRAGMENT_RULES: Dict[str, Dict[str, Any]] = {
    "default": _rules(0.42, 0.45, [0.48, 0.92], 0.18,
                      ([0.82, 1.12], [0.92, 1.22], [1, 1]), ([3, 4], [2, 3], [0, 0])),
    "denseCore": _rules(0.34, 0.32, [0.42, 0.78], 0.12,
                        ([0.7, 0.95], [0.82, 1.08], [1, 1]), ([2, 3], [2, 2], [0, 0])),
    "volatile": _rules(0.55, 0.6, [0.55, 1.05], 0.24,
                       ([0.95, 1.35], [1, 1.35], [1, 1]), ([3, 4], [3, 4], [0, 0])),
    "parasite": _rules(0.5, 0.5, [0.5, 0.9], 0.2,
                       ([0.9, 1.25], [0.95, 1.25], [1, 1]), ([3, 4], [3, 3], [0, 0])),
    "crystal": _rules(0.4, 0.28, [0.48, 0.86], 0.16,
                      ([0.82, 1.08], [0.88, 1.12], [1, 1]), ([4, 4], [3, 4], [0, 0])),
}

# Seven asteroid variants share the five profiles.
DEFAULT_VARIANTS: Dict[str, Dict[str, str]] = {
    "common": {"crack_profile": "default", "fragment_profile": "default"},
    "iron": {"crack_profile": "default", "fragment_profile": "default"},
    "denseCore": {"crack_profile": "denseCore", "fragment_profile": "denseCore"},
    "gold": {"crack_profile": "crystal", "fragment_profile": "crystal"},
    "volatile": {"crack_profile": "volatile", "fragment_profile": "volatile"},
    "parasite": {"crack_profile": "parasite", "fragment_profile": "parasite"},
    "crystal": {"crack_profile": "crystal", "fragment_profile": "crystal"},
}

DEFAULT_TABLES: Dict[str, Any] = {
    "thresholds": [0.7, 0.4, 0.15],
    "graph_rules": {
        "continuation_bias": 0.82,
        "new_root_chance": 0.22,
        "child_penalty": 0.45,
        "branch_parent_penalty": 0.5,
        "micro_parent_penalty": 0.35,
        "min_segment_length_ratio": 0.12,
        "surface_margin": 0.65,
        "branch_anchor_jitter": 0.15,
        "micro_anchor_jitter": 0.22,
        "continuation_jitter": 0.5,
    },
    "sizes": {
        "order": ["small", "medium", "large"],
        "base_speed": {"large": 25, "medium": 45, "small": 70},
        "radius": {"large": 35, "medium": 22, "small": 12},
    },
    "crack_profiles": DEFAULT_CRACK_PROFILES,
    "fragment_rules": DEFAULT_FRAGMENT_RULES,
    "variants": DEFAULT_VARIANTS,
}
