#!/usr/bin/env python3
"""Generate crack layers and fragments for one asteroid and write them as JSON."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from crack_generator import generate_crack_layers
from fracture_export import (
    fragments_to_payload,
    pattern_digest,
    pattern_to_payload,
    write_json,
)
from fracture_profiles import default_registry, load_registry
from fragmentation import FragmentSource, generate_fragments
from polygon_geometry import (
    build_geometry,
    generate_asteroid_vertices,
    regular_polygon_vertices,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Crack layers + fragment descriptors for a destructible asteroid"
    )
    parser.add_argument("--seed", type=int, default=12345, help="Crack seed")
    parser.add_argument(
        "--variant",
        default=None,
        help="Asteroid variant (selects profile and rules unless given explicitly)",
    )
    parser.add_argument("--profile", default=None, help="Crack profile key")
    parser.add_argument("--rules", default=None, help="Fragment rule set key")
    parser.add_argument(
        "--size", default="large", help="Size category (small/medium/large)"
    )
    parser.add_argument(
        "--radius",
        type=float,
        default=None,
        help="Nominal radius (defaults to the size table radius)",
    )
    parser.add_argument(
        "--sides",
        type=int,
        default=0,
        help="Use a regular polygon with this many sides instead of a seeded outline",
    )
    parser.add_argument("--generation", type=int, default=0, help="Fragment generation")
    parser.add_argument("--wave", type=int, default=1, help="Wave number")
    parser.add_argument("--config", default=None, help="Registry JSON file")
    parser.add_argument("--out", default=None, help="Output JSON path")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logs"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        registry = load_registry(args.config) if args.config else default_registry()
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    binding = registry.binding_for_variant(args.variant)
    profile_key = args.profile or binding.crack_profile
    rules_key = args.rules or binding.fragment_profile

    radius = args.radius if args.radius is not None else registry.sizes.radius_for(args.size)
    if args.sides >= 3:
        vertices = regular_polygon_vertices(args.sides, radius)
    else:
        vertices = generate_asteroid_vertices(radius, args.seed)
    geometry = build_geometry(vertices, radius)
    for issue in geometry.validate_geometry():
        logging.getLogger(__name__).warning("Outline: %s", issue)

    pattern = generate_crack_layers(geometry, args.seed, profile_key, registry)
    fragments = generate_fragments(
        FragmentSource(
            size=args.size,
            position=(0.0, 0.0),
            velocity=(0.0, 0.0),
            radius=radius,
            generation=args.generation,
            wave=args.wave,
            crack_seed=args.seed,
            entity_id="cli",
        ),
        rules_key,
        registry,
    )

    payload = {
        "outline": [list(v) for v in geometry.vertices],
        "radius": geometry.radius,
        "min_surface_radius": geometry.min_surface_radius,
        "crack_pattern": pattern_to_payload(pattern),
        "digest": pattern_digest(pattern),
        "fragments": fragments_to_payload(fragments),
    }
    if args.out:
        write_json(Path(args.out), payload)

    print(f"Profile: {pattern.profile_key}")
    print(f"Min surface radius: {geometry.min_surface_radius:.3f}")
    for layer in pattern.layers:
        print(
            f"Layer {layer.stage} ({layer.id}): {len(layer.segments)} segments, "
            f"intensity {layer.intensity:g}"
        )
    print(f"Fragments: {len(fragments)}")
    print(f"Digest: {payload['digest']}")
    if args.out:
        print(f"Output: {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
