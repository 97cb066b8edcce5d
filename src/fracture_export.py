"""Serialization helpers for crack patterns and fragment descriptors."""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Sequence

from shapely.geometry import LineString, MultiLineString

from crack_generator import CrackLayer, CrackPattern, CrackSegment
from fragmentation import FragmentDescriptor

SCHEMA_CRACK_PATTERN_V1 = "fracture.crack_pattern.v1"
SCHEMA_FRAGMENTS_V1 = "fracture.fragments.v1"


def canonical_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def sha256_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def segment_to_dict(segment: CrackSegment) -> Dict[str, Any]:
    payload = asdict(segment)
    payload["start"] = list(segment.start)
    payload["end"] = list(segment.end)
    return payload


def layer_to_dict(layer: CrackLayer) -> Dict[str, Any]:
    return {
        "id": layer.id,
        "stage": layer.stage,
        "intensity": layer.intensity,
        "burst": layer.burst.to_dict(),
        "segment_ids": layer.segment_ids,
        "segments": [segment_to_dict(s) for s in layer.segments],
    }


def pattern_to_payload(pattern: CrackPattern) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_CRACK_PATTERN_V1,
        "profile": pattern.profile_key,
        "crack_seed": pattern.crack_seed,
        "thresholds": list(pattern.thresholds),
        "layers": [layer_to_dict(layer) for layer in pattern.layers],
    }


def fragments_to_payload(fragments: Sequence[FragmentDescriptor]) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_FRAGMENTS_V1,
        "fragments": [
            {
                "position": list(f.position),
                "velocity": list(f.velocity),
                "size": f.size,
                "wave": f.wave,
                "parent_id": f.parent_id,
                "generation": f.generation,
            }
            for f in fragments
        ],
    }


def pattern_digest(pattern: CrackPattern) -> str:
    """sha256 of the canonical pattern payload; equal digests mean identical output."""
    return sha256_text(canonical_json(pattern_to_payload(pattern)))


def layer_to_multilinestring(layer: CrackLayer) -> MultiLineString:
    return MultiLineString([[s.start, s.end] for s in layer.segments])


def segments_to_lines(segments: Sequence[CrackSegment]) -> List[LineString]:
    return [LineString([s.start, s.end]) for s in segments]


def write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
