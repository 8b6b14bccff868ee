"""Reduce raw observation points into per-intensity region groups."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from quakerelay.core.types import ObservationPoint
from quakerelay.quake.regions import translate_region
from quakerelay.quake.scale import decode_scale, is_known_scale


class SeverityGroup(BaseModel):
    """Regions whose highest observed intensity is *scale*."""

    model_config = ConfigDict(frozen=True)

    scale: int
    label: str
    regions: tuple[str, ...]


def highest_scale_by_region(points: Iterable[ObservationPoint]) -> dict[str, int]:
    """Max recognized intensity per raw prefecture name.

    Points with an unrecognized scale or no prefecture are skipped without
    affecting other points.
    """
    highest: dict[str, int] = {}
    for p in points:
        if not p.pref or not is_known_scale(p.scale):
            continue
        cur = highest.get(p.pref)
        if cur is None or p.scale > cur:
            highest[p.pref] = p.scale
    return highest


def group_points(points: Iterable[ObservationPoint]) -> list[SeverityGroup]:
    """Group prefectures by their highest intensity.

    Groups are ordered by ascending intensity; region names within a group
    are translated and sorted lexically, so any permutation of the same
    points gives identical output.
    """
    by_scale: dict[int, list[str]] = defaultdict(list)
    for pref, scale in highest_scale_by_region(points).items():
        by_scale[scale].append(translate_region(pref))

    groups: list[SeverityGroup] = []
    for scale in sorted(by_scale):
        label, _ = decode_scale(scale)
        groups.append(
            SeverityGroup(
                scale=scale,
                label=label,
                regions=tuple(sorted(by_scale[scale])),
            )
        )
    return groups


def affected_regions(groups: Iterable[SeverityGroup]) -> tuple[str, ...]:
    """Flat, sorted display names across all groups."""
    return tuple(sorted({r for g in groups for r in g.regions}))
