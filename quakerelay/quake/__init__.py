"""Seismic report normalization: intensity codes, regions, grouping."""

from quakerelay.quake.aggregator import SeverityGroup, affected_regions, group_points
from quakerelay.quake.parser import decode_message, parse_message
from quakerelay.quake.regions import translate_region, unknown_regions
from quakerelay.quake.scale import decode_scale, is_known_scale

__all__ = [
    "SeverityGroup",
    "affected_regions",
    "decode_message",
    "decode_scale",
    "group_points",
    "is_known_scale",
    "parse_message",
    "translate_region",
    "unknown_regions",
]
