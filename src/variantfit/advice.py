"""
Advisory layout hints.

An external predictor may suggest, per target, an orientation, a layout
pattern, a background node and per-node positioning. Hints arrive as loosely
structured data; parsing is lenient and drops anything malformed instead of
raising, so a bad hint simply falls through to the deterministic tier.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .models import Alignment, FlowMode


@dataclass(frozen=True)
class LayoutPattern:
    """
    A named arrangement an advisory hint can select.

    Attributes:
        id: Pattern identifier (e.g. "split-left").
        mode: Flow orientation the pattern implies.
        primary_align: Alignment along the flow axis.
        counter_align: Alignment across the flow axis.
    """

    id: str
    mode: FlowMode
    primary_align: Alignment
    counter_align: Alignment


LAYOUT_PATTERNS: Dict[str, LayoutPattern] = {
    pattern.id: pattern
    for pattern in (
        LayoutPattern("horizontal-stack", FlowMode.HORIZONTAL, Alignment.SPACE_BETWEEN, Alignment.CENTER),
        LayoutPattern("vertical-stack", FlowMode.VERTICAL, Alignment.MIN, Alignment.CENTER),
        LayoutPattern("centered-stack", FlowMode.VERTICAL, Alignment.CENTER, Alignment.CENTER),
        LayoutPattern("split-left", FlowMode.HORIZONTAL, Alignment.SPACE_BETWEEN, Alignment.CENTER),
        LayoutPattern("split-right", FlowMode.HORIZONTAL, Alignment.SPACE_BETWEEN, Alignment.CENTER),
        LayoutPattern("layered-hero", FlowMode.NONE, Alignment.CENTER, Alignment.CENTER),
        LayoutPattern("layered-gradient", FlowMode.NONE, Alignment.MIN, Alignment.CENTER),
        LayoutPattern("hero-first", FlowMode.VERTICAL, Alignment.MIN, Alignment.CENTER),
        LayoutPattern("text-first", FlowMode.VERTICAL, Alignment.MIN, Alignment.CENTER),
        LayoutPattern("compact-vertical", FlowMode.VERTICAL, Alignment.CENTER, Alignment.CENTER),
        LayoutPattern("banner-spread", FlowMode.HORIZONTAL, Alignment.SPACE_BETWEEN, Alignment.CENTER),
        LayoutPattern("preserve-layout", FlowMode.NONE, Alignment.MIN, Alignment.MIN),
    )
}

REGIONS = frozenset({"left", "center", "right", "top", "bottom", "fill"})
SIZE_MODES = frozenset({"auto", "fixed", "fill"})


@dataclass(frozen=True)
class NodePositioning:
    """Positioning directive for one node."""

    region: str
    size: Optional[str] = None
    max_lines: Optional[int] = None


@dataclass
class LayoutAdviceEntry:
    """
    Advice for a single target.

    Attributes:
        target_id: Target this entry applies to.
        orientation: Explicit orientation, when the predictor named one.
        pattern_id: Selected layout pattern id.
        background_node_id: Node to treat as a full-bleed background.
        positioning: Per-node positioning directives keyed by node id.
        drop: Node ids or names to hide in this target.
    """

    target_id: str
    orientation: Optional[FlowMode] = None
    pattern_id: Optional[str] = None
    background_node_id: Optional[str] = None
    positioning: Dict[str, NodePositioning] = field(default_factory=dict)
    drop: List[str] = field(default_factory=list)

    @property
    def pattern(self) -> Optional[LayoutPattern]:
        if self.pattern_id is None:
            return None
        return LAYOUT_PATTERNS.get(self.pattern_id)


@dataclass
class LayoutAdvice:
    entries: List[LayoutAdviceEntry] = field(default_factory=list)

    def entry_for(self, target_id: str) -> Optional[LayoutAdviceEntry]:
        for entry in self.entries:
            if entry.target_id == target_id:
                return entry
        return None


def _parse_orientation(raw: Any) -> Optional[FlowMode]:
    if not isinstance(raw, str):
        return None
    try:
        return FlowMode(raw.lower())
    except ValueError:
        return None


def _parse_positioning(raw: Any) -> Dict[str, NodePositioning]:
    if not isinstance(raw, dict):
        return {}

    result = {}
    for node_id, value in raw.items():
        if not isinstance(value, dict) or value.get("region") not in REGIONS:
            continue
        size = value.get("size")
        max_lines = value.get("maxLines")
        result[str(node_id)] = NodePositioning(
            region=value["region"],
            size=size if size in SIZE_MODES else None,
            max_lines=(
                int(max_lines)
                if isinstance(max_lines, (int, float))
                and not isinstance(max_lines, bool)
                and max_lines > 0
                else None
            ),
        )
    return result


def _parse_drop(raw: Any) -> List[str]:
    if not isinstance(raw, dict):
        return []
    drop = raw.get("drop")
    if not isinstance(drop, list):
        return []
    return [item for item in drop if isinstance(item, str)]


def _parse_entry(raw: Any) -> Optional[LayoutAdviceEntry]:
    if not isinstance(raw, dict):
        return None
    target_id = raw.get("targetId")
    if not isinstance(target_id, str):
        return None

    pattern_id = raw.get("selectedId")
    background = raw.get("backgroundNodeId")

    return LayoutAdviceEntry(
        target_id=target_id,
        orientation=_parse_orientation(raw.get("suggestedLayoutMode")),
        pattern_id=pattern_id if isinstance(pattern_id, str) else None,
        background_node_id=background if isinstance(background, str) else None,
        positioning=_parse_positioning(raw.get("positioning")),
        drop=_parse_drop(raw.get("restructure")),
    )


def parse_advice(data: Any) -> Optional[LayoutAdvice]:
    """
    Parse advisory data leniently.

    Accepts ``{"entries": [...]}`` or a single entry object. Entries without
    a string ``targetId`` are dropped, as are unknown orientations, regions
    and size modes.

    Args:
        data: Decoded advisory payload.

    Returns:
        LayoutAdvice, or None when no usable entry remains.
    """
    if not isinstance(data, dict):
        return None

    raw_entries = data.get("entries") if "entries" in data else [data]
    if not isinstance(raw_entries, list):
        return None

    entries = [entry for entry in map(_parse_entry, raw_entries) if entry is not None]
    if not entries:
        return None
    return LayoutAdvice(entries)
