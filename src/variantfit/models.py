"""
Data models for variant retargeting.

This module contains the dataclasses and enums shared by every planning stage:
the captured source tree, the analysis produced from it, and the plans handed
to the node mutator.

Classes:
    Box: Axis-aligned rectangle in canvas-absolute or node-local space.
    Padding: Four-sided inset.
    FlowDescriptor: Flow-layout settings of a container.
    ContentNode: One node of the captured source tree.
    ContentAnalysis: Composition summary of a source frame.
    AxisExpansionPlan: Split of leftover space on one axis.
    ChildOverride: Per-child adjustments inside an adapted flow container.
    AdaptationPlan: Flow settings for one adapted container.
    AtomicGroupSet: Node ids that move and scale as rigid units.
    Target: A target canvas.
    SafeAreaInsets: Per-edge safe-area margins of a target.
    AbsolutePlacement: Planned top-left of a freeform child.
    QaWarning: QA flag derived from planned geometry.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple


class LayoutProfile(Enum):
    """Coarse aspect category of a target canvas."""

    VERTICAL = "vertical"
    SQUARE = "square"
    HORIZONTAL = "horizontal"


class FlowMode(Enum):
    """Flow-layout orientation of a container."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    NONE = "none"


class NodeType(Enum):
    """Node kinds reported by the content capture."""

    FRAME = "frame"
    GROUP = "group"
    INSTANCE = "instance"
    COMPONENT = "component"
    TEXT = "text"
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    VECTOR = "vector"
    BOOLEAN_OPERATION = "boolean_operation"
    POLYGON = "polygon"
    STAR = "star"
    LINE = "line"


CONTAINER_TYPES = frozenset(
    {NodeType.FRAME, NodeType.GROUP, NodeType.INSTANCE, NodeType.COMPONENT}
)

SHAPE_TYPES = frozenset(
    {
        NodeType.VECTOR,
        NodeType.BOOLEAN_OPERATION,
        NodeType.POLYGON,
        NodeType.STAR,
        NodeType.LINE,
        NodeType.RECTANGLE,
        NodeType.ELLIPSE,
    }
)


class ContentDensity(Enum):
    SPARSE = "sparse"
    NORMAL = "normal"
    DENSE = "dense"


class ScalingStrategy(Enum):
    """How aggressively content is scaled into a target."""

    FILL = "fill"  # Aggressively fill the target
    FIT = "fit"  # Conservative fit within bounds
    ADAPTIVE = "adaptive"  # Profile-aware blend
    REFLOW = "reflow"  # Restructure for extreme changes
    STRETCH = "stretch"  # Bias toward the dominant axis


class SizingMode(Enum):
    FIXED = "FIXED"
    AUTO = "AUTO"


class Alignment(Enum):
    """Primary and counter axis alignment values."""

    MIN = "MIN"
    CENTER = "CENTER"
    MAX = "MAX"
    SPACE_BETWEEN = "SPACE_BETWEEN"
    BASELINE = "BASELINE"


class ChildAlign(Enum):
    INHERIT = "INHERIT"
    STRETCH = "STRETCH"


class Positioning(Enum):
    AUTO = "AUTO"
    ABSOLUTE = "ABSOLUTE"


def finite_or(value: float, default: float = 0.0) -> float:
    """Return ``value`` as a float, or ``default`` when it is not finite."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def round2(value: float) -> float:
    """Round to two decimals, the precision every plan is reported in."""
    return round(value * 100) / 100


@dataclass
class Box:
    """
    Axis-aligned rectangle.

    Width and height are clamped to zero and non-finite values are replaced
    with zero on construction.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Horizontal extent (>= 0).
        height: Vertical extent (>= 0).
    """

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def __post_init__(self):
        self.x = finite_or(self.x)
        self.y = finite_or(self.y)
        self.width = max(0.0, finite_or(self.width))
        self.height = max(0.0, finite_or(self.height))

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, other: "Box", tolerance: float = 0.0) -> bool:
        """Check whether ``other`` lies inside this box (with tolerance)."""
        return (
            other.x >= self.x - tolerance
            and other.y >= self.y - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )

    def overlaps(self, other: "Box") -> bool:
        """Check whether the two boxes share any area."""
        return (
            other.x < self.right
            and other.right > self.x
            and other.y < self.bottom
            and other.bottom > self.y
        )

    def fits(self, other: "Box", tolerance: float = 0.0) -> bool:
        """Check whether ``other`` is no larger than this box on both axes."""
        return (
            other.width <= self.width + tolerance
            and other.height <= self.height + tolerance
        )

    @staticmethod
    def union(boxes: Iterable["Box"]) -> Optional["Box"]:
        """Return the bounding box of ``boxes``, or None when empty."""
        boxes = list(boxes)
        if not boxes:
            return None
        min_x = min(b.x for b in boxes)
        min_y = min(b.y for b in boxes)
        max_x = max(b.right for b in boxes)
        max_y = max(b.bottom for b in boxes)
        return Box(min_x, min_y, max_x - min_x, max_y - min_y)


@dataclass
class Padding:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


@dataclass
class FlowDescriptor:
    """
    Flow-layout settings of a container.

    Attributes:
        mode: Orientation, or NONE for freeform positioning.
        item_spacing: Gap between consecutive flow children.
        padding: Inner padding of the container.
        primary_align: Alignment along the flow axis.
        counter_align: Alignment across the flow axis.
        wrap: Whether children wrap onto extra rows/columns.
    """

    mode: FlowMode = FlowMode.NONE
    item_spacing: float = 0.0
    padding: Padding = field(default_factory=Padding)
    primary_align: Optional[Alignment] = None
    counter_align: Optional[Alignment] = None
    wrap: bool = False

    @property
    def is_active(self) -> bool:
        return self.mode != FlowMode.NONE


@dataclass(frozen=True)
class ContentNode:
    """
    One node of the captured source tree.

    Produced by the content capture and treated as read-only by every
    planning stage; the node mutator alone changes live geometry.

    Attributes:
        id: Stable node identifier.
        name: Layer name as shown in the design tool.
        node_type: Kind of node.
        box: Canvas-absolute bounding box.
        visible: Whether the node is shown.
        characters: Text content (TEXT nodes only).
        has_fill: Node paints a solid or gradient fill.
        has_stroke: Node paints a stroke.
        has_image_fill: Node paints an image or video fill.
        role: Optional role tag ("overlay" for QA artifacts, "background").
        positioning: AUTO, or ABSOLUTE when taken out of the parent's flow.
        flow: Flow-layout settings, when the node is a flow container.
        children: Child nodes in paint order (first is topmost).
    """

    id: str
    name: str = ""
    node_type: NodeType = NodeType.FRAME
    box: Box = field(default_factory=Box)
    visible: bool = True
    characters: str = ""
    has_fill: bool = False
    has_stroke: bool = False
    has_image_fill: bool = False
    role: Optional[str] = None
    positioning: Positioning = Positioning.AUTO
    flow: Optional[FlowDescriptor] = None
    children: Tuple["ContentNode", ...] = ()

    @property
    def kind(self) -> str:
        """``container`` for nodes that can hold children, else ``leaf``."""
        if self.node_type in CONTAINER_TYPES or self.children:
            return "container"
        return "leaf"

    @property
    def is_text(self) -> bool:
        return self.node_type == NodeType.TEXT

    @property
    def has_text(self) -> bool:
        return self.is_text and len(self.characters) > 0

    @property
    def is_overlay(self) -> bool:
        return self.role == "overlay"

    @property
    def flow_mode(self) -> FlowMode:
        return self.flow.mode if self.flow else FlowMode.NONE

    def iter_nodes(self):
        """Yield this node and all descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(frozen=True)
class ContentAnalysis:
    """
    Composition summary of a source frame.

    Computed once per (source, target) pair and discarded after planning.
    """

    actual_content_box: Optional[Box]
    has_auto_layout: bool
    layout_direction: FlowMode
    child_count: int
    has_text: bool
    has_images: bool
    content_density: ContentDensity
    recommended_strategy: ScalingStrategy
    effective_width: float
    effective_height: float


@dataclass
class AxisGaps:
    """Existing breathing room at the start/end of an axis."""

    start: float = 0.0
    end: float = 0.0


@dataclass
class AxisExpansionPlan:
    """
    Split of leftover space on one axis.

    Attributes:
        start: Inset at the start edge (left or top).
        end: Inset at the end edge (right or bottom).
        interior: Extra space injected between flow children.
    """

    start: float
    end: float
    interior: float = 0.0

    @property
    def edge_budget(self) -> float:
        return self.start + self.end


@dataclass
class ChildOverride:
    """Per-child adjustments applied inside an adapted flow container."""

    grow: Optional[float] = None
    align: Optional[ChildAlign] = None
    positioning: Optional[Positioning] = None
    text_align: Optional[str] = None
    min_width: Optional[float] = None
    max_width: Optional[float] = None
    min_height: Optional[float] = None
    max_height: Optional[float] = None

    def is_empty(self) -> bool:
        return all(value is None for value in self.__dict__.values())


@dataclass
class AdaptationPlan:
    """
    Flow settings for one adapted container.

    Produced once per target and applied exactly once by the node mutator.
    """

    orientation: FlowMode
    primary_sizing: SizingMode = SizingMode.FIXED
    counter_sizing: SizingMode = SizingMode.FIXED
    primary_align: Alignment = Alignment.MIN
    counter_align: Alignment = Alignment.MIN
    wrap: bool = False
    item_spacing: float = 0.0
    counter_spacing: Optional[float] = None
    padding: Padding = field(default_factory=Padding)
    child_overrides: Dict[str, ChildOverride] = field(default_factory=dict)
    hidden_ids: List[str] = field(default_factory=list)


@dataclass
class AtomicGroupSet:
    """
    Node ids that move and scale as rigid units.

    Attributes:
        roots: Ids of the atomic group roots.
        members: Ids strictly inside an atomic group (descendants of a root).
        instance_roots: Roots that are component instances.
    """

    roots: FrozenSet[str] = frozenset()
    members: FrozenSet[str] = frozenset()
    instance_roots: FrozenSet[str] = frozenset()

    def is_member(self, node_id: str) -> bool:
        """True when the node sits below an atomic group root."""
        return node_id in self.members

    def is_root(self, node_id: str) -> bool:
        return node_id in self.roots

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.roots or node_id in self.members

    def __len__(self) -> int:
        return len(self.roots)


@dataclass
class Target:
    """A target canvas."""

    id: str
    width: float
    height: float
    label: str = ""

    @property
    def ratio(self) -> float:
        """Width over height, with both clamped to at least 1."""
        return max(finite_or(self.width), 1.0) / max(finite_or(self.height), 1.0)


@dataclass
class SafeAreaInsets:
    left: float = 0.0
    right: float = 0.0
    top: float = 0.0
    bottom: float = 0.0


@dataclass
class AbsolutePlacement:
    id: str
    x: float
    y: float


@dataclass
class QaWarning:
    """QA flag derived from planned or applied geometry."""

    code: str
    severity: str
    message: str
