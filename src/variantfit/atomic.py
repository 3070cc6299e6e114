"""
Atomic group classification.

Some subtrees must move and scale as one rigid unit: device mockups,
illustrations, icon clusters, image compositions and component instances.
Their internal children are never re-laid-out individually.

Text anywhere in a subtree marks it as structural content that can reflow,
so it disqualifies every rule except the component-instance rule.
"""

import re
from typing import List, Set

from .constants import ATOMIC_VECTOR_SHARE
from .models import AtomicGroupSet, ContentNode, NodeType, SHAPE_TYPES
from .tree import NodeArena

ATOMIC_NAME_PATTERN = re.compile(
    r"mockup|illustration|device|phone|iphone|android|tablet|laptop"
    r"|graphic|artwork|infographic|diagram|chart",
    re.IGNORECASE,
)


def _has_text_descendant(node: ContentNode) -> bool:
    return any(descendant.is_text for descendant in node.iter_nodes() if descendant is not node)


def _has_image_in_subtree(node: ContentNode) -> bool:
    return any(descendant.has_image_fill for descendant in node.iter_nodes())


def _mostly_shapes(node: ContentNode) -> bool:
    shapes = sum(1 for child in node.children if child.node_type in SHAPE_TYPES)
    return shapes / len(node.children) > ATOMIC_VECTOR_SHARE


def _is_layout_wrapper(node: ContentNode) -> bool:
    return (
        not node.has_fill
        and not node.has_stroke
        and len(node.children) >= 2
        and node.flow is not None
        and node.flow.is_active
    )


def is_atomic(node: ContentNode) -> bool:
    """
    Check whether a node is an atomic group.

    Args:
        node: Candidate node.

    Returns:
        True for component instances, and for non-empty containers without
        text that look like an illustration (by name), are mostly vector
        shapes, contain an image fill, or are pure layout wrappers.
    """
    if node.node_type == NodeType.INSTANCE:
        return True

    if node.kind != "container" or not node.children:
        return False

    if node.is_text or _has_text_descendant(node):
        return False

    return (
        bool(ATOMIC_NAME_PATTERN.search(node.name))
        or _mostly_shapes(node)
        or _has_image_in_subtree(node)
        or _is_layout_wrapper(node)
    )


def classify_atomic_groups(root: ContentNode) -> AtomicGroupSet:
    """
    Find every atomic group below ``root``.

    The scan starts at the root's children and never descends into a node
    once it is classified atomic; its descendants are absorbed as members.

    Args:
        root: Source frame.

    Returns:
        AtomicGroupSet of roots, strict members and instance roots.
    """
    arena = NodeArena(root)
    roots: Set[str] = set()
    members: Set[str] = set()
    instances: Set[str] = set()

    pending: List[ContentNode] = list(reversed(root.children))
    while pending:
        node = pending.pop()
        if is_atomic(node):
            roots.add(node.id)
            if node.node_type == NodeType.INSTANCE:
                instances.add(node.id)
            members.update(arena.descendant_ids(node.id))
            continue
        pending.extend(reversed(node.children))

    return AtomicGroupSet(frozenset(roots), frozenset(members), frozenset(instances))
