"""
Index arena over a captured content tree.

The tree is loaded into a networkx DiGraph whose nodes are integer pre-order
indices. Each graph node carries the ContentNode and its structural path (the
sequence of child positions from the root), which is what lets a source tree
be paired with its clone without walking both in lockstep.
"""

from typing import Dict, Iterator, List, Optional, Tuple

import networkx as nx

from .models import ContentNode

Path = Tuple[int, ...]


class NodeArena:
    """
    Graph view of a ContentNode tree.

    Args:
        root: Root of the captured tree.

    Attributes:
        graph: DiGraph with parent -> child edges over integer indices.
        root_index: Index of the root (always 0).
    """

    def __init__(self, root: ContentNode):
        self.graph: nx.DiGraph = nx.DiGraph()
        self.root_index = 0
        self._index_by_id: Dict[str, int] = {}
        self._index_by_path: Dict[Path, int] = {}
        self._build(root)

    def _build(self, root: ContentNode) -> None:
        next_index = 0
        stack: List[Tuple[ContentNode, Path, Optional[int]]] = [(root, (), None)]

        while stack:
            node, path, parent = stack.pop()
            index = next_index
            next_index += 1

            self.graph.add_node(index, node=node, path=path)
            if parent is not None:
                self.graph.add_edge(parent, index)

            # First occurrence wins for duplicated ids
            self._index_by_id.setdefault(node.id, index)
            self._index_by_path[path] = index

            for position in range(len(node.children) - 1, -1, -1):
                stack.append((node.children[position], path + (position,), index))

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._index_by_id

    def node(self, index: int) -> ContentNode:
        return self.graph.nodes[index]["node"]

    def path(self, index: int) -> Path:
        return self.graph.nodes[index]["path"]

    def index_of(self, node_id: str) -> Optional[int]:
        return self._index_by_id.get(node_id)

    def index_at(self, path: Path) -> Optional[int]:
        return self._index_by_path.get(path)

    def get(self, node_id: str) -> Optional[ContentNode]:
        index = self.index_of(node_id)
        return None if index is None else self.node(index)

    def parent_of(self, node_id: str) -> Optional[ContentNode]:
        index = self.index_of(node_id)
        if index is None:
            return None
        parents = list(self.graph.predecessors(index))
        return self.node(parents[0]) if parents else None

    def depth_of(self, node_id: str) -> int:
        index = self.index_of(node_id)
        return 0 if index is None else len(self.path(index))

    def descendant_ids(self, node_id: str) -> List[str]:
        """Ids of every strict descendant of ``node_id``."""
        index = self.index_of(node_id)
        if index is None:
            return []
        return [self.node(i).id for i in sorted(nx.descendants(self.graph, index))]

    def iter_preorder(
        self, start_id: Optional[str] = None, depth_limit: Optional[int] = None
    ) -> Iterator[ContentNode]:
        """
        Yield nodes in pre-order (document order).

        Args:
            start_id: Node to start from; the root when omitted.
            depth_limit: Maximum depth below the start node to visit.
        """
        start = self.root_index if start_id is None else self.index_of(start_id)
        if start is None:
            return
        order = nx.dfs_preorder_nodes(self.graph, source=start, depth_limit=depth_limit)
        # networkx follows insertion order, which is already document order
        for index in order:
            yield self.node(index)


def build_node_map(source: ContentNode, clone: ContentNode) -> Dict[str, str]:
    """
    Pair source node ids with clone node ids by structural position.

    Each tree is indexed once; nodes are matched when they sit at the same
    child path. Subtrees that exist in only one tree are left unmapped.

    Args:
        source: Root of the source tree.
        clone: Root of the cloned (target) tree.

    Returns:
        Mapping of source node id to clone node id.
    """
    source_arena = NodeArena(source)
    clone_arena = NodeArena(clone)

    mapping: Dict[str, str] = {}
    for index in nx.dfs_preorder_nodes(source_arena.graph, source=source_arena.root_index):
        clone_index = clone_arena.index_at(source_arena.path(index))
        if clone_index is None:
            continue
        mapping.setdefault(source_arena.node(index).id, clone_arena.node(clone_index).id)
    return mapping


def find_by_name(root: ContentNode, name: str) -> Optional[ContentNode]:
    """Find the first descendant of ``root`` with the given layer name."""
    for node in NodeArena(root).iter_preorder():
        if node is not root and node.name == name:
            return node
    return None
