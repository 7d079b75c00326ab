"""Node extraction.

Every component terminal is a ``NodeKey``. Terminals joined by a connection
collapse into one electrical node, named after its smallest member key.
Node 0 is ground: the first battery's negative terminal (terminal 0) when a
battery exists, otherwise the node with the smallest key. The remaining
nodes are numbered 1..N-1 in key order, so identical snapshots always give
identical numbering.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from dcsim.circuit.components import Component, ComponentType, Connection, NodeKey


@dataclass
class NodeMap:
    """Terminal → node index mapping with ground at index 0."""
    index: dict[NodeKey, int] = field(default_factory=dict)
    # Representative (smallest) key of each node, by node index
    nodes: list[NodeKey] = field(default_factory=list)
    ground: NodeKey | None = None

    @property
    def n_nodes(self) -> int:
        return len(self.nodes)

    def index_of(self, component_id: str, terminal: int) -> int | None:
        return self.index.get(NodeKey(component_id, terminal))

    def terminals_at(self, node: int) -> list[NodeKey]:
        """All terminals merged into node ``node``, sorted."""
        return sorted(k for k, i in self.index.items() if i == node)


def extract_nodes(
    components: Sequence[Component],
    connections: Sequence[Connection] = (),
) -> NodeMap:
    """Build the node map for a snapshot.

    Connections naming unknown components or out-of-range terminals are
    ignored here; ``checks.check_circuit`` reports them.
    """
    keys = [
        NodeKey(comp.id, idx)
        for comp in components
        for idx in range(len(comp.terminals))
    ]
    if not keys:
        return NodeMap()

    parent = {k: k for k in keys}

    def find(x: NodeKey) -> NodeKey:
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    def union(a: NodeKey, b: NodeKey) -> None:
        ra, rb = find(a), find(b)
        if ra == rb:
            return
        # Keep the smallest key as root so it names the node
        if rb < ra:
            ra, rb = rb, ra
        parent[rb] = ra

    for conn in connections:
        a = NodeKey(conn.from_component_id, conn.from_terminal)
        b = NodeKey(conn.to_component_id, conn.to_terminal)
        if a in parent and b in parent:
            union(a, b)

    roots = {k: find(k) for k in keys}
    representatives = sorted(set(roots.values()))

    ground_root = representatives[0]
    for comp in components:
        if comp.type == ComponentType.BATTERY and comp.terminals:
            ground_root = roots[NodeKey(comp.id, 0)]
            break

    ordered = [ground_root] + [r for r in representatives if r != ground_root]
    node_index = {root: i for i, root in enumerate(ordered)}

    return NodeMap(
        index={k: node_index[root] for k, root in roots.items()},
        nodes=ordered,
        ground=ground_root,
    )
