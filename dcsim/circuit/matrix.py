"""Conductance matrix construction.

Stamps each Norton contribution into ``G·v = I`` with ground (node 0)
eliminated, so row/column ``k-1`` belongs to node ``k``:

- one endpoint grounded, other node k:
    G[k-1, k-1] += g;  I[k-1] += i_s if ground is the ``to`` side else -i_s
- both endpoints non-ground (a = from, b = to):
    G[a-1, a-1] += g;  G[b-1, b-1] += g
    G[a-1, b-1] -= g;  G[b-1, a-1] -= g
    I[a-1] += i_s;     I[b-1] -= i_s

The matrix is ``max(1, N-1)`` square even for a single-node circuit.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from dcsim.circuit.admittance import Admittance


@dataclass
class NodalSystem:
    """Reduced nodal equations for the non-ground nodes."""
    g: np.ndarray          # conductance matrix, (size, size)
    i: np.ndarray          # injected current vector, (size,)
    n_nodes: int           # including ground
    # Nodes held at 0 V as the reference of a floating island
    pinned: list[int] = field(default_factory=list)

    @property
    def size(self) -> int:
        return self.g.shape[0]


def build_nodal_system(
    contributions: Sequence[Admittance],
    n_nodes: int,
) -> NodalSystem:
    """Stamp every contribution into a fresh conductance system."""
    size = max(1, n_nodes - 1)
    g_mat = np.zeros((size, size))
    i_vec = np.zeros(size)

    for adm in contributions:
        a, b = adm.from_node, adm.to_node
        g, i_s = adm.conductance, adm.current_source
        if a == b:
            # Both ends on one node: stamps cancel
            continue

        if a == 0 or b == 0:
            k = b if a == 0 else a
            if not 0 < k < n_nodes:
                continue
            g_mat[k - 1, k - 1] += g
            # Source pushes into from_node; grounded from side draws it out of to_node
            i_vec[k - 1] += -i_s if a == 0 else i_s
            continue

        ai, bi = a - 1, b - 1
        g_mat[ai, ai] += g
        g_mat[bi, bi] += g
        g_mat[ai, bi] -= g
        g_mat[bi, ai] -= g
        i_vec[ai] += i_s
        i_vec[bi] -= i_s

    return NodalSystem(g=g_mat, i=i_vec, n_nodes=n_nodes)


def find_floating_islands(
    contributions: Sequence[Admittance],
    n_nodes: int,
) -> list[list[int]]:
    """Groups of non-ground nodes with no conductive path to ground.

    Only contributions with ``g > 0`` conduct; an open switch or a
    capacitor does not tie its nodes together. Each island is sorted and
    the islands are ordered by their lowest node.
    """
    if n_nodes <= 1:
        return []

    adjacency: list[set[int]] = [set() for _ in range(n_nodes)]
    for adm in contributions:
        if adm.conductance <= 0 or adm.from_node == adm.to_node:
            continue
        adjacency[adm.from_node].add(adm.to_node)
        adjacency[adm.to_node].add(adm.from_node)

    visited = [False] * n_nodes
    islands = []
    for start in range(n_nodes):
        if visited[start]:
            continue
        island = []
        queue = deque([start])
        visited[start] = True
        while queue:
            node = queue.popleft()
            island.append(node)
            for nxt in adjacency[node]:
                if not visited[nxt]:
                    visited[nxt] = True
                    queue.append(nxt)
        # Node 0 is always visited first, so its island is the grounded one
        if start != 0:
            islands.append(sorted(island))
    return islands


def reference_floating_islands(
    system: NodalSystem,
    contributions: Sequence[Admittance],
) -> NodalSystem:
    """Pin one node of every floating island to 0 V.

    An island that contains a battery is referenced at that battery's
    negative terminal so its voltages read naturally; any other island uses
    its lowest node. Returns a new system; ``system`` is not modified.
    """
    islands = find_floating_islands(contributions, system.n_nodes)
    if not islands:
        return system

    negatives = {adm.to_node for adm in contributions if adm.current_source != 0}
    g_mat = system.g.copy()
    i_vec = system.i.copy()
    pinned = []
    for island in islands:
        candidates = [n for n in island if n in negatives]
        ref = candidates[0] if candidates else island[0]
        row = ref - 1
        g_mat[row, :] = 0.0
        g_mat[row, row] = 1.0
        i_vec[row] = 0.0
        pinned.append(ref)

    return NodalSystem(g=g_mat, i=i_vec, n_nodes=system.n_nodes, pinned=pinned)
