"""
Territory analysis for Open Network Wars: connected clusters and frontlines.
"""

from collections import deque
from typing import Iterable, List

from models import Faction
from state import GameState


def find_clusters(faction: int, game_state: GameState) -> List[List[int]]:
    """
    Find every connected component of faction-owned nodes.

    Traversal is breadth-first over the faction-only induced subgraph.
    Start points are taken in the board's ascending id order, so clusters
    come back in discovery order.

    Args:
        faction: Faction to analyse
        game_state: Current game state

    Returns:
        List of clusters, each a list of node ids in BFS visit order
    """
    owned = {node_id for node_id, node in game_state.nodes.items() if node.faction == faction}
    visited = set()
    clusters = []

    for start_id in game_state.nodes:
        if start_id not in owned or start_id in visited:
            continue
        cluster = []
        queue = deque([start_id])
        visited.add(start_id)

        while queue:
            current = queue.popleft()
            cluster.append(current)
            for conn in game_state.nodes[current].connections:
                if conn in owned and conn not in visited:
                    visited.add(conn)
                    queue.append(conn)

        clusters.append(cluster)

    return clusters


def find_largest_cluster(faction: int, game_state: GameState) -> List[int]:
    """
    Get the largest cluster of a faction.

    Ties go to the cluster discovered first. Empty if the faction owns
    nothing.
    """
    largest: List[int] = []
    for cluster in find_clusters(faction, game_state):
        if len(cluster) > len(largest):
            largest = cluster
    return largest


def get_frontline_nodes(faction: int, game_state: GameState, cluster_ids: Iterable[int]) -> List[int]:
    """
    Filter node ids down to those bordering an enemy.

    A node is frontline when at least one neighbour belongs to another
    faction that is not UNOWNED. Input order is preserved.

    Args:
        faction: Faction the ids are evaluated for
        game_state: Current game state
        cluster_ids: Node ids to test (normally a cluster)

    Returns:
        Frontline node ids
    """
    frontline = []
    for node_id in cluster_ids:
        node = game_state.nodes[node_id]
        for conn in node.connections:
            neighbor = game_state.nodes[conn]
            if neighbor.faction != faction and neighbor.faction != Faction.UNOWNED:
                frontline.append(node_id)
                break
    return frontline
