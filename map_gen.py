"""
Map generation module for Open Network Wars.
Implements procedural network generation on a fixed grid from a seeded generator.
"""

from typing import Dict, List, Optional, Tuple

from config import load_config
from models import Node, Faction, FactionPartitionError, STRENGTH_DISTRIBUTIONS, TURN_ORDER
from prng import SeededRandom, create_rng

# Orthogonal then diagonal: E, W, S, N, SE, NW, NE, SW
GRID_DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (1, 0), (-1, 0), (0, 1), (0, -1), (1, 1), (-1, -1), (1, -1), (-1, 1)
)


def get_grid_neighbors(x: int, y: int) -> List[Tuple[int, int]]:
    """
    Get the 8 surrounding cell coordinates (unbounded).

    Args:
        x: Grid column
        y: Grid row

    Returns:
        List of (x, y) coordinates in GRID_DIRECTIONS order
    """
    return [(x + dx, y + dy) for dx, dy in GRID_DIRECTIONS]


def manhattan_distance(x1: int, y1: int, x2: int, y2: int) -> int:
    """Calculate Manhattan distance between two grid cells."""
    return abs(x1 - x2) + abs(y1 - y2)


def is_valid_cell(x: int, y: int, cols: Optional[int] = None, rows: Optional[int] = None) -> bool:
    """
    Check if grid coordinates are within the board bounds.

    Args:
        x, y: Grid coordinates
        cols: Number of columns (defaults to config grid_cols)
        rows: Number of rows (defaults to config grid_rows)

    Returns:
        True if coordinates are valid
    """
    if cols is None or rows is None:
        config = load_config()
        cols = config['grid_cols'] if cols is None else cols
        rows = config['grid_rows'] if rows is None else rows
    return 0 <= x < cols and 0 <= y < rows


def all_grid_positions(cols: int, rows: int) -> List[Tuple[int, int]]:
    """Enumerate every grid cell row by row."""
    return [(x, y) for y in range(rows) for x in range(cols)]


def _check_partition(config: Dict) -> None:
    """Fail fast when the configured board cannot be built."""
    total = config['total_nodes']
    per_faction = config['nodes_per_faction']
    if config['faction_count'] != len(TURN_ORDER):
        raise FactionPartitionError(
            f"faction_count {config['faction_count']} does not match turn order of {len(TURN_ORDER)} factions"
        )
    if total != per_faction * config['faction_count']:
        raise FactionPartitionError(
            f"{total} nodes cannot be split into {config['faction_count']} blocks of {per_faction}"
        )
    if total > config['grid_cols'] * config['grid_rows']:
        raise FactionPartitionError(
            f"{total} nodes do not fit on a {config['grid_cols']}x{config['grid_rows']} grid"
        )
    for template in STRENGTH_DISTRIBUTIONS:
        if len(template) != per_faction:
            raise FactionPartitionError(
                f"Strength template {template} does not cover {per_faction} nodes"
            )


def connect_adjacent(nodes: Dict[int, Node]) -> None:
    """Wire 8-directional grid adjacency among the chosen positions."""
    position_map = {(node.grid_x, node.grid_y): node_id for node_id, node in nodes.items()}
    for node in nodes.values():
        for pos in get_grid_neighbors(node.grid_x, node.grid_y):
            other_id = position_map.get(pos)
            if other_id is not None:
                node.connect(nodes[other_id])


def repair_isolated_nodes(nodes: Dict[int, Node]) -> int:
    """
    Connect every node left without edges to its Manhattan-nearest node.

    Ties go to the first candidate in ascending id order. This only
    guarantees degree >= 1, not a single connected component.

    Returns:
        Number of repair edges added
    """
    repaired = 0
    for node_id, node in nodes.items():
        if node.connections:
            continue
        best_id = -1
        best_dist = float('inf')
        for other_id, other in nodes.items():
            if other_id == node_id:
                continue
            dist = manhattan_distance(node.grid_x, node.grid_y, other.grid_x, other.grid_y)
            if dist < best_dist:
                best_dist = dist
                best_id = other_id
        if best_id >= 0:
            node.connect(nodes[best_id])
            repaired += 1
    return repaired


def assign_factions(nodes: Dict[int, Node], rng: SeededRandom, nodes_per_faction: int) -> List[int]:
    """
    Shuffle node ids and hand out contiguous blocks in turn order.

    Returns:
        The shuffled id order (block f belongs to TURN_ORDER[f])
    """
    node_ids = rng.shuffle(list(nodes.keys()))
    for index, faction in enumerate(TURN_ORDER):
        start = index * nodes_per_faction
        for node_id in node_ids[start:start + nodes_per_faction]:
            nodes[node_id].faction = faction
    return node_ids


def distribute_strength(nodes: Dict[int, Node], rng: SeededRandom,
                        node_ids: List[int], nodes_per_faction: int) -> None:
    """Give each faction a shuffled copy of a randomly drawn strength template."""
    for index in range(len(TURN_ORDER)):
        template = STRENGTH_DISTRIBUTIONS[rng.next_int(0, len(STRENGTH_DISTRIBUTIONS) - 1)]
        faction_nodes = node_ids[index * nodes_per_faction:(index + 1) * nodes_per_faction]
        shuffled = rng.shuffle(template)
        for node_id, strength in zip(faction_nodes, shuffled):
            nodes[node_id].strength = strength


def generate_network(rng: SeededRandom) -> Dict[int, Node]:
    """
    Generate a procedural network board.

    The sequence of generator draws is fixed: position shuffle, faction
    shuffle, then one template pick and one template shuffle per faction.

    Args:
        rng: Seeded generator

    Returns:
        Ordered mapping of node id to Node (ascending ids)

    Raises:
        FactionPartitionError: If the configured board cannot be partitioned
    """
    config = load_config()
    _check_partition(config)

    # Step 1: Choose node positions
    shuffled = rng.shuffle(all_grid_positions(config['grid_cols'], config['grid_rows']))
    chosen = shuffled[:config['total_nodes']]

    nodes: Dict[int, Node] = {}
    for node_id, (x, y) in enumerate(chosen):
        nodes[node_id] = Node(id=node_id, grid_x=x, grid_y=y)

    # Step 2: Wire edges, then make sure nobody is stranded
    connect_adjacent(nodes)
    repair_isolated_nodes(nodes)

    # Step 3: Factions and starting strength
    node_ids = assign_factions(nodes, rng, config['nodes_per_faction'])
    distribute_strength(nodes, rng, node_ids, config['nodes_per_faction'])

    return nodes


def generate_board(game_number: int) -> Dict[int, Node]:
    """
    Generate the board for a game number.

    Args:
        game_number: Seed identifier for reproducible generation

    Returns:
        Ordered mapping of node id to Node
    """
    return generate_network(create_rng(game_number))


def print_map_stats(nodes: Dict[int, Node]) -> None:
    """
    Print per-faction statistics about a board.

    Args:
        nodes: Board nodes
    """
    edges = sum(len(node.connections) for node in nodes.values()) // 2

    print("\n" + "=" * 50)
    print("MAP STATISTICS")
    print("=" * 50)
    print(f"Total nodes: {len(nodes)}")
    print(f"Total edges: {edges}")
    print("-" * 30)

    for faction in list(TURN_ORDER) + [Faction.UNOWNED]:
        owned = [n for n in nodes.values() if n.faction == faction]
        if not owned and faction == Faction.UNOWNED:
            continue
        strength = sum(n.strength for n in owned)
        print(f"{faction.name.title():8}: {len(owned):3d} nodes, strength {strength:3d}")

    print("=" * 50)


if __name__ == "__main__":
    import sys

    game_number = int(sys.argv[1]) if len(sys.argv) > 1 else 1
    print_map_stats(generate_board(game_number))
