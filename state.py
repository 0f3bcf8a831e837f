"""
Game state management for Open Network Wars.
Implements the board aggregate, event logging and save/load serialization.

The board is a single mutable aggregate: nodes keyed by id in insertion
(ascending id) order, the faction currently acting, the game number, the
game-over flag, eliminated factions and the per-faction reinforcement bank.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config import load_config
from map_gen import generate_board, is_valid_cell
from models import (
    Node, Faction, TURN_ORDER, FACTION_COLORS, CB_COLORS, BoardError, UnknownNodeError, FactionPartitionError,
)

__all__ = [
    'GameState', 'BoardError', 'UnknownNodeError', 'FactionPartitionError',
    'log_event', 'initialize_game', 'validate_board', 'serialize_state',
    'deserialize_state', 'get_game_summary',
]


@dataclass
class GameState:
    """
    Complete game state for one board.

    nodes must stay insertion-ordered by ascending id: cluster discovery and
    tie-breaks depend on it.
    """
    nodes: Dict[int, Node] = field(default_factory=dict)
    current_turn: Faction = Faction.RED  # Faction currently acting
    game_number: int = 1  # Seed identifier the board was generated from
    is_game_over: bool = False  # Set by the driver, polled by the AI controller
    eliminated_factions: set = field(default_factory=set)
    fractions: List[int] = field(default_factory=lambda: [0] * len(TURN_ORDER))  # Reinforcement bank
    log: List[Dict[str, Any]] = field(default_factory=list)

    def get_node(self, node_id: int) -> Node:
        """Get a node by id."""
        try:
            return self.nodes[node_id]
        except KeyError:
            raise UnknownNodeError(f"Node {node_id} does not exist") from None

    def get_nodes_for_faction(self, faction: int) -> List[Node]:
        """Nodes owned by faction, in ascending id order."""
        return [n for n in self.nodes.values() if n.faction == faction]

    def count_nodes(self, faction: int) -> int:
        """Number of nodes owned by faction."""
        return sum(1 for n in self.nodes.values() if n.faction == faction)

    def total_strength(self, faction: int) -> int:
        """Sum of strength over faction's nodes."""
        return sum(n.strength for n in self.nodes.values() if n.faction == faction)

    def is_eliminated(self, faction: int) -> bool:
        return faction in self.eliminated_factions


def log_event(game_state: GameState, event: str, **kwargs) -> None:
    """
    Add an event to the game state log.

    Args:
        game_state: Current game state
        event: Description of the event
        **kwargs: Additional event data to include
    """
    log_entry = {
        'turn': int(game_state.current_turn),
        'game_number': game_state.game_number,
        'event': event,
        **kwargs
    }
    game_state.log.append(log_entry)


def initialize_game(game_number: int) -> GameState:
    """
    Initialize a new game state with a generated board.

    Args:
        game_number: Seed identifier for board generation (required)

    Returns:
        New GameState with Red to act
    """
    game_state = GameState(
        nodes=generate_board(game_number),
        current_turn=Faction.RED,
        game_number=game_number,
    )
    validate_board(game_state.nodes)
    log_event(game_state, f"Board generated for game {game_number} with {len(game_state.nodes)} nodes",
              node_count=len(game_state.nodes))
    return game_state


def validate_board(nodes: Dict[int, Node]) -> None:
    """
    Check structural invariants of a node mapping.

    Raises:
        UnknownNodeError: A connection references a missing node
        FactionPartitionError: A node carries an unknown faction value
        BoardError: Mismatched ids, off-grid or shared cells, negative strength,
            isolated nodes, duplicate or asymmetric adjacency
    """
    occupied = {}
    for node_id, node in nodes.items():
        if node.id != node_id:
            raise BoardError(f"Node keyed {node_id} reports id {node.id}")
        if not is_valid_cell(node.grid_x, node.grid_y):
            raise BoardError(f"Node {node_id} lies off the grid at ({node.grid_x}, {node.grid_y})")
        cell = (node.grid_x, node.grid_y)
        if cell in occupied:
            raise BoardError(f"Nodes {occupied[cell]} and {node_id} share cell {cell}")
        occupied[cell] = node_id
        if node.faction not in list(Faction):
            raise FactionPartitionError(f"Node {node_id} has invalid faction {node.faction}")
        if node.strength < 0:
            raise BoardError(f"Node {node_id} has negative strength {node.strength}")
        if not node.connections:
            raise BoardError(f"Node {node_id} has no connections")
        if len(set(node.connections)) != len(node.connections):
            raise BoardError(f"Node {node_id} lists a neighbour more than once")
        for other_id in node.connections:
            if other_id not in nodes:
                raise UnknownNodeError(f"Node {node_id} connects to unknown node {other_id}")
            if other_id == node_id:
                raise BoardError(f"Node {node_id} connects to itself")
            if node_id not in nodes[other_id].connections:
                raise BoardError(f"Connection {node_id}-{other_id} is not symmetric")


def serialize_state(game_state: GameState) -> Dict[str, Any]:
    """
    Serialize a game state to its persisted JSON-compatible shape.

    Args:
        game_state: State to serialize

    Returns:
        Dictionary with nodes, gameNumber, isGameOver, eliminatedFactions, fractions
    """
    return {
        'version': load_config()['version'],
        'nodes': [
            {
                'id': node.id,
                'gridX': node.grid_x,
                'gridY': node.grid_y,
                'faction': int(node.faction),
                'strength': node.strength,
                'connections': list(node.connections),
            }
            for node in game_state.nodes.values()
        ],
        'currentTurn': int(game_state.current_turn),
        'gameNumber': game_state.game_number,
        'isGameOver': game_state.is_game_over,
        'eliminatedFactions': sorted(int(f) for f in game_state.eliminated_factions),
        'fractions': list(game_state.fractions),
    }


def deserialize_state(data: Dict[str, Any]) -> GameState:
    """
    Rebuild a game state from its serialized shape.

    Args:
        data: Dictionary produced by serialize_state (possibly via JSON)

    Returns:
        Restored GameState (empty log)

    Raises:
        BoardError: If the data does not describe a well-formed board
    """
    try:
        raw_nodes = data['nodes']
        fractions = [int(v) for v in data.get('fractions', [0] * len(TURN_ORDER))]
        current_turn = Faction(int(data.get('currentTurn', Faction.RED)))
    except (KeyError, TypeError, ValueError) as e:
        raise BoardError(f"Malformed board data: {e}") from e

    if current_turn not in TURN_ORDER:
        raise FactionPartitionError(f"{current_turn.name.title()} cannot take a turn")

    if len(fractions) != len(TURN_ORDER):
        raise BoardError(f"Reinforcement bank must have {len(TURN_ORDER)} entries, got {len(fractions)}")

    nodes: Dict[int, Node] = {}
    for raw in raw_nodes:
        try:
            node_id = int(raw['id'])
            faction_value = int(raw['faction'])
            node = Node(
                id=node_id,
                grid_x=int(raw['gridX']),
                grid_y=int(raw['gridY']),
                strength=int(raw['strength']),
                connections=[int(c) for c in raw['connections']],
            )
        except (KeyError, TypeError, ValueError) as e:
            raise BoardError(f"Malformed node data: {e}") from e
        try:
            node.faction = Faction(faction_value)
        except ValueError:
            raise FactionPartitionError(f"Node {node_id} has invalid faction {faction_value}") from None
        if node_id in nodes:
            raise BoardError(f"Duplicate node id {node_id}")
        nodes[node_id] = node

    validate_board(nodes)

    eliminated = set()
    for value in data.get('eliminatedFactions', []):
        try:
            eliminated.add(Faction(int(value)))
        except ValueError:
            raise FactionPartitionError(f"Unknown eliminated faction {value}") from None

    game_state = GameState(
        nodes=nodes,
        current_turn=current_turn,
        game_number=data.get('gameNumber', 1),
        is_game_over=bool(data.get('isGameOver', False)),
        eliminated_factions=eliminated,
        fractions=fractions,
    )
    log_event(game_state, f"Game {game_state.game_number} loaded with {len(nodes)} nodes",
              node_count=len(nodes))
    return game_state


def get_game_summary(game_state: GameState) -> Dict[str, Any]:
    """
    Get a summary of the current game state for API responses.

    Args:
        game_state: Current game state

    Returns:
        Dictionary with per-faction counts, strength and bank
    """
    return {
        'game_number': game_state.game_number,
        'current_turn': int(game_state.current_turn),
        'is_game_over': game_state.is_game_over,
        'factions': [
            {
                'id': int(faction),
                'name': faction.name.title(),
                'color': FACTION_COLORS[faction],
                'cb_color': CB_COLORS[faction],
                'nodes': game_state.count_nodes(faction),
                'strength': game_state.total_strength(faction),
                'bank': game_state.fractions[faction],
                'eliminated': game_state.is_eliminated(faction),
            }
            for faction in TURN_ORDER
        ],
        'node_count': len(game_state.nodes),
    }


def find_node_by_position(game_state: GameState, x: int, y: int) -> Optional[Node]:
    """Get the node at grid cell (x, y), if any."""
    for node in game_state.nodes.values():
        if node.grid_x == x and node.grid_y == y:
            return node
    return None
