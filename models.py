# Models for game elements of Open Network Wars

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Tuple


class Faction(IntEnum):
    """Competing sides in fixed turn order, plus the UNOWNED sentinel."""
    RED = 0
    BLUE = 1
    GREEN = 2
    YELLOW = 3
    PURPLE = 4
    UNOWNED = 5


# The human player always plays Red
PLAYER_FACTION = Faction.RED

TURN_ORDER: Tuple[Faction, ...] = (
    Faction.RED, Faction.BLUE, Faction.GREEN, Faction.YELLOW, Faction.PURPLE
)

FACTION_NAMES: Tuple[str, ...] = ('Red', 'Blue', 'Green', 'Yellow', 'Purple', 'Unowned')
FACTION_COLORS: Tuple[str, ...] = ('#E53935', '#1E88E5', '#43A047', '#FDD835', '#8E24AA', '#404040')
CB_COLORS: Tuple[str, ...] = ('#D55E00', '#0072B2', '#009E73', '#F0E442', '#CC79A7', '#404040')

# Initial strength templates, one picked per faction at generation time.
# Each sums to the per-faction strength total (20).
STRENGTH_DISTRIBUTIONS: Tuple[Tuple[int, ...], ...] = (
    (8, 8, 1, 1, 1, 1),   # Two strongholds
    (4, 8, 4, 2, 1, 1),   # One major, two medium
    (8, 6, 1, 1, 1, 3),   # Heavy + medium spread
)

# Winner sentinel reported when the player has lost every node
PLAYER_ELIMINATED = -1


@dataclass
class Node:
    """
    A territory on the network board.

    Ids are assigned 0..N-1 at generation and never reused. Grid coordinates
    are fixed for the node's lifetime; faction and strength change through
    combat and reinforcement.
    """
    id: int
    grid_x: int
    grid_y: int
    faction: Faction = Faction.UNOWNED
    strength: int = 0
    connections: List[int] = field(default_factory=list)  # Neighbour ids, symmetric

    def is_connected_to(self, other_id: int) -> bool:
        """Check whether this node shares an edge with other_id."""
        return other_id in self.connections

    def connect(self, other: 'Node') -> bool:
        """Add a symmetric edge to other, skipping duplicates."""
        if other.id in self.connections:
            return False
        self.connections.append(other.id)
        other.connections.append(self.id)
        return True


@dataclass
class CombatRound:
    """Outcome of one combat round and the committed counts after it."""
    attacker_wins: bool
    attacker_remaining: int
    defender_remaining: int


@dataclass
class CombatResult:
    """Result of a single attack resolved round by round."""
    attacker_won: bool = False
    attacker_remaining: int = 0
    defender_remaining: int = 0
    rounds: List[CombatRound] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'attackerWon': self.attacker_won,
            'attackerRemaining': self.attacker_remaining,
            'defenderRemaining': self.defender_remaining,
            'rounds': [
                {'attackerWins': r.attacker_wins, 'atk': r.attacker_remaining, 'def': r.defender_remaining}
                for r in self.rounds
            ],
        }


@dataclass
class VictoryResult:
    """Terminal-state check outcome. winner is a faction id or PLAYER_ELIMINATED."""
    game_over: bool = False
    winner: Optional[int] = None

    @property
    def player_eliminated(self) -> bool:
        return self.game_over and self.winner == PLAYER_ELIMINATED


def faction_name(faction: int) -> str:
    """Display name for a faction id (or the player-eliminated sentinel)."""
    if faction == PLAYER_ELIMINATED:
        return 'Player eliminated'
    return FACTION_NAMES[faction]


class BoardError(Exception):
    """Exception raised when a board is malformed."""
    pass


class UnknownNodeError(BoardError):
    """A connection or lookup references a node id that does not exist."""
    pass


class FactionPartitionError(BoardError):
    """Nodes cannot be (or were not) partitioned among valid factions."""
    pass
