"""Board-building helpers shared by the test modules."""

from models import Faction, Node
from state import GameState


def build_state(node_entries):
    """
    Build a GameState from node descriptions.

    Each entry is a dict with id and optional gridX, gridY, faction
    (default UNOWNED), strength (default 1) and connections (default []).
    """
    state = GameState()
    for entry in node_entries:
        state.nodes[entry['id']] = Node(
            id=entry['id'],
            grid_x=entry.get('gridX', 0),
            grid_y=entry.get('gridY', 0),
            faction=entry.get('faction', Faction.UNOWNED),
            strength=entry.get('strength', 1),
            connections=list(entry.get('connections', [])),
        )
    return state


class FirstChoice:
    """Tie-break chooser that always takes the first candidate."""

    def choice(self, seq):
        return seq[0]


class LastChoice:
    """Tie-break chooser that always takes the last candidate."""

    def choice(self, seq):
        return seq[-1]
