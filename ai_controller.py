"""
AI turn controller for Open Network Wars.

One faction's turn is a greedy chain attack: take the strongest node that
can still attack, hit its weakest weaker neighbour, repeat while it stays
strong enough, then mark it exhausted and pick the next source. After every
combat the controller hands control to a notification hook and resumes
only once the hook is done, then polls for game over.

plan_attacks() is the state machine as a generator: each yielded
AttackEvent is a suspension point, and the consumer resumes the turn by
asking for the next event. execute_turn() drives it with an (optionally
async) hook.
"""

import asyncio
import inspect
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator, List, Optional, Union

from config import load_config
from models import CombatResult, Faction, Node
from orders import log_attack
from resolution import apply_combat_result, resolve_combat
from state import GameState
from upkeep import check_victory, update_eliminations

AttackHook = Callable[[int, int, CombatResult], Union[None, Awaitable[Any]]]


@dataclass
class AttackEvent:
    """A completed combat awaiting presentation."""
    attacker_id: int
    defender_id: int
    result: CombatResult

    def to_dict(self) -> dict:
        return {
            'attacker_id': self.attacker_id,
            'defender_id': self.defender_id,
            'result': self.result.to_dict(),
        }


def _valid_targets(attacker: Node, faction: int, game_state: GameState) -> List[Node]:
    """Adjacent enemy nodes strictly weaker than the attacker."""
    targets = []
    for conn_id in attacker.connections:
        target = game_state.nodes[conn_id]
        if (target.faction != faction and target.faction != Faction.UNOWNED
                and target.strength < attacker.strength):
            targets.append(target)
    return targets


def plan_attacks(faction: int, game_state: GameState, chooser=None,
                 rng: Optional[random.Random] = None) -> Iterator[AttackEvent]:
    """
    Run one faction's turn, yielding after each combat.

    Every combat is applied to the board before its event is yielded. When
    the consumer resumes, the game-over flag and the victory checker are
    polled; a terminal state ends the whole turn immediately.

    Args:
        faction: Faction taking its turn
        game_state: Current game state (mutated in place)
        chooser: Object with a choice() method for tie-breaks (default: random module)
        rng: Optional random source for combat rolls (default: random module)

    Yields:
        AttackEvent for every combat, in execution order
    """
    config = load_config()
    min_strength = config['min_attack_strength']
    pick = chooser if chooser is not None else random
    exhausted = set()

    while True:
        candidates = [
            n for n in game_state.get_nodes_for_faction(faction)
            if n.strength >= min_strength and n.id not in exhausted
        ]
        if not candidates:
            return

        max_strength = max(n.strength for n in candidates)
        attacker = pick.choice([n for n in candidates if n.strength == max_strength])

        # Chain attack from this node until depleted or out of targets
        while attacker.strength >= min_strength:
            targets = _valid_targets(attacker, faction, game_state)
            if not targets:
                break

            min_target = min(t.strength for t in targets)
            defender = pick.choice([t for t in targets if t.strength == min_target])
            defender_faction = defender.faction

            result = resolve_combat(attacker.strength, defender.strength, rng)
            apply_combat_result(attacker, defender, result)
            log_attack(game_state, attacker.id, defender.id, defender_faction, result)

            yield AttackEvent(attacker.id, defender.id, result)

            if game_state.is_game_over:
                return
            if check_victory(game_state).game_over:
                return
            update_eliminations(game_state)

        exhausted.add(attacker.id)


async def execute_turn(faction: int, game_state: GameState,
                       on_attack: Optional[AttackHook] = None,
                       chooser=None, rng: Optional[random.Random] = None) -> List[AttackEvent]:
    """
    Execute a faction's AI turn, awaiting the hook after every combat.

    The hook receives (attacker_id, defender_id, result). It may be a plain
    function or a coroutine function; its return value is ignored. It must
    not change ownership, strength or adjacency.

    Returns:
        The combats fought, in order
    """
    events = []
    for event in plan_attacks(faction, game_state, chooser=chooser, rng=rng):
        events.append(event)
        if on_attack is not None:
            outcome = on_attack(event.attacker_id, event.defender_id, event.result)
            if inspect.isawaitable(outcome):
                await outcome
    return events


def run_turn(faction: int, game_state: GameState,
             on_attack: Optional[AttackHook] = None, **kwargs) -> List[AttackEvent]:
    """Run execute_turn to completion from synchronous code."""
    return asyncio.run(execute_turn(faction, game_state, on_attack, **kwargs))
