"""
Combat resolution for Open Network Wars.

An attack is fought as a sequence of single-unit rounds. The attacker
commits all but units_left_behind of its strength, the defender commits
everything. Rolls come from the process-wide random module, so combat is
not reproducible from the game number (only the board is).
"""

import random
from typing import Optional

from config import load_config
from models import CombatResult, CombatRound, Node


def resolve_combat(attacker_strength: int, defender_strength: int,
                   rng: Optional[random.Random] = None) -> CombatResult:
    """Resolve one attack between two strengths.

    A committed attacking count at or below zero fights no rounds; the
    attacker still "wins" if the defender already had zero strength.

    Args:
        attacker_strength: Full strength of the attacking node
        defender_strength: Full strength of the defending node
        rng: Optional random source; defaults to the random module

    Returns:
        CombatResult with the outcome, survivors and the round log
    """
    config = load_config()
    win_chance = config['attacker_win_chance']
    source = rng if rng is not None else random

    result = CombatResult()
    atk = attacker_strength - config['units_left_behind']
    defense = defender_strength

    while atk > 0 and defense > 0:
        if source.random() < win_chance:
            defense -= 1
            result.rounds.append(CombatRound(True, atk, defense))
        else:
            atk -= 1
            result.rounds.append(CombatRound(False, atk, defense))

    result.attacker_won = defense == 0
    result.attacker_remaining = atk
    result.defender_remaining = defense
    return result


def apply_combat_result(attacker: Node, defender: Node, result: CombatResult) -> None:
    """Apply a resolved combat to the two nodes involved.

    The source always drops to units_left_behind: its committed units are
    consumed by the engagement. A captured node changes faction and is
    garrisoned by the surviving attackers.
    """
    attacker.strength = load_config()['units_left_behind']
    if result.attacker_won:
        defender.faction = attacker.faction
        defender.strength = result.attacker_remaining
    else:
        defender.strength = result.defender_remaining
