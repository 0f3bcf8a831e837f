import random
from typing import Optional

from config import load_config
from models import CombatResult, Faction, faction_name
from resolution import apply_combat_result, resolve_combat
from state import GameState, log_event
from upkeep import update_eliminations


class AttackOrder:
    def __init__(self, faction: int, source_id: int, target_id: int):
        """Initialize an attack order from source_id onto target_id."""
        self.faction = faction
        self.source_id = source_id
        self.target_id = target_id

    def __repr__(self) -> str:
        return f"AttackOrder(faction={self.faction}, source_id={self.source_id}, target_id={self.target_id})"


class OrderValidationError(Exception):
    """Exception raised when an order fails validation."""
    pass


def validate_attack(order: AttackOrder, game_state: GameState) -> bool:
    """Validate if an attack order is legal in the current game state."""
    if game_state.is_game_over:
        raise OrderValidationError("The game is over")

    source = game_state.nodes.get(order.source_id)
    if source is None:
        raise OrderValidationError(f"Source node {order.source_id} does not exist")

    target = game_state.nodes.get(order.target_id)
    if target is None:
        raise OrderValidationError(f"Target node {order.target_id} does not exist")

    if source.faction != order.faction:
        raise OrderValidationError(
            f"Node {source.id} is not owned by {faction_name(order.faction)}"
        )

    min_strength = load_config()['min_attack_strength']
    if source.strength < min_strength:
        raise OrderValidationError(
            f"Node {source.id} has insufficient strength (has {source.strength}, needs {min_strength})"
        )

    if not source.is_connected_to(target.id):
        raise OrderValidationError(f"Node {target.id} is not adjacent to node {source.id}")

    if target.faction == order.faction:
        raise OrderValidationError(f"Node {target.id} is already owned by {faction_name(order.faction)}")

    if target.faction == Faction.UNOWNED:
        raise OrderValidationError(f"Node {target.id} is unowned and cannot be attacked")

    return True


def execute_attack(order: AttackOrder, game_state: GameState,
                   rng: Optional[random.Random] = None) -> CombatResult:
    """Validate and carry out an attack order, returning the combat result."""
    validate_attack(order, game_state)

    source = game_state.nodes[order.source_id]
    target = game_state.nodes[order.target_id]
    defender_faction = target.faction

    result = resolve_combat(source.strength, target.strength, rng)
    apply_combat_result(source, target, result)
    log_attack(game_state, order.source_id, order.target_id, defender_faction, result)

    update_eliminations(game_state)
    return result


def log_attack(game_state: GameState, source_id: int, target_id: int,
               defender_faction: int, result: CombatResult) -> None:
    """Record one resolved attack in the game log."""
    attacker_faction = game_state.nodes[source_id].faction
    outcome = 'captured' if result.attacker_won else 'repelled'
    log_event(
        game_state,
        f"{faction_name(attacker_faction)} node {source_id} attacked "
        f"{faction_name(defender_faction)} node {target_id}: {outcome}",
        attacker_id=source_id,
        defender_id=target_id,
        attacker_faction=int(attacker_faction),
        defender_faction=int(defender_faction),
        attacker_won=result.attacker_won,
        attacker_remaining=result.attacker_remaining,
        defender_remaining=result.defender_remaining,
        rounds=len(result.rounds),
    )
