"""
Upkeep phase management for Open Network Wars.
Handles reinforcement, elimination tracking, victory checking and turn advance.

- Reinforce the largest cluster's frontline, banking the division remainder
- Record factions that have lost every node
- Check victory conditions (node threshold, player elimination)
- Advance to the next faction still in the game
"""

from typing import Dict, List, Optional

from config import load_config
from models import Faction, PLAYER_FACTION, PLAYER_ELIMINATED, TURN_ORDER, VictoryResult, faction_name
from state import GameState, log_event
from territory import find_largest_cluster, get_frontline_nodes


def apply_reinforcements(faction: int, game_state: GameState) -> Dict:
    """
    Distribute reinforcements to a faction's frontline.

    The faction earns one unit per node of its largest cluster plus its
    banked remainder. The total is split evenly across the cluster's
    frontline nodes; what does not divide evenly overwrites the bank.
    No cluster or no frontline means nothing happens and the bank is kept.

    Args:
        faction: Faction to reinforce
        game_state: Current game state (holds the bank)

    Returns:
        Dictionary with results: {'reinforced': [{'id', 'amount'}], 'total': int}
    """
    cluster = find_largest_cluster(faction, game_state)
    if not cluster:
        return {'reinforced': [], 'total': 0}

    frontline = get_frontline_nodes(faction, game_state, cluster)
    if not frontline:
        return {'reinforced': [], 'total': 0}

    raw_total = len(cluster) + game_state.fractions[faction]
    per_node = raw_total // len(frontline)
    game_state.fractions[faction] = raw_total - per_node * len(frontline)

    reinforced = []
    if per_node > 0:
        for node_id in frontline:
            game_state.nodes[node_id].strength += per_node
            reinforced.append({'id': node_id, 'amount': per_node})

    total = per_node * len(frontline)
    log_event(game_state, f"{faction_name(faction)} reinforced {len(reinforced)} frontline nodes (+{total})",
              faction=int(faction), cluster_size=len(cluster), frontline=frontline,
              per_node=per_node, bank=game_state.fractions[faction])

    return {'reinforced': reinforced, 'total': total}


def check_victory(game_state: GameState) -> VictoryResult:
    """
    Check for a terminal state.

    The first faction in turn order at or above the victory threshold wins,
    even if several qualify at once. Otherwise the game ends when the
    player has no nodes left.

    Args:
        game_state: Current game state

    Returns:
        VictoryResult; winner is a faction id or PLAYER_ELIMINATED
    """
    threshold = load_config()['victory_threshold']
    for faction in TURN_ORDER:
        if game_state.count_nodes(faction) >= threshold:
            return VictoryResult(game_over=True, winner=int(faction))

    if game_state.count_nodes(PLAYER_FACTION) == 0:
        return VictoryResult(game_over=True, winner=PLAYER_ELIMINATED)

    return VictoryResult(game_over=False, winner=None)


def update_eliminations(game_state: GameState) -> List[int]:
    """
    Add every faction without nodes to the eliminated set.

    The set only grows; factions are never removed from it.

    Returns:
        Factions newly eliminated by this call
    """
    newly_eliminated = []
    for faction in TURN_ORDER:
        if game_state.count_nodes(faction) == 0 and faction not in game_state.eliminated_factions:
            game_state.eliminated_factions.add(faction)
            newly_eliminated.append(int(faction))
            log_event(game_state, f"{faction_name(faction)} has been eliminated", faction=int(faction))
    return newly_eliminated


def next_active_faction(game_state: GameState, faction: int) -> Optional[int]:
    """
    Get the faction that acts after faction in turn order.

    Eliminated factions are skipped. Returns None if nobody is left.
    """
    start = TURN_ORDER.index(Faction(faction))
    for offset in range(1, len(TURN_ORDER) + 1):
        candidate = TURN_ORDER[(start + offset) % len(TURN_ORDER)]
        if candidate not in game_state.eliminated_factions:
            return int(candidate)
    return None


def perform_upkeep(game_state: GameState) -> Dict:
    """
    Finish the acting faction's turn.

    Reinforces the faction that just acted, records eliminations, checks
    victory (setting is_game_over when terminal) and hands the turn to the
    next active faction.

    Args:
        game_state: Current game state to process

    Returns:
        Dictionary with results: {'faction', 'reinforcements', 'eliminated',
        'winner', 'game_over', 'next_turn'}

    Raises:
        ValueError: If the game is already over
    """
    if game_state.is_game_over:
        raise ValueError("Upkeep cannot be performed after the game is over")

    faction = game_state.current_turn
    reinforcements = apply_reinforcements(faction, game_state)
    eliminated = update_eliminations(game_state)
    victory = check_victory(game_state)

    if victory.game_over:
        game_state.is_game_over = True
        log_event(game_state, f"Game over: {faction_name(victory.winner)}",
                  winner=victory.winner, player_eliminated=victory.player_eliminated)
    else:
        next_faction = next_active_faction(game_state, faction)
        if next_faction is not None:
            game_state.current_turn = Faction(next_faction)
            log_event(game_state, f"Turn passes to {faction_name(next_faction)}", next_turn=next_faction)

    return {
        'faction': int(faction),
        'reinforcements': reinforcements,
        'eliminated': eliminated,
        'winner': victory.winner,
        'game_over': victory.game_over,
        'next_turn': int(game_state.current_turn),
    }
