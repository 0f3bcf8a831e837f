"""
CLI spectator mode for Open Network Wars.

Watch five AI factions fight over a generated network. ASCII renderer,
per-combat narration, full game loop (turn, upkeep, next faction).

Usage: python play_cli.py [game_number]
"""

import asyncio
import sys

from ai_controller import execute_turn
from config import load_config
from models import CombatResult, PLAYER_ELIMINATED, TURN_ORDER, faction_name
from state import GameState, find_node_by_position, get_game_summary, initialize_game
from upkeep import perform_upkeep

MAX_ROUNDS = 100
COMBAT_DELAY = 0.05  # Seconds to pause after narrating each combat

FACTION_CHAR = {
    0: "R",
    1: "B",
    2: "G",
    3: "Y",
    4: "P",
    5: "-",
}


# ---------------------------------------------------------------------------
# ASCII Renderer
# ---------------------------------------------------------------------------


def render_board(game: GameState) -> str:
    """Render the grid: faction letter and strength per node, dots for empty cells."""
    config = load_config()
    lines = []
    header = "    " + "".join(f"{x:^6}" for x in range(config['grid_cols']))
    lines.append(header)
    for y in range(config['grid_rows']):
        row = f"{y:>2}  "
        for x in range(config['grid_cols']):
            node = find_node_by_position(game, x, y)
            if node is None:
                row += f"{'.':^6}"
            else:
                row += f"{FACTION_CHAR[int(node.faction)] + str(node.strength):^6}"
        lines.append(row)
    return "\n".join(lines)


def render_summary(game: GameState) -> str:
    """One line per faction: nodes, strength, bank."""
    summary = get_game_summary(game)
    lines = []
    for entry in summary['factions']:
        marker = ">" if entry['id'] == summary['current_turn'] else " "
        status = " (eliminated)" if entry['eliminated'] else ""
        lines.append(
            f"{marker} {entry['name']:7} nodes {entry['nodes']:2d}  "
            f"strength {entry['strength']:3d}  bank {entry['bank']}{status}"
        )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Game loop
# ---------------------------------------------------------------------------


async def narrate_attack(attacker_id: int, defender_id: int, result: CombatResult) -> None:
    """Presentation hook: print one combat, then pause."""
    outcome = "captured" if result.attacker_won else "repelled"
    print(f"  {attacker_id:2d} -> {defender_id:2d}: {outcome} "
          f"after {len(result.rounds)} rounds "
          f"({result.attacker_remaining} vs {result.defender_remaining} left)")
    await asyncio.sleep(COMBAT_DELAY)


async def play(game_number: int) -> None:
    game = initialize_game(game_number)
    print(f"\nOPEN NETWORK WARS - game #{game_number}\n")
    print(render_board(game))

    rounds = 0
    while not game.is_game_over and rounds < MAX_ROUNDS:
        faction = game.current_turn
        already_out = set(game.eliminated_factions)
        print(f"\n--- {faction_name(faction)} ---")
        events = await execute_turn(faction, game, narrate_attack)
        if not events:
            print("  (no attacks)")

        upkeep = perform_upkeep(game)
        reinforcements = upkeep['reinforcements']
        if reinforcements['total']:
            print(f"  reinforced +{reinforcements['total']} over "
                  f"{len(reinforcements['reinforced'])} frontline nodes")
        for eliminated in sorted(game.eliminated_factions - already_out):
            print(f"  {faction_name(eliminated)} has been eliminated")

        if game.current_turn == TURN_ORDER[0] or upkeep['game_over']:
            rounds += 1
            print()
            print(render_board(game))
            print(render_summary(game))

    print("\n" + "=" * 40)
    if not game.is_game_over:
        print(f"No winner after {MAX_ROUNDS} rounds")
    elif upkeep['winner'] == PLAYER_ELIMINATED:
        print("Red (player) has been eliminated")
    else:
        print(f"{faction_name(upkeep['winner'])} wins!")
    print("=" * 40)


def main():
    game_number = 1
    if len(sys.argv) > 1:
        try:
            game_number = int(sys.argv[1])
        except ValueError:
            print(f"Game number must be an integer, got {sys.argv[1]!r}")
            sys.exit(1)
    asyncio.run(play(game_number))


if __name__ == "__main__":
    main()
