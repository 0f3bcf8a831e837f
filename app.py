from flask import Flask, request, jsonify
from flask_cors import CORS
from state import (
    initialize_game, GameState, BoardError, serialize_state, deserialize_state,
    get_game_summary, log_event,
)
from orders import AttackOrder, OrderValidationError, execute_attack
from ai_controller import run_turn
from upkeep import perform_upkeep, check_victory
from models import PLAYER_FACTION
from typing import Dict
import uuid

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes
games: Dict[str, GameState] = {}  # In-memory storage for game states


def _state_json(game_id: str, game_state: GameState) -> Dict:
    """Serialized board plus summary for API responses."""
    return {
        'game_id': game_id,
        'board': serialize_state(game_state),
        'summary': get_game_summary(game_state),
    }


@app.route('/api/game/new', methods=['POST'])
def new_game():
    """Create a new game from the provided game number."""
    try:
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({'error': 'Invalid JSON data'}), 400

        game_number = data.get('game_number', 1)

        # Validate game number is an integer
        try:
            game_number = int(game_number)
        except (ValueError, TypeError):
            return jsonify({'error': 'Game number must be an integer'}), 400

        game_state = initialize_game(game_number)

        game_id = str(uuid.uuid4())
        games[game_id] = game_state

        return jsonify({'game_id': game_id, 'game_number': game_number})

    except BoardError as e:
        return jsonify({'error': f'Failed to generate board: {str(e)}'}), 400
    except Exception as e:
        return jsonify({'error': f'Failed to create game: {str(e)}'}), 500


@app.route('/api/game/<game_id>/state', methods=['GET'])
def get_game_state(game_id: str):
    """Retrieve the current board and summary for the given game ID."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        return jsonify(_state_json(game_id, games[game_id]))

    except Exception as e:
        return jsonify({'error': f'Failed to retrieve game state: {str(e)}'}), 500


@app.route('/api/game/<game_id>/attack', methods=['POST'])
def submit_attack(game_id: str):
    """Submit a player attack from one owned node onto an adjacent enemy."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        game_state = games[game_id]

        data = request.get_json(silent=True)
        if data is None:
            return jsonify({'error': 'Invalid JSON data'}), 400

        if not all(key in data for key in ['source', 'target']):
            return jsonify({'error': 'Attack must have source and target fields'}), 400

        try:
            order = AttackOrder(PLAYER_FACTION, int(data['source']), int(data['target']))
        except (ValueError, TypeError):
            return jsonify({'error': 'source and target must be node ids'}), 400

        if game_state.current_turn != PLAYER_FACTION:
            return jsonify({'error': 'It is not the player\'s turn'}), 400

        result = execute_attack(order, game_state)
        victory = check_victory(game_state)
        if victory.game_over:
            game_state.is_game_over = True

        response_data = {
            'result': result.to_dict(),
            'game_over': victory.game_over,
            'winner': victory.winner,
        }
        response_data['state'] = _state_json(game_id, game_state)

        return jsonify(response_data)

    except OrderValidationError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        return jsonify({'error': f'Failed to process attack: {str(e)}'}), 500


@app.route('/api/game/<game_id>/ai-turn', methods=['POST'])
def ai_turn(game_id: str):
    """Run the AI turn of the faction currently acting."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        game_state = games[game_id]

        if game_state.is_game_over:
            return jsonify({'error': 'The game is over'}), 400
        if game_state.current_turn == PLAYER_FACTION:
            return jsonify({'error': 'The player faction is not AI controlled'}), 400

        events = run_turn(game_state.current_turn, game_state)
        victory = check_victory(game_state)
        if victory.game_over:
            game_state.is_game_over = True

        response_data = {
            'faction': int(game_state.current_turn),
            'attacks': [event.to_dict() for event in events],
            'game_over': victory.game_over,
            'winner': victory.winner,
        }
        response_data['state'] = _state_json(game_id, game_state)

        return jsonify(response_data)

    except Exception as e:
        return jsonify({'error': f'Failed to run AI turn: {str(e)}'}), 500


@app.route('/api/game/<game_id>/upkeep', methods=['POST'])
def perform_upkeep_phase(game_id: str):
    """Reinforce the faction that just acted and pass the turn on."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        game_state = games[game_id]

        if game_state.is_game_over:
            return jsonify({'error': 'Upkeep cannot be performed after the game is over'}), 400

        upkeep_results = perform_upkeep(game_state)
        upkeep_results['state'] = _state_json(game_id, game_state)

        return jsonify(upkeep_results)

    except Exception as e:
        return jsonify({'error': f'Failed to perform upkeep: {str(e)}'}), 500


@app.route('/api/game/<game_id>/save', methods=['GET'])
def save_game(game_id: str):
    """Export the persisted board shape."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        game_state = games[game_id]
        log_event(game_state, f"Game {game_state.game_number} saved")
        return jsonify(serialize_state(game_state))

    except Exception as e:
        return jsonify({'error': f'Failed to save game: {str(e)}'}), 500


@app.route('/api/game/load', methods=['POST'])
def load_game():
    """Create a game from a previously saved board."""
    try:
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({'error': 'Invalid JSON data'}), 400

        game_state = deserialize_state(data)

        game_id = str(uuid.uuid4())
        games[game_id] = game_state

        return jsonify({'game_id': game_id, 'game_number': game_state.game_number})

    except BoardError as e:
        return jsonify({'error': f'Invalid board: {str(e)}'}), 400
    except Exception as e:
        return jsonify({'error': f'Failed to load game: {str(e)}'}), 500


@app.route('/api/game/<game_id>/log', methods=['GET'])
def get_game_log(game_id: str):
    """Retrieve the full game log for analysis."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        game_state = games[game_id]

        log_response = {
            'game_id': game_id,
            'current_turn': int(game_state.current_turn),
            'log': game_state.log
        }

        return jsonify(log_response)

    except Exception as e:
        return jsonify({'error': f'Failed to retrieve game log: {str(e)}'}), 500


if __name__ == '__main__':
    app.run(debug=True)
