import json

import pytest

from models import Faction
from state import (
    GameState, BoardError, UnknownNodeError, FactionPartitionError,
    initialize_game, serialize_state, deserialize_state, validate_board,
    get_game_summary, find_node_by_position,
)
from tests.helpers import build_state


def test_initialize_game(game):
    assert isinstance(game, GameState)
    assert len(game.nodes) == 30
    assert list(game.nodes) == list(range(30))
    assert game.current_turn == Faction.RED
    assert game.game_number == 42
    assert game.is_game_over is False
    assert game.eliminated_factions == set()
    assert game.fractions == [0, 0, 0, 0, 0]
    assert len(game.log) == 1
    for faction in range(5):
        assert game.count_nodes(faction) == 6
        assert game.total_strength(faction) == 20


def test_initialize_game_is_deterministic():
    a = serialize_state(initialize_game(7))
    b = serialize_state(initialize_game(7))
    assert a == b


def test_get_node(chain_state):
    assert chain_state.get_node(2).faction == Faction.BLUE
    with pytest.raises(UnknownNodeError):
        chain_state.get_node(99)


def test_unknown_node_is_board_error(chain_state):
    with pytest.raises(BoardError):
        chain_state.get_node(-1)


def test_find_node_by_position(game):
    node = game.nodes[5]
    assert find_node_by_position(game, node.grid_x, node.grid_y) is node
    assert find_node_by_position(game, 100, 100) is None


class TestSaveLoad:

    def test_round_trip_through_json(self, game):
        # Wipe out two factions and leave something in the bank
        for node in game.nodes.values():
            if node.faction in (Faction.GREEN, Faction.YELLOW):
                node.faction = Faction.BLUE
        game.eliminated_factions.update({Faction.GREEN, Faction.YELLOW})
        game.fractions[Faction.BLUE] = 2
        game.current_turn = Faction.PURPLE

        data = json.loads(json.dumps(serialize_state(game)))
        restored = deserialize_state(data)

        assert serialize_state(restored) == serialize_state(game)
        assert restored.eliminated_factions == {Faction.GREEN, Faction.YELLOW}
        assert restored.fractions == [0, 2, 0, 0, 0]
        assert restored.current_turn == Faction.PURPLE
        assert isinstance(restored.current_turn, Faction)
        assert list(restored.nodes) == list(game.nodes)
        for node_id, node in game.nodes.items():
            assert restored.nodes[node_id].connections == node.connections

    def test_serialized_shape(self, chain_state):
        data = serialize_state(chain_state)
        assert data['nodes'][1] == {
            'id': 1, 'gridX': 1, 'gridY': 0, 'faction': 0, 'strength': 2, 'connections': [0, 2],
        }
        assert data['eliminatedFactions'] == []
        assert data['fractions'] == [0, 0, 0, 0, 0]
        assert data['isGameOver'] is False
        assert 'version' in data

    def test_eliminated_factions_sorted(self, chain_state):
        chain_state.eliminated_factions.update({Faction.PURPLE, Faction.GREEN})
        assert serialize_state(chain_state)['eliminatedFactions'] == [2, 4]

    def test_load_is_logged(self, chain_state):
        restored = deserialize_state(serialize_state(chain_state))
        assert len(restored.log) == 1
        assert 'loaded' in restored.log[0]['event']

    def test_missing_neighbour_rejected(self, chain_state):
        data = serialize_state(chain_state)
        data['nodes'][2]['connections'].append(7)
        with pytest.raises(UnknownNodeError):
            deserialize_state(data)

    def test_asymmetric_edge_rejected(self, chain_state):
        data = serialize_state(chain_state)
        data['nodes'][0]['connections'].append(2)
        with pytest.raises(BoardError):
            deserialize_state(data)

    def test_invalid_faction_rejected(self, chain_state):
        data = serialize_state(chain_state)
        data['nodes'][0]['faction'] = 9
        with pytest.raises(FactionPartitionError):
            deserialize_state(data)

    def test_negative_strength_rejected(self, chain_state):
        data = serialize_state(chain_state)
        data['nodes'][0]['strength'] = -1
        with pytest.raises(BoardError):
            deserialize_state(data)

    def test_bad_bank_length_rejected(self, chain_state):
        data = serialize_state(chain_state)
        data['fractions'] = [0, 0]
        with pytest.raises(BoardError):
            deserialize_state(data)

    @pytest.mark.parametrize("field,value", [("gridX", 99), ("gridY", -1)])
    def test_off_grid_node_rejected(self, chain_state, field, value):
        data = serialize_state(chain_state)
        data['nodes'][0][field] = value
        with pytest.raises(BoardError, match="off the grid"):
            deserialize_state(data)

    def test_shared_cell_rejected(self, chain_state):
        data = serialize_state(chain_state)
        data['nodes'][2]['gridX'] = 0
        with pytest.raises(BoardError, match="share cell"):
            deserialize_state(data)

    def test_isolated_node_rejected(self, chain_state):
        data = serialize_state(chain_state)
        data['nodes'].append({
            'id': 3, 'gridX': 5, 'gridY': 6, 'faction': 4, 'strength': 1, 'connections': [],
        })
        with pytest.raises(BoardError, match="no connections"):
            deserialize_state(data)

    def test_duplicate_neighbour_rejected(self, chain_state):
        data = serialize_state(chain_state)
        data['nodes'][0]['connections'] = [1, 1]
        with pytest.raises(BoardError, match="more than once"):
            deserialize_state(data)

    def test_unknown_current_turn_rejected(self, chain_state):
        data = serialize_state(chain_state)
        data['currentTurn'] = 9
        with pytest.raises(BoardError):
            deserialize_state(data)

    def test_unowned_cannot_take_turn(self, chain_state):
        data = serialize_state(chain_state)
        data['currentTurn'] = Faction.UNOWNED
        with pytest.raises(FactionPartitionError):
            deserialize_state(data)

    def test_malformed_data_rejected(self):
        with pytest.raises(BoardError):
            deserialize_state({'nodes': [{'id': 0}]})
        with pytest.raises(BoardError):
            deserialize_state({})


def test_validate_board_accepts_generated(game):
    validate_board(game.nodes)


def test_validate_board_self_loop():
    state = build_state([{'id': 0, 'faction': Faction.RED, 'connections': [0]}])
    with pytest.raises(BoardError):
        validate_board(state.nodes)


def test_game_summary(chain_state):
    chain_state.eliminated_factions.add(Faction.GREEN)
    chain_state.fractions[Faction.BLUE] = 1
    summary = get_game_summary(chain_state)

    assert summary['node_count'] == 3
    red, blue, green = summary['factions'][:3]
    assert red == {
        'id': 0, 'name': 'Red', 'color': '#E53935', 'cb_color': '#D55E00',
        'nodes': 2, 'strength': 5, 'bank': 0, 'eliminated': False,
    }
    assert blue['bank'] == 1
    assert green['eliminated'] is True
