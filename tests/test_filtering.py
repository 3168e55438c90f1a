import pytest
from pydantic import ValidationError

from bgg_aggregator.data.filtering import apply_filters, filter_games, sort_games
from bgg_aggregator.models import FilterState, GameData


def game(game_id, name="Game", **fields):
    return GameData(id=game_id, name=name, **fields)


def ids(games):
    return [g.id for g in games]


def test_player_count_must_fit_range():
    games = [
        game("big", min_players=5, max_players=6),
        game("fits", min_players=2, max_players=4),
        game("unknown"),
    ]

    result = filter_games(games, FilterState(player_count=4))

    assert ids(result) == ["fits", "unknown"]


def test_play_time_range():
    games = [
        game("short", min_play_time=15, max_play_time=30, playing_time=30),
        game("long", min_play_time=120, max_play_time=180, playing_time=180),
        game("typical_only", playing_time=60),
        game("unknown"),
    ]

    assert ids(filter_games(games, FilterState(min_play_time=45))) == ["long", "typical_only"]
    assert ids(filter_games(games, FilterState(max_play_time=60))) == ["short", "typical_only"]


def test_complexity_and_rating_default_to_zero():
    games = [
        game("light", complexity=1.5, rating=6.5),
        game("heavy", complexity=4.2, rating=8.1),
        game("unrated"),
    ]

    assert ids(filter_games(games, FilterState(min_complexity=2))) == ["heavy"]
    assert ids(filter_games(games, FilterState(max_complexity=2))) == ["light", "unrated"]
    assert ids(filter_games(games, FilterState(min_rating=7))) == ["heavy"]


def test_search_is_case_insensitive_substring():
    games = [game("1", "Brass: Birmingham"), game("2", "Catan"), game("3", "Brass: Lancashire")]

    assert ids(filter_games(games, FilterState(search="bRaSs"))) == ["1", "3"]
    assert ids(filter_games(games, FilterState(search=""))) == ["1", "2", "3"]


def test_empty_filter_keeps_everything():
    games = [game("1"), game("2")]
    assert filter_games(games, FilterState()) == games


def test_sort_by_name_ignores_case():
    games = [game("1", "catan"), game("2", "Azul"), game("3", "Brass")]

    assert ids(sort_games(games, "name", "asc")) == ["2", "3", "1"]
    assert ids(sort_games(games, "name", "desc")) == ["1", "3", "2"]


def test_unranked_games_sort_last_in_both_directions():
    games = [game("unranked"), game("b", rank=20), game("a", rank=3)]

    assert ids(sort_games(games, "rank", "asc")) == ["a", "b", "unranked"]
    assert ids(sort_games(games, "rank", "desc")) == ["b", "a", "unranked"]


def test_sort_by_numeric_keys_defaults_unset_to_zero():
    games = [
        game("a", rating=7.0, complexity=3.0, playing_time=90, owners=["x"]),
        game("b", owners=["x", "y"]),
        game("c", rating=8.0, complexity=1.0, playing_time=30, owners=[]),
    ]

    assert ids(sort_games(games, "rating", "desc")) == ["c", "a", "b"]
    assert ids(sort_games(games, "complexity", "asc")) == ["b", "c", "a"]
    assert ids(sort_games(games, "playingTime", "asc")) == ["b", "c", "a"]
    assert ids(sort_games(games, "owners", "desc")) == ["b", "a", "c"]


def test_sort_keeps_ties_in_original_order():
    games = [game("1", rating=7.0), game("2", rating=7.0), game("3", rating=7.0)]
    assert ids(sort_games(games, "rating", "asc")) == ["1", "2", "3"]


def test_sort_rejects_unknown_key():
    with pytest.raises(ValueError):
        sort_games([], "publisher")


def test_filter_and_sort_do_not_modify_input():
    games = [game("1", "Catan", rating=7.0), game("2", "Azul", rating=7.8)]
    snapshot = list(games)

    first = apply_filters(games, FilterState(sort_by="rating", sort_order="desc"))
    second = apply_filters(games, FilterState(search="cat"))

    assert games == snapshot
    assert ids(first) == ["2", "1"]
    assert ids(second) == ["1"]


def test_filter_state_defaults_and_aliases():
    state = FilterState.model_validate({"playerCount": 3, "sortBy": "rank", "sortOrder": "desc"})

    assert state.player_count == 3
    assert state.sort_by == "rank"
    assert state.sort_order == "desc"
    assert FilterState().sort_by == "name"
    assert FilterState().sort_order == "asc"


def test_filter_state_rejects_bad_sort_options():
    with pytest.raises(ValidationError):
        FilterState(sort_by="publisher")
    with pytest.raises(ValidationError):
        FilterState(sort_order="sideways")
