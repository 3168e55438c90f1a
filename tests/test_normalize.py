from bgg_aggregator.api.xml_parser import parse_items
from bgg_aggregator.data.normalize import (
    extract_name,
    normalize_collection_item,
    normalize_thing_item,
    parse_float,
    parse_int,
    select_rank,
)

from .conftest import load_fixture


def test_extract_name_from_every_shape():
    assert extract_name("Catan") == "Catan"
    assert extract_name({"sortindex": "1", "value": "Catan"}) == "Catan"
    assert extract_name([
        {"type": "alternate", "value": "Die Siedler von Catan"},
        {"type": "primary", "value": "CATAN"},
    ]) == "CATAN"
    assert extract_name([{"type": "alternate", "value": "Les Colons"}]) == "Les Colons"


def test_extract_name_falls_back_to_placeholder():
    assert extract_name([]) == "Unknown"
    assert extract_name(None) == "Unknown"
    assert extract_name("") == "Unknown"
    assert extract_name({"sortindex": "1"}) == "Unknown"
    assert extract_name(42) == "Unknown"


def test_numeric_parsing_is_tolerant():
    assert parse_int("12") == 12
    assert parse_int({"value": "4"}) == 4
    assert parse_int("12.7") == 12
    assert parse_int("") is None
    assert parse_int("N/A") is None
    assert parse_int(None) is None
    assert parse_float("7.25") == 7.25
    assert parse_float({"value": "2.3"}) == 2.3
    assert parse_float("Not Ranked") is None
    assert parse_float("") is None


def test_rank_prefers_boardgame_named_entry():
    ranks = [
        {"type": "family", "value": "12"},
        {"type": "subtype", "name": "boardgame", "value": "5"},
    ]
    item = {
        "objectid": "1",
        "name": "Catan",
        "stats": {"rating": {"ranks": {"rank": ranks}}},
    }

    assert normalize_collection_item(item, "alice").rank == 5


def test_rank_selection_priority():
    subtype = {"type": "subtype", "name": "other", "value": "7"}
    friendly = {"type": "family", "friendlyname": "Overall Board Game Rank", "value": "8"}
    first = {"type": "family", "friendlyname": "Party", "value": "9"}

    assert select_rank([first, friendly, subtype]) is subtype
    assert select_rank([first, friendly]) is friendly
    assert select_rank([first]) is first
    assert select_rank([]) is None
    assert select_rank(None) is None


def test_collection_item_from_fixture():
    items = parse_items(load_fixture("collection_alice.xml"))
    catan = normalize_collection_item(items[0], "alice")

    assert catan.id == "13"
    assert catan.name == "CATAN"
    assert catan.thumbnail == "https://cf.geekdo-images.com/catan_t.jpg"
    assert catan.year_published == 1995
    assert (catan.min_players, catan.max_players) == (3, 4)
    assert (catan.min_play_time, catan.max_play_time, catan.playing_time) == (60, 120, 120)
    assert catan.rating == 7.1
    assert catan.rank == 500
    assert catan.num_owned == 230000
    assert catan.complexity is None
    assert catan.owners == ("alice",)


def test_collection_item_not_ranked_and_missing_fields():
    items = parse_items(load_fixture("collection_alice.xml"))
    carcassonne = normalize_collection_item(items[1], "alice")

    assert carcassonne.rank is None
    assert carcassonne.image is None
    assert carcassonne.thumbnail is None


def test_thing_item_from_fixture():
    items = parse_items(load_fixture("things.xml"))
    catan = normalize_thing_item(items[0])

    assert catan.id == "13"
    assert catan.name == "CATAN"
    assert catan.complexity == 2.29
    assert catan.rating == 7.09
    assert catan.rank == 499
    assert catan.num_owned == 230500
    assert catan.year_published == 1995
    assert catan.owners == ()


def test_thing_item_single_rank_object_not_ranked():
    thing = {
        "id": "822",
        "name": {"type": "primary", "value": "Carcassonne"},
        "statistics": {"ratings": {
            "averageweight": {"value": "1.9"},
            "ranks": {"rank": {"type": "subtype", "name": "boardgame", "value": "Not Ranked"}},
        }},
    }

    partial = normalize_thing_item(thing)

    assert partial.rank is None
    assert partial.complexity == 1.9
    assert partial.name == "Carcassonne"


def test_thing_item_single_rank_object_ranked():
    thing = {
        "id": "174430",
        "statistics": {"ratings": {"ranks": {"rank": {"type": "subtype", "value": "3"}}}},
    }

    partial = normalize_thing_item(thing)

    assert partial.rank == 3
    assert partial.name == "Unknown"


def test_missing_id_is_tolerated():
    assert normalize_collection_item({"name": "Orphan"}, "alice").id is None
