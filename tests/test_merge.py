from bgg_aggregator.data.merge import coalesce, coalesce_name, fold_partial, merge_game_data
from bgg_aggregator.models import NormalizedPartial


def test_coalesce_only_replaces_with_set_values():
    assert coalesce(1, None) == 1
    assert coalesce(1, 2) == 2
    assert coalesce(None, 0) == 0


def test_coalesce_name_protects_existing_name():
    assert coalesce_name("Catan", "Unknown") == "Catan"
    assert coalesce_name("Catan", "") == "Catan"
    assert coalesce_name("Catan", None) == "Catan"
    assert coalesce_name("Catan", "CATAN") == "CATAN"
    assert coalesce_name({"value": "Catan"}, None) == "Catan"


def test_placeholder_name_does_not_overwrite_existing_name():
    games = merge_game_data([
        NormalizedPartial(id="1", name="Catan", owners=("alice",)),
        NormalizedPartial(id="1", name="Unknown", complexity=2.7, owners=()),
    ])

    assert len(games) == 1
    game = games[0]
    assert game.id == "1"
    assert game.name == "Catan"
    assert game.complexity == 2.7
    assert game.owners == ["alice"]


def test_owners_are_unioned_in_first_seen_order():
    games = merge_game_data([
        NormalizedPartial(id="13", name="CATAN", owners=("bob",)),
        NormalizedPartial(id="13", name="CATAN", owners=("alice",)),
        NormalizedPartial(id="13", name="CATAN", owners=("bob",)),
    ])

    assert games[0].owners == ["bob", "alice"]


def test_set_values_overwrite_and_unset_values_do_not():
    games = merge_game_data([
        NormalizedPartial(id="13", name="CATAN", thumbnail="a.jpg", rating=7.0, rank=500, owners=("alice",)),
        NormalizedPartial(id="13", name="CATAN", thumbnail="b.jpg", rating=None, rank=501, owners=("bob",)),
    ])

    game = games[0]
    assert game.thumbnail == "b.jpg"
    assert game.rating == 7.0
    assert game.rank == 501


def test_output_follows_first_seen_order_and_drops_missing_ids():
    games = merge_game_data([
        NormalizedPartial(id="822", name="Carcassonne", owners=("alice",)),
        NormalizedPartial(id=None, name="Orphan", owners=("alice",)),
        NormalizedPartial(id="13", name="CATAN", owners=("alice",)),
        NormalizedPartial(id="822", name="Carcassonne", owners=("bob",)),
    ])

    assert [game.id for game in games] == ["822", "13"]


def test_seeded_game_with_placeholder_name_keeps_placeholder():
    games = merge_game_data([NormalizedPartial(id="5", owners=())])

    assert games[0].name == "Unknown"
    assert games[0].owners == []


def test_fold_partial_keeps_collection_owners():
    collection = NormalizedPartial(id="13", name="CATAN", rating=7.1, owners=("alice",))
    details = NormalizedPartial(id="13", name="Unknown", rating=7.09, complexity=2.29, owners=())

    folded = fold_partial(collection, details)

    assert folded.owners == ("alice",)
    assert folded.name == "CATAN"
    assert folded.rating == 7.1
    assert folded.complexity == 2.29
    assert collection.complexity is None


def test_fold_partial_fills_only_unset_collection_fields():
    collection = NormalizedPartial(id="13", name="Catan", thumbnail="mine.jpg", rank=500, owners=("alice",))
    details = NormalizedPartial(id="13", name="CATAN", thumbnail="detail.jpg", image="detail.png",
                                rank=499, num_owned=230500, owners=())

    folded = fold_partial(collection, details)

    assert folded.name == "CATAN"
    assert folded.thumbnail == "mine.jpg"
    assert folded.rank == 500
    assert folded.image == "detail.png"
    assert folded.num_owned == 230500
    assert folded.owners == ("alice",)
