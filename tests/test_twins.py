from pedigree_twins import cluster_twins, rank, twin_sets
from pedigree_types import DZ_TWIN, MZ_TWIN, PARTNER, Relation

DEPTH = [0, 0, 1, 1, 2, 2, 2, 2, 2, 2]

# 9 is born first, then 8, then 7
TRIPLETS = [Relation(9, 8, DZ_TWIN), Relation(8, 7, DZ_TWIN)]


def test_rank_is_ordinal():
    assert rank([3, 1, 2]) == [3, 1, 2]
    assert rank([0.5, -2, 7.25]) == [2, 1, 3]


def test_rank_ties_keep_array_order():
    assert rank([2, 1, 2, 1]) == [3, 1, 4, 2]


def test_no_twins():
    twinset, twinord = twin_sets([Relation(0, 1, PARTNER)], 4)
    assert twinset == [-1, -1, -1, -1]
    assert twinord == [1, 1, 1, 1]


def test_pair_of_twins():
    twinset, twinord = twin_sets([Relation(3, 2, MZ_TWIN)], 5)
    assert twinset == [-1, -1, 2, 2, -1]
    assert twinord == [1, 1, 2, 1, 1]


def test_triplet_chain_settles_whatever_the_listing_order():
    for relations in (TRIPLETS, list(reversed(TRIPLETS))):
        twinset, twinord = twin_sets(relations, 10)
        assert twinset[7] == twinset[8] == twinset[9] == 7
        assert (twinord[9], twinord[8], twinord[7]) == (1, 2, 3)
        assert twinset[:7] == [-1] * 7


def test_triplets_at_four_five_six_stay_a_block_in_birth_order():
    twinset, twinord = twin_sets(TRIPLETS, 10)
    order = [1, 2, 1, 2, 1, 2, 3, 4, 5, 6]

    cluster_twins(order, DEPTH, twinset, twinord)

    assert [order[9], order[8], order[7]] == [4, 5, 6]
    assert sorted(order[4:]) == [1, 2, 3, 4, 5, 6]


def test_scattered_twins_are_pulled_together():
    twinset, twinord = twin_sets(TRIPLETS, 10)
    order = [1, 2, 1, 2, 2, 4, 6, 1, 3, 5]

    cluster_twins(order, DEPTH, twinset, twinord)

    assert [order[9], order[8], order[7]] == [2, 3, 4]
    assert order[4] == 1
    assert (order[5], order[6]) == (5, 6)
    # other generations are re-ranked but untouched in relative order
    assert order[:4] == [1, 2, 1, 2]


def test_cluster_without_twins_is_a_no_op():
    order = [5, 3, 9]
    assert cluster_twins(order, [0, 0, 0], [-1, -1, -1], [1, 1, 1]) == [5, 3, 9]
