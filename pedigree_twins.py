"""
Twin sets and their placement in the horizontal order.
"""

from typing import List, Sequence, Tuple

from pedigree_types import Relation

TWIN_ORDER_SCALE = 100


def rank(values: Sequence[float]) -> List[int]:
    """Ordinal ranks 1..k; equal values keep their array order."""
    ranks = [0] * len(values)
    for r, i in enumerate(sorted(range(len(values)), key=lambda i: values[i]), start=1):
        ranks[i] = r
    return ranks


def twin_sets(relations: Sequence[Relation], n: int) -> Tuple[List[int], List[int]]:
    """
    Group twin relations into sets.

    Returns (twinset, twinord). twinset[i] is -1 for non-twins, otherwise the smallest index
    of i's set. twinord[i] is the birth position within the set, id1 of a relation being born
    before id2. Chains such as triplets settle over len(members) - 1 passes.
    """
    twinset = [-1] * n
    twinord = [1] * n
    twinrel = [rel for rel in relations if rel.is_twin()]
    if not twinrel:
        return twinset, twinord

    members = []
    for rel in twinrel:
        for i in (rel.id1, rel.id2):
            if i not in members:
                members.append(i)
    for i in members:
        twinset[i] = i

    for _ in range(len(members) - 1):
        for rel in twinrel:
            newid = min(twinset[rel.id1], twinset[rel.id2])
            twinset[rel.id1] = newid
            twinset[rel.id2] = newid
            twinord[rel.id2] = max(twinord[rel.id2], twinord[rel.id1] + 1)
    return twinset, twinord


def cluster_twins(order: List[float], depth: Sequence[int], twinset: Sequence[int], twinord: Sequence[int]) -> List[float]:
    """
    Pull the members of every twin set next to each other, in birth order, around the mean
    of their current positions, then re-rank each generation to dense integers.
    Mutates and returns order.
    """
    sets = sorted({s for s in twinset if s >= 0})
    if not sets:
        return order

    for set_id in sets:
        who = [i for i, s in enumerate(twinset) if s == set_id]
        mean = sum(order[i] for i in who) / len(who)
        for i in who:
            order[i] = mean + twinord[i] / TWIN_ORDER_SCALE

    for d in sorted(set(depth)):
        who = [i for i, dd in enumerate(depth) if dd == d]
        for i, r in zip(who, rank([order[i] for i in who])):
            order[i] = r
    return order
