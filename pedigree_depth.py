"""
Generation depth for every individual in a pedigree.
Depth 0 is a founder; a child sits one generation below its deepest parent.
"""

import logging
from collections import deque
from typing import Iterable, List, Sequence, Set

from pedigree_types import NO_PARENT, CycleError, partner_pairs

logger = logging.getLogger(__name__)


def chaseup(ids: Iterable[int], mother_index: Sequence[int], father_index: Sequence[int]) -> Set[int]:
    """Return the given individuals together with all of their ancestors."""
    found = set(ids)
    q = deque(found)
    while q:
        person = q.popleft()
        for parent in (mother_index[person], father_index[person]):
            if parent != NO_PARENT and parent not in found:
                found.add(parent)
                q.append(parent)
    return found


def _topological_order(mother_index, father_index):
    n = len(mother_index)
    children = [[] for _ in range(n)]
    pending = [0] * n
    for child in range(n):
        for parent in {mother_index[child], father_index[child]}:
            if parent == NO_PARENT:
                continue
            if not 0 <= parent < n:
                raise ValueError(f"individual {child} has parent index {parent} outside the pedigree")
            children[parent].append(child)
            pending[child] += 1

    visit = []
    q = deque(i for i in range(n) if pending[i] == 0)
    while q:
        person = q.popleft()
        visit.append(person)
        for child in children[person]:
            pending[child] -= 1
            if pending[child] == 0:
                q.append(child)

    if len(visit) < n:
        stuck = [i for i in range(n) if pending[i] > 0]
        raise CycleError(f"impossible pedigree: individuals {stuck} are their own ancestors")
    return visit


def _push_below_parents(depth, visit, mother_index, father_index):
    for child in visit:
        parents = [p for p in (mother_index[child], father_index[child]) if p != NO_PARENT]
        if parents:
            depth[child] = max(depth[child], max(depth[p] for p in parents) + 1)


def kindepth(mother_index: Sequence[int], father_index: Sequence[int], align: bool = False) -> List[int]:
    """
    Compute the generation depth of each individual.

    mother_index/father_index hold the parent's arena index or -1. With align=True the two
    parents of every child are moved onto the same generation, the shallower partner (and,
    when unrelated to the other side, its ancestors) being pushed down to the deeper one.
    Raises CycleError if someone is their own ancestor.
    """
    if len(mother_index) != len(father_index):
        raise ValueError("mother_index and father_index must have the same length")
    n = len(mother_index)
    if n == 0:
        return []

    visit = _topological_order(mother_index, father_index)
    depth = [0] * n
    _push_below_parents(depth, visit, mother_index, father_index)

    if not align:
        return depth

    pairs = partner_pairs(mother_index, father_index)
    done = [False] * len(pairs)
    while True:
        todo = [i for i, (dad, mom) in enumerate(pairs) if not done[i] and depth[dad] != depth[mom]]
        if not todo:
            break

        # Fix the shallowest mismatched couple first.
        who = min(todo, key=lambda i: max(depth[pairs[i][0]], depth[pairs[i][1]]))
        dad, mom = pairs[who]
        good, bad = (dad, mom) if depth[dad] > depth[mom] else (mom, dad)
        diff = depth[good] - depth[bad]

        abad = chaseup([bad], mother_index, father_index)
        agood = chaseup([good], mother_index, father_index)
        if abad.isdisjoint(agood):
            moved = abad
        else:
            moved = {bad}
        for person in moved:
            depth[person] += diff
        logger.debug(f"Aligned partners {good} and {bad}: moved {sorted(moved)} down {diff} generation(s)")

        _push_below_parents(depth, visit, mother_index, father_index)

        for i, (d, m) in enumerate(pairs):
            if bad in (d, m):
                done[i] = True

    low = min(depth)
    if low > 0:
        depth = [d - low for d in depth]
    return depth
