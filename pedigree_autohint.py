"""
Automatic layout hints for a pedigree.

Computes a per-generation horizontal order and spouse pairing hints for a layout routine.
The layout routine is passed in by the caller; after every generation where an individual
shows up in more than one slot, sibling groups are shifted, marriage hints are added and
the layout is recomputed.
"""

import logging
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

from pedigree_depth import kindepth
from pedigree_twins import cluster_twins, rank, twin_sets
from pedigree_types import (
    MZ_TWIN,
    Hints,
    LayoutInvariantError,
    Pedigree,
    PedigreeLayout,
    Relation,
    SpouseHint,
    UnclassifiedAnchorCombination,
    check_hints,
)

logger = logging.getLogger(__name__)

# layout_fn(pedigree, packed=..., align=..., hints=...) -> PedigreeLayout
LayoutFn = Callable[..., PedigreeLayout]


class DuplicatePair(NamedTuple):
    left: int
    right: int
    priority: int


def seed_order(order: List[float], depth: Sequence[int]) -> List[float]:
    """Give every unset (0) entry a rank 1..m within its generation, in index order."""
    for d in sorted(set(depth)):
        unset = [i for i, dd in enumerate(depth) if dd == d and order[i] == 0]
        for k, i in enumerate(unset, start=1):
            order[i] = k
    return order


def find_spouse(pos: int, layout: PedigreeLayout, lev: int, sex: Sequence[str]) -> int:
    """
    Return the slot of the first partner of opposite sex in the spouse block around pos.
    """
    links = layout.spouse[lev]
    last = layout.n[lev] - 1
    lpos = pos
    while lpos > 0 and links[lpos - 1] > 0:
        lpos -= 1
    rpos = pos
    while rpos < last and links[rpos] > 0:
        rpos += 1
    if lpos == rpos:
        raise LayoutInvariantError(f"slot {pos} at level {lev} is not part of a spouse block")

    my_sex = sex[layout.nid[lev][pos]]
    for p in range(lpos, rpos + 1):
        if sex[layout.nid[lev][p]] != my_sex:
            return p
    raise LayoutInvariantError(f"spouse block {lpos}..{rpos} at level {lev} has no partner for slot {pos}")


def find_sibs(pos: int, layout: PedigreeLayout, lev: int) -> List[int]:
    """Return every slot at this level hanging from the same parent family as pos."""
    family = layout.fam[lev][pos]
    if family == 0:
        raise LayoutInvariantError(f"slot {pos} at level {lev} is not connected to a parent family")
    return [j for j in range(layout.n[lev]) if layout.fam[lev][j] == family]


def _monozygotic_set(person, twinrel):
    mono = [rel for rel in twinrel if rel.code == MZ_TWIN]
    found = [person]
    grew = True
    while grew:
        grew = False
        for rel in mono:
            if rel.id1 in found and rel.id2 not in found:
                found.append(rel.id2)
                grew = True
            elif rel.id2 in found and rel.id1 not in found:
                found.append(rel.id1)
                grew = True
    return found


def shift(person: int, sibs: Sequence[int], goleft: bool, order: List[float],
          twinrel: Sequence[Relation], twinset: Sequence[int]) -> List[float]:
    """
    Move person to the left or right end of its sibship and re-rank the sibship.

    A twin first takes its whole twin cohort (and anyone tied to it by monozygotic
    relations) along, so twins stay together. Mutates and returns order.
    """
    step = -1 if goleft else 1
    if twinset[person] >= 0:
        values = [order[s] for s in sibs]
        amount = 1 + max(values) - min(values)
        cohort = [s for s in sibs if twinset[s] == twinset[person]]
        cohort += [m for m in _monozygotic_set(person, twinrel) if m not in cohort]
        for t in cohort:
            order[t] += step * amount

    values = [order[s] for s in sibs]
    order[person] = min(values) - 1 if goleft else max(values) + 1

    # no negative or fractional ranks
    for s, r in zip(sibs, rank([order[s] for s in sibs])):
        order[s] = r
    return order


def _family_slots(pos, layout, lev, sex):
    if layout.fam[lev][pos] > 0:
        return find_sibs(pos, layout, lev)
    partner = find_spouse(pos, layout, lev, sex)
    if layout.fam[lev][partner] > 0:
        return find_sibs(partner, layout, lev)
    return None


def _families_touch(pair, layout, lev, sex):
    left = _family_slots(pair.left, layout, lev, sex)
    right = _family_slots(pair.right, layout, lev, sex)
    if left is None or right is None:
        return False
    return min(right) - max(left) == 1


def dup_order(idlist: Sequence[int], layout: PedigreeLayout, lev: int, sex: Sequence[str]) -> List[DuplicatePair]:
    """
    Find the individuals that fill more than one slot of a level.

    Consecutive occurrences of one individual form a pair; the first half of an
    individual's pairs get priority 1, the rest priority 2. Pairs whose families sit
    side by side are handled first, then the closest pairs.
    """
    slots = {}
    for j, person in enumerate(idlist):
        slots.setdefault(person, []).append(j)

    pairs = []
    for where in slots.values():
        for k in range(1, len(where)):
            pairs.append(DuplicatePair(where[k - 1], where[k], 1 if k <= len(where) / 2 else 2))
    if len(pairs) <= 1:
        return pairs

    touching = [_families_touch(pair, layout, lev, sex) for pair in pairs]
    keyed = sorted(range(len(pairs)), key=lambda i: (not touching[i], pairs[i].right - pairs[i].left))
    return [pairs[i] for i in keyed]


def marriage_hints(anchor: Tuple[int, int], priority: int, id1: int,
                   id2: Optional[int], id3: Optional[int]) -> List[SpouseHint]:
    """
    Spouse hints for a resolved duplicate.

    anchor holds the class of each occurrence: 1 when it hangs from its own parents,
    2 when its partner does, 0 when neither. id1 is the duplicated individual, id2 and id3
    the partners found next to the first and second occurrence.
    """
    key = f"{anchor[0]}{anchor[1]}"
    if key == "21":
        return [SpouseHint(id2, id1, priority)]
    elif key == "22":
        return [SpouseHint(id2, id1, 1), SpouseHint(id1, id3, 2)]
    elif key == "02":
        return [SpouseHint(id2, id1, 0)]
    elif key == "20":
        return [SpouseHint(id2, id1, 0)]
    elif key == "00":
        return [SpouseHint(id1, id3, 0), SpouseHint(id2, id1, 0)]
    elif key == "01":
        return [SpouseHint(id2, id1, 2)]
    elif key == "10":
        return [SpouseHint(id1, id3, 1)]
    elif key in ("11", "12"):
        raise UnclassifiedAnchorCombination(key)
    else:
        raise ValueError(f"anchor classes must be 0, 1 or 2, got {anchor}")


def _resolve_pair(pair, idlist, layout, lev, sex, order, twinrel, twinset):
    anchor = [0, 0]
    partner = [None, None]
    for j, pos in enumerate((pair.left, pair.right)):
        if layout.fam[lev][pos] > 0:
            anchor[j] = 1
            mover = pos
        else:
            partner[j] = find_spouse(pos, layout, lev, sex)
            if layout.fam[lev][partner[j]] == 0:
                continue
            anchor[j] = 2
            mover = partner[j]
        sibs = [idlist[s] for s in find_sibs(mover, layout, lev)]
        if len(sibs) > 1:
            shift(idlist[mover], sibs, j == 1, order, twinrel, twinset)
    return anchor, partner


def _snapshot(order, spouse):
    return Hints(list(order), list(spouse) if spouse is not None else None)


def autohint(pedigree: Pedigree, layout_fn: LayoutFn, hints: Optional[Hints] = None,
             packed: bool = True, align=False) -> Hints:
    """
    Compute layout hints for a pedigree.

    If the pedigree already carries hints they are returned untouched. hints may seed the
    order and spouse list; zero entries in hints.order are filled in. CycleError and
    LayoutInvariantError propagate. An anchor combination with no marriage rule gives
    up on refinement and returns the plain order 1..n.
    """
    if pedigree.hints is not None:
        return pedigree.hints

    n = len(pedigree)
    depth = kindepth(pedigree.mother_index, pedigree.father_index, align=True)
    twinrel = pedigree.twin_relations()
    twinset, twinord = twin_sets(twinrel, n)

    if hints is not None:
        hints = check_hints(hints, n)
        order, spouse = hints.order, hints.spouse
    else:
        order, spouse = [0] * n, None
    seed_order(order, depth)
    cluster_twins(order, depth, twinset, twinord)

    layout = layout_fn(pedigree, packed=packed, align=align, hints=_snapshot(order, spouse))

    for lev in range(layout.levels()):
        idlist = layout.nid[lev][:layout.n[lev]]
        pairs = dup_order(idlist, layout, lev, pedigree.sex)
        if not pairs:
            continue
        logger.debug(f"Level {lev}: resolving {len(pairs)} duplicate pair(s)")

        for pair in pairs:
            anchor, partner = _resolve_pair(pair, idlist, layout, lev, pedigree.sex, order, twinrel, twinset)
            id1 = idlist[pair.left]
            id2 = idlist[partner[0]] if partner[0] is not None else None
            id3 = idlist[partner[1]] if partner[1] is not None else None
            try:
                found = marriage_hints(anchor, pair.priority, id1, id2, id3)
            except UnclassifiedAnchorCombination as e:
                logger.warning(f"Level {lev}: {e}; falling back to the plain order")
                return Hints(order=list(range(1, n + 1)))
            spouse = (spouse or []) + found

        layout = layout_fn(pedigree, packed=packed, align=align, hints=_snapshot(order, spouse))

    logger.info(f"Generated hints for {n} individuals with {len(spouse or [])} spouse hint(s)")
    return Hints(order=order, spouse=spouse)
