"""Builders and a recording layout stand-in for the hint tests."""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from pedigree_types import FEMALE, MALE, NO_PARENT, Pedigree, PedigreeLayout, Relation

SEX = {"M": MALE, "F": FEMALE}


def make_pedigree(
    sexes: str,
    parents: Optional[Dict[int, Tuple[int, int]]] = None,
    relations: Sequence[Relation] = (),
    hints=None,
) -> Pedigree:
    """sexes is one letter per individual; parents maps child -> (father, mother)."""
    n = len(sexes)
    father = [NO_PARENT] * n
    mother = [NO_PARENT] * n
    for child, (dad, mom) in (parents or {}).items():
        father[child] = dad
        mother[child] = mom
    return Pedigree(
        id=[f"p{i}" for i in range(n)],
        sex=[SEX[s] for s in sexes],
        mother_index=mother,
        father_index=father,
        relation=list(relations) or None,
        hints=hints,
    )


def make_layout(rows: Sequence[Tuple[List[int], List[int], List[int]]]) -> PedigreeLayout:
    """rows: (nid, fam, spouse) per level."""
    return PedigreeLayout(
        n=[len(nid) for nid, _, _ in rows],
        nid=[list(nid) for nid, _, _ in rows],
        fam=[list(fam) for _, fam, _ in rows],
        spouse=[list(spouse) for _, _, spouse in rows],
    )


class RecordingLayout:
    """Returns the same layout on every call and keeps the hints it was given."""

    def __init__(self, layout: PedigreeLayout):
        self.layout = layout
        self.calls = []

    def __call__(self, pedigree, packed=True, align=False, hints=None):
        self.calls.append({"packed": packed, "align": align, "hints": hints})
        return self.layout


def refuse_layout(pedigree, **options):
    raise AssertionError("layout should not be called")


def remarried_pedigree() -> Pedigree:
    """
    Two families at depth 1; at depth 2 a marry-in man (10) has a wife from each family.

    0+1 -> 2 (M), 3 (F); 2+4 -> 6 (F), 7 (M); 5+3 -> 8 (F), 9 (M);
    10+6 -> 11; 10+8 -> 12.
    """
    return make_pedigree(
        "MFMFFMFMFMMMF",
        parents={
            2: (0, 1),
            3: (0, 1),
            6: (2, 4),
            7: (2, 4),
            8: (5, 3),
            9: (5, 3),
            11: (10, 6),
            12: (10, 8),
        },
    )


def remarried_layout() -> PedigreeLayout:
    """Man 10 is drawn twice at level 2, once beside each wife."""
    return make_layout([
        ([0, 1], [0, 0], [1, 0]),
        ([2, 4, 3, 5], [1, 0, 1, 0], [1, 0, 1, 0]),
        ([7, 6, 10, 10, 8, 9], [1, 1, 0, 0, 3, 3], [0, 1, 0, 1, 0, 0]),
        ([11, 12], [2, 4], [0, 0]),
    ])
