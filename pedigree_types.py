"""
Pedigree data model.
Index-based arrays over a fixed arena of individuals, plus the hint and layout shapes
exchanged with the layout routine.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

MALE = "male"
FEMALE = "female"
UNKNOWN = "unknown"

MZ_TWIN = 1
DZ_TWIN = 2
UNKNOWN_TWIN = 3
PARTNER = 4

NO_PARENT = -1


class PedigreeError(Exception):
    pass


class CycleError(PedigreeError, ValueError):
    """Someone in the pedigree is their own ancestor."""


class LayoutInvariantError(PedigreeError, RuntimeError):
    """The layout lacks a spouse or sibling block the hints expect."""


class UnclassifiedAnchorCombination(LayoutInvariantError):
    def __init__(self, key):
        super().__init__(f"no marriage hint for anchor combination {key!r}")
        self.key = key


@dataclass(frozen=True)
class Relation:
    id1: int
    id2: int
    code: int

    def is_twin(self) -> bool:
        return self.code < PARTNER


@dataclass(frozen=True)
class SpouseHint:
    left_index: int
    right_index: int
    anchor: int = 0


@dataclass
class Hints:
    order: List[float]
    spouse: Optional[List[SpouseHint]] = None

    def copy(self):
        return Hints(list(self.order), list(self.spouse) if self.spouse is not None else None)


@dataclass(frozen=True)
class Pedigree:
    id: Tuple[str, ...]
    sex: Tuple[str, ...]
    mother_index: Tuple[int, ...]
    father_index: Tuple[int, ...]
    relation: Optional[Tuple[Relation, ...]] = None
    hints: Optional[Hints] = None

    def __post_init__(self):
        object.__setattr__(self, "id", tuple(self.id))
        object.__setattr__(self, "sex", tuple(self.sex))
        object.__setattr__(self, "mother_index", tuple(self.mother_index))
        object.__setattr__(self, "father_index", tuple(self.father_index))
        if self.relation is not None:
            object.__setattr__(self, "relation", tuple(self.relation))

        n = len(self.id)
        for name in ("sex", "mother_index", "father_index"):
            if len(getattr(self, name)) != n:
                raise ValueError(f"pedigree field {name} has {len(getattr(self, name))} entries, expected {n}")
        for rel in self.relation or ():
            if not (0 <= rel.id1 < n and 0 <= rel.id2 < n):
                raise ValueError(f"relation {rel} refers outside the pedigree")

    def __len__(self):
        return len(self.id)

    def twin_relations(self) -> List[Relation]:
        return [rel for rel in self.relation or () if rel.is_twin()]


@dataclass
class PedigreeLayout:
    """
    Per-level slot arrays returned by the layout routine.

    nid[lev][j] is the individual in slot j (an individual may fill several slots),
    fam[lev][j] the parent family the slot hangs from (0 = none) and spouse[lev][j] > 0
    links slot j to slot j + 1 as partners.
    """
    n: List[int]
    nid: List[List[int]]
    fam: List[List[int]]
    spouse: List[List[int]]
    pos: Optional[List[List[float]]] = field(default=None)

    def levels(self) -> int:
        return len(self.nid)


def check_hints(hints: Hints, n: int) -> Hints:
    """
    Validate caller supplied hints against a pedigree of n individuals.
    Returns a copy that is safe to mutate.
    """
    if len(hints.order) != n:
        raise ValueError(f"hints.order has {len(hints.order)} entries, expected {n}")
    for value in hints.order:
        if value < 0:
            raise ValueError(f"hints.order contains negative rank {value}")
    for sp in hints.spouse or ():
        if not (0 <= sp.left_index < n and 0 <= sp.right_index < n):
            raise ValueError(f"spouse hint {sp} refers outside the pedigree")
        if sp.left_index == sp.right_index:
            raise ValueError(f"spouse hint {sp} pairs an individual with itself")
        if sp.anchor not in (0, 1, 2):
            raise ValueError(f"spouse hint {sp} has invalid anchor")
    return hints.copy()


def partner_pairs(mother_index: Sequence[int], father_index: Sequence[int]) -> List[Tuple[int, int]]:
    """Unique (father, mother) pairs of every child that has both parents."""
    seen = set()
    pairs = []
    for dad, mom in zip(father_index, mother_index):
        if dad == NO_PARENT or mom == NO_PARENT:
            continue
        if (dad, mom) in seen:
            continue
        seen.add((dad, mom))
        pairs.append((dad, mom))
    return pairs
