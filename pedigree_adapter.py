"""
Builds Pedigree arrays from family-tree records and maps a finished layout back to
per-person coordinates.
"""

import json
import logging
from typing import Dict, List, Optional, Tuple

from pedigree_types import (
    FEMALE,
    MALE,
    NO_PARENT,
    PARTNER,
    UNKNOWN,
    Pedigree,
    PedigreeLayout,
    Relation,
)

logger = logging.getLogger(__name__)

PARENT_EDGE = "parent"
PARTNER_EDGES = ("partner", "ex-partner")


def _map_sex(gender):
    gender = (gender or "").lower()
    if gender in ("male", "m"):
        return MALE
    if gender in ("female", "f"):
        return FEMALE
    return UNKNOWN


def _clear_single_parents(ids, mother_index, father_index):
    # Everyone needs 0 or 2 parents.
    for i in range(len(ids)):
        if (mother_index[i] == NO_PARENT) != (father_index[i] == NO_PARENT):
            logger.warning(f"Individual {ids[i]!r} has only one parent - treating as founder")
            mother_index[i] = NO_PARENT
            father_index[i] = NO_PARENT


def pedigree_from_records(people: List[dict], marriages: List[dict], twins: Optional[List[dict]] = None) -> Tuple[Pedigree, Dict]:
    """
    Build a Pedigree from family-tree records.

    people: [{"ID", "FirstName", "Gender"}], marriages: [{"Person1", "Person2", "Children",
    "Status"?}], twins: [{"Person1", "Person2", "Code"}] with Person1 the first born.
    Returns the pedigree and a map from record ID to arena index.
    """
    index_of = {}
    ids = []
    sex = []
    for person in people:
        if person["ID"] in index_of:
            raise ValueError(f"duplicate person ID {person['ID']!r}")
        index_of[person["ID"]] = len(ids)
        ids.append(str(person.get("FirstName", person["ID"])))
        sex.append(_map_sex(person.get("Gender")))

    n = len(ids)
    mother_index = [NO_PARENT] * n
    father_index = [NO_PARENT] * n
    relations = []
    for marriage in marriages:
        p1 = index_of[marriage["Person1"]]
        p2 = index_of[marriage["Person2"]]
        relations.append(Relation(p1, p2, PARTNER))
        dad, mom = (p1, p2) if sex[p1] == MALE or sex[p2] == FEMALE else (p2, p1)
        for c in marriage.get("Children", []):
            child = index_of[c]
            father_index[child] = dad
            mother_index[child] = mom

    for twin in twins or []:
        relations.append(Relation(index_of[twin["Person1"]], index_of[twin["Person2"]], int(twin["Code"])))

    _clear_single_parents(ids, mother_index, father_index)
    pedigree = Pedigree(ids, sex, mother_index, father_index, relation=relations or None)
    return pedigree, index_of


def load_pedigree(people_file, marriages_file) -> Tuple[Pedigree, Dict]:
    with open(people_file, "r") as file:
        people = json.load(file)
    with open(marriages_file, "r") as file:
        obj = json.load(file)
    return pedigree_from_records(people["People"], obj["Marriages"], obj.get("Twins"))


def pedigree_from_edges(nodes: Dict[str, dict], edges: List[dict]) -> Tuple[Pedigree, List[str]]:
    """
    Build a Pedigree from a node map ({node_id: {"sex": ...}}) and edges with
    "source", "target" and a "relationship" of parent, partner or ex-partner.
    Edges naming unknown nodes are skipped. Returns the pedigree and index -> node id.
    """
    index_to_id = list(nodes.keys())
    id_to_index = {node_id: i for i, node_id in enumerate(index_to_id)}
    n = len(index_to_id)
    sex = [_map_sex(nodes[node_id].get("sex")) for node_id in index_to_id]
    mother_index = [NO_PARENT] * n
    father_index = [NO_PARENT] * n
    relations = []

    for edge in edges:
        source = id_to_index.get(edge["source"])
        target = id_to_index.get(edge["target"])
        if source is None or target is None:
            continue
        if edge["relationship"] == PARENT_EDGE:
            if sex[source] == MALE:
                father_index[target] = source
            else:
                mother_index[target] = source
        elif edge["relationship"] in PARTNER_EDGES:
            relations.append(Relation(source, target, PARTNER))

    _clear_single_parents(index_to_id, mother_index, father_index)
    pedigree = Pedigree(index_to_id, sex, mother_index, father_index, relation=relations or None)
    return pedigree, index_to_id


def layout_to_positions(layout: PedigreeLayout, index_to_id, x_spacing=180, y_spacing=140) -> Dict[str, Tuple[float, float]]:
    """
    Map each person to the (x, y) of their first slot, shifted so the smallest x and y are 0.
    """
    if layout.pos is None:
        raise ValueError("layout has no slot positions")

    positions = {}
    for gen in range(layout.levels()):
        for col in range(layout.n[gen]):
            person = layout.nid[gen][col]
            if person < 0 or person >= len(index_to_id):
                continue
            node_id = index_to_id[person]
            # only the first appearance of a duplicated person
            if node_id in positions:
                continue
            positions[node_id] = (layout.pos[gen][col] * x_spacing, gen * y_spacing)

    if positions:
        min_x = min(x for x, _ in positions.values())
        min_y = min(y for _, y in positions.values())
        for node_id, (x, y) in list(positions.items()):
            positions[node_id] = (x - min_x, y - min_y)
    return positions
