"""
GraphViz export for pedigrees.
Generates a DOT digraph with one rank per generation, ordered by layout hints.
"""

import sys

from graphviz import Digraph

from pedigree_depth import kindepth
from pedigree_types import FEMALE, MALE, NO_PARENT, PARTNER, partner_pairs


class DotConfig:
    male_shape: str = "square"
    female_shape: str = "ellipse"
    unknown_shape: str = "diamond"

    male_fill: str = "cornflowerblue"
    female_fill: str = "lightcoral"
    unknown_fill: str = "lightgray"

    # Formatting for invisible marriage nodes
    invisible: dict = {"shape": "circle", "label": "", "height": "0.01", "width": "0.01"}


def _node_style(sex, config):
    if sex == MALE:
        return config.male_shape, config.male_fill
    if sex == FEMALE:
        return config.female_shape, config.female_fill
    return config.unknown_shape, config.unknown_fill


def _marriages(pedigree):
    # (marriage node id, left partner, right partner, children)
    couples = []
    seen = {}
    for dad, mom in partner_pairs(pedigree.mother_index, pedigree.father_index):
        seen[frozenset((dad, mom))] = len(couples)
        couples.append([dad, mom, []])
    for rel in pedigree.relation or ():
        if rel.code != PARTNER or frozenset((rel.id1, rel.id2)) in seen:
            continue
        seen[frozenset((rel.id1, rel.id2))] = len(couples)
        couples.append([rel.id1, rel.id2, []])
    for child in range(len(pedigree)):
        dad, mom = pedigree.father_index[child], pedigree.mother_index[child]
        if dad != NO_PARENT and mom != NO_PARENT:
            couples[seen[frozenset((dad, mom))]][2].append(child)
    return [(f"m{i}", p1, p2, children) for i, (p1, p2, children) in enumerate(couples)]


def to_graphviz(pedigree, hints=None, config=None) -> Digraph:
    """
    Returns a Digraph of the pedigree. Each generation is a rank=same subgraph whose
    people appear in hints.order (index order without hints); partners are joined
    through an invisible marriage node that the children hang from.
    """
    config = config or DotConfig()
    depth = kindepth(pedigree.mother_index, pedigree.father_index, align=True)
    order = hints.order if hints is not None else list(range(len(pedigree)))

    tree = Digraph(comment="Pedigree", graph_attr={"splines": "ortho"}, engine="dot")
    tree.attr("node", shape="box")
    tree.attr("edge", dir="none")

    marriages = _marriages(pedigree)
    for gen in sorted(set(depth)):
        people = sorted((i for i in range(len(pedigree)) if depth[i] == gen), key=lambda i: (order[i], i))
        with tree.subgraph() as s:
            s.attr(rank="same")
            for i in people:
                shape, color = _node_style(pedigree.sex[i], config)
                s.node(str(i), pedigree.id[i], shape=shape, fillcolor=color, color=color, style="filled")
            for name, p1, p2, _ in marriages:
                if depth[p1] == gen:
                    s.node(name, **config.invisible)
                    s.edge(str(p1), name)
                    s.edge(name, str(p2))

    for name, _, _, children in marriages:
        for child in children:
            tree.edge(name, str(child))
    return tree


if __name__ == "__main__":
    from pedigree_adapter import load_pedigree

    people_file = sys.argv[1] if len(sys.argv) > 1 else "people.json"
    marriages_file = sys.argv[2] if len(sys.argv) > 2 else "marriages.json"
    pedigree, _ = load_pedigree(people_file, marriages_file)
    print(to_graphviz(pedigree).source)
