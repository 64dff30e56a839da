from graphviz import Digraph

from pedigree_graphviz import DotConfig, to_graphviz
from pedigree_types import Hints, PARTNER, Relation

from tests.utils import make_pedigree, remarried_pedigree


def _ranks(source):
    return [block for block in source.split("{")[1:] if "rank=same" in block]


def test_one_rank_per_generation():
    dot = to_graphviz(remarried_pedigree())
    assert isinstance(dot, Digraph)
    assert len(_ranks(dot.source)) == 4


def test_people_follow_hint_order():
    ped = make_pedigree("MFMF", parents={2: (0, 1), 3: (0, 1)})
    dot = to_graphviz(ped, Hints([1, 2, 2, 1])).source
    children = _ranks(dot)[1]
    assert children.index("label=p3") < children.index("label=p2")


def test_marriage_nodes_link_partners_and_children():
    ped = make_pedigree("MFM", parents={2: (0, 1)})
    dot = to_graphviz(ped).source
    assert "0 -> m0" in dot
    assert "m0 -> 1" in dot
    assert "m0 -> 2" in dot


def test_childless_partners_get_a_marriage_node():
    ped = make_pedigree("MF", relations=[Relation(0, 1, PARTNER)])
    dot = to_graphviz(ped).source
    assert "0 -> m0" in dot
    assert "m0 -> 1" in dot


def test_config_colours():
    class Muted(DotConfig):
        male_fill = "gray"

    dot = to_graphviz(make_pedigree("MF"), config=Muted()).source
    assert "fillcolor=gray" in dot
    assert "fillcolor=lightcoral" in dot
