"""Tests for the ReferenceGraph container."""

import pytest
from pydantic import ValidationError

from refgraph.graph.manager import ReferenceGraph
from refgraph.graph.schema import Classification, Domain, EdgeSpec, NodeSpec


def _edge(src: str, dst: str, kind: Classification = Classification.NORMATIVE, domain: Domain = Domain.ETSI) -> EdgeSpec:
    return EdgeSpec(source_id=src, target_id=dst, classification=kind, domain=domain)


def test_add_node_is_unique() -> None:
    """A second node with the same identifier is ignored."""
    graph = ReferenceGraph()
    assert graph.add_node(NodeSpec(id="EN 319 401", source=Domain.ETSI, path="/a.pdf"))
    assert not graph.add_node(NodeSpec(id="EN 319 401", source=Domain.ETSI))
    assert graph.node_count() == 1
    assert graph.get_node("EN 319 401").path == "/a.pdf"


def test_node_spec_rejects_blank_id() -> None:
    """Blank identifiers never reach the graph."""
    with pytest.raises(ValidationError):
        NodeSpec(id="   ", source=Domain.ETSI)


def test_add_edge_creates_placeholders_and_skips_duplicates() -> None:
    """Edge endpoints exist as nodes and the same edge is only stored once."""
    graph = ReferenceGraph()
    assert graph.add_edge(_edge("EN 319 401", "RFC 5280", domain=Domain.IETF))
    assert not graph.add_edge(_edge("EN 319 401", "RFC 5280", domain=Domain.IETF))

    assert graph.edge_count() == 1
    target = graph.get_node("RFC 5280")
    assert target.source is Domain.IETF
    assert not target.is_present


def test_parallel_edges_are_keyed_by_classification() -> None:
    """A normative and an informative edge between one pair may coexist."""
    graph = ReferenceGraph()
    graph.add_edge(_edge("TS 119 312", "EN 319 401"))
    graph.add_edge(_edge("TS 119 312", "EN 319 401", Classification.INFORMATIVE))

    assert graph.edge_count() == 2
    assert graph.has_edge("TS 119 312", "EN 319 401", Classification.INFORMATIVE)


def test_self_loop_is_ignored() -> None:
    """A document never references itself."""
    graph = ReferenceGraph()
    assert not graph.add_edge(_edge("EN 319 401", "EN 319 401"))
    assert graph.edge_count() == 0


def test_counts_are_derived_from_edges() -> None:
    """Inbound and outbound counts follow the edge list."""
    graph = ReferenceGraph()
    graph.add_edge(_edge("A 100 100", "C 300 300"))
    graph.add_edge(_edge("B 200 200", "C 300 300"))
    graph.add_edge(_edge("C 300 300", "A 100 100", Classification.INFORMATIVE))

    assert graph.inbound_count("C 300 300") == 2
    assert graph.outbound_count("C 300 300") == 1
    assert graph.inbound_count("unknown") == 0
    assert [node.id for node in graph.most_referenced()] == ["C 300 300", "A 100 100"]


def test_statistics_and_records() -> None:
    """Snapshot records use the published field names."""
    graph = ReferenceGraph()
    graph.add_node(NodeSpec(id="EN 319 401", source=Domain.ETSI, path="/a.pdf", is_draft=True))
    graph.add_edge(_edge("EN 319 401", "TS 119 312"))
    graph.add_edge(_edge("EN 319 401", "RFC 5280", Classification.INFORMATIVE, Domain.IETF))

    stats = graph.statistics()
    assert stats["totalDocuments"] == 3
    assert stats["totalReferences"] == 2
    assert stats["normativeRefs"] == 1
    assert stats["informativeRefs"] == 1
    assert stats["bySource"]["etsi"] == 1
    assert stats["bySource"]["ietf"] == 1
    assert stats["bySource"]["w3c"] == 0
    assert stats["nodesBySource"]["etsi"] == 2
    assert stats["draftDocuments"] == 1

    record = graph.to_dict()
    node = next(item for item in record["nodes"] if item["id"] == "EN 319 401")
    assert node == {
        "id": "EN 319 401",
        "type": "EN",
        "source": "etsi",
        "path": "/a.pdf",
        "isDraft": True,
        "referencesCount": 2,
        "referencedByCount": 0,
    }
    assert {"from": "EN 319 401", "to": "RFC 5280", "type": "informative", "source": "ietf"} in record["edges"]


def test_missing_lists_placeholders_of_a_domain() -> None:
    """Only content-less nodes of the requested domain are missing."""
    graph = ReferenceGraph()
    graph.add_node(NodeSpec(id="RFC 7519", source=Domain.IETF, path="/IETF/rfc7519.txt"))
    graph.ensure_placeholder("RFC 5280", Domain.IETF)
    graph.ensure_placeholder("ISO 18013-5", Domain.ISO)

    assert graph.missing(Domain.IETF) == ["RFC 5280"]
    assert graph.missing(Domain.OIDF) == []
