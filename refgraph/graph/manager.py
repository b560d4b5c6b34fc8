"""Reference graph container.

ReferenceGraph is the graph instance owned by one assembly pass. It keeps
the unique node set and the edge list on a networkx MultiDiGraph, where
parallel edges between the same ordered pair are keyed by classification.
Inbound and outbound counts are derived from the edge list on demand and
are never stored, so rebuilding the graph over the same documents always
yields the same counts.
"""

import logging
from collections import Counter
from typing import Any, Dict, Iterator, List, Optional

import networkx as nx

from refgraph.graph.identifiers import doc_type
from refgraph.graph.schema import Classification, Domain, EdgeSpec, NodeSpec

logger = logging.getLogger("refgraph.graph.manager")


class ReferenceGraph:
    """Directed reference graph between documents."""

    def __init__(self) -> None:
        self._graph = nx.MultiDiGraph()

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------
    def has_node(self, node_id: str) -> bool:
        return self._graph.has_node(node_id)

    def add_node(self, spec: NodeSpec) -> bool:
        """Add a node unless one with the same identifier exists.

        Returns:
            bool: True if the node was created.
        """
        if self._graph.has_node(spec.id):
            logger.debug("Node %s already exists, skipping", spec.id)
            return False
        self._graph.add_node(spec.id, **spec.to_backend_attrs())
        logger.debug("Added node: %s (source=%s)", spec.id, spec.source.value)
        return True

    def ensure_placeholder(self, node_id: str, domain: Domain) -> None:
        """Create a content-less node for a referenced document."""
        self.add_node(NodeSpec(id=node_id, source=domain))

    def get_node(self, node_id: str) -> Optional[NodeSpec]:
        if not self._graph.has_node(node_id):
            return None
        attrs = self._graph.nodes[node_id]
        return NodeSpec(
            id=node_id,
            source=Domain(attrs["source"]),
            path=attrs.get("path"),
            is_draft=attrs.get("is_draft", False),
        )

    def set_content(self, node_id: str, path: str, is_draft: bool) -> None:
        """Upgrade a node in place to carry acquired content."""
        attrs = self._graph.nodes[node_id]
        attrs["path"] = path
        attrs["is_draft"] = is_draft
        logger.debug("Node %s now backed by %s (draft=%s)", node_id, path, is_draft)

    def nodes(self) -> List[NodeSpec]:
        return [self.get_node(node_id) for node_id in self._graph.nodes]

    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------
    def has_edge(
        self, source_id: str, target_id: str, classification: Optional[Classification] = None
    ) -> bool:
        if classification is None:
            return self._graph.has_edge(source_id, target_id)
        return self._graph.has_edge(source_id, target_id, key=classification.value)

    def add_edge(self, spec: EdgeSpec) -> bool:
        """Add a reference edge, creating placeholder endpoints when absent.

        Self-loops and exact duplicates (same pair and classification) are
        ignored.

        Returns:
            bool: True if a new edge was added.
        """
        if spec.source_id == spec.target_id:
            logger.debug("Ignoring self-reference of %s", spec.source_id)
            return False
        if self._graph.has_edge(spec.source_id, spec.target_id, key=spec.key):
            return False

        if not self._graph.has_node(spec.source_id):
            self.ensure_placeholder(spec.source_id, spec.domain)
        if not self._graph.has_node(spec.target_id):
            self.ensure_placeholder(spec.target_id, spec.domain)

        self._graph.add_edge(
            spec.source_id,
            spec.target_id,
            key=spec.key,
            classification=spec.classification.value,
            domain=spec.domain.value,
        )
        logger.debug(
            "Added edge: %s -> %s (%s, %s)",
            spec.source_id,
            spec.target_id,
            spec.classification.value,
            spec.domain.value,
        )
        return True

    def edges(self) -> List[EdgeSpec]:
        return list(self.iter_edges())

    def iter_edges(self) -> Iterator[EdgeSpec]:
        for source_id, target_id, attrs in self._graph.edges(data=True):
            yield EdgeSpec(
                source_id=source_id,
                target_id=target_id,
                classification=Classification(attrs["classification"]),
                domain=Domain(attrs["domain"]),
            )

    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    # ------------------------------------------------------------------
    # Derived connectivity
    # ------------------------------------------------------------------
    def inbound_count(self, node_id: str) -> int:
        """Number of edges whose target is ``node_id``."""
        return self._graph.in_degree(node_id) if self._graph.has_node(node_id) else 0

    def outbound_count(self, node_id: str) -> int:
        """Number of edges whose source is ``node_id``."""
        return self._graph.out_degree(node_id) if self._graph.has_node(node_id) else 0

    def missing(self, domain: Domain) -> List[str]:
        """Identifiers of ``domain`` that have no acquired content."""
        return [
            node_id
            for node_id, attrs in self._graph.nodes(data=True)
            if attrs["source"] == domain.value and attrs.get("path") is None
        ]

    def most_referenced(self, limit: int = 15) -> List[NodeSpec]:
        """Nodes with at least one inbound reference, most cited first."""
        ranked = sorted(
            (node_id for node_id in self._graph.nodes if self.inbound_count(node_id) > 0),
            key=lambda node_id: (-self.inbound_count(node_id), node_id),
        )
        return [self.get_node(node_id) for node_id in ranked[:limit]]

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------
    def statistics(self) -> Dict[str, Any]:
        """Aggregate counts by classification and by domain."""
        by_classification = Counter()
        by_source = Counter({domain.value: 0 for domain in Domain})
        for _, _, attrs in self._graph.edges(data=True):
            by_classification[attrs["classification"]] += 1
            by_source[attrs["domain"]] += 1

        nodes_by_source = Counter({domain.value: 0 for domain in Domain})
        drafts = 0
        for _, attrs in self._graph.nodes(data=True):
            nodes_by_source[attrs["source"]] += 1
            drafts += 1 if attrs.get("is_draft") else 0

        return {
            "totalDocuments": self.node_count(),
            "totalReferences": self.edge_count(),
            "normativeRefs": by_classification[Classification.NORMATIVE.value],
            "informativeRefs": by_classification[Classification.INFORMATIVE.value],
            "bySource": dict(by_source),
            "nodesBySource": dict(nodes_by_source),
            "draftDocuments": drafts,
        }

    def node_record(self, node_id: str) -> Dict[str, Any]:
        attrs = self._graph.nodes[node_id]
        return {
            "id": node_id,
            "type": doc_type(node_id),
            "source": attrs["source"],
            "path": attrs.get("path"),
            "isDraft": bool(attrs.get("is_draft", False)),
            "referencesCount": self.outbound_count(node_id),
            "referencedByCount": self.inbound_count(node_id),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Graph record consumed by rendering collaborators."""
        return {
            "nodes": [self.node_record(node_id) for node_id in self._graph.nodes],
            "edges": [edge.to_record() for edge in self.iter_edges()],
            "statistics": self.statistics(),
        }
