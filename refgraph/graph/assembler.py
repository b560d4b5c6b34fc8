"""Graph assembly from per-document extraction results.

Each call to GraphAssembler.assemble builds a fresh ReferenceGraph. The
graph is therefore a pure function of the batch it was built from:
running assembly again over the same (or a superset) batch yields the
same nodes, edges and derived counts.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional, Sequence, Set, Tuple

from refgraph.graph.identifiers import normalize_doc_id
from refgraph.graph.manager import ReferenceGraph
from refgraph.graph.schema import (
    EXTERNAL_DOMAINS,
    Classification,
    Domain,
    EdgeSpec,
    NodeSpec,
)
from refgraph.parsers.extractor import ExtractionResult

logger = logging.getLogger("refgraph.graph.assembler")


class GraphAssembler:
    """Builds the reference graph of one extraction pass."""

    def assemble(
        self,
        results: Sequence[ExtractionResult],
        present_paths: Optional[Mapping[str, Path]] = None,
    ) -> ReferenceGraph:
        """Assemble a reference graph.

        Args:
            results: Extraction results; processed in path order.
            present_paths: Locally stored documents by identifier. Nodes
                created for them as citation targets are marked present
                even when the document yielded no extraction result.

        Returns:
            ReferenceGraph: A new graph owned by the caller.
        """
        graph = ReferenceGraph()
        ordered = sorted(
            (result for result in results if result.doc_id),
            key=lambda result: str(result.path),
        )

        for result in ordered:
            self._merge_document(graph, result)

        for result in ordered:
            self._add_primary_edges(graph, result)
            self._add_external_edges(graph, result)

        if present_paths:
            self._mark_present(graph, present_paths)

        logger.info(
            "Assembled graph: %d node(s), %d edge(s) from %d document(s)",
            graph.node_count(),
            graph.edge_count(),
            len(ordered),
        )
        return graph

    def _merge_document(self, graph: ReferenceGraph, result: ExtractionResult) -> None:
        """Create or upgrade the node of a processed document."""
        path = str(result.path)
        existing = graph.get_node(result.doc_id)
        if existing is None:
            graph.add_node(
                NodeSpec(id=result.doc_id, source=result.domain, path=path, is_draft=result.is_draft)
            )
            return

        if not existing.is_present:
            graph.set_content(result.doc_id, path, result.is_draft)
        elif existing.is_draft and not result.is_draft:
            logger.debug("Replacing draft content of %s with %s", result.doc_id, path)
            graph.set_content(result.doc_id, path, False)
        else:
            logger.debug("Keeping existing content of %s, ignoring %s", result.doc_id, path)

    def _add_primary_edges(self, graph: ReferenceGraph, result: ExtractionResult) -> None:
        normative_targets: Set[str] = set()
        for classification, identifiers in (
            (Classification.NORMATIVE, result.normative[Domain.ETSI]),
            (Classification.INFORMATIVE, result.informative[Domain.ETSI]),
        ):
            for raw in sorted(identifiers):
                target = normalize_doc_id(raw)
                if target is None or target == result.doc_id:
                    continue
                if classification is Classification.INFORMATIVE and target in normative_targets:
                    continue
                if classification is Classification.NORMATIVE:
                    normative_targets.add(target)
                graph.ensure_placeholder(target, Domain.ETSI)
                graph.add_edge(
                    EdgeSpec(
                        source_id=result.doc_id,
                        target_id=target,
                        classification=classification,
                        domain=Domain.ETSI,
                    )
                )

    def _add_external_edges(self, graph: ReferenceGraph, result: ExtractionResult) -> None:
        for domain in EXTERNAL_DOMAINS:
            for classification, target in _classified(result, domain):
                if target == result.doc_id:
                    continue
                graph.ensure_placeholder(target, domain)
                graph.add_edge(
                    EdgeSpec(
                        source_id=result.doc_id,
                        target_id=target,
                        classification=classification,
                        domain=domain,
                    )
                )

    def _mark_present(self, graph: ReferenceGraph, present_paths: Mapping[str, Path]) -> None:
        for identifier, path in present_paths.items():
            node = graph.get_node(identifier)
            if node is not None and not node.is_present:
                graph.set_content(identifier, str(path), False)


def _classified(result: ExtractionResult, domain: Domain) -> Sequence[Tuple[Classification, str]]:
    pairs = [(Classification.NORMATIVE, target) for target in sorted(result.normative[domain])]
    pairs.extend(
        (Classification.INFORMATIVE, target)
        for target in sorted(result.informative[domain] - result.normative[domain])
    )
    return pairs
