"""Public graph API surface."""

from refgraph.graph.identifiers import filename_to_doc_id, normalize_doc_id
from refgraph.graph.manager import ReferenceGraph
from refgraph.graph.schema import Classification, Domain, EdgeSpec, NodeSpec

__all__ = [
    "Classification",
    "Domain",
    "EdgeSpec",
    "NodeSpec",
    "ReferenceGraph",
    "filename_to_doc_id",
    "normalize_doc_id",
]
