"""Reading reference graphs back from JSON snapshots."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from refgraph.graph.manager import ReferenceGraph
from refgraph.graph.schema import Classification, Domain, EdgeSpec, NodeSpec

logger = logging.getLogger("refgraph.graph.io")


def graph_from_record(record: Dict[str, Any]) -> ReferenceGraph:
    """Rebuild a ReferenceGraph from the ``graph`` part of a snapshot.

    Stored counts are ignored; they are derived from the edges again.

    Raises:
        ValueError: A node or edge record is malformed.
        KeyError: A required field is missing.
    """
    graph = ReferenceGraph()
    for node in record.get("nodes", []):
        graph.add_node(
            NodeSpec(
                id=node["id"],
                source=Domain(node["source"]),
                path=node.get("path"),
                is_draft=bool(node.get("isDraft", False)),
            )
        )
    for edge in record.get("edges", []):
        graph.add_edge(
            EdgeSpec(
                source_id=edge["from"],
                target_id=edge["to"],
                classification=Classification(edge["type"]),
                domain=Domain(edge["source"]),
            )
        )
    return graph


def load_snapshot(path: Union[str, Path]) -> ReferenceGraph:
    """Load the reference graph stored in a references.json file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict) or "graph" not in data:
        raise ValueError(f"{path} is not a reference graph snapshot")

    graph = graph_from_record(data["graph"])
    logger.info(
        "Loaded snapshot %s: %d nodes, %d edges", path, graph.node_count(), graph.edge_count()
    )
    return graph
