"""JSON snapshot export for reference graphs."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from refgraph.graph.manager import ReferenceGraph
from refgraph.parsers.extractor import ExtractionBatch

logger = logging.getLogger("refgraph.export.json")

SNAPSHOT_FILENAME = "references.json"


def build_snapshot(
    graph: ReferenceGraph,
    batch: Optional[ExtractionBatch] = None,
    crawl: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Assemble the snapshot record.

    Args:
        graph: Assembled reference graph.
        batch: Extraction pass the graph was built from.
        crawl: Optional crawl summary to embed.

    Returns:
        Dict with ``documents``, ``errors`` and ``graph`` keys.
    """
    snapshot: Dict[str, Any] = {
        "documents": [result.to_summary() for result in batch.results] if batch else [],
        "errors": [
            {"file": Path(path).name, "path": path, "error": reason}
            for path, reason in sorted(batch.errors.items())
        ]
        if batch
        else [],
        "graph": graph.to_dict(),
    }
    if crawl is not None:
        snapshot["crawl"] = crawl
    return snapshot


def export_json(snapshot: Dict[str, Any], output_path: Path) -> Path:
    """Write a snapshot record to ``output_path``.

    Args:
        snapshot: Record produced by build_snapshot.
        output_path: Output file path, or a directory receiving references.json.

    Returns:
        Path: The written file.
    """
    output_path = Path(output_path)
    if output_path.is_dir():
        output_path = output_path / SNAPSHOT_FILENAME
    logger.info("Exporting graph to JSON: %s", output_path)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(snapshot, f, indent=2, ensure_ascii=False)

    statistics = snapshot["graph"]["statistics"]
    logger.info(
        "JSON export completed: %d nodes, %d edges",
        statistics["totalDocuments"],
        statistics["totalReferences"],
    )
    return output_path
