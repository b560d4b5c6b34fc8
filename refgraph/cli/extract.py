"""Extract command implementation."""

import logging
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console

from refgraph.config.schema import CrawlConfig
from refgraph.export.json import SNAPSHOT_FILENAME, build_snapshot, export_json
from refgraph.graph.assembler import GraphAssembler
from refgraph.parsers.extractor import ReferenceExtractor
from refgraph.runtime.display import render_graph_summary
from refgraph.runtime.workspace import DocumentStore

logger = logging.getLogger("refgraph.cli.extract")


def extract_command(args, console: Console = None) -> int:
    """Execute extract command.

    Args:
        args: Parsed command-line arguments containing:
            - specs_root: Document store directory
            - output: Output directory for references.json
            - include_drafts: Also extract draft documents

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    console = console or Console()
    try:
        config = CrawlConfig(
            specs_root=Path(args.specs_root),
            output_dir=Path(args.output),
            include_drafts=args.include_drafts,
            verbose=getattr(args, "verbose", False),
        )
        if config.verbose:
            logging.getLogger("refgraph").setLevel(logging.DEBUG)
        if not config.specs_root.is_dir():
            logger.error("Document store not found: %s", config.specs_root)
            return 1

        store = DocumentStore(config.specs_root)
        documents = store.scan(include_drafts=config.include_drafts)
        batch = ReferenceExtractor().extract_all(documents)
        graph = GraphAssembler().assemble(batch.results, store.present_paths(documents))

        output_path = export_json(
            build_snapshot(graph, batch), config.output_dir / SNAPSHOT_FILENAME
        )
        render_graph_summary(console, graph.to_dict(), errors=len(batch.errors))
        console.print(f"Snapshot written to [bold]{output_path}[/bold]")
        return 0

    except (OSError, ValueError, ValidationError) as err:
        logger.error("Extraction failed: %s", err, exc_info=True)
        return 1
