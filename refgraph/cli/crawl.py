"""Crawl command implementation."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console

from refgraph.export.json import SNAPSHOT_FILENAME, build_snapshot, export_json
from refgraph.runtime.config_loader import load_crawl_config
from refgraph.runtime.crawler import CrawlController, CrawlReport
from refgraph.runtime.display import render_crawl_report

logger = logging.getLogger("refgraph.cli.crawl")


def crawl_summary(report: CrawlReport) -> dict:
    """Crawl section of the JSON snapshot."""
    return {
        "iterations": report.iterations,
        "termination": report.termination.name.lower(),
        "unresolved": list(report.frontier.unresolved),
        "reports": [
            {
                "iteration": item.iteration,
                "documents": item.documents,
                "frontier": item.frontier_size,
                "acquired": item.acquired,
                "failed": item.failed,
                "skipped": item.skipped,
                "abandoned": item.abandoned,
                "breakerTripped": item.breaker_tripped,
            }
            for item in report.reports
        ],
    }


def crawl_command(args, console: Console = None) -> int:
    """Execute crawl command.

    Args:
        args: Parsed command-line arguments containing:
            - specs_root: Document store directory
            - output: Output directory for references.json (optional)
            - depth: Maximum crawl iterations (optional)
            - include_drafts: Also extract draft documents
            - config: TOML/JSON configuration file (optional)

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    console = console or Console()
    try:
        config = load_crawl_config(getattr(args, "config", None)).with_overrides(
            specs_root=Path(args.specs_root),
            output_dir=Path(args.output) if args.output else None,
            max_depth=args.depth,
            include_drafts=True if args.include_drafts else None,
            verbose=True if getattr(args, "verbose", False) else None,
        )
        if config.verbose:
            logging.getLogger("refgraph").setLevel(logging.DEBUG)
        if not config.specs_root.is_dir():
            logger.error("Document store not found: %s", config.specs_root)
            return 1

        logger.info(
            "Crawling %s (max depth %d, drafts %s)",
            config.specs_root,
            config.max_depth,
            "included" if config.include_drafts else "excluded",
        )
        report = CrawlController(config).run()

        snapshot = build_snapshot(report.graph, report.batch, crawl=crawl_summary(report))
        output_path = export_json(snapshot, config.output_dir / SNAPSHOT_FILENAME)
        render_crawl_report(console, report)
        console.print(f"Snapshot written to [bold]{output_path}[/bold]")
        return 0

    except (OSError, ValueError, json.JSONDecodeError, ValidationError) as err:
        logger.error("Crawl failed: %s", err, exc_info=True)
        return 1
