"""Show command implementation."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console

from refgraph.export.json import SNAPSHOT_FILENAME
from refgraph.graph.io import load_snapshot
from refgraph.runtime.display import render_graph_summary

logger = logging.getLogger("refgraph.cli.show")


def show_command(args, console: Console = None) -> int:
    """Print the summary of a previously written snapshot.

    Args:
        args: Parsed command-line arguments containing:
            - snapshot: references.json file or the directory holding it
            - limit: Number of most referenced documents to list

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    console = console or Console()
    path = Path(args.snapshot)
    if path.is_dir():
        path = path / SNAPSHOT_FILENAME

    try:
        graph = load_snapshot(path)
    except (OSError, ValueError, KeyError, json.JSONDecodeError, ValidationError) as err:
        logger.error("Cannot read snapshot %s: %s", path, err)
        return 1

    render_graph_summary(console, graph.to_dict(), limit=args.limit)
    return 0
