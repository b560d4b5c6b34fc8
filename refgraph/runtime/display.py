"""Rich-based console summaries of extraction and crawl results.

Usage:
    console = Console()
    render_graph_summary(console, graph.to_dict(), errors=len(batch.errors))
    render_crawl_report(console, report)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from refgraph.graph.schema import Domain
from refgraph.runtime.crawler import CrawlReport

logger = logging.getLogger("refgraph.runtime.display")

TOP_REFERENCED_LIMIT = 15


def _top_referenced(nodes: List[Dict[str, Any]], limit: int) -> List[Dict[str, Any]]:
    cited = [node for node in nodes if node["referencedByCount"] > 0]
    cited.sort(key=lambda node: (-node["referencedByCount"], node["id"]))
    return cited[:limit]


def render_graph_summary(
    console: Console,
    record: Dict[str, Any],
    errors: int = 0,
    limit: int = TOP_REFERENCED_LIMIT,
) -> None:
    """Print totals, per-domain counts and the most cited documents.

    Args:
        console: Rich console to print to.
        record: Graph record as produced by ReferenceGraph.to_dict.
        errors: Number of documents that could not be read.
        limit: Number of most referenced documents to list.
    """
    stats = record["statistics"]
    present = sum(1 for node in record["nodes"] if node["path"] is not None)

    console.print(
        Panel.fit(
            f"Documents in graph: [bold]{stats['totalDocuments']}[/bold] "
            f"({present} with content, {stats['draftDocuments']} drafts)\n"
            f"References: [bold]{stats['totalReferences']}[/bold] "
            f"([green]{stats['normativeRefs']} normative[/green], "
            f"[yellow]{stats['informativeRefs']} informative[/yellow])\n"
            f"Unreadable documents: [red]{errors}[/red]",
            title="Reference graph",
        )
    )

    sources = Table(title="By source")
    sources.add_column("Source", style="cyan", no_wrap=True)
    sources.add_column("Documents", justify="right")
    sources.add_column("References", justify="right")
    for domain in Domain:
        sources.add_row(
            domain.value,
            str(stats["nodesBySource"].get(domain.value, 0)),
            str(stats["bySource"].get(domain.value, 0)),
        )
    console.print(sources)

    top = _top_referenced(record["nodes"], limit)
    if not top:
        return
    table = Table(title=f"Most referenced documents (top {limit})")
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Document", style="magenta")
    table.add_column("Source", style="green")
    table.add_column("Cited by", justify="right")
    table.add_column("Present", justify="center")
    for index, node in enumerate(top, start=1):
        table.add_row(
            str(index),
            node["id"],
            node["source"],
            str(node["referencedByCount"]),
            "yes" if node["path"] else "-",
        )
    console.print(table)


def render_crawl_report(console: Console, report: CrawlReport, limit: Optional[int] = None) -> None:
    """Print the per-iteration table of a crawl followed by the graph summary."""
    table = Table(title=f"Crawl: {report.iterations} iteration(s), stopped on {report.termination}")
    table.add_column("Iteration", justify="right", style="cyan", no_wrap=True)
    table.add_column("Documents", justify="right")
    table.add_column("Nodes", justify="right")
    table.add_column("Edges", justify="right")
    table.add_column("Frontier", justify="right")
    table.add_column("Acquired", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Unresolved", justify="right")
    table.add_column("Breaker", justify="center")
    for item in report.reports:
        table.add_row(
            str(item.iteration),
            str(item.documents),
            str(item.nodes),
            str(item.edges),
            str(item.frontier_size),
            str(len(item.acquired)),
            str(len(item.failed)),
            str(len(item.unresolved)),
            "tripped" if item.breaker_tripped else "-",
        )
    console.print(table)

    render_graph_summary(
        console,
        report.graph.to_dict(),
        errors=len(report.batch.errors),
        limit=limit or TOP_REFERENCED_LIMIT,
    )
    if report.frontier.unresolved:
        console.print(
            f"[yellow]{len(report.frontier.unresolved)} referenced document(s) have no known "
            f"source location[/yellow]"
        )
