"""Main CLI entry point for refgraph.

Provides commands: extract, crawl, show
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from refgraph.cli.crawl import crawl_command
from refgraph.cli.extract import extract_command
from refgraph.cli.show import show_command

logger = logging.getLogger("refgraph.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] %(message)s",
        handlers=[handler],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="refgraph",
        description="Refgraph - standards reference graph builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract references from stored documents and write the graph snapshot",
    )
    extract_parser.add_argument(
        "specs_root",
        help="Document store directory (ETSI PDFs, OIDF/, IETF/)",
    )
    extract_parser.add_argument(
        "-o",
        "--output",
        default=".",
        help="Output directory for references.json (default: current directory)",
    )
    extract_parser.add_argument(
        "--include-drafts",
        action="store_true",
        help="Also extract draft Word documents",
    )

    crawl_parser = subparsers.add_parser(
        "crawl",
        help="Iteratively extract references and download referenced OIDF specs and RFCs",
    )
    crawl_parser.add_argument(
        "specs_root",
        help="Document store directory; downloads are stored under OIDF/ and IETF/",
    )
    crawl_parser.add_argument(
        "-o",
        "--output",
        help="Output directory for references.json (default: from config, else current directory)",
    )
    crawl_parser.add_argument(
        "-d",
        "--depth",
        type=int,
        help="Maximum crawl iterations (default: 1)",
    )
    crawl_parser.add_argument(
        "--include-drafts",
        action="store_true",
        help="Also extract draft Word documents",
    )
    crawl_parser.add_argument(
        "--config",
        help="Crawl configuration file (.toml or .json)",
    )

    show_parser = subparsers.add_parser(
        "show",
        help="Print the summary of an existing references.json snapshot",
    )
    show_parser.add_argument(
        "snapshot",
        help="Snapshot file or the directory containing references.json",
    )
    show_parser.add_argument(
        "--limit",
        type=int,
        default=15,
        help="Number of most referenced documents to list (default: 15)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    setup_logging(args.verbose, console)

    if args.command == "extract":
        return extract_command(args, console)
    elif args.command == "crawl":
        return crawl_command(args, console)
    elif args.command == "show":
        return show_command(args, console)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
