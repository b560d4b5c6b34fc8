"""Iterative reference crawler.

CrawlController drives the fixed-point loop over the document store:

1. EXTRACTING: extract references from every stored document and
   assemble a fresh reference graph
2. FRONTIER_CHECK: collect referenced foundation specifications and RFCs
   that have no stored content but a known download location
3. ACQUIRING: download the frontier, one item at a time

The loop ends when the frontier is empty, when the iteration counter
reaches ``max_depth``, or when a pass acquires nothing new. In the last
two cases one more extraction pass runs so the returned graph reflects
the documents acquired by the final pass.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from refgraph.config.schema import CrawlConfig
from refgraph.errors import CircuitBreakerTripped
from refgraph.fetchers.base import BaseFetcher
from refgraph.fetchers.ietf import IetfFetcher
from refgraph.fetchers.oidf import OidfFetcher
from refgraph.graph.assembler import GraphAssembler
from refgraph.graph.manager import ReferenceGraph
from refgraph.graph.schema import Domain
from refgraph.parsers.extractor import ExtractionBatch, ReferenceExtractor
from refgraph.runtime.lifecycle import CrawlState, Termination
from refgraph.runtime.worker import NO_RETRY, RetryConfig, execute_with_retry
from refgraph.runtime.workspace import DocumentStore

logger = logging.getLogger("refgraph.runtime.crawler")


@dataclass(frozen=True)
class FrontierItem:
    """A referenced document that can be downloaded."""

    identifier: str
    domain: Domain
    url: str


@dataclass
class Frontier:
    """Acquisition candidates of one iteration, never persisted."""

    oidf: List[FrontierItem] = field(default_factory=list)
    ietf: List[FrontierItem] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.oidf and not self.ietf

    def __len__(self) -> int:
        return len(self.oidf) + len(self.ietf)


def compute_frontier(graph: ReferenceGraph, fetchers: Mapping[Domain, BaseFetcher]) -> Frontier:
    """List missing documents of the acquirable domains.

    Args:
        graph: Reference graph of the current iteration.
        fetchers: Fetcher per acquirable domain, used to resolve locations.

    Returns:
        Frontier: Items with a known location, plus unresolved identifiers.
    """
    frontier = Frontier()
    for domain, bucket in ((Domain.OIDF, frontier.oidf), (Domain.IETF, frontier.ietf)):
        fetcher = fetchers.get(domain)
        for identifier in sorted(graph.missing(domain)):
            url = fetcher.locate(identifier) if fetcher is not None else None
            if url is None:
                logger.info("No source location for %s, leaving it as a placeholder", identifier)
                frontier.unresolved.append(identifier)
                continue
            bucket.append(FrontierItem(identifier, domain, url))
    return frontier


@dataclass
class IterationReport:
    """What one crawl iteration saw and did."""

    iteration: int
    documents: int = 0
    nodes: int = 0
    edges: int = 0
    errors: int = 0
    frontier_size: int = 0
    acquired: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)
    abandoned: List[str] = field(default_factory=list)
    breaker_tripped: bool = False


@dataclass
class CrawlReport:
    """Final outcome of a crawl."""

    iterations: int
    graph: ReferenceGraph
    batch: ExtractionBatch
    frontier: Frontier
    termination: Termination
    reports: List[IterationReport] = field(default_factory=list)

    @property
    def acquired(self) -> List[str]:
        return [identifier for report in self.reports for identifier in report.acquired]


class CrawlController:
    """State machine running extraction and acquisition until a fixed point."""

    def __init__(
        self,
        config: CrawlConfig,
        store: Optional[DocumentStore] = None,
        extractor: Optional[ReferenceExtractor] = None,
        assembler: Optional[GraphAssembler] = None,
        fetchers: Optional[Mapping[Domain, BaseFetcher]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if store is None:
            if config.specs_root is None:
                raise ValueError("specs_root is required when no document store is given")
            store = DocumentStore(config.specs_root)

        self.config = config
        self.store = store
        self.extractor = extractor or ReferenceExtractor()
        self.assembler = assembler or GraphAssembler()
        self.fetchers: Dict[Domain, BaseFetcher] = dict(
            fetchers if fetchers is not None else self._default_fetchers(config)
        )
        self.sleep = sleep
        self.state = CrawlState.EXTRACTING
        self.rfc_retry = RetryConfig(
            max_retries=config.max_attempts - 1,
            base_delay=config.backoff_base,
            exponential_base=2.0,
        )

    @staticmethod
    def _default_fetchers(config: CrawlConfig) -> Dict[Domain, BaseFetcher]:
        options = {"user_agent": config.user_agent, "timeout": config.request_timeout}
        return {Domain.OIDF: OidfFetcher(**options), Domain.IETF: IetfFetcher(**options)}

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------
    def extract(self) -> Tuple[ExtractionBatch, ReferenceGraph]:
        """Run one extraction and assembly pass.

        Returns:
            Tuple[ExtractionBatch, ReferenceGraph]: Batch and assembled graph.
        """
        documents = self.store.scan(include_drafts=self.config.include_drafts)
        batch = self.extractor.extract_all(documents)
        graph = self.assembler.assemble(batch.results, self.store.present_paths(documents))
        return batch, graph

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------
    def run(self) -> CrawlReport:
        """Crawl until the frontier is exhausted or a bound is reached."""
        self.store.ensure_layout()
        reports: List[IterationReport] = []
        iteration = 0
        batch: Optional[ExtractionBatch] = None
        graph: Optional[ReferenceGraph] = None
        frontier = Frontier()
        termination = Termination.EMPTY_FRONTIER
        report: Optional[IterationReport] = None
        self.state = CrawlState.EXTRACTING

        while self.state is not CrawlState.DONE:
            if self.state is CrawlState.EXTRACTING:
                iteration += 1
                logger.info("Iteration %d/%d: extracting references", iteration, self.config.max_depth)
                batch, graph = self.extract()
                report = IterationReport(
                    iteration=iteration,
                    documents=batch.processed,
                    nodes=graph.node_count(),
                    edges=graph.edge_count(),
                    errors=len(batch.errors),
                )
                reports.append(report)
                self.state = CrawlState.FRONTIER_CHECK

            elif self.state is CrawlState.FRONTIER_CHECK:
                frontier = compute_frontier(graph, self.fetchers)
                report.frontier_size = len(frontier)
                report.unresolved = list(frontier.unresolved)
                logger.info(
                    "Frontier: %d OIDF, %d RFC, %d unresolved",
                    len(frontier.oidf),
                    len(frontier.ietf),
                    len(frontier.unresolved),
                )
                if frontier.is_empty:
                    termination = Termination.EMPTY_FRONTIER
                    self.state = CrawlState.DONE
                else:
                    self.state = CrawlState.ACQUIRING

            elif self.state is CrawlState.ACQUIRING:
                self.acquire(frontier, report)
                if iteration >= self.config.max_depth:
                    termination = Termination.MAX_DEPTH
                    self.state = CrawlState.DONE
                elif not report.acquired:
                    termination = Termination.NO_PROGRESS
                    self.state = CrawlState.DONE
                else:
                    if self.config.iteration_delay:
                        self.sleep(self.config.iteration_delay)
                    self.state = CrawlState.EXTRACTING

        if termination is not Termination.EMPTY_FRONTIER:
            logger.info("Final extraction pass after %s", termination)
            batch, graph = self.extract()
            frontier = compute_frontier(graph, self.fetchers)

        logger.info("Crawl finished after %d iteration(s): %s", iteration, termination)
        return CrawlReport(
            iterations=iteration,
            graph=graph,
            batch=batch,
            frontier=frontier,
            termination=termination,
            reports=reports,
        )

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------
    def acquire(self, frontier: Frontier, report: IterationReport) -> None:
        """Download the frontier into the document store."""
        self._acquire_oidf(frontier.oidf, report)
        try:
            self._acquire_rfcs(frontier.ietf, report)
        except CircuitBreakerTripped as exc:
            logger.warning("Circuit breaker tripped: %s", exc)
            report.breaker_tripped = True

    def _acquire_oidf(self, items: List[FrontierItem], report: IterationReport) -> None:
        fetcher = self.fetchers[Domain.OIDF]
        for item in items:
            if self.store.has(item.identifier, item.domain):
                report.skipped.append(item.identifier)
                continue
            target = self.store.path_for(item.identifier, item.domain)
            result = execute_with_retry(
                item.identifier, lambda: fetcher.fetch(item.identifier, target), NO_RETRY, self.sleep
            )
            if result.success:
                self._record_stored(item, target, report)
                self.sleep(self.config.oidf_delay)
            else:
                logger.warning("Could not acquire %s: %s", item.identifier, result.error)
                report.failed.append(item.identifier)

    def _acquire_rfcs(self, items: List[FrontierItem], report: IterationReport) -> None:
        """Download RFCs with retries, abandoning the pass after too many failures.

        Raises:
            CircuitBreakerTripped: ``failure_threshold`` consecutive items failed.
        """
        fetcher = self.fetchers[Domain.IETF]
        consecutive_failures = 0
        for index, item in enumerate(items):
            if self.store.has(item.identifier, item.domain):
                report.skipped.append(item.identifier)
                continue
            target = self.store.path_for(item.identifier, item.domain)
            result = execute_with_retry(
                item.identifier,
                lambda: fetcher.fetch(item.identifier, target),
                self.rfc_retry,
                self.sleep,
            )
            if result.success:
                consecutive_failures = 0
                self._record_stored(item, target, report)
                self.sleep(self.config.ietf_delay)
                continue

            consecutive_failures += 1
            report.failed.append(item.identifier)
            if consecutive_failures >= self.config.failure_threshold:
                remaining = [rest.identifier for rest in items[index + 1:]]
                report.abandoned.extend(remaining)
                raise CircuitBreakerTripped(consecutive_failures, len(remaining))

    def _record_stored(self, item: FrontierItem, target: Path, report: IterationReport) -> None:
        """Count a download only if the store recognizes the file as ``item``."""
        stored_id = self.store.document_id_for_path(target)
        if stored_id != item.identifier:
            logger.warning(
                "Stored %s at %s but it reads back as %s; not counted as acquired",
                item.identifier,
                target,
                stored_id,
            )
            report.failed.append(item.identifier)
            return
        report.acquired.append(item.identifier)
