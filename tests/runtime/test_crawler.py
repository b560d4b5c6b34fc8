"""Tests for the crawl controller state machine."""

from pathlib import Path

from refgraph.config.schema import CrawlConfig
from refgraph.graph.schema import Classification, Domain
from refgraph.parsers.extractor import ReferenceExtractor
from refgraph.runtime.crawler import CrawlController, compute_frontier
from refgraph.runtime.lifecycle import Termination
from refgraph.runtime.workspace import DocumentStore


def _controller(specs_root: Path, text_extractor, fetchers, delays, **options) -> CrawlController:
    config = CrawlConfig(specs_root=specs_root, **options)
    return CrawlController(
        config,
        store=DocumentStore(specs_root),
        extractor=ReferenceExtractor(text_extractor),
        fetchers=fetchers,
        sleep=delays.append,
    )


def test_corpus_without_external_references_is_a_fixed_point(
    specs_root, write_doc, etsi_doc, text_extractor, fetcher_factory, no_sleep
) -> None:
    """One iteration, empty frontier, nothing fetched."""
    write_doc("en_319401v020301p.pdf", etsi_doc("ETSI EN 319 401", ["ETSI TS 119 312"], []))
    write_doc("ts_119312v010401p.pdf", etsi_doc("ETSI TS 119 312", [], ["ETSI EN 319 401"]))
    oidf = fetcher_factory(Domain.OIDF)
    ietf = fetcher_factory(Domain.IETF)

    report = _controller(
        specs_root, text_extractor, {Domain.OIDF: oidf, Domain.IETF: ietf}, no_sleep, max_depth=5
    ).run()

    assert report.iterations == 1
    assert report.termination is Termination.EMPTY_FRONTIER
    assert report.frontier.is_empty
    assert oidf.calls == [] and ietf.calls == []
    assert report.graph.node_count() == 2
    assert report.graph.edge_count() == 2


def test_end_to_end_acquires_cited_rfc(
    specs_root, write_doc, etsi_doc, text_extractor, fetcher_factory, no_sleep
) -> None:
    """A cites B, B cites R; R is fetched in pass 1 and present after pass 2."""
    write_doc("en_319401v020301p.pdf", etsi_doc("ETSI EN 319 401", ["ETSI TS 119 312"], []))
    write_doc("ts_119312v010401p.pdf", etsi_doc("ETSI TS 119 312", [], ['IETF RFC 3647: "Certificate Policy"']))
    ietf = fetcher_factory(Domain.IETF, {"RFC 3647": "Internet X.509 PKI Certificate Policy Framework\n"})
    controller = _controller(
        specs_root,
        text_extractor,
        {Domain.OIDF: fetcher_factory(Domain.OIDF), Domain.IETF: ietf},
        no_sleep,
        max_depth=5,
        iteration_delay=0.5,
    )

    first_batch, first_graph = controller.extract()
    assert first_batch.processed == 2
    assert first_graph.node_count() == 3
    assert first_graph.edge_count() == 2
    assert first_graph.has_edge("EN 319 401", "TS 119 312", Classification.NORMATIVE)
    assert first_graph.has_edge("TS 119 312", "RFC 3647", Classification.INFORMATIVE)
    frontier = compute_frontier(first_graph, controller.fetchers)
    assert [item.identifier for item in frontier.ietf] == ["RFC 3647"]
    assert frontier.oidf == []

    report = controller.run()

    assert ietf.calls == ["RFC 3647"]
    assert report.iterations == 2
    assert report.termination is Termination.EMPTY_FRONTIER
    assert report.frontier.is_empty
    assert report.acquired == ["RFC 3647"]
    node = report.graph.get_node("RFC 3647")
    assert node.is_present
    assert Path(node.path).name == "rfc3647.txt"
    assert (specs_root / "IETF" / "rfc3647.txt").is_file()
    assert report.graph.inbound_count("RFC 3647") == 1
    assert no_sleep == [0.2, 0.5]


def test_circuit_breaker_abandons_remaining_rfcs(
    specs_root, write_doc, etsi_doc, text_extractor, fetcher_factory, no_sleep
) -> None:
    """After ten failed items the eleventh is never attempted."""
    cited = [f"IETF RFC {7000 + n}" for n in range(1, 12)]
    write_doc("en_319401v020301p.pdf", etsi_doc("ETSI EN 319 401", cited, []))
    ietf = fetcher_factory(Domain.IETF)

    report = _controller(
        specs_root,
        text_extractor,
        {Domain.OIDF: fetcher_factory(Domain.OIDF), Domain.IETF: ietf},
        no_sleep,
        max_depth=3,
    ).run()

    attempted = sorted(set(ietf.calls))
    assert attempted == [f"RFC {7000 + n}" for n in range(1, 11)]
    assert all(ietf.calls.count(identifier) == 3 for identifier in attempted)
    assert "RFC 7011" not in ietf.calls
    assert no_sleep.count(1.0) == 10
    assert no_sleep.count(2.0) == 10
    assert len(no_sleep) == 20

    iteration = report.reports[0]
    assert iteration.breaker_tripped
    assert iteration.abandoned == ["RFC 7011"]
    assert len(iteration.failed) == 10
    assert report.termination is Termination.NO_PROGRESS
    assert report.iterations == 1
    assert report.graph.node_count() == 12


def test_success_resets_consecutive_failures(
    specs_root, write_doc, etsi_doc, text_extractor, fetcher_factory, no_sleep
) -> None:
    """Failures separated by a success do not trip the breaker."""
    cited = [f"IETF RFC {8000 + n}" for n in range(1, 13)]
    write_doc("en_319401v020301p.pdf", etsi_doc("ETSI EN 319 401", cited, []))
    ietf = fetcher_factory(Domain.IETF, {"RFC 8006": "RFC 8006 text\n"})

    report = _controller(
        specs_root,
        text_extractor,
        {Domain.OIDF: fetcher_factory(Domain.OIDF), Domain.IETF: ietf},
        no_sleep,
        max_depth=1,
    ).run()

    iteration = report.reports[0]
    assert not iteration.breaker_tripped
    assert iteration.acquired == ["RFC 8006"]
    assert len(iteration.failed) == 11
    assert report.termination is Termination.MAX_DEPTH


def test_oidf_single_attempt_and_unresolved_families(
    specs_root, write_doc, etsi_doc, text_extractor, fetcher_factory, no_sleep
) -> None:
    """Foundation specs get one attempt; families without a location are reported."""
    write_doc(
        "ts_119472v010101p.pdf",
        etsi_doc("ETSI TS 119 472", ["OpenID for Verifiable Presentations", "OpenID4VC"], []),
    )
    oidf = fetcher_factory(Domain.OIDF)
    oidf._urls = lambda identifier: None if identifier == "OpenID4VC" else f"https://example.org/{identifier}"

    report = _controller(
        specs_root,
        text_extractor,
        {Domain.OIDF: oidf, Domain.IETF: fetcher_factory(Domain.IETF)},
        no_sleep,
        max_depth=2,
    ).run()

    assert oidf.calls == ["OpenID4VP"]
    iteration = report.reports[0]
    assert iteration.failed == ["OpenID4VP"]
    assert iteration.unresolved == ["OpenID4VC"]
    assert report.termination is Termination.NO_PROGRESS
    assert not report.graph.get_node("OpenID4VC").is_present


def test_depth_bound_runs_final_extraction(
    specs_root, write_doc, etsi_doc, text_extractor, fetcher_factory, no_sleep
) -> None:
    """Documents acquired by the last allowed pass appear in the returned graph."""
    write_doc("ts_119472v010101p.pdf", etsi_doc("ETSI TS 119 472", ["OpenID4VP 1.0"], []))
    oidf = fetcher_factory(
        Domain.OIDF,
        {"OpenID4VP": "OpenID for Verifiable Presentations 1.0\n"},
    )
    ietf = fetcher_factory(Domain.IETF)

    report = _controller(
        specs_root, text_extractor, {Domain.OIDF: oidf, Domain.IETF: ietf}, no_sleep, max_depth=1
    ).run()

    assert report.iterations == 1
    assert report.termination is Termination.MAX_DEPTH
    assert report.graph.get_node("OpenID4VP").is_present
    assert (specs_root / "OIDF" / "OpenID4VP.html").is_file()
    assert ietf.calls == []
    assert 0.3 in no_sleep


class _MisfilingStore(DocumentStore):
    """Stores RFCs under a name the store cannot map back to an identifier."""

    def path_for(self, identifier, domain):
        if domain is Domain.IETF:
            return self.ietf_dir / "download.txt"
        return super().path_for(identifier, domain)


def test_download_that_does_not_read_back_is_not_progress(
    specs_root, write_doc, etsi_doc, text_extractor, fetcher_factory, no_sleep
) -> None:
    """A stored file that maps to another identifier does not count as acquired."""
    write_doc("en_319401v020301p.pdf", etsi_doc("ETSI EN 319 401", ["IETF RFC 5280"], []))
    ietf = fetcher_factory(Domain.IETF, {"RFC 5280": "X.509 profile\n"})
    controller = CrawlController(
        CrawlConfig(specs_root=specs_root, max_depth=3),
        store=_MisfilingStore(specs_root),
        extractor=ReferenceExtractor(text_extractor),
        fetchers={Domain.OIDF: fetcher_factory(Domain.OIDF), Domain.IETF: ietf},
        sleep=no_sleep.append,
    )

    report = controller.run()

    assert ietf.calls == ["RFC 5280"]
    assert report.reports[0].acquired == []
    assert report.reports[0].failed == ["RFC 5280"]
    assert report.termination is Termination.NO_PROGRESS
    assert not report.graph.get_node("RFC 5280").is_present
