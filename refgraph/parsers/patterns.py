"""Citation pattern matching across identifier domains.

Each domain contributes one or more recognizer patterns and a
normalization step applied to every match. Results are sets, so an
identifier cited ten times in a region yields one membership.

Domains:
- etsi: primary-standard deliverables (``EN 319 412-1``)
- ietf: request-for-comments (``RFC 7519``)
- iso: international standards (``ISO 18013-5``)
- itu: telecom recommendations (``ITU-T X509``)
- w3c: web-consortium specifications (``W3C vc-data-model``)
- oidf: foundation profiles, classified through the closed registry
"""

import re
from typing import Callable, Dict, Iterable, Optional, Set, Tuple

from refgraph.graph.identifiers import normalize_doc_id
from refgraph.graph.schema import Domain
from refgraph.parsers.registry import OIDF_RECOGNIZERS, classify_oidf

# A raw pattern plus the function turning one of its matches into a canonical id
Recognizer = Tuple[re.Pattern, Callable[[re.Match], Optional[str]]]

_W3C_STOPWORDS = frozenset({"technical", "recommendation"})


def _etsi_id(match: re.Match) -> Optional[str]:
    return normalize_doc_id(f"{match.group(1)} {match.group(2)}")


def _rfc_id(match: re.Match) -> Optional[str]:
    return f"RFC {int(match.group(1))}"


def _iso_id(match: re.Match) -> Optional[str]:
    return "ISO " + match.group(1).replace("–", "-")


def _itu_id(match: re.Match) -> Optional[str]:
    rec = re.sub(r"\s+", "", match.group(1)).replace(".", "")
    return f"ITU-T {rec}"


def _w3c_id(match: re.Match) -> Optional[str]:
    token = match.group(1)
    if token.lower() in _W3C_STOPWORDS:
        return None
    return f"W3C {token}"


def _oidf_id(match: re.Match) -> Optional[str]:
    return classify_oidf(match.group(0))


RECOGNIZERS: Dict[Domain, Tuple[Recognizer, ...]] = {
    Domain.ETSI: (
        (re.compile(r"ETSI\s+(EN|TS|TR|ES|EG|SR)\s+(\d{3}\s*\d{3}(?:-\d+)?)", re.IGNORECASE), _etsi_id),
        (re.compile(r"(?<![A-Z])(EN|TS|TR|ES|EG|SR)\s+(\d{3}\s*\d{3}(?:-\d+)?)", re.IGNORECASE), _etsi_id),
    ),
    Domain.IETF: (
        (re.compile(r"RFC\s*(\d{3,5})", re.IGNORECASE), _rfc_id),
    ),
    Domain.ISO: (
        (re.compile(r"ISO(?:/IEC)?\s+(\d+(?:[-–]\d+)*)", re.IGNORECASE), _iso_id),
    ),
    Domain.ITU: (
        (re.compile(r"ITU-T\s+([A-Z]\.?\s*\d+(?:\.\d+)?)", re.IGNORECASE), _itu_id),
    ),
    Domain.W3C: (
        (re.compile(r"W3C\s+([\w-]+)", re.IGNORECASE), _w3c_id),
    ),
    Domain.OIDF: tuple((pattern, _oidf_id) for pattern in OIDF_RECOGNIZERS),
}


def empty_matches() -> Dict[Domain, Set[str]]:
    """One empty set per domain, in declaration order."""
    return {domain: set() for domain in Domain}


def match_domain(text: str, domain: Domain) -> Set[str]:
    """Return the canonical identifiers of one domain found in ``text``."""
    found: Set[str] = set()
    if not text:
        return found
    for pattern, to_id in RECOGNIZERS[domain]:
        for match in pattern.finditer(text):
            identifier = to_id(match)
            if identifier:
                found.add(identifier)
    return found


def match_references(
    text: str, domains: Optional[Iterable[Domain]] = None
) -> Dict[Domain, Set[str]]:
    """Scan a text region for citations.

    Args:
        text: Region to scan.
        domains: Restrict matching to these domains (default: all).

    Returns:
        Mapping of every domain to the set of identifiers found; domains
        that were not scanned map to empty sets.
    """
    results = empty_matches()
    for domain in (domains if domains is not None else Domain):
        results[domain] = match_domain(text, domain)
    return results
