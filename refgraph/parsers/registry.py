"""Closed registry of OpenID Foundation ecosystem specifications.

The foundation-profile domain has no stable numbering scheme, so it is
handled as a classifier over a versioned enumeration rather than as open
pattern matching: recognizer patterns find candidate spellings, alias
rules collapse them to a known family name, and the registry maps family
names to the location the crawler downloads them from. Adding a family
means extending the tables below and bumping ``OIDF_REGISTRY_VERSION``.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from refgraph.graph.identifiers import storage_stem

logger = logging.getLogger("refgraph.parsers.registry")

OIDF_REGISTRY_VERSION = "2025.1"


@dataclass(frozen=True)
class SpecEntry:
    """One downloadable specification family.

    Attributes:
        id: Canonical family name used as the graph node identifier.
        name: Full title.
        url: Download location.
        version: Version of the document behind ``url``.
        origin: Publishing body when it is not the OpenID Foundation.
    """

    id: str
    name: str
    url: str
    version: str
    origin: str = "oidf"


OIDF_SPECS: Tuple[SpecEntry, ...] = (
    SpecEntry(
        "OpenID4VP",
        "OpenID for Verifiable Presentations",
        "https://openid.net/specs/openid-4-verifiable-presentations-1_0.html",
        "1.0",
    ),
    SpecEntry(
        "OpenID4VCI",
        "OpenID for Verifiable Credential Issuance",
        "https://openid.net/specs/openid-4-verifiable-credential-issuance-1_0.html",
        "1.0",
    ),
    SpecEntry(
        "OpenID4VC-HAIP",
        "OpenID4VC High Assurance Interoperability Profile",
        "https://openid.net/specs/openid4vc-high-assurance-interoperability-profile-1_0.html",
        "1.0",
    ),
    SpecEntry(
        "OpenID Connect Core",
        "OpenID Connect Core",
        "https://openid.net/specs/openid-connect-core-1_0.html",
        "1.0",
    ),
    SpecEntry(
        "OpenID Connect Discovery",
        "OpenID Connect Discovery",
        "https://openid.net/specs/openid-connect-discovery-1_0.html",
        "1.0",
    ),
    SpecEntry(
        "OpenID Connect Dynamic Client Registration",
        "OpenID Connect Dynamic Client Registration",
        "https://openid.net/specs/openid-connect-registration-1_0.html",
        "1.0",
    ),
    SpecEntry(
        "OpenID Federation",
        "OpenID Federation",
        "https://openid.net/specs/openid-federation-1_0.html",
        "1.0",
    ),
    SpecEntry(
        "SD-JWT",
        "Selective Disclosure for JWTs",
        "https://www.ietf.org/archive/id/draft-ietf-oauth-selective-disclosure-jwt-13.html",
        "draft-13",
        origin="ietf-draft",
    ),
    SpecEntry(
        "SD-JWT VC",
        "SD-JWT-based Verifiable Credentials",
        "https://www.ietf.org/archive/id/draft-ietf-oauth-sd-jwt-vc-05.html",
        "draft-05",
        origin="ietf-draft",
    ),
    SpecEntry(
        "OAuth 2.0 DPoP",
        "OAuth 2.0 Demonstrating Proof of Possession",
        "https://datatracker.ietf.org/doc/html/rfc9449",
        "RFC 9449",
        origin="ietf",
    ),
    SpecEntry(
        "OAuth 2.0 PAR",
        "OAuth 2.0 Pushed Authorization Requests",
        "https://datatracker.ietf.org/doc/html/rfc9126",
        "RFC 9126",
        origin="ietf",
    ),
    SpecEntry(
        "OAuth 2.0 RAR",
        "OAuth 2.0 Rich Authorization Requests",
        "https://datatracker.ietf.org/doc/html/rfc9396",
        "RFC 9396",
        origin="ietf",
    ),
)

# Family names emitted by the classifier that share another entry's document
_URL_ALIASES: Dict[str, str] = {
    "HAIP": "OpenID4VC-HAIP",
    "OpenID Connect": "OpenID Connect Core",
}

# Raw spellings recognized in document text
OIDF_RECOGNIZERS: Tuple[re.Pattern, ...] = (
    re.compile(r"OpenID4VP(?:\s+[\d.]+)?", re.IGNORECASE),
    re.compile(r"OpenID4VCI(?:\s+[\d.]+)?", re.IGNORECASE),
    re.compile(r"OpenID4VC(?:-HAIP)?(?![A-Za-z])(?:\s+[\d.]+)?", re.IGNORECASE),
    re.compile(r"OpenID\s+Connect(?:\s+Core)?(?:\s+[\d.]+)?", re.IGNORECASE),
    re.compile(
        r"OpenID\s+for\s+Verifiable\s+(?:Presentations?|Credentials?)(?:\s+[\d.]+)?",
        re.IGNORECASE,
    ),
    re.compile(r"SD-JWT(?:\s+VC)?", re.IGNORECASE),
    re.compile(r"(?<!-)\bHAIP\b"),
)

# Ordered alias rules, first match wins
OIDF_ALIAS_RULES: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"OpenID4VP", re.IGNORECASE), "OpenID4VP"),
    (re.compile(r"OpenID4VCI", re.IGNORECASE), "OpenID4VCI"),
    (re.compile(r"OpenID4VC[-\s]HAIP", re.IGNORECASE), "OpenID4VC-HAIP"),
    (re.compile(r"OpenID4VC", re.IGNORECASE), "OpenID4VC"),
    (re.compile(r"OpenID\s+(?:for\s+)?Verifiable\s+Presentation", re.IGNORECASE), "OpenID4VP"),
    (re.compile(r"OpenID\s+(?:for\s+)?Verifiable\s+Credential", re.IGNORECASE), "OpenID4VCI"),
    (re.compile(r"OpenID\s+Connect", re.IGNORECASE), "OpenID Connect"),
    (re.compile(r"SD-JWT\s*VC", re.IGNORECASE), "SD-JWT VC"),
    (re.compile(r"SD-JWT", re.IGNORECASE), "SD-JWT"),
    (re.compile(r"^HAIP$", re.IGNORECASE), "HAIP"),
)

# Fallback resolution rules for identifiers that miss the direct lookup
_RESOLUTION_RULES: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"OpenID4VP", re.IGNORECASE), "OpenID4VP"),
    (re.compile(r"OpenID4VCI", re.IGNORECASE), "OpenID4VCI"),
    (re.compile(r"OpenID4VC-HAIP|HAIP", re.IGNORECASE), "OpenID4VC-HAIP"),
    (re.compile(r"OpenID\s*Connect\s*Core", re.IGNORECASE), "OpenID Connect Core"),
    (re.compile(r"OpenID\s*Connect\s*Discovery", re.IGNORECASE), "OpenID Connect Discovery"),
    (re.compile(r"OpenID\s*Connect", re.IGNORECASE), "OpenID Connect Core"),
    (re.compile(r"OpenID\s*Federation", re.IGNORECASE), "OpenID Federation"),
    (re.compile(r"SD-JWT\s*VC", re.IGNORECASE), "SD-JWT VC"),
    (re.compile(r"SD-JWT", re.IGNORECASE), "SD-JWT"),
)


def classify_oidf(raw: str) -> Optional[str]:
    """Collapse a raw foundation-profile match to its family name.

    Examples:
        >>> classify_oidf("OpenID for Verifiable Credential Issuance 1.0")
        'OpenID4VCI'
        >>> classify_oidf("OpenID Connect Core 1.0")
        'OpenID Connect'
    """
    spec = raw.strip()
    for pattern, canonical in OIDF_ALIAS_RULES:
        if pattern.search(spec):
            return canonical
    return None


class SpecRegistry:
    """Lookup table from family names to download locations."""

    def __init__(self, entries: Iterable[SpecEntry] = OIDF_SPECS,
                 aliases: Optional[Dict[str, str]] = None,
                 version: str = OIDF_REGISTRY_VERSION) -> None:
        self.version = version
        self._entries: Dict[str, SpecEntry] = {entry.id: entry for entry in entries}
        self._aliases = dict(_URL_ALIASES if aliases is None else aliases)

    def __contains__(self, spec_id: str) -> bool:
        return self.get(spec_id) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, spec_id: str) -> Optional[SpecEntry]:
        """Exact lookup, following aliases."""
        target = self._aliases.get(spec_id, spec_id)
        return self._entries.get(target)

    def resolve_url(self, spec_id: str) -> Optional[str]:
        """Resolve an identifier to its download location.

        Tries the identifier as-is, then dash/space variants, then the
        fallback pattern rules. Returns None when the family is unknown.
        """
        for variant in (spec_id, spec_id.replace("-", " "), re.sub(r"\s+", "-", spec_id)):
            entry = self.get(variant)
            if entry is not None:
                return entry.url

        for pattern, target in _RESOLUTION_RULES:
            if pattern.search(spec_id):
                entry = self.get(target)
                if entry is not None:
                    return entry.url

        logger.debug("No download location for specification: %s", spec_id)
        return None

    def known_ids(self) -> List[str]:
        """Every identifier a stored specification may be filed under."""
        ids = list(self._entries)
        ids.extend(alias for alias in self._aliases if alias not in self._entries)
        ids.extend(
            canonical
            for _, canonical in OIDF_ALIAS_RULES
            if canonical not in ids
        )
        return ids

    def id_for_storage_stem(self, stem: str) -> Optional[str]:
        """Map a stored file stem (``OpenID_Connect_Core``) back to its identifier."""
        for spec_id in self.known_ids():
            if storage_stem(spec_id) == stem:
                return spec_id
        return None


_default_registry: Optional[SpecRegistry] = None


def get_registry() -> SpecRegistry:
    """Return the process-wide default registry."""
    global _default_registry
    if _default_registry is None:
        _default_registry = SpecRegistry()
    return _default_registry
