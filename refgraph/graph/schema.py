"""Canonical graph schema models.

This module defines a single source of truth for identifier domains,
reference classifications and the node/edge records carried by the
reference graph. Graph construction code should go through NodeSpec and
EdgeSpec instead of assembling ad-hoc dictionaries.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger("refgraph.graph.schema")


class Domain(str, Enum):
    """Identifier domains recognized by the pattern matcher."""

    ETSI = "etsi"
    IETF = "ietf"
    ISO = "iso"
    ITU = "itu"
    W3C = "w3c"
    OIDF = "oidf"


# Domains whose identifiers point outside the primary corpus
EXTERNAL_DOMAINS = (Domain.IETF, Domain.ISO, Domain.ITU, Domain.W3C, Domain.OIDF)


class Classification(str, Enum):
    """Reference classification derived from the section it was found in."""

    NORMATIVE = "normative"
    INFORMATIVE = "informative"


class NodeSpec(BaseModel):
    """Structured representation of one document in the graph.

    Inbound and outbound counts are not stored here; they are derived from
    the edge list by the graph manager.
    """

    model_config = ConfigDict(extra="forbid")

    id: Annotated[str, Field(..., min_length=1, description="Canonical identifier")]
    source: Annotated[Domain, Field(..., description="Identifier domain")]
    path: Annotated[
        Optional[str],
        Field(default=None, description="Acquired content location, None for placeholders"),
    ]
    is_draft: Annotated[bool, Field(default=False, description="Content comes from a draft")]

    @field_validator("id")
    @classmethod
    def _strip_id(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("node id must not be blank")
        return stripped

    @property
    def type(self) -> str:
        """Document-type tag: the first token of the identifier."""
        return self.id.split(" ")[0]

    @property
    def is_present(self) -> bool:
        return self.path is not None

    def to_backend_attrs(self) -> Dict[str, Any]:
        """Attributes stored on the networkx node."""
        return {
            "source": self.source.value,
            "path": self.path,
            "is_draft": self.is_draft,
        }


class EdgeSpec(BaseModel):
    """Directed reference from one document to another."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_id: Annotated[str, Field(..., min_length=1)]
    target_id: Annotated[str, Field(..., min_length=1)]
    classification: Classification
    domain: Domain

    @property
    def key(self) -> str:
        """Parallel-edge key: one edge per (from, to, classification)."""
        return self.classification.value

    def to_record(self) -> Dict[str, str]:
        """Snapshot record for this edge."""
        return {
            "from": self.source_id,
            "to": self.target_id,
            "type": self.classification.value,
            "source": self.domain.value,
        }
