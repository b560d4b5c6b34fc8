"""Configuration schema definitions using Pydantic for validation.

CrawlConfig carries every knob of an extraction or crawl run. Errors in a
configuration file surface as pydantic ValidationError before any
document is touched.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from refgraph.fetchers.base import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT


class CrawlConfig(BaseModel):
    """Configuration of the reference crawler.

    Attributes:
        specs_root: Root of the document store.
        output_dir: Directory receiving the JSON snapshot.
        include_drafts: Also extract draft Word documents.
        max_depth: Maximum number of crawl iterations.
        verbose: Enable debug logging.
        oidf_delay: Pause after each foundation specification download (seconds).
        ietf_delay: Pause after each RFC download (seconds).
        iteration_delay: Pause between crawl iterations (seconds).
        request_timeout: Timeout of one download attempt (seconds).
        max_attempts: Download attempts per RFC.
        backoff_base: Delay before the first RFC retry, doubled per attempt (seconds).
        failure_threshold: Consecutive RFC failures that abort the rest of a pass.
        user_agent: User-Agent header sent with downloads.
    """

    specs_root: Optional[Path] = None
    output_dir: Path = Path(".")
    include_drafts: bool = False
    max_depth: int = Field(default=1, ge=1, le=50)
    verbose: bool = False

    oidf_delay: float = Field(default=0.3, ge=0.0)
    ietf_delay: float = Field(default=0.2, ge=0.0)
    iteration_delay: float = Field(default=0.0, ge=0.0)
    request_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0.0, le=600.0)
    max_attempts: int = Field(default=3, ge=1, le=10)
    backoff_base: float = Field(default=1.0, ge=0.0)
    failure_threshold: int = Field(default=10, ge=1)
    user_agent: str = DEFAULT_USER_AGENT

    model_config = {"extra": "forbid"}

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        """Reject blank User-Agent headers."""
        if not v.strip():
            raise ValueError("user_agent must not be blank")
        return v.strip()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CrawlConfig":
        """Build a configuration from a parsed mapping.

        A nested ``[crawl]`` table is accepted as well as top-level keys.
        """
        payload = data.get("crawl", data)
        if not isinstance(payload, dict):
            raise ValueError("'crawl' section must be a mapping")
        return cls.model_validate(payload)

    def with_overrides(self, **overrides: Any) -> "CrawlConfig":
        """Return a copy with the non-None overrides applied and validated."""
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        return CrawlConfig.model_validate(values)
