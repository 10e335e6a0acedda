import os
from typing import FrozenSet, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

TRACE_ALL = "*"

_TRUTHY = {"1", "true", "yes", "on"}


class ScoringConfig(BaseModel):
    """Knobs for the scorer. The defaults reproduce the historical behavior."""

    model_config = ConfigDict(frozen=True)

    trace_origins: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Known-document origins that emit trace lines. '*' traces every origin.",
    )
    clamp_confidence: bool = Field(
        False,
        description="Clamp confidences below zero (distance larger than the known text) to 0.0.",
    )
    diff_timeout: float = Field(
        0.0,
        ge=0.0,
        description="diff_match_patch Diff_Timeout in seconds. 0 disables the timeout.",
    )

    def traces(self, origin: str) -> bool:
        return TRACE_ALL in self.trace_origins or origin in self.trace_origins

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ScoringConfig":
        """
        Builds a config from environment variables:
            LICENSEDIFF_TRACE         comma separated origins, or '*'
            LICENSEDIFF_CLAMP         1/true/yes/on
            LICENSEDIFF_DIFF_TIMEOUT  seconds (float)
        """
        env = os.environ if environ is None else environ

        trace = env.get("LICENSEDIFF_TRACE", "")
        origins = frozenset(o.strip() for o in trace.split(",") if o.strip())
        clamp = env.get("LICENSEDIFF_CLAMP", "").strip().lower() in _TRUTHY

        timeout_raw = env.get("LICENSEDIFF_DIFF_TIMEOUT", "").strip()
        try:
            timeout = float(timeout_raw) if timeout_raw else 0.0
        except ValueError as e:
            raise ValueError(f"Invalid LICENSEDIFF_DIFF_TIMEOUT: {timeout_raw!r}") from e

        return cls(trace_origins=origins, clamp_confidence=clamp, diff_timeout=timeout)


DEFAULT_CONFIG = ScoringConfig()
