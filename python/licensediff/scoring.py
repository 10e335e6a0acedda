from typing import Optional

import structlog

from licensediff.config import DEFAULT_CONFIG, ScoringConfig
from licensediff.diff import DiffEngine, diff_range, doc_diff, text_length
from licensediff.models import DiffKind, Document, Rejected, ScoreResult, Window
from licensediff.scanner import scan

logger = structlog.get_logger(__name__)


def confidence_percentage(known_length: int, distance: int, clamp: bool = False) -> float:
    """
    Fraction of the known text matched. Can go below zero when the distance
    exceeds the known length, unless clamp is set.
    """
    if known_length < 0:
        raise ValueError(f"known_length must be non-negative, got {known_length}")
    # An empty known text is fully matched (and avoids dividing by zero).
    if known_length == 0:
        return 1.0

    confidence = 1.0 - distance / known_length
    if clamp:
        return max(confidence, 0.0)
    return confidence


def score(
    known: Document,
    unknown: Document,
    window: Optional[Window] = None,
    config: Optional[ScoringConfig] = None,
    diff_engine: Optional[DiffEngine] = None,
) -> ScoreResult:
    """
    Scores a window of the unknown document against the whole known text.

    The edit script is cut down to the region that actually overlaps the
    known text. Unknown-only text before and after it is dropped, and its
    token counts become match_start and match_end. Holds no state, so
    concurrent calls are safe.
    """
    config = config or DEFAULT_CONFIG
    if window is None:
        window = Window.full(unknown)
    window.validate_for(unknown)

    log = logger.bind(known=known.origin, unknown=unknown.origin)
    tracing = config.traces(known.origin)
    if tracing:
        log.debug("Scoring", start=window.start, end=window.end)

    diffs = doc_diff(unknown, window, known, engine=diff_engine, timeout=config.diff_timeout)

    start, end = diff_range(known.normalized(), diffs)
    if tracing:
        covered = text_length([d for d in diffs[start:end] if d.kind != DiffKind.DELETE])
        if covered < known.length:
            log.debug("Known text not fully covered by diff", known_tokens=known.length, covered=covered)

    result = scan(diffs[start:end])
    if isinstance(result, Rejected):
        if tracing:
            log.debug("Rejected match", reason=result.reason.value)
        return ScoreResult.zero(result.reason)

    confidence = confidence_percentage(known.length, result.distance, clamp=config.clamp_confidence)
    match_start, match_end = text_length(diffs[:start]), text_length(diffs[end:])

    if tracing:
        log.debug("Score result", confidence=confidence, match_start=match_start, match_end=match_end)
    return ScoreResult(confidence=confidence, match_start=match_start, match_end=match_end)
