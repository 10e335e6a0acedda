from importlib.metadata import PackageNotFoundError, version

from licensediff.config import ScoringConfig
from licensediff.diff import diff_range, diff_tokens, text_length
from licensediff.models import (
    Accepted,
    DiffKind,
    DiffOp,
    DisqualificationReason,
    Document,
    Rejected,
    ScoreResult,
    Window,
)
from licensediff.scanner import scan, word_distance
from licensediff.scoring import confidence_percentage, score

try:
    __version__ = version("licensediff")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "Accepted",
    "DiffKind",
    "DiffOp",
    "DisqualificationReason",
    "Document",
    "Rejected",
    "ScoreResult",
    "ScoringConfig",
    "Window",
    "confidence_percentage",
    "diff_range",
    "diff_tokens",
    "score",
    "scan",
    "text_length",
    "word_distance",
    "__version__",
]
