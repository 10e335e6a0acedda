from enum import Enum, IntEnum
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from licensediff.tokenize import tokenize


class Document(BaseModel):
    """
    A tokenized, normalized text. Either the known reference license
    or the unknown document being searched.
    """

    model_config = ConfigDict(frozen=True)

    origin: str = Field(..., description="Identifier of the text (file name, SPDX id, ...).")
    tokens: Tuple[str, ...] = Field(default=(), description="Normalized word tokens in document order.")

    @property
    def length(self) -> int:
        return len(self.tokens)

    def normalized(self) -> str:
        return " ".join(self.tokens)

    def window(self, start: int, end: int) -> Tuple[str, ...]:
        return self.tokens[start:end]

    @classmethod
    def from_text(cls, text: str, origin: str) -> "Document":
        return cls(origin=origin, tokens=tuple(tokenize(text)))


class Window(BaseModel):
    """Half-open token range [start, end) into a Document."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(0, ge=0)
    end: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "Window":
        if self.end < self.start:
            raise ValueError(f"Window end {self.end} precedes start {self.start}")
        return self

    @classmethod
    def full(cls, doc: Document) -> "Window":
        return cls(start=0, end=doc.length)

    def validate_for(self, doc: Document) -> "Window":
        if self.end > doc.length:
            raise ValueError(f"Window [{self.start}-{self.end}] exceeds '{doc.origin}' ({doc.length} tokens)")
        return self


class DiffKind(IntEnum):
    """Operation codes, identical to the ones diff_match_patch emits."""

    DELETE = -1
    EQUAL = 0
    INSERT = 1


class DiffOp(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: DiffKind
    text: str

    def words(self) -> List[str]:
        return self.text.split()

    @classmethod
    def from_tuple(cls, diff: Tuple[int, str]) -> "DiffOp":
        op, text = diff
        return cls(kind=DiffKind(op), text=text)


class DisqualificationReason(str, Enum):
    """Legally significant edits that invalidate a match outright."""

    VERSION_CHANGE = "VERSION_CHANGE"
    INTRODUCED_PHRASE = "INTRODUCED_PHRASE"
    LESSER_GPL_CHANGE = "LESSER_GPL_CHANGE"


class Accepted(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance: int = Field(..., ge=0, description="Word-level substitution distance.")


class Rejected(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: DisqualificationReason


ScanResult = Union[Accepted, Rejected]


class ScoreResult(BaseModel):
    """
    Outcome of scoring one unknown window against one known text.

    match_start / match_end are the token counts trimmed from the front and
    the back of the window; use span() for absolute positions.
    A rejected match keeps the legacy zero values but carries its reason.
    """

    model_config = ConfigDict(frozen=True)

    confidence: float
    match_start: int = Field(0, ge=0)
    match_end: int = Field(0, ge=0)
    reason: Optional[DisqualificationReason] = None

    @property
    def rejected(self) -> bool:
        return self.reason is not None

    @property
    def matched(self) -> bool:
        return self.reason is None and self.confidence > 0.0

    @classmethod
    def zero(cls, reason: Optional[DisqualificationReason] = None) -> "ScoreResult":
        return cls(confidence=0.0, match_start=0, match_end=0, reason=reason)

    def span(self, window: Window) -> Tuple[int, int]:
        return window.start + self.match_start, window.end - self.match_end
