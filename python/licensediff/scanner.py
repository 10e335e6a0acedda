"""
Acceptability rules for an edit script between a known license and a
candidate text.

Textual drift (reflowed lines, small wording changes) is tolerated and
measured as a word distance. Some edits change which license the text
grants no matter how small they are; those reject the candidate outright.

The scan relies on DELETE operations preceding the INSERT they pair with,
so an insertion can be judged against the text it replaces.
"""

import re
from typing import Callable, NamedTuple, Optional, Sequence

from licensediff.models import Accepted, DiffKind, DiffOp, DisqualificationReason, Rejected, ScanResult

# Phrases that appear in one or a handful of licenses. Introducing any of
# them turns the candidate into a different license or adds an exception.
# Matched as plain substrings of the casefolded operation text.
DISQUALIFYING_PHRASES = (
    "autoconf exception",
    "class path exception",
    "gcc linking exception",
    "bison exception",
    "font exception",
    "imagemagick",
    "x consortium",
    "apache",
    "bsd",
    "affero",
    "sun standards",
)

# Idioms where a number after "version" names a release of the work, not of the license.
VERSION_EXEMPT_SUFFIXES = ("the standard version", "the contributor version")

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


class ScanState(NamedTuple):
    """
    Context carried between operations.

    last_equal: stripped text of the latest EQUAL operation.
    last_delete: stripped text of the latest DELETE since that EQUAL.
    """

    last_equal: str = ""
    last_delete: str = ""

    def advance(self, kind: DiffKind, text: str) -> "ScanState":
        """EQUAL replaces the context and forgets the delete, DELETE is remembered, INSERT changes nothing."""
        if kind == DiffKind.EQUAL:
            return ScanState(last_equal=text, last_delete="")
        if kind == DiffKind.DELETE:
            return self._replace(last_delete=text)
        return self


def _normalize(text: str) -> str:
    return text.strip().casefold()


def is_decimal_number(token: str) -> bool:
    return _DECIMAL_RE.fullmatch(token) is not None


def _in_gnu_context(state: ScanState) -> bool:
    # LGPL 3.0 has no standard header, so hand-written ones often borrow
    # the GPL warranty wording. That case is not a license change.
    return state.last_equal.endswith("gnu") and "warranty" not in state.last_equal


def version_change(state: ScanState, text: str) -> Optional[DisqualificationReason]:
    """An inserted number right after 'version' changes the license release."""
    leading = text.split(" ", 1)[0]
    if not is_decimal_number(leading) or not state.last_equal.endswith("version"):
        return None
    if state.last_equal.endswith(VERSION_EXEMPT_SUFFIXES):
        return None
    return DisqualificationReason.VERSION_CHANGE


def introduced_phrase(state: ScanState, text: str) -> Optional[DisqualificationReason]:
    for phrase in DISQUALIFYING_PHRASES:
        if phrase in text:
            return DisqualificationReason.INTRODUCED_PHRASE
    return None


def lesser_insert(state: ScanState, text: str) -> Optional[DisqualificationReason]:
    """
    Adding 'lesser' after 'gnu' turns the GPL into the LGPL. Replacing
    'library' with 'lesser' is the FSF's own rename and is allowed.
    """
    if text == "lesser" and state.last_delete != "library" and _in_gnu_context(state):
        return DisqualificationReason.LESSER_GPL_CHANGE
    return None


def lesser_delete(state: ScanState, text: str) -> Optional[DisqualificationReason]:
    """Dropping 'lesser' after 'gnu' turns the LGPL into the GPL."""
    if text == "lesser" and _in_gnu_context(state):
        return DisqualificationReason.LESSER_GPL_CHANGE
    return None


Rule = Callable[[ScanState, str], Optional[DisqualificationReason]]

INSERT_RULES: Sequence[Rule] = (version_change, introduced_phrase, lesser_insert)
DELETE_RULES: Sequence[Rule] = (lesser_delete,)


def scan(ops: Sequence[DiffOp]) -> ScanResult:
    """
    Rejects the script on the first disqualifying edit, otherwise
    accepts it with its word distance.
    """
    state = ScanState()
    for op in ops:
        text = _normalize(op.text)
        if op.kind == DiffKind.INSERT:
            rules = INSERT_RULES
        elif op.kind == DiffKind.DELETE:
            rules = DELETE_RULES
        else:
            rules = ()

        for rule in rules:
            reason = rule(state, text)
            if reason is not None:
                return Rejected(reason=reason)

        state = state.advance(op.kind, text)

    return Accepted(distance=word_distance(ops))


def word_distance(ops: Sequence[DiffOp]) -> int:
    """
    Word-based Levenshtein count. A run of deletions next to a run of
    insertions is one substitution costing the larger word count.
    """
    distance = 0
    insertions = 0
    deletions = 0

    for op in ops:
        if op.kind == DiffKind.INSERT:
            insertions += len(op.words())
        elif op.kind == DiffKind.DELETE:
            deletions += len(op.words())
        else:
            distance += max(insertions, deletions)
            insertions = 0
            deletions = 0

    distance += max(insertions, deletions)
    return distance
