from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from diff_match_patch import diff_match_patch

from licensediff.models import DiffKind, DiffOp, Document, Window


class DiffEngine(Protocol):
    """
    Produces an edit script turning text1 into text2.

    Precondition relied on by the scanner: when a substitution is
    represented, the DELETE operation comes immediately before the
    INSERT it pairs with.
    """

    def __call__(self, tokens1: Sequence[str], tokens2: Sequence[str]) -> List[DiffOp]: ...


def diff_tokens(tokens1: Sequence[str], tokens2: Sequence[str], timeout: float = 0.0) -> List[DiffOp]:
    """
    Word-level diff of two token sequences using diff_match_patch.
    Returned texts are the affected tokens joined with single spaces.
    """
    dmp = diff_match_patch()
    dmp.Diff_Timeout = timeout

    # 1. Encode every distinct token as a single character
    chars1, chars2, token_array = _words_to_chars(tokens1, tokens2)

    # 2. Character diff of the encoded strings (diff_cleanupMerge runs inside)
    diffs = dmp.diff_main(chars1, chars2, False)

    # 3. Decode back to token text
    return [DiffOp(kind=DiffKind(op), text=" ".join(token_array[ord(c)] for c in chars)) for op, chars in diffs]


def _words_to_chars(tokens1: Sequence[str], tokens2: Sequence[str]) -> Tuple[str, str, List[str]]:
    """
    Encodes tokens as unique Unicode characters so the character
    diff operates on whole words.
    """
    token_array: List[str] = []
    token_hash: Dict[str, int] = {}

    def encode_tokens(tokens: Sequence[str]) -> str:
        encoded_chars = []
        for token in tokens:
            if token in token_hash:
                encoded_chars.append(chr(token_hash[token]))
            else:
                code = len(token_array)
                token_hash[token] = code
                token_array.append(token)
                encoded_chars.append(chr(code))
        return "".join(encoded_chars)

    chars1 = encode_tokens(tokens1)
    chars2 = encode_tokens(tokens2)
    return chars1, chars2, token_array


def doc_diff(
    unknown: Document,
    window: Window,
    known: Document,
    engine: Optional[DiffEngine] = None,
    timeout: float = 0.0,
) -> List[DiffOp]:
    """
    Diffs the unknown window (text1) against the whole known text (text2).
    DELETE operations carry unknown-only text, INSERT operations known-only text.
    """
    unknown_tokens = unknown.window(window.start, window.end)
    if engine is None:
        return diff_tokens(unknown_tokens, known.tokens, timeout=timeout)
    return engine(unknown_tokens, known.tokens)


def text_length(ops: Sequence[DiffOp]) -> int:
    """Number of tokens represented by a run of operations."""
    return sum(len(op.words()) for op in ops)


def diff_range(known: str, ops: Sequence[DiffOp]) -> Tuple[int, int]:
    """
    Returns [start, end) bounding the operations that cover the known text.

    The script is three regions: unknown-only deletions before the match,
    the match itself, and unknown-only deletions after it. The known side
    of the match is the EQUAL and INSERT text, so the core starts at the
    first such operation and ends once the whole known text is seen.
    An empty known text matches nothing: the core is empty and every
    operation counts as trailing unknown-only text.
    If the known side never completes, the core runs to the end of the script.
    """
    known_length = len(known.split())
    if known_length == 0:
        return 0, 0

    start = None
    seen = 0
    for idx, op in enumerate(ops):
        if op.kind == DiffKind.DELETE:
            continue
        if start is None:
            start = idx
        seen += len(op.words())
        if seen >= known_length:
            return start, idx + 1

    return (start or 0), len(ops)
