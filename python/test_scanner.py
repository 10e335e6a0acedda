"""
Tests for licensediff.scanner: disqualification rules and word distance.

Run: python3 test_scanner.py
From: python/
"""

import sys

sys.path.insert(0, '.')

from licensediff.models import Accepted, DiffKind, DiffOp, DisqualificationReason, Rejected
from licensediff.scanner import (
    DISQUALIFYING_PHRASES,
    ScanState,
    introduced_phrase,
    is_decimal_number,
    lesser_delete,
    lesser_insert,
    scan,
    version_change,
    word_distance,
)


def eq(text):
    return DiffOp(kind=DiffKind.EQUAL, text=text)


def ins(text):
    return DiffOp(kind=DiffKind.INSERT, text=text)


def dele(text):
    return DiffOp(kind=DiffKind.DELETE, text=text)


# ---------------------------------------------------------------------------
# Word distance
# ---------------------------------------------------------------------------

def test_word_distance_substitution_counts_larger_side():
    """Delete of two words paired with insert of one costs two."""
    ops = [eq("a"), dele("b c"), ins("d"), eq("e")]
    assert word_distance(ops) == 2
    print("PASS: word distance: substitution")


def test_word_distance_all_equal_is_zero():
    assert word_distance([eq("the quick brown fox")]) == 0
    assert word_distance([]) == 0
    print("PASS: word distance: all equal")


def test_word_distance_flushes_trailing_run():
    """Edits after the last EQUAL still count."""
    ops = [eq("a b"), dele("c"), ins("x y z")]
    assert word_distance(ops) == 3
    print("PASS: word distance: trailing flush")


def test_word_distance_separate_runs_add_up():
    ops = [ins("one"), eq("a"), dele("two three"), eq("b"), ins("four"), dele("five")]
    assert word_distance(ops) == 1 + 2 + 1
    print("PASS: word distance: separate runs")


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

def test_state_transitions():
    """EQUAL sets context and clears deletes, DELETE records, INSERT leaves state alone."""
    state = ScanState()
    assert state == ScanState(last_equal="", last_delete="")

    state = state.advance(DiffKind.DELETE, "library")
    assert state == ScanState(last_equal="", last_delete="library")

    state = state.advance(DiffKind.EQUAL, "gnu")
    assert state == ScanState(last_equal="gnu", last_delete="")

    state = state.advance(DiffKind.DELETE, "library")
    after_insert = state.advance(DiffKind.INSERT, "lesser")
    assert after_insert == state
    assert after_insert.last_delete == "library"
    assert after_insert.last_equal == "gnu"
    print("PASS: state transitions")


# ---------------------------------------------------------------------------
# Individual rules against constructed states
# ---------------------------------------------------------------------------

def test_version_change_rule():
    assert version_change(ScanState(last_equal="under version"), "3") == DisqualificationReason.VERSION_CHANGE
    assert version_change(ScanState(last_equal="version"), "2.1 of the license") == DisqualificationReason.VERSION_CHANGE
    assert version_change(ScanState(last_equal="the standard version"), "3") is None
    assert version_change(ScanState(last_equal="of the contributor version"), "3") is None
    assert version_change(ScanState(last_equal="under version"), "three") is None
    assert version_change(ScanState(last_equal="under the license"), "3") is None
    print("PASS: version change rule")


def test_decimal_number_policy():
    for token in ("3", "2.0", "1.", ".5", "+1", "-2"):
        assert is_decimal_number(token), token
    for token in ("", "v2", "inf", "nan", "1e5", "2.0.1", "three"):
        assert not is_decimal_number(token), token
    print("PASS: decimal number policy")


def test_introduced_phrase_rule():
    state = ScanState()
    for phrase in DISQUALIFYING_PHRASES:
        assert introduced_phrase(state, f"with the {phrase} clause") == DisqualificationReason.INTRODUCED_PHRASE
    # Substring policy: no word boundary required.
    assert introduced_phrase(state, "bsdl") == DisqualificationReason.INTRODUCED_PHRASE
    assert introduced_phrase(state, "mit") is None
    print("PASS: introduced phrase rule")


def test_lesser_insert_rule():
    assert lesser_insert(ScanState(last_equal="the gnu"), "lesser") == DisqualificationReason.LESSER_GPL_CHANGE
    # Library -> Lesser rename is accepted.
    assert lesser_insert(ScanState(last_equal="the gnu", last_delete="library"), "lesser") is None
    # Warranty clauses in LGPL headers borrow GPL wording.
    assert lesser_insert(ScanState(last_equal="without any warranty see the gnu"), "lesser") is None
    assert lesser_insert(ScanState(last_equal="the gnu"), "lesser general") is None
    assert lesser_insert(ScanState(last_equal="the"), "lesser") is None
    print("PASS: lesser insert rule")


def test_lesser_delete_rule():
    assert lesser_delete(ScanState(last_equal="gnu"), "lesser") == DisqualificationReason.LESSER_GPL_CHANGE
    assert lesser_delete(ScanState(last_equal="warranty of the gnu"), "lesser") is None
    assert lesser_delete(ScanState(last_equal="gnu"), "library") is None
    print("PASS: lesser delete rule")


# ---------------------------------------------------------------------------
# Full scans
# ---------------------------------------------------------------------------

def test_scan_accepts_with_distance():
    result = scan([eq("permission is hereby"), dele("given"), ins("granted"), eq("free of charge")])
    assert result == Accepted(distance=1)
    print("PASS: scan accepts")


def test_scan_rejects_introduced_apache():
    result = scan([eq("licensed under the"), dele("mit"), ins("apache"), eq("license")])
    assert isinstance(result, Rejected)
    assert result.reason == DisqualificationReason.INTRODUCED_PHRASE
    print("PASS: scan rejects apache")


def test_scan_version_after_standard_version_is_accepted():
    ops = [eq("modifications of the standard version"), dele("2"), ins("3"), eq("of the package")]
    assert scan(ops) == Accepted(distance=1)

    ops = [eq("licensed under version"), dele("2"), ins("3"), eq("of the package")]
    assert scan(ops) == Rejected(reason=DisqualificationReason.VERSION_CHANGE)
    print("PASS: scan version exemption")


def test_scan_lesser_cases():
    assert scan([eq("the gnu"), ins("lesser"), eq("general public license")]) == Rejected(
        reason=DisqualificationReason.LESSER_GPL_CHANGE
    )
    assert scan([eq("the gnu"), dele("library"), ins("lesser"), eq("general public license")]) == Accepted(distance=1)
    assert scan([eq("the gnu"), dele("lesser"), eq("general public license")]) == Rejected(
        reason=DisqualificationReason.LESSER_GPL_CHANGE
    )
    assert scan([eq("implied warranty see the gnu"), ins("lesser"), eq("general public license")]) == Accepted(
        distance=1
    )
    print("PASS: scan lesser cases")


def test_scan_delete_cleared_by_equal():
    """A 'library' deletion only excuses an insertion before the next EQUAL."""
    ops = [eq("x"), dele("library"), eq("the gnu"), ins("lesser"), eq("license")]
    assert scan(ops) == Rejected(reason=DisqualificationReason.LESSER_GPL_CHANGE)
    print("PASS: scan delete cleared by equal")


def test_scan_is_case_insensitive():
    """Operation text is casefolded before matching."""
    assert scan([eq("Licensed Under The"), ins("BSD")]) == Rejected(reason=DisqualificationReason.INTRODUCED_PHRASE)
    assert scan([eq("the GNU"), ins("Lesser"), eq("general")]) == Rejected(
        reason=DisqualificationReason.LESSER_GPL_CHANGE
    )
    print("PASS: scan case insensitive")


def test_scan_short_circuits_on_first_reason():
    ops = [eq("under version"), ins("3"), eq("and"), ins("apache")]
    assert scan(ops) == Rejected(reason=DisqualificationReason.VERSION_CHANGE)
    print("PASS: scan short circuit")


if __name__ == "__main__":
    tests = [
        test_word_distance_substitution_counts_larger_side,
        test_word_distance_all_equal_is_zero,
        test_word_distance_flushes_trailing_run,
        test_word_distance_separate_runs_add_up,
        test_state_transitions,
        test_version_change_rule,
        test_decimal_number_policy,
        test_introduced_phrase_rule,
        test_lesser_insert_rule,
        test_lesser_delete_rule,
        test_scan_accepts_with_distance,
        test_scan_rejects_introduced_apache,
        test_scan_version_after_standard_version_is_accepted,
        test_scan_lesser_cases,
        test_scan_delete_cleared_by_equal,
        test_scan_is_case_insensitive,
        test_scan_short_circuits_on_first_reason,
    ]

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {test.__name__}: {e}")
            failed += 1

    print(f"\n{'=' * 60}")
    print(f"Results: {passed} passed, {failed} failed out of {len(tests)} tests")
    if failed > 0:
        sys.exit(1)
