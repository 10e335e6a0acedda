"""
Minimal normalization of raw license text into word tokens.

Tokens are casefolded; the disqualification rules compare against
lower-case phrases and rely on this.
"""

import re
from typing import List

# Dotted numbers ("2.0", "1.1.1") stay whole so version rules see them.
_TOKEN_RE = re.compile(r"\d+(?:\.\d+)+|\w+")


def tokenize(text: str) -> List[str]:
    """Splits text into casefolded word tokens, dropping punctuation."""
    return _TOKEN_RE.findall(text.casefold())
