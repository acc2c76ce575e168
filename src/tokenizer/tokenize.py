"""
Tokenizzatore a regex che produce lo stream di parole consumato dal BPE.
- ``tokenize_line``: parole, numeri e punteggiatura, case preservato.
- ``tokenize_line_alphas_lowercase``: solo sequenze alfabetiche (con apostrofo), minuscole.
"""

from __future__ import annotations
import re
from typing import Iterable, List

# [^\W\d_] equivale a [[:alpha:]] anche sui caratteri unicode
_TOKEN_RE = re.compile(r"""(?:[^\W\d_]|')+|[0-9]+|[?,.!:"=_\-%#@&\])]""")
_ALPHA_RE = re.compile(r"(?:[^\W\d_]|')+")


def tokenize_line(line: str) -> List[str]:
    """Spezza una riga in token parola/punteggiatura mantenendo il case."""
    return _TOKEN_RE.findall(line or "")


def tokenize_line_alphas_lowercase(line: str) -> List[str]:
    return [tok.lower() for tok in _ALPHA_RE.findall(line or "")]


def tokenize_reader(lines: Iterable[str]) -> List[str]:
    """Concatena i token di tutte le righe (es. un file aperto)."""
    out: List[str] = []
    for line in lines:
        out.extend(tokenize_line(line))
    return out
