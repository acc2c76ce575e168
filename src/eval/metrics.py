"""Utility per il calcolo delle metriche di valutazione."""
from __future__ import annotations

from typing import Dict, Sequence

from src.tokenizer.corpus import END_OF_WORD

# ---------------------------------------------------------------------------
# Classificazione
# ---------------------------------------------------------------------------


def accuracy_score(predictions: Sequence[str], references: Sequence[str]) -> float:
    """Accuratezza exact-match in percentuale (0–100)."""

    if len(predictions) != len(references):
        raise ValueError("predictions e references devono avere la stessa lunghezza")
    if not predictions:
        return 0.0
    correct = sum(1 for p, r in zip(predictions, references) if p == r)
    return 100.0 * correct / len(predictions)


def compute_accuracy(predictions: Sequence[str], references: Sequence[str]) -> Dict[str, float]:
    return {"accuracy": accuracy_score(predictions, references)}


# ---------------------------------------------------------------------------
# Tokenizzazione BPE
# ---------------------------------------------------------------------------


def vocabulary_coverage(encoded: Sequence[Sequence[str]], unk_token: str = "<unk>") -> float:
    """Percentuale di token prodotti che non sono ``unk_token`` (anche con ``</w>``)."""

    unknown_forms = {unk_token, unk_token + END_OF_WORD}
    total = sum(len(seq) for seq in encoded)
    if total == 0:
        return 0.0
    unknown = sum(1 for seq in encoded for tok in seq if tok in unknown_forms)
    return 100.0 * (total - unknown) / total


def tokens_per_word(encoded: Sequence[Sequence[str]], lines: Sequence[Sequence[str]]) -> float:
    """Numero medio di subword per parola in input (1.0 = nessuna frammentazione)."""

    words = sum(1 for line in lines for w in line if w)
    if words == 0:
        return 0.0
    return sum(len(seq) for seq in encoded) / words


def compute_encoding_metrics(
    encoded: Sequence[Sequence[str]],
    lines: Sequence[Sequence[str]],
    unk_token: str = "<unk>",
) -> Dict[str, float]:
    return {
        "coverage": vocabulary_coverage(encoded, unk_token),
        "tokens_per_word": tokens_per_word(encoded, lines),
    }
