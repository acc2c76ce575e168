"""
Applicazione di un merge al corpus e aggiornamento della tabella frequenze.
"""

from __future__ import annotations
from typing import Dict, List, Sequence

from src.tokenizer.corpus import WordCount
from src.tokenizer.pair_stats import Pair


def merge_word(word: Sequence[str], pair: Pair) -> List[str]:
    """
    Scansione sinistra→destra: ``a b`` diventa ``ab`` e si riprende dal
    simbolo successivo al merge, quindi il simbolo appena creato non viene
    riconsiderato nello stesso passaggio (merge greedy non sovrapposto).
    """
    a, b = pair
    merged = a + b
    out: List[str] = []
    i = 0
    n = len(word)
    while i < n:
        if i < n - 1 and word[i] == a and word[i + 1] == b:
            out.append(merged)
            i += 2
        else:
            out.append(word[i])
            i += 1
    return out


def merge_pair(corpus: List[WordCount], pair: Pair) -> List[WordCount]:
    """Riscrive il corpus in place; ritorna lo stesso oggetto per comodità.

    Le nuove parole vengono calcolate tutte prima di sostituirle: se il
    passaggio fallisce a metà il corpus resta allo stato precedente.
    """
    rewritten = [merge_word(wc.word, pair) for wc in corpus]
    for wc, new_word in zip(corpus, rewritten):
        if len(new_word) != len(wc.word):
            wc.word = new_word
    return corpus


def update_frequency_table(
    frequency_table: Dict[str, int],
    pair: Pair,
    count: int,
) -> Dict[str, int]:
    """
    Sottrae ``count`` una volta da ciascun token costituente (una sola volta
    se ``a == b``), rimuove i token arrivati a zero e aggiunge in coda il
    token unito con frequenza ``count``.
    """
    for token in dict.fromkeys(pair):
        if token not in frequency_table:
            continue
        frequency_table[token] -= count
        if frequency_table[token] <= 0:
            del frequency_table[token]
    merged = pair[0] + pair[1]
    # se esiste già (stessa stringa da coppie diverse) si accumula
    frequency_table[merged] = frequency_table.get(merged, 0) + count
    return frequency_table
