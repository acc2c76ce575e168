"""Statistiche sulle coppie adiacenti di simboli nel corpus."""
from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from src.tokenizer.corpus import WordCount

Pair = Tuple[str, str]


def count_pairs(corpus: Iterable[WordCount]) -> Dict[Pair, int]:
    """Conteggio aggregato di ogni coppia (i, i+1), pesato sul count della parola.

    Il dict mantiene l'ordine di prima occorrenza durante la scansione.
    """
    pairs: Dict[Pair, int] = {}
    for wc in corpus:
        word = wc.word
        for i in range(len(word) - 1):
            pair = (word[i], word[i + 1])
            pairs[pair] = pairs.get(pair, 0) + wc.count
    return pairs


def most_frequent_pair(corpus: Iterable[WordCount]) -> Optional[Tuple[Pair, int]]:
    """Coppia con conteggio massimo, ``None`` se nessuna parola ha 2+ simboli.

    A parità di conteggio vince la coppia vista per prima nella scansione
    del corpus (``max`` restituisce il primo massimo nell'ordine del dict).
    """
    pairs = count_pairs(corpus)
    if not pairs:
        return None
    best = max(pairs.items(), key=lambda kv: kv[1])
    return best
