"""
Costruzione del corpus iniziale per il training BPE.
- ogni parola diventa lista di caratteri minuscoli + marker di fine parola;
- le sequenze identiche vengono aggregate sommando i conteggi;
- la tabella delle frequenze parte dai conteggi dei singoli caratteri.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

END_OF_WORD = "</w>"


@dataclass
class WordCount:
    word: List[str]
    count: int


def word_to_symbols(token: str) -> List[str]:
    return list(token.lower()) + [END_OF_WORD]


def build_corpus(
    token_lines: Iterable[Sequence[str]],
) -> Tuple[Dict[str, int], List[WordCount]]:
    """
    Ritorna ``(frequency_table, corpus)``.
    Entrambe le strutture seguono l'ordine di prima occorrenza: la tabella
    elenca i caratteri come sono stati visti, il corpus le parole.
    Il marker ``</w>`` entra in tabella con il numero di parole.
    """
    frequency_table: Dict[str, int] = {}
    counts: Dict[Tuple[str, ...], int] = {}
    for line in token_lines:
        for token in line:
            if not token:
                continue
            symbols = word_to_symbols(token)
            for sym in symbols:
                frequency_table[sym] = frequency_table.get(sym, 0) + 1
            key = tuple(symbols)
            counts[key] = counts.get(key, 0) + 1

    corpus = [WordCount(word=list(k), count=c) for k, c in counts.items()]
    return frequency_table, corpus


def corpus_size(corpus: Iterable[WordCount]) -> int:
    """Numero totale di simboli pesato per conteggio."""
    return sum(len(wc.word) * wc.count for wc in corpus)
