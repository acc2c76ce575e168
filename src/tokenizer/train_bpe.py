"""
Training BPE a livello di carattere.
- il vocabolario parte dai caratteri del corpus (+ ``</w>``);
- a ogni iterazione si unisce la coppia adiacente più frequente;
- ci si ferma alla dimensione richiesta o quando non restano coppie.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from tqdm import tqdm

from src.tokenizer.corpus import WordCount, build_corpus, corpus_size
from src.tokenizer.merge import merge_pair, update_frequency_table
from src.tokenizer.pair_stats import Pair, most_frequent_pair
from src.tokenizer.tokenizer_io import read_token_lines, save_bpe_vocab
from src.utils.logging import get_logger

logger = get_logger("bpe")

# sotto questa soglia non si copre nemmeno alfabeto + punteggiatura
MIN_VOCAB_SIZE = 52


@dataclass
class MergeStep:
    pair: Pair
    count: int
    vocab_size: int


@dataclass
class BpeTrainer:
    """Possiede tabella frequenze e corpus per tutta la durata del training."""

    vocab_size: int
    show_progress: bool = False
    frequency_table: Dict[str, int] = field(default_factory=dict)
    corpus: List[WordCount] = field(default_factory=list)
    merges: List[Pair] = field(default_factory=list)
    history: List[MergeStep] = field(default_factory=list)
    done: bool = False

    def __post_init__(self):
        self.vocab_size = clamp_vocab_size(self.vocab_size)

    def fit(self, token_lines: Iterable[Sequence[str]]) -> List[str]:
        self.frequency_table, self.corpus = build_corpus(token_lines)
        self.merges, self.history = [], []
        self.done = False
        logger.info(
            f"BPE start: {len(self.corpus)} distinct words, "
            f"{corpus_size(self.corpus)} symbols, {len(self.frequency_table)} initial tokens, "
            f"target={self.vocab_size}"
        )

        remaining = max(0, self.vocab_size - len(self.frequency_table))
        with tqdm(total=remaining, desc="bpe merges", disable=not self.show_progress, leave=False) as bar:
            while not self.done:
                before = len(self.frequency_table)
                self.step()
                grown = len(self.frequency_table) - before
                if grown > 0:
                    bar.update(grown)

        logger.info(
            f"BPE done: {len(self.merges)} merges, vocab size {len(self.frequency_table)}"
        )
        return self.vocabulary

    def step(self) -> Optional[Tuple[Pair, int]]:
        """Una transizione RUNNING→RUNNING|DONE; ritorna la coppia unita o ``None``."""
        if self.done:
            return None
        if len(self.frequency_table) >= self.vocab_size:
            self.done = True
            return None

        best = most_frequent_pair(self.corpus)
        if best is None:
            logger.info(
                f"No mergeable pairs left: stopping at {len(self.frequency_table)} tokens"
            )
            self.done = True
            return None

        pair, count = best
        # il corpus viene riscritto per intero prima della tabella
        merge_pair(self.corpus, pair)
        update_frequency_table(self.frequency_table, pair, count)
        self.merges.append(pair)
        self.history.append(MergeStep(pair=pair, count=count, vocab_size=len(self.frequency_table)))
        logger.debug(f"merge #{len(self.merges)}: {pair[0]!r} + {pair[1]!r} (count={count})")
        return best

    @property
    def vocabulary(self) -> List[str]:
        return list(self.frequency_table.keys())


def clamp_vocab_size(n: int) -> int:
    n = int(n)
    if n < MIN_VOCAB_SIZE:
        logger.debug(f"vocab_size={n} below minimum, using {MIN_VOCAB_SIZE}")
        return MIN_VOCAB_SIZE
    return n


def train(
    token_lines: Iterable[Sequence[str]],
    target_vocab_size: int,
    *,
    show_progress: bool = False,
) -> List[str]:
    """Entry point funzionale: ritorna il vocabolario ordinato."""
    trainer = BpeTrainer(vocab_size=target_vocab_size, show_progress=show_progress)
    return trainer.fit(token_lines)


def train_bpe(corpus_path: str, out_path: str, vocab_size: int, fmt: str = "csv", show_progress: bool = True):
    """Legge il corpus da file, allena e salva il vocabolario in CSV."""
    token_lines = read_token_lines(corpus_path, fmt)
    vocab = train(token_lines, vocab_size, show_progress=show_progress)
    save_bpe_vocab(out_path, vocab)
    print(f"[tokenizer] saved -> {out_path} ({len(vocab)} tokens)")
    return vocab
