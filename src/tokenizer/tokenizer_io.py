"""
Lettura del corpus da CSV/TXT e persistenza di vocabolario ed encoding.
Gli errori di apertura/parsing (OSError, csv.Error) risalgono al chiamante.
"""

from __future__ import annotations
import csv
from typing import Iterator, List, Optional, Sequence

from src.tokenizer.encoder import UNK_TOKEN, BpeEncoder
from src.tokenizer.tokenize import tokenize_line_alphas_lowercase
from src.utils.io import open_text

VOCAB_HEADER = "Tokens in vocab:"
ENCODING_HEADER = "Tokenized sequences"


def _iter_column(path: str, column: int) -> Iterator[str]:
    # la prima riga è sempre l'header
    with open_text(path, "rt") as f:
        reader = csv.reader(f)
        next(reader, None)
        for record in reader:
            yield record[column] if len(record) > column else ""


def parse_csv_to_tokens(path: str) -> List[List[str]]:
    """CSV ``target,testo``: tokenizza la colonna 1."""
    return [tokenize_line_alphas_lowercase(text) for text in _iter_column(path, 1)]


def parse_csv_to_lines(path: str) -> List[str]:
    return list(_iter_column(path, 1))


def parse_txt_to_tokens(path: str) -> List[List[str]]:
    """File di testo letto come CSV a una colonna (colonna 0)."""
    return [tokenize_line_alphas_lowercase(text) for text in _iter_column(path, 0)]


def parse_txt_to_lines(path: str) -> List[str]:
    return list(_iter_column(path, 0))


def read_token_lines(path: str, fmt: str = "csv") -> List[List[str]]:
    fmt = (fmt or "csv").lower()
    if fmt == "csv":
        return parse_csv_to_tokens(path)
    if fmt == "txt":
        return parse_txt_to_tokens(path)
    raise ValueError(f"Unsupported corpus format '{fmt}'. Use 'csv' or 'txt'.")


def save_bpe_vocab(path: str, vocab: Sequence[str]):
    with open_text(path, "wt") as f:
        writer = csv.writer(f)
        writer.writerow([VOCAB_HEADER])
        for token in vocab:
            writer.writerow([token])


def load_bpe_vocab(path: str) -> List[str]:
    return [tok for tok in _iter_column(path, 0) if tok]


def save_bpe_encoding(path: str, sequences: Sequence[Sequence[str]]):
    """Un token per record, le sequenze una dopo l'altra."""
    with open_text(path, "wt") as f:
        writer = csv.writer(f)
        writer.writerow([ENCODING_HEADER])
        for line in sequences:
            for token in line:
                writer.writerow([token])


def load_bpe_encoding(path: str) -> List[str]:
    return [tok for tok in _iter_column(path, 0) if tok]


class TokWrapper:
    """Vocabolario salvato su disco + encoder, con lookup token↔id."""

    def __init__(self, path: str, unk_token: Optional[str] = None):
        vocab = load_bpe_vocab(path)
        if not vocab:
            raise ValueError(f"Vocabolario vuoto: {path}")
        self.unk_token = unk_token or UNK_TOKEN
        self.encoder = BpeEncoder(vocab, unk_token=self.unk_token)
        self.stoi = {tok: i for i, tok in enumerate(dict.fromkeys(vocab))}
        if self.unk_token not in self.stoi:
            self.stoi[self.unk_token] = len(self.stoi)
        self.itos = {i: tok for tok, i in self.stoi.items()}

    def encode(self, text: str) -> List[int]:
        return [self.stoi.get(tok, self.unk_id) for tok in self.encoder.encode_text(text)]

    def tokenize(self, text: str) -> List[str]:
        return self.encoder.encode_text(text)

    def token_to_id(self, tok: str):
        return self.stoi.get(tok)

    @property
    def unk_id(self): return self.stoi[self.unk_token]

    def vocab_size(self): return len(self.stoi)
