"""
Encoding di testo con un vocabolario BPE già appreso.
Segmentazione greedy longest-match per parola, da sinistra a destra:
i token che terminano con ``</w>`` valgono solo a fine parola, gli altri
ovunque. Gli span non coperti diventano un singolo ``<unk>``, che a fine
parola porta il marker (``<unk></w>``).
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Sequence, Tuple

from src.tokenizer.corpus import END_OF_WORD, word_to_symbols
from src.tokenizer.tokenize import tokenize_line_alphas_lowercase

UNK_TOKEN = "<unk>"


def token_to_symbols(token: str) -> Tuple[str, ...]:
    """``"lo</w>"`` → ``("l", "o", "</w>")``; il marker conta come un simbolo."""
    if token.endswith(END_OF_WORD):
        return tuple(token[: -len(END_OF_WORD)]) + (END_OF_WORD,)
    return tuple(token)


def sort_vocabulary(vocab: Iterable[str]) -> List[str]:
    """Vocabolario dal token più lungo al più corto (stabile a parità)."""
    return sorted(dict.fromkeys(vocab), key=lambda t: len(token_to_symbols(t)), reverse=True)


class BpeEncoder:
    def __init__(self, vocab: Sequence[str], unk_token: str = UNK_TOKEN):
        self.unk_token = unk_token
        self.vocab = sort_vocabulary(vocab)
        self._index: Dict[Tuple[str, ...], str] = {}
        for tok in self.vocab:
            if tok:
                self._index.setdefault(token_to_symbols(tok), tok)
        self._max_len = max((len(k) for k in self._index), default=0)

    def _longest_match(self, symbols: Sequence[str], start: int) -> Tuple[str, int] | None:
        limit = min(self._max_len, len(symbols) - start)
        for size in range(limit, 0, -1):
            tok = self._index.get(tuple(symbols[start : start + size]))
            if tok is not None:
                return tok, size
        return None

    def encode_word(self, word: str) -> List[str]:
        symbols = word_to_symbols(word)
        out: List[str] = []
        in_unknown = False
        i = 0
        while i < len(symbols):
            match = self._longest_match(symbols, i)
            if match is not None:
                tok, size = match
                out.append(tok)
                in_unknown = False
                i += size
                continue
            if symbols[i] == END_OF_WORD:
                # span ignoto a fine parola: il marker resta sull'<unk> per non
                # fondere la parola con la successiva; altrimenti si scarta
                if in_unknown:
                    out[-1] = self.unk_token + END_OF_WORD
            elif not in_unknown:
                out.append(self.unk_token)
                in_unknown = True
            i += 1
        return out

    def encode_line(self, words: Sequence[str]) -> List[str]:
        out: List[str] = []
        for w in words:
            if w:
                out.extend(self.encode_word(w))
        return out

    def encode(self, lines: Iterable[Sequence[str]]) -> List[List[str]]:
        return [self.encode_line(words) for words in lines]

    def encode_text(self, text: str) -> List[str]:
        return self.encode_line(tokenize_line_alphas_lowercase(text))


def encode(
    lines: Iterable[Sequence[str]],
    vocabulary: Sequence[str],
    unk_token: str = UNK_TOKEN,
) -> List[List[str]]:
    return BpeEncoder(vocabulary, unk_token=unk_token).encode(lines)


def decode(tokens: Iterable[str]) -> str:
    """Ricompone le parole concatenando i token fino al marker ``</w>``."""
    words: List[str] = []
    cur: List[str] = []
    for tok in tokens:
        if tok.endswith(END_OF_WORD):
            cur.append(tok[: -len(END_OF_WORD)])
            words.append("".join(cur))
            cur = []
        else:
            cur.append(tok)
    if cur:
        words.append("".join(cur))
    return " ".join(words)
