"""
Classificatore Naive Bayes su frequenze di token.
- preprocess: conteggi token→etichetta e parole totali per etichetta;
- modello: P(token | etichetta) = count / parole dell'etichetta (smoothing opzionale);
- predizione: argmax della somma dei log-prob sui token noti al modello.
Le etichette sono un mapping arbitrario, non solo due classi.
"""

from __future__ import annotations
import csv
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from src.tokenizer.tokenize import tokenize_line_alphas_lowercase
from src.utils.io import open_text
from src.utils.logging import get_logger

logger = get_logger("naive_bayes")

NOT_TARGET = "<other>"

Model = Dict[str, Dict[str, float]]


@dataclass
class LineTarget:
    tokens: List[str]
    target: str


def parse_csv_to_linetarget(path: str) -> List[LineTarget]:
    """CSV con header: colonna 0 etichetta, colonna 1 testo."""
    out: List[LineTarget] = []
    with open_text(path, "rt") as f:
        reader = csv.reader(f)
        next(reader, None)
        for record in reader:
            if not record:
                continue
            text = record[1] if len(record) > 1 else ""
            out.append(LineTarget(tokens=tokenize_line_alphas_lowercase(text), target=record[0]))
    return out


def _label_for(line: LineTarget, target: Optional[str]) -> str:
    if target is None:
        return line.target
    return target if line.target == target else NOT_TARGET


def bayes_preprocess(
    lines: Iterable[LineTarget],
    target: Optional[str] = None,
) -> Tuple[Dict[str, Counter], Counter]:
    """
    Ritorna ``(occurrence, num_words)``.
    Con ``target`` le etichette collassano in ``target`` / ``NOT_TARGET``.
    """
    occurrence: Dict[str, Counter] = defaultdict(Counter)
    num_words: Counter = Counter()
    for line in lines:
        label = _label_for(line, target)
        num_words[label] += 0  # etichetta registrata anche con zero token
        for token in line.tokens:
            occurrence[token][label] += 1
            num_words[label] += 1
    return dict(occurrence), num_words


def generate_naive_bayes_model(
    occurrence: Mapping[str, Mapping[str, int]],
    num_words: Mapping[str, int],
    alpha: float = 0.0,
) -> Model:
    labels = sorted(num_words)
    vocab_size = len(occurrence)
    model: Model = {}
    for token, counts in occurrence.items():
        probs: Dict[str, float] = {}
        for label in labels:
            denom = num_words[label] + alpha * vocab_size
            probs[label] = (counts.get(label, 0) + alpha) / denom if denom > 0 else 0.0
        model[token] = probs
    logger.info(f"Naive Bayes model: {len(model)} tokens, labels={labels}")
    return model


def model_labels(model: Mapping[str, Mapping[str, float]]) -> List[str]:
    """Etichette in ordine alfabetico, indipendente dall'ordine delle righe di training."""
    labels = set()
    for probs in model.values():
        labels.update(probs)
    return sorted(labels)


def class_scores(model: Model, tokens: Sequence[str]) -> Dict[str, float]:
    """Log-score per etichetta; i token assenti dal modello sono ignorati."""
    labels = model_labels(model)
    if not labels:
        return {}
    known = [model[t] for t in tokens if t in model]
    if not known:
        return {label: 0.0 for label in labels}
    probs = np.array([[p.get(label, 0.0) for label in labels] for p in known], dtype=np.float64)
    with np.errstate(divide="ignore"):
        scores = np.log(probs).sum(axis=0)
    return {label: float(s) for label, s in zip(labels, scores)}


def predict(model: Model, tokens: Sequence[str]) -> Optional[str]:
    """Etichetta con score massimo (a parità vince la prima in ordine alfabetico)."""
    scores = class_scores(model, tokens)
    if not scores:
        return None
    labels = list(scores)
    return labels[int(np.argmax([scores[l] for l in labels]))]


def in_class(model: Model, tokens: Sequence[str], target: str) -> bool:
    """
    ``True`` solo se ``target`` ha score strettamente maggiore di ogni altra
    etichetta: parità (anche tutte a ``-inf``) significa fuori classe.
    """
    scores = class_scores(model, tokens)
    if target not in scores:
        return False
    return all(scores[target] > s for label, s in scores.items() if label != target)


def naive_bayes_in_class(model: Model, line: LineTarget, target: str) -> bool:
    return in_class(model, line.tokens, target)


def naive_bayes_in_class_str(model: Model, text: str, target: str) -> bool:
    return in_class(model, tokenize_line_alphas_lowercase(text), target)


def naive_bayes_matches_target(target: str, model: Model, line: LineTarget) -> bool:
    return (line.target == target) == naive_bayes_in_class(model, line, target)


def evaluate(model: Model, lines: Sequence[LineTarget], target: Optional[str] = None) -> Dict[str, float]:
    """Accuratezza sul test set; con ``target`` si valuta il task binario."""
    correct = 0
    for line in lines:
        if target is not None:
            ok = naive_bayes_matches_target(target, model, line)
        else:
            ok = predict(model, line.tokens) == line.target
        correct += int(ok)
    total = len(lines)
    return {"correct": correct, "total": total, "accuracy": correct / total if total else 0.0}


def save_naive_bayes_model(path: str, model: Model):
    labels = model_labels(model)
    with open_text(path, "wt") as f:
        writer = csv.writer(f)
        writer.writerow(["word", *labels])
        for token, probs in model.items():
            writer.writerow([token, *(repr(float(probs.get(l, 0.0))) for l in labels)])


def load_naive_bayes_model(path: str) -> Model:
    model: Model = {}
    with open_text(path, "rt") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if not header or header[0] != "word":
            raise ValueError(f"Header non valido nel modello: {path}")
        labels = header[1:]
        for record in reader:
            if not record:
                continue
            model[record[0]] = {l: float(v) for l, v in zip(labels, record[1:])}
    return model
