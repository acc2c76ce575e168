"""Orchestratore di valutazione del classificatore Naive Bayes."""
from __future__ import annotations

import os
from typing import Dict, List, Mapping, Optional

from src.classifier.naive_bayes import (
    NOT_TARGET,
    LineTarget,
    Model,
    bayes_preprocess,
    generate_naive_bayes_model,
    in_class,
    load_naive_bayes_model,
    parse_csv_to_linetarget,
    predict,
)
from src.eval.metrics import compute_accuracy
from src.utils.logging import get_logger

logger = get_logger("evaluate")


def train_model_from_config(config: Mapping[str, object]) -> Model:
    if "train_file" not in config:
        raise ValueError("Il config di training richiede 'train_file'.")
    lines = parse_csv_to_linetarget(str(config["train_file"]))
    target = config.get("target")
    occurrence, num_words = bayes_preprocess(lines, target=str(target) if target else None)
    return generate_naive_bayes_model(occurrence, num_words, alpha=float(config.get("alpha", 0.0)))


def _references(lines: List[LineTarget], target: Optional[str]) -> List[str]:
    if target is None:
        return [line.target for line in lines]
    return [target if line.target == target else NOT_TARGET for line in lines]


def evaluate_from_config(config: Mapping[str, object]) -> Dict[str, object]:
    if "test_file" not in config:
        raise ValueError("Il config di valutazione richiede 'test_file'.")

    if config.get("model_file"):
        model = load_naive_bayes_model(str(config["model_file"]))
    else:
        model = train_model_from_config(config)

    target = config.get("target")
    target = str(target) if target else None
    lines = parse_csv_to_linetarget(str(config["test_file"]))
    if target is None:
        preds = [predict(model, line.tokens) or "" for line in lines]
    else:
        preds = [target if in_class(model, line.tokens, target) else NOT_TARGET for line in lines]
    refs = _references(lines, target)

    metrics = compute_accuracy(preds, refs)
    correct = sum(1 for p, r in zip(preds, refs) if p == r)
    report: Dict[str, object] = {
        "test_file": os.path.abspath(str(config["test_file"])),
        "target": target,
        "num_samples": len(lines),
        "correct": correct,
        "metrics": metrics,
    }
    logger.info(f"Evaluation: {correct}/{len(lines)} correct ({metrics['accuracy']:.2f}%)")
    return report
