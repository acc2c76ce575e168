"""Logging opzionale su Weights & Biases per training BPE e valutazione.

``maybe_init_wandb`` ritorna ``(None, None)`` quando il logging è spento,
così la CLI passa la run agli helper senza controlli aggiuntivi.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence, Tuple

from src.tokenizer.train_bpe import MergeStep


def maybe_init_wandb(
    wandb_cfg: Mapping[str, Any] | None,
    run_config: Mapping[str, Any] | None = None,
) -> Tuple[Any, Any]:
    wandb_cfg = wandb_cfg or {}
    mode = str(wandb_cfg.get("mode") or "disabled")
    if mode.lower() == "disabled":
        return None, None

    try:
        import wandb as wandb_module  # type: ignore
    except ImportError as exc:  # pragma: no cover - dipende dall'ambiente
        print(f"[wandb] library not available ({exc}); skipping logging.")
        return None, None

    kwargs = {
        "project": wandb_cfg.get("project"),
        "name": wandb_cfg.get("run_name"),
        "config": dict(run_config) if run_config is not None else None,
    }
    kwargs = {k: v for k, v in kwargs.items() if v is not None}
    try:
        return wandb_module.init(mode=mode, **kwargs), wandb_module
    except Exception as exc:  # pragma: no cover - dipende da wandb
        print(f"[wandb] init failed ({exc}); retrying in offline mode.")
    try:
        return wandb_module.init(mode="offline", **kwargs), wandb_module
    except Exception as exc:  # pragma: no cover
        print(f"[wandb] offline fallback failed ({exc}); disabling logging.")
        return None, None


def log_merge_history(run, history: Sequence[MergeStep]) -> int:
    """Un punto per merge: frequenza della coppia e dimensione del vocabolario.

    Ritorna il numero di step loggati.
    """
    if run is None:
        return 0
    for i, step in enumerate(history, start=1):
        try:
            run.log({"bpe/pair_count": step.count, "bpe/vocab_size": step.vocab_size}, step=i)
        except Exception as exc:  # pragma: no cover - solo logging
            print(f"[wandb] log() failed: {exc}")
            return i - 1
    return len(history)


def _flatten(payload: Mapping[str, Any], prefix: str = "") -> Dict[str, float]:
    # {"bpe": {"merges": 3}} -> {"bpe/merges": 3.0}; i valori non numerici si scartano
    flat: Dict[str, float] = {}
    for key, value in payload.items():
        name = f"{prefix}/{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, name))
        elif isinstance(value, (int, float)):
            flat[name] = float(value)
    return flat


def log_and_finish(run, payload: Mapping[str, Any], step: int | None = None):
    if run is None:
        return
    try:
        run.log(_flatten(payload), step=step)
    except Exception as exc:  # pragma: no cover - solo logging
        print(f"[wandb] log() failed: {exc}")
    try:
        run.finish()
    except Exception as exc:  # pragma: no cover
        print(f"[wandb] finish() failed: {exc}")


__all__ = ["maybe_init_wandb", "log_merge_history", "log_and_finish"]
