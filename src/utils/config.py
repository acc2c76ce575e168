"""
Caricamento semplice di YAML in dict + override da CLI.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable
import yaml, argparse


def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def add_common_overrides(ap: argparse.ArgumentParser):
    ap.add_argument("--cfg", required=True, help="path yaml (es. configs/bpe.yaml)")
    ap.add_argument("--override", nargs="*", default=[], help="chiave=valore (facoltative)")


def _cast(v: str):
    # prova a castare numeri/bool
    if v.lower() in ("true", "false"):
        return v.lower() == "true"
    try:
        return float(v) if "." in v else int(v)
    except ValueError:
        return v


def apply_overrides(cfg: dict, kv_list: Iterable[str]):
    for kv in kv_list or []:
        if "=" not in kv:
            raise ValueError(f"Override non valido '{kv}': atteso chiave=valore")
        k, v = kv.split("=", 1)
        v = _cast(v)
        # supporto chiavi annidate a punto
        cur, *rest = k.split(".")
        node = cfg
        while rest:
            if not isinstance(node.get(cur), dict):
                node[cur] = {}
            node = node[cur]; cur, *rest = rest
        node[cur] = v
    return cfg
