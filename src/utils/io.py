"""
Funzioni di I/O semplici per file di testo/CSV (supporto gzip trasparente).
"""

from __future__ import annotations
import gzip, json, os
from typing import Any


def open_text(path: str, mode: str = "rt", encoding: str = "utf-8"):
    """Apre file di testo o .gz trasparente (newline='' come richiesto dal modulo csv)."""
    if "w" in mode or "a" in mode:
        ensure_parent(path)
    if str(path).endswith(".gz"):
        return gzip.open(path, mode, encoding=encoding, newline="")
    return open(path, mode.replace("t", ""), encoding=encoding, newline="")


def ensure_parent(path: str):
    os.makedirs(os.path.dirname(str(path)) or ".", exist_ok=True)


def write_json(path: str, payload: Any):
    ensure_parent(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
