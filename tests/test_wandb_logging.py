import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.tokenizer.train_bpe import MergeStep
from src.utils.wandb_logging import log_and_finish, log_merge_history, maybe_init_wandb


class DummyRun:
    def __init__(self):
        self.logged = []
        self.finished = False

    def log(self, payload, step=None):
        self.logged.append((payload, step))

    def finish(self):
        self.finished = True


class DummyWandbModule:
    def __init__(self):
        self.init_kwargs = []

    def init(self, **kwargs):
        self.init_kwargs.append(kwargs)
        return DummyRun()


def test_disabled_mode_skips_init(monkeypatch):
    dummy = DummyWandbModule()
    monkeypatch.setitem(sys.modules, "wandb", dummy)
    assert maybe_init_wandb(None) == (None, None)
    assert maybe_init_wandb({"mode": "disabled", "project": "p"}) == (None, None)
    assert dummy.init_kwargs == []


def test_init_drops_missing_keys(monkeypatch):
    dummy = DummyWandbModule()
    monkeypatch.setitem(sys.modules, "wandb", dummy)
    run, module = maybe_init_wandb({"mode": "offline", "run_name": "bpe"}, {"vocab_size": 60})
    assert isinstance(run, DummyRun)
    assert module is dummy
    assert dummy.init_kwargs[0] == {"mode": "offline", "name": "bpe", "config": {"vocab_size": 60}}


def test_log_merge_history_one_point_per_merge():
    run = DummyRun()
    history = [MergeStep(("a", "a"), 4, 53), MergeStep(("aa", "b</w>"), 2, 52)]
    assert log_merge_history(run, history) == 2
    assert run.logged == [
        ({"bpe/pair_count": 4, "bpe/vocab_size": 53}, 1),
        ({"bpe/pair_count": 2, "bpe/vocab_size": 52}, 2),
    ]
    assert log_merge_history(None, history) == 0


def test_log_and_finish_flattens_numeric_values():
    run = DummyRun()
    log_and_finish(run, {"bpe": {"merges": 3, "note": "x"}, "num_samples": 2}, step=4)
    assert run.logged == [({"bpe/merges": 3.0, "num_samples": 2.0}, 4)]
    assert run.finished is True
    log_and_finish(None, {"a": 1})
