# src/cli.py
import argparse
from pathlib import Path

from src.classifier.naive_bayes import (
    in_class,
    load_naive_bayes_model,
    predict,
    save_naive_bayes_model,
)
from src.eval.evaluate import evaluate_from_config, train_model_from_config
from src.eval.metrics import compute_encoding_metrics
from src.tokenizer.encoder import UNK_TOKEN, BpeEncoder
from src.tokenizer.tokenize import tokenize_line_alphas_lowercase
from src.tokenizer.tokenizer_io import (
    load_bpe_vocab,
    read_token_lines,
    save_bpe_encoding,
    save_bpe_vocab,
)
from src.tokenizer.train_bpe import BpeTrainer
from src.utils.config import add_common_overrides, apply_overrides, load_yaml
from src.utils.io import write_json
from src.utils.wandb_logging import log_and_finish, log_merge_history, maybe_init_wandb


def _load_cfg(args) -> dict:
    cfg = load_yaml(args.cfg)
    return apply_overrides(cfg, args.override)   # es: --override vocab_size=500


def _require(cfg: dict, *keys):
    missing = [k for k in keys if not cfg.get(k)]
    if missing:
        raise ValueError(f"Config incompleto, mancano: {missing}")


def cmd_bpe_train(args):
    cfg = _load_cfg(args)
    _require(cfg, "corpus", "vocab_out")
    vocab_size = int(cfg.get("vocab_size", 52))

    token_lines = read_token_lines(cfg["corpus"], cfg.get("format", "csv"))
    print(f"[bpe] corpus: {len(token_lines)} lines from {cfg['corpus']}")

    wandb_run, _ = maybe_init_wandb(cfg.get("wandb"), cfg)
    trainer = BpeTrainer(vocab_size=vocab_size, show_progress=bool(cfg.get("show_progress", True)))
    vocab = trainer.fit(token_lines)
    save_bpe_vocab(cfg["vocab_out"], vocab)
    print(f"[bpe] {len(trainer.merges)} merges, vocab size {len(vocab)} -> {cfg['vocab_out']}")

    logged = log_merge_history(wandb_run, trainer.history)
    log_and_finish(
        wandb_run,
        {"bpe": {"merges": len(trainer.merges), "final_vocab_size": len(vocab)}},
        step=logged + 1,
    )


def cmd_bpe_encode(args):
    cfg = _load_cfg(args)
    _require(cfg, "vocab_out", "encode_input", "encode_out")
    vocab = load_bpe_vocab(cfg["vocab_out"])
    unk = cfg.get("unk_token", UNK_TOKEN)

    lines = read_token_lines(cfg["encode_input"], cfg.get("encode_format", cfg.get("format", "csv")))
    encoded = BpeEncoder(vocab, unk_token=unk).encode(lines)
    save_bpe_encoding(cfg["encode_out"], encoded)

    metrics = compute_encoding_metrics(encoded, lines, unk)
    print(f"[bpe] encoded {len(encoded)} lines -> {cfg['encode_out']}")
    print(f"  coverage={metrics['coverage']:.2f}%  tokens/word={metrics['tokens_per_word']:.3f}")


def cmd_bayes_train(args):
    cfg = _load_cfg(args)
    _require(cfg, "train_file", "model_out")
    model = train_model_from_config(cfg)
    save_naive_bayes_model(cfg["model_out"], model)
    print(f"[bayes] model with {len(model)} tokens saved -> {cfg['model_out']}")


def _print_eval_summary(report):
    print("=== evaluation ===")
    target = report.get("target")
    if target:
        print(f"  target: {target}")
    print(f"  correct: {report['correct']}")
    print(f"  total: {report['num_samples']}")
    print(f"  accuracy: {report['metrics']['accuracy']:.2f}%")


def cmd_bayes_evaluate(args):
    cfg = _load_cfg(args)
    if getattr(args, "output", None):
        cfg["output_json"] = args.output
    wandb_run, _ = maybe_init_wandb(cfg.get("wandb"), cfg)

    report = evaluate_from_config(cfg)

    out = cfg.get("output_json")
    if out:
        write_json(out, report)
        print(f"[evaluate] report salvato in {Path(out).resolve()}")

    log_and_finish(wandb_run, {"metrics": report["metrics"], "num_samples": report["num_samples"]})
    _print_eval_summary(report)


def cmd_classify(args):
    if not args.input and not args.input_file:
        raise ValueError("Specifica --input o --input-file per la classificazione")
    text = args.input or ""
    if args.input_file:
        with open(args.input_file, "r", encoding="utf-8") as f:
            text = f.read().strip()

    model = load_naive_bayes_model(args.model)
    tokens = tokenize_line_alphas_lowercase(text)
    if args.target:
        print("yes" if in_class(model, tokens, args.target) else "no")
    else:
        label = predict(model, tokens)
        print(label if label is not None else "")


def main(argv=None):
    ap = argparse.ArgumentParser(prog="bpebayes")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_bpe = sub.add_parser("bpe-train")
    add_common_overrides(ap_bpe)   # --cfg ... --override k=v ...
    ap_bpe.set_defaults(func=cmd_bpe_train)

    ap_enc = sub.add_parser("bpe-encode")
    add_common_overrides(ap_enc)
    ap_enc.set_defaults(func=cmd_bpe_encode)

    ap_nb = sub.add_parser("bayes-train")
    add_common_overrides(ap_nb)
    ap_nb.set_defaults(func=cmd_bayes_train)

    ap_eval = sub.add_parser("bayes-evaluate")
    add_common_overrides(ap_eval)
    ap_eval.add_argument("--output", help="Salva il report JSON in questo path")
    ap_eval.set_defaults(func=cmd_bayes_evaluate)

    ap_cls = sub.add_parser("classify")
    ap_cls.add_argument("--model", required=True)
    ap_cls.add_argument("--target", help="Rispondi yes/no rispetto a questa etichetta")
    ap_cls.add_argument("--input", help="Testo da classificare")
    ap_cls.add_argument("--input-file", help="Path file contenente il testo")
    ap_cls.set_defaults(func=cmd_classify)

    args = ap.parse_args(argv)
    args.func(args)

if __name__ == "__main__":
    main()
