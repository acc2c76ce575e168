import argparse, yaml
from src.tokenizer.train_bpe import train_bpe

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default="configs/bpe.yaml")
    args = ap.parse_args()
    with open(args.config, "r", encoding="utf-8") as f:
        C = yaml.safe_load(f)
    train_bpe(
        corpus_path=C["corpus"],
        out_path=C["vocab_out"],
        vocab_size=int(C.get("vocab_size", 52)),
        fmt=C.get("format", "csv"),
        show_progress=bool(C.get("show_progress", True)),
    )

if __name__ == "__main__":
    main()
