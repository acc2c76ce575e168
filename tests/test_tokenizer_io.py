import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.tokenizer.tokenizer_io import (
    ENCODING_HEADER,
    VOCAB_HEADER,
    TokWrapper,
    load_bpe_encoding,
    load_bpe_vocab,
    parse_csv_to_lines,
    parse_csv_to_tokens,
    parse_txt_to_lines,
    parse_txt_to_tokens,
    read_token_lines,
    save_bpe_encoding,
    save_bpe_vocab,
)

CSV_TEXT = 'target,text\na,"Test, this is."\nb,second line\n'


def test_parse_csv_uses_second_column(tmp_path):
    path = tmp_path / "test.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    assert parse_csv_to_tokens(str(path)) == [["test", "this", "is"], ["second", "line"]]
    assert parse_csv_to_lines(str(path)) == ["Test, this is.", "second line"]


def test_parse_txt_uses_first_column(tmp_path):
    path = tmp_path / "corpus.txt"
    path.write_text("header\nHello world\nfoo bar baz\n", encoding="utf-8")
    assert parse_txt_to_tokens(str(path)) == [["hello", "world"], ["foo", "bar", "baz"]]
    assert parse_txt_to_lines(str(path)) == ["Hello world", "foo bar baz"]


def test_vocab_roundtrip_with_header(tmp_path):
    vocab = ["a", ",", "lo", "low</w>", '"']
    path = tmp_path / "vocab" / "bpe.csv"
    save_bpe_vocab(str(path), vocab)
    assert path.read_text(encoding="utf-8").splitlines()[0] == VOCAB_HEADER
    assert load_bpe_vocab(str(path)) == vocab


def test_vocab_roundtrip_gzip(tmp_path):
    path = tmp_path / "bpe.csv.gz"
    save_bpe_vocab(str(path), ["x", "y</w>"])
    assert load_bpe_vocab(str(path)) == ["x", "y</w>"]


def test_encoding_is_one_token_per_record(tmp_path):
    path = tmp_path / "encoded.csv"
    save_bpe_encoding(str(path), [["lo", "w</w>"], ["a"]])
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == [ENCODING_HEADER, "lo", "w</w>", "a"]
    assert load_bpe_encoding(str(path)) == ["lo", "w</w>", "a"]


def test_missing_file_propagates_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_csv_to_tokens(str(tmp_path / "nope.csv"))


def test_unknown_format_rejected(tmp_path):
    with pytest.raises(ValueError):
        read_token_lines(str(tmp_path / "x.csv"), fmt="parquet")


def test_tok_wrapper_ids(tmp_path):
    path = tmp_path / "vocab.csv"
    save_bpe_vocab(str(path), ["l", "o", "w", "lo", "low</w>"])
    tw = TokWrapper(str(path))
    assert tw.tokenize("low") == ["low</w>"]
    assert tw.tokenize("lox") == ["lo", "<unk></w>"]
    assert tw.encode("low lox") == [4, 3, 5]
    assert tw.unk_id == 5
    assert tw.vocab_size() == 6
    assert tw.token_to_id("zzz") is None


def test_tok_wrapper_rejects_empty_vocab(tmp_path):
    path = tmp_path / "vocab.csv"
    save_bpe_vocab(str(path), [])
    with pytest.raises(ValueError):
        TokWrapper(str(path))
