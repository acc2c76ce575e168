import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.classifier.naive_bayes import (
    NOT_TARGET,
    LineTarget,
    bayes_preprocess,
    class_scores,
    evaluate,
    generate_naive_bayes_model,
    in_class,
    load_naive_bayes_model,
    model_labels,
    naive_bayes_in_class,
    naive_bayes_in_class_str,
    naive_bayes_matches_target,
    parse_csv_to_linetarget,
    predict,
    save_naive_bayes_model,
)

CSV_TEXT = 'target,text\na,"Test, this is."\nb,second line\n'


@pytest.fixture
def lines(tmp_path):
    path = tmp_path / "test.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return parse_csv_to_linetarget(str(path))


def test_parse_csv_to_linetarget(lines):
    assert [l.target for l in lines] == ["a", "b"]
    assert lines[0].tokens == ["test", "this", "is"]
    assert lines[1].tokens == ["second", "line"]


def test_preprocess_binary_target(lines):
    occurrence, num_words = bayes_preprocess(lines, target="a")
    assert len(occurrence) == 5
    assert num_words["a"] == 3
    assert num_words[NOT_TARGET] == 2
    for word in ("test", "this", "is"):
        assert occurrence[word]["a"] == 1
        assert occurrence[word][NOT_TARGET] == 0
    for word in ("second", "line"):
        assert occurrence[word][NOT_TARGET] == 1
        assert occurrence[word]["a"] == 0


def test_preprocess_keeps_every_label(lines):
    _, num_words = bayes_preprocess(lines)
    assert dict(num_words) == {"a": 3, "b": 2}


def test_model_probabilities(lines):
    model = generate_naive_bayes_model(*bayes_preprocess(lines))
    assert model["test"]["a"] == pytest.approx(1 / 3)
    assert model["test"]["b"] == 0.0
    assert model["line"]["b"] == pytest.approx(1 / 2)


def test_laplace_smoothing(lines):
    model = generate_naive_bayes_model(*bayes_preprocess(lines), alpha=1.0)
    assert model["test"]["b"] == pytest.approx(1 / 7)
    assert model["test"]["a"] == pytest.approx(2 / 8)


def test_prediction(lines):
    model = generate_naive_bayes_model(*bayes_preprocess(lines))
    assert predict(model, ["test", "this"]) == "a"
    assert predict(model, ["second"]) == "b"
    # nessun token noto: score neutri, vince la prima etichetta
    assert class_scores(model, ["unknown"]) == {"a": 0.0, "b": 0.0}
    assert predict(model, ["unknown"]) == "a"
    assert predict({}, ["test"]) is None


def test_in_class_helpers(lines):
    model = generate_naive_bayes_model(*bayes_preprocess(lines, target="a"))
    assert naive_bayes_in_class(model, lines[0], "a")
    assert not naive_bayes_in_class(model, lines[1], "a")
    assert naive_bayes_in_class_str(model, "Is this a TEST?", "a")
    assert naive_bayes_matches_target("a", model, lines[1])
    assert naive_bayes_matches_target("a", model, LineTarget(tokens=["test"], target="a"))


@pytest.mark.parametrize("rows", [
    [("a", ["x"]), ("b", ["y"])],
    [("b", ["y"]), ("a", ["x"])],
])
def test_ties_do_not_depend_on_row_order(rows):
    data = [LineTarget(tokens=tokens, target=label) for label, tokens in rows]
    binary = generate_naive_bayes_model(*bayes_preprocess(data, target="a"))
    assert model_labels(binary) == [NOT_TARGET, "a"]
    # nessun token noto: parità, quindi fuori classe
    assert not in_class(binary, ["zzz"], "a")
    assert in_class(binary, ["x"], "a")
    assert evaluate(binary, [LineTarget(tokens=["zzz"], target="a")], target="a")["correct"] == 0
    multi = generate_naive_bayes_model(*bayes_preprocess(data))
    assert predict(multi, ["zzz"]) == "a"


def test_in_class_all_minus_inf_is_not_in_class():
    model = {"x": {"a": 0.0, "b": 0.0}}
    assert class_scores(model, ["x"]) == {"a": float("-inf"), "b": float("-inf")}
    assert not in_class(model, ["x"], "a")
    assert not in_class(model, ["x"], "missing")


def test_evaluate_reports_accuracy(lines):
    model = generate_naive_bayes_model(*bayes_preprocess(lines))
    assert evaluate(model, lines) == {"correct": 2, "total": 2, "accuracy": 1.0}
    assert evaluate(model, []) == {"correct": 0, "total": 0, "accuracy": 0.0}


def test_model_roundtrip(tmp_path, lines):
    model = generate_naive_bayes_model(*bayes_preprocess(lines), alpha=0.5)
    path = tmp_path / "models" / "nb.csv"
    save_naive_bayes_model(str(path), model)
    assert path.read_text(encoding="utf-8").splitlines()[0] == "word,a,b"
    loaded = load_naive_bayes_model(str(path))
    assert set(loaded) == set(model)
    for token, probs in model.items():
        assert loaded[token] == pytest.approx(probs)


def test_load_rejects_bad_header(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("token,x\nfoo,1.0\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_naive_bayes_model(str(path))
