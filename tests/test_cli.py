"""Tests for the bayes-text command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from bayes_text.classifier import BayesClassifier
from bayes_text.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def model_path(runner: CliRunner, tmp_path: Path) -> Path:
    """An initialized, untrained spam/ham model file."""
    path = tmp_path / "model.json"
    result = runner.invoke(main, ["init", str(path), "spam", "ham"])
    assert result.exit_code == 0, result.output
    return path


@pytest.fixture
def trained_model(runner: CliRunner, model_path: Path, text_files: dict[str, Path]) -> Path:
    for category, file in text_files.items():
        result = runner.invoke(main, ["train", str(model_path), category, str(file)])
        assert result.exit_code == 0, result.output
    return model_path


class TestInit:
    def test_creates_model(self, model_path: Path) -> None:
        model = BayesClassifier.load(model_path)
        assert model.categories == ["spam", "ham"]

    def test_refuses_to_overwrite(self, runner: CliRunner, model_path: Path) -> None:
        result = runner.invoke(main, ["init", str(model_path), "other"])
        assert result.exit_code == 1
        assert "Error" in result.output
        assert BayesClassifier.load(model_path).categories == ["spam", "ham"]

    def test_force_overwrites(self, runner: CliRunner, model_path: Path) -> None:
        result = runner.invoke(main, ["init", "--force", str(model_path), "other"])
        assert result.exit_code == 0
        assert BayesClassifier.load(model_path).categories == ["other"]


class TestTraining:
    def test_train_updates_model(self, trained_model: Path) -> None:
        model = BayesClassifier.load(trained_model)
        assert model.document_count("spam") == 1
        assert model.document_count("ham") == 1
        assert model.feature_count("spam", "cheap") == 2

    def test_train_unknown_category(
        self, runner: CliRunner, model_path: Path, text_files: dict[str, Path]
    ) -> None:
        result = runner.invoke(main, ["train", str(model_path), "eggs", str(text_files["spam"])])
        assert result.exit_code == 1
        assert "No such category" in result.output

    def test_untrain(self, runner: CliRunner, trained_model: Path, text_files: dict[str, Path]) -> None:
        result = runner.invoke(main, ["untrain", str(trained_model), "spam", str(text_files["spam"])])
        assert result.exit_code == 0, result.output
        model = BayesClassifier.load(trained_model)
        assert model.document_count("spam") == 0
        assert model.features("spam") == {}

    def test_add_category(self, runner: CliRunner, model_path: Path) -> None:
        result = runner.invoke(main, ["add-category", str(model_path), "Eggs"])
        assert result.exit_code == 0, result.output
        assert BayesClassifier.load(model_path).categories == ["spam", "ham", "eggs"]

    def test_add_duplicate_category(self, runner: CliRunner, model_path: Path) -> None:
        result = runner.invoke(main, ["add-category", str(model_path), "SPAM"])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_non_utf8_training_file(
        self, runner: CliRunner, model_path: Path, tmp_path: Path
    ) -> None:
        bad = tmp_path / "latin1.txt"
        bad.write_bytes(b"caf\xe9 latin1 text")
        result = runner.invoke(main, ["train", str(model_path), "spam", str(bad)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error" in result.output
        assert BayesClassifier.load(model_path).document_count("spam") == 0


class TestClassify:
    def test_json_output(self, runner: CliRunner, trained_model: Path, tmp_path: Path) -> None:
        query = tmp_path / "query.txt"
        query.write_text("buy cheap pills", encoding="utf-8")
        result = runner.invoke(main, ["classify", str(trained_model), str(query), "-o", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["label"] == "spam"
        assert set(data["scores"]) == {"spam", "ham"}

    def test_rich_output(self, runner: CliRunner, trained_model: Path, tmp_path: Path) -> None:
        query = tmp_path / "query.txt"
        query.write_text("meeting agenda", encoding="utf-8")
        result = runner.invoke(main, ["classify", str(trained_model), str(query)])
        assert result.exit_code == 0, result.output
        assert "ham" in result.output

    def test_corrupt_model(self, runner: CliRunner, tmp_path: Path, text_files: dict[str, Path]) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text('{"format": "nope"}', encoding="utf-8")
        result = runner.invoke(main, ["classify", str(bad), str(text_files["spam"])])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_non_utf8_query_file(self, runner: CliRunner, trained_model: Path, tmp_path: Path) -> None:
        bad = tmp_path / "latin1.txt"
        bad.write_bytes(b"caf\xe9 latin1 text")
        result = runner.invoke(main, ["classify", str(trained_model), str(bad)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error" in result.output


class TestInfo:
    def test_lists_categories(self, runner: CliRunner, trained_model: Path) -> None:
        result = runner.invoke(main, ["info", str(trained_model), "--top", "3"])
        assert result.exit_code == 0, result.output
        assert "spam" in result.output
        assert "ham" in result.output
        assert "Total words" in result.output
