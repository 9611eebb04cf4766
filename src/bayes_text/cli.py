"""Command-line interface for bayes-text.

Manages a model file on disk with rich terminal output using the
``click`` and ``rich`` libraries.

Usage::

    bayes-text init model.json spam ham
    bayes-text train model.json spam junk1.txt junk2.txt
    bayes-text classify model.json message.txt
    bayes-text info model.json --top 10
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .classifier import BayesClassifier, ClassificationResult
from .errors import BayesTextError

console = Console()

# File read/write failures are reported like library errors.
_CLI_ERRORS = (BayesTextError, UnicodeDecodeError, OSError)

_MODEL_PATH = click.Path(dir_okay=False, path_type=Path)
_EXISTING_MODEL = click.Path(exists=True, dir_okay=False, path_type=Path)
_EXISTING_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _fail(exc: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/] {exc}")
    sys.exit(1)


def _load(model_path: Path) -> BayesClassifier:
    try:
        return BayesClassifier.load(model_path)
    except _CLI_ERRORS as e:
        _fail(e)


@click.group()
@click.version_option(package_name="bayes-text")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Naive Bayes text classifier.

    Train categories from text files and classify new text against them.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@main.command()
@click.argument("model", type=_MODEL_PATH)
@click.argument("categories", nargs=-1, required=True)
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing model file.")
def init(model: Path, categories: tuple[str, ...], force: bool) -> None:
    """Create an empty model with the given categories.

    Example: bayes-text init model.json spam ham
    """
    if model.exists() and not force:
        _fail(FileExistsError(f"{model} already exists (use --force to overwrite)"))

    try:
        classifier = BayesClassifier(categories)
        classifier.save(model)
    except _CLI_ERRORS as e:
        _fail(e)

    console.print(f"Created [bold]{model}[/] with categories: {', '.join(classifier.categories)}")


@main.command("add-category")
@click.argument("model", type=_EXISTING_MODEL)
@click.argument("category")
def add_category(model: Path, category: str) -> None:
    """Add an untrained category to a model."""
    classifier = _load(model)
    try:
        classifier.add_category(category)
        classifier.save(model)
    except _CLI_ERRORS as e:
        _fail(e)

    console.print(f"Added category [cyan]{category.lower()}[/]")


@main.command()
@click.argument("model", type=_EXISTING_MODEL)
@click.argument("category")
@click.argument("files", nargs=-1, required=True, type=_EXISTING_FILE)
def train(model: Path, category: str, files: tuple[Path, ...]) -> None:
    """Train CATEGORY with the contents of each FILE.

    Example: bayes-text train model.json spam junk1.txt junk2.txt
    """
    classifier = _load(model)
    try:
        for file in files:
            classifier.train_file(category, file)
        classifier.save(model)
    except _CLI_ERRORS as e:
        _fail(e)

    console.print(f"Trained [cyan]{category.lower()}[/] with {len(files)} file(s)")


@main.command()
@click.argument("model", type=_EXISTING_MODEL)
@click.argument("category")
@click.argument("files", nargs=-1, required=True, type=_EXISTING_FILE)
def untrain(model: Path, category: str, files: tuple[Path, ...]) -> None:
    """Remove the contents of each FILE from CATEGORY."""
    classifier = _load(model)
    try:
        for file in files:
            classifier.untrain_file(category, file)
        classifier.save(model)
    except _CLI_ERRORS as e:
        _fail(e)

    console.print(f"Untrained [cyan]{category.lower()}[/] with {len(files)} file(s)")


@main.command()
@click.argument("model", type=_EXISTING_MODEL)
@click.argument("file", type=_EXISTING_FILE)
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def classify(model: Path, file: Path, output: str) -> None:
    """Classify the contents of FILE.

    Example: bayes-text classify model.json message.txt
    """
    classifier = _load(model)
    try:
        result = classifier.classify_result(file.read_text(encoding="utf-8"))
    except _CLI_ERRORS as e:
        _fail(e)

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _render_result(result, file.name)


@main.command()
@click.argument("model", type=_EXISTING_MODEL)
@click.option("--top", "-n", default=5, show_default=True,
              help="Most informative features to list per category.")
def info(model: Path, top: int) -> None:
    """Show per-category training statistics."""
    classifier = _load(model)

    table = Table(title=f"Model — {model.name}", show_lines=True)
    table.add_column("Category", style="cyan")
    table.add_column("Documents", justify="right")
    table.add_column("Words", justify="right")
    table.add_column("Features", justify="right")
    table.add_column("Top features", style="white", max_width=50)

    for name in classifier.categories:
        top_features = classifier.most_informative_features(name, top_n=top)
        table.add_row(
            name,
            str(classifier.document_count(name)),
            str(classifier.word_count(name)),
            str(len(classifier.features(name))),
            ", ".join(repr(f) for f, _ in top_features) or "-",
        )

    console.print(table)
    console.print(f"[dim]Total words: {classifier.total_words}[/]")


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_result(result: ClassificationResult, filename: str) -> None:
    """Render a ClassificationResult as a panel and score table."""
    console.print()
    console.print(Panel(
        f"[bold]{result.label}[/] ({result.confidence:.0%})",
        title=f"Classification: {filename}",
        border_style="blue",
    ))

    table = Table(show_lines=False)
    table.add_column("Category", style="cyan")
    table.add_column("Log score", justify="right")
    table.add_column("Probability", justify="right")

    ranked = sorted(result.scores, key=result.scores.get, reverse=True)
    for name in ranked:
        style = "bold green" if name == result.label else ""
        table.add_row(
            name,
            f"{result.scores[name]:.4f}",
            f"{result.probabilities[name]:.2%}",
            style=style,
        )

    console.print(table)
    console.print()


if __name__ == "__main__":
    main()
