"""Similarity CLI commands: edit distances and "did you mean" suggestions."""

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from pyfulmen.cli.app import app
from pyfulmen.foundry.exit_codes import ExitCode
from pyfulmen.similarity import (
    Algorithm,
    SimilarityError,
    SuggestOptions,
    distance_with_algorithm,
    score_with_algorithm,
    suggest,
)

console = Console()

similarity_app = typer.Typer(help="String similarity commands")
app.add_typer(similarity_app, name="similarity")


@similarity_app.command()
def distance(
    a: Annotated[str, typer.Argument(help="First string")],
    b: Annotated[str, typer.Argument(help="Second string")],
    algorithm: Annotated[
        Algorithm, typer.Option("--algorithm", "-a", help="Distance algorithm")
    ] = Algorithm.LEVENSHTEIN,
):
    """Print the edit distance and normalized score between two strings."""
    try:
        edits = distance_with_algorithm(a, b, algorithm)
        similarity = score_with_algorithm(a, b, algorithm)
    except SimilarityError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_INVALID_ARGUMENT)

    typer.echo(f"distance: {edits}")
    typer.echo(f"score: {similarity:.4f}")


@similarity_app.command("suggest")
def suggest_command(
    input: Annotated[str, typer.Argument(help="The value to match")],
    candidates: Annotated[list[str], typer.Argument(help="Known valid values")],
    min_score: float = typer.Option(0.6, "--min-score", help="Minimum score to report"),
    max_suggestions: int = typer.Option(3, "--max", help="Maximum number of suggestions"),
    algorithm: Annotated[
        Algorithm, typer.Option("--algorithm", "-a", help="Scoring algorithm")
    ] = Algorithm.LEVENSHTEIN,
):
    """Rank candidates by similarity to INPUT."""
    try:
        options = SuggestOptions(
            min_score=min_score, max_suggestions=max_suggestions, algorithm=algorithm
        )
        suggestions = suggest(input, candidates, options)
    except (ValueError, SimilarityError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_INVALID_ARGUMENT)

    if not suggestions:
        console.print("[yellow]No suggestions.[/yellow]")
        return

    table = Table(title=f"Suggestions for {input!r}")
    table.add_column("Value", style="cyan")
    table.add_column("Score", justify="right")
    for suggestion in suggestions:
        table.add_row(suggestion.value, f"{suggestion.score:.4f}")
    console.print(table)
