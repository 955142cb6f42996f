"""Tutor search CLI entry point."""

import typer

from src.cli.ingest import ingest
from src.cli.search import search

app = typer.Typer(
    name="tutorsearch",
    help="Tutor document search - hybrid semantic and keyword search over a student's uploaded study material.",
)

app.command(name="search")(search)
app.command(name="ingest")(ingest)


if __name__ == "__main__":
    app()
