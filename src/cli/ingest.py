"""CLI command for ingesting a text document."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from config.settings import get_settings
from src.embedding.factory import get_embedding_provider
from src.ingestion.pipeline import ingest_document
from src.vectorstore.chroma_store import ChromaChunkStore

console = Console()


def ingest(
    file: Annotated[
        Path,
        typer.Argument(help="Extracted text file to ingest", exists=True, dir_okay=False),
    ],
    user: Annotated[
        str,
        typer.Option("--user", "-u", help="User who owns the document"),
    ],
    document_id: Annotated[
        str | None,
        typer.Option("--document-id", help="Document id (defaults to the file stem)"),
    ] = None,
    topic: Annotated[
        str | None,
        typer.Option("--topic", help="Topic tag attached to every chunk"),
    ] = None,
    chunk_size: Annotated[
        int | None,
        typer.Option("--chunk-size", help="Target chunk size in tokens"),
    ] = None,
    chunk_overlap: Annotated[
        int | None,
        typer.Option("--chunk-overlap", help="Overlap between chunks in tokens"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Chunk, embed and store a document for a user."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()
    store = ChromaChunkStore(path=str(settings.chroma_path))
    embedding_provider = get_embedding_provider(settings)

    text = file.read_text(encoding="utf-8")
    if not text.strip():
        console.print(f"[bold red]{file} is empty.[/bold red]")
        raise typer.Exit(1)

    with console.status(f"[bold green]Ingesting {file.name}..."):
        result = ingest_document(
            text,
            document_id=document_id or file.stem,
            user_id=user,
            store=store,
            embedding_provider=embedding_provider,
            chunk_size=chunk_size or settings.tutor_chunk_size,
            chunk_overlap=chunk_overlap if chunk_overlap is not None else settings.tutor_chunk_overlap,
            topic=topic,
            document_name=file.name,
        )

    if result["skipped"]:
        console.print(f"[yellow]Document {result['document_id']} already ingested; skipped.[/yellow]")
        return

    console.print("[bold green]Ingestion complete![/bold green]")
    console.print(f"  Document: {result['document_id']}")
    console.print(f"  Chunks stored: {result['chunks_stored']}")
    console.print(f"  Total in store: {store.count} chunks")
