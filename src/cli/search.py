"""CLI command for searching a user's documents."""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from config.settings import get_settings
from src.embedding.factory import get_embedding_provider
from src.models.enums import SearchType
from src.models.search import SearchFilters, SearchRequest
from src.retrieval.errors import DependencyFailure, InvalidRequest
from src.retrieval.search_service import SearchService
from src.vectorstore.chroma_store import ChromaChunkStore

console = Console()

MATCH_COLORS = {"both": "green", "semantic": "cyan", "keyword": "yellow"}


def search(
    query: Annotated[
        str,
        typer.Argument(help="What to look for in the uploaded documents"),
    ],
    user: Annotated[
        str,
        typer.Option("--user", "-u", help="User whose documents are searched"),
    ],
    max_results: Annotated[
        int | None,
        typer.Option("--max-results", "-n", help="Maximum number of results"),
    ] = None,
    search_type: Annotated[
        SearchType,
        typer.Option("--type", "-t", help="Search strategy", case_sensitive=False),
    ] = SearchType.HYBRID,
    document: Annotated[
        list[str] | None,
        typer.Option("--document", "-d", help="Restrict to these document ids"),
    ] = None,
    topic: Annotated[
        list[str] | None,
        typer.Option("--topic", help="Restrict to chunks whose topic contains one of these"),
    ] = None,
    min_relevance: Annotated[
        float | None,
        typer.Option("--min-relevance", help="Drop results scoring below this"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Search a user's uploaded documents."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()
    store = ChromaChunkStore(path=str(settings.chroma_path))

    if store.count == 0:
        console.print(
            "[bold red]No documents in the chunk store.[/bold red]\n"
            "Run 'tutorsearch ingest FILE --user USER' first."
        )
        raise typer.Exit(1)

    # Keyword search never embeds, so skip loading a model for it
    embedding_provider = None
    if search_type is not SearchType.KEYWORD:
        embedding_provider = get_embedding_provider(settings)

    service = SearchService.from_settings(store, embedding_provider, settings)
    request = SearchRequest(
        user_id=user,
        query=query,
        max_results=settings.tutor_default_max_results if max_results is None else max_results,
        search_type=search_type,
        filters=SearchFilters.from_lists(document, topic, min_relevance),
    )

    try:
        with console.status("[bold green]Searching..."):
            response = service.search(request)
    except InvalidRequest as e:
        console.print(f"[bold red]Invalid request:[/bold red] {e}")
        raise typer.Exit(2)
    except DependencyFailure as e:
        console.print(f"[bold red]Search failed:[/bold red] {e}")
        raise typer.Exit(1)

    if not response.results:
        console.print("No matching chunks.")
        return

    table = Table(title=f"{response.total_results} results ({response.search_type.value})")
    table.add_column("#", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Match")
    table.add_column("Document")
    table.add_column("Text", overflow="fold")

    for rank, result in enumerate(response.results, start=1):
        color = MATCH_COLORS.get(result.match_type.value, "white")
        snippet = result.text if len(result.text) <= 200 else result.text[:200] + "..."
        table.add_row(
            str(rank),
            f"{result.relevance_score:.4f}",
            f"[{color}]{result.match_type.value}[/{color}]",
            result.metadata.document_name or result.document_id,
            snippet,
        )

    console.print(table)
