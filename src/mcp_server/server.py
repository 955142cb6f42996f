"""MCP server exposing document search and retrieval tools."""

import asyncio
import json
import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from config.settings import get_settings
from src.api.handler import handle_search_request
from src.embedding.factory import get_embedding_provider
from src.retrieval.search_service import SearchService
from src.vectorstore.chroma_store import ChromaChunkStore
from src.vectorstore.chunk_store import ChunkStore

logger = logging.getLogger(__name__)

server = Server("tutor-search")
_store: ChunkStore | None = None
_service: SearchService | None = None


def _get_store() -> ChunkStore:
    global _store
    if _store is None:
        settings = get_settings()
        _store = ChromaChunkStore(path=str(settings.chroma_path))
    return _store


def _get_service() -> SearchService:
    global _service
    if _service is None:
        settings = get_settings()
        _service = SearchService.from_settings(
            store=_get_store(),
            embedding_provider=get_embedding_provider(settings),
            settings=settings,
        )
    return _service


@server.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(
            name="search_documents",
            description="Search a user's uploaded study documents with hybrid semantic and keyword ranking.",
            inputSchema={
                "type": "object",
                "properties": {
                    "userId": {"type": "string", "description": "Owner of the documents to search"},
                    "query": {"type": "string", "description": "Natural language search query"},
                    "maxResults": {"type": "integer", "default": 10, "description": "Number of results"},
                    "searchType": {
                        "type": "string",
                        "enum": ["semantic", "keyword", "hybrid"],
                        "default": "hybrid",
                    },
                    "filters": {
                        "type": "object",
                        "properties": {
                            "documentIds": {"type": "array", "items": {"type": "string"}},
                            "topics": {"type": "array", "items": {"type": "string"}},
                            "minRelevance": {"type": "number"},
                        },
                    },
                },
                "required": ["userId", "query"],
            },
        ),
        Tool(
            name="get_document",
            description="Retrieve one of a user's documents, reassembled from its chunks.",
            inputSchema={
                "type": "object",
                "properties": {
                    "userId": {"type": "string", "description": "Owner of the document"},
                    "document_id": {"type": "string", "description": "Document identifier"},
                },
                "required": ["userId", "document_id"],
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    if name == "search_documents":
        return await _handle_search_documents(arguments)
    elif name == "get_document":
        return await _handle_get_document(arguments)
    else:
        return [TextContent(type="text", text=f"Unknown tool: {name}")]


async def _handle_search_documents(arguments: dict, service: SearchService | None = None) -> list[TextContent]:
    service = service or _get_service()
    status, body = await asyncio.to_thread(handle_search_request, arguments, service)
    if status != 200:
        body = {**body, "status": status}
    return [TextContent(type="text", text=json.dumps(body))]


async def _handle_get_document(arguments: dict, store: ChunkStore | None = None) -> list[TextContent]:
    user_id = arguments.get("userId", "")
    doc_id = arguments.get("document_id", "")
    if not user_id or not doc_id:
        return [TextContent(type="text", text=json.dumps({"error": "not_found"}))]

    store = store or _get_store()
    chunks = await asyncio.to_thread(store.list_by_document, user_id, doc_id)

    if not chunks:
        return [TextContent(type="text", text=json.dumps({"error": "not_found"}))]

    metadata = chunks[0].metadata
    result = {
        "id": doc_id,
        "userId": user_id,
        "documentName": metadata.document_name or "",
        "topic": metadata.topic or "",
        "fullText": "\n\n".join(c.text for c in chunks),
        "chunkCount": len(chunks),
    }

    return [TextContent(type="text", text=json.dumps(result))]


async def main():
    async with stdio_server() as (read, write):
        await server.run(read, write, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
