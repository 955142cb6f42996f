"""Recursive text chunker with section and position metadata."""

import re

from src.models.chunk import Chunk, ChunkMetadata

CHARS_PER_TOKEN = 4

# Coarsest first: paragraphs, lines, sentences, words
SEPARATORS = ("\n\n", "\n", ". ", " ")

# Section headers in extracted study material
SECTION_PATTERNS = [
    re.compile(r"^#{1,3}\s+(.+)"),
    re.compile(r"^((?:Chapter|Section|Unit|Lesson)\s+\d+[.:]?\s*.*)$", re.IGNORECASE),
]

PAGE_BREAK = "\f"


def detect_section_header(line: str) -> str | None:
    """Return the header title if ``line`` is a section header, else None."""
    stripped = line.strip()
    for pattern in SECTION_PATTERNS:
        match = pattern.match(stripped)
        if match:
            return match.group(1).strip()
    return None


def _estimate_tokens(text: str) -> int:
    return max(1, len(text) // CHARS_PER_TOKEN)


def _split_recursive(
    text: str,
    chunk_size: int,
    chunk_overlap: int,
    separators: tuple[str, ...] = SEPARATORS,
) -> list[str]:
    """Split text into pieces of at most ``chunk_size`` tokens.

    Pieces still too large after one separator are split again on the next
    finer one. Text with no separator left is cut into fixed-width windows.
    """
    if _estimate_tokens(text) <= chunk_size:
        return [text]

    if not separators:
        width = chunk_size * CHARS_PER_TOKEN
        windows = (text[i:i + width].strip() for i in range(0, len(text), width))
        return [window for window in windows if window]

    separator, finer = separators[0], separators[1:]
    pieces = text.split(separator)
    if len(pieces) == 1:
        return _split_recursive(text, chunk_size, chunk_overlap, finer)

    chunks = []
    run = []
    for piece in pieces:
        if _estimate_tokens(piece) <= chunk_size:
            run.append(piece)
            continue
        # Runs of small pieces never straddle an oversized one
        chunks.extend(_merge_pieces(run, separator, chunk_size, chunk_overlap))
        run = []
        chunks.extend(_split_recursive(piece, chunk_size, chunk_overlap, finer))
    chunks.extend(_merge_pieces(run, separator, chunk_size, chunk_overlap))
    return chunks


def _merge_pieces(
    pieces: list[str],
    separator: str,
    chunk_size: int,
    chunk_overlap: int,
) -> list[str]:
    """Greedily pack pieces into chunks, seeding each new chunk with overlap."""
    chunks = []
    buffer = ""

    for piece in pieces:
        joined = f"{buffer}{separator}{piece}".strip() if buffer else piece.strip()
        if buffer and _estimate_tokens(joined) > chunk_size:
            chunks.append(buffer.strip())
            tail = _get_overlap_text(buffer, chunk_overlap)
            seeded = f"{tail}{separator}{piece}".strip() if tail else ""
            if not seeded or _estimate_tokens(seeded) > chunk_size:
                seeded = piece.strip()
            buffer = seeded
        else:
            buffer = joined

    if buffer.strip():
        chunks.append(buffer.strip())
    return chunks


def _get_overlap_text(text: str, overlap_tokens: int) -> str:
    """Trailing ``overlap_tokens`` worth of text, starting on a word boundary."""
    if overlap_tokens <= 0:
        return ""
    window = overlap_tokens * CHARS_PER_TOKEN
    if len(text) <= window:
        return text
    tail = text[-window:]
    _, space, rest = tail.partition(" ")
    return rest if space else tail


def chunk_text(
    text: str,
    document_id: str,
    user_id: str,
    chunk_size: int = 512,
    chunk_overlap: int = 50,
    topic: str | None = None,
    document_name: str | None = None,
) -> list[Chunk]:
    """Split a document's text into unembedded chunks.

    Chunk ids are ``"{document_id}_chunk_{position}"``. Each chunk records
    its character span in the source, word count, the most recent section
    header, and the page number when the text contains form-feed page
    breaks.
    """
    if not text or not text.strip():
        raise ValueError("text must not be empty")
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")
    if chunk_overlap < 0 or chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be >= 0 and < chunk_size")

    raw_chunks = [c for c in _split_recursive(text, chunk_size, chunk_overlap) if c]
    has_pages = PAGE_BREAK in text

    current_header = None
    cursor = 0
    result = []

    for position, body in enumerate(raw_chunks):
        headers = [h for h in map(detect_section_header, body.split("\n")) if h]
        section = headers[0] if headers else current_header
        if headers:
            current_header = headers[-1]

        start = text.find(body, cursor)
        if start == -1:
            start = text.find(body)
        if start == -1:
            start_char = end_char = page_number = None
        else:
            start_char = start
            end_char = start + len(body)
            cursor = start + 1
            page_number = text.count(PAGE_BREAK, 0, start) + 1 if has_pages else None

        result.append(
            Chunk(
                chunk_id=f"{document_id}_chunk_{position}",
                document_id=document_id,
                user_id=user_id,
                text=body.replace(PAGE_BREAK, "\n") if has_pages else body,
                metadata=ChunkMetadata(
                    topic=topic,
                    page_number=page_number,
                    section=section,
                    document_name=document_name,
                    position=position,
                    start_char=start_char,
                    end_char=end_char,
                    word_count=len(body.split()),
                ),
            )
        )

    return result
