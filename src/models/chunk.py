"""Chunk data model."""

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class ChunkMetadata:
    """Optional descriptive fields attached to a chunk."""

    topic: str | None = None
    page_number: int | None = None
    section: str | None = None
    document_name: str | None = None
    position: int | None = None
    start_char: int | None = None
    end_char: int | None = None
    word_count: int | None = None

    def to_dict(self) -> dict:
        """Return the populated fields in camelCase, dropping unset ones."""
        names = {
            "topic": "topic",
            "page_number": "pageNumber",
            "section": "section",
            "document_name": "documentName",
            "position": "position",
            "start_char": "startChar",
            "end_char": "endChar",
            "word_count": "wordCount",
        }
        return {
            names[key]: value
            for key, value in asdict(self).items()
            if value is not None
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "ChunkMetadata":
        data = data or {}
        return cls(
            topic=data.get("topic"),
            page_number=data.get("page_number", data.get("pageNumber")),
            section=data.get("section"),
            document_name=data.get("document_name", data.get("documentName")),
            position=data.get("position"),
            start_char=data.get("start_char", data.get("startChar")),
            end_char=data.get("end_char", data.get("endChar")),
            word_count=data.get("word_count", data.get("wordCount")),
        )


@dataclass(frozen=True)
class Chunk:
    """An immutable, embedded fragment of one of a user's documents."""

    chunk_id: str
    document_id: str
    user_id: str
    text: str
    embedding: tuple[float, ...] = ()
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)

    def __post_init__(self):
        if not self.chunk_id:
            raise ValueError("chunk_id must not be empty")
        if not self.document_id:
            raise ValueError("document_id must not be empty")
        if not self.user_id:
            raise ValueError("user_id must not be empty")
        if not self.text:
            raise ValueError("text must not be empty")
        if not isinstance(self.embedding, tuple):
            object.__setattr__(self, "embedding", tuple(float(x) for x in self.embedding))
