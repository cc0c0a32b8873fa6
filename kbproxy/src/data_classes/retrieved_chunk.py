from dataclasses import dataclass


@dataclass(frozen=True)
class RetrievedChunk:
    """A piece of evidence returned by the upstream similarity search.

    Attributes:
        rank: 1-based position in the upstream top-K ordering
        content: Chunk text as returned upstream
    """

    rank: int
    content: str

    @property
    def is_empty(self) -> bool:
        """Whether the chunk carries no text once trimmed."""
        return not self.content.strip()

    def preview(self, length: int) -> str:
        """Return the first ``length`` characters for logging."""
        return self.content[:length]
