"""Knowledge base models as reported by the upstream knowledge-base service."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

_READY_WORDS = {"ready", "completed", "complete", "done", "active", "success", "succeeded"}
_FAILED_WORDS = {"failed", "failure", "error", "errored"}


class KnowledgeBaseStatus(str, Enum):
    """Readiness state of a knowledge base."""

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"

    @classmethod
    def normalize(cls, value: Any) -> "KnowledgeBaseStatus":
        """Map an upstream readiness word onto one of the three states.

        Args:
            value: Raw status value from the upstream payload

        Returns:
            The matching status, PENDING for anything unrecognised
        """
        if isinstance(value, cls):
            return value
        word = str(value or "").strip().lower()
        if word in _READY_WORDS:
            return cls.READY
        if word in _FAILED_WORDS:
            return cls.FAILED
        return cls.PENDING


class KnowledgeBaseSummary(BaseModel):
    """Summary of a single knowledge base.

    The upstream schema is not fixed, so several spellings are accepted for
    each field. The verbatim upstream object is kept in ``raw`` so the API can
    forward it unchanged.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("id", "_id", "knowledgeBaseId", "requestId"),
        description="Opaque knowledge base identifier",
    )
    name: str = Field("", description="Display name")
    description: Optional[str] = Field(None, description="Optional description")
    created_at: Any = Field(
        None,
        validation_alias=AliasChoices("createdAt", "created_at"),
        description="Creation timestamp as reported upstream",
    )
    status: KnowledgeBaseStatus = Field(
        KnowledgeBaseStatus.PENDING,
        validation_alias=AliasChoices("status", "state"),
        description="Readiness state",
    )
    raw: Any = Field(None, exclude=True)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Optional[str]:
        """Accept numeric identifiers."""
        if v is None:
            return None
        return str(v)

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        """Treat a null name as empty."""
        return "" if v is None else str(v)

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: Any) -> Optional[str]:
        """Keep only textual descriptions."""
        return v if isinstance(v, str) else None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> KnowledgeBaseStatus:
        """Normalise the upstream readiness word."""
        return KnowledgeBaseStatus.normalize(v)

    @classmethod
    def from_payload(cls, payload: Any) -> "KnowledgeBaseSummary":
        """Build a summary from an upstream JSON object.

        Args:
            payload: Decoded JSON, either the knowledge base object itself or an
                object wrapping it under ``knowledgeBase``

        Returns:
            The parsed summary

        Raises:
            ValueError: If the payload is not a JSON object
        """
        if not isinstance(payload, dict):
            raise ValueError(
                f"Expected a knowledge base object, got {type(payload).__name__}"
            )
        inner = payload.get("knowledgeBase")
        source = inner if isinstance(inner, dict) else payload
        return cls.model_validate({**source, "raw": payload})

    @classmethod
    def unparsed(cls, payload: Any) -> "KnowledgeBaseSummary":
        """Wrap a payload that could not be read as a knowledge base.

        Only ``raw`` is set, so the payload can still be forwarded verbatim.
        """
        return cls(raw=payload)


@dataclass
class KnowledgeBaseListing:
    """Normalised result of listing knowledge bases.

    Attributes:
        knowledge_bases: Parsed summaries in upstream order
        payload: Verbatim upstream JSON, a bare list or a wrapping object
    """

    knowledge_bases: List[KnowledgeBaseSummary] = field(default_factory=list)
    payload: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> "KnowledgeBaseListing":
        """Accept either ``[...]`` or ``{"knowledgeBases": [...]}``.

        Raises:
            ValueError: If the payload has neither shape
        """
        if isinstance(payload, list):
            items = payload
        elif isinstance(payload, dict):
            items = payload.get("knowledgeBases") or []
            if not isinstance(items, list):
                raise ValueError("'knowledgeBases' is not a list")
        else:
            raise ValueError(
                f"Unexpected knowledge base listing of type {type(payload).__name__}"
            )

        return cls(
            knowledge_bases=[
                KnowledgeBaseSummary.from_payload(item)
                for item in items
                if isinstance(item, dict)
            ],
            payload=payload,
        )
