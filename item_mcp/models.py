"""Pydantic models shared by the store, the information sources and the transports.

Items are stored and exchanged with camelCase keys (``applicationProcess``,
``createdAt``...) while Python code uses snake_case attributes. Reading is
lenient: unknown keys are ignored and optional fields default to ``None`` so
that files written by older versions stay readable.
"""

from datetime import UTC, datetime
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from item_mcp.core.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


class CamelModel(BaseModel):
    """Base model using camelCase aliases on the wire and on disk."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict with camelCase keys, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ========================================
# Items
# ========================================


class ItemInput(CamelModel):
    """Item content supplied by a client or an information source."""

    name: str = Field(description="Official name of the item")
    organization: str = Field(description="Providing organization")
    description: str = Field(description="Summary of the item")
    eligibility: str = Field(description="Eligibility conditions")
    amount: str = Field(description="Amount, quantity or scale")
    deadline: str = Field(description="Deadline or relevant dates")
    application_process: str = Field(description="Steps to apply or use the item")
    url: str = Field(description="Reference URL")
    category: str = Field(description="Free-text category")
    requirement_details: str | None = Field(
        default=None,
        description="Detailed requirements",
    )
    exclusions: str | None = Field(default=None, description="Exclusion conditions")
    contact_info: str | None = Field(default=None, description="Contact information")


class ItemInfo(ItemInput):
    """A persisted item.

    ``id`` and ``created_at`` never change once the item has been saved;
    ``updated_at`` is only set by the update path.
    """

    id: str
    source: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime | None = None

    def matches_category(self, category: str) -> bool:
        """Case-insensitive substring match of ``category`` against this item."""
        return category.lower() in self.category.lower()


# ========================================
# Requests
# ========================================


class SearchRequest(CamelModel):
    """Parameters of the ``search_items`` operation."""

    query: str = Field(min_length=1)
    category: str | None = None
    use_web: bool = True

    @field_validator("query", mode="before")
    @classmethod
    def strip_query(cls, v: Any) -> Any:
        """Strip surrounding whitespace so blank queries fail min_length."""
        return v.strip() if isinstance(v, str) else v


class CategoryRequest(CamelModel):
    """Parameters of the ``get_items_by_category`` operation."""

    category: str = ""


class SummaryRequest(CamelModel):
    """Parameters of the ``generate_markdown_summary`` operation."""

    title: str = Field(min_length=1)
    category: str | None = None
    include_intro: bool = True
    include_conclusion: bool = True

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: Any) -> Any:
        """Strip surrounding whitespace so blank titles fail min_length."""
        return v.strip() if isinstance(v, str) else v


def parse_request(model: type[ModelT], payload: Any) -> ModelT:
    """Validate an external payload, raising the domain ValidationError on failure.

    Args:
        model: Request model to validate against
        payload: Decoded JSON body or tool arguments

    Returns:
        Validated model instance

    Raises:
        ValidationError: With pydantic error details attached
    """
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        details = e.errors(include_url=False, include_context=False)
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in details)
        msg = f"Invalid request data: {fields or model.__name__}"
        raise ValidationError(msg, details=details) from e


# ========================================
# Site configuration and scraped pages
# ========================================


class WebsiteConfig(BaseModel):
    """A target website consulted by the site scraper."""

    name: str
    url: str
    enabled: bool = True
    description: str = ""


class PageData(BaseModel):
    """One cached page written by sitemcp."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    content: str | None = None
    url: str | None = None


# ========================================
# LLM structured outputs
# ========================================


class ItemDraft(CamelModel):
    """Item as returned by the LLM; every field may be missing."""

    name: str = ""
    organization: str = ""
    description: str = ""
    eligibility: str = ""
    amount: str = ""
    deadline: str = ""
    application_process: str = ""
    url: str = ""
    category: str = ""
    requirement_details: str | None = None
    exclusions: str | None = None
    contact_info: str | None = None


class ItemDraftList(BaseModel):
    """List of items generated for a query."""

    items: list[ItemDraft] = Field(default_factory=list)


class PageExtraction(BaseModel):
    """Result of extracting an item from a single web page."""

    found: bool = Field(description="False when the page holds no usable item")
    item: ItemDraft | None = None


# ========================================
# Response envelope
# ========================================


class TextContent(BaseModel):
    """Text block of a tool response."""

    type: Literal["text"] = "text"
    text: str


class ToolResponse(CamelModel):
    """Envelope returned by both transports."""

    content: list[TextContent]
    data: Any = None
    error: str | None = None
    is_error: bool = False
    details: list[dict[str, Any]] | None = None

    @classmethod
    def success(cls, text: str, data: Any = None) -> "ToolResponse":
        """Build a successful response."""
        return cls(content=[TextContent(text=text)], data=data)

    @classmethod
    def failure(
        cls,
        text: str,
        error: str,
        details: list[dict[str, Any]] | None = None,
    ) -> "ToolResponse":
        """Build an error response."""
        return cls(
            content=[TextContent(text=text)],
            error=error,
            is_error=True,
            details=details,
        )
