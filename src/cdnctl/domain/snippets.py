"""VCL snippet types."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class SnippetLocation(StrEnum):
    """Where in the generated VCL a snippet is placed."""

    INIT = "init"
    RECV = "recv"
    HASH = "hash"
    HIT = "hit"
    MISS = "miss"
    PASS = "pass"
    FETCH = "fetch"
    ERROR = "error"
    DELIVER = "deliver"
    LOG = "log"
    NONE = "none"


LOCATIONS: tuple[str, ...] = tuple(loc.value for loc in SnippetLocation)

DEFAULT_PRIORITY = 100


class Snippet(BaseModel):
    """A versioned or dynamic VCL snippet.

    The API serialises ``priority`` and ``dynamic`` as strings ("100", "1");
    pydantic's lax mode coerces them.
    """

    model_config = {"frozen": True}

    id: str = ""
    service_id: str = ""
    service_version: int | None = None
    name: str = ""
    type: str = ""
    priority: int = DEFAULT_PRIORITY
    dynamic: bool = False
    content: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class DynamicSnippet(BaseModel):
    """Content of a dynamic snippet, which lives outside any version."""

    model_config = {"frozen": True, "populate_by_name": True}

    id: str = Field(alias="snippet_id")
    service_id: str = ""
    content: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
