"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, cdnctl.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel

from cdnctl.infrastructure.api import DEFAULT_ENDPOINT


class ApiConfig(BaseModel):
    """[api] section."""

    model_config = {"frozen": True}

    endpoint: str = DEFAULT_ENDPOINT
    token: str | None = None
    timeout: float = 30.0
