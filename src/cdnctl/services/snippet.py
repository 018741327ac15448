"""SnippetService — VCL snippet management.

Versioned snippets belong to a service version and are addressed by name.
Dynamic snippets are addressed by ID; their content lives outside any
version, but updating one still requires an editable version.
"""

from __future__ import annotations

from typing import Any

from cdnctl.domain.snippets import DynamicSnippet, Snippet
from cdnctl.domain.types import ErrorCode, OptionalFlag, ResolvedService
from cdnctl.infrastructure.api import APIError
from cdnctl.services._helpers import OperationError
from cdnctl.services.base import BaseService
from cdnctl.services.resolver import ResolveOptions
from cdnctl.services.result import ServiceResult, failure
from cdnctl.services.telemetry import traced

ERR_DYNAMIC_NEW_NAME = (
    "error parsing arguments: --new-name is not supported when updating a dynamic VCL snippet"
)
ERR_DYNAMIC_NO_ID = (
    "error parsing arguments: must provide --snippet-id to update a dynamic VCL snippet"
)
ERR_VERSIONED_SNIPPET_ID = (
    "error parsing arguments: --snippet-id is not supported when updating a versioned VCL snippet"
)
ERR_VERSIONED_NO_NAME = (
    "error parsing arguments: must provide --name to update a versioned VCL snippet"
)


class SnippetService(BaseService):
    """Create, list, describe, update and delete VCL snippets."""

    @traced
    def create(
        self,
        options: ResolveOptions,
        *,
        name: str,
        content: str,
        location: str,
        priority: int | None = None,
        dynamic: bool = False,
    ) -> ServiceResult:
        op = "create_snippet"
        form: dict[str, Any] = {
            "name": name,
            "content": content,
            "type": location,
            "dynamic": dynamic,
            "priority": priority,
        }
        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(options.model_copy(update={"allow_active_locked": False}))
            raw = self._api(
                "create_snippet",
                self._client.create_snippet,
                resolved.service_id,
                resolved.version,
                form,
            )
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)

        snippet = Snippet.model_validate(raw)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                **snippet.model_dump(exclude={"service_id", "service_version"}),
                "service_id": resolved.service_id,
                "version": resolved.version,
            },
            meta=self._meta(resolved),
        )

    @traced
    def list(self, options: ResolveOptions) -> ServiceResult:
        op = "list_snippets"
        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(options.model_copy(update={"allow_active_locked": True}))
            raw = self._api(
                "list_snippets", self._client.list_snippets, resolved.service_id, resolved.version
            )
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)

        items = [Snippet.model_validate(s).model_dump() for s in raw]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "service_id": resolved.service_id,
                "version": resolved.version,
                "items": items,
                "count": len(items),
            },
            meta=self._meta(resolved),
        )

    @traced
    def describe(
        self,
        options: ResolveOptions,
        *,
        name: str | None = None,
        snippet_id: str | None = None,
        dynamic: bool = False,
    ) -> ServiceResult:
        """Show a versioned snippet by name, or a dynamic one by ID."""
        op = "describe_snippet"
        if dynamic and not snippet_id:
            return failure(
                op,
                ErrorCode.INVALID_ARGUMENTS,
                "error parsing arguments: must provide --snippet-id "
                "to describe a dynamic VCL snippet",
            )
        if not dynamic and not name:
            return failure(
                op,
                ErrorCode.INVALID_ARGUMENTS,
                "error parsing arguments: must provide --name to describe a versioned VCL snippet",
            )

        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(options.model_copy(update={"allow_active_locked": True}))
            if dynamic:
                raw = self._api(
                    "get_dynamic_snippet",
                    self._client.get_dynamic_snippet,
                    resolved.service_id,
                    snippet_id,
                )
                data = DynamicSnippet.model_validate(raw).model_dump()
                data["dynamic"] = True
            else:
                raw = self._api(
                    "get_snippet",
                    self._client.get_snippet,
                    resolved.service_id,
                    resolved.version,
                    name,
                )
                data = Snippet.model_validate(raw).model_dump()
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)

        data["service_id"] = data.get("service_id") or resolved.service_id
        data.setdefault("service_version", resolved.version)
        return ServiceResult(ok=True, op=op, data=data, meta=self._meta(resolved))

    @traced
    def update(
        self,
        options: ResolveOptions,
        *,
        dynamic: bool = False,
        snippet_id: str | None = None,
        name: str | None = None,
        new_name: OptionalFlag[str] | None = None,
        priority: OptionalFlag[int] | None = None,
        content: OptionalFlag[str] | None = None,
        location: OptionalFlag[str] | None = None,
    ) -> ServiceResult:
        """Update a dynamic snippet (``dynamic=True``) or a versioned one.

        Argument validation runs before any API call.
        """
        new_name = new_name or OptionalFlag()
        priority = priority or OptionalFlag()
        content = content or OptionalFlag()
        location = location or OptionalFlag()

        if dynamic:
            return self._update_dynamic(options, snippet_id, new_name, content)

        op = "update_snippet"
        if snippet_id:
            return failure(op, ErrorCode.INVALID_ARGUMENTS, ERR_VERSIONED_SNIPPET_ID)
        if not name:
            return failure(op, ErrorCode.INVALID_ARGUMENTS, ERR_VERSIONED_NO_NAME)

        form: dict[str, Any] = {}
        if new_name.was_set:
            form["name"] = new_name.value
        if priority.was_set:
            form["priority"] = priority.value
        if content.was_set:
            form["content"] = content.value
        if location.was_set:
            form["type"] = location.value

        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(options.model_copy(update={"allow_active_locked": False}))
            raw = self._api(
                "update_snippet",
                self._client.update_snippet,
                resolved.service_id,
                resolved.version,
                name,
                form,
            )
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)

        snippet = Snippet.model_validate(raw)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": snippet.name,
                "previous_name": name,
                "service_id": snippet.service_id or resolved.service_id,
                "version": snippet.service_version or resolved.version,
                "type": snippet.type,
                "priority": snippet.priority,
                "fields_changed": sorted(form),
            },
            meta=self._meta(resolved),
        )

    def _update_dynamic(
        self,
        options: ResolveOptions,
        snippet_id: str | None,
        new_name: OptionalFlag[str],
        content: OptionalFlag[str],
    ) -> ServiceResult:
        op = "update_dynamic_snippet"
        if new_name.was_set:
            return failure(op, ErrorCode.INVALID_ARGUMENTS, ERR_DYNAMIC_NEW_NAME)
        if not snippet_id:
            return failure(op, ErrorCode.INVALID_ARGUMENTS, ERR_DYNAMIC_NO_ID)

        form: dict[str, Any] = {}
        if content.was_set:
            form["content"] = content.value

        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(options.model_copy(update={"allow_active_locked": False}))
            raw = self._api(
                "update_dynamic_snippet",
                self._client.update_dynamic_snippet,
                resolved.service_id,
                snippet_id,
                form,
            )
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)

        snippet = DynamicSnippet.model_validate(raw)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": snippet.id, "service_id": snippet.service_id or resolved.service_id},
            meta=self._meta(resolved),
        )

    @traced
    def delete(self, options: ResolveOptions, name: str) -> ServiceResult:
        op = "delete_snippet"
        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(options.model_copy(update={"allow_active_locked": False}))
            self._api(
                "delete_snippet",
                self._client.delete_snippet,
                resolved.service_id,
                resolved.version,
                name,
            )
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)

        return ServiceResult(
            ok=True,
            op=op,
            data={"name": name, "service_id": resolved.service_id, "version": resolved.version},
            meta=self._meta(resolved),
        )
