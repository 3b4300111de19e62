"""
Shared helpers for MCP tools: response formatting and input normalization.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from research_organizer.shared.exceptions import ResearchOrganizerError

logger = logging.getLogger(__name__)


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


class ResponseFormatter:
    """Uniform JSON responses for tool results and errors."""

    @staticmethod
    def success(data: dict[str, Any], progress: list[dict[str, Any]] | None = None) -> str:
        payload = dict(data)
        if progress is not None:
            payload["progress"] = progress
        return to_json(payload)

    @staticmethod
    def error(
        error: Exception | str,
        suggestion: str | None = None,
        example: str | None = None,
        tool_name: str | None = None,
    ) -> str:
        """
        Format an error response.

        ``ResearchOrganizerError`` instances contribute their structured
        fields (kind, category, retryable, suggestion).
        """
        payload: dict[str, Any] = {"success": False}
        if isinstance(error, ResearchOrganizerError):
            payload.update(error.to_dict())
        else:
            payload["error"] = str(error)
        if suggestion:
            payload["suggestion"] = suggestion
        if example:
            payload["example"] = example
        if tool_name:
            payload["tool"] = tool_name
        return to_json(payload)


class InputNormalizer:
    """Lenient parsing of agent-supplied arguments."""

    @staticmethod
    def normalize_list(value: list[str] | str | None) -> list[str] | None:
        """
        Accept a list or a comma-separated string; blanks are dropped.

        ``None`` means the argument was not given. An explicit empty
        selection stays an empty list.
        """
        if value is None:
            return None
        items = value.split(",") if isinstance(value, str) else list(value)
        return [str(item).strip() for item in items if str(item).strip()]

    @staticmethod
    def normalize_limit(value: int | str | None, default: int, max_val: int) -> int:
        try:
            limit = int(value) if value is not None else default
        except (TypeError, ValueError):
            return default
        return max(1, min(limit, max_val))
