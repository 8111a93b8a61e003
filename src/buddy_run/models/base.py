"""Shared pydantic base for the action's input and result records."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class BuddyModel(BaseModel):
    """Unknown fields are ignored so records can be built from the raw CI
    environment; fields load by name or by their hyphenated input alias.
    """

    model_config = {"extra": "ignore", "populate_by_name": True}

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe dump without unset optionals, used for debug logging."""
        return self.model_dump(mode="json", exclude_none=True)
