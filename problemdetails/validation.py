"""Field-level validation errors carried in a problem's ``errors`` extension."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class ValidationItem:
    """A single field-level validation failure.

    ``field`` is the path that failed (``"email"``, ``"address.zip"``),
    ``message`` a human-readable explanation and ``code`` an optional
    machine-readable identifier for the failure.
    """

    field: str
    message: str
    code: str | None = None

    def with_code(self, code: str) -> ValidationItem:
        """Return a copy of this item carrying the given error code."""
        return replace(self, code=code)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form; ``code`` is left out when unset."""
        data: dict[str, Any] = {"field": self.field, "message": self.message}
        if self.code is not None:
            data["code"] = self.code
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ValidationItem:
        """Build an item from its JSON object form.

        Unknown keys are ignored. Raises ``ValueError`` when a required key
        is missing or a value has the wrong type.
        """
        if not isinstance(data, Mapping):
            raise TypeError("validation item must be a mapping")
        values: dict[str, str | None] = {}
        for key in ("field", "message"):
            if key not in data:
                raise ValueError(f"validation item is missing {key!r}")
            if not isinstance(data[key], str):
                raise ValueError(f"validation item {key!r} must be a string")
            values[key] = data[key]
        code = data.get("code")
        if code is not None and not isinstance(code, str):
            raise ValueError("validation item 'code' must be a string")
        return cls(field=values["field"], message=values["message"], code=code)