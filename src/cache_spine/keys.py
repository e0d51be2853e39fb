"""Logical → physical key rendering."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class KeyRenderer:
    """Prepends the configured prefix to a logical key.

    Example:
        >>> KeyRenderer("app:").render("user:1")
        'app:user:1'
    """

    prefix: str | None = None

    def render(self, key: str) -> str:
        return f"{self.prefix or ''}{key}"


__all__ = ["KeyRenderer"]
