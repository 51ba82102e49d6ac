#!/usr/bin/env python3
"""Canonical design-token model shared by every source adapter and renderer.

A token store is a JSON document with a ``$metadata`` block followed by one
object per category, each mapping a sanitised token name to
``{"value": ..., "type": <category>, ...metadata}``.
"""
from __future__ import annotations

import json
import math
import os
import re
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from rich.console import Console

console = Console()

METADATA_KEY = "$metadata"


class Category(str, Enum):
    COLOR = "color"
    TYPOGRAPHY = "typography"
    SPACING = "spacing"
    BORDER_RADIUS = "borderRadius"
    SHADOW = "shadow"
    OPACITY = "opacity"


class TokenStoreError(Exception):
    """Raised when the token store file cannot be used."""


class TokenStoreMissing(TokenStoreError):
    pass


class TokenStoreInvalid(TokenStoreError):
    pass


COLOR_PATTERN = re.compile(r"color|background|foreground|border", re.IGNORECASE)
NAME_RULES: list[tuple[re.Pattern[str], Category]] = [
    (re.compile(r"font|text|typography", re.IGNORECASE), Category.TYPOGRAPHY),
    (re.compile(r"radius|corner", re.IGNORECASE), Category.BORDER_RADIUS),
    (re.compile(r"shadow", re.IGNORECASE), Category.SHADOW),
    (re.compile(r"opacity|alpha", re.IGNORECASE), Category.OPACITY),
]
NUMERIC_TYPES = {"FLOAT", "BOOLEAN"}
PREFIX_WORDS = ("color", "spacing", "typography", "borderradius")
NON_ALNUM = re.compile(r"[^a-z0-9]")


def classify_category(name: str, resolved_type: str | None) -> Category:
    """Infer the token category from a Figma variable's name and resolved type."""
    if resolved_type == "COLOR":
        return Category.COLOR
    if resolved_type not in NUMERIC_TYPES and COLOR_PATTERN.search(name):
        return Category.COLOR
    for pattern, category in NAME_RULES:
        if pattern.search(name):
            return category
    return Category.SPACING


def sanitize_name(name: str) -> str:
    """Lower-case, drop non-alphanumerics and strip leading category words."""
    current = NON_ALNUM.sub("", name.lower())
    while True:
        for prefix in PREFIX_WORDS:
            if current.startswith(prefix) and len(current) > len(prefix):
                current = current[len(prefix):]
                break
        else:
            return current


def _channel(value: float) -> int:
    scaled = math.floor(float(value) * 255 + 0.5)
    return max(0, min(255, scaled))


def color_to_hex(color: Any) -> str | None:
    if not isinstance(color, dict):
        return None
    try:
        r, g, b = (_channel(color[key]) for key in ("r", "g", "b"))
    except (KeyError, TypeError, ValueError):
        return None
    alpha = color.get("a", 1)
    if alpha is not None and alpha < 1:
        return f"rgba({r}, {g}, {b}, {alpha})"
    return f"#{r:02x}{g:02x}{b:02x}"


def convert_value(resolved_type: str | None, value: Any) -> Any:
    """Convert a raw Figma variable value; ``None`` means the value is skipped."""
    if isinstance(value, dict) and value.get("type") == "VARIABLE_ALIAS":
        return None
    if resolved_type == "COLOR":
        return color_to_hex(value)
    if resolved_type == "FLOAT":
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
    if resolved_type == "STRING":
        return value
    if resolved_type == "BOOLEAN":
        return bool(value)
    console.print(f"[yellow]Unknown variable type: {resolved_type}")
    return None


@dataclass
class Token:
    name: str
    category: Category
    value: Any
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = {"value": self.value, "type": self.category.value}
        data.update(self.metadata)
        return data

    @classmethod
    def from_dict(cls, name: str, category: Category, data: Any) -> "Token":
        if not isinstance(data, dict) or "value" not in data:
            # Hand-edited stores sometimes hold bare values.
            return cls(name=name, category=category, value=data)
        metadata = {key: val for key, val in data.items() if key not in ("value", "type")}
        return cls(name=name, category=category, value=data["value"], metadata=metadata)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class TokenStore:
    """All tokens for one sync run, grouped by category in insertion order."""

    def __init__(self, metadata: dict[str, Any] | None = None) -> None:
        self.metadata: dict[str, Any] = {"generatedAt": utc_timestamp()}
        if metadata:
            self.metadata.update(metadata)
        self.categories: dict[Category, dict[str, Token]] = {category: {} for category in Category}

    def add(self, token: Token) -> None:
        bucket = self.categories[token.category]
        if token.name in bucket:
            console.print(
                f"[yellow]Duplicate {token.category.value} token '{token.name}'; keeping the later value"
            )
        bucket[token.name] = token

    def tokens(self, category: Category) -> list[Token]:
        return list(self.categories[category].values())

    def counts(self) -> dict[str, int]:
        return {category.value: len(tokens) for category, tokens in self.categories.items()}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {METADATA_KEY: dict(self.metadata)}
        for category, tokens in self.categories.items():
            data[category.value] = {name: token.to_dict() for name, token in tokens.items()}
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenStore":
        store = cls()
        store.metadata = dict(data.get(METADATA_KEY) or {})
        for category in Category:
            entries = data.get(category.value) or {}
            if not isinstance(entries, dict):
                raise TokenStoreInvalid(f"Category '{category.value}' must be an object")
            for name, entry in entries.items():
                store.add(Token.from_dict(name, category, entry))
        return store

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(self.to_dict(), indent=2)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def load_store(path: Path) -> TokenStore:
    if not path.exists():
        raise TokenStoreMissing(f"No tokens file found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as err:
        raise TokenStoreInvalid(f"Invalid JSON in {path}: {err}") from err
    if not isinstance(data, dict):
        raise TokenStoreInvalid(f"Token store {path} must contain a JSON object")
    return TokenStore.from_dict(data)
