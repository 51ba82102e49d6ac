#!/usr/bin/env python3
"""Heuristic token extraction from Figma file content.

Used when the Variables API is unavailable. Colour styles are matched by name
against solid fills found near the top of the document tree; every other
category comes from fixed default sets. The result is approximate.
"""
from __future__ import annotations

import re
from typing import Any

from rich.console import Console

from automation.figma.client import FigmaClient
from automation.shared.settings import FigmaSettings
from automation.shared.tokens import Category, Token, TokenStore, color_to_hex, sanitize_name

console = Console()

MAX_DEPTH = 3
PLACEHOLDER_COLOR = "#007AFF"
COLOR_COMPONENT_HINTS = ("color", "primary", "secondary")

DEFAULT_COLORS = {
    "primary": "#007AFF",
    "secondary": "#5856D6",
    "success": "#34C759",
    "warning": "#FF9500",
    "error": "#FF3B30",
    "background": "#FFFFFF",
    "surface": "#F2F2F7",
    "text": "#000000",
    "textSecondary": "#6D6D70",
}
DEFAULT_SPACING = {"xs": 4, "small": 8, "medium": 16, "large": 24, "xl": 32, "xxl": 48}
DEFAULT_TYPOGRAPHY = {
    "headline": {"fontSize": 24, "fontWeight": "bold", "lineHeight": 32},
    "title": {"fontSize": 20, "fontWeight": "semibold", "lineHeight": 28},
    "body": {"fontSize": 16, "fontWeight": "regular", "lineHeight": 24},
    "caption": {"fontSize": 12, "fontWeight": "regular", "lineHeight": 16},
}
DEFAULT_BORDER_RADIUS = {"small": 4, "medium": 8, "large": 12, "xl": 16}
DEFAULT_SHADOWS = {
    "card": {"offset": {"x": 0, "y": 2}, "blur": 8, "color": "#000000", "opacity": 0.1},
    "elevated": {"offset": {"x": 0, "y": 4}, "blur": 16, "color": "#000000", "opacity": 0.15},
}
DEFAULT_OPACITY = {"disabled": 0.4, "overlay": 0.6, "full": 1}


def normalise(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", name.lower())


def collect_node_colors(node: dict[str, Any], max_depth: int = MAX_DEPTH) -> dict[str, str]:
    lookup: dict[str, str] = {}

    def walk(current: dict[str, Any], depth: int) -> None:
        if depth > max_depth:
            return
        for fill in current.get("fills") or []:
            if fill.get("type") != "SOLID" or not fill.get("color") or fill.get("visible") is False:
                continue
            key = normalise(current["name"]) if current.get("name") else "unnamed"
            # Alpha lives on the fill's opacity; the swatch itself is opaque.
            hex_value = color_to_hex({**fill["color"], "a": 1})
            if hex_value:
                lookup[key] = hex_value
        for child in current.get("children") or []:
            walk(child, depth + 1)

    if node:
        walk(node, 0)
    return lookup


def find_matching_color(style_name: str, lookup: dict[str, str]) -> str | None:
    wanted = normalise(style_name)
    if not wanted:
        return None
    if wanted in lookup:
        return lookup[wanted]
    for key, value in lookup.items():
        if wanted in key or key in wanted:
            return value
    return None


def _add_defaults(store: TokenStore, category: Category, defaults: dict[str, Any]) -> None:
    for name, value in defaults.items():
        store.add(Token(name=name, category=category, value=value))


def extract_tokens(file_data: dict[str, Any]) -> TokenStore:
    console.print("Extracting design tokens from file content...")
    store = TokenStore(
        {
            "source": "figma-file-content",
            "method": "file-content-extraction",
            "note": "Variables API not available - colours matched from file fills, other categories use defaults",
        }
    )
    lookup = collect_node_colors(file_data.get("document") or {})

    for style_id, style in (file_data.get("styles") or {}).items():
        if style.get("styleType") != "FILL":
            continue
        name = sanitize_name(style.get("name", ""))
        if not name:
            continue
        matched = find_matching_color(style["name"], lookup)
        store.add(
            Token(
                name=name,
                category=Category.COLOR,
                value=matched or PLACEHOLDER_COLOR,
                metadata={"styleId": style_id, "originalName": style["name"], "resolved": matched is not None},
            )
        )

    for component_id, component in (file_data.get("components") or {}).items():
        original = component.get("name", "")
        if not any(hint in original.lower() for hint in COLOR_COMPONENT_HINTS):
            continue
        name = sanitize_name(original)
        if not name or name in store.categories[Category.COLOR]:
            continue
        matched = find_matching_color(original, lookup)
        store.add(
            Token(
                name=name,
                category=Category.COLOR,
                value=matched or PLACEHOLDER_COLOR,
                metadata={"componentId": component_id, "originalName": original, "resolved": matched is not None},
            )
        )

    if not store.categories[Category.COLOR]:
        console.print("[yellow]No color tokens found, adding default set...")
        _add_defaults(store, Category.COLOR, DEFAULT_COLORS)
    _add_defaults(store, Category.TYPOGRAPHY, DEFAULT_TYPOGRAPHY)
    _add_defaults(store, Category.SPACING, DEFAULT_SPACING)
    _add_defaults(store, Category.BORDER_RADIUS, DEFAULT_BORDER_RADIUS)
    _add_defaults(store, Category.SHADOW, DEFAULT_SHADOWS)
    _add_defaults(store, Category.OPACITY, DEFAULT_OPACITY)
    return store


def fetch_file_store(settings: FigmaSettings, client: FigmaClient) -> TokenStore:
    console.print("Fetching file content from Figma...")
    return extract_tokens(client.get_file(settings.file_key))
