#!/usr/bin/env python3
"""Style Dictionary style build: flatten tokens, then run registered formats.

Platforms and their files come from the ``style_dictionary`` section of the
pipeline config, mirroring a Style Dictionary ``config.platforms`` block::

    style_dictionary:
      platforms:
        ios:
          buildPath: DesignSystem/Tokens
          files:
            - destination: Colors.swift
              format: ios/colors
              filter: {category: color}
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Callable

from rich.console import Console
from rich.table import Table

from automation.ios.swift_renderer import SWIFT_FILES_BY_CATEGORY, render_file, write_files
from automation.shared.settings import load_config
from automation.shared.tokens import Category, Token, TokenStore, TokenStoreError, load_store, utc_timestamp

console = Console()

GENERATOR = "Generated from Figma Variables via Style Dictionary"

FormatFn = Callable[[list[dict[str, Any]], dict[str, Any]], str]
FORMATS: dict[str, FormatFn] = {}


class UnknownFormatError(KeyError):
    pass


def register_format(name: str) -> Callable[[FormatFn], FormatFn]:
    def decorator(func: FormatFn) -> FormatFn:
        FORMATS[name] = func
        return func

    return decorator


def flatten(store: TokenStore) -> list[dict[str, Any]]:
    """Return Style Dictionary ``allTokens`` style entries in store order."""
    flat = []
    for category in Category:
        for token in store.tokens(category):
            path = [category.value, token.name]
            flat.append(
                {
                    "name": "-".join(path),
                    "path": path,
                    "value": token.value,
                    "type": category.value,
                    "attributes": {"category": category.value},
                    "original": token.to_dict(),
                }
            )
    return flat


def short_name(entry: dict[str, Any]) -> str:
    return entry["path"][-1]


def matches(entry: dict[str, Any], token_filter: dict[str, Any] | None) -> bool:
    if not token_filter:
        return True
    return all(entry["attributes"].get(key) == value for key, value in token_filter.items())


def swift_format(category: Category) -> FormatFn:
    swift_file = SWIFT_FILES_BY_CATEGORY[category]

    def format_tokens(entries: list[dict[str, Any]], options: dict[str, Any]) -> str:
        tokens = [
            Token(name=short_name(entry), category=category, value=entry["value"])
            for entry in entries
            if entry["attributes"]["category"] == category.value
        ]
        generated_at = options.get("generated_at") or utc_timestamp()
        return render_file(swift_file, tokens, generated_at, generator=GENERATOR)

    return format_tokens


register_format("ios/colors")(swift_format(Category.COLOR))
register_format("ios/typography")(swift_format(Category.TYPOGRAPHY))
register_format("ios/spacing")(swift_format(Category.SPACING))
register_format("ios/border-radius")(swift_format(Category.BORDER_RADIUS))
register_format("ios/shadows")(swift_format(Category.SHADOW))
register_format("ios/opacity")(swift_format(Category.OPACITY))


def render_platform(
    platform: dict[str, Any],
    store: TokenStore,
    generated_at: str | None = None,
) -> dict[str, str]:
    entries = flatten(store)
    options = {"generated_at": generated_at or utc_timestamp()}
    rendered: dict[str, str] = {}
    for file_config in platform.get("files", []):
        format_name = file_config["format"]
        if format_name not in FORMATS:
            raise UnknownFormatError(f"Unknown format '{format_name}' for {file_config['destination']}")
        selected = [entry for entry in entries if matches(entry, file_config.get("filter"))]
        rendered[file_config["destination"]] = FORMATS[format_name](selected, options)
    return rendered


def build_platform(
    name: str,
    platform: dict[str, Any],
    store: TokenStore,
    build_path: Path | None = None,
) -> list[Path]:
    console.print(f"Building platform {name}")
    rendered = render_platform(platform, store)
    return write_files(rendered, build_path or Path(platform.get("buildPath", "build")))


def main() -> None:
    parser = argparse.ArgumentParser(description="Build design tokens with registered Style Dictionary formats")
    parser.add_argument("--tokens", type=Path, help="Token store JSON (default from config)")
    parser.add_argument("--platform", action="append", help="Platform(s) to build; defaults to all")
    parser.add_argument("--config", help="Pipeline config YAML")
    args = parser.parse_args()

    config = load_config(args.config)
    platforms = config["style_dictionary"]["platforms"]
    selected = args.platform or list(platforms)
    try:
        store = load_store(args.tokens or Path(config["tokens"]["store_path"]))
    except TokenStoreError as err:
        console.print(f"[bold red]{err}. Run python3 -m automation.shared.sync_tokens first.")
        sys.exit(1)

    table = Table(title="Style Dictionary build")
    table.add_column("Platform")
    table.add_column("File")
    for name in selected:
        if name not in platforms:
            console.print(f"[bold red]Unknown platform: {name}")
            sys.exit(1)
        try:
            written = build_platform(name, platforms[name], store)
        except UnknownFormatError as err:
            console.print(f"[bold red]{err.args[0]}")
            sys.exit(1)
        for path in written:
            table.add_row(name, path.as_posix())
    console.print(table)


if __name__ == "__main__":
    main()
