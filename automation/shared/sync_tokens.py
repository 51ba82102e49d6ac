#!/usr/bin/env python3
"""Sync design tokens from Figma into the canonical token store."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from automation.figma.client import FigmaAPIError
from automation.figma.sources import METHODS, build_source
from automation.shared.settings import FigmaSettings, load_config, load_environment
from automation.shared.tokens import TokenStore

console = Console()


def print_counts(store: TokenStore) -> None:
    table = Table(title=f"Tokens ({store.metadata.get('method', 'unknown')})")
    table.add_column("Category")
    table.add_column("Tokens")
    for category, count in store.counts().items():
        table.add_row(category, str(count))
    console.print(table)


def sync(
    method: str,
    config: dict[str, Any],
    output: Path | None = None,
    export_path: Path | None = None,
    settings: FigmaSettings | None = None,
) -> TokenStore:
    settings = settings or FigmaSettings.from_env()
    source = build_source(method, settings, config=config, export_path=export_path)
    store = source.fetch()
    store_path = output or Path(config["tokens"]["store_path"])
    store.save(store_path)
    console.print(f"Tokens saved to {store_path}")
    print_counts(store)
    return store


def main() -> None:
    parser = argparse.ArgumentParser(description="Sync design tokens from Figma")
    parser.add_argument("--method", choices=METHODS, default="variables", help="Token source to use")
    parser.add_argument("--input", type=Path, help="Plugin export JSON (plugin method only)")
    parser.add_argument("--output", type=Path, help="Override the token store path")
    parser.add_argument("--config", help="Pipeline config YAML")
    args = parser.parse_args()

    load_environment()
    config = load_config(args.config)
    sync(args.method, config, output=args.output, export_path=args.input)
    console.print("[bold green]Sync complete. Next: python3 -m automation.ios.swift_renderer")


if __name__ == "__main__":
    try:
        main()
    except FigmaAPIError as err:
        console.print(f"[bold red]Failed to fetch from Figma: {err}")
        sys.exit(1)
    except ValueError as err:
        console.print(f"[bold red]{err}")
        sys.exit(1)
