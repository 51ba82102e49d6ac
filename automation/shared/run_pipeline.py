#!/usr/bin/env python3
"""Pipeline orchestrator for the Figma design-token loop.

Runs one token sync (Variables API, file content or plugin export) and then
renders the store into Swift with either the hand-written renderer or the
Style Dictionary build.
"""
from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from automation.figma.sources import METHODS
from automation.shared.settings import load_config

console = Console()

RENDERERS = {
    "swift": "automation.ios.swift_renderer",
    "style-dictionary": "automation.ios.style_dictionary",
}


def run(cmd: list[str], cwd: Path | None = None, env: dict | None = None) -> None:
    console.log("$ " + " ".join(cmd))
    completed = subprocess.run(cmd, cwd=cwd, env=env)
    if completed.returncode != 0:
        raise subprocess.CalledProcessError(completed.returncode, cmd)


def sync_command(method: str, export: Path | None, config_path: str | None) -> list[str]:
    cmd = [sys.executable, "-m", "automation.shared.sync_tokens", "--method", method]
    if export:
        cmd += ["--input", str(export)]
    if config_path:
        cmd += ["--config", config_path]
    return cmd


def render_command(renderer: str, config_path: str | None) -> list[str]:
    cmd = [sys.executable, "-m", RENDERERS[renderer]]
    if config_path:
        cmd += ["--config", config_path]
    return cmd


def generated_files(output_dir: Path) -> list[Path]:
    if not output_dir.exists():
        return []
    return sorted(output_dir.glob("*.swift"))


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Figma design token pipeline")
    parser.add_argument("--method", choices=METHODS, default="variables", help="Token source to sync from")
    parser.add_argument("--input", type=Path, help="Plugin export JSON for --method plugin")
    parser.add_argument("--renderer", choices=sorted(RENDERERS), default="swift", help="Renderer to run")
    parser.add_argument("--skip-sync", action="store_true", help="Render the existing token store only")
    parser.add_argument("--config", default=os.getenv("AUTOMATION_CONFIG"), help="Pipeline config YAML")
    args = parser.parse_args()

    workspace = Path(os.getcwd())
    config = load_config(args.config)

    if args.skip_sync:
        console.print("[yellow]Skipping sync; rendering existing token store")
    else:
        with console.status(f"Syncing tokens ({args.method})"):
            run(sync_command(args.method, args.input, args.config), cwd=workspace)

    run(render_command(args.renderer, args.config), cwd=workspace)

    output_dir = workspace / config["tokens"]["output_dir"]
    table = Table(title="Pipeline Complete")
    table.add_column("Source")
    table.add_column("Renderer")
    table.add_column("File")
    for path in generated_files(output_dir):
        table.add_row("-" if args.skip_sync else args.method, args.renderer, path.name)
    console.print(table)


if __name__ == "__main__":
    try:
        main()
    except subprocess.CalledProcessError as err:
        console.print(f"[bold red]Command failed: {' '.join(err.cmd)}")
        sys.exit(err.returncode)
    except Exception as exc:  # noqa: BLE001
        console.print(f"[bold red]{exc}")
        sys.exit(1)
