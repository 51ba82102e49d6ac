#!/usr/bin/env python3
"""Environment credentials and YAML pipeline configuration."""
from __future__ import annotations

import copy
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from rich.console import Console

console = Console()

DEFAULT_CONFIG_PATH = Path(".automation/config.yaml")

DEFAULT_CONFIG: dict[str, Any] = {
    "tokens": {
        "store_path": "tokens/figma-tokens.json",
        "output_dir": "DesignSystem/Tokens",
    },
    "figma": {
        "api_base": "https://api.figma.com/v1",
        "timeout": 30,
    },
    "github": {
        "api_base": "https://api.github.com",
        "branch": "main",
        "path": "tokens/figma-tokens.json",
    },
    "webhook": {
        "service": "figma-tokens-webhook",
        "workdir": ".",
        "pull_command": ["git", "pull", "origin", "main"],
        "generate_command": ["python3", "-m", "automation.ios.swift_renderer"],
    },
    "style_dictionary": {
        "platforms": {
            "ios": {
                "buildPath": "DesignSystem/Tokens",
                "files": [
                    {"destination": "Colors.swift", "format": "ios/colors", "filter": {"category": "color"}},
                    {"destination": "Typography.swift", "format": "ios/typography", "filter": {"category": "typography"}},
                    {"destination": "Spacing.swift", "format": "ios/spacing", "filter": {"category": "spacing"}},
                    {"destination": "BorderRadius.swift", "format": "ios/border-radius", "filter": {"category": "borderRadius"}},
                    {"destination": "Shadows.swift", "format": "ios/shadows", "filter": {"category": "shadow"}},
                    {"destination": "Opacity.swift", "format": "ios/opacity", "filter": {"category": "opacity"}},
                ],
            }
        }
    },
}


def split_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class FigmaSettings:
    access_token: str | None
    file_key: str | None
    collections: list[str] = field(default_factory=list)
    modes: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> "FigmaSettings":
        source = os.environ if env is None else env
        return cls(
            access_token=source.get("FIGMA_ACCESS_TOKEN") or None,
            file_key=source.get("FIGMA_FILE_KEY") or None,
            collections=split_list(source.get("FIGMA_COLLECTIONS")),
            modes=split_list(source.get("FIGMA_MODES")),
        )

    def missing(self) -> list[str]:
        missing = []
        if not self.access_token:
            missing.append("FIGMA_ACCESS_TOKEN")
        if not self.file_key:
            missing.append("FIGMA_FILE_KEY")
        return missing


@dataclass
class GitHubSettings:
    token: str | None
    owner: str | None
    repo: str | None

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> "GitHubSettings":
        source = os.environ if env is None else env
        return cls(
            token=source.get("GITHUB_TOKEN") or None,
            owner=source.get("GITHUB_OWNER") or None,
            repo=source.get("GITHUB_REPO") or None,
        )


def load_environment() -> None:
    load_dotenv()


def require_figma_settings(settings: FigmaSettings) -> FigmaSettings:
    missing = settings.missing()
    if missing:
        console.print("[bold red]Missing required environment variables:")
        console.print(f"[bold red]   {' and '.join(missing)} must be set (environment or .env file)")
        sys.exit(1)
    return settings


def merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: Path | str | None = None) -> dict[str, Any]:
    """Load the pipeline config; only an explicitly requested file must exist."""
    explicit = path is not None or bool(os.getenv("AUTOMATION_CONFIG"))
    config_path = Path(path or os.getenv("AUTOMATION_CONFIG") or DEFAULT_CONFIG_PATH)
    if not config_path.exists():
        if explicit:
            console.print(f"[bold red]Missing config file: {config_path}")
            sys.exit(1)
        return copy.deepcopy(DEFAULT_CONFIG)
    with config_path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        console.print(f"[bold red]Config file {config_path} must contain a mapping")
        sys.exit(1)
    return merge(DEFAULT_CONFIG, data)
