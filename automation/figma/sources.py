#!/usr/bin/env python3
"""Interchangeable token sources behind one ``fetch() -> TokenStore`` contract."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

import httpx

from automation.figma.client import FIGMA_API_BASE, FigmaClient
from automation.figma.file_content import fetch_file_store
from automation.figma.plugin_export import load_export, store_from_export
from automation.figma.variables import fetch_variables_store
from automation.shared.settings import FigmaSettings, require_figma_settings
from automation.shared.tokens import TokenStore

METHODS = ("variables", "file", "plugin")


class TokenSource(Protocol):
    name: str

    def fetch(self) -> TokenStore:
        ...


class _FigmaSource:
    name = "figma"

    def __init__(
        self,
        settings: FigmaSettings,
        api_base: str = FIGMA_API_BASE,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        # Credentials are checked before any client exists, so a missing token
        # never reaches the network.
        self.settings = require_figma_settings(settings)
        self.api_base = api_base
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> FigmaClient:
        return FigmaClient(
            self.settings.access_token,
            api_base=self.api_base,
            timeout=self.timeout,
            transport=self.transport,
        )


class VariablesSource(_FigmaSource):
    name = "variables"

    def fetch(self) -> TokenStore:
        with self._client() as client:
            return fetch_variables_store(self.settings, client)


class FileContentSource(_FigmaSource):
    name = "file"

    def fetch(self) -> TokenStore:
        with self._client() as client:
            return fetch_file_store(self.settings, client)


class PluginExportSource:
    name = "plugin"

    def __init__(self, export_path: Path, settings: FigmaSettings | None = None) -> None:
        self.export_path = export_path
        self.settings = settings or FigmaSettings(access_token=None, file_key=None)

    def fetch(self) -> TokenStore:
        return store_from_export(
            load_export(self.export_path),
            collection_filter=self.settings.collections,
            mode_filter=self.settings.modes,
        )


def build_source(
    method: str,
    settings: FigmaSettings,
    config: dict[str, Any] | None = None,
    export_path: Path | None = None,
    transport: httpx.BaseTransport | None = None,
) -> TokenSource:
    figma_config = (config or {}).get("figma", {})
    api_base = figma_config.get("api_base", FIGMA_API_BASE)
    timeout = float(figma_config.get("timeout", 30))
    if method == "variables":
        return VariablesSource(settings, api_base=api_base, timeout=timeout, transport=transport)
    if method == "file":
        return FileContentSource(settings, api_base=api_base, timeout=timeout, transport=transport)
    if method == "plugin":
        if export_path is None:
            raise ValueError("The plugin source needs the path of a plugin export (--input)")
        return PluginExportSource(export_path, settings)
    raise ValueError(f"Unknown sync method: {method} (expected one of {', '.join(METHODS)})")
