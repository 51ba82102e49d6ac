#!/usr/bin/env python3
"""Minimal Figma REST client for file content and local variables."""
from __future__ import annotations

from typing import Any

import httpx
from rich.console import Console

console = Console()

FIGMA_API_BASE = "https://api.figma.com/v1"


class FigmaAPIError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None, body: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class FigmaClient:
    def __init__(
        self,
        access_token: str,
        api_base: str = FIGMA_API_BASE,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=api_base.rstrip("/"),
            headers={"X-Figma-Token": access_token},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "FigmaClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _get(self, path: str) -> dict[str, Any]:
        try:
            response = self._client.get(path)
        except httpx.HTTPError as err:
            raise FigmaAPIError(f"Request to Figma failed: {err}") from err
        if response.is_error:
            try:
                body: Any = response.json()
            except ValueError:
                body = response.text
            raise FigmaAPIError(
                f"Figma API returned {response.status_code} for {path}: {body}",
                status_code=response.status_code,
                body=body,
            )
        return response.json()

    def get_file(self, file_key: str) -> dict[str, Any]:
        data = self._get(f"/files/{file_key}")
        console.print(f"File loaded: {data.get('name', file_key)}")
        return data

    def get_local_variables(self, file_key: str) -> dict[str, Any]:
        return self._get(f"/files/{file_key}/variables/local")
