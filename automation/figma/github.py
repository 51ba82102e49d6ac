#!/usr/bin/env python3
"""Commit files through the GitHub repository contents API."""
from __future__ import annotations

import base64
import json
from typing import Any

import httpx
from rich.console import Console

from automation.shared.tokens import utc_timestamp

console = Console()

GITHUB_API_BASE = "https://api.github.com"


class GitHubAPIError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubContentsClient:
    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        api_base: str = GITHUB_API_BASE,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self._client = httpx.Client(
            base_url=api_base.rstrip("/"),
            headers={
                "Authorization": f"token {token}",
                "Accept": "application/vnd.github.v3+json",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _contents_url(self, path: str) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents/{path.lstrip('/')}"

    def get_sha(self, path: str, branch: str | None = None) -> str | None:
        params = {"ref": branch} if branch else None
        try:
            response = self._client.get(self._contents_url(path), params=params)
        except httpx.HTTPError as err:
            console.print(f"[yellow]Could not check existing {path}: {err}; creating it")
            return None
        if response.is_error:
            console.print(f"No existing {path} ({response.status_code}); creating it")
            return None
        body = response.json()
        sha = body.get("sha") if isinstance(body, dict) else None
        if sha:
            console.print(f"Found existing {path}; updating")
        return sha

    def put_file(
        self,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha:
            body["sha"] = sha
        try:
            response = self._client.put(self._contents_url(path), json=body)
        except httpx.HTTPError as err:
            raise GitHubAPIError(f"GitHub request failed: {err}") from err
        if response.is_error:
            try:
                detail = response.json().get("message") or response.reason_phrase
            except ValueError:
                detail = response.text or response.reason_phrase
            raise GitHubAPIError(f"GitHub API error: {detail}", status_code=response.status_code)
        return response.json()

    def commit_json(
        self,
        path: str,
        payload: dict[str, Any],
        branch: str,
        message: str | None = None,
    ) -> dict[str, Any]:
        sha = self.get_sha(path, branch)
        message = message or f"Update design tokens from Figma - {utc_timestamp()}"
        result = self.put_file(path, json.dumps(payload, indent=2), message, branch, sha=sha)
        commit_url = (result.get("commit") or {}).get("html_url")
        if commit_url:
            console.print(f"Committed {path}: {commit_url}")
        return result
