#!/usr/bin/env python3
"""Publish a Figma plugin variable export as the canonical token store.

The Design Tokens plugin dumps ``figma.variables.getLocalVariablesAsync()``
(and optionally the local collections) to JSON. This script converts that
dump with the same rules as the REST sync and either commits the store to
GitHub through the contents API or writes it locally.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from rich.console import Console

from automation.figma.github import GitHubAPIError, GitHubContentsClient
from automation.figma.variables import as_id_map, build_store
from automation.shared.settings import (
    GitHubSettings,
    load_config,
    load_environment,
    split_list,
)
from automation.shared.tokens import TokenStore

console = Console()

PLUGIN_METADATA = {
    "source": "figma-plugin",
    "method": "variables-api",
    "note": "Generated from Figma Variables API via plugin",
}


def load_export(path: Path) -> Any:
    if not path.exists():
        console.print(f"[bold red]Plugin export not found: {path}")
        sys.exit(1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as err:
        console.print(f"[bold red]Plugin export {path} is not valid JSON: {err}")
        sys.exit(1)


def store_from_export(
    export: Any,
    collection_filter: list[str] | None = None,
    mode_filter: list[str] | None = None,
) -> TokenStore:
    if isinstance(export, list):
        variables, collections = export, []
    else:
        variables = export.get("variables") or []
        collections = export.get("collections") or export.get("variableCollections") or []
    return build_store(
        as_id_map(variables),
        as_id_map(collections),
        collection_filter=collection_filter or (),
        mode_filter=mode_filter or (),
        metadata=PLUGIN_METADATA,
    )


def commit_store(
    store: TokenStore,
    client: GitHubContentsClient,
    path: str,
    branch: str,
) -> dict[str, Any]:
    console.print(f"Exporting tokens to {client.owner}/{client.repo}:{branch}/{path}")
    return client.commit_json(path, store.to_dict(), branch)


def main() -> None:
    parser = argparse.ArgumentParser(description="Publish a Figma plugin variables export")
    parser.add_argument("--input", type=Path, required=True, help="Plugin export JSON")
    parser.add_argument("--output", type=Path, help="Write the token store locally instead of committing")
    parser.add_argument("--owner", help="GitHub repository owner (default: GITHUB_OWNER)")
    parser.add_argument("--repo", help="GitHub repository name (default: GITHUB_REPO)")
    parser.add_argument("--branch", help="Target branch")
    parser.add_argument("--path", help="Repository path of the token store")
    parser.add_argument("--github-token", help="GitHub token (default: GITHUB_TOKEN)")
    parser.add_argument("--collections", help="Comma list of collection names to include")
    parser.add_argument("--modes", help="Comma list of mode names to include")
    parser.add_argument("--config", help="Pipeline config YAML")
    args = parser.parse_args()

    load_environment()
    config = load_config(args.config)
    store = store_from_export(
        load_export(args.input),
        collection_filter=split_list(args.collections),
        mode_filter=split_list(args.modes),
    )

    if args.output:
        store.save(args.output)
        console.print(f"Tokens saved to {args.output}")
        return

    github = GitHubSettings.from_env()
    token = args.github_token or github.token
    owner = args.owner or github.owner
    repo = args.repo or github.repo
    if not (token and owner and repo):
        console.print("[bold red]Missing GitHub credentials: token, owner and repo are required to commit")
        sys.exit(1)

    client = GitHubContentsClient(token, owner, repo, api_base=config["github"]["api_base"])
    try:
        commit_store(
            store,
            client,
            path=args.path or config["github"]["path"],
            branch=args.branch or config["github"]["branch"],
        )
    finally:
        client.close()
    console.print(f"[green]Exported tokens: {store.counts()}")


if __name__ == "__main__":
    try:
        main()
    except GitHubAPIError as err:
        console.print(f"[bold red]GitHub export failed: {err}")
        sys.exit(1)
