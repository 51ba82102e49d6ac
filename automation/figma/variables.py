#!/usr/bin/env python3
"""Turn Figma local variables into a token store.

Both the REST ``/variables/local`` response and the plugin's
``getLocalVariablesAsync`` export go through :func:`build_store`, so the two
sources categorise and convert values identically.
"""
from __future__ import annotations

from typing import Any, Iterable

from rich.console import Console

from automation.figma.client import FigmaClient
from automation.shared.settings import FigmaSettings
from automation.shared.tokens import (
    Token,
    TokenStore,
    classify_category,
    convert_value,
    sanitize_name,
)

console = Console()


def as_id_map(items: Any) -> dict[str, dict[str, Any]]:
    if isinstance(items, dict):
        return {str(key): value for key, value in items.items() if isinstance(value, dict)}
    mapping: dict[str, dict[str, Any]] = {}
    for item in items or []:
        if isinstance(item, dict) and item.get("id"):
            mapping[str(item["id"])] = item
    return mapping


def mode_names(collection: dict[str, Any]) -> dict[str, str]:
    modes = collection.get("modes") or {}
    if isinstance(modes, dict):
        return {
            str(mode_id): (mode.get("name") if isinstance(mode, dict) else str(mode)) or str(mode_id)
            for mode_id, mode in modes.items()
        }
    return {str(mode["modeId"]): mode.get("name") or str(mode["modeId"]) for mode in modes if "modeId" in mode}


def normalise_response(data: dict[str, Any]) -> tuple[dict[str, dict], dict[str, dict]]:
    """Return ``(variables, collections)`` keyed by id from a variables payload."""
    meta = data.get("meta") or {}
    variables = meta.get("variables") or data.get("values") or data.get("variables") or {}
    collections = meta.get("variableCollections") or data.get("collections") or {}
    return as_id_map(variables), as_id_map(collections)


def ordered_modes(values_by_mode: dict[str, Any], collection: dict[str, Any]) -> list[str]:
    default_mode = collection.get("defaultModeId")
    known = list(mode_names(collection))
    order = [default_mode] if default_mode in values_by_mode else []
    order += [mode_id for mode_id in known if mode_id in values_by_mode and mode_id not in order]
    order += [mode_id for mode_id in values_by_mode if mode_id not in order]
    return order


def build_store(
    variables: dict[str, dict[str, Any]],
    collections: dict[str, dict[str, Any]],
    collection_filter: Iterable[str] = (),
    mode_filter: Iterable[str] = (),
    metadata: dict[str, Any] | None = None,
) -> TokenStore:
    wanted_collections = set(collection_filter)
    wanted_modes = set(mode_filter)
    if not collections and (wanted_collections or wanted_modes):
        # collection and mode names live on the collections; without them nothing can match
        console.print("[yellow]No collection metadata in the payload; ignoring collection and mode filters")
        wanted_collections = set()
        wanted_modes = set()
    store = TokenStore(metadata)

    for variable_id, variable in variables.items():
        if variable.get("remote") or variable.get("deletedButReferenced"):
            continue
        collection_id = variable.get("variableCollectionId") or variable.get("collectionId")
        collection = collections.get(str(collection_id), {})
        collection_name = collection.get("name", "")
        if wanted_collections and collection_name not in wanted_collections:
            continue

        original_name = variable.get("name", "")
        name = sanitize_name(original_name)
        if not name:
            console.print(f"[yellow]Skipping variable with unusable name: {original_name!r}")
            continue
        resolved_type = variable.get("resolvedType")
        category = classify_category(original_name, resolved_type)

        names = mode_names(collection)
        values_by_mode = variable.get("valuesByMode") or {}
        converted: dict[str, Any] = {}
        for mode_id in ordered_modes(values_by_mode, collection):
            mode_name = names.get(mode_id, mode_id)
            if wanted_modes and mode_name not in wanted_modes:
                continue
            value = convert_value(resolved_type, values_by_mode[mode_id])
            if value is not None:
                converted[mode_name] = value

        if not converted:
            continue

        token_metadata: dict[str, Any] = {
            "variableId": variable.get("key") or variable.get("id") or variable_id,
            "originalName": original_name,
            "resolvedType": resolved_type,
        }
        if collection_name:
            token_metadata["collection"] = collection_name
        if len(converted) > 1:
            token_metadata["modes"] = converted
        store.add(Token(name=name, category=category, value=next(iter(converted.values())), metadata=token_metadata))

    return store


def fetch_variables_store(settings: FigmaSettings, client: FigmaClient) -> TokenStore:
    console.print("Fetching variables from Figma...")
    data = client.get_local_variables(settings.file_key)
    variables, collections = normalise_response(data)
    console.print(f"Found {len(variables)} variables in {len(collections)} collections")
    return build_store(
        variables,
        collections,
        collection_filter=settings.collections,
        mode_filter=settings.modes,
        metadata={
            "source": "figma",
            "method": "variables-api",
            "note": "Generated from the Figma Variables REST API",
        },
    )
