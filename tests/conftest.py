from __future__ import annotations

import copy
from typing import Any

import pytest

from automation.shared.settings import DEFAULT_CONFIG
from automation.shared.tokens import TokenStore


@pytest.fixture
def config(tmp_path) -> dict[str, Any]:
    data = copy.deepcopy(DEFAULT_CONFIG)
    data["tokens"]["store_path"] = str(tmp_path / "tokens" / "figma-tokens.json")
    data["tokens"]["output_dir"] = str(tmp_path / "DesignSystem" / "Tokens")
    return data


@pytest.fixture
def variables_payload() -> dict[str, Any]:
    """Shape of GET /v1/files/{key}/variables/local."""
    return {
        "status": 200,
        "error": False,
        "meta": {
            "variableCollections": {
                "VariableCollectionId:1": {
                    "id": "VariableCollectionId:1",
                    "name": "Primitives",
                    "defaultModeId": "1:0",
                    "modes": [{"modeId": "1:0", "name": "Light"}, {"modeId": "1:1", "name": "Dark"}],
                },
                "VariableCollectionId:2": {
                    "id": "VariableCollectionId:2",
                    "name": "Layout",
                    "defaultModeId": "2:0",
                    "modes": [{"modeId": "2:0", "name": "Default"}],
                },
            },
            "variables": {
                "VariableID:1": {
                    "id": "VariableID:1",
                    "name": "color/primary",
                    "resolvedType": "COLOR",
                    "variableCollectionId": "VariableCollectionId:1",
                    "valuesByMode": {
                        "1:1": {"r": 0.04, "g": 0.52, "b": 1, "a": 1},
                        "1:0": {"r": 0, "g": 0.478, "b": 1, "a": 1},
                    },
                },
                "VariableID:2": {
                    "id": "VariableID:2",
                    "name": "space-lg",
                    "resolvedType": "FLOAT",
                    "variableCollectionId": "VariableCollectionId:2",
                    "valuesByMode": {"2:0": 24},
                },
                "VariableID:3": {
                    "id": "VariableID:3",
                    "name": "corner-radius-lg",
                    "resolvedType": "FLOAT",
                    "variableCollectionId": "VariableCollectionId:2",
                    "valuesByMode": {"2:0": 12},
                },
                "VariableID:4": {
                    "id": "VariableID:4",
                    "name": "overlay-opacity",
                    "resolvedType": "FLOAT",
                    "variableCollectionId": "VariableCollectionId:2",
                    "valuesByMode": {"2:0": 0.6},
                },
                "VariableID:5": {
                    "id": "VariableID:5",
                    "name": "font-family-body",
                    "resolvedType": "STRING",
                    "variableCollectionId": "VariableCollectionId:1",
                    "valuesByMode": {"1:0": "Inter"},
                },
                "VariableID:6": {
                    "id": "VariableID:6",
                    "name": "color/alias",
                    "resolvedType": "COLOR",
                    "variableCollectionId": "VariableCollectionId:1",
                    "valuesByMode": {"1:0": {"type": "VARIABLE_ALIAS", "id": "VariableID:1"}},
                },
            },
        },
    }


@pytest.fixture
def plugin_export() -> dict[str, Any]:
    """Shape written by the Figma plugin from getLocalVariablesAsync()."""
    return {
        "variables": [
            {
                "id": "VariableID:9",
                "key": "abc123",
                "name": "Brand/Background",
                "resolvedType": "COLOR",
                "variableCollectionId": "c1",
                "valuesByMode": {"m1": {"r": 1, "g": 1, "b": 1, "a": 0.5}},
            },
            {
                "id": "VariableID:10",
                "key": "def456",
                "name": "padding/small",
                "resolvedType": "FLOAT",
                "variableCollectionId": "c1",
                "valuesByMode": {"m1": 8},
            },
        ],
        "collections": [
            {"id": "c1", "name": "Brand", "defaultModeId": "m1", "modes": [{"modeId": "m1", "name": "Light"}]},
        ],
    }


@pytest.fixture
def file_payload() -> dict[str, Any]:
    """Trimmed GET /v1/files/{key} response."""
    return {
        "name": "Design System",
        "document": {
            "name": "Document",
            "children": [
                {
                    "name": "Page 1",
                    "children": [
                        {
                            "name": "Brand Primary",
                            "fills": [{"type": "SOLID", "color": {"r": 0.72, "g": 0.98, "b": 0.16, "a": 1}}],
                        },
                        {
                            "name": "Frame",
                            "children": [
                                {
                                    "name": "Deep",
                                    "fills": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0, "a": 1}}],
                                    "children": [
                                        {
                                            "name": "Too Deep",
                                            "fills": [{"type": "SOLID", "color": {"r": 1, "g": 1, "b": 1, "a": 1}}],
                                        }
                                    ],
                                }
                            ],
                        },
                    ],
                }
            ],
        },
        "styles": {
            "S:1": {"name": "Brand/Primary", "styleType": "FILL"},
            "S:2": {"name": "Heading", "styleType": "TEXT"},
            "S:3": {"name": "Accent", "styleType": "FILL"},
        },
        "components": {},
    }


@pytest.fixture
def sample_store() -> TokenStore:
    return TokenStore.from_dict(
        {
            "$metadata": {"generatedAt": "2025-01-01T00:00:00Z", "source": "test"},
            "color": {"primary": {"value": "#007AFF", "type": "color"}},
            "spacing": {"small": {"value": 8, "type": "spacing"}},
        }
    )
