import copy

import pytest

from automation.ios import style_dictionary
from automation.ios.style_dictionary import (
    FORMATS,
    UnknownFormatError,
    build_platform,
    flatten,
    register_format,
    render_platform,
    short_name,
)
from automation.ios.swift_renderer import GENERATOR, render_store
from automation.shared.settings import DEFAULT_CONFIG
from automation.shared.tokens import TokenStore

IOS = DEFAULT_CONFIG["style_dictionary"]["platforms"]["ios"]


@pytest.fixture
def mixed_store():
    return TokenStore.from_dict(
        {
            "color": {"primary": {"value": "#007AFF"}, "textSecondary": {"value": "#6D6D70"}},
            "spacing": {"small": {"value": 8}},
            "borderRadius": {"card": {"value": 12}},
            "shadow": {"card": {"value": {"offset": {"x": 0, "y": 2}, "blur": 8, "color": "#000000", "opacity": 0.1}}},
        }
    )


def test_flatten_builds_named_entries(mixed_store):
    entries = flatten(mixed_store)

    assert [entry["name"] for entry in entries] == [
        "color-primary",
        "color-textSecondary",
        "spacing-small",
        "borderRadius-card",
        "shadow-card",
    ]
    assert entries[0]["attributes"] == {"category": "color"}
    assert entries[0]["path"] == ["color", "primary"]
    assert [short_name(entry) for entry in entries] == ["primary", "textSecondary", "small", "card", "card"]


def test_render_platform_matches_handwritten_renderer(mixed_store):
    rendered = render_platform(IOS, mixed_store, generated_at="2025-01-01T00:00:00Z")
    handwritten = render_store(mixed_store, generated_at="2025-01-01T00:00:00Z")

    assert set(rendered) == set(handwritten)
    for filename, content in rendered.items():
        assert "via Style Dictionary" in content
        assert content == handwritten[filename].replace(GENERATOR, style_dictionary.GENERATOR)


def test_file_filter_limits_tokens(mixed_store):
    platform = {"files": [{"destination": "Brand.swift", "format": "ios/colors", "filter": {"category": "spacing"}}]}

    rendered = render_platform(platform, mixed_store, generated_at="now")

    assert rendered["Brand.swift"].endswith("extension Color {\n}\n")


def test_unknown_format_is_rejected(mixed_store):
    platform = {"files": [{"destination": "Tokens.kt", "format": "android/compose"}]}

    with pytest.raises(UnknownFormatError):
        render_platform(platform, mixed_store)


def test_registered_format_is_used(mixed_store, monkeypatch):
    monkeypatch.setattr(style_dictionary, "FORMATS", dict(FORMATS))

    @register_format("text/names")
    def names(entries, options):
        return "\n".join(entry["name"] for entry in entries)

    platform = {"files": [{"destination": "names.txt", "format": "text/names", "filter": {"category": "color"}}]}
    assert render_platform(platform, mixed_store)["names.txt"] == "color-primary\ncolor-textSecondary"


def test_build_platform_writes_to_build_path(mixed_store, tmp_path):
    platform = copy.deepcopy(IOS)
    platform["buildPath"] = str(tmp_path / "Generated")

    written = build_platform("ios", platform, mixed_store)

    assert {path.name for path in written} == {
        "Colors.swift",
        "Typography.swift",
        "Spacing.swift",
        "BorderRadius.swift",
        "Shadows.swift",
        "Opacity.swift",
    }
    assert "static let card: CGFloat = 12" in (tmp_path / "Generated" / "BorderRadius.swift").read_text(encoding="utf-8")


def test_hand_edited_names_match_between_renderers():
    store = TokenStore.from_dict({"color": {"text-secondary": {"value": "#6D6D70"}}})

    rendered = render_platform(IOS, store, generated_at="now")["Colors.swift"]
    handwritten = render_store(store, generated_at="now")["Colors.swift"]

    assert 'static let textsecondary = Color(hex: "#6D6D70")' in handwritten
    assert rendered == handwritten.replace(GENERATOR, style_dictionary.GENERATOR)
