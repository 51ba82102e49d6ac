import sys

import pytest

from automation.ios import swift_renderer
from automation.ios.swift_renderer import (
    SHADOW_FALLBACK,
    format_shadow,
    format_typography,
    generate,
    render_store,
    swift_identifier,
    write_files,
)
from automation.shared.tokens import TokenStore, TokenStoreMissing


def test_end_to_end_color_and_spacing(sample_store):
    files = render_store(sample_store, generated_at="2025-01-01T00:00:00Z")

    assert '    static let primary = Color(hex: "#007AFF")' in files["Colors.swift"]
    assert "    static let small: CGFloat = 8\n" in files["Spacing.swift"]
    assert "extension Color {" in files["Colors.swift"]
    assert "struct Spacing {" in files["Spacing.swift"]


def test_one_file_per_category_with_generated_header(sample_store):
    files = render_store(sample_store, generated_at="2025-01-01T00:00:00Z")

    assert sorted(files) == [
        "BorderRadius.swift",
        "Colors.swift",
        "Opacity.swift",
        "Shadows.swift",
        "Spacing.swift",
        "Typography.swift",
    ]
    for filename, content in files.items():
        assert content.startswith(f"//\n//  {filename}\n")
        assert "AUTO-GENERATED FILE - DO NOT EDIT MANUALLY" in content
        assert "Last updated: 2025-01-01T00:00:00Z" in content
        assert "import SwiftUI" in content


def test_empty_category_renders_empty_block():
    files = render_store(TokenStore(), generated_at="now")

    assert files["Opacity.swift"].endswith("struct Opacity {\n}\n")
    assert files["BorderRadius.swift"].endswith("struct BorderRadius {\n}\n")
    assert "struct Shadow {" in files["Shadows.swift"]
    assert files["Shadows.swift"].endswith("extension Shadow {\n}\n")


def test_color_values_are_normalised():
    store = TokenStore.from_dict(
        {"color": {"bare": {"value": "34C759"}, "scrim": {"value": "rgba(0, 0, 0, 0.5)"}}}
    )
    colors = render_store(store, generated_at="now")["Colors.swift"]

    assert 'static let bare = Color(hex: "#34C759")' in colors
    assert 'static let scrim = Color(hex: "#000000").opacity(0.5)' in colors


def test_typography_formats():
    assert format_typography("headline", {"fontSize": 24, "fontWeight": "Bold", "lineHeight": 32}) == (
        "    static let headline = Font.system(size: 24, weight: .bold).lineSpacing(8)"
    )
    assert format_typography("caption", {"fontSize": 12}) == "    static let caption = Font.system(size: 12)"
    assert format_typography("body", 17.0) == "    static let body = Font.system(size: 17)"
    assert format_typography("family", "Inter") == '    static let family = Font.custom("Inter", size: 17)'


def test_shadow_formats():
    assert format_shadow("card", {"offset": {"x": 0, "y": 2}, "blur": 8, "color": "#000000", "opacity": 0.1}) == (
        '    static let card = Shadow(offset: CGSize(width: 0, height: 2), blur: 8, '
        'color: Color(hex: "#000000"), opacity: 0.1)'
    )
    assert format_shadow("lifted", {"offsetX": 1, "offsetY": 3, "blur": 6.0, "colorHex": "#111111", "opacity": 0.2}) == (
        '    static let lifted = Shadow(offset: CGSize(width: 1, height: 3), blur: 6, '
        'color: Color(hex: "#111111"), opacity: 0.2)'
    )
    assert format_shadow("soft", 4.0) == f"    static let soft = {SHADOW_FALLBACK}"


def test_swift_identifier():
    assert swift_identifier("TextSecondary") == "textSecondary"
    assert swift_identifier("2xl") == "_2xl"
    assert swift_identifier("default") == "`default`"
    assert swift_identifier("text-secondary") == "textsecondary"
    assert swift_identifier("brand.primary 2") == "brandprimary2"


def test_non_numeric_values_are_skipped_in_numeric_categories():
    store = TokenStore.from_dict({"spacing": {"flag": {"value": True}, "gap": {"value": 4.5}}})
    spacing = render_store(store, generated_at="now")["Spacing.swift"]

    assert "flag" not in spacing
    assert "static let gap: CGFloat = 4.5" in spacing


def test_write_files_creates_directory_and_overwrites(tmp_path):
    target = tmp_path / "DesignSystem" / "Tokens"
    write_files({"Spacing.swift": "old"}, target)
    write_files({"Spacing.swift": "new"}, target)

    assert (target / "Spacing.swift").read_text(encoding="utf-8") == "new"


def test_generate_requires_store(tmp_path):
    with pytest.raises(TokenStoreMissing):
        generate(tmp_path / "missing.json", tmp_path / "out")
    assert not (tmp_path / "out").exists()


def test_main_exits_when_store_missing(monkeypatch, tmp_path):
    monkeypatch.delenv("AUTOMATION_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["swift_renderer", "--tokens", str(tmp_path / "none.json")])

    with pytest.raises(SystemExit) as exc:
        swift_renderer.main()

    assert exc.value.code == 1


def test_main_writes_files(monkeypatch, tmp_path, sample_store):
    store_path = tmp_path / "tokens.json"
    sample_store.save(store_path)
    monkeypatch.delenv("AUTOMATION_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        sys, "argv", ["swift_renderer", "--tokens", str(store_path), "--output-dir", str(tmp_path / "out")]
    )

    swift_renderer.main()

    assert 'Color(hex: "#007AFF")' in (tmp_path / "out" / "Colors.swift").read_text(encoding="utf-8")
