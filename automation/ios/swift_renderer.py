#!/usr/bin/env python3
"""Render the token store into SwiftUI design-token source files."""
from __future__ import annotations

import argparse
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from rich.console import Console

from automation.shared.settings import load_config
from automation.shared.tokens import Category, Token, TokenStore, TokenStoreError, load_store, utc_timestamp

console = Console()

GENERATOR = "Generated from Figma Variables"
DEFAULT_FONT_SIZE = 17
IDENTIFIER_INVALID = re.compile(r"[^0-9A-Za-z_]")
RGBA_PATTERN = re.compile(r"rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*([0-9.]+)\s*\)")
SWIFT_KEYWORDS = {
    "as", "break", "case", "catch", "class", "continue", "default", "defer", "do", "else",
    "enum", "extension", "fallthrough", "false", "for", "func", "guard", "if", "import",
    "in", "init", "internal", "is", "let", "nil", "operator", "private", "protocol",
    "public", "repeat", "return", "self", "static", "struct", "subscript", "super",
    "switch", "throw", "throws", "true", "try", "var", "where", "while",
}

SHADOW_STRUCT = """struct Shadow {
    let offset: CGSize
    let blur: CGFloat
    let color: Color
    let opacity: Double

    init(offset: CGSize, blur: CGFloat, color: Color, opacity: Double) {
        self.offset = offset
        self.blur = blur
        self.color = color
        self.opacity = opacity
    }
}

"""
SHADOW_FALLBACK = "Shadow(offset: CGSize(width: 0, height: 2), blur: 4, color: .black, opacity: 0.1)"


def swift_identifier(name: str) -> str:
    name = IDENTIFIER_INVALID.sub("", name)
    if not name:
        return "_"
    ident = name[0].lower() + name[1:]
    if ident[0].isdigit():
        ident = f"_{ident}"
    if ident in SWIFT_KEYWORDS:
        ident = f"`{ident}`"
    return ident


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def color_literal(value: str) -> str:
    value = str(value).strip()
    match = RGBA_PATTERN.fullmatch(value)
    if match:
        r, g, b = (int(part) for part in match.group(1, 2, 3))
        return f'Color(hex: "#{r:02x}{g:02x}{b:02x}").opacity({match.group(4)})'
    hex_value = value if value.startswith("#") else f"#{value}"
    return f'Color(hex: "{hex_value}")'


def format_color(name: str, value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return f"    static let {swift_identifier(name)} = {color_literal(value)}"


def format_typography(name: str, value: Any) -> str | None:
    ident = swift_identifier(name)
    if isinstance(value, dict):
        size = value.get("fontSize", DEFAULT_FONT_SIZE)
        font = f"Font.system(size: {format_number(size)}"
        if value.get("fontWeight"):
            font += f", weight: .{str(value['fontWeight']).lower()}"
        font += ")"
        line_height = value.get("lineHeight")
        if is_number(line_height) and is_number(size):
            font += f".lineSpacing({format_number(line_height - size)})"
        return f"    static let {ident} = {font}"
    if is_number(value):
        return f"    static let {ident} = Font.system(size: {format_number(value)})"
    if isinstance(value, str) and value:
        return f'    static let {ident} = Font.custom("{value}", size: {DEFAULT_FONT_SIZE})'
    return None


def numeric_formatter(swift_type: str) -> Callable[[str, Any], str | None]:
    def format_value(name: str, value: Any) -> str | None:
        if not is_number(value):
            return None
        return f"    static let {swift_identifier(name)}: {swift_type} = {format_number(value)}"

    return format_value


def format_shadow(name: str, value: Any) -> str | None:
    ident = swift_identifier(name)
    if not isinstance(value, dict):
        return f"    static let {ident} = {SHADOW_FALLBACK}"
    offset = value.get("offset") if isinstance(value.get("offset"), dict) else {}
    x = offset.get("x", value.get("offsetX", 0))
    y = offset.get("y", value.get("offsetY", 0))
    color = value.get("color") or value.get("colorHex") or "#000000"
    return (
        f"    static let {ident} = Shadow(offset: CGSize(width: {format_number(x)}, height: {format_number(y)}), "
        f"blur: {format_number(value.get('blur', 0))}, color: {color_literal(color)}, "
        f"opacity: {format_number(value.get('opacity', 1))})"
    )


@dataclass(frozen=True)
class SwiftFile:
    filename: str
    category: Category
    opening: str
    formatter: Callable[[str, Any], str | None]
    preamble: str = ""


SWIFT_FILES = [
    SwiftFile("Colors.swift", Category.COLOR, "extension Color {", format_color),
    SwiftFile("Typography.swift", Category.TYPOGRAPHY, "extension Font {", format_typography),
    SwiftFile("Spacing.swift", Category.SPACING, "struct Spacing {", numeric_formatter("CGFloat")),
    SwiftFile("BorderRadius.swift", Category.BORDER_RADIUS, "struct BorderRadius {", numeric_formatter("CGFloat")),
    SwiftFile("Shadows.swift", Category.SHADOW, "extension Shadow {", format_shadow, preamble=SHADOW_STRUCT),
    SwiftFile("Opacity.swift", Category.OPACITY, "struct Opacity {", numeric_formatter("Double")),
]
SWIFT_FILES_BY_CATEGORY = {swift_file.category: swift_file for swift_file in SWIFT_FILES}


def header(filename: str, generated_at: str, generator: str = GENERATOR) -> str:
    return (
        "//\n"
        f"//  {filename}\n"
        "//  Design System\n"
        "//\n"
        "//  ⚠️  AUTO-GENERATED FILE - DO NOT EDIT MANUALLY\n"
        f"//  {generator}\n"
        f"//  Last updated: {generated_at}\n"
        "//\n"
        "\n"
        "import SwiftUI\n"
        "\n"
    )


def render_declarations(swift_file: SwiftFile, tokens: list[Token]) -> list[str]:
    lines = []
    for token in tokens:
        line = swift_file.formatter(token.name, token.value)
        if line is None:
            console.print(
                f"[yellow]Skipping {swift_file.category.value} token '{token.name}': unsupported value {token.value!r}"
            )
            continue
        lines.append(line)
    return lines


def render_file(
    swift_file: SwiftFile,
    tokens: list[Token],
    generated_at: str,
    generator: str = GENERATOR,
) -> str:
    body = "\n".join(render_declarations(swift_file, tokens))
    block = f"{swift_file.opening}\n{body}\n}}\n" if body else f"{swift_file.opening}\n}}\n"
    return header(swift_file.filename, generated_at, generator) + swift_file.preamble + block


def render_store(store: TokenStore, generated_at: str | None = None) -> dict[str, str]:
    generated_at = generated_at or utc_timestamp()
    return {
        swift_file.filename: render_file(swift_file, store.tokens(swift_file.category), generated_at)
        for swift_file in SWIFT_FILES
    }


def write_files(files: dict[str, str], output_dir: Path) -> list[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for filename, content in files.items():
        path = output_dir / filename
        path.write_text(content, encoding="utf-8")
        console.print(f"Generated {path}")
        written.append(path)
    return written


def generate(store_path: Path, output_dir: Path) -> list[Path]:
    store = load_store(store_path)
    return write_files(render_store(store), output_dir)


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate Swift design token files")
    parser.add_argument("--tokens", type=Path, help="Token store JSON (default from config)")
    parser.add_argument("--output-dir", type=Path, help="Destination directory (default from config)")
    parser.add_argument("--config", help="Pipeline config YAML")
    args = parser.parse_args()

    config = load_config(args.config)
    store_path = args.tokens or Path(config["tokens"]["store_path"])
    output_dir = args.output_dir or Path(config["tokens"]["output_dir"])
    try:
        generate(store_path, output_dir)
    except TokenStoreError as err:
        console.print(f"[bold red]{err}. Run python3 -m automation.shared.sync_tokens first.")
        sys.exit(1)
    console.print("[bold green]Swift token generation complete")


if __name__ == "__main__":
    main()
