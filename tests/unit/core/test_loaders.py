from __future__ import annotations

"""
Unit tests for the Description File Loaders.

Verifies:
1. Every format yields the same tree for equivalent content.
2. Read and parse failures are reported as None (never raised).
3. Format selection by extension or explicit name.
"""

import os

import pytest

from ctkdecl.core import loaders


def test_formats_produce_equivalent_trees(examples_dir: str) -> None:
    """TC-01: Verify YAML, TOML and XML samples describe the same tree."""
    yaml_tree = loaders.load_yaml(os.path.join(examples_dir, "gui.yaml"))
    toml_tree = loaders.load_toml(os.path.join(examples_dir, "gui.toml"))
    xml_tree = loaders.load_xml(os.path.join(examples_dir, "gui.xml"))

    assert yaml_tree is not None
    assert yaml_tree == toml_tree == xml_tree
    assert [c.id for c in yaml_tree.children] == ["inc", "result", "dec"]
    assert yaml_tree.margin == 10
    assert yaml_tree.children[0].fixed == 60


def test_json_sample_parses(examples_dir: str) -> None:
    """TC-02: Verify the JSON sample nests a row inside the column."""
    tree = loaders.load_json(os.path.join(examples_dir, "gui.json"))

    assert tree.kind == "Column"
    assert tree.children[1].kind == "Row"
    assert tree.count() == 7


def test_json5_allows_comments_and_trailing_commas(examples_dir: str) -> None:
    """TC-03: Verify JSON5 extensions are accepted."""
    tree = loaders.load_json5(os.path.join(examples_dir, "menu.json5"))

    assert [c.kind for c in tree.children] == ["Choice", "Frame"]
    assert tree.children[1].frame == "EngravedBox"


def test_json_and_json5_agree() -> None:
    """TC-04: Verify the same document parses identically as JSON and JSON5."""
    text = '{"widget": "Row", "children": [{"widget": "Button", "label": "a", "w": 10}]}'

    assert loaders.parse(text, "json") == loaders.parse(text, "json5")


def test_xml_single_child_and_attributes() -> None:
    """TC-05: Verify XML attributes are fields and one <children> is one child."""
    tree = loaders.parse_xml('<root widget="Column" margin="4"><children widget="Button" label="x"/></root>')

    assert tree.margin == 4
    assert len(tree.children) == 1
    assert tree.children[0].label == "x"


def test_malformed_file_returns_none(tmp_path) -> None:
    """TC-06: Verify a syntax error is logged and reported as None."""
    path = tmp_path / "broken.json"
    path.write_text('{"widget": "Column", ', encoding="utf-8")

    assert loaders.load_json(str(path)) is None


def test_missing_file_returns_none(tmp_path) -> None:
    """TC-07: Verify an unreadable path is reported as None."""
    assert loaders.load_yaml(str(tmp_path / "absent.yaml")) is None


def test_document_without_tag_returns_none(tmp_path) -> None:
    """TC-08: Verify a structurally invalid tree is reported as None."""
    path = tmp_path / "untagged.toml"
    path.write_text('label = "no widget key"\n', encoding="utf-8")

    assert loaders.load_toml(str(path)) is None


def test_empty_yaml_is_invalid() -> None:
    """TC-09: Verify an empty YAML document is rejected."""
    with pytest.raises(ValueError):
        loaders.parse("", "yaml")


def test_unknown_format_raises() -> None:
    """TC-10: Verify parse() rejects unsupported format names."""
    with pytest.raises(ValueError):
        loaders.parse("{}", "ini")


@pytest.mark.parametrize("path, expected", [
    ("ui.json", loaders.load_json),
    ("ui.JSON5", loaders.load_json5),
    ("ui.yml", loaders.load_yaml),
    ("ui.yaml", loaders.load_yaml),
    ("ui.toml", loaders.load_toml),
    ("ui.xml", loaders.load_xml),
])
def test_loader_for_path_by_extension(path: str, expected) -> None:
    """TC-11: Verify loaders are chosen by file extension."""
    assert loaders.loader_for_path(path) is expected


def test_loader_for_path_explicit_format_and_unknown() -> None:
    """TC-12: Verify explicit formats override the extension and unknowns raise."""
    assert loaders.loader_for_path("ui.txt", "toml") is loaders.load_toml
    with pytest.raises(ValueError):
        loaders.loader_for_path("ui.txt")


@pytest.mark.parametrize("loader", [loaders.load_json, loaders.load_json5, loaders.load_yaml,
                                    loaders.load_toml, loaders.load_xml])
def test_invalid_utf8_is_reported_as_none(tmp_path, loader) -> None:
    """TC-13: Verify undecodable bytes behave like any other read failure."""
    path = tmp_path / "broken.txt"
    path.write_bytes(b'{"widget": "Frame", "label": "\xff"}')

    assert loader(str(path)) is None
