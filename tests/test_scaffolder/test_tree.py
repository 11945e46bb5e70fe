"""Tests for the template tree reader (vclight_create.scaffolder.tree).

Covers:
- Node classification, titles, extensions and modes
- Depth and segment bookkeeping
- Traversal order helpers
- Error handling for missing sources
- Immutability of nodes
"""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path

import pytest

from vclight_create.errors import FilesystemError
from vclight_create.scaffolder.tree import (
    DirectoryNode,
    FileMode,
    FileNode,
    file_extension,
    iter_files,
    read_tree,
    walk,
)

pytestmark = pytest.mark.unit


def _by_segments(tree: DirectoryNode) -> dict[tuple[str, ...], object]:
    return {node.segments: node for node in walk(tree)}


class TestReadTree:
    def test_root_node(self, template_tree: Path):
        tree = read_tree(template_tree)
        assert isinstance(tree, DirectoryNode)
        assert tree.kind == "directory"
        assert tree.title == "tpl"
        assert tree.depth == 0
        assert tree.segments == ()
        assert tree.path == template_tree.resolve()

    def test_children_follow_os_listing_order(self, template_tree: Path):
        tree = read_tree(template_tree)
        expected = [entry.name for entry in os.scandir(template_tree)]
        assert [child.title for child in tree.children] == expected

    def test_classifies_files_and_directories(self, template_tree: Path):
        nodes = _by_segments(read_tree(template_tree))
        assert isinstance(nodes[("src",)], DirectoryNode)
        assert isinstance(nodes[("src", "app")], DirectoryNode)
        assert isinstance(nodes[("README.md",)], FileNode)
        assert nodes[("README.md",)].kind == "file"

    def test_depths(self, template_tree: Path):
        nodes = _by_segments(read_tree(template_tree))
        assert nodes[("README.md",)].depth == 0
        assert nodes[("src",)].depth == 0
        assert nodes[("src", "main.ts.j2")].depth == 1
        assert nodes[("src", "app")].depth == 1
        assert nodes[("src", "app", "router.ts")].depth == 2

    def test_segments_length_matches_depth(self, template_tree: Path):
        for node in iter_files(read_tree(template_tree)):
            assert len(node.segments) == node.depth + 1

    def test_extension_and_mode(self, template_tree: Path):
        nodes = _by_segments(read_tree(template_tree))
        directive = nodes[("src", "main.ts.j2")]
        literal = nodes[("src", "app", "router.ts")]
        assert directive.extension == ".j2"
        assert directive.mode is FileMode.DIRECTIVE
        assert literal.extension == ".ts"
        assert literal.mode is FileMode.LITERAL

    def test_custom_directive_extension(self, template_tree: Path):
        (template_tree / "page.html.tpl").write_text("{{ x }}", encoding="utf-8")
        nodes = _by_segments(read_tree(template_tree, directive_extension=".tpl"))
        assert nodes[("page.html.tpl",)].mode is FileMode.DIRECTIVE
        assert nodes[("src", "main.ts.j2")].mode is FileMode.LITERAL

    def test_relative_path(self, template_tree: Path):
        nodes = _by_segments(read_tree(template_tree))
        assert nodes[("src", "app", "router.ts")].relative_path == Path("src/app/router.ts")

    def test_empty_directory(self, tmp_path: Path):
        (tmp_path / "empty").mkdir()
        tree = read_tree(tmp_path / "empty")
        assert tree.children == ()

    def test_missing_source_raises(self, tmp_path: Path):
        with pytest.raises(FilesystemError):
            read_tree(tmp_path / "does-not-exist")

    def test_file_as_source_raises(self, tmp_path: Path):
        target = tmp_path / "file.txt"
        target.write_text("x", encoding="utf-8")
        with pytest.raises(FilesystemError):
            read_tree(target)

    def test_read_is_side_effect_free(self, template_tree: Path):
        before = sorted(p.relative_to(template_tree) for p in template_tree.rglob("*"))
        read_tree(template_tree)
        after = sorted(p.relative_to(template_tree) for p in template_tree.rglob("*"))
        assert before == after

    def test_nodes_are_frozen(self, template_tree: Path):
        tree = read_tree(template_tree)
        with pytest.raises(dataclasses.FrozenInstanceError):
            tree.depth = 3  # type: ignore[misc]


class TestTraversal:
    def test_walk_is_depth_first_preorder(self, template_tree: Path):
        order = [node.segments for node in walk(read_tree(template_tree))]
        assert order[0] == ()
        assert order.index(("src",)) < order.index(("src", "main.ts.j2"))
        assert order.index(("src", "app")) < order.index(("src", "app", "router.ts"))

    def test_iter_files_only_yields_files(self, template_tree: Path):
        files = list(iter_files(read_tree(template_tree)))
        assert all(isinstance(f, FileNode) for f in files)
        assert {f.relative_path for f in files} == {
            Path("README.md"),
            Path("src/main.ts.j2"),
            Path("src/app/router.ts"),
            Path("src/app/logo.bin"),
        }


class TestFileExtension:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("main.ts.j2", ".j2"),
            ("router.ts", ".ts"),
            (".gitignore", ""),
            ("Makefile", ""),
            (".prettierrc.json", ".json"),
        ],
    )
    def test_extension(self, name: str, expected: str):
        assert file_extension(name) == expected
