"""
Tests for content discovery and frontmatter parsing services.
"""
import asyncio

import pytest

from conceptgraph.errors import NotFoundError, InvalidPathError, ParseError, GraphFileNotFoundError
from conceptgraph.services import (
    FindOptions,
    id_from_path,
    discover_files,
    find_all_files,
    find_file_by_id,
    count_files,
    list_subdirectories,
    read_file,
    read_text,
    split_frontmatter,
)


@pytest.fixture
def content_tree(tmp_path):
    root = tmp_path / "content"
    (root / "b" / "deep").mkdir(parents=True)
    (root / ".git").mkdir()
    (root / "a.md").write_text("a", encoding="utf-8")
    (root / "b" / "b.md").write_text("b", encoding="utf-8")
    (root / "b" / "deep" / "c.md").write_text("c", encoding="utf-8")
    (root / "b" / "notes.txt").write_text("n", encoding="utf-8")
    (root / ".git" / "config.md").write_text("x", encoding="utf-8")
    (root / "topic-intro.md").write_text("t", encoding="utf-8")
    return root


class TestDiscovery:
    def test_sorted_and_filtered(self, content_tree):
        files = discover_files(content_tree, "**/*.md")
        assert [f.relative_path.as_posix() for f in files] == [
            "a.md", "b/b.md", "b/deep/c.md", "topic-intro.md",
        ]
        assert files[0].stem == "a"

    def test_extension_and_depth(self, content_tree):
        files = discover_files(content_tree, "**/*", FindOptions.markdown().with_max_depth(2))
        assert [f.relative_path.as_posix() for f in files] == ["a.md", "b/b.md", "topic-intro.md"]

    def test_missing_root(self, tmp_path):
        with pytest.raises(NotFoundError):
            discover_files(tmp_path / "nope")

    def test_root_must_be_directory(self, content_tree):
        with pytest.raises(InvalidPathError):
            discover_files(content_tree / "a.md")

    def test_async_helpers(self, content_tree):
        files = asyncio.run(find_all_files(content_tree, FindOptions.markdown()))
        assert len(files) == 4
        assert asyncio.run(count_files(content_tree, glob="**/*.txt")) == 1
        assert [p.name for p in asyncio.run(list_subdirectories(content_tree))] == [".git", "b"]


class TestFindById:
    def test_direct_match(self, content_tree):
        path = asyncio.run(find_file_by_id(content_tree, "a", FindOptions.markdown()))
        assert path == content_tree / "a.md"

    def test_pattern(self, content_tree):
        options = FindOptions.markdown().with_patterns(["b/{id}.md"])
        assert asyncio.run(find_file_by_id(content_tree, "b", options)) == content_tree / "b" / "b.md"

    def test_recursive_and_prefix(self, content_tree):
        assert asyncio.run(find_file_by_id(content_tree, "c", FindOptions.markdown())).name == "c.md"
        assert asyncio.run(find_file_by_id(content_tree, "topic", FindOptions.markdown())).name == "topic-intro.md"

    def test_not_found(self, content_tree):
        with pytest.raises(NotFoundError):
            asyncio.run(find_file_by_id(content_tree, "zzz", FindOptions.markdown()))


class TestReading:
    def test_read(self, content_tree):
        assert read_text(content_tree / "a.md") == "a"
        assert asyncio.run(read_file(content_tree / "b" / "b.md")) == "b"

    def test_missing_file(self, tmp_path):
        with pytest.raises(GraphFileNotFoundError) as info:
            read_text(tmp_path / "absent.md")
        assert info.value.is_not_found()

    def test_id_from_path(self):
        assert id_from_path("dir/some-concept.md") == "some-concept"


class TestFrontmatter:
    def test_split(self):
        frontmatter, body = split_frontmatter("---\ntitle: T\ntags: [a, b]\n---\n# Heading\n")
        assert frontmatter == {"title": "T", "tags": ["a", "b"]}
        assert body == "# Heading\n"

    def test_no_frontmatter(self):
        assert split_frontmatter("# Just text\n") == ({}, "# Just text\n")
        assert split_frontmatter("") == ({}, "")

    def test_empty_block_and_bom(self):
        assert split_frontmatter("\ufeff---\n---\nbody") == ({}, "body")

    def test_unterminated(self):
        with pytest.raises(ParseError):
            split_frontmatter("---\ntitle: T\n")

    def test_invalid_yaml(self):
        with pytest.raises(ParseError):
            split_frontmatter("---\ntitle: [oops\n---\n")

    def test_non_mapping(self):
        with pytest.raises(ParseError):
            split_frontmatter("---\n- a\n- b\n---\n")
