"""Unit tests for naming and media helpers."""

import re

import pytest

from docpush.utils.file_helpers import (
    generate_branch_name,
    guess_content_type,
    media_extension,
    short_id,
)


class TestGenerateBranchName:
    """Tests for generate_branch_name function."""

    def test_explicit_suffix(self):
        """Test non-alphanumeric characters become dashes."""
        assert generate_branch_name("guides/Setup.md", "1a2b3c4d") == (
            "draft/1a2b3c4d-guides-Setup-md"
        )

    def test_random_suffix_format(self):
        """Test generated names carry an 8-character hex id."""
        name = generate_branch_name("index.md")
        assert re.fullmatch(r"draft/[0-9a-f]{8}-index-md", name)

    def test_same_path_yields_distinct_branches(self):
        """Test concurrent drafts of one document get their own branches."""
        names = {generate_branch_name("guides/setup.md") for _ in range(20)}
        assert len(names) == 20


def test_short_id_is_hex():
    assert re.fullmatch(r"[0-9a-f]{8}", short_id())


class TestMediaExtension:
    """Tests for media_extension function."""

    def test_filename_wins(self):
        assert media_extension("Diagram.PNG", "image/jpeg") == ".png"

    @pytest.mark.parametrize(
        ("content_type", "expected"),
        [
            ("image/jpeg", ".jpg"),
            ("image/gif", ".gif"),
            ("image/webp", ".webp"),
            ("image/svg+xml", ".svg"),
            ("image/png", ".png"),
            (None, ".png"),
            ("application/octet-stream", ".png"),
        ],
    )
    def test_from_content_type(self, content_type, expected):
        """Test the content type decides the extension when no filename is given."""
        assert media_extension(None, content_type) == expected

    def test_filename_without_extension(self):
        assert media_extension("README", None) == ""


class TestGuessContentType:
    def test_known_type(self):
        assert guess_content_type("assets/abc.svg") == "image/svg+xml"

    def test_unknown_type(self):
        assert guess_content_type("assets/abc.bin") == "application/octet-stream"
