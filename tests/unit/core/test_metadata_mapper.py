"""Tests for MetadataMapper normalization and link policy."""

import os
from pathlib import Path

import pytest

from strongbox.core.metadata_mapper import MetadataMapper
from strongbox.core.path_prefixer import PathPrefixer
from strongbox.domain.entities import EntryKind, LinkPolicy
from strongbox.domain.exceptions import UnsupportedLinkError
from tests.helpers.filesystem import requires_posix


def _mapper(root: Path, policy: LinkPolicy = LinkPolicy.DISALLOW_LINKS) -> MetadataMapper:
    return MetadataMapper(PathPrefixer(str(root)), policy)


class TestNormalize:
    """Tests for normalizing regular entries."""

    def test_file_carries_size(self, tmp_path: Path):
        """Test that files get kind, relative path, timestamp and size."""
        target = tmp_path / "docs" / "note.txt"
        target.parent.mkdir()
        target.write_bytes(b"12345")
        os.utime(target, (1_700_000_000, 1_700_000_000))

        metadata = _mapper(tmp_path).normalize(str(target))

        assert metadata is not None
        assert metadata.kind == EntryKind.FILE
        assert metadata.path == "docs/note.txt"
        assert metadata.timestamp == 1_700_000_000
        assert metadata.size == 5

    def test_directory_has_no_size(self, tmp_path: Path):
        """Test that directories carry no size."""
        (tmp_path / "docs").mkdir()

        metadata = _mapper(tmp_path).normalize(str(tmp_path / "docs"))

        assert metadata is not None
        assert metadata.kind == EntryKind.DIR
        assert metadata.path == "docs"
        assert metadata.size is None

    def test_timestamp_is_whole_seconds(self, tmp_path: Path):
        """Test that fractional modification times are truncated to int."""
        target = tmp_path / "a.txt"
        target.write_text("a")
        os.utime(target, (1_700_000_000.75, 1_700_000_000.75))

        metadata = _mapper(tmp_path).normalize(str(target))

        assert metadata.timestamp == 1_700_000_000
        assert isinstance(metadata.timestamp, int)

    def test_missing_entry_raises_os_error(self, tmp_path: Path):
        """Test that normalizing a missing entry surfaces the OS error."""
        with pytest.raises(FileNotFoundError):
            _mapper(tmp_path).normalize(str(tmp_path / "missing"))


@requires_posix
class TestLinkPolicy:
    """Tests for symbolic link handling."""

    @pytest.fixture
    def link(self, tmp_path: Path) -> Path:
        target = tmp_path / "target.txt"
        target.write_text("hello")
        link = tmp_path / "link.txt"
        link.symlink_to(target)
        return link

    def test_disallowed_link_raises_with_path(self, tmp_path: Path, link: Path):
        """Test that a link under DISALLOW_LINKS fails naming the link."""
        with pytest.raises(UnsupportedLinkError) as exc_info:
            _mapper(tmp_path, LinkPolicy.DISALLOW_LINKS).normalize(str(link))
        assert exc_info.value.path == str(link)

    def test_skipped_link_normalizes_to_none(self, tmp_path: Path, link: Path):
        """Test that a link under SKIP_LINKS is an explicit skip."""
        assert _mapper(tmp_path, LinkPolicy.SKIP_LINKS).normalize(str(link)) is None

    def test_broken_link_is_still_a_link(self, tmp_path: Path):
        """Test that dangling links follow the link policy, not an OS error."""
        dangling = tmp_path / "dangling"
        dangling.symlink_to(tmp_path / "nowhere")

        assert _mapper(tmp_path, LinkPolicy.SKIP_LINKS).normalize(str(dangling)) is None
        with pytest.raises(UnsupportedLinkError):
            _mapper(tmp_path).normalize(str(dangling))
