"""Unit tests for plugin version readers."""

import json
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from modsync.scanners.metadata import (
    EmbeddedVersionReader,
    SidecarVersionReader,
    VersionReadError,
    get_version_reader,
    sidecar_path,
)


class TestSidecarVersionReader:
    """Tests for SidecarVersionReader."""

    def test_reads_version(self, tmp_path: Path) -> None:
        """The version comes from the JSON descriptor."""
        artifact = tmp_path / "Alpha.dll"
        artifact.write_bytes(b"MZ")
        (tmp_path / "Alpha.json").write_text(json.dumps({"version": " 1.2.3 "}))

        assert SidecarVersionReader().read(artifact) == "1.2.3"

    def test_pascal_case_key(self, tmp_path: Path) -> None:
        """A PascalCase Version key is accepted."""
        artifact = tmp_path / "Alpha.dll"
        (tmp_path / "Alpha.json").write_text(json.dumps({"Version": "2.0"}))

        assert SidecarVersionReader().read(artifact) == "2.0"

    def test_missing_descriptor(self, tmp_path: Path) -> None:
        """A missing descriptor raises VersionReadError."""
        with pytest.raises(VersionReadError, match="Missing descriptor"):
            SidecarVersionReader().read(tmp_path / "Alpha.dll")

    def test_malformed_descriptor(self, tmp_path: Path) -> None:
        """Invalid JSON raises VersionReadError."""
        (tmp_path / "Alpha.json").write_text("{nope")

        with pytest.raises(VersionReadError, match="Unreadable"):
            SidecarVersionReader().read(tmp_path / "Alpha.dll")

    @pytest.mark.parametrize("content", [{}, {"version": ""}, {"version": 3}, ["1.0"]])
    def test_no_version(self, tmp_path: Path, content: object) -> None:
        """Descriptors without a usable version string raise VersionReadError."""
        (tmp_path / "Alpha.json").write_text(json.dumps(content))

        with pytest.raises(VersionReadError, match="No version"):
            SidecarVersionReader().read(tmp_path / "Alpha.dll")

    def test_sidecar_path(self) -> None:
        """The descriptor shares the artifact's stem."""
        assert sidecar_path(Path("/p/Alpha.dll")) == Path("/p/Alpha.json")


class TestEmbeddedVersionReader:
    """Tests for EmbeddedVersionReader."""

    def test_not_a_pe_file(self, tmp_path: Path) -> None:
        """Non-PE files raise VersionReadError."""
        artifact = tmp_path / "Alpha.dll"
        artifact.write_bytes(b"definitely not a portable executable")

        with pytest.raises(VersionReadError):
            EmbeddedVersionReader().read(artifact)

    @patch("modsync.scanners.metadata.pefile.PE")
    def test_string_file_version(self, mock_pe_class: MagicMock, tmp_path: Path) -> None:
        """The FileVersion string is preferred."""
        table = SimpleNamespace(entries={b"FileVersion": b"1.4.2"})
        pe = MagicMock()
        pe.FileInfo = [[SimpleNamespace(StringTable=[table])]]
        mock_pe_class.return_value = pe

        assert EmbeddedVersionReader().read(tmp_path / "Alpha.dll") == "1.4.2"
        pe.close.assert_called_once()

    @patch("modsync.scanners.metadata.pefile.PE")
    def test_fixed_file_version(self, mock_pe_class: MagicMock, tmp_path: Path) -> None:
        """Without a string table the fixed file info is used."""
        pe = MagicMock()
        pe.FileInfo = []
        pe.VS_FIXEDFILEINFO = [
            SimpleNamespace(FileVersionMS=(3 << 16) | 9, FileVersionLS=(8 << 16) | 0)
        ]
        mock_pe_class.return_value = pe

        assert EmbeddedVersionReader().read(tmp_path / "spt-core.dll") == "3.9.8.0"

    @patch("modsync.scanners.metadata.pefile.PE")
    def test_no_version_resource(self, mock_pe_class: MagicMock, tmp_path: Path) -> None:
        """A PE file without version information raises VersionReadError."""
        pe = MagicMock()
        pe.FileInfo = []
        pe.VS_FIXEDFILEINFO = []
        mock_pe_class.return_value = pe

        with pytest.raises(VersionReadError, match="No version resource"):
            EmbeddedVersionReader().read(tmp_path / "Alpha.dll")


class TestGetVersionReader:
    """Tests for get_version_reader function."""

    def test_embedded_default(self) -> None:
        """The default reads embedded versions."""
        assert isinstance(get_version_reader(), EmbeddedVersionReader)

    def test_sidecar(self) -> None:
        """The sidecar source reads JSON descriptors."""
        assert isinstance(get_version_reader("sidecar"), SidecarVersionReader)
