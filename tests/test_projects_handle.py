"""Tests for projects/handle.py module."""

from pathlib import Path
from unittest.mock import patch

import pytest

from xcprebuild.errors import NotFoundError
from xcprebuild.projects.handle import (
    ProjectHandle,
    from_descriptor_path,
    generate_from_spec,
)
from xcprebuild.projects.spec import ProjectSpec


class TestProjectHandle:
    """Tests for ProjectHandle paths."""

    def test_paths(self):
        """Should derive paths from name and root directory."""
        project = ProjectHandle(name="EXFoo", root_dir=Path("/pkgs/expo-foo/ios"))

        assert project.descriptor_path() == Path("/pkgs/expo-foo/ios/EXFoo.xcodeproj")
        assert project.spec_path() == Path("/pkgs/expo-foo/ios/EXFoo.spec.yml")
        assert project.artifact_path() == Path("/pkgs/expo-foo/ios/EXFoo.xcframework")

    def test_artifact_path_does_no_io(self, tmp_path):
        """Should not create anything on disk."""
        project = ProjectHandle(name="EXFoo", root_dir=tmp_path / "missing")
        project.artifact_path()
        assert not (tmp_path / "missing").exists()

    def test_for_descriptor(self):
        """Should take the name from the descriptor's base filename."""
        project = ProjectHandle.for_descriptor(Path("/root/ios/EXFoo.xcodeproj"))
        assert project.name == "EXFoo"
        assert project.root_dir == Path("/root/ios")


class TestFromDescriptorPath:
    """Tests for from_descriptor_path function."""

    def test_existing(self, tmp_path):
        """Should wrap an existing descriptor."""
        descriptor = tmp_path / "EXFoo.xcodeproj"
        descriptor.mkdir()

        project = from_descriptor_path(descriptor)

        assert project.name == "EXFoo"
        assert project.root_dir == tmp_path
        assert project.descriptor_path() == descriptor

    def test_missing(self, tmp_path):
        """Should raise NotFoundError for a missing descriptor."""
        with pytest.raises(NotFoundError) as exc_info:
            from_descriptor_path(tmp_path / "EXFoo.xcodeproj")

        assert exc_info.value.code == "not_found"
        assert exc_info.value.path == tmp_path / "EXFoo.xcodeproj"


class TestGenerateFromSpec:
    """Tests for generate_from_spec function."""

    def test_wraps_generated_descriptor(self, tmp_path):
        """Should return a handle for the generated project."""
        spec = ProjectSpec(name="EXFoo")

        with patch(
            "xcprebuild.projects.handle.generate_project_from_spec",
            return_value=tmp_path / "EXFoo.xcodeproj",
        ) as mock_generate:
            project = generate_from_spec(tmp_path, spec)

        mock_generate.assert_called_once()
        assert mock_generate.call_args.args == (tmp_path, spec)
        assert project == ProjectHandle(name="EXFoo", root_dir=tmp_path)
