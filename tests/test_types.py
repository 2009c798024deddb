"""Tests for shared types module."""

import dataclasses
from pathlib import Path

import pytest

from xcprebuild.types import (
    Flavor,
    Framework,
    PrebuildResult,
    StdOutput,
    XcodebuildOptions,
)


class TestEnums:
    """Test enum definitions."""

    def test_std_output_values(self) -> None:
        """StdOutput should have expected values."""
        assert StdOutput.STDERR.value == "stderr"
        assert StdOutput.IGNORE.value == "ignore"
        assert StdOutput.INHERIT.value == "inherit"
        assert StdOutput.CAPTURE.value == "capture"


class TestFlavor:
    """Test Flavor dataclass."""

    def test_archs_stored_as_tuple(self) -> None:
        """Archs given as a list should be stored as a tuple."""
        flavor = Flavor("Release", "iphonesimulator", ["arm64", "x86_64"])
        assert flavor.archs == ("arm64", "x86_64")

    def test_is_immutable(self) -> None:
        """Flavor fields should not be assignable."""
        flavor = Flavor("Release", "iphoneos", ("arm64",))
        with pytest.raises(dataclasses.FrozenInstanceError):
            flavor.sdk = "iphonesimulator"  # type: ignore[misc]

    def test_equal_flavors_hash_equal(self) -> None:
        """Equal flavors should be usable as the same dict key."""
        a = Flavor("Release", "iphoneos", ["arm64"])
        b = Flavor("Release", "iphoneos", ("arm64",))
        assert a == b
        assert len({a, b}) == 1


class TestDataclasses:
    """Test remaining dataclass definitions."""

    def test_framework(self) -> None:
        """Framework should keep its fields."""
        flavor = Flavor("Release", "iphoneos", ("arm64",))
        framework = Framework(
            target="EXFoo",
            flavor=flavor,
            framework_path=Path("/tmp/EXFoo.framework"),
            binary_size=1024,
        )
        assert framework.flavor is flavor
        assert framework.binary_size == 1024

    def test_xcodebuild_options_defaults(self) -> None:
        """XcodebuildOptions should default to no settings and loud output."""
        options = XcodebuildOptions()
        assert options.quiet is False
        assert options.settings is None
        assert options.std_output is None

    def test_prebuild_result_defaults(self) -> None:
        """PrebuildResult should have no xcframework by default."""
        result = PrebuildResult(package_name="expo-foo", duration_seconds=1.5)
        assert result.xcframework_path is None
