"""Tests for coop.config.schemas module."""

import pytest
from pydantic import ValidationError

from coop.config.schemas import AddonEntry, AddonSpec, ProjectConfig


class TestAddonEntry:
    """Tests for AddonEntry model."""

    def test_defaults(self):
        """Checkout defaults to main and subfolder to the whole tree."""
        entry = AddonEntry(url="https://example.com/foo.git")

        assert entry.checkout == "main"
        assert entry.subfolder == "/"

    def test_strips_url_whitespace(self):
        """Surrounding whitespace is removed from the URL."""
        entry = AddonEntry(url="  https://example.com/foo.git \n")
        assert entry.url == "https://example.com/foo.git"

    def test_rejects_blank_url(self):
        """Blank URL is rejected."""
        with pytest.raises(ValidationError):
            AddonEntry(url="   ")

    def test_rejects_blank_checkout(self):
        """Blank checkout reference is rejected."""
        with pytest.raises(ValidationError):
            AddonEntry(url="https://example.com/foo.git", checkout="")

    def test_rejects_parent_traversal_in_subfolder(self):
        """Subfolders cannot escape the addon source."""
        with pytest.raises(ValidationError, match="inside the addon source"):
            AddonEntry(url="https://example.com/foo.git", subfolder="../other")


class TestAddonSpec:
    """Tests for AddonSpec model."""

    def test_is_frozen(self, foo_spec: AddonSpec):
        """Specs are immutable."""
        with pytest.raises(ValidationError):
            foo_spec.checkout = "v2.0"  # type: ignore[misc]

    @pytest.mark.parametrize("name", ["", "a/b", "a\\b", ".", ".."])
    def test_rejects_invalid_names(self, name: str):
        """Names must be a single directory name."""
        with pytest.raises(ValidationError):
            AddonSpec(name=name, url="https://example.com/foo.git")

    def test_from_entry(self):
        """Builds a spec from a configuration entry."""
        entry = AddonEntry(url="https://example.com/foo.git", checkout="v1.0", subfolder="src")

        spec = AddonSpec.from_entry("foo", entry)

        assert spec == AddonSpec(
            name="foo", url="https://example.com/foo.git", checkout="v1.0", subfolder="src"
        )

    def test_str(self, foo_spec: AddonSpec):
        """String form names the addon and its checkout."""
        assert str(foo_spec) == "foo@v1.0"


class TestProjectConfig:
    """Tests for ProjectConfig model."""

    def test_defaults(self):
        """Default directories match the conventional layout."""
        config = ProjectConfig()

        assert config.path == "addons"
        assert config.cache == ".addons"
        assert config.copy_strategy == "auto"
        assert config.addons == {}

    def test_parses_addons(self):
        """Parses addon entries from raw data."""
        config = ProjectConfig.model_validate(
            {
                "addons": {
                    "foo": {"url": "https://example.com/foo.git", "checkout": "v1.0"},
                    "bar": {"url": "https://example.com/bar.git"},
                }
            }
        )

        specs = config.get_addon_specs()

        assert [s.name for s in specs] == ["foo", "bar"]
        assert specs[0].checkout == "v1.0"
        assert specs[1].checkout == "main"

    def test_rejects_invalid_addon_name(self):
        """Addon keys must be valid directory names."""
        with pytest.raises(ValidationError):
            ProjectConfig.model_validate(
                {"addons": {"../evil": {"url": "https://example.com/x.git"}}}
            )

    def test_rejects_unknown_copy_strategy(self):
        """Only known copy strategies are accepted."""
        with pytest.raises(ValidationError):
            ProjectConfig.model_validate({"copy_strategy": "xcopy"})

    def test_rejects_empty_path(self):
        """Install directory cannot be empty."""
        with pytest.raises(ValidationError):
            ProjectConfig(path="  ")
