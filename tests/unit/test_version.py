"""Unit tests for SchemaVersion."""

import pytest

from fcpxml_toolkit.config import Settings
from fcpxml_toolkit.models.version import SchemaVersion


class TestSchemaVersion:
    """Test version parsing and ordering."""

    def test_orders_numerically(self):
        """Test 1.9 sorts before 1.10."""
        assert SchemaVersion.V1_9 < SchemaVersion.V1_10
        assert SchemaVersion.V1_14 > SchemaVersion.V1_9
        assert sorted([SchemaVersion.V1_10, SchemaVersion.V1_5, SchemaVersion.V1_9]) == [
            SchemaVersion.V1_5, SchemaVersion.V1_9, SchemaVersion.V1_10,
        ]

    def test_latest_and_default(self):
        """Test 1.14 is both the latest and default version."""
        assert SchemaVersion.latest() == SchemaVersion.V1_14
        assert SchemaVersion.default() == SchemaVersion.V1_14

    def test_default_follows_settings(self):
        """Test the default version comes from ``default_version``."""
        assert SchemaVersion.default(Settings(default_version="1.10")) == SchemaVersion.V1_10
        assert SchemaVersion.default(Settings(default_version="1_8")) == SchemaVersion.V1_8

    def test_unsupported_default_raises(self):
        with pytest.raises(ValueError, match="default_version"):
            SchemaVersion.default(Settings(default_version="2.0"))

    @pytest.mark.parametrize("text,expected", [
        ("1.14", SchemaVersion.V1_14),
        ("1_14", SchemaVersion.V1_14),
        (" 1.8 ", SchemaVersion.V1_8),
        ("1.4", None),
        ("2.0", None),
        ("", None),
        (None, None),
    ])
    def test_from_string(self, text, expected):
        """Test dotted and underscored forms."""
        assert SchemaVersion.from_string(text) == expected

    def test_uses_asset_src(self):
        """Test the media-rep boundary at 1.9."""
        assert SchemaVersion.V1_8.uses_asset_src
        assert not SchemaVersion.V1_9.uses_asset_src
        assert not SchemaVersion.V1_14.uses_asset_src

    def test_dtd_resource_name(self):
        """Test grammar file naming."""
        assert SchemaVersion.V1_10.dtd_resource_name == "Final_Cut_Pro_XML_DTD_version_1.10"

    def test_str_and_minor(self):
        """Test display helpers."""
        assert str(SchemaVersion.V1_12) == "1.12"
        assert SchemaVersion.V1_12.minor == 12
        assert SchemaVersion.V1_12.is_at_least(SchemaVersion.V1_11)
