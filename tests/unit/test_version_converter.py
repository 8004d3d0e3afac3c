"""Unit tests for VersionConverter."""

import pytest

from fcpxml_toolkit.config import Settings
from fcpxml_toolkit.document import Document
from fcpxml_toolkit.models.version import SchemaVersion
from fcpxml_toolkit.tools.schema_validator import SchemaValidator
from fcpxml_toolkit.tools.version_converter import VersionConversionError, VersionConverter


ASSET_WITHOUT_SOURCE = """<fcpxml version="1.14">
    <resources>
        <format id="r1" frameDuration="100/2400s" width="1920" height="1080"/>
        <asset id="r2" name="Offline" start="0s" duration="2400/2400s"/>
    </resources>
</fcpxml>"""


@pytest.fixture
def converter():
    """Converter reading the bundled grammars."""
    return VersionConverter(settings=Settings())


@pytest.fixture
def schema_validator():
    return SchemaValidator(Settings())


class TestDowngrade:
    """Test conversion to older versions."""

    def test_removes_import_options_for_1_13(self, converter, project_document):
        result = converter.convert(project_document, SchemaVersion.V1_13)

        assert result.succeeded
        converted = result.unwrap()
        assert converted.version == "1.13"
        assert converted.find_first("import-options") is None
        assert converted.find_first("option") is None
        assert result.removed_elements == ["import-options"]

    def test_input_is_not_modified(self, converter, project_document):
        before = project_document.to_string()

        converter.convert(project_document, SchemaVersion.V1_8)

        assert project_document.to_string() == before
        assert project_document.find_first("import-options") is not None

    def test_removes_color_conform_for_1_10(self, converter, project_document):
        """Test a 1.11 adjustment is stripped when targeting 1.10."""
        result = converter.convert(project_document, SchemaVersion.V1_10)

        converted = result.unwrap()
        assert converted.find_first("adjust-colorConform") is None
        assert "adjust-colorConform" in result.removed_elements
        # Elements present in both grammars survive
        assert len(converted.find_all("asset-clip")) == 5
        assert converted.find_first("media-rep") is not None

    def test_promotes_media_rep_for_1_8(self, converter, project_document, schema_validator):
        """Test media-rep src moves onto the asset below 1.9."""
        result = converter.convert(project_document, SchemaVersion.V1_8)

        converted = result.unwrap()
        sources = [converted.get(asset, "src") for asset in converted.find_all("asset")]
        assert sources == ["file:///Volumes/Media/interview.mov", "file:///Volumes/Media/broll.mov"]
        assert converted.find_first("media-rep") is None
        assert result.removed_elements.count("media-rep") == 2

        validation = schema_validator.validate(converted, SchemaVersion.V1_8)
        assert validation.is_valid, validation.detailed_description

    def test_every_downgrade_validates(self, converter, project_document, schema_validator):
        """Test the sample project converts cleanly to every older version."""
        for target in SchemaVersion:
            if target >= SchemaVersion.V1_14:
                continue
            result, validation = converter.convert_and_validate(project_document, target, schema_validator)
            assert result.succeeded, f"{target}: {result.error}"
            assert validation.is_valid, f"{target}: {validation.detailed_description}"

    def test_removes_version_gated_attributes(self, converter, make_spine_document):
        document = make_spine_document('<asset-clip ref="r1" offset="0s" duration="1s"/>')
        format_node = document.find_first("format")
        document.set(format_node, "heroEye", "left")

        result = converter.convert(document, SchemaVersion.V1_12)

        assert result.removed_attributes == ["format@heroEye"]
        assert result.unwrap().get(result.unwrap().find_first("format"), "heroEye") is None


class TestUpgrade:
    """Test conversion to newer versions."""

    def test_wraps_asset_src_in_media_rep(self, converter, legacy_document, schema_validator):
        result = converter.convert(legacy_document, SchemaVersion.V1_14)

        converted = result.unwrap()
        asset = converted.find_first("asset")
        media_rep = converted.first_child(asset, "media-rep")
        assert converted.get(asset, "src") is None
        assert converted.get(media_rep, "src") == "file:///Volumes/Media/skate.mov"
        assert converted.get(media_rep, "kind") == "original-media"
        assert result.removed_elements == []
        assert schema_validator.validate(converted, SchemaVersion.V1_14).is_valid

    def test_upgrade_within_src_era_keeps_src(self, converter, legacy_document):
        converted = converter.convert(legacy_document, SchemaVersion.V1_8).unwrap()
        older = converter.convert(legacy_document, SchemaVersion.V1_7)

        assert converted.get(converted.find_first("asset"), "src") is not None
        assert older.succeeded

    def test_same_version_is_a_copy(self, converter, project_document):
        result = converter.convert(project_document, SchemaVersion.V1_14)

        converted = result.unwrap()
        assert converted is not project_document
        assert converted.element_count == project_document.element_count
        assert result.removed_elements == []


class TestFailures:
    """Test conversions that can't satisfy the target grammar."""

    def test_asset_without_source_fails_below_1_9(self, converter):
        """Test a missing required src is reported instead of emitted."""
        result = converter.convert(Document.from_string(ASSET_WITHOUT_SOURCE), SchemaVersion.V1_8)

        assert not result.succeeded
        assert result.document is None
        assert result.error.element == "asset"
        assert result.error.missing == "src"
        assert result.error.target_version == SchemaVersion.V1_8
        with pytest.raises(VersionConversionError):
            result.unwrap()

    def test_unsupported_source_version(self, converter):
        result = converter.convert(Document.from_string('<fcpxml version="1.2"/>'), SchemaVersion.V1_14)

        assert not result.succeeded
        assert result.source_version is None
        assert result.error.missing == "version"

    def test_wrong_root(self, converter):
        result = converter.convert(Document.from_string("<xmeml/>"), SchemaVersion.V1_14)

        assert not result.succeeded
        assert result.error.element == "fcpxml"


class TestWithoutGrammars:
    """Test the built-in version table used when grammars are missing."""

    def test_falls_back_to_version_table(self, tmp_path, project_document):
        converter = VersionConverter(settings=Settings(dtd_directory=str(tmp_path)))

        result = converter.convert(project_document, SchemaVersion.V1_8)

        converted = result.unwrap()
        assert converted.find_first("import-options") is None
        assert converted.find_first("adjust-colorConform") is None
        assert converted.find_first("media-rep") is None
        assert converted.get(converted.find_first("asset"), "src") == "file:///Volumes/Media/interview.mov"

    def test_table_keeps_unknown_elements(self, tmp_path, make_spine_document):
        converter = VersionConverter(settings=Settings(dtd_directory=str(tmp_path)))
        document = make_spine_document('<asset-clip ref="r0" duration="1s"><custom-thing/></asset-clip>')

        converted = converter.convert(document, SchemaVersion.V1_9).unwrap()

        assert converted.find_first("custom-thing") is not None


class TestAsync:
    """Test the async entry point."""

    @pytest.mark.asyncio
    async def test_convert_async(self, converter, project_document):
        result = await converter.convert_async(project_document, SchemaVersion.V1_11)

        assert result.succeeded
        assert result.source_version == SchemaVersion.V1_14
        assert result.target_version == SchemaVersion.V1_11
