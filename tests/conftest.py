"""Shared fixtures: small but realistic FCPXML documents."""

import pytest

from fcpxml_toolkit.document import Document


# Edit points on the primary spine:
#   Interview A -> Interview B   hard cut, same source (r2)
#   Interview B -> B-Roll        gap, different sources
#   B-Roll      -> Interview C   transition "Cross Dissolve", different sources
PROJECT_1_14 = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE fcpxml>
<fcpxml version="1.14">
    <import-options>
        <option key="library location" value="file:///Users/editor/Movies/Demo.fcpbundle"/>
    </import-options>
    <resources>
        <format id="r1" name="FFVideoFormat1080p24" frameDuration="100/2400s" width="1920" height="1080" colorSpace="1-1-1 (Rec. 709)"/>
        <asset id="r2" name="Interview" uid="6A1F2E" start="0s" duration="288000/2400s" hasVideo="1" format="r1" hasAudio="1" audioSources="1" audioChannels="2">
            <media-rep kind="original-media" src="file:///Volumes/Media/interview.mov"/>
        </asset>
        <asset id="r3" name="B-Roll" uid="7B2C3F" start="0s" duration="144000/2400s" hasVideo="1" format="r1">
            <media-rep kind="original-media" src="file:///Volumes/Media/broll.mov"/>
        </asset>
        <effect id="r4" name="Cross Dissolve" uid="FxPlug:4731E73A-8DAC-4113-9A30-AE85B1761265"/>
        <effect id="r5" name="Basic Title" uid=".../Titles.localized/Bumper:Opener.localized/Basic Title.localized/Basic Title.moti"/>
    </resources>
    <library>
        <event name="Day 1">
            <project name="Interview Cut">
                <sequence format="r1" duration="108000/2400s" tcStart="0s" tcFormat="NDF">
                    <spine>
                        <asset-clip ref="r2" offset="0s" name="Interview A" start="0s" duration="24000/2400s" format="r1" tcFormat="NDF">
                            <marker start="2400/2400s" duration="100/2400s" value="Intro"/>
                            <title ref="r5" lane="2" offset="4800/2400s" name="Lower Third" duration="7200/2400s">
                                <text>
                                    <text-style ref="ts1">Jane Doe</text-style>
                                </text>
                                <text-style-def id="ts1">
                                    <text-style font="Helvetica" fontSize="63"/>
                                </text-style-def>
                            </title>
                            <metadata>
                                <md key="com.apple.proapps.studio.reel" value="A001"/>
                            </metadata>
                        </asset-clip>
                        <asset-clip ref="r2" offset="24000/2400s" name="Interview B" start="24000/2400s" duration="24000/2400s" format="r1" tcFormat="NDF">
                            <asset-clip ref="r3" lane="1" offset="36000/2400s" name="Cutaway" start="0s" duration="4800/2400s"/>
                        </asset-clip>
                        <gap name="Gap" offset="48000/2400s" start="0s" duration="12000/2400s"/>
                        <asset-clip ref="r3" offset="60000/2400s" name="B-Roll" start="0s" duration="24000/2400s" format="r1"/>
                        <transition name="Cross Dissolve" offset="81600/2400s" duration="4800/2400s">
                            <filter-video ref="r4" name="Cross Dissolve"/>
                        </transition>
                        <asset-clip ref="r2" offset="84000/2400s" name="Interview C" start="48000/2400s" duration="24000/2400s" format="r1">
                            <adjust-colorConform enabled="1" autoOrManual="automatic"/>
                        </asset-clip>
                    </spine>
                </sequence>
            </project>
        </event>
    </library>
</fcpxml>
"""

LEGACY_1_8 = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE fcpxml>
<fcpxml version="1.8">
    <resources>
        <format id="r1" name="FFVideoFormat1080p2997" frameDuration="1001/30000s" width="1920" height="1080"/>
        <asset id="r2" name="Skate" uid="1D5E9A" src="file:///Volumes/Media/skate.mov" start="0s" duration="300300/30000s" hasVideo="1" format="r1"/>
    </resources>
    <library>
        <event name="Skate Day">
            <project name="Skate Edit">
                <sequence format="r1" tcStart="0s" tcFormat="DF">
                    <spine>
                        <asset-clip ref="r2" offset="0s" name="Kickflip" start="0s" duration="150150/30000s"/>
                        <asset-clip ref="r2" offset="150150/30000s" name="Grind" start="150150/30000s" duration="150150/30000s"/>
                    </spine>
                </sequence>
            </project>
        </event>
    </library>
</fcpxml>
"""

DANGLING_REFERENCE = """<?xml version="1.0" encoding="UTF-8"?>
<fcpxml version="1.14">
    <resources>
        <format id="r1" name="FFVideoFormat1080p24" frameDuration="100/2400s" width="1920" height="1080"/>
    </resources>
    <library>
        <event name="Broken">
            <project name="Missing Media">
                <sequence format="r1">
                    <spine>
                        <asset-clip ref="r99" offset="0s" name="Offline" duration="24000/2400s"/>
                    </spine>
                </sequence>
            </project>
        </event>
    </library>
</fcpxml>
"""


def build_spine_document(spine_body: str, version: str = "1.14") -> Document:
    """Wrap spine children in a minimal project."""
    return Document.from_string(f"""<fcpxml version="{version}">
    <resources>
        <format id="r0" frameDuration="100/2400s" width="1920" height="1080"/>
    </resources>
    <library><event name="E"><project name="P"><sequence format="r0">
        <spine>{spine_body}</spine>
    </sequence></project></event></library>
</fcpxml>""")


@pytest.fixture
def project_document():
    """Parsed 1.14 project with cuts, a gap, a transition and connected clips."""
    return Document.from_string(PROJECT_1_14)


@pytest.fixture
def legacy_document():
    """Parsed 1.8 project whose assets carry src directly."""
    return Document.from_string(LEGACY_1_8)


@pytest.fixture
def dangling_document():
    """Parsed project referencing a resource that doesn't exist."""
    return Document.from_string(DANGLING_REFERENCE)


@pytest.fixture
def make_spine_document():
    """Factory building a one-project document from spine children markup."""
    return build_spine_document


@pytest.fixture
def project_xml():
    """Raw 1.14 project text."""
    return PROJECT_1_14


@pytest.fixture
def dangling_xml():
    """Raw text of a project with an unresolved reference."""
    return DANGLING_REFERENCE
