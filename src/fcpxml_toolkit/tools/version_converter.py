"""
Cross-version document conversion.

Conversion always works on a copy. Downgrades remove constructs the
target grammar doesn't declare; upgrades only add. Either way the result
is checked against the target grammar's required attributes and required
children before it is handed back, so an unusable document comes back as
a failed ConversionResult instead of being emitted silently.
"""

import logging
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..config import Settings, settings as default_settings
from ..document.tree import Document
from ..interfaces import SchemaGrammarInterface, VersionConverterInterface
from ..models.validation import ValidationResult
from ..models.version import SchemaVersion
from .schema_validator import SchemaAllowlist, SchemaValidator


logger = logging.getLogger(__name__)

V = SchemaVersion

# Used when a grammar file is unavailable: first version declaring each construct
ELEMENT_INTRODUCED: Dict[str, SchemaVersion] = {
    "caption": V.V1_8,
    "media-rep": V.V1_9,
    "match-usage": V.V1_9,
    "object-tracker": V.V1_10,
    "adjust-cinematic": V.V1_10,
    "match-representation": V.V1_10,
    "match-markers": V.V1_10,
    "adjust-colorConform": V.V1_11,
    "adjust-voiceIsolation": V.V1_11,
    "adjust-stereo-3D": V.V1_13,
    "hidden-clip-marker": V.V1_13,
    "import-options": V.V1_14,
    "match-analysis-type": V.V1_14,
}

ATTRIBUTE_INTRODUCED: Dict[Tuple[str, str], SchemaVersion] = {
    ("media-rep", "suggestedFilename"): V.V1_10,
    ("param", "auxValue"): V.V1_11,
    ("keyframe", "auxValue"): V.V1_11,
    ("format", "heroEye"): V.V1_13,
    ("format", "stereoscopic"): V.V1_13,
    ("asset", "heroEyeOverride"): V.V1_13,
}


class VersionConversionError(Exception):
    """A converted document can't satisfy its target grammar."""

    def __init__(
        self,
        message: str,
        element: Optional[str] = None,
        missing: Optional[str] = None,
        target_version: Optional[SchemaVersion] = None,
    ):
        super().__init__(message)
        self.element = element
        self.missing = missing
        self.target_version = target_version


class ConversionResult(BaseModel):
    """Outcome of a conversion: the new document or the reason there is none."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    document: Optional[Document] = Field(None, description="Converted copy, None on failure")
    source_version: Optional[SchemaVersion] = Field(None, description="Version the input declared")
    target_version: SchemaVersion = Field(..., description="Requested version")
    removed_elements: List[str] = Field(default_factory=list, description="Tags of removed subtrees")
    removed_attributes: List[str] = Field(default_factory=list, description="Removed attributes as tag@name")
    error: Optional[VersionConversionError] = Field(None, description="Why conversion failed")

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.document is not None

    def unwrap(self) -> Document:
        """The converted document.

        Raises:
            VersionConversionError: If conversion failed
        """
        if self.error is not None:
            raise self.error
        if self.document is None:
            raise VersionConversionError("Conversion produced no document", target_version=self.target_version)
        return self.document


class VersionConverter(VersionConverterInterface):
    """Converts documents between FCPXML grammar versions."""

    def __init__(
        self,
        grammar: Optional[SchemaGrammarInterface] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize the converter.

        Args:
            grammar: Source of allowlists and requirements, default SchemaValidator
            settings: Settings for the default grammar source
        """
        self.grammar = grammar or SchemaValidator(settings or default_settings)

    def convert(self, document: Document, target: SchemaVersion) -> ConversionResult:
        """Convert ``document`` to ``target``.

        Args:
            document: Source document; never modified
            target: Version to produce

        Returns:
            ConversionResult; check ``succeeded`` or call ``unwrap()``
        """
        source = document.declared_version
        if document.root is None or document.root_tag != "fcpxml":
            return self._failed(source, target, VersionConversionError(
                "Document has no fcpxml root element", element="fcpxml", target_version=target,
            ))
        if source is None:
            return self._failed(source, target, VersionConversionError(
                f"Unsupported source version {document.version!r}",
                element="fcpxml", missing="version", target_version=target,
            ))

        converted = document.copy()
        result = ConversionResult(document=converted, source_version=source, target_version=target)

        if target < source:
            if target.uses_asset_src:
                self._promote_media_rep_src(converted)
            self._strip_unsupported(converted, source, target, result)
        elif target > source and source.uses_asset_src and not target.uses_asset_src:
            self._wrap_asset_src(converted)

        converted.set(converted.root, "version", target.value)

        error = self._check_requirements(converted, target)
        if error is not None:
            logger.warning(f"Conversion {source.value} -> {target.value} failed: {error}")
            return self._failed(source, target, error, result)

        logger.info(
            f"Converted {source.value} -> {target.value}: removed "
            f"{len(result.removed_elements)} element(s), {len(result.removed_attributes)} attribute(s)"
        )
        return result

    async def convert_async(self, document: Document, target: SchemaVersion) -> ConversionResult:
        return self.convert(document, target)

    def convert_and_validate(
        self,
        document: Document,
        target: SchemaVersion,
        validator: Optional[SchemaValidator] = None,
    ) -> Tuple[ConversionResult, Optional[ValidationResult]]:
        """Convert, then run DTD validation on the result as a confirming step.

        Returns:
            The conversion result and, when conversion succeeded, the DTD
            validation result for the converted document
        """
        result = self.convert(document, target)
        if not result.succeeded:
            return result, None
        checker = validator or (self.grammar if isinstance(self.grammar, SchemaValidator) else SchemaValidator())
        return result, checker.validate(result.document, target)

    @staticmethod
    def _failed(
        source: Optional[SchemaVersion],
        target: SchemaVersion,
        error: VersionConversionError,
        partial: Optional[ConversionResult] = None,
    ) -> ConversionResult:
        return ConversionResult(
            document=None,
            source_version=source,
            target_version=target,
            removed_elements=list(partial.removed_elements) if partial else [],
            removed_attributes=list(partial.removed_attributes) if partial else [],
            error=error,
        )

    # Rewrites

    def _promote_media_rep_src(self, document: Document) -> None:
        """Copy the first media-rep ``src`` onto its asset."""
        for asset in document.find_all("asset"):
            if document.get(asset, "src"):
                continue
            media_rep = document.first_child(asset, "media-rep")
            if media_rep is None:
                continue
            src = document.get(media_rep, "src")
            if src:
                document.set(asset, "src", src)
                logger.debug(f"Promoted media-rep src onto asset {document.get(asset, 'id')}")

    def _wrap_asset_src(self, document: Document) -> None:
        """Move ``asset/@src`` into an original-media ``media-rep`` child."""
        for asset in document.find_all("asset"):
            src = document.get(asset, "src")
            if src is None:
                continue
            document.remove_attribute(asset, "src")
            if document.first_child(asset, "media-rep") is None:
                document.insert_child(asset, 0, "media-rep", {"kind": "original-media", "src": src})
                logger.debug(f"Moved src into media-rep for asset {document.get(asset, 'id')}")

    def _strip_unsupported(
        self,
        document: Document,
        source: SchemaVersion,
        target: SchemaVersion,
        result: ConversionResult,
    ) -> None:
        source_allowlist = self.grammar.allowlist(source)
        target_allowlist = self.grammar.allowlist(target)
        if source_allowlist is None or target_allowlist is None:
            logger.warning(
                f"Grammar unavailable for {source.value} or {target.value}; "
                "using built-in version table"
            )

        stack = [document.root]
        while stack:
            index = stack.pop()
            tag = document.tag(index)
            if self._element_removed(tag, target, source_allowlist, target_allowlist):
                document.remove(index)
                result.removed_elements.append(tag)
                continue
            for name in list(document.attributes(index)):
                if self._attribute_removed(tag, name, target, source_allowlist, target_allowlist):
                    document.remove_attribute(index, name)
                    result.removed_attributes.append(f"{tag}@{name}")
            stack.extend(reversed(document.children(index)))

    @staticmethod
    def _element_removed(
        tag: str,
        target: SchemaVersion,
        source_allowlist: Optional[SchemaAllowlist],
        target_allowlist: Optional[SchemaAllowlist],
    ) -> bool:
        if source_allowlist is not None and target_allowlist is not None:
            # Tags neither grammar knows are left for DTD validation to report
            return source_allowlist.allows_element(tag) and not target_allowlist.allows_element(tag)
        introduced = ELEMENT_INTRODUCED.get(tag)
        return introduced is not None and introduced > target

    @staticmethod
    def _attribute_removed(
        tag: str,
        name: str,
        target: SchemaVersion,
        source_allowlist: Optional[SchemaAllowlist],
        target_allowlist: Optional[SchemaAllowlist],
    ) -> bool:
        if source_allowlist is not None and target_allowlist is not None:
            return (
                source_allowlist.allows_attribute(tag, name)
                and target_allowlist.allows_element(tag)
                and not target_allowlist.allows_attribute(tag, name)
            )
        introduced = ATTRIBUTE_INTRODUCED.get((tag, name))
        return introduced is not None and introduced > target

    # Confirmation

    def _check_requirements(self, document: Document, target: SchemaVersion) -> Optional[VersionConversionError]:
        required_attributes = self.grammar.required_attributes(target)
        required_children = self.grammar.required_children(target)
        if not required_attributes and not required_children:
            logger.warning(f"No grammar requirements known for {target.value}; skipping check")
            return None

        for index in document.iter():
            tag = document.tag(index)
            attributes = document.attributes(index)
            for name in sorted(required_attributes.get(tag, ())):
                if name not in attributes:
                    return VersionConversionError(
                        f"<{tag}> is missing required attribute {name!r} in FCPXML {target.value}",
                        element=tag, missing=name, target_version=target,
                    )
            if tag in required_children:
                present = {document.tag(child) for child in document.children(index)}
                for name in required_children[tag]:
                    if name not in present:
                        return VersionConversionError(
                            f"<{tag}> is missing required child <{name}> in FCPXML {target.value}",
                            element=tag, missing=name, target_version=target,
                        )
        return None
