"""Load and save FCPXML documents and ``.fcpxmld`` bundles."""

import logging
from pathlib import Path
from typing import Union

import aiofiles
import aiofiles.os

from .tree import Document


logger = logging.getLogger(__name__)

BUNDLE_SUFFIX = ".fcpxmld"
BUNDLE_DOCUMENT = "Info.fcpxml"


def resolve_document_path(path: Union[str, Path]) -> Path:
    """Path of the XML file to read; a bundle resolves to its ``Info.fcpxml``.

    Raises:
        FileNotFoundError: If the file or bundle entry doesn't exist
    """
    resolved = Path(path)
    if resolved.is_dir():
        if resolved.suffix != BUNDLE_SUFFIX:
            raise FileNotFoundError(f"Not an FCPXML bundle: {resolved}")
        resolved = resolved / BUNDLE_DOCUMENT
    if not resolved.exists():
        raise FileNotFoundError(f"File not found: {resolved}")
    return resolved


def _target_path(path: Union[str, Path]) -> Path:
    target = Path(path)
    if target.suffix == BUNDLE_SUFFIX:
        target.mkdir(parents=True, exist_ok=True)
        return target / BUNDLE_DOCUMENT
    target.parent.mkdir(parents=True, exist_ok=True)
    return target


def load_document(path: Union[str, Path]) -> Document:
    """Read and parse an ``.fcpxml`` file or ``.fcpxmld`` bundle.

    Args:
        path: File or bundle directory

    Returns:
        Parsed document

    Raises:
        FileNotFoundError: If nothing is found at ``path``
        DocumentParseError: If the file is not well-formed XML
    """
    source = resolve_document_path(path)
    document = Document.from_string(source.read_bytes())
    logger.info(f"Loaded {source.name} (version {document.version or 'unknown'})")
    return document


async def load_document_async(path: Union[str, Path]) -> Document:
    """Async form of ``load_document``."""
    source = resolve_document_path(path)
    async with aiofiles.open(source, 'rb') as f:
        data = await f.read()
    document = Document.from_string(data)
    logger.info(f"Loaded {source.name} (version {document.version or 'unknown'})")
    return document


def save_document(document: Document, path: Union[str, Path], pretty: bool = True) -> Path:
    """Write a document, replacing any existing file atomically.

    Returns:
        Path of the written XML file
    """
    target = _target_path(path)
    temp_path = target.with_suffix(target.suffix + '.tmp')
    try:
        temp_path.write_text(document.to_string(pretty=pretty), encoding="utf-8")
        temp_path.replace(target)
    finally:
        if temp_path.exists():
            temp_path.unlink()
    logger.info(f"Saved {target}")
    return target


async def save_document_async(document: Document, path: Union[str, Path], pretty: bool = True) -> Path:
    """Async form of ``save_document``."""
    target = _target_path(path)
    temp_path = target.with_suffix(target.suffix + '.tmp')
    try:
        async with aiofiles.open(temp_path, 'w', encoding="utf-8") as f:
            await f.write(document.to_string(pretty=pretty))
        await aiofiles.os.replace(temp_path, target)
    finally:
        if temp_path.exists():
            temp_path.unlink()
    logger.info(f"Saved {target}")
    return target
