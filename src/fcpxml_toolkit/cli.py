"""Command-line interface for validating, converting and inspecting FCPXML."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from .config import settings
from .document.loader import load_document_async, save_document_async
from .document.tree import DocumentParseError
from .models.version import SchemaVersion
from .tools.cut_detector import CutDetector
from .tools.document_validator import DocumentValidator
from .tools.version_converter import VersionConverter
from .utils.logging_config import ProgressLogger, configure_logging

VERSION_CHOICES = [version.value for version in SchemaVersion]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="fcpxml-toolkit",
        description="Validate, convert and inspect FCPXML documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate against the declared version
  %(prog)s validate project.fcpxml

  # Validate several files against a specific grammar
  %(prog)s validate a.fcpxml b.fcpxmld --version 1.10

  # Downgrade for an older editor
  %(prog)s convert project.fcpxml --to 1.8 -o project-1.8.fcpxml

  # List edit points on the primary storyline
  %(prog)s cuts project.fcpxml
        """
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser('validate', help='Run semantic and DTD validation')
    validate.add_argument('files', nargs='+', help='.fcpxml files or .fcpxmld bundles')
    validate.add_argument(
        '--version',
        choices=VERSION_CHOICES,
        help='Grammar to validate against (default: declared version)'
    )

    convert = subparsers.add_parser('convert', help='Convert to another FCPXML version')
    convert.add_argument('file', help='.fcpxml file or .fcpxmld bundle')
    convert.add_argument(
        '--to',
        choices=VERSION_CHOICES,
        help='Target version (default: FCPXML_DEFAULT_VERSION, 1.14 unless set)'
    )
    convert.add_argument('-o', '--output', help='Output path (default: <name>-<version>.fcpxml)')

    cuts = subparsers.add_parser('cuts', help='List edit points on the primary spine')
    cuts.add_argument('file', help='.fcpxml file or .fcpxmld bundle')

    check = subparsers.add_parser('check-version', help='Print the declared FCPXML version')
    check.add_argument('file', help='.fcpxml file or .fcpxmld bundle')

    return parser


async def run_validate(files: List[str], version: Optional[str]) -> int:
    validator = DocumentValidator()
    progress = ProgressLogger(__name__)
    progress.start_task(f"Validating {len(files)} file(s)")
    failures = 0

    for path in files:
        document = await load_document_async(path)
        if version:
            report = await validator.validate_against_async(document, SchemaVersion(version))
        else:
            report = await validator.validate_async(document)
        print(f"{path}: {report.summary}")
        if not report.is_valid:
            failures += 1
            print(report.detailed_description)
        progress.update(f"{Path(path).name}: {'valid' if report.is_valid else 'invalid'}")

    progress.complete(f"{len(files) - failures}/{len(files)} valid")
    return 1 if failures else 0


async def run_convert(file: str, target: Optional[str], output: Optional[str]) -> int:
    document = await load_document_async(file)
    version = SchemaVersion(target) if target else SchemaVersion.default()
    result = await VersionConverter().convert_async(document, version)
    if not result.succeeded:
        print(f"Conversion failed: {result.error}")
        return 1

    destination = Path(output) if output else Path(file).with_name(
        f"{Path(file).stem}-{version.value}.fcpxml"
    )
    written = await save_document_async(result.unwrap(), destination)
    print(f"Converted {result.source_version} -> {version}: {written}")
    if result.removed_elements:
        print(f"Removed elements: {', '.join(result.removed_elements)}")
    if result.removed_attributes:
        print(f"Removed attributes: {', '.join(result.removed_attributes)}")
    return 0


async def run_cuts(file: str) -> int:
    document = await load_document_async(file)
    result = await CutDetector().detect_cuts_async(document)
    for edit_point in result.edit_points:
        print(edit_point)
    print(result.summary)
    return 0


async def run_check_version(file: str) -> int:
    document = await load_document_async(file)
    version = document.declared_version
    if version is None:
        print(f"{file}: unsupported or missing version ({document.version!r})")
        return 1
    print(f"{file}: FCPXML {version.value}")
    return 0


async def run(args: argparse.Namespace) -> int:
    if args.command == "validate":
        return await run_validate(args.files, args.version)
    if args.command == "convert":
        return await run_convert(args.file, args.to, args.output)
    if args.command == "cuts":
        return await run_cuts(args.file)
    return await run_check_version(args.file)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose or settings.debug else settings.log_level)

    try:
        return asyncio.run(run(args))
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1
    except DocumentParseError as e:
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 1


if __name__ == "__main__":
    sys.exit(main())
