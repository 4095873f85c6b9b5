# -*- coding: utf-8 -*-
"""
KeyScout CLI Main Module
"""

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from keyscout import __version__
from keyscout.core.document import TextDocument
from keyscout.core.exceptions import ConfigError
from keyscout.core.frameworks import FrameworkRegistry
from keyscout.core.key_detector import KeyDetector
from keyscout.utils.config import ConfigManager
from keyscout.utils.languages import EXTENSION_LANGUAGES

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNSUPPORTED = 2

SKIPPED_DIRS = {'node_modules', '.git', 'dist', 'build', '__pycache__'}


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )


def iter_source_files(input_path: Path) -> Iterator[Path]:
    """The file itself, or every file with a known extension below a directory."""
    if input_path.is_file():
        yield input_path
        return
    for root, dirs, files in os.walk(input_path):
        dirs[:] = sorted(d for d in dirs if d not in SKIPPED_DIRS)
        for name in sorted(files):
            if Path(name).suffix.lower() in EXTENSION_LANGUAGES:
                yield Path(root) / name


def load_documents(input_path: Path, lang: Optional[str]) -> List[TextDocument]:
    documents = []
    for path in iter_source_files(input_path):
        document = TextDocument.from_file(path, lang)
        if document is None:
            print(f"Warning: could not read {path}", file=sys.stderr)
            continue
        documents.append(document)
    return documents


def build_config(args) -> ConfigManager:
    config_manager = ConfigManager(args.config) if args.config else ConfigManager()
    if args.key_prefix:
        config_manager.set_setting('extraction.key_prefix_inference', True)
    return config_manager


def _position(document: TextDocument, offset: int) -> Tuple[int, int]:
    pos = document.position_at(offset)
    return pos.line + 1, pos.character + 1


def run_keys_command(args, documents: List[TextDocument], detector: KeyDetector) -> int:
    """Print every key usage found in the input."""
    rows = []
    for document in documents:
        for match in detector.get_keys(document):
            line, col = _position(document, match.start)
            rows.append({
                'file': document.file_path,
                'line': line,
                'column': col,
                'key': match.key,
                'start': match.start,
                'end': match.end,
            })

    if args.json:
        print(json.dumps(rows, indent=2, ensure_ascii=False))
    else:
        for row in rows:
            prefix = f"{row['file']}:" if len(documents) > 1 else ''
            print(f"{prefix}{row['line']}:{row['column']} {row['key']}")
    return EXIT_OK


def run_detect_command(args, documents: List[TextDocument], registry: FrameworkRegistry,
                       config_manager: ConfigManager) -> int:
    """Print hard-coded strings that could be extracted."""
    rows = []
    unsupported = []
    for document in documents:
        report = registry.detect_hard_strings(document, config_manager)
        if not report.supported:
            unsupported.append(document)
            continue
        for result in report:
            line, col = _position(document, result.start)
            row = {'file': document.file_path, 'line': line, 'column': col}
            row.update(asdict(result))
            rows.append(row)

    if unsupported and len(unsupported) == len(documents):
        langs = ", ".join(sorted({d.language_id or '<unknown>' for d in unsupported}))
        print(f"Error: Extraction is not supported for language: {langs}", file=sys.stderr)
        return EXIT_UNSUPPORTED

    if args.json:
        print(json.dumps(rows, indent=2, ensure_ascii=False))
    else:
        for row in rows:
            prefix = f"{row['file']}:" if len(documents) > 1 else ''
            print(f"{prefix}{row['line']}:{row['column']} [{row['source']}] {row['text']}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"KeyScout v{__version__} CLI")
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("input_path", help="Source file or directory")
    common.add_argument("--lang", "-l", help="Language id (default: guessed from the extension)")
    common.add_argument("--json", action="store_true", help="Print results as JSON")
    common.add_argument("--config", help="Path to JSON configuration file")
    common.add_argument("--key-prefix", action="store_true", help="Apply keyPrefix declarations found in the file")
    common.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers.add_parser('keys', parents=[common], help='List translation keys used in source files')
    subparsers.add_parser('detect', parents=[common], help='List hard-coded strings that could be extracted')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_ERROR

    setup_logging(args.verbose)

    input_path = Path(os.path.abspath(args.input_path))
    if not input_path.exists():
        print(f"Error: Input path does not exist: {input_path}", file=sys.stderr)
        return EXIT_ERROR

    try:
        config_manager = build_config(args)
        registry = FrameworkRegistry.from_config(config_manager, project_root=input_path)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    documents = load_documents(input_path, args.lang)
    if not documents:
        print(f"Error: No readable source files in {input_path}", file=sys.stderr)
        return EXIT_ERROR

    if args.command == 'keys':
        detector = KeyDetector(registry=registry, config=config_manager)
        return run_keys_command(args, documents, detector)
    return run_detect_command(args, documents, registry, config_manager)


if __name__ == "__main__":
    sys.exit(main())
