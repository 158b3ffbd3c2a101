"""Read API description files from disk.

JSON and YAML are supported, chosen by file extension.
"""

import json
from pathlib import Path

import yaml

SUPPORTED_EXTENSIONS = (".json", ".yaml", ".yml")


class InputNotFoundError(FileNotFoundError):
    """The input file does not exist."""


class ParseError(ValueError):
    """The input file is not valid JSON/YAML, or has an unsupported extension."""


def read_document(file_path: Path | str) -> object:
    """Read and parse a ``.json``, ``.yaml`` or ``.yml`` file."""
    file_path = Path(file_path)
    if not file_path.is_file():
        raise InputNotFoundError(f"Input file not found: {file_path}")

    ext = file_path.suffix.lower()
    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"Failed to parse {file_path.name}: not valid UTF-8: {e}") from e

    if ext == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Failed to parse {ext} file: Invalid JSON: {e}") from e
    if ext in (".yaml", ".yml"):
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse {ext} file: Invalid YAML: {e}") from e

    raise ParseError(
        f"Unsupported file format: {ext or '(none)'}. Use .json, .yaml, or .yml"
    )


def format_bytes(size: int) -> str:
    """Human readable file size, e.g. ``1.5 KB``."""
    if size == 0:
        return "0 Bytes"
    units = ("Bytes", "KB", "MB", "GB")
    value = float(size)
    for unit in units:
        if value < 1024 or unit == units[-1]:
            return f"{round(value, 2):g} {unit}"
        value /= 1024
    return f"{size} Bytes"


def file_size(file_path: Path | str) -> str:
    try:
        return format_bytes(Path(file_path).stat().st_size)
    except OSError:
        return "Unknown"
