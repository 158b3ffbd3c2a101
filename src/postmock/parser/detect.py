"""Auto-detect the API description format and normalize it."""

import logging
from pathlib import Path

from .base import ApiSpecification, FormatError
from .postman import is_postman_collection, parse_postman
from .reader import read_document
from .swagger import is_openapi_spec, parse_openapi

logger = logging.getLogger(__name__)

PARSERS = {
    "postman": parse_postman,
    "openapi": parse_openapi,
}


def detect_format(doc: object) -> str:
    """Detect the format of a parsed API document.

    Returns: 'postman' or 'openapi'. A truthy ``info`` together with an
    ``item`` key wins over ``openapi``/``paths``, so a malformed Postman
    ``item`` is rejected instead of falling through to OpenAPI detection.
    """
    if isinstance(doc, dict):
        if is_postman_collection(doc):
            return "postman"
        if is_openapi_spec(doc):
            return "openapi"
    raise FormatError("File is neither a valid Postman collection nor OpenAPI spec")


def normalize(doc: object) -> ApiSpecification:
    """Turn a parsed Postman or OpenAPI document into an ApiSpecification."""
    fmt = detect_format(doc)
    return PARSERS[fmt](doc)


def load_specification(file_path: Path | str) -> ApiSpecification:
    """Read ``file_path`` and normalize it."""
    spec = normalize(read_document(file_path))

    logger.info("Parsed %s document '%s': %d endpoints", spec.type, spec.name, len(spec.endpoints))
    for i, ep in enumerate(spec.endpoints, start=1):
        logger.debug("  %d. %s", i, ep.label)
    return spec
