"""Postman Collection v2.x parser.

Walks the collection's item tree depth-first and emits one
Endpoint per request item. Folder names are organizational only and
never become part of the route path.
"""

import json
import logging

from .base import ApiSpecification, Endpoint, FormatError, present

logger = logging.getLogger(__name__)


def is_postman_collection(doc: dict) -> bool:
    return present(doc.get("info")) and "item" in doc


def parse_postman(doc: dict) -> ApiSpecification:
    """Parse a Postman collection document into an ApiSpecification."""
    if not isinstance(doc, dict) or not present(doc.get("info")):
        raise FormatError("Invalid Postman collection format")
    if "item" in doc and not isinstance(doc["item"], list):
        raise FormatError("Invalid Postman collection format")

    info = doc["info"] if isinstance(doc["info"], dict) else {}
    logger.debug("Parsing Postman collection: %s", info.get("name"))

    endpoints: list[Endpoint] = []
    _parse_items(doc.get("item", []), endpoints)

    return ApiSpecification(
        type="postman",
        name=str(info.get("name") or "Postman Collection"),
        version=str(info["version"]) if info.get("version") else None,
        endpoints=endpoints,
    )


def _parse_items(items: list, endpoints: list[Endpoint], base_path: str = "") -> None:
    """Recursively parse items (supports folders)."""
    for item in items:
        if not isinstance(item, dict):
            continue
        if present(item.get("request")):
            endpoints.append(_parse_request(item, base_path))
        elif isinstance(item.get("item"), list):
            _parse_items(item["item"], endpoints, base_path)


def _parse_request(item: dict, base_path: str) -> Endpoint:
    req = item["request"]
    if not isinstance(req, dict):
        # Postman allows a bare URL string as the request
        req = {"url": req}
    method = str(req.get("method") or "GET").upper()
    path = _join_path(base_path, _extract_path(req.get("url")))

    return Endpoint(
        method=method,
        path=path,
        examples=_parse_examples(item.get("response")),
        response_schema=None,
        description=str(item.get("name") or f"{method} {path}"),
        original_request=req,
    )


def _extract_path(url) -> str:
    if not isinstance(url, dict) or not url.get("path"):
        return "/"

    segments = url["path"]
    if isinstance(segments, str):
        path = segments
    else:
        path = "/".join(str(s) for s in segments)

    for var in _url_variables(url):
        key = var.get("key")
        if key:
            path = path.replace(f"{{{{{key}}}}}", f":{key}")
    return path


def _url_variables(url: dict) -> list[dict]:
    variables = url.get("variable") or url.get("variables") or []
    return [v for v in variables if isinstance(v, dict)]


def _join_path(base_path: str, path: str) -> str:
    if not path.startswith("/"):
        path = "/" + path
    if not base_path:
        return path
    return base_path.rstrip("/") + path


def _parse_examples(responses) -> list | None:
    """Saved responses whose body parses as JSON; invalid bodies are skipped."""
    examples = []
    for resp in responses or []:
        if not isinstance(resp, dict) or not resp.get("body"):
            continue
        try:
            examples.append(json.loads(resp["body"]))
        except (json.JSONDecodeError, TypeError):
            continue
    return examples or None
