"""OpenAPI / Swagger document parser.

Parses OpenAPI 3.x and Swagger 2.0 documents into Endpoint models.
"""

import logging

from .base import HTTP_METHODS, ApiSpecification, Endpoint, FormatError, present

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def is_openapi_spec(doc: dict) -> bool:
    return present(doc.get("openapi") or doc.get("swagger")) and present(doc.get("paths"))


def parse_openapi(doc: dict) -> ApiSpecification:
    """Parse an OpenAPI/Swagger document into an ApiSpecification."""
    if not isinstance(doc, dict) or not is_openapi_spec(doc):
        raise FormatError("Invalid OpenAPI specification format")
    if not isinstance(doc["paths"], dict):
        raise FormatError("Invalid OpenAPI specification format: 'paths' must be a mapping")

    info = doc.get("info") if isinstance(doc.get("info"), dict) else {}
    logger.debug(
        "Parsing OpenAPI spec: %s (version %s)",
        info.get("title"),
        doc.get("openapi") or doc.get("swagger"),
    )

    endpoints = []
    for raw_path, path_item in doc["paths"].items():
        if not isinstance(path_item, dict):
            continue
        path = _route_path(raw_path)
        for method, operation in path_item.items():
            if method not in HTTP_METHODS:
                continue
            if not isinstance(operation, dict):
                operation = {}

            upper = method.upper()
            endpoints.append(
                Endpoint(
                    method=upper,
                    path=path,
                    examples=_parse_examples(operation.get("responses")),
                    response_schema=_parse_schema(operation.get("responses")),
                    description=str(
                        operation.get("summary")
                        or operation.get("description")
                        or f"{upper} {path}"
                    ),
                    operation_id=_operation_id(operation),
                )
            )

    return ApiSpecification(
        type="openapi",
        name=info.get("title") or "OpenAPI Spec",
        version=str(info.get("version") or "1.0.0"),
        endpoints=endpoints,
    )


def _parse_examples(responses) -> list | None:
    if not isinstance(responses, dict):
        return None

    examples = []
    for resp in responses.values():
        if not isinstance(resp, dict):
            continue

        content = _json_content(resp)
        if content is not None:
            if content.get("example") is not None:
                examples.append(content["example"])
            named = content.get("examples")
            if isinstance(named, dict):
                for example in named.values():
                    if isinstance(example, dict) and example.get("value") is not None:
                        examples.append(example["value"])

        # Swagger 2.0: examples keyed by mime type on the response itself
        legacy = resp.get("examples")
        if isinstance(legacy, dict) and legacy.get(JSON_CONTENT_TYPE) is not None:
            examples.append(legacy[JSON_CONTENT_TYPE])

    return examples or None


def _parse_schema(responses) -> dict | None:
    if not isinstance(responses, dict):
        return None
    # YAML loads an unquoted 200 key as an int
    ok = responses.get("200", responses.get(200))
    if not isinstance(ok, dict):
        return None

    content = _json_content(ok)
    if content is not None:
        schema = content.get("schema")
    else:
        # Swagger 2.0 has no content map; the schema sits on the response itself
        schema = ok.get("schema")
    return schema if isinstance(schema, dict) else None


def _json_content(resp: dict) -> dict | None:
    content = resp.get("content")
    if not isinstance(content, dict):
        return None
    json_content = content.get(JSON_CONTENT_TYPE)
    return json_content if isinstance(json_content, dict) else None


def _route_path(path) -> str:
    path = str(path)
    return path if path.startswith("/") else "/" + path


def _operation_id(operation: dict) -> str | None:
    op_id = operation.get("operationId")
    return None if op_id is None else str(op_id)
