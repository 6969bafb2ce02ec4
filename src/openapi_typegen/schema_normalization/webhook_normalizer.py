"""Webhook map normalization.

OpenAPI 3.1 documents may describe out-of-band operations under ``webhooks``.
Each (webhook, HTTP method) pair becomes one object definition whose
properties hold the request body, responses, parameters and headers
sub-schemas, so webhooks flow through the same pipeline as component schemas.
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Collection, Mapping, Sequence
from typing import Any

from .transform_outcomes import WebhookConfigReport, WebhookTransformResult

_LOGGER = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

_REQUEST_BODY_KEYS = frozenset({"content", "description", "required"})
_RESPONSE_KEYS = frozenset({"content", "description", "headers", "links"})
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")


def normalize_webhooks(
    webhook_map: Any, reserved_names: Collection[str] = ()
) -> WebhookTransformResult:
    """Synthesize one schema definition per (webhook, method) pair.

    Names already in ``reserved_names`` (component definitions) are never
    reused; a clashing webhook name gets a numeric suffix.
    """
    if not isinstance(webhook_map, Mapping) or not webhook_map:
        return WebhookTransformResult(was_transformed=False, definitions={})

    definitions: dict[str, Any] = {}
    taken = set(reserved_names)
    for webhook_name, webhook in webhook_map.items():
        if not isinstance(webhook, Mapping):
            _LOGGER.warning("Skipping webhook %r: entry is not a mapping", webhook_name)
            continue
        for method, operation in webhook.items():
            if not isinstance(operation, Mapping):
                continue
            definition = _operation_definition(str(webhook_name), str(method), operation)
            if definition is None:
                _LOGGER.debug("Webhook %s %s has no usable content", webhook_name, method)
                continue
            candidate = webhook_definition_name(str(webhook_name), str(method))
            name = _unique_name(candidate, taken)
            taken.add(name)
            definitions[name] = definition

    return WebhookTransformResult(was_transformed=bool(definitions), definitions=definitions)


def has_webhooks(document: Any) -> bool:
    """Return True when the document carries a non-empty webhook map."""
    if not isinstance(document, Mapping):
        return False
    webhooks = document.get("webhooks")
    return isinstance(webhooks, Mapping) and bool(webhooks)


def webhook_names(document: Any) -> list[str]:
    """Return webhook names in source order."""
    if not has_webhooks(document):
        return []
    return [str(name) for name in document["webhooks"]]


def validate_webhook_config(webhook_map: Any) -> WebhookConfigReport:
    """Report every structural problem in a webhook map without raising."""
    if not isinstance(webhook_map, Mapping):
        return WebhookConfigReport(errors=("Webhooks must be a mapping.",))

    errors: list[str] = []
    for webhook_name, webhook in webhook_map.items():
        if not isinstance(webhook, Mapping):
            errors.append(f"Webhook '{webhook_name}' must be a mapping.")
            continue
        if not webhook:
            errors.append(f"Webhook '{webhook_name}' defines no HTTP methods.")
            continue
        for method, operation in webhook.items():
            if str(method).lower() not in HTTP_METHODS:
                errors.append(f"Invalid HTTP method '{method}' in webhook '{webhook_name}'.")
                continue
            if not isinstance(operation, Mapping):
                errors.append(
                    f"Operation '{method}' in webhook '{webhook_name}' must be a mapping."
                )
                continue
            if "requestBody" not in operation and "responses" not in operation:
                errors.append(
                    f"Operation '{method}' in webhook '{webhook_name}' "
                    "defines neither requestBody nor responses."
                )
    return WebhookConfigReport(errors=tuple(errors))


def webhook_definition_name(webhook_name: str, method: str) -> str:
    """Return the definition name for one webhook operation."""
    return f"{_pascal_case(webhook_name)}{_pascal_case(method)}Webhook"


def _unique_name(candidate: str, taken: Collection[str]) -> str:
    if candidate not in taken:
        return candidate
    suffix = 2
    while f"{candidate}{suffix}" in taken:
        suffix += 1
    return f"{candidate}{suffix}"


def _operation_definition(
    webhook_name: str, method: str, operation: Mapping[str, Any]
) -> dict[str, Any] | None:
    properties: dict[str, Any] = {}

    request_body = _request_body_schema(operation.get("requestBody"))
    if request_body is not None:
        properties["requestBody"] = request_body
    responses = _responses_schema(operation.get("responses"))
    if responses is not None:
        properties["responses"] = responses
    parameters = _parameters_schema(operation.get("parameters"))
    if parameters is not None:
        properties["parameters"] = parameters
    headers = _named_schemas_object(
        operation.get("headers"), title="Headers", description="HTTP headers"
    )
    if headers is not None:
        properties["headers"] = headers

    if not properties:
        return None
    return _object_schema(
        title=webhook_definition_name(webhook_name, method),
        description=f"{method.upper()} operation of webhook {webhook_name}",
        properties=properties,
    )


def _request_body_schema(request_body: Any) -> dict[str, Any] | None:
    if not isinstance(request_body, Mapping) or not request_body:
        return None
    if not set(request_body) <= _REQUEST_BODY_KEYS:
        return copy.deepcopy(dict(request_body))

    content = _content_schema(request_body.get("content"), title="RequestBody")
    if content is None:
        return None
    if request_body.get("required") is True:
        content["required"] = list(content["properties"])
    if isinstance(request_body.get("description"), str):
        content["description"] = request_body["description"]
    return content


def _responses_schema(responses: Any) -> dict[str, Any] | None:
    if not isinstance(responses, Mapping):
        return None
    properties: dict[str, Any] = {}
    for status_code, response in responses.items():
        response_schema = _response_schema(str(status_code), response)
        if response_schema is not None:
            properties[str(status_code)] = response_schema
    if not properties:
        return None
    return _object_schema(
        title="Responses", description="Response definitions", properties=properties
    )


def _response_schema(status_code: str, response: Any) -> dict[str, Any] | None:
    if not isinstance(response, Mapping) or not response:
        return None
    if not set(response) <= _RESPONSE_KEYS:
        return copy.deepcopy(dict(response))

    properties: dict[str, Any] = {}
    content = _content_schema(response.get("content"), title="Content")
    if content is not None:
        properties["content"] = content
    headers = _named_schemas_object(
        response.get("headers"), title="Headers", description="HTTP headers"
    )
    if headers is not None:
        properties["headers"] = headers
    if not properties:
        return None
    return _object_schema(
        title=f"Response{_pascal_case(status_code)}",
        description=f"Response for status code {status_code}",
        properties=properties,
    )


def _content_schema(content: Any, *, title: str) -> dict[str, Any] | None:
    if not isinstance(content, Mapping):
        return None
    properties: dict[str, Any] = {}
    for media_type, media_type_object in content.items():
        if not isinstance(media_type_object, Mapping):
            continue
        schema = media_type_object.get("schema")
        if isinstance(schema, (Mapping, bool)):
            properties[_media_type_key(str(media_type))] = copy.deepcopy(schema)
    if not properties:
        return None
    return _object_schema(
        title=title, description=f"{title} content by media type", properties=properties
    )


def _parameters_schema(parameters: Any) -> dict[str, Any] | None:
    if not isinstance(parameters, Sequence) or isinstance(parameters, str):
        return None
    named = {
        parameter["name"]: parameter
        for parameter in parameters
        if isinstance(parameter, Mapping) and isinstance(parameter.get("name"), str)
    }
    return _named_schemas_object(named, title="Parameters", description="Operation parameters")


def _named_schemas_object(
    entries: Any, *, title: str, description: str
) -> dict[str, Any] | None:
    if not isinstance(entries, Mapping):
        return None
    properties: dict[str, Any] = {}
    required: list[str] = []
    for name, entry in entries.items():
        if not isinstance(entry, Mapping):
            continue
        schema = entry.get("schema")
        property_schema = (
            copy.deepcopy(dict(schema)) if isinstance(schema, Mapping) else {"type": "string"}
        )
        if isinstance(entry.get("description"), str):
            property_schema["description"] = entry["description"]
        properties[str(name)] = property_schema
        if entry.get("required") is True:
            required.append(str(name))
    if not properties:
        return None
    schema_object = _object_schema(title=title, description=description, properties=properties)
    if required:
        schema_object["required"] = required
    return schema_object


def _object_schema(*, title: str, description: str, properties: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "object",
        "title": title,
        "description": description,
        "properties": properties,
        "additionalProperties": False,
    }


def _media_type_key(media_type: str) -> str:
    """Return ``applicationJson`` for ``application/json``."""
    words = [word for word in _NON_ALNUM.split(media_type) if word]
    if not words:
        return "content"
    return words[0] + "".join(word[:1].upper() + word[1:] for word in words[1:])


def _pascal_case(value: str) -> str:
    words = [word for word in _NON_ALNUM.split(value) if word]
    return "".join(word[:1].upper() + word[1:] for word in words)
