"""Decoding upstream JSON into a closed set of outcomes.

APIs that normally answer with an array (GitHub releases, tags, refs) answer
with an object such as {"message": "API rate limit exceeded"} on failure. The
response is decoded once, here, into JsonArray / JsonObject, ApiError, or
ParseError so no caller ever iterates an error object's fields.
"""

import json
from dataclasses import dataclass
from typing import Any

from pkgfeeds.integrations.http.types import HttpResponse


@dataclass(frozen=True)
class JsonArray:
    items: list[Any]


@dataclass(frozen=True)
class JsonObject:
    fields: dict[str, Any]


@dataclass(frozen=True)
class ApiError:
    """The upstream answered, but with an error instead of data."""

    message: str


@dataclass(frozen=True)
class ParseError:
    """The body was not the JSON shape the caller asked for."""

    detail: str


def decode_json_array(response: HttpResponse) -> JsonArray | ApiError | ParseError:
    """Decode a response expected to hold a JSON array."""
    decoded = _load(response)
    match decoded:
        case ApiError() | ParseError():
            return decoded
        case list():
            return JsonArray(items=decoded)
        case dict():
            return ApiError(message=_error_message(decoded, response))
        case _:
            return ParseError(detail=f"Expected a JSON array from {response.url}")


def decode_json_object(response: HttpResponse) -> JsonObject | ApiError | ParseError:
    """Decode a response expected to hold a single JSON object."""
    decoded = _load(response)
    match decoded:
        case ApiError() | ParseError():
            return decoded
        case dict():
            return JsonObject(fields=decoded)
        case _:
            return ParseError(detail=f"Expected a JSON object from {response.url}")


def _load(response: HttpResponse) -> Any:
    try:
        data = json.loads(response.content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        if response.is_error:
            return ApiError(message=f"HTTP {response.status_code} from {response.url}")
        return ParseError(detail=f"Invalid JSON from {response.url}: {e}")

    if response.is_error:
        message = _error_message(data, response) if isinstance(data, dict) else None
        return ApiError(message=message or f"HTTP {response.status_code} from {response.url}")
    return data


def _error_message(data: dict[str, Any], response: HttpResponse) -> str:
    for key in ("message", "error", "error-list"):
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
        if isinstance(value, list) and value:
            first = value[0]
            if isinstance(first, dict) and isinstance(first.get("message"), str):
                return first["message"]
    return f"Unexpected JSON object from {response.url}"
