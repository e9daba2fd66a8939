"""JSON-compatible typing aliases for parsed value trees."""

from __future__ import annotations

from typing import Union

type JSONScalar = Union[str, int, float, bool, None]
type JSONValue = JSONScalar | list[JSONValue] | dict[str, JSONValue]
type JSONObject = dict[str, JSONValue]
type JSONArray = list[JSONValue]
