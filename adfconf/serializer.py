"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import dataclasses
from typing import Any, Callable, TypeVar

import orjson
from cattrs.preconf.orjson import make_converter  # spellchecker:disable-line

JsonType = None | bool | int | float | str | dict[str, "JsonType"] | list["JsonType"]
JsonComposite = dict[str, "JsonType"] | list["JsonType"]

T = TypeVar("T")


_converter = make_converter(forbid_extra_keys=False)


@_converter.register_structure_hook
def json_type_structure_hook(value: JsonType, cls: type[JsonType]) -> JsonType:
    return value


@_converter.register_structure_hook
def json_composite_structure_hook(value: JsonComposite, cls: type[JsonComposite]) -> JsonComposite:
    return value


def _is_dataclass_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _omit_none_unstructure_fn(cls: type[Any]) -> Callable[[Any], dict[str, Any]]:
    "Creates an unstructure function that leaves out fields that default to and hold `None`."

    fields = [(field.name, field.default is None) for field in dataclasses.fields(cls)]

    def unstructure(obj: Any) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for name, optional in fields:
            value = getattr(obj, name)
            if value is None and optional:
                continue
            result[name] = _converter.unstructure(value)
        return result

    return unstructure


_converter.register_unstructure_hook_factory(_is_dataclass_type, _omit_none_unstructure_fn)


def json_to_object(typ: type[T], data: JsonType) -> T:
    """
    Converts a raw JSON object to a structured object, validating input data.

    :param typ: Target structured type.
    :param data: Source data as a JSON object.
    :returns: A valid object instance of the expected type.
    """

    return _converter.structure(data, typ)


def object_to_json(data: object) -> JsonType:
    """
    Converts a structured object to a raw JSON object.

    Optional fields of data-classes that hold `None` are omitted, and enumeration members are replaced with their value.

    :param data: Object to convert.
    :returns: JSON object made up of dictionaries, lists and primitive values.
    """

    return orjson.loads(object_to_json_payload(data))


def object_to_json_payload(data: object) -> bytes:
    """
    Converts a structured object to a JSON string encoded in UTF-8.

    :param data: Object to convert to a JSON string.
    :returns: JSON string encoded in UTF-8.
    """

    return _converter.dumps(data)


def json_to_string(data: object) -> str:
    "Converts a structured object to a JSON string."

    return object_to_json_payload(data).decode("utf-8")


def string_to_json(text: str | bytes) -> JsonType:
    "Parses a JSON string into a raw JSON object."

    return orjson.loads(text)
