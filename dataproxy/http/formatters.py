"""Body codecs used to serialize requests and deserialize responses.

A codec declares which media types it can read; the proxy refuses to
decode a response whose ``Content-Type`` is not one of them.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, TypeAdapter


@lru_cache(maxsize=128)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def media_type_of(content_type: str | None) -> str:
    """Return the bare, lower-cased media type of a Content-Type header value."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


@runtime_checkable
class Codec(Protocol):
    """Serializer/deserializer for request and response bodies."""

    media_type: str
    supported_media_types: tuple[str, ...]

    def can_read(self, content_type: str | None) -> bool: ...

    def encode(self, value: Any) -> bytes: ...

    def decode(self, content: bytes, shape: Any) -> Any: ...


class JsonCodec:
    """JSON codec backed by pydantic."""

    media_type = "application/json"
    supported_media_types = ("application/json", "text/json")

    def can_read(self, content_type: str | None) -> bool:
        media_type = media_type_of(content_type)
        return media_type in self.supported_media_types or media_type.endswith("+json")

    def encode(self, value: Any) -> bytes:
        if isinstance(value, BaseModel):
            return value.model_dump_json(by_alias=True).encode("utf-8")
        return _adapter(Any).dump_json(value, by_alias=True)

    def decode(self, content: bytes, shape: Any) -> Any:
        return _adapter(shape).validate_json(content)


class XmlCodec:
    """Plain XML codec.

    Models are written as ``<TypeName><field>value</field>...</TypeName>``
    and sequences as an element marked ``kind="array"`` wrapping one element
    per item (``<ArrayOfTypeName>`` at the top level). On decode, an element
    is a sequence when it carries that mark, has the ``ArrayOf`` prefix, or
    holds several children that all share one tag.
    Decoding turns elements back into dicts/lists and lets pydantic coerce
    the text values into the target shape.
    """

    media_type = "application/xml"
    supported_media_types = ("application/xml", "text/xml")
    array_prefix = "ArrayOf"
    array_kind = "array"

    def can_read(self, content_type: str | None) -> bool:
        media_type = media_type_of(content_type)
        return media_type in self.supported_media_types or media_type.endswith("+xml")

    def encode(self, value: Any) -> bytes:
        return ET.tostring(self._to_element(value), encoding="utf-8")

    def decode(self, content: bytes, shape: Any) -> Any:
        root = ET.fromstring(content)
        return _adapter(shape).validate_python(self._from_element(root))

    def _to_element(self, value: Any, tag: str | None = None) -> ET.Element:
        if isinstance(value, BaseModel):
            element = ET.Element(tag or type(value).__name__)
            for name, field_value in value.model_dump(by_alias=True).items():
                if field_value is not None:
                    element.append(self._to_element(field_value, name))
            return element
        if isinstance(value, dict):
            element = ET.Element(tag or "Object")
            for name, field_value in value.items():
                if field_value is not None:
                    element.append(self._to_element(field_value, str(name)))
            return element
        if isinstance(value, (list, tuple)):
            item_tag = type(value[0]).__name__ if value and isinstance(value[0], BaseModel) else "Item"
            element = ET.Element(tag or f"{self.array_prefix}{item_tag}", kind=self.array_kind)
            for item in value:
                element.append(self._to_element(item, item_tag))
            return element
        element = ET.Element(tag or "Value")
        if isinstance(value, bool):
            element.text = "true" if value else "false"
        else:
            element.text = str(value)
        return element

    def _from_element(self, element: ET.Element) -> Any:
        children = list(element)
        if self._is_array(element, children):
            return [self._from_element(child) for child in children]
        if not children:
            return element.text or ""
        return {child.tag: self._from_element(child) for child in children}

    def _is_array(self, element: ET.Element, children: list[ET.Element]) -> bool:
        if element.get("kind") == self.array_kind or element.tag.startswith(self.array_prefix):
            return True
        return len(children) > 1 and len({child.tag for child in children}) == 1
