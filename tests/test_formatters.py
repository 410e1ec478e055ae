"""Tests for body codecs."""

from typing import List
import xml.etree.ElementTree as ET

import pytest
from pydantic import BaseModel, ValidationError

from dataproxy.http.formatters import Codec, JsonCodec, XmlCodec, media_type_of
from dataproxy.http.models import DomainObject
from stubs import Customer


@pytest.mark.parametrize(
    "header, expected",
    [
        ("application/json", "application/json"),
        ("Application/JSON; charset=utf-8", "application/json"),
        ("", ""),
        (None, ""),
    ],
)
def test_media_type_of(header, expected):
    assert media_type_of(header) == expected


class TestJsonCodec:
    """JSON codec."""

    def test_is_a_codec(self):
        assert isinstance(JsonCodec(), Codec)

    @pytest.mark.parametrize(
        "content_type, readable",
        [
            ("application/json", True),
            ("text/json; charset=utf-8", True),
            ("application/problem+json", True),
            ("application/xml", False),
            ("text/plain", False),
            (None, False),
        ],
    )
    def test_can_read(self, content_type, readable):
        assert JsonCodec().can_read(content_type) is readable

    def test_encodes_models_by_alias(self):
        assert JsonCodec().encode(Customer(ID=1, Name="Jimi")) == b'{"ID":1,"Name":"Jimi"}'

    def test_encodes_plain_values(self):
        assert JsonCodec().encode({"ids": [1, 2]}) == b'{"ids":[1,2]}'

    def test_decodes_into_shape(self):
        customers = JsonCodec().decode(b'[{"ID": 1}, {"ID": 2, "Name": "Jimi"}]', List[Customer])
        assert [c.ID for c in customers] == [1, 2]
        assert customers[1].Name == "Jimi"

    def test_decode_rejects_invalid_json(self):
        with pytest.raises(ValidationError):
            JsonCodec().decode(b"<Customer/>", Customer)


class TestXmlCodec:
    """XML codec."""

    @pytest.mark.parametrize(
        "content_type, readable",
        [
            ("application/xml", True),
            ("text/xml", True),
            ("application/atom+xml", True),
            ("application/json", False),
        ],
    )
    def test_can_read(self, content_type, readable):
        assert XmlCodec().can_read(content_type) is readable

    def test_encodes_model_fields(self):
        root = ET.fromstring(XmlCodec().encode(Customer(ID=1, Name="Jimi")))
        assert root.tag == "Customer"
        assert root.findtext("ID") == "1"
        assert root.findtext("Name") == "Jimi"

    def test_skips_unset_fields(self):
        root = ET.fromstring(XmlCodec().encode(Customer(Name="Jimi")))
        assert root.find("ID") is None

    def test_encodes_lists_as_array(self):
        root = ET.fromstring(XmlCodec().encode([Customer(ID=1), Customer(ID=2)]))
        assert root.tag == "ArrayOfCustomer"
        assert [child.findtext("ID") for child in root] == ["1", "2"]

    def test_decodes_array(self):
        content = b"<ArrayOfCustomer><Customer><ID>1</ID></Customer><Customer><ID>2</ID></Customer></ArrayOfCustomer>"
        customers = XmlCodec().decode(content, List[Customer])
        assert [c.ID for c in customers] == [1, 2]


class Line(BaseModel):
    sku: str
    quantity: int


class Order(DomainObject[int]):
    tags: List[str] = []
    lines: List[Line] = []


class TestXmlRoundTrip:
    """Models with list fields survive encode then decode."""

    def test_list_of_strings(self):
        order = Order(ID=1, tags=["a", "b"])
        assert XmlCodec().decode(XmlCodec().encode(order), Order) == order

    def test_list_of_models(self):
        order = Order(ID=2, lines=[Line(sku="A-1", quantity=2), Line(sku="B-7", quantity=1)])
        decoded = XmlCodec().decode(XmlCodec().encode(order), Order)
        assert decoded.lines == order.lines

    def test_single_item_and_empty_lists(self):
        order = Order(ID=3, tags=["only"], lines=[])
        decoded = XmlCodec().decode(XmlCodec().encode(order), Order)
        assert decoded.tags == ["only"]
        assert decoded.lines == []

    def test_repeated_children_without_mark_are_a_list(self):
        content = b"<Order><ID>4</ID><tags><tag>x</tag><tag>y</tag></tags></Order>"
        assert XmlCodec().decode(content, Order).tags == ["x", "y"]
