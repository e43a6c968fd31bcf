"""
Table-driven CAP XML marshalling

Each CAP model class declares:
    ELEMENT - its element name (e.g. 'info')
    TAGS    - a tuple of Tag entries, in schema order, mapping dataclass
              attributes to child element names and value kinds

decode() and encode() walk those tables with ElementTree, so the dialect
modules never touch XML directly.
"""

import logging
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Any, Callable, List, Optional, Type, Union

from .digest import Sha1Digest
from .embedded import EmbeddedContent
from .errors import CAPError, UnknownNamespaceError, XMLFormatError
from .geo import Circle, Polygon
from .identifier import Id
from .items import Items
from .language import Language
from .multimap import Map, StringMap
from .numbers import format_decimal, parse_decimal, parse_unsigned
from .references import References
from .timestamp import DateTime
from .url import parse_url

logger = logging.getLogger(__name__)

# marker for "element absent, use the dataclass default"
_ABSENT = object()


def qname(namespace: str, name: str) -> str:
    return f'{{{namespace}}}{name}'


def split_qname(tag: str):
    """Split '{ns}local' into (ns, local). Un-namespaced tags give ('', tag)."""
    if tag.startswith('{'):
        namespace, _, local = tag[1:].partition('}')
        return namespace, local
    return '', tag


class Kind:
    """
    Converts between element text and a field value.

    decode(text) parses element text; encode(value) returns element text, or
    None to omit the element.
    """

    def __init__(self, decode: Callable[[str], Any], encode: Callable[[Any], Optional[str]],
                 skip_empty: bool = False):
        self._decode = decode
        self._encode = encode
        # treat an empty element as absent (<polygon></polygon>)
        self.skip_empty = skip_empty

    def decode_element(self, element: ET.Element, namespace: str) -> Any:
        text = element.text or ''
        if self.skip_empty and not text.strip():
            return _ABSENT
        value = self._decode(text)
        return _ABSENT if value is None else value

    def encode_element(self, value: Any, parent: ET.Element, name: str, namespace: str) -> None:
        text = self._encode(value)
        if text is None:
            return
        ET.SubElement(parent, qname(namespace, name)).text = text


class EnumKind(Kind):
    """Enum members whose values are the CAP wire strings."""

    def __init__(self, enum_cls: Type[Enum]):
        super().__init__(lambda text: enum_cls(text.strip()), lambda member: member.value)
        self.enum_cls = enum_cls


class ModelKind(Kind):
    """A nested CAP model such as <info> or <area>."""

    def __init__(self, model_cls: type):
        super().__init__(None, None)
        self.model_cls = model_cls

    def decode_element(self, element: ET.Element, namespace: str) -> Any:
        return decode(self.model_cls, element, namespace)

    def encode_element(self, value: Any, parent: ET.Element, name: str, namespace: str) -> None:
        encode(value, namespace, parent)


class PairMapKind(Kind):
    """CAP 1.1+ multimap entries: <name><valueName/><value/></name>."""

    def __init__(self):
        super().__init__(None, None)

    def decode_entry(self, element: ET.Element, namespace: str):
        name = element.find(qname(namespace, 'valueName'))
        value = element.find(qname(namespace, 'value'))
        if name is None:
            raise XMLFormatError("Missing required element: valueName", 'valueName')
        if value is None:
            raise XMLFormatError("Missing required element: value", 'value')
        return (name.text or '', value.text or '')

    def encode_entry(self, entry, parent: ET.Element, name: str, namespace: str) -> None:
        element = ET.SubElement(parent, qname(namespace, name))
        ET.SubElement(element, qname(namespace, 'valueName')).text = entry[0]
        ET.SubElement(element, qname(namespace, 'value')).text = entry[1]

    def decode_all(self, elements: List[ET.Element], namespace: str) -> Map:
        return Map(self.decode_entry(e, namespace) for e in elements)


class StringMapKind(PairMapKind):
    """CAP 1.0 multimap entries: <name>key=value</name>."""

    def decode_entry(self, element: ET.Element, namespace: str):
        return StringMap.parse_entry(element.text or '')

    def encode_entry(self, entry, parent: ET.Element, name: str, namespace: str) -> None:
        ET.SubElement(parent, qname(namespace, name)).text = StringMap.format_entry(*entry)

    def decode_all(self, elements: List[ET.Element], namespace: str) -> StringMap:
        return StringMap(self.decode_entry(e, namespace) for e in elements)


# scalar kinds
TEXT = Kind(lambda text: text, lambda value: value)
ID = Kind(Id.parse, str)
DATETIME = Kind(DateTime.parse, str)
LANGUAGE = Kind(Language.parse, lambda language: language.value)
ITEMS = Kind(Items.parse, str)
REFERENCES = Kind(References.parse, str)
URL = Kind(parse_url, str)
UNSIGNED = Kind(parse_unsigned, str)
DECIMAL = Kind(parse_decimal, format_decimal)
POLYGON = Kind(Polygon.parse, str, skip_empty=True)
CIRCLE = Kind(Circle.parse, str)
DIGEST = Kind(Sha1Digest.parse, str)
EMBEDDED = Kind(EmbeddedContent.parse, str)
PAIR_MAP = PairMapKind()
STRING_MAP = StringMapKind()


class Tag:
    """
    Maps one dataclass attribute to a child element.

    Args:
        attr: Dataclass attribute name
        name: Element local name
        kind: Kind used to convert element text
        required: Whether the element must be present
        repeated: Whether the element may occur more than once
    """

    def __init__(self, attr: str, name: str, kind: Kind, required: bool = False,
                 repeated: bool = False):
        self.attr = attr
        self.name = name
        self.kind = kind
        self.required = required
        self.repeated = repeated or isinstance(kind, PairMapKind)

    def __repr__(self) -> str:
        return f"Tag({self.attr!r}, {self.name!r})"

    def decode(self, elements: List[ET.Element], namespace: str) -> Any:
        """Decode every occurrence of this tag found under one parent."""
        if not elements:
            if self.required:
                raise XMLFormatError(f"Missing required element: {self.name}", self.name)
            return _ABSENT

        if isinstance(self.kind, PairMapKind):
            return self.kind.decode_all(elements, namespace)

        if self.repeated:
            values = (self.kind.decode_element(e, namespace) for e in elements)
            return tuple(v for v in values if v is not _ABSENT)

        if len(elements) > 1:
            raise XMLFormatError(f"Duplicate element: {self.name}", self.name)
        value = self.kind.decode_element(elements[0], namespace)
        if value is _ABSENT and self.required:
            raise XMLFormatError(f"Missing required element: {self.name}", self.name)
        return value

    def encode(self, value: Any, parent: ET.Element, namespace: str) -> None:
        if value is None:
            return
        if isinstance(self.kind, PairMapKind):
            for entry in value:
                self.kind.encode_entry(entry, parent, self.name, namespace)
        elif self.repeated:
            for item in value:
                self.kind.encode_element(item, parent, self.name, namespace)
        else:
            self.kind.encode_element(value, parent, self.name, namespace)


def decode(model_cls: type, element: ET.Element, namespace: str) -> Any:
    """
    Build a model instance from an element using the model's TAGS.

    Unknown child elements are ignored.

    Raises:
        XMLFormatError: If an element is missing, duplicated or invalid
    """
    values = {}
    for tag in model_cls.TAGS:
        children = element.findall(qname(namespace, tag.name))
        try:
            value = tag.decode(children, namespace)
        except XMLFormatError:
            raise
        except (CAPError, ValueError) as e:
            raise XMLFormatError(f"Invalid {tag.name}: {e}", tag.name) from e
        if value is not _ABSENT:
            values[tag.attr] = value

    try:
        return model_cls(**values)
    except CAPError as e:
        raise XMLFormatError(f"Invalid {model_cls.ELEMENT}: {e}", model_cls.ELEMENT) from e


def encode(value: Any, namespace: str, parent: Optional[ET.Element] = None) -> ET.Element:
    """Build an element (optionally under parent) from a model instance."""
    name = qname(namespace, type(value).ELEMENT)
    if parent is None:
        element = ET.Element(name)
    else:
        element = ET.SubElement(parent, name)

    for tag in type(value).TAGS:
        tag.encode(getattr(value, tag.attr), element, namespace)
    return element


def parse_document(xml: Union[str, bytes]) -> ET.Element:
    """
    Parse XML text into its root element.

    Raises:
        XMLFormatError: If the text is not well-formed XML
    """
    try:
        return ET.fromstring(xml)
    except ET.ParseError as e:
        raise XMLFormatError(f"Invalid XML: {e}") from e


def root_namespace(root: ET.Element) -> str:
    """
    Return the namespace of an <alert> root element.

    Raises:
        XMLFormatError: If the root element is not 'alert'
    """
    namespace, local = split_qname(root.tag)
    if local != 'alert':
        raise XMLFormatError(f"Root element must be 'alert', got '{local}'")
    return namespace


def from_xml(model_cls: type, xml: Union[str, bytes], namespace: str) -> Any:
    """
    Parse an alert document of one specific dialect.

    Raises:
        XMLFormatError: If the XML is malformed or fails validation
        UnknownNamespaceError: If the alert belongs to another dialect
    """
    root = parse_document(xml)
    found = root_namespace(root)
    if found != namespace:
        raise UnknownNamespaceError(found)
    logger.debug("Decoding <alert> in namespace %s", namespace)
    return decode(model_cls, root, namespace)


def to_xml(value: Any, namespace: str) -> str:
    """Serialize a model instance as a complete XML document."""
    root = encode(value, namespace)
    ET.indent(root)
    xml = ET.tostring(root, encoding='unicode', xml_declaration=True,
                      default_namespace=namespace)
    # parsers normalize a literal CR to LF; a character reference survives
    return xml.replace('\r', '&#13;')
