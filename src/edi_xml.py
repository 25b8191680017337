import logging
import re
from typing import Optional, Union

from lxml import etree

from cdm import EdiDocument, EdiSegment, EdiElement, EdiRepetition, EdiComponent
from edi_value import (
    parse_date_text, parse_time_text, parse_decimal_text,
    encode_date, encode_time, encode_real, encode_numeric,
)

logger = logging.getLogger(__name__)

LOOP_SUFFIX = "loop"
DEFAULT_ROOT_TAG = "edi"

_NON_DIGITS = re.compile(r'[^0-9]')
_INDEX_SUFFIX = re.compile(r'[0-9]{2}')

def _local_name(node: etree._Element) -> str:
    return etree.QName(node).localname

def _child_elements(node: etree._Element):
    # Comments and processing instructions carry a non-string tag.
    return (child for child in node if isinstance(child.tag, str))

def get_element_index(name: str) -> int:
    """0-based slot index from a tag's two-digit position suffix, or -1 when there is none."""
    if len(name) < 2 or not _INDEX_SUFFIX.fullmatch(name[-2:]):
        return -1
    return int(name[-2:]) - 1

def load_value(node: etree._Element) -> str:
    """
    Converts the text of a leaf node to its EDI form according to the node's
    `type` attribute. Any value that cannot be read is returned unchanged.
    """
    text = "".join(node.itertext())
    value_type = node.get("type")

    if value_type in (None, "id", "an"):
        return text

    if value_type == "dt":
        parsed_date = parse_date_text(text)
        return encode_date(8, parsed_date) if parsed_date is not None else text

    if value_type == "tm":
        parsed_time = parse_time_text(text)
        if parsed_time is None:
            return text
        length = len(_NON_DIGITS.sub("", text))
        if len(text) > 1 and text[1] == ":":
            length += 1
        try:
            return encode_time(length, parsed_time)
        except ValueError:
            logger.debug(f"Time '{text}' has no EDI encoding of length {length}; keeping literal.")
            return text

    if value_type == "r":
        parsed_real = parse_decimal_text(text)
        return encode_real(parsed_real) if parsed_real is not None else text

    if len(value_type) == 2 and value_type[0] == "n" and value_type[1].isdigit():
        parsed_numeric = parse_decimal_text(text)
        return encode_numeric(int(value_type[1]), parsed_numeric) if parsed_numeric is not None else text

    return text

# --- Tree -> Document ---
def load_xml(xml: Union[etree._Element, etree._ElementTree]) -> EdiDocument:
    """Creates an EdiDocument from an lxml element or element tree."""
    root = xml.getroot() if isinstance(xml, etree._ElementTree) else xml
    document = EdiDocument()
    _load_loop(root, document)
    logger.debug(f"Loaded {len(document.segments)} segments from XML.")
    return document

def parse_xml(text: Union[str, bytes]) -> EdiDocument:
    """Creates an EdiDocument from a string containing XML."""
    if isinstance(text, str):
        text = text.encode("utf-8")
    return load_xml(etree.fromstring(text))

def _load_loop(loop: etree._Element, document: EdiDocument):
    for node in _child_elements(loop):
        if _local_name(node).endswith(LOOP_SUFFIX):
            _load_loop(node, document)
        else:
            document.segments.append(_load_segment(node))

def _load_segment(node: etree._Element) -> EdiSegment:
    segment = EdiSegment(id=_local_name(node).upper())
    for child in _child_elements(node):
        index = get_element_index(_local_name(child))
        if index == -1:
            logger.debug(f"Ignoring node '{_local_name(child)}' in segment '{segment.id}': no position suffix.")
            continue
        while len(segment.elements) <= index:
            segment.elements.append(None)
        if segment.elements[index] is None:
            segment.elements[index] = EdiElement()
        segment.elements[index].repetitions.append(_load_repetition(child))
    return segment

def _load_repetition(node: etree._Element) -> EdiRepetition:
    children = list(_child_elements(node))
    if not children:
        return EdiRepetition(value=load_value(node))

    repetition = EdiRepetition()
    for child in children:
        index = get_element_index(_local_name(child))
        if index == -1:
            continue
        while len(repetition.components) <= index:
            repetition.components.append(None)
        if repetition.components[index] is None:
            repetition.components[index] = EdiComponent(value=load_value(child))
    return repetition

# --- Document -> Tree ---
def to_xml(document: EdiDocument, root_tag: str = DEFAULT_ROOT_TAG) -> etree._Element:
    """Maps a document to a flat XML tree using positional tag names (e.g. <n1><n101>85</n101></n1>)."""
    root = etree.Element(root_tag)
    for segment in document.segments:
        segment_tag = segment.id.lower()
        segment_node = etree.SubElement(root, segment_tag)
        for i, element in enumerate(segment.elements):
            if element is None:
                continue
            element_tag = f"{segment_tag}{i + 1:02d}"
            for repetition in element.repetitions:
                _dump_repetition(etree.SubElement(segment_node, element_tag), element_tag, repetition)
    return root

def _dump_repetition(node: etree._Element, element_tag: str, repetition: EdiRepetition):
    if not repetition.components:
        node.text = repetition.value or ""
        return
    for i, component in enumerate(repetition.components):
        if component is None:
            continue
        etree.SubElement(node, f"{element_tag}_{i + 1:02d}").text = component.value

def to_xml_string(document: EdiDocument, pretty_print: bool = True, root_tag: Optional[str] = None) -> str:
    root = to_xml(document, root_tag or DEFAULT_ROOT_TAG)
    return etree.tostring(root, pretty_print=pretty_print, encoding="unicode")
