import logging
import re
from typing import List, Optional

from cdm import EdiDocument, EdiSegment, EdiElement, EdiRepetition, EdiComponent
from edi_errors import EdiFormatError
from edi_options import EdiOptions

logger = logging.getLogger(__name__)

# The ISA segment is fixed width; its last character is the segment terminator.
ISA_SEGMENT_TERMINATOR_POSITION = 105
ISA_REPETITION_SEPARATOR_POSITION = 11
ISA_VERSION_POSITION = 12
ISA_COMPONENT_SEPARATOR_POSITION = 16
# Interchange versions before 00402 use ISA11 as a standards identifier, not a separator.
REPETITION_SEPARATOR_MIN_VERSION = "00402"

_ELEMENT_SEPARATOR_PATTERN = re.compile(r'[^A-Z0-9]', re.IGNORECASE)
_SEGMENT_TERMINATOR_PATTERN = re.compile(r'([\x00-\x1f~])\s*$')

# --- Separator Inference ---
def guess_element_separator(edi_string: str) -> str:
    match = _ELEMENT_SEPARATOR_PATTERN.search(edi_string)
    if not match:
        raise EdiFormatError("Could not determine the element separator.")
    logger.debug(f"Guessed element separator: {match.group(0)!r}")
    return match.group(0)

def guess_segment_terminator(edi_string: str) -> str:
    if edi_string[:3].upper() == "ISA" and len(edi_string) > ISA_SEGMENT_TERMINATOR_POSITION:
        terminator = edi_string[ISA_SEGMENT_TERMINATOR_POSITION]
        logger.debug(f"Segment terminator taken from ISA header: {terminator!r}")
        return terminator
    match = _SEGMENT_TERMINATOR_PATTERN.search(edi_string)
    if not match:
        raise EdiFormatError("Could not determine the segment terminator.")
    logger.debug(f"Guessed segment terminator: {match.group(1)!r}")
    return match.group(1)

def supports_repetition_separator(version: Optional[str]) -> bool:
    """Ordinal comparison of the ISA12 version against 00402."""
    return (version or "") >= REPETITION_SEPARATOR_MIN_VERSION

class EdiParser:
    def __init__(self, edi_string: str, options: Optional[EdiOptions] = None):
        self.edi_string = edi_string
        self.options = options.model_copy() if options is not None else EdiOptions()

        # Explicit separators win; only the framing characters are ever guessed.
        self.element_separator = self.options.element_separator or guess_element_separator(edi_string)
        self.segment_terminator = self.options.segment_terminator or guess_segment_terminator(edi_string)
        self.component_separator = self.options.component_separator
        self.repetition_separator = self.options.repetition_separator
        logger.debug(f"Parser initialized: Segment={self.segment_terminator!r}, Element={self.element_separator!r}")

    def parse(self) -> EdiDocument:
        self.component_separator = self.options.component_separator
        self.repetition_separator = self.options.repetition_separator
        document_options = self.options.model_copy(update={
            "segment_terminator": self.segment_terminator,
            "element_separator": self.element_separator,
        })
        document = EdiDocument(options=document_options)

        raw_segments = self.edi_string.split(self.segment_terminator)
        for raw_segment in raw_segments:
            # A trailing terminator or a doubled one leaves a blank fragment with no segment id.
            if not raw_segment.strip():
                continue
            document.segments.append(self._parse_segment(raw_segment))

        logger.debug(f"Parsed {len(document.segments)} segments.")
        return document

    def _parse_segment(self, raw_segment: str) -> EdiSegment:
        raw_elements = raw_segment.lstrip().split(self.element_separator)
        segment = EdiSegment(id=raw_elements[0])
        is_header = segment.is_id("ISA")

        for j in range(1, len(raw_elements)):
            raw_element = raw_elements[j]
            if is_header and self._read_header_element(j, raw_elements, segment):
                continue
            segment.elements.append(self._parse_element(raw_element) if raw_element else None)
        return segment

    def _read_header_element(self, j: int, raw_elements: List[str], segment: EdiSegment) -> bool:
        """
        Picks up the separators the ISA declares inline. Returns True when the
        token was stored as a plain element and needs no further splitting.
        """
        raw_element = raw_elements[j]
        if j == ISA_COMPONENT_SEPARATOR_POSITION:
            if raw_element:
                self.component_separator = raw_element[0]
                logger.debug(f"Component separator declared by ISA16: {self.component_separator!r}")
            segment.elements.append(EdiElement.from_value(raw_element) if raw_element else None)
            return True

        if j == ISA_REPETITION_SEPARATOR_POSITION:
            version = raw_elements[ISA_VERSION_POSITION] if len(raw_elements) > ISA_VERSION_POSITION else None
            if supports_repetition_separator(version) and raw_element and not raw_element[0].isalnum():
                self.repetition_separator = raw_element[0]
                logger.debug(f"Repetition separator declared by ISA11: {self.repetition_separator!r}")
                segment.elements.append(EdiElement.from_value(raw_element))
                return True
            self.repetition_separator = None
        return False

    def _parse_element(self, raw_element: str) -> EdiElement:
        if self.repetition_separator is not None:
            raw_repetitions = raw_element.split(self.repetition_separator)
        else:
            raw_repetitions = [raw_element]
        return EdiElement(repetitions=[self._parse_repetition(raw) for raw in raw_repetitions if raw])

    def _parse_repetition(self, raw_repetition: str) -> EdiRepetition:
        if self.component_separator is None:
            return EdiRepetition(value=raw_repetition)
        components = [
            EdiComponent(value=raw) if raw else None
            for raw in raw_repetition.split(self.component_separator)
        ]
        return EdiRepetition(components=components)

def parse_edi(edi_string: str, options: Optional[EdiOptions] = None) -> EdiDocument:
    """Creates an EdiDocument from a string containing EDI."""
    return EdiParser(edi_string, options).parse()
