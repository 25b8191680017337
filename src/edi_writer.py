import logging
from typing import Optional, TextIO

from cdm import EdiDocument, EdiSegment
from edi_options import EdiOptions, DEFAULT_SEGMENT_TERMINATOR, DEFAULT_ELEMENT_SEPARATOR
from edi_parser import supports_repetition_separator

logger = logging.getLogger(__name__)

def _apply_header_separators(segment: EdiSegment, options: EdiOptions) -> EdiOptions:
    """Separators declared in an ISA override the working options for the rest of the write."""
    repetition_field = segment.get_element(11)
    if repetition_field and supports_repetition_separator(segment.get_element(12)):
        repetition_separator = repetition_field[0]
    else:
        repetition_separator = None

    update = {"repetition_separator": repetition_separator}
    component_field = segment.get_element(16)
    if component_field:
        update["component_separator"] = component_field[0]
    logger.debug(f"ISA header separators: {update}")
    return options.model_copy(update=update)

def write_edi(document: EdiDocument, stream: Optional[TextIO] = None) -> str:
    """
    Renders a document to EDI text, optionally writing it to `stream` in one call.
    The document's own options are never modified.
    """
    options = document.options.model_copy(update={
        "segment_terminator": document.options.segment_terminator or DEFAULT_SEGMENT_TERMINATOR,
        "element_separator": document.options.element_separator or DEFAULT_ELEMENT_SEPARATOR,
    })

    parts = []
    for segment in document.segments:
        if segment.is_id("ISA"):
            options = _apply_header_separators(segment, options)
        parts.append(segment.to_string(options))

    edi = "".join(parts)
    if stream is not None:
        stream.write(edi)
    logger.debug(f"Wrote {len(document.segments)} segments ({len(edi)} characters).")
    return edi
