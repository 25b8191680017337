from typing import Optional

from pydantic import BaseModel, field_validator

DEFAULT_SEGMENT_TERMINATOR = "~"
DEFAULT_ELEMENT_SEPARATOR = "*"


class EdiOptions(BaseModel):
    """
    Separator characters used when reading or writing an EDI document.
    Any of them may be unset; the parser infers the segment terminator and
    element separator, and the ISA header declares the other two.
    """
    segment_terminator: Optional[str] = None
    element_separator: Optional[str] = None
    component_separator: Optional[str] = None
    repetition_separator: Optional[str] = None

    @field_validator("segment_terminator", "element_separator", "component_separator", "repetition_separator")
    @classmethod
    def _single_character(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) != 1:
            raise ValueError(f"Separator must be a single character, got {value!r}")
        return value
