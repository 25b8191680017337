import logging
from pydantic import BaseModel, Field
from typing import List, Optional

from edi_options import EdiOptions

logger = logging.getLogger(__name__)

# Canonical Data Model (CDM) for an EDI document.
# Slots are positional lists where None marks an absent field; gaps must be kept
# so that serialization preserves positional alignment.

class EdiComponent(BaseModel):
    """A single subdivision of a composite repetition."""
    value: str

class EdiRepetition(BaseModel):
    """
    One occurrence of an element value. Holds either a scalar `value` or, when the
    source used component separators, an ordered list of component slots.
    """
    value: Optional[str] = None
    components: List[Optional[EdiComponent]] = Field(default_factory=list)

    def get_component(self, position: int) -> Optional[str]:
        """Retrieves a component value by its position (1-based index)."""
        if 1 <= position <= len(self.components):
            component = self.components[position - 1]
            return component.value if component is not None else None
        return None

    def set_component(self, position: int, value: Optional[str]):
        while len(self.components) < position:
            self.components.append(None)
        self.components[position - 1] = EdiComponent(value=value) if value is not None else None

    def to_string(self, options: EdiOptions) -> str:
        if not self.components:
            return self.value or ""
        parts = [component.value if component is not None else "" for component in self.components]
        if options.component_separator is None:
            if len(parts) > 1:
                logger.warning(f"No component separator set; writing only the first of {len(parts)} components.")
            return parts[0]
        return options.component_separator.join(parts)

class EdiElement(BaseModel):
    """A data element. Absence is a None slot in the segment, never an empty element."""
    repetitions: List[EdiRepetition] = Field(default_factory=list)

    @classmethod
    def from_value(cls, value: str) -> 'EdiElement':
        return cls(repetitions=[EdiRepetition(value=value)])

    @property
    def value(self) -> Optional[str]:
        """The plain value of the first repetition (or its first component)."""
        if not self.repetitions:
            return None
        first = self.repetitions[0]
        if first.components:
            return first.get_component(1)
        return first.value

    def to_string(self, options: EdiOptions) -> str:
        parts = [repetition.to_string(options) for repetition in self.repetitions]
        if not parts:
            return ""
        if options.repetition_separator is None:
            if len(parts) > 1:
                logger.warning(f"No repetition separator set; writing only the first of {len(parts)} repetitions.")
            return parts[0]
        return options.repetition_separator.join(parts)

class EdiSegment(BaseModel):
    """Represents a single EDI segment: an identifier plus positional element slots."""
    id: str
    elements: List[Optional[EdiElement]] = Field(default_factory=list)

    def get_element(self, position: int) -> Optional[str]:
        """Retrieves the plain value of an element by its position (1-based index)."""
        if 1 <= position <= len(self.elements):
            element = self.elements[position - 1]
            return element.value if element is not None else None
        return None

    def set_element(self, position: int, value: Optional[str]):
        while len(self.elements) < position:
            self.elements.append(None)
        self.elements[position - 1] = EdiElement.from_value(value) if value is not None else None

    def is_id(self, segment_id: str) -> bool:
        return self.id.upper() == segment_id.upper()

    def to_string(self, options: EdiOptions) -> str:
        parts = [self.id]
        parts.extend(element.to_string(options) if element is not None else "" for element in self.elements)
        return options.element_separator.join(parts) + options.segment_terminator

class EdiTransactionSet(BaseModel):
    """ST..SE run of segments, tagged with the ISA and GS active when ST was seen."""
    interchange_header: Optional[EdiSegment] = None
    group_header: Optional[EdiSegment] = None
    segments: List[EdiSegment] = Field(default_factory=list)

class EdiDocument(BaseModel):
    segments: List[EdiSegment] = Field(default_factory=list)
    options: EdiOptions = Field(default_factory=EdiOptions)

    def model_post_init(self, __context) -> None:
        # The document keeps its own snapshot of the caller's options.
        self.options = self.options.model_copy()

    @property
    def transaction_sets(self) -> List[EdiTransactionSet]:
        """Groups segments into transaction sets. Recomputed on every access."""
        transaction_sets: List[EdiTransactionSet] = []
        transaction_set: Optional[EdiTransactionSet] = None
        isa: Optional[EdiSegment] = None
        gs: Optional[EdiSegment] = None
        for segment in self.segments:
            segment_id = segment.id.upper()
            if segment_id == "ISA":
                isa = segment
            elif segment_id == "GS":
                gs = segment
            elif segment_id == "ST":
                transaction_set = EdiTransactionSet(interchange_header=isa, group_header=gs)
                transaction_sets.append(transaction_set)
            elif segment_id == "GE":
                gs = None
            elif segment_id == "IEA":
                isa = None

            if transaction_set is None:
                continue
            transaction_set.segments.append(segment)
            if segment_id == "SE":
                transaction_set = None
        return transaction_sets

    def get_segment(self, segment_id: str) -> Optional[EdiSegment]:
        return next((segment for segment in self.segments if segment.is_id(segment_id)), None)

    def get_segments(self, segment_id: str) -> List[EdiSegment]:
        return [segment for segment in self.segments if segment.is_id(segment_id)]
