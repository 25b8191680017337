class EdiFormatError(ValueError):
    """Raised when the framing of an EDI document cannot be determined."""
