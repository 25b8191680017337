import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Optional

# Lenient readers for the literal text found in XML leaves.
_DATE_FORMATS = (
    '%Y-%m-%d', '%Y-%m-%dT%H:%M:%S', '%Y-%m-%dT%H:%M', '%Y-%m-%d %H:%M:%S', '%Y-%m-%d %H:%M',
    '%m/%d/%Y', '%m/%d/%y', '%Y/%m/%d', '%d %B %Y', '%d %b %Y', '%B %d, %Y', '%b %d, %Y',
)
_TIME_FORMATS = (
    '%H:%M', '%H:%M:%S', '%H:%M:%S.%f', '%I:%M %p', '%I:%M:%S %p',
    '%Y-%m-%dT%H:%M:%S', '%Y-%m-%dT%H:%M:%S.%f', '%Y-%m-%dT%H:%M', '%Y-%m-%d %H:%M:%S', '%Y-%m-%d %H:%M',
)
_DECIMAL_PATTERN = re.compile(r'[+-]?(\d+(\.\d*)?|\.\d+)')
_NUMERIC_PATTERN = re.compile(r'-?\d+')
_REAL_PATTERN = re.compile(r'-?(\d+(\.\d*)?|\.\d+)')
# Literals with more significant digits than this are kept as text rather than rounded.
MAX_DECIMAL_DIGITS = 28


def parse_date_text(text: str) -> Optional[date]:
    value = text.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def parse_time_text(text: str) -> Optional[time]:
    value = text.strip()
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    return None


def parse_decimal_text(text: str) -> Optional[Decimal]:
    value = text.strip().replace(',', '')
    if not _DECIMAL_PATTERN.fullmatch(value):
        return None
    try:
        parsed = Decimal(value)
    except InvalidOperation:
        return None
    if len(parsed.as_tuple().digits) > MAX_DECIMAL_DIGITS:
        return None
    return parsed


# --- EDI encodings ---
def encode_date(length: int, value: date) -> str:
    """Encodes a date as YYMMDD (length 6) or CCYYMMDD (length 8)."""
    if length == 6:
        return value.strftime('%y%m%d')
    if length == 8:
        return f"{value.year:04d}{value.month:02d}{value.day:02d}"
    raise ValueError(f"Unsupported date length: {length}")


def decode_date(text: str) -> date:
    if not text.isdigit():
        raise ValueError(f"Invalid EDI date: {text!r}")
    if len(text) == 6:
        return datetime.strptime(text, '%y%m%d').date()
    if len(text) == 8:
        return datetime.strptime(text, '%Y%m%d').date()
    raise ValueError(f"Invalid EDI date: {text!r}")


def encode_time(length: int, value: time) -> str:
    """
    Encodes a time as HHMM, HHMMSS, HHMMSSd or HHMMSSdd for lengths
    4, 6, 7 and 8 respectively. Fractional digits are truncated.
    """
    if length == 4:
        return f"{value.hour:02d}{value.minute:02d}"
    if length == 6:
        return f"{value.hour:02d}{value.minute:02d}{value.second:02d}"
    if length in (7, 8):
        fraction = f"{value.microsecond:06d}"[:length - 6]
        return f"{value.hour:02d}{value.minute:02d}{value.second:02d}{fraction}"
    raise ValueError(f"Unsupported time length: {length}")


def decode_time(text: str) -> time:
    if not text.isdigit() or len(text) not in (4, 6, 7, 8):
        raise ValueError(f"Invalid EDI time: {text!r}")
    hour, minute = int(text[0:2]), int(text[2:4])
    second = int(text[4:6]) if len(text) >= 6 else 0
    microsecond = int(text[6:].ljust(6, '0')) if len(text) > 6 else 0
    return time(hour, minute, second, microsecond)


def encode_real(value: Decimal) -> str:
    """Plain notation, no exponent, no trailing fractional zeros."""
    value = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits))
        text = format(value.normalize(), 'f')
    return '0' if text in ('-0', '') else text


def decode_real(text: str) -> Decimal:
    if not _REAL_PATTERN.fullmatch(text):
        raise ValueError(f"Invalid EDI real: {text!r}")
    return Decimal(text)


def encode_numeric(decimals: int, value: Decimal) -> str:
    """Encodes a value with `decimals` implied decimal places: 12.34 with 2 -> '1234'."""
    if decimals < 0:
        raise ValueError(f"Unsupported decimal count: {decimals}")
    value = Decimal(value)
    with localcontext() as ctx:
        # Wide enough for every integer digit of the scaled value.
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits), value.adjusted() + decimals + 2)
        scaled = value.scaleb(decimals).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    text = format(scaled, 'f')
    return '0' if text == '-0' else text


def decode_numeric(decimals: int, text: str) -> Decimal:
    if decimals < 0 or not _NUMERIC_PATTERN.fullmatch(text):
        raise ValueError(f"Invalid EDI numeric: {text!r}")
    return Decimal(text).scaleb(-decimals)
