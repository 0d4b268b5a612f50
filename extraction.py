# extraction.py - pull the in-band booking block out of assistant replies
import json
import logging
import re
from dataclasses import dataclass, fields
from typing import Optional

logger = logging.getLogger(__name__)

BOOKING_START = "###BOOKING_DATA###"
BOOKING_END = "###END_BOOKING###"
BOOKING_FIELDS = ("name", "email", "phone", "service", "date", "time", "address")

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class ExtractionError(ValueError):
    """Raised when a delimited booking block cannot be parsed."""


@dataclass(frozen=True)
class ExtractionPayload:
    name: str = ""
    email: str = ""
    phone: str = ""
    service: str = ""
    date: str = ""
    time: str = ""
    address: str = ""

    @classmethod
    def from_mapping(cls, data):
        return cls(**{f: data.get(f, "") for f in BOOKING_FIELDS})

    def missing_fields(self):
        return [f.name for f in fields(self) if not (getattr(self, f.name) or "").strip()]

    def as_dict(self):
        return {f: getattr(self, f) for f in BOOKING_FIELDS}


@dataclass(frozen=True)
class ExtractionResult:
    reply: str
    payload: Optional[ExtractionPayload] = None
    found_block: bool = False
    error: Optional[str] = None


def find_blocks(text):
    """Return (start, end, inner) spans for each marker pair, in order.

    An unterminated begin marker yields a final span running to the end of
    the text with ``inner`` set to None.
    """
    spans = []
    pos = 0
    while True:
        start = text.find(BOOKING_START, pos)
        if start == -1:
            break
        inner_start = start + len(BOOKING_START)
        end = text.find(BOOKING_END, inner_start)
        if end == -1:
            spans.append((start, len(text), None))
            break
        spans.append((start, end + len(BOOKING_END), text[inner_start:end]))
        pos = end + len(BOOKING_END)
    return spans


def _clean_value(key, value):
    if isinstance(value, bool) or isinstance(value, (dict, list)):
        raise ExtractionError(f"field {key!r} is not a string")
    if value is None:
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    raise ExtractionError(f"field {key!r} is not a string")


def parse_payload(raw):
    candidate = raw.strip()
    fenced = _CODE_FENCE.match(candidate)
    if fenced:
        candidate = fenced.group(1)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"invalid JSON: {e.msg}") from e
    except (ValueError, RecursionError) as e:
        # oversized integers, pathological nesting
        raise ExtractionError(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ExtractionError(f"expected a JSON object, got {type(data).__name__}")

    extra = sorted(set(data) - set(BOOKING_FIELDS))
    if extra:
        logger.debug("Ignoring unexpected booking keys: %s", extra)
    return ExtractionPayload.from_mapping(
        {key: _clean_value(key, data[key]) for key in BOOKING_FIELDS if key in data}
    )


def _splice(left, right):
    left_s, right_s = left.rstrip(), right.lstrip()
    if not left_s or not right_s:
        return left_s + right_s
    gap = left[len(left_s):] + right[:len(right) - len(right_s)]
    return left_s + ("\n" if "\n" in gap else " ") + right_s


def extract_booking(text):
    """Split assistant output into the visible reply and an optional payload."""
    spans = find_blocks(text)
    if not spans and BOOKING_END not in text:
        return ExtractionResult(reply=text)

    payload = None
    errors = []
    for _, _, inner in spans:
        if inner is None:
            errors.append("unterminated booking block")
            continue
        try:
            parsed = parse_payload(inner)
        except ExtractionError as e:
            errors.append(str(e))
            continue
        if payload is None:
            payload = parsed
        else:
            logger.info("Dropping extra booking block; one extraction per reply")

    reply = ""
    pos = 0
    for start, end, _ in spans:
        reply = _splice(reply, text[pos:start])
        pos = end
    reply = _splice(reply, text[pos:])
    # stray end markers outside any pair
    pieces = reply.split(BOOKING_END)
    reply = pieces[0]
    for piece in pieces[1:]:
        reply = _splice(reply, piece)
    reply = reply.strip()

    error = "; ".join(errors) or None
    if error and payload is None:
        logger.warning("Could not parse booking block: %s", error)
    return ExtractionResult(reply=reply, payload=payload, found_block=True, error=error)
