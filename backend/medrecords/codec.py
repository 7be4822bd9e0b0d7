"""Record value type and its JSON wire form.

A stored record is a JSON object with exactly four string fields, always
written in the order ``patient``, ``doctor``, ``procedure``, ``cost``.
``cost`` is kept as text.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .utils import dumps_ordered, loads

FIELDS = ("patient", "doctor", "procedure", "cost")


@dataclass
class Record:
    patient: str = ""
    doctor: str = ""
    procedure: str = ""
    cost: str = ""

    @classmethod
    def from_args(cls, args: List[str]) -> "Record":
        patient, doctor, procedure, cost = args
        return cls(patient=patient, doctor=doctor, procedure=procedure, cost=cost)

    def as_dict(self) -> Dict[str, str]:
        return {f: getattr(self, f) for f in FIELDS}


def encode(record: Record) -> bytes:
    return dumps_ordered(record.as_dict()).encode("utf-8")


def _field_for(name: str) -> Optional[str]:
    # exact name first, then a case-insensitive match
    if name in FIELDS:
        return name
    folded = name.casefold()
    for f in FIELDS:
        if f.casefold() == folded:
            return f
    return None


def try_decode(data: bytes) -> Tuple[Optional[Record], str]:
    """Decode stored bytes, reporting failures instead of raising.

    Empty input, invalid JSON or a JSON value that is not an object gives
    ``(None, message)``. Inside an object, field names match without regard
    to case, ``null`` and missing fields are empty strings and unknown
    fields are ignored. A field holding a non-string value is left empty
    while the other fields are still filled; the record is returned together
    with a message naming the offending fields.
    """
    if not data:
        return None, "empty record"
    try:
        obj = loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        return None, f"malformed record: {exc}"
    if not isinstance(obj, dict):
        return None, f"record is not a JSON object: {type(obj).__name__}"

    record = Record()
    bad = []
    for name, v in obj.items():
        f = _field_for(name)
        if f is None or v is None:
            continue
        if not isinstance(v, str):
            bad.append(f)
            continue
        setattr(record, f, v)
    if bad:
        return record, "non-string value for " + ", ".join(bad)
    return record, ""


def decode(data: bytes) -> Record:
    """Lenient decode: empty, malformed or non-object input yields an all-empty Record."""
    record, _ = try_decode(data)
    return record if record is not None else Record()


__all__ = ["FIELDS", "Record", "encode", "try_decode", "decode"]
