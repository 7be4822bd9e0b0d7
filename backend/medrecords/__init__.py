from .codec import Record, encode, decode, try_decode
from .errors import ArgumentCountError, LedgerError, RecordError, UnknownFunctionError
from .store import RecordStore
from .seed import SAMPLE_RECORDS, seed_ledger
from .contract import RecordContract, Response

__all__ = [
    "Record",
    "encode",
    "decode",
    "try_decode",
    "RecordError",
    "ArgumentCountError",
    "LedgerError",
    "UnknownFunctionError",
    "RecordStore",
    "SAMPLE_RECORDS",
    "seed_ledger",
    "RecordContract",
    "Response",
]
