"""Name-based dispatch onto the record operations.

Callers send an operation name and a list of string arguments; the reply is
either a success carrying raw bytes (possibly empty) or an error carrying a
human readable message.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .errors import ArgumentCountError, RecordError, UnknownFunctionError
from .seed import seed_ledger
from .store import RecordStore

logger = logging.getLogger(__name__)

OK = 200
ERROR = 500


@dataclass
class Response:
    status: int
    payload: bytes = b""
    message: str = ""

    @classmethod
    def success(cls, payload: Optional[bytes] = None) -> "Response":
        return cls(OK, payload or b"")

    @classmethod
    def error(cls, message: str) -> "Response":
        return cls(ERROR, b"", message)

    @property
    def ok(self) -> bool:
        return self.status == OK


def require_args(args: List[str], n: int):
    if len(args) != n:
        raise ArgumentCountError(n, len(args))


class RecordContract:
    def __init__(self, store: RecordStore):
        self.store = store
        self._handlers: Dict[str, Callable[[List[str]], Optional[bytes]]] = {
            "queryRecord": self.query_record,
            "initLedger": self.init_ledger,
            "createRecord": self.create_record,
            "queryAllRecords": self.query_all_records,
            "changeRecordPatient": self.change_record_patient,
        }

    def functions(self) -> List[str]:
        return list(self._handlers)

    def init(self) -> Response:
        return Response.success()

    def invoke(self, function: str, args: List[str]) -> Response:
        try:
            handler = self._handlers.get(function)
            if handler is None:
                raise UnknownFunctionError(function)
            return Response.success(handler(list(args)))
        except RecordError as exc:
            logger.info("%s failed: %s", function, exc)
            return Response.error(str(exc))

    # -------------------- handlers --------------------

    def query_record(self, args: List[str]) -> bytes:
        require_args(args, 1)
        return self.store.get(args[0])

    def init_ledger(self, args: List[str]) -> None:
        seed_ledger(self.store)

    def create_record(self, args: List[str]) -> None:
        require_args(args, 5)
        key, patient, doctor, procedure, cost = args
        self.store.put(key, patient, doctor, procedure, cost)

    def query_all_records(self, args: List[str]) -> bytes:
        return self.store.scan_all()

    def change_record_patient(self, args: List[str]) -> None:
        require_args(args, 2)
        self.store.update_patient_field(args[0], args[1])


__all__ = ["OK", "ERROR", "Response", "RecordContract", "require_args"]
