import io
import json
import logging

from .codec import Record, encode, try_decode
from .errors import LedgerError

logger = logging.getLogger(__name__)

SCAN_START_KEY = "REC0"
SCAN_END_KEY = "REC999"


class RecordStore:
    """The four record operations over an ordered key-value ledger.

    The store keeps no record state of its own: every call goes back to the
    ledger. Reads and writes of single keys are lenient: a ledger failure
    there is logged and the call still returns normally. Range scan
    failures are propagated.
    """

    def __init__(self, ledger, scan_start: str = SCAN_START_KEY, scan_end: str = SCAN_END_KEY):
        self.ledger = ledger
        self.scan_start = scan_start
        self.scan_end = scan_end

    def get(self, key: str) -> bytes:
        try:
            return self.ledger.get(key)
        except LedgerError as exc:
            logger.warning("ledger get %r failed: %s", key, exc)
            return b""

    def put(self, key: str, patient: str, doctor: str, procedure: str, cost: str):
        record = Record.from_args([patient, doctor, procedure, cost])
        self._write(key, record)

    def _write(self, key: str, record: Record):
        try:
            self.ledger.put(key, encode(record))
        except LedgerError as exc:
            logger.warning("ledger put %r failed: %s", key, exc)
            return
        logger.info("Wrote %s", key)

    def scan_all(self) -> bytes:
        """Every record in [scan_start, scan_end) as one JSON array.

        Elements are ``{"Key":"<key>", "Record":<stored bytes>}`` in the order
        the ledger yields them. The stored bytes are embedded as they are.
        """
        it = self.ledger.range_scan(self.scan_start, self.scan_end)
        try:
            buf = io.BytesIO()
            buf.write(b"[")
            written = False
            while it.has_next():
                key, value = it.next()
                if written:
                    buf.write(b",")
                buf.write(b'{"Key":')
                buf.write(json.dumps(key, ensure_ascii=False).encode("utf-8"))
                buf.write(b', "Record":')
                buf.write(value)
                buf.write(b"}")
                written = True
            buf.write(b"]")
        finally:
            it.close()

        result = buf.getvalue()
        logger.debug("- queryAllRecords:\n%s", result.decode("utf-8", errors="replace"))
        return result

    def update_patient_field(self, key: str, new_patient: str):
        record, err = try_decode(self.get(key))
        if record is None:
            logger.warning("record %r could not be decoded (%s), starting from an empty record", key, err)
            record = Record()
        elif err:
            logger.warning("record %r decoded partially: %s", key, err)
        record.patient = new_patient
        self._write(key, record)


__all__ = ["SCAN_START_KEY", "SCAN_END_KEY", "RecordStore"]
