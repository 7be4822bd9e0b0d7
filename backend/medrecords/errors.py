class RecordError(Exception):
    """Base class for errors reported back to the caller of a record operation."""


class ArgumentCountError(RecordError):
    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(f"Incorrect number of arguments. Expecting {expected}")


class LedgerError(RecordError):
    """The ledger failed to serve a read, a write or a range scan."""


class UnknownFunctionError(RecordError):
    def __init__(self, name: str):
        self.name = name
        super().__init__("Invalid Smart Contract function name.")


__all__ = ["RecordError", "ArgumentCountError", "LedgerError", "UnknownFunctionError"]
