# An unsatisfied constraint system is not an error, it is reported through the return value of
# R1CS.check and R1CS.is_satisfied. The exceptions below cover malformed inputs and I/O failures.


class ZKCheckError(Exception):
    # Base exception for all zkcheck errors.
    pass


class PreconditionViolation(ZKCheckError):
    # An operation was invoked with arguments it cannot accept, for example a gate referencing a
    # variable slot that was never populated, an empty Merkle leaf set or a leaf index outside the
    # tree. This is a programming error in the caller.
    pass


class InvalidVariableReference(PreconditionViolation, IndexError):
    def __init__(self, index: int, gate: int | None = None):
        if gate is None:
            message = "invalid variable reference: {}".format(index)
        else:
            message = "invalid variable reference: {} (gate {})".format(index, gate)
        super().__init__(message)
        self.index = index
        self.gate = gate


class EmptyTreeError(PreconditionViolation, ValueError):
    def __init__(self):
        super().__init__("Merkle tree cannot be empty")


class LeafIndexError(PreconditionViolation, IndexError):
    def __init__(self, index: int, count: int):
        super().__init__("leaf index {} out of range for {} leaves".format(index, count))
        self.index = index
        self.count = count


class ProofIOError(ZKCheckError):
    # The proof file cannot be written or read, the underlying error is chained as the cause.
    def __init__(self, message: str, path: str):
        super().__init__("{}: {}".format(message, path))
        self.path = path
