from dataclasses import dataclass
from typing import BinaryIO

from .exceptions import ProofIOError


# The proof artifact is a single flag byte, 0x01 if the constraint system was satisfied and 0x00
# otherwise. It carries no cryptographic guarantee.


@dataclass
class Proof:
    passed: bool

    def dumps(
        self,
        file: BinaryIO,
    ) -> None:
        file.write(bytes([0x01 if self.passed else 0x00]))

    @staticmethod
    def loads(
        file: BinaryIO,
    ):
        data = file.read(1)
        if len(data) != 1:
            raise EOFError("proof is empty")
        return Proof(passed=data[0] == 0x01)


def save_proof(path: str, passed: bool) -> None:
    try:
        with open(path, "wb") as file:
            Proof(passed).dumps(file)
    except OSError as e:
        raise ProofIOError("could not write proof", path) from e


def load_proof(path: str) -> bool:
    try:
        with open(path, "rb") as file:
            return Proof.loads(file).passed
    except (OSError, EOFError) as e:
        raise ProofIOError("could not read proof", path) from e
