import enum
import hashlib
from dataclasses import dataclass
from typing import Protocol


Val = int


class Hash(Protocol):
    # The combining function shared by hash gates, hash constraints and Merkle trees. It must be
    # total and deterministic, since a hash gate is evaluated once while compiling and once more
    # while checking, and both results have to agree.
    def __call__(self, a: Val, b: Val) -> Val: ...


def add_hash(a: Val, b: Val) -> Val:
    return a + b


def encode(x: Val) -> bytes:
    # Signed big-endian encoding prefixed with its length, so that distinct pairs never collide.
    data = x.to_bytes(x.bit_length() // 8 + 1, "big", signed=True)
    return len(data).to_bytes(4, "big") + data


def sha256_hash(a: Val, b: Val) -> Val:
    return int.from_bytes(hashlib.sha256(encode(a) + encode(b)).digest(), "big")


HASHES: dict[str, Hash] = {
    "add": add_hash,
    "sha256": sha256_hash,
}


@dataclass(frozen=True)
class Variable:
    # A slot in the constraint system. Variables are immutable, overwriting a slot stores a new
    # Variable under the same index while constraints built earlier keep the one they captured.

    index: int
    value: Val = 0x00


Term = tuple[Variable, Val]
LinComb = list[Term]


def scalar(lc: LinComb) -> Val:
    return sum((v.value * c for v, c in lc), 0x00)  # Σ cᵢ·vᵢ


class Operation(enum.Enum):
    ADD = "add"
    MUL = "mul"
    HASH = "hash"

    def apply(self, hash: Hash, l: Val, r: Val) -> Val:
        if self is Operation.ADD:
            return l + r
        if self is Operation.MUL:
            return l * r
        return hash(l, r)
