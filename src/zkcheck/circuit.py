import logging
from typing import NamedTuple

from .exceptions import InvalidVariableReference
from .r1cs import R1CS, Violation
from .types import Val, Hash, Variable, Operation, add_hash
from . import proof


logger = logging.getLogger(__name__)


class Gate(NamedTuple):
    # op(w[a], w[b]) = w[out], where a, b and out are variable slot indices. Hash gates read their
    # operands from the circuit inputs, so a and b must be input indices for them.

    op: Operation
    a: int
    b: int
    out: int


class Circuit:
    # The Circuit class collects the inputs and gates of an arithmetic circuit and compiles them to
    # a rank-1 constraint system. The output values are informational only, compilation ignores
    # them.

    hash: Hash
    inputs: list[Val]
    gates: list[Gate]
    outputs: list[Val]

    def __init__(self, hash: Hash | None = None) -> None:
        self.hash = add_hash if hash is None else hash
        self.inputs = []
        self.gates = []
        self.outputs = []

    def add_input(self, value: Val) -> int:
        i = len(self.inputs)
        self.inputs.append(value)
        return i

    def add_gate(self, gate: Gate) -> None:
        self.gates.append(gate)

    def ADD(self, a: int, b: int, out: int) -> None:
        self.add_gate(Gate(Operation.ADD, a, b, out))

    def MUL(self, a: int, b: int, out: int) -> None:
        self.add_gate(Gate(Operation.MUL, a, b, out))

    def HASH(self, a: int, b: int, out: int) -> None:
        self.add_gate(Gate(Operation.HASH, a, b, out))

    def set_output(self, value: Val) -> None:
        self.outputs.append(value)

    def apply_hash(self, a: Val, b: Val) -> Val:
        return self.hash(a, b)

    def get_input(self, index: int) -> Val | None:
        return self.inputs[index] if 0 <= index < len(self.inputs) else None

    def compile(self) -> R1CS:
        r1cs = R1CS()
        for i, value in enumerate(self.inputs):
            r1cs.set_variable(i, value)
        for g, gate in enumerate(self.gates):
            COMPILE[gate.op](self, r1cs, gate, g)
        return r1cs

    def check(self) -> Violation | None:
        # the same combining function evaluates hash gates and checks hash constraints
        return self.compile().check(self.hash)

    def is_satisfied(self) -> bool:
        return self.check() is None

    def generate_proof(self, path: str) -> bool:
        passed = self.is_satisfied()
        proof.save_proof(path, passed)
        logger.info("proof generated and saved to %s", path)
        return passed

    @staticmethod
    def verify_proof(path: str) -> bool:
        passed = proof.load_proof(path)
        logger.info("proof verification result: %s", passed)
        return passed


# Add and Mul gates only assert the relation, their output is a fresh variable holding the default
# value and is never computed here. Hash gates are evaluated eagerly and their output slot is
# inserted or overwritten before the constraint is recorded.


def compile_arith(circuit: Circuit, r1cs: R1CS, gate: Gate, g: int) -> None:
    r1cs.add_constraint(
        [(r1cs.get_variable(gate.a, g), 0x01)],
        [(r1cs.get_variable(gate.b, g), 0x01)],
        [(Variable(gate.out), 0x01)],
        gate.op,
    )


def compile_hash(circuit: Circuit, r1cs: R1CS, gate: Gate, g: int) -> None:
    a = circuit.get_input(gate.a)
    if a is None:
        raise InvalidVariableReference(gate.a, g)
    b = circuit.get_input(gate.b)
    if b is None:
        raise InvalidVariableReference(gate.b, g)
    h = circuit.apply_hash(a, b)
    r1cs.set_variable(gate.out, h)
    logger.debug("applying hash constraint: input_a = %d, input_b = %d, computed_hash = %d, output_index = %d", a, b, h, gate.out)
    r1cs.add_constraint(
        [(r1cs.get_variable(gate.a, g), 0x01)],
        [(r1cs.get_variable(gate.b, g), 0x01)],
        [(r1cs.get_variable(gate.out, g), 0x01)],
        Operation.HASH,
    )


COMPILE = {
    Operation.ADD: compile_arith,
    Operation.MUL: compile_arith,
    Operation.HASH: compile_hash,
}


def compile_and_check(circuit: Circuit) -> bool:
    return circuit.is_satisfied()
