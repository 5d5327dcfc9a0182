import logging
from dataclasses import dataclass, field
from typing import BinaryIO

import dill

from .exceptions import InvalidVariableReference
from .types import Val, Hash, Variable, LinComb, Operation, scalar


logger = logging.getLogger(__name__)


@dataclass
class Constraint:
    # A constraint asserts op(<l, w>, <r, w>) = <o, w>, where op is addition, multiplication or the
    # combining function, depending on the operation tag.

    left: LinComb
    right: LinComb
    output: LinComb
    operation: Operation


@dataclass
class Violation:
    # The first constraint that does not hold, together with the folded values of its three linear
    # combinations and the value the output was expected to have.

    position: int
    operation: Operation
    left: Val
    right: Val
    output: Val
    expected: Val


@dataclass
class R1CS:
    variables: dict[int, Variable] = field(default_factory=lambda: {})  # slot index -> variable, insertion ordered
    constraints: list[Constraint] = field(default_factory=lambda: [])  # checked in insertion order
    hash: str = "add"  # name of the combining function that built the system, see HASHES

    def set_variable(self, index: int, value: Val) -> Variable:
        # Insert a new slot or overwrite the value of an existing one.
        var = Variable(index, value)
        self.variables[index] = var
        return var

    def get_variable(self, index: int, gate: int | None = None) -> Variable:
        try:
            return self.variables[index]
        except KeyError:
            raise InvalidVariableReference(index, gate) from None

    def add_constraint(
        self,
        left: LinComb,
        right: LinComb,
        output: LinComb,
        operation: Operation,
    ) -> None:
        self.constraints.append(Constraint(left, right, output, operation))

    def check(self, hash: Hash) -> Violation | None:
        for position, cons in enumerate(self.constraints):
            lv = scalar(cons.left)
            rv = scalar(cons.right)
            ov = scalar(cons.output)
            expected = cons.operation.apply(hash, lv, rv)
            if expected != ov:
                logger.debug("%s constraint %d not satisfied: expected %d, but output = %d", cons.operation.value, position, expected, ov)
                return Violation(position, cons.operation, lv, rv, ov, expected)
        return None

    def is_satisfied(self, hash: Hash) -> bool:
        return self.check(hash) is None

    def dumps(
        self,
        file: BinaryIO,
    ) -> None:
        file.write(dill.dumps((self.variables, self.constraints, self.hash)))

    @staticmethod
    def loads(
        file: BinaryIO,
    ):
        variables, constraints, hash = dill.loads(file.read())
        return R1CS(variables, constraints, hash)
