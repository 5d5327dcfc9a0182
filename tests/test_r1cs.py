"""Tests for the rank-1 constraint system and its satisfaction check."""

import io

import pytest

from zkcheck.exceptions import InvalidVariableReference, PreconditionViolation
from zkcheck.r1cs import R1CS, Violation
from zkcheck.types import HASHES, Variable, Operation, add_hash, sha256_hash, scalar


def single(r1cs, a, b, out, op):
    r1cs.add_constraint(
        [(r1cs.get_variable(a), 1)],
        [(r1cs.get_variable(b), 1)],
        [(r1cs.get_variable(out), 1)],
        op,
    )


class TestLinearCombination:
    def test_scalar(self):
        lc = [(Variable(0, 3), 2), (Variable(1, 5), -1), (Variable(2, 7), 10)]
        assert scalar(lc) == 6 - 5 + 70

    def test_empty(self):
        assert scalar([]) == 0

    def test_big_integers(self):
        big = 2**300 + 17
        assert scalar([(Variable(0, big), big)]) == big * big


class TestAddConstraint:
    def setup_method(self):
        self.r1cs = R1CS()
        self.r1cs.set_variable(0, 2)
        self.r1cs.set_variable(1, 3)
        self.r1cs.set_variable(2, 5)
        single(self.r1cs, 0, 1, 2, Operation.ADD)

    def test_satisfied(self):
        assert self.r1cs.is_satisfied(add_hash)

    def test_wrong_output(self):
        r1cs = R1CS()
        r1cs.set_variable(0, 2)
        r1cs.set_variable(1, 3)
        r1cs.set_variable(2, 6)
        single(r1cs, 0, 1, 2, Operation.ADD)
        assert not r1cs.is_satisfied(add_hash)

    def test_idempotent(self):
        assert self.r1cs.is_satisfied(add_hash) == self.r1cs.is_satisfied(add_hash)
        assert len(self.r1cs.constraints) == 1


class TestMulAndHash:
    def test_mul(self):
        r1cs = R1CS()
        r1cs.set_variable(0, -4)
        r1cs.set_variable(1, 6)
        r1cs.set_variable(2, -24)
        single(r1cs, 0, 1, 2, Operation.MUL)
        assert r1cs.is_satisfied(add_hash)

    def test_hash_uses_given_function(self):
        r1cs = R1CS()
        r1cs.set_variable(0, 4)
        r1cs.set_variable(1, 6)
        r1cs.set_variable(2, sha256_hash(4, 6))
        single(r1cs, 0, 1, 2, Operation.HASH)
        assert r1cs.is_satisfied(sha256_hash)
        assert not r1cs.is_satisfied(add_hash)

    def test_coefficients(self):
        # (2x + y) * 3 = z
        r1cs = R1CS()
        x = r1cs.set_variable(0, 5)
        y = r1cs.set_variable(1, 1)
        z = r1cs.set_variable(2, 33)
        r1cs.add_constraint([(x, 2), (y, 1)], [(y, 3)], [(z, 1)], Operation.MUL)
        assert r1cs.is_satisfied(add_hash)


class TestCheck:
    def test_reports_first_violation(self):
        r1cs = R1CS()
        r1cs.set_variable(0, 2)
        r1cs.set_variable(1, 3)
        r1cs.set_variable(2, 5)
        r1cs.set_variable(3, 7)
        single(r1cs, 0, 1, 2, Operation.ADD)
        single(r1cs, 0, 1, 3, Operation.MUL)
        single(r1cs, 0, 1, 3, Operation.ADD)
        violation = r1cs.check(add_hash)
        assert violation == Violation(1, Operation.MUL, 2, 3, 7, 6)

    def test_empty_system(self):
        assert R1CS().check(add_hash) is None


class TestVariables:
    def test_overwrite_keeps_captured(self):
        r1cs = R1CS()
        old = r1cs.set_variable(0, 1)
        new = r1cs.set_variable(0, 2)
        assert r1cs.get_variable(0) is new
        assert old.value == 1
        assert len(r1cs.variables) == 1

    def test_sparse_indices(self):
        r1cs = R1CS()
        r1cs.set_variable(100, 9)
        assert r1cs.get_variable(100).value == 9

    def test_missing(self):
        r1cs = R1CS()
        r1cs.set_variable(0, 1)
        with pytest.raises(InvalidVariableReference) as info:
            r1cs.get_variable(3, gate=2)
        assert info.value.index == 3
        assert info.value.gate == 2
        assert isinstance(info.value, PreconditionViolation)


class TestSerialization:
    def test_dumps_loads(self):
        r1cs = R1CS()
        r1cs.set_variable(0, 2**256 + 1)
        r1cs.set_variable(1, -(2**200))
        r1cs.set_variable(2, 2**256 + 1 - 2**200)
        single(r1cs, 0, 1, 2, Operation.ADD)
        single(r1cs, 0, 1, 2, Operation.HASH)
        buffer = io.BytesIO()
        r1cs.dumps(buffer)
        buffer.seek(0)
        loaded = R1CS.loads(buffer)
        assert loaded.variables == r1cs.variables
        assert loaded.constraints == r1cs.constraints
        assert loaded.constraints[1].operation is Operation.HASH
        assert loaded.is_satisfied(add_hash)

    def test_records_hash_name(self):
        r1cs = R1CS(hash="sha256")
        r1cs.set_variable(0, 4)
        r1cs.set_variable(1, 6)
        r1cs.set_variable(2, sha256_hash(4, 6))
        single(r1cs, 0, 1, 2, Operation.HASH)
        buffer = io.BytesIO()
        r1cs.dumps(buffer)
        buffer.seek(0)
        loaded = R1CS.loads(buffer)
        assert loaded.hash == "sha256"
        assert loaded.is_satisfied(HASHES[loaded.hash])

    def test_default_hash_name(self):
        assert R1CS().hash == "add"
