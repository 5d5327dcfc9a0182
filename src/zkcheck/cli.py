import argparse
import logging

from .types import HASHES
from .r1cs import R1CS
from .compiler import Compiler
from .merkle import MerkleTree
from .proof import save_proof, load_proof


PROOF = "a.proof"  # default path of the proof flag


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="zkcheck R1CS Circuit Checker and Merkle Tree Tool")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="increase logging verbosity (-v for info, -vv for debug)")

    subparsers = parser.add_subparsers(dest="command", required=True, help="sub-command")

    parser_prove = subparsers.add_parser("prove", help="check a circuit and write the proof flag", description="Compile the circuit description, check that its constraints are satisfied, and write the result to a proof file.")
    parser_prove.add_argument("file", type=str, help="path to the circuit description")
    parser_prove.add_argument("-H", "--hash", type=str, choices=sorted(HASHES), default="add", help="combining function for hash gates (default: add)")
    parser_prove.add_argument("-P", "--proof", type=str, default=PROOF, help="path to write the proof to (default: {})".format(PROOF))
    parser_prove.add_argument("-r", "--r1cs", type=str, default=None, help="path to write the constraint system to")

    parser_check = subparsers.add_parser("check", help="re-check a saved constraint system", description="Load a constraint system and report the first constraint that does not hold.")
    parser_check.add_argument("-r", "--r1cs", type=str, required=True, help="path to read the constraint system from")
    parser_check.add_argument("-H", "--hash", type=str, choices=sorted(HASHES), default=None, help="combining function for hash constraints (default: the one recorded when the system was saved)")

    parser_verify = subparsers.add_parser("verify", help="read a proof flag", description="Read the proof file and report whether the circuit was satisfied.")
    parser_verify.add_argument("-P", "--proof", type=str, default=PROOF, help="path to read the proof from (default: {})".format(PROOF))

    parser_merkle = subparsers.add_parser("merkle", help="compute a Merkle root and path", description="Build a Merkle tree over the given leaves and print its root, and the authentication path of a leaf if requested.")
    parser_merkle.add_argument("leaves", type=lambda s: int(s, 0), nargs="+", help="the leaf values")
    parser_merkle.add_argument("-H", "--hash", type=str, choices=sorted(HASHES), default="add", help="combining function (default: add)")
    parser_merkle.add_argument("-i", "--index", type=int, default=None, help="index of the leaf to print the path for")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING - 10 * min(args.verbose, 2), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "prove":
        compiler = Compiler(HASHES[args.hash])
        with open(args.file, "r") as file:
            print("Compiling the circuit...")
            circuit = compiler.compile(file.read())

        print("Number of inputs:", len(circuit.inputs))
        print("Number of gates:", len(circuit.gates))

        r1cs = circuit.compile()
        r1cs.hash = args.hash
        violation = r1cs.check(circuit.hash)

        if args.r1cs is not None:
            with open(args.r1cs, "wb") as r1cs_file:
                print("Saving constraint system to:", args.r1cs)
                r1cs.dumps(r1cs_file)

        print("Saving proof to:", args.proof)
        save_proof(args.proof, violation is None)

        if violation is None:
            print("Constraints satisfied!")
        else:
            print("Constraint {} ({}) not satisfied: expected {}, but output = {}".format(violation.position, violation.operation.value, violation.expected, violation.output))
        return 0 if violation is None else 1

    elif args.command == "check":
        with open(args.r1cs, "rb") as r1cs_file:
            print("Loading constraint system from:", args.r1cs)
            r1cs = R1CS.loads(r1cs_file)

        print("Number of variables:", len(r1cs.variables))
        print("Number of constraints:", len(r1cs.constraints))

        hash = r1cs.hash if args.hash is None else args.hash
        print("Combining function:", hash)
        violation = r1cs.check(HASHES[hash])
        if violation is None:
            print("Constraints satisfied!")
        else:
            print("Constraint {} ({}) not satisfied: expected {}, but output = {}".format(violation.position, violation.operation.value, violation.expected, violation.output))
        return 0 if violation is None else 1

    elif args.command == "verify":
        print("Loading proof from:", args.proof)
        passed = load_proof(args.proof)

        if passed:
            print("Verification passed!")
        else:
            print("Verification failed!")
        return 0 if passed else 1

    elif args.command == "merkle":
        tree = MerkleTree(args.leaves, HASHES[args.hash])
        print("Root:", tree.root)
        if args.index is not None:
            path = tree.path(args.index)
            print("Path:", "[" + ", ".join("({}, {})".format(sibling, "left" if is_left else "right") for sibling, is_left in path) + "]")
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
