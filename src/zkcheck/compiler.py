import ast

from .circuit import Circuit, Gate
from .types import Val, Hash, Operation


Op = tuple[Operation, int, int]


def isinput(node: ast.stmt) -> bool:
    return isinstance(node, ast.Assign) and isinstance(node.value, ast.Call) and isinstance(node.value.func, ast.Name) and node.value.func.id == "input"


class Compiler(ast.NodeVisitor):
    # The Compiler class builds a Circuit from a circuit description written in a restricted subset
    # of Python, for example:
    #
    #     x = input(4)
    #     y = input(6)
    #     h = hash(x, y)
    #     s = x + y
    #     p = x * y
    #     output(10)
    #
    # Every statement defines exactly one name. Inputs are numbered first, in order of appearance,
    # and the outputs of the gates are numbered after them, also in order of appearance. Operands
    # must be names, since every gate refers to its operands by slot index.

    circuit: Circuit
    names: dict[str, int]  # name -> variable slot index
    next: int  # the next free slot index for a gate output

    def __init__(self, hash: Hash | None = None) -> None:
        self.circuit = Circuit(hash)
        self.names = {}
        self.next = 0

    def compile(self, source: str) -> Circuit:
        tree = ast.parse(source)
        # inputs occupy the first slots no matter where they are declared
        for stmt in tree.body:
            if isinput(stmt):
                self.visit(stmt)
        self.next = len(self.circuit.inputs)
        for stmt in tree.body:
            if not isinput(stmt):
                self.visit(stmt)
        return self.circuit

    def visit(self, node: ast.AST):
        method = "visit_" + node.__class__.__name__
        visitor = getattr(self, method, self.generic_visit)
        try:
            return visitor(node)
        except Exception as e:
            if hasattr(node, "lineno") and hasattr(node, "col_offset"):
                e.add_note("while visiting {} (line {}, column {})".format(node.__class__.__name__, node.lineno, node.col_offset))
            else:
                e.add_note("while visiting {}".format(node.__class__.__name__))
            e.with_traceback(None)
            raise

    def generic_visit(self, node: ast.AST):
        raise SyntaxError("unsupported syntax")

    def visit_Pass(self, node: ast.Pass) -> None:
        pass

    def visit_Constant(self, node: ast.Constant) -> Val:
        if isinstance(node.value, int) and not isinstance(node.value, bool):
            return node.value
        raise SyntaxError("invalid constant")

    def visit_UnaryOp(self, node: ast.UnaryOp) -> Val:
        if isinstance(node.op, ast.USub | ast.UAdd):
            value = self.visit(node.operand)
            if not isinstance(value, Val):
                raise TypeError("expected an integer constant")
            return -value if isinstance(node.op, ast.USub) else value
        raise SyntaxError("unsupported unary operator")

    def visit_Name(self, node: ast.Name) -> int:
        if node.id in self.names:
            return self.names[node.id]
        raise NameError("undefined name: {}".format(node.id))

    def operand(self, node: ast.expr) -> int:
        if not isinstance(node, ast.Name):
            raise TypeError("gate operands must be names")
        return self.visit(node)

    def constant(self, node: ast.expr) -> Val:
        if isinstance(node, ast.Name):
            raise TypeError("expected an integer constant")
        value = self.visit(node)
        if not isinstance(value, Val):
            raise TypeError("expected an integer constant")
        return value

    def visit_BinOp(self, node: ast.BinOp) -> Op:
        if isinstance(node.op, ast.Add):
            return Operation.ADD, self.operand(node.left), self.operand(node.right)
        if isinstance(node.op, ast.Mult):
            return Operation.MUL, self.operand(node.left), self.operand(node.right)
        raise SyntaxError("unsupported binary operator")

    def visit_Call(self, node: ast.Call) -> Op | Val | None:
        if not isinstance(node.func, ast.Name) or node.keywords:
            raise SyntaxError("invalid call")
        if node.func.id == "hash":
            if len(node.args) != 2:
                raise TypeError("hash takes exactly 2 arguments")
            return Operation.HASH, self.operand(node.args[0]), self.operand(node.args[1])
        if node.func.id == "input":
            if len(node.args) != 1:
                raise TypeError("input takes exactly 1 argument")
            return self.constant(node.args[0])
        if node.func.id == "output":
            if len(node.args) != 1:
                raise TypeError("output takes exactly 1 argument")
            self.circuit.set_output(self.constant(node.args[0]))
            return None
        raise NameError("undefined function: {}".format(node.func.id))

    def visit_Expr(self, node: ast.Expr) -> None:
        if not isinstance(node.value, ast.Call) or not isinstance(node.value.func, ast.Name) or node.value.func.id != "output":
            raise SyntaxError("only output(...) may be used as a statement")
        self.visit(node.value)

    def visit_Assign(self, node: ast.Assign) -> None:
        if len(node.targets) != 1 or not isinstance(node.targets[0], ast.Name):
            raise SyntaxError("invalid assignment target")
        id = node.targets[0].id
        if id in self.names:
            raise NameError("name already defined: {}".format(id))
        value = self.visit(node.value)
        if isinput(node):
            self.names[id] = self.circuit.add_input(value)
            return
        if not isinstance(value, tuple):
            raise TypeError("expected a gate")
        op, a, b = value
        self.names[id] = out = self.next
        self.next += 1
        self.circuit.add_gate(Gate(op, a, b, out))


def parse(source: str, hash: Hash | None = None) -> Circuit:
    return Compiler(hash).compile(source)
