from enum import Enum

import numpy as np

from .properties import check_declared


class ExprError(ValueError):
    pass


class ShapeError(ExprError):
    pass


class ExprKind(Enum):
    OPERAND = "operand"
    UNARY = "unary"
    BINARY = "binary"
    NARY = "nary"


class Operator(Enum):
    TRANSPOSE = "transpose"
    INVERSE = "inverse"
    MUL = "matmul"


def check_shape(shape):
    if shape is None or len(shape) != 2:
        raise ShapeError(f"shape must have exactly two dimensions, got {shape}")
    dims = []
    for dim in shape:
        if isinstance(dim, bool) or not isinstance(dim, (int, np.integer)):
            raise ShapeError(f"dimensions must be integers, got {shape}")
        if dim < 1:
            raise ShapeError(f"dimensions must be positive, got {shape}")
        dims.append(int(dim))
    return tuple(dims)


def _check_child(child, where):
    if child is None:
        raise ExprError(f"{where}: child expression must not be None")
    if not isinstance(child, Expr):
        raise ExprError(f"{where}: expected an Expr, got {type(child).__name__}")
    return child


class Expr:
    """Base class of the expression tree.

    Nodes are immutable once built and compare by identity, so the same
    sub-expression can be shared by any number of parents.
    """

    kind = None
    operator = None

    @property
    def shape(self):
        return self._shape

    @property
    def rows(self):
        return self._shape[0]

    @property
    def cols(self):
        return self._shape[1]

    @property
    def children(self):
        return ()

    def accept(self, visitor):
        raise NotImplementedError("ERROR in accept.")

    def is_upper_triangular(self):
        from .inference import is_upper_triangular
        return is_upper_triangular(self)

    def is_lower_triangular(self):
        from .inference import is_lower_triangular
        return is_lower_triangular(self)

    def is_square(self):
        from .inference import is_square
        return is_square(self)

    def is_symmetric(self):
        from .inference import is_symmetric
        return is_symmetric(self)

    def is_full_rank(self):
        from .inference import is_full_rank
        return is_full_rank(self)

    def is_spd(self):
        from .inference import is_spd
        return is_spd(self)

    def is_transpose_of(self, other):
        from .equality import is_transpose_of
        return is_transpose_of(self, other)

    def is_same(self, other):
        from .equality import is_same
        return is_same(self, other)

    def __matmul__(self, other):
        return mul(self, other)

    @property
    def T(self):
        return transpose(self)

    def __invert__(self):
        return invert(self)


class Operand(Expr):
    kind = ExprKind.OPERAND

    def __init__(self, name, shape, properties=()):
        if not isinstance(name, str) or not name:
            raise ExprError("Operand must be initialized with a non-empty name.")
        self._name = name
        self._shape = check_shape(shape)
        self._properties = check_declared(properties, self._shape)

    @property
    def name(self):
        return self._name

    @property
    def properties(self):
        return self._properties

    def declares(self, prop):
        return prop in self._properties

    def accept(self, visitor):
        return visitor.visit_operand(self)

    def __repr__(self):
        props = sorted(p.name for p in self._properties)
        return f"Operand(name='{self._name}', shape={self._shape}, properties={props})"


class UnaryOp(Expr):
    kind = ExprKind.UNARY

    def __init__(self, child, operator):
        _check_child(child, operator.value)
        if operator not in (Operator.TRANSPOSE, Operator.INVERSE):
            raise ExprError(f"'{operator.value}' is not a unary operator")
        self._child = child
        self.operator = operator
        self._shape = self.infer_shape()

    def infer_shape(self):
        rows, cols = self._child.shape
        if self.operator == Operator.TRANSPOSE:
            return (cols, rows)
        if rows != cols:
            raise ShapeError(f"Matrix must be square to be invertible, got {self._child.shape}.")
        return (rows, cols)

    @property
    def child(self):
        return self._child

    @property
    def children(self):
        return (self._child,)

    def accept(self, visitor):
        return visitor.visit_unary(self)

    def __repr__(self):
        return f"UnaryOp(operator='{self.operator.value}', child={self._child!r})"


class BinaryOp(Expr):
    kind = ExprKind.BINARY
    operator = Operator.MUL

    def __init__(self, left, right):
        self._left = _check_child(left, "mul")
        self._right = _check_child(right, "mul")
        self._shape = infer_product_shape((left, right))

    @property
    def left(self):
        return self._left

    @property
    def right(self):
        return self._right

    @property
    def children(self):
        return (self._left, self._right)

    def accept(self, visitor):
        return visitor.visit_binary(self)

    def __repr__(self):
        return f"BinaryOp(operator='matmul', left={self._left!r}, right={self._right!r})"


class NaryOp(Expr):
    """Flattened product c0 @ c1 @ ... @ cn, denoting the left fold."""

    kind = ExprKind.NARY
    operator = Operator.MUL

    def __init__(self, children):
        children = tuple(children)
        if len(children) < 2:
            raise ExprError("an n-ary product needs at least two factors")
        for child in children:
            _check_child(child, "mul")
        self._children = children
        self._shape = infer_product_shape(children)

    @property
    def children(self):
        return self._children

    def accept(self, visitor):
        return visitor.visit_nary(self)

    def __repr__(self):
        return f"NaryOp(operator='matmul', children={list(self._children)!r})"


def infer_product_shape(factors):
    for left, right in zip(factors, factors[1:]):
        if left.cols != right.rows:
            raise ShapeError(
                f"Matrix dimensions are not compatible for multiplication: "
                f"{left.shape} @ {right.shape}"
            )
    return (factors[0].rows, factors[-1].cols)


def is_product(expr):
    return isinstance(expr, (BinaryOp, NaryOp))


def operand(name, shape, properties=()):
    return Operand(name, shape, properties)


def transpose(expr):
    return UnaryOp(expr, Operator.TRANSPOSE)


def invert(expr):
    return UnaryOp(expr, Operator.INVERSE)


def mul(*exprs, flatten=False):
    if not exprs:
        raise ExprError("mul needs one or more expressions")
    for expr in exprs:
        _check_child(expr, "mul")
    if len(exprs) == 1:
        return exprs[0]
    if flatten:
        return NaryOp(exprs)
    result = exprs[0]
    for expr in exprs[1:]:
        result = BinaryOp(result, expr)
    return result


def nary_mul(*exprs):
    return NaryOp(exprs)
