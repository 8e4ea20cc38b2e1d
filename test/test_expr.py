import numpy as np
import pytest

from matchain.expr import (
    BinaryOp, ExprError, ExprKind, NaryOp, Operand, Operator, ShapeError, UnaryOp,
    invert, mul, nary_mul, operand, transpose,
)
from matchain.properties import Property, PropertyError

A = operand("A", (20, 20), [Property.LOWER_TRIANGULAR])
B = operand("B", (20, 15))
C = operand("C", (15, 5))


def test_operand_fields():
    assert A.kind == ExprKind.OPERAND
    assert A.name == "A"
    assert A.shape == (20, 20)
    assert (B.rows, B.cols) == (20, 15)
    assert A.properties == frozenset({Property.LOWER_TRIANGULAR})
    assert A.children == ()


def test_operand_accepts_property_names():
    S = operand("S", (4, 4), ["symmetric", "FULL_RANK"])
    assert S.properties == frozenset({Property.SYMMETRIC, Property.FULL_RANK})


def test_operand_accepts_numpy_dims():
    D = operand("D", (np.int64(3), np.int32(7)))
    assert D.shape == (3, 7)
    assert all(type(d) is int for d in D.shape)


@pytest.mark.parametrize("shape", [(3,), (3, 4, 5), (0, 4), (-1, 2), (2.5, 3), (True, 2)])
def test_operand_rejects_bad_shapes(shape):
    with pytest.raises(ShapeError):
        operand("X", shape)


def test_operand_needs_name():
    with pytest.raises(ExprError):
        operand("", (2, 2))


def test_square_only_properties_need_square_shape():
    with pytest.raises(PropertyError):
        operand("X", (3, 4), [Property.SYMMETRIC])
    with pytest.raises(PropertyError):
        operand("X", (3, 4), ["SPD"])
    # triangular (trapezoidal) rectangles are fine
    operand("X", (3, 4), [Property.UPPER_TRIANGULAR])


def test_unknown_property_name():
    with pytest.raises(PropertyError):
        operand("X", (3, 3), ["diagonal"])


def test_transpose_swaps_shape():
    T = transpose(B)
    assert isinstance(T, UnaryOp)
    assert T.kind == ExprKind.UNARY
    assert T.operator == Operator.TRANSPOSE
    assert T.child is B
    assert T.shape == (15, 20)


def test_inverse_keeps_shape():
    I = invert(A)
    assert I.operator == Operator.INVERSE
    assert I.shape == (20, 20)


def test_inverse_needs_square():
    with pytest.raises(ShapeError):
        invert(B)


def test_mul_single_argument_is_returned_unchanged():
    assert mul(A) is A


def test_mul_is_left_associated():
    E = mul(A, B, C)
    assert isinstance(E, BinaryOp)
    assert E.kind == ExprKind.BINARY
    assert E.right is C
    assert isinstance(E.left, BinaryOp)
    assert E.left.left is A and E.left.right is B
    assert E.shape == (20, 5)


def test_mul_flatten_builds_nary():
    E = mul(A, B, C, flatten=True)
    assert isinstance(E, NaryOp)
    assert E.kind == ExprKind.NARY
    assert E.children == (A, B, C)
    assert E.shape == (20, 5)
    assert nary_mul(A, B).children == (A, B)


def test_mul_rejects_non_conformable():
    with pytest.raises(ShapeError):
        mul(A, C)
    with pytest.raises(ShapeError):
        nary_mul(A, B, B)


def test_preconditions():
    with pytest.raises(ExprError):
        mul()
    with pytest.raises(ExprError):
        mul(A, None)
    with pytest.raises(ExprError):
        transpose(None)
    with pytest.raises(ExprError):
        invert(None)
    with pytest.raises(ExprError):
        nary_mul(A)
    with pytest.raises(ExprError):
        mul(A, "B")


def test_operator_sugar():
    E = A @ B
    assert isinstance(E, BinaryOp)
    assert E.left is A and E.right is B
    assert B.T.child is B and B.T.operator == Operator.TRANSPOSE
    assert (~A).operator == Operator.INVERSE


def test_nodes_compare_by_identity():
    A2 = operand("A", (20, 20), [Property.LOWER_TRIANGULAR])
    assert A2 != A
    assert len({A, A2, A}) == 2


def test_repr():
    assert repr(B) == "Operand(name='B', shape=(20, 15), properties=[])"
    assert repr(transpose(B)).startswith("UnaryOp(operator='transpose'")
    assert repr(mul(A, B)).startswith("BinaryOp(operator='matmul'")
