import pytest

from matchain.equality import canonical_form, is_same, is_transpose_of, normal_form
from matchain.expr import NaryOp, Operator, UnaryOp, invert, mul, nary_mul, operand, transpose

A = operand("A", (10, 10))
B = operand("B", (10, 10))
C = operand("C", (10, 10))
R = operand("R", (10, 4))


def test_transpose_of_is_identity_based():
    assert is_transpose_of(transpose(A), A)
    assert is_transpose_of(A, transpose(A))
    assert transpose(A).is_transpose_of(A)
    assert not is_transpose_of(transpose(A), B)
    assert not is_transpose_of(transpose(A), operand("A", (10, 10)))
    assert not is_transpose_of(invert(A), A)
    assert not is_transpose_of(A, A)
    assert not is_transpose_of(transpose(A), transpose(A))
    assert not is_transpose_of(None, A)


@pytest.mark.parametrize("expr", [
    A,
    transpose(A),
    invert(transpose(A)),
    mul(A, B, C),
    nary_mul(A, B, R),
    transpose(mul(A, R)),
])
def test_same_is_reflexive(expr):
    assert is_same(expr, expr)
    assert expr.is_same(expr)


def test_none_handling():
    assert is_same(None, None)
    assert not is_same(A, None)
    assert not is_same(None, A)


def test_distinct_operands_are_not_same():
    assert not is_same(A, operand("A", (10, 10)))
    assert not is_same(mul(A, B), mul(operand("A", (10, 10)), B))


def test_structurally_equal_trees_are_same():
    assert is_same(mul(A, B), mul(A, B))
    assert is_same(transpose(A), transpose(A))
    assert is_same(invert(mul(A, B)), invert(mul(A, B)))


def test_different_trees_are_not_same():
    assert not is_same(mul(A, B), mul(B, A))
    assert not is_same(transpose(A), invert(A))
    assert not is_same(transpose(A), A)
    assert not is_same(mul(A, B), mul(A, B, C))


def test_same_up_to_association():
    assert is_same(mul(A, B, C), mul(A, mul(B, C)))
    assert is_same(mul(A, B, C), nary_mul(A, B, C))


def test_same_up_to_transpose_distribution():
    assert is_same(transpose(mul(A, B)), mul(transpose(B), transpose(A)))
    assert is_same(transpose(transpose(A)), A)
    assert not is_same(transpose(mul(A, B)), mul(transpose(A), transpose(B)))


def test_normal_form_of_operand_is_itself():
    assert normal_form(A) is A


def test_normal_form_keeps_normal_nodes():
    T = transpose(A)
    assert normal_form(T) is T
    I = invert(A)
    assert normal_form(I) is I
    N = nary_mul(A, T, B)
    assert normal_form(N) is N


def test_normal_form_distributes_transpose():
    expr = transpose(mul(A, B, R))
    result = normal_form(expr)
    assert isinstance(result, NaryOp)
    assert len(result.children) == 3
    for factor, original in zip(result.children, (R, B, A)):
        assert isinstance(factor, UnaryOp)
        assert factor.operator == Operator.TRANSPOSE
        assert factor.child is original
    assert result.shape == expr.shape == (4, 10)


def test_normal_form_flattens_products():
    result = normal_form(mul(A, mul(B, mul(C, R))))
    assert isinstance(result, NaryOp)
    assert result.children == (A, B, C, R)


def test_normal_form_cancels_double_transpose():
    assert normal_form(transpose(transpose(A))) is A
    result = normal_form(transpose(transpose(mul(A, B))))
    assert result.children == (A, B)


def test_normal_form_inside_inverse():
    expr = invert(transpose(transpose(A)))
    result = normal_form(expr)
    assert result.operator == Operator.INVERSE
    assert result.child is A


def test_canonical_form_is_normal_form():
    expr = transpose(mul(A, B))
    assert is_same(canonical_form(expr), normal_form(expr))
