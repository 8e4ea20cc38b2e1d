import logging
from enum import Enum

from .config import FLOPS_PER_MAC, STRUCTURED_KERNEL_DIVISOR
from .expr import BinaryOp, ExprError, NaryOp, Operand, Operator, UnaryOp, is_product, mul

logger = logging.getLogger(__name__)


class Kernel(Enum):
    GEMM = "gemm"
    TRMM = "trmm"
    SYMM = "symm"


def select_kernel(node):
    """BLAS kernel for the top multiplication of ``node``.

    Only the left factor is consulted: TRMM and SYMM take the structured
    operand on the left. A structure query the inference rules cannot decide
    raises ``UnsupportedPropertyQuery``; it never counts as "no structure".
    """
    left = _as_binary(node).left
    if left.is_lower_triangular():
        kernel = Kernel.TRMM
    elif left.is_symmetric():
        kernel = Kernel.SYMM
    else:
        kernel = Kernel.GEMM
    logger.debug("%s selected for %r", kernel.name, left)
    return kernel


def gemm_cost(m, k, n):
    return FLOPS_PER_MAC * m * k * n


def multiply_cost(left_shape, right_shape, kernel):
    m, k = left_shape
    if k != right_shape[0]:
        raise ExprError(f"cannot price {left_shape} @ {right_shape}")
    cost = gemm_cost(m, k, right_shape[1])
    if kernel != Kernel.GEMM:
        cost //= STRUCTURED_KERNEL_DIVISOR
    return cost


def _as_binary(node):
    if isinstance(node, BinaryOp):
        return node
    if isinstance(node, NaryOp):
        # an n-ary product is priced as its left fold
        return mul(*node.children)
    raise ExprError(f"expected a product, got {node!r}")


def kernel_cost(node, costs=None):
    """Result shape of ``node`` and the cost of its top multiplication.

    Every multiplication found on the way down is appended to ``costs`` when a
    list is given. Operands and unary operators cost nothing themselves; a
    transpose hands its swapped shape to the parent.
    """
    if node is None:
        raise ExprError("cannot price a missing expression")
    if isinstance(node, Operand):
        return node.shape, 0
    if isinstance(node, UnaryOp):
        (rows, cols), cost = kernel_cost(node.child, costs)
        if node.operator == Operator.TRANSPOSE:
            return (cols, rows), cost
        return (rows, cols), cost
    if is_product(node):
        node = _as_binary(node)
        left_shape, _ = kernel_cost(node.left, costs)
        right_shape, _ = kernel_cost(node.right, costs)
        cost = multiply_cost(left_shape, right_shape, select_kernel(node))
        if costs is not None:
            costs.append(cost)
        return (left_shape[0], right_shape[1]), cost
    raise NotImplementedError(f"Unknown node: {node!r}")


def top_level_cost(node):
    """Cost of the last multiplication of ``node``, ignoring its subtrees."""
    if not is_product(node):
        raise ExprError(f"top level cost needs a product, got {node!r}")
    node = _as_binary(node)
    return multiply_cost(node.left.shape, node.right.shape, select_kernel(node))


def full_cost(node):
    costs = []
    kernel_cost(node, costs)
    return sum(costs)
