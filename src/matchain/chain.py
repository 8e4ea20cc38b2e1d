import logging

import numpy as np

from .cost import select_kernel, top_level_cost
from .equality import normal_form
from .expr import Expr, ExprError, Operand, ShapeError, UnaryOp, is_product, mul
from .printer import format_parens, format_table

logger = logging.getLogger(__name__)

UNSET = np.iinfo(np.int64).max


class ChainError(ExprError):
    pass


def _check_factor(factor):
    if not isinstance(factor, Expr):
        raise ChainError(f"expected an Expr as chain factor, got {type(factor).__name__}")
    node = factor
    while isinstance(node, UnaryOp):
        node = node.child
    if not isinstance(node, Operand):
        raise ChainError(
            f"chain factors must be operands, optionally transposed or inverted; got {factor!r}"
        )


def check_conformable(factors):
    for i, (left, right) in enumerate(zip(factors, factors[1:]), start=1):
        if left.cols != right.rows:
            raise ShapeError(
                f"factors {i} and {i + 1} are not conformable: {left.shape} @ {right.shape}"
            )


def chain_factors(expr):
    """Flatten ``expr`` left to right into the factors of its product chain.

    Transposes of products are distributed first, so ``(A B)^T C`` yields
    ``B^T, A^T, C``. An inverse of a product is not a chain factor.
    """
    if expr is None:
        raise ExprError("cannot optimize a missing expression")
    expr = normal_form(expr)
    factors = list(expr.children) if is_product(expr) else [expr]
    for factor in factors:
        _check_factor(factor)
    check_conformable(factors)
    return factors


class ChainSolution:
    """Tables of one optimizer run, 1-indexed like the textbook algorithm.

    ``costs[i][j]`` is the cheapest cost of multiplying factors i..j,
    ``splits[i][j]`` the k at which that sub-chain is split (0 when unset) and
    ``best[i][j]`` the materialized expression for it.
    """

    def __init__(self, factors, costs, splits, best):
        self.factors = factors
        self.costs = costs
        self.splits = splits
        self.best = best

    @property
    def n(self):
        return len(self.factors)

    @property
    def cost(self):
        return int(self.costs[1][self.n])

    @property
    def expression(self):
        return self.best[1][self.n]

    def build(self, i=1, j=None):
        j = self.n if j is None else j
        if not 1 <= i <= j <= self.n:
            raise IndexError(f"no sub-chain [{i}, {j}] in a chain of {self.n} factors")
        if i == j:
            return self.factors[i - 1]
        k = int(self.splits[i][j])
        return mul(self.build(i, k), self.build(k + 1, j))

    def parenthesize(self):
        return format_parens(self.splits, self.factors, 1, self.n)

    def kernels(self):
        found = []

        def visit(node):
            if is_product(node):
                for child in node.children:
                    visit(child)
                found.append(select_kernel(node))

        visit(self.expression)
        return found

    def __repr__(self):
        return f"ChainSolution(n={self.n}, cost={self.cost}, order='{self.parenthesize()}')"


def solve(factors):
    factors = list(factors)
    if not factors:
        raise ChainError("a chain needs at least one factor")
    for factor in factors:
        _check_factor(factor)
    check_conformable(factors)

    n = len(factors)
    costs = np.full((n + 1, n + 1), UNSET, dtype=np.int64)
    splits = np.zeros((n + 1, n + 1), dtype=np.int64)
    best = [[None] * (n + 1) for _ in range(n + 1)]
    for i in range(1, n + 1):
        costs[i][i] = 0
        best[i][i] = factors[i - 1]

    for length in range(2, n + 1):
        for i in range(1, n - length + 2):
            j = i + length - 1
            for k in range(i, j):
                # price the product of the best sub-chains found so far, so
                # structure they carry (triangular, A^T A) lowers the cost
                candidate = mul(best[i][k], best[k + 1][j])
                q = int(costs[i][k]) + int(costs[k + 1][j]) + top_level_cost(candidate)
                if q < costs[i][j]:
                    costs[i][j] = q
                    splits[i][j] = k
                    best[i][j] = candidate

    solution = ChainSolution(factors, costs, splits, best)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("cost table:\n%s", format_table(costs, unset=UNSET))
        logger.debug("split table:\n%s", format_table(splits, unset=0))
        logger.debug("optimal order %s costs %d FLOPs", solution.parenthesize(), solution.cost)
    return solution


def optimize(expr):
    return solve(chain_factors(expr))


def optimal_cost(expr):
    return optimize(expr).cost


def optimal_split(expr):
    return optimize(expr).splits
