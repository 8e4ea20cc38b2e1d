"""Property-aware matrix chain ordering."""

from .properties import Property, PropertyError, UnsupportedPropertyQuery
from .expr import (
    Expr, ExprError, ExprKind, ShapeError, Operator,
    Operand, UnaryOp, BinaryOp, NaryOp,
    operand, transpose, invert, mul, nary_mul,
)
from .inference import (
    has_property, infer_properties,
    is_upper_triangular, is_lower_triangular, is_square,
    is_symmetric, is_full_rank, is_spd,
)
from .equality import is_same, is_transpose_of, normal_form, canonical_form
from .cost import Kernel, select_kernel, kernel_cost, top_level_cost, full_cost
from .chain import ChainError, ChainSolution, chain_factors, solve, optimize, optimal_cost, optimal_split

__version__ = "0.1.0"
