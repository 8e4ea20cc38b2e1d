from .config import LEVEL_SPACES, UNSET_CELL
from .expr import Operand, Operator, UnaryOp
from .inference import infer_properties


def _props(props):
    return ", ".join(sorted(p.name for p in props))


def label(expr):
    if isinstance(expr, Operand):
        return expr.name
    if isinstance(expr, UnaryOp):
        suffix = "^T" if expr.operator == Operator.TRANSPOSE else "^-1"
        inner = label(expr.child)
        if not isinstance(expr.child, (Operand, UnaryOp)):
            inner = f"({inner})"
        return inner + suffix
    return " ".join(label(child) for child in expr.children)


def walk(expr, level=0):
    pad = " " * level
    if isinstance(expr, Operand):
        return f"{pad}{expr.name} [{_props(expr.properties)}] [{expr.rows}, {expr.cols}]"
    if isinstance(expr, UnaryOp):
        if isinstance(expr.child, Operand):
            return f"{pad}{expr.operator.value}({walk(expr.child)})"
        return f"{pad}{expr.operator.value}(\n{walk(expr.child, level + LEVEL_SPACES)}\n{pad})"
    lines = [f"{pad}(* [{_props(infer_properties(expr))}]"]
    for child in expr.children:
        lines.append(walk(child, level + LEVEL_SPACES))
    lines.append(f"{pad})")
    return "\n".join(lines)


def format_parens(splits, factors, i, j):
    if i == j:
        return label(factors[i - 1])
    k = int(splits[i][j])
    return f"({format_parens(splits, factors, i, k)} {format_parens(splits, factors, k + 1, j)})"


def format_table(table, unset=None):
    rows = []
    for row in table[1:]:
        cells = []
        for value in row[1:]:
            cells.append(UNSET_CELL if unset is not None and value == unset else str(value))
        rows.append(" ".join(cells))
    return "\n".join(rows)
