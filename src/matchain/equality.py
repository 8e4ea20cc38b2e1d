from .expr import NaryOp, Operand, Operator, UnaryOp, is_product, transpose


def is_transpose_of(left, right):
    """True when one side is ``transpose(x)`` and x is the other side itself.

    Purely syntactic: the child must be the very same node, equal-looking
    trees do not count.
    """
    if left is None or right is None:
        return False
    if left.operator == Operator.TRANSPOSE and left.child is right:
        return True
    return right.operator == Operator.TRANSPOSE and right.child is left


def _same_tree(left, right):
    if left is None and right is None:
        return True
    if left is None or right is None:
        return False
    if left is right:
        return True
    if left.kind != right.kind:
        return False
    if isinstance(left, Operand):
        return False
    if isinstance(left, UnaryOp):
        return left.operator == right.operator and _same_tree(left.child, right.child)
    if len(left.children) != len(right.children):
        return False
    return all(_same_tree(a, b) for a, b in zip(left.children, right.children))


def is_same(left, right):
    if _same_tree(left, right):
        return True
    if left is None or right is None:
        return False
    return _same_tree(canonical_form(left), canonical_form(right))


def _factors(expr):
    if isinstance(expr, NaryOp):
        return list(expr.children)
    return [expr]


def normal_form(expr):
    """Rewrite ``expr`` so equivalent products share one spelling.

    Products are flattened into a single n-ary node, ``(c0 c1 .. cn)^T``
    becomes ``cn^T .. c1^T c0^T`` and double transposes cancel. Subtrees that
    are already normal are returned as they are.
    """
    if isinstance(expr, Operand):
        return expr
    if is_product(expr):
        factors = []
        for child in expr.children:
            factors.extend(_factors(normal_form(child)))
        if isinstance(expr, NaryOp) and all(a is b for a, b in zip(factors, expr.children)) \
                and len(factors) == len(expr.children):
            return expr
        return NaryOp(factors)

    child = normal_form(expr.child)
    if expr.operator == Operator.TRANSPOSE:
        if isinstance(child, NaryOp):
            return NaryOp(normal_form(transpose(c)) for c in reversed(child.children))
        if child.operator == Operator.TRANSPOSE:
            return child.child
    if child is expr.child:
        return expr
    return UnaryOp(child, expr.operator)


def canonical_form(expr):
    return normal_form(expr)
