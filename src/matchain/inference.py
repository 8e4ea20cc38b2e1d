from .expr import ExprError, Operator
from .equality import is_transpose_of
from .properties import Property, UnsupportedPropertyQuery, as_property


def _spd_decidable(node):
    # is_spd is defined for operands and products, not for unary operators
    return node.operator not in (Operator.TRANSPOSE, Operator.INVERSE)


class PropertyInferenceVisitor:
    """Answers one property query by structural recursion over the tree.

    Only operands carry declared properties; every operator infers its
    answer from its children. Combinations the rules do not cover raise
    UnsupportedPropertyQuery instead of answering False.
    """

    def __init__(self, prop):
        self.prop = prop

    def visit(self, node):
        return node.accept(self)

    def ask(self, prop, node):
        return _visitors[prop].visit(node)

    def unsupported(self, node):
        raise UnsupportedPropertyQuery(self.prop, node)

    def visit_operand(self, operand):
        if self.prop == Property.SYMMETRIC:
            return operand.declares(Property.SYMMETRIC) or operand.declares(Property.SPD)
        return operand.declares(self.prop)

    def visit_unary(self, op):
        child = op.child
        if op.operator == Operator.TRANSPOSE:
            if self.prop == Property.UPPER_TRIANGULAR:
                return self.ask(Property.LOWER_TRIANGULAR, child)
            elif self.prop == Property.LOWER_TRIANGULAR:
                return self.ask(Property.UPPER_TRIANGULAR, child)
            elif self.prop in (Property.SQUARE, Property.FULL_RANK):
                return self.visit(child)
            elif self.prop == Property.SYMMETRIC:
                if self.visit(child):
                    return True
                return _spd_decidable(child) and self.ask(Property.SPD, child)
            return self.unsupported(op)
        elif op.operator == Operator.INVERSE:
            if self.prop == Property.FULL_RANK:
                return self.visit(child)
            return self.unsupported(op)
        raise NotImplementedError(f"Unknown operator: {op.operator}")

    def visit_binary(self, op):
        return self.visit_product(op, op.children)

    def visit_nary(self, op):
        return self.visit_product(op, op.children)

    def visit_product(self, op, factors):
        if self.prop in (Property.UPPER_TRIANGULAR, Property.LOWER_TRIANGULAR):
            return all(self.visit(factor) for factor in factors)
        elif self.prop == Property.SQUARE:
            return self.unsupported(op)
        elif self.prop == Property.SYMMETRIC:
            # only the A^T A / A A^T pattern makes a product symmetric here
            return self.ask(Property.SPD, op)
        elif self.prop == Property.FULL_RANK:
            return False
        elif self.prop == Property.SPD:
            if len(factors) != 2:
                return False
            left, right = factors
            return self.ask(Property.FULL_RANK, left) and is_transpose_of(left, right)
        raise NotImplementedError(f"Unknown property: {self.prop}")


_visitors = {prop: PropertyInferenceVisitor(prop) for prop in Property}


def has_property(expr, prop):
    if expr is None:
        raise ExprError("cannot query properties of a missing expression")
    return _visitors[as_property(prop)].visit(expr)


def is_upper_triangular(expr):
    return has_property(expr, Property.UPPER_TRIANGULAR)


def is_lower_triangular(expr):
    return has_property(expr, Property.LOWER_TRIANGULAR)


def is_square(expr):
    return has_property(expr, Property.SQUARE)


def is_symmetric(expr):
    return has_property(expr, Property.SYMMETRIC)


def is_full_rank(expr):
    return has_property(expr, Property.FULL_RANK)


def is_spd(expr):
    return has_property(expr, Property.SPD)


def infer_properties(expr):
    """Properties that hold for ``expr``; undecidable ones are left out."""
    found = set()
    for prop in Property:
        try:
            if has_property(expr, prop):
                found.add(prop)
        except UnsupportedPropertyQuery:
            continue
    return frozenset(found)
