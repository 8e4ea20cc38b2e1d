from enum import Enum


class PropertyError(Exception):
    pass


class UnsupportedPropertyQuery(PropertyError):
    """Raised when the inference rules cannot decide a property for a node.

    This is not the same as the property being false: the caller asked a
    question the rules have no answer for.
    """

    def __init__(self, prop, node):
        self.prop = prop
        self.node = node
        super().__init__(
            f"is_{prop.value} is not supported on {_describe(node)} nodes"
        )


class Property(Enum):
    UPPER_TRIANGULAR = "upper_triangular"
    LOWER_TRIANGULAR = "lower_triangular"
    SQUARE = "square"
    SYMMETRIC = "symmetric"
    FULL_RANK = "full_rank"
    SPD = "spd"


# properties that only make sense on a square shape
square_only = {Property.SQUARE, Property.SYMMETRIC, Property.SPD}


def _describe(node):
    operator = getattr(node, "operator", None)
    if operator is not None and len(node.children) == 1:
        return operator.value
    return node.kind.value


def as_property(prop):
    if isinstance(prop, Property):
        return prop
    if isinstance(prop, str):
        try:
            return Property[prop.upper()]
        except KeyError:
            raise PropertyError(f"unknown property '{prop}'") from None
    raise PropertyError(f"expected a Property, got {type(prop).__name__}")


def check_declared(props, shape):
    props = frozenset(as_property(p) for p in props)
    rows, cols = shape
    if rows != cols:
        invalid = props & square_only
        if invalid:
            raise PropertyError(
                f"{', '.join(sorted(p.value for p in invalid))} "
                f"requires a square shape, got {shape}"
            )
    return props
