from __future__ import annotations

from collections.abc import Iterator
from types import UnionType
from typing import Annotated, Literal, Union, get_args, get_origin

__all__ = ["get_literal_vals"]


def get_literal_vals(alias) -> list[str]:
    """
    Extract the literal values from a (possibly annotated or unioned) type alias,
    preserving their declaration order.
    """

    def resolve(alias) -> Iterator[str]:
        origin = get_origin(alias)

        if origin is Literal:
            for literal_val in get_args(alias):
                yield str(literal_val)
        elif origin is Annotated:
            yield from resolve(get_args(alias)[0])
        elif origin in (Union, UnionType):
            for arg in get_args(alias):
                yield from resolve(arg)
        else:
            yield str(alias)

    return list(dict.fromkeys(resolve(alias)))
