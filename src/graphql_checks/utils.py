"""Small helpers shared by the reporter and the command-line interface."""

import math
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def batch(items: Sequence[T], limit: int) -> list[list[T]]:
    """Split items into consecutive batches of at most ``limit`` elements.

    An empty sequence still yields a single, empty batch, so that callers sending
    one request per batch always send at least one.

    :param items: the items to split, order is preserved
    :param limit: maximum number of items per batch, must be positive
    :return: the list of batches
    """
    batches_num = math.ceil(len(items) / limit)

    # we still want to update the check run and send empty annotations
    if batches_num == 0:
        return [[]]

    return [list(items[i * limit : (i + 1) * limit]) for i in range(batches_num)]


def cast_to_boolean(value: str | bool, default: bool | None = None) -> bool:  # noqa: FBT001
    """Interpret a CI input as a boolean.

    Only the literal strings ``"true"`` and ``"false"`` are recognized. Anything else
    yields ``default`` if one is given, otherwise ``True``.
    """
    if isinstance(value, bool):
        return value

    if value in ("true", "false"):
        return value == "true"

    if default is not None:
        return default

    return True
