"""
Classification of a wrong move list at a single position.
"""

from typing import AbstractSet

from autoperft.divergence import MoveSetDivergence
from autoperft.errors import InvariantViolation


def diff_move_lists(expected: AbstractSet[str], generated: AbstractSet[str]) -> MoveSetDivergence:
    """
    Explain why two move lists differ.

    The lengths are compared first. If the generator produced fewer moves it
    failed to generate some legal ones; if it produced more it generated
    illegal ones. With equal lengths, any generated move that is not legal
    was substituted for a legal one, and both directions are reported.

    Raises:
        InvariantViolation: if the lists are identical. Callers only ask
            once the node counts have already disagreed.
    """
    expected = frozenset(expected)
    generated = frozenset(generated)

    if len(expected) > len(generated):
        return MoveSetDivergence(missing=expected - generated)

    if len(generated) > len(expected):
        return MoveSetDivergence(extraneous=generated - expected)

    illegal = generated - expected
    if not illegal:
        raise InvariantViolation("Move lists are identical; there is no divergence to classify")
    return MoveSetDivergence(missing=expected - generated, extraneous=illegal)
