from .permutations import count_adjacencies, is_permutation, rank, wrap
from .stack import FlipRecord, LogicError, NotInBlockError, PancakeStack, ValueNotFoundError

__all__ = [
    "FlipRecord",
    "LogicError",
    "NotInBlockError",
    "PancakeStack",
    "ValueNotFoundError",
    "count_adjacencies",
    "is_permutation",
    "rank",
    "wrap",
]
