"""TempTerminator data models."""

from tempterminator.models.outcome import ItemKind, ItemOutcome, ItemResult
from tempterminator.models.summary import PassResult, RunSummary

__all__ = [
    "ItemKind",
    "ItemOutcome",
    "ItemResult",
    "PassResult",
    "RunSummary",
]
