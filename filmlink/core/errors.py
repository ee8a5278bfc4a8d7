"""Exception types raised (or reported) by the cross-reference core."""

from __future__ import annotations


class FilmlinkError(Exception):
    """Base class for all filmlink errors."""


class NoMatchFound(FilmlinkError):
    """Every alternate name was tried and no validated candidate turned up.

    Reported inside ``Unresolved`` rather than raised, so a batch keeps going.
    """

    def __init__(self, record_id: int | str, attempted_names: int = 0) -> None:
        super().__init__(f"no match found for title {record_id} ({attempted_names} names tried)")
        self.record_id = record_id
        self.attempted_names = attempted_names


class UnmappedCategoryLabel(FilmlinkError, KeyError):
    """A scraped genre label is missing from the label table.

    Means the catalog's markup changed or the table is stale.
    """

    def __init__(self, label: str) -> None:
        super().__init__(f"unknown genre label: {label!r}")
        self.label = label

    def __str__(self) -> str:
        return self.args[0]


class TransientSearchError(FilmlinkError):
    """A single search attempt failed (network, rate limit, unparsable page)."""

    def __init__(self, strategy: str, query: str, reason: str | None = None) -> None:
        message = f"{strategy} search failed for {query!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.strategy = strategy
        self.query = query
        self.reason = reason


class InvalidYear(FilmlinkError, ValueError):
    """Year string from the record provider could not be parsed."""

    def __init__(self, value: str, record_id: int | str | None = None) -> None:
        where = f" for title {record_id}" if record_id is not None else ""
        super().__init__(f"failed parsing year{where}: {value!r}")
        self.value = value
        self.record_id = record_id


class InvalidRuntime(FilmlinkError, ValueError):
    """Runtime string from the record provider could not be parsed."""

    def __init__(self, value: str, record_id: int | str | None = None) -> None:
        where = f" for title {record_id}" if record_id is not None else ""
        super().__init__(f"failed parsing runtime{where}: {value!r}")
        self.value = value
        self.record_id = record_id
