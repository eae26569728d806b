"""Duplicate detection and history reconciliation for deployment logs."""

from typing import Dict, List, Sequence, Tuple

from .exceptions import DuplicateContractError
from .types import HistoryEntry, LatestRecord


def detect_duplicate(history: Sequence[HistoryEntry], address: str) -> None:
    """
    Check that an address is not yet registered anywhere in history.

    Addresses are compared case-insensitively. Proxy relationships are
    not considered.

    Args:
        history: Existing history entries
        address: Candidate contract address

    Raises:
        DuplicateContractError: If any contract record carries the address
    """
    candidate = address.lower()
    for entry in history:
        for record in entry.contracts.values():
            if record.address.lower() == candidate:
                raise DuplicateContractError(address)


def reconcile_history(
    history: Sequence[HistoryEntry],
) -> Tuple[List[HistoryEntry], Dict[str, LatestRecord]]:
    """
    Sort history by recency and fold it into the latest projection.

    Entries are sorted by timestamp descending with a stable sort, so
    entries sharing a timestamp keep their relative order. The first
    entry found for a contract name in that order wins; on equal
    timestamps that is the one stored earlier.

    Args:
        history: History entries in any order

    Returns:
        Tuple of (sorted_history, latest) where:
        - sorted_history: New list, most recent entry first
        - latest: Maps contract name -> LatestRecord
    """
    sorted_history = sorted(history, key=lambda entry: entry.timestamp, reverse=True)

    latest: Dict[str, LatestRecord] = {}
    for entry in sorted_history:
        for name, record in entry.contracts.items():
            if name in latest:
                continue
            latest[name] = LatestRecord.from_winner(entry, record)

    return sorted_history, latest
