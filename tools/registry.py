"""Registry reconciliation: additive merge of seed entries into stored state."""

from typing import Iterable, List, Sequence, Set, Tuple, TypeVar, Union

from models.account import Account
from models.category import Category

Entry = TypeVar("Entry", bound=Union[Account, Category])


def reconcile(
    current: Sequence[Entry], seeds: Sequence[Entry], reserved_ids: Iterable[str] = ()
) -> Tuple[List[Entry], bool]:
    """Append every seed entry whose id is missing from ``current``.

    Existing entries are kept untouched and in order, even when a seed with
    the same id has a different definition. Running it again on its own
    output changes nothing.

    Args:
        current: Accounts or categories loaded from storage.
        seeds: Seed definitions.
        reserved_ids: Ids already present in storage that could not be read.
            Seeds with these ids are not added.

    Returns:
        Tuple of (merged list, whether anything was added).
    """
    merged = list(current)
    have = {entry.id for entry in merged} | set(reserved_ids)

    for seed in seeds:
        if seed.id not in have:
            merged.append(seed)
            have.add(seed.id)

    return merged, len(merged) != len(current)


def record_ids(records: Iterable[object]) -> Set[str]:
    """Ids of raw stored records, ignoring records without a usable id."""
    return {
        record["id"]
        for record in records
        if isinstance(record, dict) and isinstance(record.get("id"), str)
    }
