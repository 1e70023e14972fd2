"""
Helpers for keeping ``memberIds`` aligned with the ``members`` map.
"""

from typing import Iterable, List, Mapping


def merge_member_ids(existing: Iterable[str], uid: str) -> List[str]:
    """
    Union of ``existing`` and ``[uid]``.

    Duplicates are dropped, the existing order is kept and ``uid`` is appended
    when it was not already present.
    """
    merged: List[str] = []
    for member_id in [*existing, uid]:
        if member_id not in merged:
            merged.append(member_id)
    return merged


def expected_member_ids(members: Mapping[str, object]) -> List[str]:
    """The member id list derived from the membership map, in map order."""
    return list(members.keys())


def needs_member_ids_repair(members: Mapping[str, object], member_ids: Iterable[str]) -> bool:
    """
    True when some key of ``members`` is missing from ``member_ids``.

    Only missing ids count. Stale ids in ``member_ids`` that no longer have a
    ``members`` entry are not detected.
    """
    present = set(member_ids)
    return any(uid not in present for uid in members)
