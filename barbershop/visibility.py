# barbershop/visibility.py

from typing import Dict, Iterable, List, Optional

from .data import STATUSES
from .errors import NotAuthorizedError, ValidationError
from .roles import Actor


def visible_to(actor: Actor, records: Iterable) -> list:
    """Records the actor may see: everything for admins, own rows otherwise."""
    if actor.is_privileged:
        return list(records)
    return [record for record in records if actor.owns(record.owner_id)]


def can_mutate(actor: Actor, record) -> bool:
    return actor.is_privileged or actor.owns(record.owner_id)


def can_administer(actor: Actor) -> bool:
    return actor.is_privileged


def require_mutation_rights(actor: Actor, record) -> None:
    if not can_mutate(actor, record):
        raise NotAuthorizedError("You can only change your own appointments")


def require_admin(actor: Actor) -> None:
    if not can_administer(actor):
        raise NotAuthorizedError("Admin access required")


def filter_appointments(
    records: Iterable,
    status: str = "all",
    search: Optional[str] = None,
    emails: Optional[Dict[int, str]] = None,
) -> list:
    # status tab first, then case-insensitive search on name or owner email
    if status != "all" and status not in STATUSES:
        raise ValidationError("status", "status must be 'all' or a valid appointment status")

    emails = emails or {}
    needle = (search or "").strip().lower()
    matches = []
    for record in records:
        if status != "all" and record.status != status:
            continue
        if needle:
            name = (record.full_name or "").lower()
            email = (emails.get(record.owner_id) or "").lower()
            if needle not in name and needle not in email:
                continue
        matches.append(record)
    return matches


def empty_counts() -> Dict[str, int]:
    counts = {"total": 0}
    counts.update({status: 0 for status in STATUSES})
    return counts


def count_by_owner(records: Iterable) -> Dict[Optional[int], Dict[str, int]]:
    counts: Dict[Optional[int], Dict[str, int]] = {}
    for record in records:
        bucket = counts.setdefault(record.owner_id, empty_counts())
        bucket["total"] += 1
        if record.status in bucket:
            bucket[record.status] += 1
    return counts


def roster(actor: Actor, profiles: Iterable, records: Iterable) -> List[dict]:
    """Every profile with its per-status appointment counts (admins only)."""
    require_admin(actor)
    counts = count_by_owner(records)
    return [
        {
            "id": profile.id,
            "email": profile.email,
            "full_name": profile.full_name,
            "created_at": profile.created_at,
            "appointments": counts.get(profile.id, empty_counts()),
        }
        for profile in profiles
    ]
