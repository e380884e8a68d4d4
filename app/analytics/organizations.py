"""
app/analytics/organizations.py

Purpose: Organization roll-ups

Organizations are not stored; they are the distinct non-empty values of the
users' organization field, recomputed on demand.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from app.analytics.buckets import read_field


@dataclass
class OrganizationSummary:
    name: str
    users: List[Any] = field(default_factory=list)
    total: int = 0
    active: int = 0
    frozen: int = 0


def group_by_organization(
    users: Iterable[Any],
    organization_field: str = "organization",
    frozen_field: str = "is_frozen",
) -> List[OrganizationSummary]:
    """
    Partitions users by organization.

    Users without an organization are left out. Groups are sorted by
    descending total; ties keep the order in which organizations were first
    seen.
    """
    groups: Dict[str, OrganizationSummary] = {}
    for user in users:
        name = read_field(user, organization_field)
        if not isinstance(name, str) or not name:
            continue

        summary = groups.get(name)
        if summary is None:
            summary = groups[name] = OrganizationSummary(name=name)

        summary.users.append(user)
        summary.total += 1
        if bool(read_field(user, frozen_field)):
            summary.frozen += 1
        else:
            summary.active += 1

    return sorted(groups.values(), key=lambda summary: -summary.total)


def search_organizations(summaries: Iterable[OrganizationSummary], term: str) -> List[OrganizationSummary]:
    """Case-insensitive substring match on organization names."""
    if not term:
        return list(summaries)
    term = term.strip().lower()
    return [summary for summary in summaries if term in summary.name.lower()]
