"""Household-wide overspend aggregates, computed on demand"""

from typing import Dict, Iterable
from household_gateway.domain.models import MemberSummary, OverspendSummary, ProjectStatus


def summarize_projects(projects: Iterable) -> OverspendSummary:
    """
    Aggregate a household's projects into totals and per-member breakdowns.

    Pending approval counts projects that require approval and have not been
    approved by anyone yet.
    """
    projects = list(projects)
    by_member: Dict[str, MemberSummary] = {}

    for project in projects:
        member = by_member.setdefault(project.member_id, MemberSummary(member_name=project.member_name))
        member.project_count += 1
        member.total_responsibility += project.responsibility_amount
        member.total_collected += project.total_collected

    return OverspendSummary(
        total_projects=len(projects),
        active_projects=sum(1 for p in projects if p.status == ProjectStatus.ACTIVE),
        pending_approval=sum(1 for p in projects if p.requires_approval and not p.approved_by),
        total_responsibility=sum(p.responsibility_amount for p in projects),
        total_collected=sum(p.total_collected for p in projects),
        by_member=by_member,
    )
