"""Partition statement charges by the member who incurred them"""

from typing import Any, Dict, Iterable, List, Mapping


def group_charges_by_member(charges: Iterable[Mapping[str, Any]]) -> Dict[str, List[Mapping[str, Any]]]:
    """
    Group raw statement charges by member id, keeping statement order within each group.

    Charges without a member id cannot be attributed and are left out.
    Amounts are not inspected here; malformed amounts surface when the
    member's charges are totalled.
    """
    charges_by_member: Dict[str, List[Mapping[str, Any]]] = {}
    for charge in charges:
        member_id = charge.get("member_id")
        if not member_id:
            continue
        charges_by_member.setdefault(member_id, []).append(charge)

    return charges_by_member
