def group_by_milestone(deliverables: list) -> dict[str, list]:
    """Group deliverables by milestone name, keeping first-seen milestone order."""
    groups: dict[str, list] = {}
    for deliverable in deliverables:
        groups.setdefault(deliverable.milestone_name, []).append(deliverable)
    return groups
