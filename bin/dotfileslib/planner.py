"""Planning of filesystem actions from reconciled statuses."""

# ============================================================
# Imports
# ============================================================

import logging

from .models import (
    ActionKind,
    LinkStatus,
    Mapping,
    MappingStatus,
    Operation,
    PlannedAction,
)

logger = logging.getLogger(__name__)


# ============================================================
# Planning
# ============================================================

def plan(
    operation: Operation,
    mappings: list[Mapping],
    statuses: list[MappingStatus],
) -> list[PlannedAction]:
    """
    Produce one action per mapping for the requested operation.

    Rules for link:
    - Unlinked -> CreateLink
    - Linked   -> Noop
    - Missing  -> Noop with a warning
    - Conflict -> CreateLink requiring force

    Rules for unlink: Linked -> RemoveLink, everything else -> Noop.
    Status produces no actions.

    Args:
        operation: Requested operation
        mappings: Mappings in store enumeration order
        statuses: Reconciled statuses for those mappings

    Returns:
        Actions in the same order as `mappings`

    Raises:
        ValueError: If a mapping has no status
    """
    if operation == Operation.STATUS:
        return []

    by_target = {status.mapping.target: status for status in statuses}
    actions: list[PlannedAction] = []

    for mapping in mappings:
        try:
            status = by_target[mapping.target]
        except KeyError:
            raise ValueError(f"no status computed for mapping {mapping}") from None

        if operation == Operation.LINK:
            action = plan_link(status)
        else:
            action = plan_unlink(status)

        logger.debug("Planned %s for %s", action.kind.value, mapping)
        actions.append(action)

    return actions


def plan_link(status: MappingStatus) -> PlannedAction:
    """Plan the action that makes one mapping Linked."""
    if status.status == LinkStatus.UNLINKED:
        return build_action(status, ActionKind.CREATE_LINK)

    if status.status == LinkStatus.CONFLICT:
        return build_action(status, ActionKind.CREATE_LINK, requires_force=True, warning=status.detail)

    if status.status == LinkStatus.MISSING:
        return build_action(status, ActionKind.NOOP, warning=f"cannot link, {status.detail}")

    return build_action(status, ActionKind.NOOP)


def plan_unlink(status: MappingStatus) -> PlannedAction:
    """Plan the action that removes one mapping's link."""
    if status.status == LinkStatus.LINKED:
        return build_action(status, ActionKind.REMOVE_LINK)
    return build_action(status, ActionKind.NOOP)


# ============================================================
# Supporting Code
# ============================================================

def build_action(
    status: MappingStatus,
    kind: ActionKind,
    requires_force: bool = False,
    warning: str | None = None,
) -> PlannedAction:
    return PlannedAction(
        mapping=status.mapping,
        kind=kind,
        source_path=status.source_path,
        target_path=status.target_path,
        requires_force=requires_force,
        warning=warning,
    )
