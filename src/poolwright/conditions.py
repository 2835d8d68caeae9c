"""Status-condition helpers with "set if changed" semantics."""

from datetime import datetime, timezone
from enum import Enum

from .schemas.pool import PoolCondition


class UpdateConditionCheck(Enum):
    """When an existing condition with an unchanged status gets rewritten."""

    IF_REASON_OR_MESSAGE_CHANGE = "IfReasonOrMessageChange"
    NEVER = "Never"
    ALWAYS = "Always"


def should_update_condition(
    existing: PoolCondition,
    status: str,
    reason: str,
    message: str,
    check: UpdateConditionCheck,
) -> bool:
    if existing.status != status:
        return True
    if check is UpdateConditionCheck.ALWAYS:
        return True
    if check is UpdateConditionCheck.IF_REASON_OR_MESSAGE_CHANGE:
        return existing.reason != reason or existing.message != message
    return False


def find_condition(
    conditions: list[PoolCondition], condition_type: str
) -> PoolCondition | None:
    return next((c for c in conditions if c.type == condition_type), None)


def set_condition_with_change_check(
    conditions: list[PoolCondition],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
    check: UpdateConditionCheck,
) -> tuple[list[PoolCondition], bool]:
    """
    Returns the new condition list and whether it differs from the input.
    A condition that does not exist yet is only added when its status is True.
    The input list is never mutated.
    """
    now = datetime.now(timezone.utc)
    existing = find_condition(conditions, condition_type)

    if existing is None:
        if status != "True":
            return list(conditions), False
        added = PoolCondition(
            type=condition_type,
            status=status,
            reason=reason,
            message=message,
            last_probe_time=now,
            last_transition_time=now,
        )
        return [*conditions, added], True

    if not should_update_condition(existing, status, reason, message, check):
        return list(conditions), False

    updated = existing.model_copy(
        update={
            "status": status,
            "reason": reason,
            "message": message,
            "last_probe_time": now,
            "last_transition_time": (
                now if existing.status != status else existing.last_transition_time
            ),
        }
    )
    return [updated if c is existing else c for c in conditions], True
