"""Pure domain services: task lifecycle and task invariants."""

from teamtasks.domain.services.task_invariants import (
    check_progress,
    check_task_invariants,
    check_title,
)
from teamtasks.domain.services.task_lifecycle import (
    apply_patch,
    apply_status,
    build_todos,
    compute_progress,
    replace_checklist,
    round_half_up,
    status_for_progress,
)

__all__: list[str] = [
    "apply_patch",
    "apply_status",
    "build_todos",
    "check_progress",
    "check_task_invariants",
    "check_title",
    "compute_progress",
    "replace_checklist",
    "round_half_up",
    "status_for_progress",
]
