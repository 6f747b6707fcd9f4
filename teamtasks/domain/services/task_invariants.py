"""Cross-entity task invariants, checked at every mutation boundary.

Every entry point that creates or changes a task calls
check_task_invariants() on the final state before saving, so there is
one definition of a legal task:

- progress is an integer in [0, 100];
- title is not blank;
- team_id is None  =>  assignee == creator (personal task);
- team_id is set   =>  the team exists and the assignee is present in it
  (listed member, or the owner).

Note: This is pure domain logic with no infrastructure dependencies.
The caller loads the team and passes it in.
"""

from __future__ import annotations

from teamtasks.domain.errors import (
    AssigneeNotInTeamError,
    InvalidProgressError,
    InvalidTaskFieldError,
    PersonalTaskInvariantError,
    TeamNotFoundError,
)
from teamtasks.domain.models.task import MAX_PROGRESS, MIN_PROGRESS, Task
from teamtasks.domain.models.team import Team


def check_progress(progress: int) -> None:
    """Reject progress outside [0, 100].

    Raises:
        InvalidProgressError: If out of range.
    """
    if isinstance(progress, bool) or not MIN_PROGRESS <= progress <= MAX_PROGRESS:
        raise InvalidProgressError(progress)


def check_title(title: str) -> None:
    """Reject a blank title.

    Raises:
        InvalidTaskFieldError: If the title is empty after stripping.
    """
    if not title or not title.strip():
        raise InvalidTaskFieldError("title", "must not be blank")


def check_task_invariants(task: Task, team: Team | None) -> None:
    """Validate a task state before it is persisted.

    Args:
        task: The state about to be saved.
        team: The loaded team for task.team_id (None for personal tasks,
            or if the team could not be loaded).

    Raises:
        InvalidProgressError: Progress out of range.
        InvalidTaskFieldError: Blank title or blank todo text.
        PersonalTaskInvariantError: Personal task not self-assigned.
        TeamNotFoundError: team_id set but the team is missing.
        AssigneeNotInTeamError: Assignee not present in the team.
    """
    check_title(task.title)
    check_progress(task.progress)

    for todo in task.todos:
        if not todo.text.strip():
            raise InvalidTaskFieldError("todos", "todo text must not be blank")

    if task.team_id is None:
        if task.assigned_to_id != task.created_by_id:
            raise PersonalTaskInvariantError(task.assigned_to_id, task.created_by_id)
        return

    if team is None or team.id != task.team_id:
        raise TeamNotFoundError(task.team_id)

    if not team.includes(task.assigned_to_id):
        raise AssigneeNotInTeamError(task.assigned_to_id, team.id)
