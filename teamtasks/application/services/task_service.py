"""Task service: the task mutation and query entry points.

Every mutation runs load -> authorize -> resolve -> mutate -> validate ->
save inside one TransactionManagerProtocol.run() call, so a failure at
any step leaves storage untouched. Infrastructure failures are retried
by the RetryPolicy around the whole transaction.

Mutations and their lifecycle paths:
    create_task        -> build from draft, progress from todos unless given
    update_task        -> apply_patch (+ assignment resolution)
    set_task_status    -> apply_status
    replace_checklist  -> replace_checklist
    delete_task        -> delete (todos go with the task)

Every resulting state passes check_task_invariants() before it is saved.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from typing import TypeVar
from uuid import UUID

from structlog import get_logger

from teamtasks.application.ports.task_repository import TaskRepositoryProtocol
from teamtasks.application.ports.team_repository import TeamRepositoryProtocol
from teamtasks.application.ports.time_authority import TimeAuthorityProtocol
from teamtasks.application.ports.transaction import TransactionManagerProtocol
from teamtasks.application.services.access_policy import AccessPolicy
from teamtasks.application.services.membership_resolver import MembershipResolver
from teamtasks.application.services.retry_policy import RetryPolicy
from teamtasks.application.services.task_assignment import TaskAssignmentEngine
from teamtasks.domain.errors import (
    TaskAccessDeniedError,
    TaskNotFoundError,
    TeamAccessDeniedError,
    TeamNotFoundError,
    TeamTasksError,
)
from teamtasks.domain.models.task import Task, TaskStatus, Todo
from teamtasks.domain.models.task_patch import ChecklistItem, TaskDraft, TaskPatch
from teamtasks.domain.models.user import Actor
from teamtasks.domain.services.task_invariants import check_task_invariants
from teamtasks.domain.services.task_lifecycle import (
    apply_patch,
    apply_status,
    compute_progress,
)
from teamtasks.domain.services.task_lifecycle import (
    replace_checklist as replace_checklist_state,
)

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class TaskDashboard:
    """Task counts over the tasks an actor can list.

    Attributes:
        total: Number of tasks.
        pending: Tasks in PENDING.
        in_progress: Tasks in IN_PROGRESS.
        completed: Tasks in COMPLETED.
        team_count: Teams the Admin owns (None for Members).
        member_count: Distinct members of those teams (None for Members).
    """

    total: int
    pending: int
    in_progress: int
    completed: int
    team_count: int | None = None
    member_count: int | None = None


def _newest_first(tasks: Iterable[Task]) -> list[Task]:
    unique = {task.id: task for task in tasks}
    return sorted(unique.values(), key=lambda t: (t.created_at, t.id), reverse=True)


class TaskService:
    """Creates, updates, deletes and lists tasks on behalf of an actor.

    Example:
        >>> service = TaskService(task_repo, team_repo, policy, engine,
        ...                       resolver, transactions, time_authority)
        >>> task = await service.create_task(actor, draft)
    """

    def __init__(
        self,
        task_repo: TaskRepositoryProtocol,
        team_repo: TeamRepositoryProtocol,
        access_policy: AccessPolicy,
        assignment_engine: TaskAssignmentEngine,
        resolver: MembershipResolver,
        transactions: TransactionManagerProtocol,
        time_authority: TimeAuthorityProtocol,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            task_repo: Task storage.
            team_repo: Team storage.
            access_policy: Authorization predicates.
            assignment_engine: Assignee and team resolution.
            resolver: Membership resolver for listing scopes.
            transactions: Transaction boundary for mutations.
            time_authority: Clock for created_at/updated_at.
            retry_policy: Retry policy for infrastructure failures.
        """
        self._tasks = task_repo
        self._teams = team_repo
        self._policy = access_policy
        self._engine = assignment_engine
        self._resolver = resolver
        self._transactions = transactions
        self._time = time_authority
        self._retry = retry_policy or RetryPolicy()

    async def _in_transaction(self, work: Callable[[], Awaitable[T]]) -> T:
        return await self._retry.run(lambda: self._transactions.run(work))

    async def _load(self, task_id: UUID) -> Task:
        task = await self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def _load_modifiable(self, actor: Actor, task_id: UUID) -> Task:
        task = await self._load(task_id)
        decision = await self._policy.decide_view_task(actor, task)
        if not decision:
            self._policy.log_denial(actor, "modify_task", decision)
            raise TaskAccessDeniedError(task_id, actor.id, action="modify")
        return task

    async def _validate_and_save(self, task: Task) -> Task:
        team = await self._teams.get(task.team_id) if task.team_id is not None else None
        check_task_invariants(task, team)
        await self._tasks.save(task)
        return task

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_task(self, actor: Actor, draft: TaskDraft) -> Task:
        """Create a task for the actor or, for an Admin, a team member.

        Args:
            actor: The creating actor.
            draft: The creation request.

        Returns:
            The saved task.

        Raises:
            TeamTasksError: Any assignment or validation failure.
        """
        log = logger.bind(actor_id=str(actor.id), operation="create_task")

        async def work() -> Task:
            resolution = await self._engine.resolve_for_create(
                actor, draft.assignee_id, draft.team_id
            )
            now = self._time.utcnow()
            todos = tuple(Todo(text=text.strip()) for text in draft.todos)
            task = Task(
                title=draft.title.strip() if draft.title else draft.title,
                description=draft.description,
                due_date=draft.due_date,
                assigned_to_id=resolution.assignee_id,
                created_by_id=actor.id,
                team_id=resolution.team_id,
                priority=draft.priority,
                status=draft.status,
                progress=draft.progress if draft.progress is not None else compute_progress(todos),
                todos=todos,
                created_at=now,
                updated_at=now,
            )
            return await self._validate_and_save(task)

        try:
            task = await self._in_transaction(work)
        except TeamTasksError as exc:
            log.warning("task_create_rejected", error=type(exc).__name__, **exc.context())
            raise

        log.info(
            "task_created",
            task_id=str(task.id),
            assignee_id=str(task.assigned_to_id),
            team_id=str(task.team_id) if task.team_id else None,
        )
        return task

    async def update_task(self, actor: Actor, task_id: UUID, patch: TaskPatch) -> Task:
        """Apply a presence-flagged update.

        Args:
            actor: The updating actor.
            task_id: The task to update.
            patch: Fields to change.

        Returns:
            The saved task.
        """
        log = logger.bind(actor_id=str(actor.id), task_id=str(task_id), operation="update_task")

        async def work() -> Task:
            task = await self._load_modifiable(actor, task_id)
            resolution = await self._engine.resolve_for_update(actor, task, patch)
            updated = apply_patch(task, patch, self._time.utcnow())
            updated = replace(
                updated,
                assigned_to_id=resolution.assignee_id,
                team_id=resolution.team_id,
            )
            return await self._validate_and_save(updated)

        try:
            task = await self._in_transaction(work)
        except TeamTasksError as exc:
            log.warning("task_update_rejected", error=type(exc).__name__, **exc.context())
            raise

        log.info("task_updated", fields=sorted(patch.provided()))
        return task

    async def set_task_status(self, actor: Actor, task_id: UUID, status: TaskStatus) -> Task:
        """Write the status directly, with its todo and progress side effects."""
        log = logger.bind(actor_id=str(actor.id), task_id=str(task_id), operation="set_status")

        async def work() -> Task:
            task = await self._load_modifiable(actor, task_id)
            return await self._validate_and_save(apply_status(task, status, self._time.utcnow()))

        try:
            task = await self._in_transaction(work)
        except TeamTasksError as exc:
            log.warning("task_status_rejected", error=type(exc).__name__, **exc.context())
            raise

        log.info("task_status_set", status=task.status.value, progress=task.progress)
        return task

    async def replace_checklist(
        self,
        actor: Actor,
        task_id: UUID,
        items: Sequence[ChecklistItem],
    ) -> Task:
        """Replace the whole checklist; progress and status follow from it."""
        log = logger.bind(
            actor_id=str(actor.id), task_id=str(task_id), operation="replace_checklist"
        )

        async def work() -> Task:
            task = await self._load_modifiable(actor, task_id)
            updated = replace_checklist_state(task, items, self._time.utcnow())
            return await self._validate_and_save(updated)

        try:
            task = await self._in_transaction(work)
        except TeamTasksError as exc:
            log.warning("checklist_replace_rejected", error=type(exc).__name__, **exc.context())
            raise

        log.info(
            "checklist_replaced",
            todo_count=len(task.todos),
            progress=task.progress,
            status=task.status.value,
        )
        return task

    async def delete_task(self, actor: Actor, task_id: UUID) -> None:
        """Delete a task and its checklist.

        Raises:
            TaskNotFoundError: No such task.
            TaskAccessDeniedError: The actor cannot see the task, or is
                neither an Admin nor its creator.
        """
        log = logger.bind(actor_id=str(actor.id), task_id=str(task_id), operation="delete_task")

        async def work() -> None:
            task = await self._load(task_id)
            view = await self._policy.decide_view_task(actor, task)
            if not view:
                self._policy.log_denial(actor, "delete_task", view)
                raise TaskAccessDeniedError(task_id, actor.id, action="view")
            decision = await self._policy.decide_delete_task(actor, task)
            if not decision:
                self._policy.log_denial(actor, "delete_task", decision)
                raise TaskAccessDeniedError(task_id, actor.id, action="delete")
            await self._tasks.delete(task_id)

        try:
            await self._in_transaction(work)
        except TeamTasksError as exc:
            log.warning("task_delete_rejected", error=type(exc).__name__, **exc.context())
            raise

        log.info("task_deleted")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_task(self, actor: Actor, task_id: UUID) -> Task:
        """Load a task the actor may view.

        Raises:
            TaskNotFoundError: No such task.
            TaskAccessDeniedError: The actor may not view it.
        """
        task = await self._retry.run(lambda: self._load(task_id))
        decision = await self._policy.decide_view_task(actor, task)
        if not decision:
            self._policy.log_denial(actor, "view_task", decision)
            raise TaskAccessDeniedError(task_id, actor.id)
        return task

    async def _listable(self, actor: Actor) -> list[Task]:
        if actor.is_admin:
            reachable = await self._resolver.users_reachable_by(actor)
            candidates = [
                *await self._tasks.list_assigned_to(reachable | {actor.id}),
                *await self._tasks.list_personal_created_by(actor.id),
            ]
        else:
            candidates = await self._tasks.list_assigned_to([actor.id])

        visible = [task for task in candidates if await self._policy.can_view_task(actor, task)]
        return _newest_first(visible)

    async def list_tasks(self, actor: Actor) -> list[Task]:
        """Tasks the actor can see, newest first.

        An Admin sees tasks assigned to members of its teams (where it
        owns the task's team) and its own tasks. A Member sees the tasks
        assigned to it.
        """
        return await self._retry.run(lambda: self._listable(actor))

    async def list_team_tasks(self, actor: Actor, team_id: UUID) -> list[Task]:
        """Tasks of one team, for its owner and members.

        Raises:
            TeamNotFoundError: No such team.
            TeamAccessDeniedError: The actor is not in the team.
        """
        team = await self._teams.get(team_id)
        if team is None:
            raise TeamNotFoundError(team_id)
        decision = self._policy.decide_view_team(actor, team)
        if not decision:
            self._policy.log_denial(actor, "view_team_tasks", decision)
            raise TeamAccessDeniedError(actor.id, team_id)
        return await self._retry.run(lambda: self._tasks.list_by_team(team_id))

    async def dashboard(self, actor: Actor) -> TaskDashboard:
        """Count the actor's listable tasks by status."""
        tasks = await self.list_tasks(actor)
        by_status = {status: 0 for status in TaskStatus}
        for task in tasks:
            by_status[task.status] += 1

        team_count = None
        member_count = None
        if actor.is_admin:
            owned = await self._resolver.teams_owned(actor.id)
            team_count = len(owned)
            member_count = len({member for team in owned for member in team.member_ids})

        return TaskDashboard(
            total=len(tasks),
            pending=by_status[TaskStatus.PENDING],
            in_progress=by_status[TaskStatus.IN_PROGRESS],
            completed=by_status[TaskStatus.COMPLETED],
            team_count=team_count,
            member_count=member_count,
        )
