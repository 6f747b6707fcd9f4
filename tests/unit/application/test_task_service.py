"""Unit tests for TaskService.

Tests run against the in-memory stubs wired by build_services() and
cover the mutation paths, listing scopes, the dashboard, transactional
rollback and the retry of infrastructure failures.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any
from uuid import uuid4

import pytest

from teamtasks.bootstrap.container import ServiceContainer
from teamtasks.domain.errors import (
    AssigneeNotInTeamError,
    InvalidProgressError,
    InvalidTaskFieldError,
    NoSharedTeamError,
    PersonalTaskReassignmentError,
    StorageTimeoutError,
    StorageUnavailableError,
    TaskAccessDeniedError,
    TaskNotFoundError,
    TeamAccessDeniedError,
    TeamNotFoundError,
)
from teamtasks.domain.models.task import TaskPriority, TaskStatus
from teamtasks.domain.models.task_patch import ChecklistItem, TaskDraft, TaskPatch
from teamtasks.domain.models.user import Actor, UserRole
from tests.helpers import FakeTimeAuthority
from tests.helpers.factories import MakeTeam, MakeUser

DUE = date(2026, 2, 1)


def _draft(title: str = "Write report", **kwargs: Any) -> TaskDraft:
    return TaskDraft(title=title, description="Quarterly numbers", due_date=DUE, **kwargs)


class TestCreateTask:
    @pytest.mark.asyncio
    async def test_personal_task_defaults(
        self,
        services: ServiceContainer,
        make_user: MakeUser,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        alice = await make_user("Alice")

        task = await services.task_service.create_task(Actor.of(alice), _draft("  Trim me  "))

        assert task.title == "Trim me"
        assert task.assigned_to_id == alice.id
        assert task.created_by_id == alice.id
        assert task.team_id is None
        assert task.status == TaskStatus.PENDING
        assert task.priority == TaskPriority.MEDIUM
        assert task.progress == 0
        assert task.created_at == fake_time_authority.utcnow()
        assert await services.tasks.get(task.id) == task

    @pytest.mark.asyncio
    async def test_progress_derived_from_todos_and_status_kept(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        alice = await make_user("Alice")

        task = await services.task_service.create_task(
            Actor.of(alice), _draft(todos=(" one ", "two"))
        )

        assert [t.text for t in task.todos] == ["one", "two"]
        assert not any(t.completed for t in task.todos)
        assert task.progress == 0
        assert task.status == TaskStatus.PENDING

    @pytest.mark.asyncio
    async def test_admin_creates_for_member_in_shared_team(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        team = await make_team(admin, members=[alice])

        task = await services.task_service.create_task(
            Actor.of(admin), _draft(assignee_id=alice.id)
        )

        assert task.assigned_to_id == alice.id
        assert task.created_by_id == admin.id
        assert task.team_id == team.id

    @pytest.mark.asyncio
    async def test_no_shared_team_rejected_and_nothing_saved(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        stranger = await make_user("Stranger")

        with pytest.raises(NoSharedTeamError):
            await services.task_service.create_task(
                Actor.of(admin), _draft(assignee_id=stranger.id)
            )

        assert services.storage.tasks == {}

    @pytest.mark.asyncio
    async def test_invalid_fields_rejected(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        alice = await make_user("Alice")

        with pytest.raises(InvalidTaskFieldError):
            await services.task_service.create_task(Actor.of(alice), _draft("   "))
        with pytest.raises(InvalidProgressError):
            await services.task_service.create_task(Actor.of(alice), _draft(progress=101))


class TestLifecycleThroughService:
    @pytest.mark.asyncio
    async def test_checklist_drives_progress_and_status(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        alice = await make_user("Alice")
        actor = Actor.of(alice)
        task = await services.task_service.create_task(actor, _draft())

        partial = await services.task_service.replace_checklist(
            actor,
            task.id,
            [ChecklistItem("a", completed=True), ChecklistItem("b"), ChecklistItem("c")],
        )

        assert partial.progress == 33
        assert partial.status == TaskStatus.IN_PROGRESS

        done = await services.task_service.replace_checklist(
            actor,
            task.id,
            [ChecklistItem(text, completed=True) for text in ("a", "b", "c")],
        )

        assert done.progress == 100
        assert done.status == TaskStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_completed_then_pending_resets_checklist(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        alice = await make_user("Alice")
        actor = Actor.of(alice)
        task = await services.task_service.create_task(actor, _draft(todos=("a", "b")))

        completed = await services.task_service.set_task_status(
            actor, task.id, TaskStatus.COMPLETED
        )

        assert completed.progress == 100
        assert all(t.completed for t in completed.todos)

        reopened = await services.task_service.set_task_status(
            actor, task.id, TaskStatus.PENDING
        )

        assert reopened.status == TaskStatus.PENDING
        assert reopened.progress == 0
        assert not any(t.completed for t in reopened.todos)

    @pytest.mark.asyncio
    async def test_explicit_progress_does_not_touch_status(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        alice = await make_user("Alice")
        actor = Actor.of(alice)
        task = await services.task_service.create_task(actor, _draft())

        updated = await services.task_service.update_task(actor, task.id, TaskPatch(progress=50))

        assert updated.progress == 50
        assert updated.status == TaskStatus.PENDING

    @pytest.mark.asyncio
    async def test_update_changes_content_fields(
        self,
        services: ServiceContainer,
        make_user: MakeUser,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        alice = await make_user("Alice")
        actor = Actor.of(alice)
        task = await services.task_service.create_task(actor, _draft())
        fake_time_authority.advance(seconds=30)

        updated = await services.task_service.update_task(
            actor,
            task.id,
            TaskPatch(title="Renamed", priority=TaskPriority.HIGH, due_date=DUE + timedelta(1)),
        )

        assert updated.title == "Renamed"
        assert updated.priority == TaskPriority.HIGH
        assert updated.due_date == DUE + timedelta(days=1)
        assert updated.description == task.description
        assert updated.updated_at == task.created_at + timedelta(seconds=30)


class TestUpdateAuthorization:
    @pytest.mark.asyncio
    async def test_admin_cannot_reassign_personal_task(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        await make_team(admin, members=[alice])
        task = await services.task_service.create_task(Actor.of(admin), _draft())

        with pytest.raises(PersonalTaskReassignmentError):
            await services.task_service.update_task(
                Actor.of(admin), task.id, TaskPatch(assignee_id=alice.id)
            )

        assert services.storage.tasks[task.id].assigned_to_id == admin.id

    @pytest.mark.asyncio
    async def test_outsider_cannot_modify(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        bob = await make_user("Bob")
        await make_team(admin, members=[alice, bob])
        task = await services.task_service.create_task(
            Actor.of(admin), _draft(assignee_id=alice.id)
        )

        with pytest.raises(TaskAccessDeniedError):
            await services.task_service.set_task_status(
                Actor.of(bob), task.id, TaskStatus.COMPLETED
            )

    @pytest.mark.asyncio
    async def test_reassign_to_non_member_rejected(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        stranger = await make_user("Stranger")
        await make_team(admin, members=[alice])
        task = await services.task_service.create_task(
            Actor.of(admin), _draft(assignee_id=alice.id)
        )

        with pytest.raises(AssigneeNotInTeamError):
            await services.task_service.update_task(
                Actor.of(admin), task.id, TaskPatch(assignee_id=stranger.id)
            )

    @pytest.mark.asyncio
    async def test_missing_task(self, services: ServiceContainer, make_user: MakeUser) -> None:
        alice = await make_user("Alice")

        with pytest.raises(TaskNotFoundError):
            await services.task_service.update_task(Actor.of(alice), uuid4(), TaskPatch())


class TestDeleteTask:
    @pytest.mark.asyncio
    async def test_assignee_cannot_delete_admin_created_task(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        await make_team(admin, members=[alice])
        task = await services.task_service.create_task(
            Actor.of(admin), _draft(assignee_id=alice.id)
        )

        with pytest.raises(TaskAccessDeniedError) as exc_info:
            await services.task_service.delete_task(Actor.of(alice), task.id)

        assert exc_info.value.action == "delete"
        await services.task_service.delete_task(Actor.of(admin), task.id)
        assert await services.tasks.get(task.id) is None

    @pytest.mark.asyncio
    async def test_creator_deletes_personal_task(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        alice = await make_user("Alice")
        task = await services.task_service.create_task(Actor.of(alice), _draft(todos=("x",)))

        await services.task_service.delete_task(Actor.of(alice), task.id)

        assert services.storage.tasks == {}

    @pytest.mark.asyncio
    async def test_invisible_task_reports_view_denial(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        alice = await make_user("Alice")
        bob = await make_user("Bob")
        task = await services.task_service.create_task(Actor.of(alice), _draft())

        with pytest.raises(TaskAccessDeniedError) as exc_info:
            await services.task_service.delete_task(Actor.of(bob), task.id)

        assert exc_info.value.action == "view"


class TestQueries:
    @pytest.mark.asyncio
    async def test_get_task_requires_view(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        alice = await make_user("Alice")
        bob = await make_user("Bob")
        task = await services.task_service.create_task(Actor.of(alice), _draft())

        assert await services.task_service.get_task(Actor.of(alice), task.id) == task
        with pytest.raises(TaskAccessDeniedError):
            await services.task_service.get_task(Actor.of(bob), task.id)

    @pytest.mark.asyncio
    async def test_list_scopes_newest_first(
        self,
        services: ServiceContainer,
        make_user: MakeUser,
        make_team: MakeTeam,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        bob = await make_user("Bob")
        await make_team(admin, members=[alice])
        admin_actor = Actor.of(admin)
        own = await services.task_service.create_task(admin_actor, _draft("Own"))
        fake_time_authority.advance(seconds=1)
        for_alice = await services.task_service.create_task(
            admin_actor, _draft("Alice's", assignee_id=alice.id)
        )
        fake_time_authority.advance(seconds=1)
        alice_personal = await services.task_service.create_task(
            Actor.of(alice), _draft("Alice private")
        )
        await services.task_service.create_task(Actor.of(bob), _draft("Bob's"))

        admin_view = await services.task_service.list_tasks(admin_actor)
        alice_view = await services.task_service.list_tasks(Actor.of(alice))

        assert [t.id for t in admin_view] == [for_alice.id, own.id]
        assert [t.id for t in alice_view] == [alice_personal.id, for_alice.id]

    @pytest.mark.asyncio
    async def test_list_team_tasks(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        stranger = await make_user("Stranger")
        team = await make_team(admin, members=[alice])
        task = await services.task_service.create_task(
            Actor.of(admin), _draft(assignee_id=alice.id)
        )

        assert await services.task_service.list_team_tasks(Actor.of(alice), team.id) == [task]
        with pytest.raises(TeamAccessDeniedError):
            await services.task_service.list_team_tasks(Actor.of(stranger), team.id)
        with pytest.raises(TeamNotFoundError):
            await services.task_service.list_team_tasks(Actor.of(admin), uuid4())

    @pytest.mark.asyncio
    async def test_dashboard_counts(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        bob = await make_user("Bob")
        await make_team(admin, members=[alice, bob])
        admin_actor = Actor.of(admin)
        first = await services.task_service.create_task(
            admin_actor, _draft(assignee_id=alice.id)
        )
        await services.task_service.create_task(admin_actor, _draft(assignee_id=bob.id))
        await services.task_service.set_task_status(admin_actor, first.id, TaskStatus.COMPLETED)

        admin_board = await services.task_service.dashboard(admin_actor)
        alice_board = await services.task_service.dashboard(Actor.of(alice))

        assert admin_board.total == 2
        assert admin_board.completed == 1
        assert admin_board.pending == 1
        assert admin_board.team_count == 1
        assert admin_board.member_count == 2
        assert alice_board.total == 1
        assert alice_board.team_count is None


class TestTransactions:
    @pytest.mark.asyncio
    async def test_failed_save_rolls_back(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        alice = await make_user("Alice")
        actor = Actor.of(alice)
        task = await services.task_service.create_task(actor, _draft())
        services.storage.fail_next("tasks.save", ValueError("disk on fire"))

        with pytest.raises(ValueError):
            await services.task_service.update_task(actor, task.id, TaskPatch(title="New"))

        assert services.storage.tasks[task.id].title == "Write report"
        assert services.transactions.rollbacks == 1

    @pytest.mark.asyncio
    async def test_infrastructure_failure_is_retried(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        alice = await make_user("Alice")
        services.storage.fail_next("tasks.save", StorageTimeoutError("tasks.save", 1.0))

        task = await services.task_service.create_task(Actor.of(alice), _draft())

        assert await services.tasks.get(task.id) == task
        assert services.transactions.rollbacks == 1
        assert services.transactions.commits == 1

    @pytest.mark.asyncio
    async def test_retries_give_up_with_original_error(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        alice = await make_user("Alice")
        for _ in range(3):
            services.storage.fail_next("tasks.save", StorageUnavailableError("tasks.save"))

        with pytest.raises(StorageUnavailableError):
            await services.task_service.create_task(Actor.of(alice), _draft())

        assert services.storage.tasks == {}
        assert services.transactions.rollbacks == 3
