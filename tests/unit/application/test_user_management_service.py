"""Unit tests for UserManagementService."""

from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest

from teamtasks.application.services.user_management_service import (
    UserCreateRequest,
    UserProfilePatch,
)
from teamtasks.bootstrap.container import ServiceContainer
from teamtasks.domain.errors import (
    AdminHasNoTeamError,
    EmailAlreadyRegisteredError,
    RegistrationValidationError,
    TeamManagementForbiddenError,
    UserAccessDeniedError,
    UserCreationForbiddenError,
    UserDeletionForbiddenError,
    UserNotFoundError,
    UserStillOwnsTeamError,
)
from teamtasks.domain.models.task_patch import TaskDraft
from teamtasks.domain.models.user import Actor, UserRole
from tests.helpers.factories import MakeTeam, MakeUser


class TestVisibility:
    @pytest.mark.asyncio
    async def test_admin_sees_members_and_itself(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        await make_user("Stranger")
        await make_team(admin, members=[alice])

        visible = await services.user_management_service.list_visible_users(Actor.of(admin))

        assert {u.id for u in visible} == {admin.id, alice.id}

    @pytest.mark.asyncio
    async def test_member_sees_only_itself(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        bob = await make_user("Bob")
        await make_team(admin, members=[alice, bob])

        visible = await services.user_management_service.list_visible_users(Actor.of(alice))

        assert [u.id for u in visible] == [alice.id]
        with pytest.raises(UserAccessDeniedError):
            await services.user_management_service.get_user(Actor.of(alice), bob.id)
        assert await services.user_management_service.get_user(Actor.of(alice), alice.id) == alice

    @pytest.mark.asyncio
    async def test_team_members_admin_only(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        bob = await make_user("Bob")
        await make_team(admin, members=[alice])
        await make_team(admin, members=[alice, bob])

        members = await services.user_management_service.team_members(Actor.of(admin))

        assert sorted(u.id for u in members) == sorted([alice.id, bob.id])
        with pytest.raises(TeamManagementForbiddenError):
            await services.user_management_service.team_members(Actor.of(alice))


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_delete_member_cascades(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        team = await make_team(admin, members=[alice])
        await services.task_service.create_task(
            Actor.of(admin),
            TaskDraft(title="T", description="", due_date=date(2026, 2, 1), assignee_id=alice.id),
        )

        await services.user_management_service.delete_user(Actor.of(admin), alice.id)

        assert await services.users.get(alice.id) is None
        assert services.storage.tasks == {}
        stored = await services.teams.get(team.id)
        assert stored is not None
        assert not stored.is_member(alice.id)

    @pytest.mark.parametrize(
        ("actor_is_self", "actor_role", "detail"),
        [
            (False, UserRole.MEMBER, "Only admins can delete users"),
            (True, UserRole.ADMIN, "You cannot delete yourself"),
        ],
    )
    @pytest.mark.asyncio
    async def test_deletion_forbidden(
        self,
        services: ServiceContainer,
        make_user: MakeUser,
        actor_is_self: bool,
        actor_role: UserRole,
        detail: str,
    ) -> None:
        actor = await make_user("Actor", role=actor_role)
        target = actor if actor_is_self else await make_user("Target")

        with pytest.raises(UserDeletionForbiddenError) as exc_info:
            await services.user_management_service.delete_user(Actor.of(actor), target.id)

        assert exc_info.value.message == detail

    @pytest.mark.asyncio
    async def test_admin_targets_cannot_be_deleted(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        other_admin = await make_user(role=UserRole.ADMIN)
        await make_team(admin, members=[other_admin])

        with pytest.raises(UserDeletionForbiddenError):
            await services.user_management_service.delete_user(Actor.of(admin), other_admin.id)

    @pytest.mark.asyncio
    async def test_unreachable_and_missing_users(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        stranger = await make_user("Stranger")
        ghost_id = uuid4()
        team = await make_team(admin)
        await services.teams.save(team.with_member(ghost_id, team.updated_at))

        with pytest.raises(UserAccessDeniedError):
            await services.user_management_service.delete_user(Actor.of(admin), stranger.id)
        with pytest.raises(UserNotFoundError):
            await services.user_management_service.delete_user(Actor.of(admin), ghost_id)

    @pytest.mark.asyncio
    async def test_team_owner_cannot_be_deleted(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        await make_team(admin, members=[alice])
        # An Admin demoted after creating a team still owns it
        await make_team(alice)

        with pytest.raises(UserStillOwnsTeamError):
            await services.user_management_service.delete_user(Actor.of(admin), alice.id)

        assert await services.users.get(alice.id) == alice


def _create_request(
    email: str = "new.hire@example.com", role: UserRole = UserRole.MEMBER
) -> UserCreateRequest:
    return UserCreateRequest(
        name="New Hire", email=email, credential_hash="hashed-secret", role=role
    )


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_admin_creates_member_in_lowest_owned_team(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        first = await make_team(admin, name="First")
        second = await make_team(admin, name="Second")

        user = await services.user_management_service.create_user(
            Actor.of(admin), _create_request(email=" New.Hire@Example.com ")
        )

        assert user.role == UserRole.MEMBER
        assert user.email == "new.hire@example.com"
        assert services.storage.teams[first.id].is_member(user.id)
        assert not services.storage.teams[second.id].is_member(user.id)
        assert services.transactions.commits == 1

    @pytest.mark.asyncio
    async def test_requested_role_is_kept(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        await make_team(admin)

        user = await services.user_management_service.create_user(
            Actor.of(admin), _create_request(role=UserRole.ADMIN)
        )

        assert user.is_admin

    @pytest.mark.asyncio
    async def test_member_cannot_create_users(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        await make_team(admin, members=[alice])

        with pytest.raises(UserCreationForbiddenError):
            await services.user_management_service.create_user(
                Actor.of(alice), _create_request()
            )

        assert await services.users.get_by_email("new.hire@example.com") is None

    @pytest.mark.asyncio
    async def test_duplicate_email_is_a_conflict(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        await make_team(admin)

        with pytest.raises(EmailAlreadyRegisteredError):
            await services.user_management_service.create_user(
                Actor.of(admin), _create_request(email=alice.email.upper())
            )

    @pytest.mark.asyncio
    async def test_admin_without_team(
        self, services: ServiceContainer, make_user: MakeUser
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)

        with pytest.raises(AdminHasNoTeamError):
            await services.user_management_service.create_user(
                Actor.of(admin), _create_request()
            )

        assert await services.users.get_by_email("new.hire@example.com") is None

    @pytest.mark.asyncio
    async def test_missing_fields_listed(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        await make_team(admin)

        with pytest.raises(RegistrationValidationError) as exc_info:
            await services.user_management_service.create_user(
                Actor.of(admin), UserCreateRequest(name=" ", email="", credential_hash="")
            )

        assert exc_info.value.missing == ["name", "email", "password"]


class TestUpdateUser:
    @pytest.mark.asyncio
    async def test_member_updates_own_profile(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        await make_team(admin, members=[alice])

        updated = await services.user_management_service.update_user(
            Actor.of(alice), alice.id, UserProfilePatch(name=" Alicia ", email="ALICIA@example.com")
        )

        assert updated.name == "Alicia"
        assert updated.email == "alicia@example.com"
        assert updated.role == UserRole.MEMBER
        assert updated.credential_hash == alice.credential_hash
        assert services.storage.users[alice.id] == updated

    @pytest.mark.asyncio
    async def test_admin_updates_team_member(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        await make_team(admin, members=[alice])

        updated = await services.user_management_service.update_user(
            Actor.of(admin), alice.id, UserProfilePatch(credential_hash="rehashed")
        )

        assert updated.credential_hash == "rehashed"
        assert updated.name == alice.name

    @pytest.mark.asyncio
    async def test_email_of_another_user_is_a_conflict(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        await make_team(admin, members=[alice])

        with pytest.raises(EmailAlreadyRegisteredError):
            await services.user_management_service.update_user(
                Actor.of(alice), alice.id, UserProfilePatch(email=admin.email)
            )

        assert services.storage.users[alice.id] == alice

    @pytest.mark.asyncio
    async def test_keeping_own_email_is_allowed(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        await make_team(admin)

        updated = await services.user_management_service.update_user(
            Actor.of(admin), admin.id, UserProfilePatch(email=admin.email)
        )

        assert updated == admin

    @pytest.mark.asyncio
    async def test_member_cannot_update_teammate(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        alice = await make_user("Alice")
        bob = await make_user("Bob")
        await make_team(admin, members=[alice, bob])

        with pytest.raises(UserAccessDeniedError):
            await services.user_management_service.update_user(
                Actor.of(alice), bob.id, UserProfilePatch(name="Robert")
            )

    @pytest.mark.asyncio
    async def test_blank_name_rejected(
        self, services: ServiceContainer, make_user: MakeUser, make_team: MakeTeam
    ) -> None:
        admin = await make_user(role=UserRole.ADMIN)
        await make_team(admin)

        with pytest.raises(RegistrationValidationError) as exc_info:
            await services.user_management_service.update_user(
                Actor.of(admin), admin.id, UserProfilePatch(name="  ")
            )

        assert exc_info.value.missing == ["name"]
