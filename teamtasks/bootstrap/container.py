"""Bootstrap wiring for the service container.

build_services() assembles every service over one shared set of
repositories. Without explicit collaborators it wires the in-memory
stubs, the system clock, and the secure token generator.

The process-wide container is created lazily by get_container(), which
also configures logging once, and dropped by reset_container() (for
testing).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from teamtasks.application.ports.time_authority import TimeAuthorityProtocol
from teamtasks.application.ports.token_generator import TokenGeneratorProtocol
from teamtasks.application.services.access_policy import AccessPolicy
from teamtasks.application.services.invite_token_store import InviteTokenStore
from teamtasks.application.services.membership_resolver import MembershipResolver
from teamtasks.application.services.registration_service import RegistrationService
from teamtasks.application.services.retry_policy import RetryPolicy
from teamtasks.application.services.task_assignment import TaskAssignmentEngine
from teamtasks.application.services.task_service import TaskService
from teamtasks.application.services.team_service import TeamService
from teamtasks.application.services.user_management_service import (
    UserManagementService,
)
from teamtasks.bootstrap.logging import configure_logging
from teamtasks.config.core_config import InviteTokenConfig, RetryConfig
from teamtasks.infrastructure.adapters import SecureTokenGenerator, SystemTimeAuthority
from teamtasks.infrastructure.stubs import (
    InMemoryStorage,
    InMemoryTransactionManager,
    TaskRepositoryStub,
    TeamRepositoryStub,
    UserRepositoryStub,
)
from teamtasks.workers.invite_token_sweeper import InviteTokenSweeper


@dataclass
class ServiceContainer:
    """Every service and shared collaborator of one wiring."""

    storage: InMemoryStorage
    users: UserRepositoryStub
    teams: TeamRepositoryStub
    tasks: TaskRepositoryStub
    transactions: InMemoryTransactionManager
    time_authority: TimeAuthorityProtocol
    resolver: MembershipResolver
    access_policy: AccessPolicy
    assignment_engine: TaskAssignmentEngine
    invite_store: InviteTokenStore
    task_service: TaskService
    registration_service: RegistrationService
    team_service: TeamService
    user_management_service: UserManagementService
    invite_sweeper: InviteTokenSweeper


def build_services(
    *,
    time_authority: TimeAuthorityProtocol | None = None,
    token_generator: TokenGeneratorProtocol | None = None,
    invite_config: InviteTokenConfig | None = None,
    retry_config: RetryConfig | None = None,
    storage: InMemoryStorage | None = None,
) -> ServiceContainer:
    """Wire all services.

    Args:
        time_authority: Clock (default: SystemTimeAuthority).
        token_generator: Token source (default: SecureTokenGenerator
            sized by invite_config.token_bytes).
        invite_config: Invite settings (default: from environment).
        retry_config: Retry settings (default: from environment).
        storage: Shared tables (default: a fresh InMemoryStorage).

    Returns:
        The assembled container.
    """
    invite_config = invite_config or InviteTokenConfig.from_environment()
    retry_config = retry_config or RetryConfig.from_environment()
    clock = time_authority or SystemTimeAuthority()
    generator = token_generator or SecureTokenGenerator(invite_config.token_bytes)
    storage = storage if storage is not None else InMemoryStorage()

    users = UserRepositoryStub(storage)
    teams = TeamRepositoryStub(storage)
    tasks = TaskRepositoryStub(storage)
    transactions = InMemoryTransactionManager(storage)

    resolver = MembershipResolver(teams)
    policy = AccessPolicy(resolver, teams)
    engine = TaskAssignmentEngine(resolver, users, teams)
    invite_store = InviteTokenStore(users, teams, resolver, clock, generator, invite_config)

    return ServiceContainer(
        storage=storage,
        users=users,
        teams=teams,
        tasks=tasks,
        transactions=transactions,
        time_authority=clock,
        resolver=resolver,
        access_policy=policy,
        assignment_engine=engine,
        invite_store=invite_store,
        task_service=TaskService(
            tasks,
            teams,
            policy,
            engine,
            resolver,
            transactions,
            clock,
            RetryPolicy(retry_config),
        ),
        registration_service=RegistrationService(
            users, teams, invite_store, transactions, clock
        ),
        team_service=TeamService(
            teams, users, tasks, policy, resolver, transactions, clock
        ),
        user_management_service=UserManagementService(
            users, teams, tasks, resolver, transactions, clock
        ),
        invite_sweeper=InviteTokenSweeper(
            store=invite_store, time_authority=clock, config=invite_config
        ),
    )


# Singleton container for the process
_container: ServiceContainer | None = None
_container_lock: asyncio.Lock | None = None


def _get_container_lock() -> asyncio.Lock:
    """Get or create the container lock for the current event loop.

    The lock is created lazily so importing this module does not bind it
    to an event loop.
    """
    global _container_lock
    if _container_lock is None:
        _container_lock = asyncio.Lock()
    return _container_lock


async def get_container() -> ServiceContainer:
    """Get the process-wide container, building it on first use.

    Building the container also configures logging for the process.
    """
    global _container
    if _container is None:
        async with _get_container_lock():
            if _container is None:
                configure_logging()
                _container = build_services()
    return _container


def set_container(container: ServiceContainer) -> None:
    """Install a custom container (for testing)."""
    global _container
    _container = container


def reset_container() -> None:
    """Drop the container and its lock (for testing)."""
    global _container, _container_lock
    _container = None
    _container_lock = None
