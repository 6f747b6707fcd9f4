"""Application services for Team Tasks.

This module contains the application services that orchestrate domain
operations over the ports:

- InviteTokenStore: Ephemeral, lock-guarded invitation tokens
- MembershipResolver: Effective teams and reachable users per actor
- AccessPolicy: View/assign/modify/delete/manage predicates
- TaskAssignmentEngine: Assignee and team resolution, shared-team search
- TaskService: Task mutations, queries, and dashboards
- RegistrationService: Validate -> CreateUser -> ResolveTeam -> Commit
- TeamService: Explicit team creation and membership management
- UserManagementService: User creation, profile updates, visibility, deletion
- RetryPolicy: Bounded retries of infrastructure failures
"""

from teamtasks.application.services.access_policy import (
    AccessDecision,
    AccessPolicy,
)
from teamtasks.application.services.invite_token_store import InviteTokenStore
from teamtasks.application.services.membership_resolver import (
    MembershipResolver,
    SharedTeamSelection,
    select_lowest,
)
from teamtasks.application.services.registration_service import (
    RegistrationRequest,
    RegistrationResult,
    RegistrationService,
    RegistrationStep,
)
from teamtasks.application.services.retry_policy import (
    RetryAction,
    RetryDecision,
    RetryPolicy,
    run_with_retry,
)
from teamtasks.application.services.task_assignment import (
    AssignmentResolution,
    TaskAssignmentEngine,
)
from teamtasks.application.services.task_service import TaskDashboard, TaskService
from teamtasks.application.services.team_service import TeamService
from teamtasks.application.services.user_management_service import (
    UserCreateRequest,
    UserManagementService,
    UserProfilePatch,
)

__all__: list[str] = [
    "AccessDecision",
    "AccessPolicy",
    "AssignmentResolution",
    "InviteTokenStore",
    "MembershipResolver",
    "RegistrationRequest",
    "RegistrationResult",
    "RegistrationService",
    "RegistrationStep",
    "RetryAction",
    "RetryDecision",
    "RetryPolicy",
    "SharedTeamSelection",
    "TaskAssignmentEngine",
    "TaskDashboard",
    "TaskService",
    "TeamService",
    "UserCreateRequest",
    "UserManagementService",
    "UserProfilePatch",
    "run_with_retry",
]
