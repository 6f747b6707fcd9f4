"""Application ports (interfaces) for Team Tasks.

Ports define the contracts between the application layer and the
storage, clock, and token-generation collaborators.
"""

from teamtasks.application.ports.invite_token_store import InviteTokenStoreProtocol
from teamtasks.application.ports.task_repository import TaskRepositoryProtocol
from teamtasks.application.ports.team_repository import TeamRepositoryProtocol
from teamtasks.application.ports.time_authority import TimeAuthorityProtocol
from teamtasks.application.ports.token_generator import TokenGeneratorProtocol
from teamtasks.application.ports.transaction import TransactionManagerProtocol
from teamtasks.application.ports.user_repository import UserRepositoryProtocol

__all__: list[str] = [
    "InviteTokenStoreProtocol",
    "TaskRepositoryProtocol",
    "TeamRepositoryProtocol",
    "TimeAuthorityProtocol",
    "TokenGeneratorProtocol",
    "TransactionManagerProtocol",
    "UserRepositoryProtocol",
]
