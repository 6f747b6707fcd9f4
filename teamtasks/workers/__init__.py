"""Background workers for Team Tasks.

Workers:
- InviteTokenSweeper: Periodically removes expired invite tokens
"""

from teamtasks.workers.invite_token_sweeper import InviteTokenSweeper

__all__: list[str] = ["InviteTokenSweeper"]
