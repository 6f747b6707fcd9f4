"""
Team Tasks - authorization and task-lifecycle core

A team-scoped task-management backend core: invitation tokens that
admit new members without persisting secrets, a membership resolver
that decides what each actor may see and do, and a task state machine
that keeps status, progress, and checklist consistent.

Storage, transport, and credential hashing are external collaborators
reached through the ports in teamtasks.application.ports.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
