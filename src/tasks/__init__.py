"""
Task management module for pastoral follow-ups and their due-state queue.
"""

from .followup_manager import FollowUpObligation, FollowupManager, extract_followups
from .followup_queue import DueState, FollowupQueue, QueueTab

__all__ = [
    "FollowUpObligation",
    "FollowupManager",
    "extract_followups",
    "DueState",
    "FollowupQueue",
    "QueueTab",
]
