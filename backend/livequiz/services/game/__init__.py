"""Game domain services: questions, scoring, timers and the state machine.

This package contains pure(ish) domain logic that is driven by socket
handlers, HTTP routes and the live-chat relay, keeping transport concerns
separated from core game mechanics.
"""

from .countdown import Countdown
from .leaderboard import Leaderboard, LeaderboardEntry
from .machine import GameMachine, Phase
from .matcher import is_correct, normalize
from .questions import Question, QuestionStore

__all__ = [
    'Countdown',
    'GameMachine',
    'Leaderboard',
    'LeaderboardEntry',
    'Phase',
    'Question',
    'QuestionStore',
    'is_correct',
    'normalize',
]
