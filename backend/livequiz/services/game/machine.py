"""Quiz game state machine.

Phases run ``waiting -> question -> leaderboard -> question -> ... -> end``.
The machine owns the question store, the leaderboard and the countdown, and
reports every state change through a single ``broadcast(event, payload)``
callable so it stays transport agnostic.

Every command takes the same re-entrant lock. Timer callbacks carry the round
token they were started with and are dropped if a later ``next_question`` or
``start_game`` has moved the game on.
"""

import logging
import threading
from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Set

from .countdown import Countdown
from .leaderboard import Leaderboard
from .matcher import is_correct
from .questions import Question, QuestionStore


class Phase(str, Enum):
    WAITING = 'waiting'
    QUESTION = 'question'
    LEADERBOARD = 'leaderboard'
    END = 'end'


Broadcast = Callable[[str, Any], None]


class GameMachine:
    def __init__(
        self,
        broadcast: Broadcast,
        countdown: Optional[Countdown] = None,
        questions: Optional[QuestionStore] = None,
        leaderboard: Optional[Leaderboard] = None,
        question_duration: int = 10,
        points_per_answer: int = 10,
        leaderboard_size: int = 10,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._broadcast = broadcast
        self._countdown = countdown or Countdown()
        self._questions = questions or QuestionStore()
        self._leaderboard = leaderboard or Leaderboard()
        self.question_duration = question_duration
        self.points_per_answer = points_per_answer
        self.leaderboard_size = leaderboard_size
        self.logger = logger or logging.getLogger(__name__)

        self._lock = threading.RLock()
        self.phase = Phase.WAITING
        self.active_index = -1
        self.time_remaining = 0
        self._round = 0
        self._answered: Set[str] = set()

        self._questions.subscribe(self._on_questions_changed)

    @property
    def leaderboard(self) -> Leaderboard:
        return self._leaderboard

    # ---- Admin commands ----

    def start_game(self) -> None:
        with self._lock:
            self._countdown.cancel()
            self._round += 1
            self._leaderboard.reset()
            self._answered.clear()
            self.phase = Phase.WAITING
            self.active_index = -1
            self.time_remaining = 0
            self.logger.info(f"[game-start] questions={len(self._questions)}")
            self._broadcast('game:state', self.snapshot())
            self._broadcast('admin:questions_updated', self._questions.to_list())

    def next_question(self) -> None:
        with self._lock:
            if self.phase == Phase.END:
                self.logger.info("[next-skip] game already ended; start a new game first")
                return
            self._countdown.cancel()
            self._round += 1
            self._answered.clear()
            next_index = self.active_index + 1
            question = self._questions.get(next_index)
            if question is None:
                self.phase = Phase.END
                self.active_index = -1
                self.time_remaining = 0
                self.logger.info(f"[game-end] no question at index={next_index}")
                self._broadcast('game:end', self._ranked())
                return

            self.phase = Phase.QUESTION
            self.active_index = next_index
            self.time_remaining = self.question_duration
            self._broadcast('game:question', self._question_payload(question))
            self.logger.info(f"[timer-set] index={next_index} duration={self.question_duration}s")
            self._countdown.start(
                self.question_duration,
                partial(self._on_tick, self._round),
                partial(self._on_expire, self._round),
            )

    def add_question(self, data: Dict[str, Any]) -> Question:
        question = data if isinstance(data, Question) else Question.from_dict(data or {})
        with self._lock:
            self._questions.append(question)
            self.logger.info(f"[question-add] total={len(self._questions)} has_answer={question.answer is not None}")
        return question

    def clear_questions(self) -> bool:
        with self._lock:
            if self.phase not in (Phase.WAITING, Phase.END):
                self.logger.warning(f"[questions-clear-skip] phase={self.phase.value}")
                return False
            self._questions.reset()
            self.logger.info("[questions-clear]")
            return True

    # ---- Answer ingestion ----

    def submit_answer(self, participant_id: str, text: Any) -> bool:
        """Score a chat comment against the active question.

        Returns True only when points were awarded. Each participant scores
        at most once per question.
        """
        with self._lock:
            if self.phase != Phase.QUESTION:
                return False
            question = self._questions.get(self.active_index)
            if question is None or not participant_id:
                return False
            if participant_id in self._answered:
                return False
            if not is_correct(text, question.answer):
                return False
            self._answered.add(participant_id)
            total = self._leaderboard.award(participant_id, self.points_per_answer)
            self.logger.info(f"[answer] participant={participant_id} index={self.active_index} total={total}")
            return True

    # ---- Views ----

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            question = self._questions.get(self.active_index)
            return {
                'status': self.phase.value,
                'question': self._question_payload(question) if question else None,
                'timeRemaining': self.time_remaining,
                'leaderboard': self._ranked(),
            }

    def questions(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self._questions.to_list()

    # ---- Timer callbacks ----

    def _on_tick(self, round_token: int, remaining: int) -> None:
        with self._lock:
            if round_token != self._round or self.phase != Phase.QUESTION:
                return
            self.time_remaining = remaining
            self._broadcast('game:timer', remaining)

    def _on_expire(self, round_token: int) -> None:
        with self._lock:
            if round_token != self._round or self.phase != Phase.QUESTION:
                self.logger.info(f"[timer-abort] round={round_token} current={self._round} phase={self.phase.value}")
                return
            self.phase = Phase.LEADERBOARD
            self.time_remaining = 0
            self.logger.info(f"[timer-fire] index={self.active_index} -> leaderboard")
            self._broadcast('game:leaderboard', self._ranked())

    # ---- Helpers ----

    def _on_questions_changed(self, questions: List[Dict[str, Any]]) -> None:
        self._broadcast('admin:questions_updated', questions)

    def _ranked(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self._leaderboard.top(self.leaderboard_size)]

    def _question_payload(self, question: Question) -> Dict[str, Any]:
        return {
            'question': question.prompt,
            'options': list(question.options),
            'time': self.question_duration,
        }
