from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class LeaderboardEntry:
    participant_id: str
    score: int

    def to_dict(self) -> dict:
        return {'participantId': self.participant_id, 'score': self.score}


class Leaderboard:
    """Accumulated scores keyed by live-chat identity.

    Entries are created on first award and never removed. Ranking is by
    score descending; ties keep the order in which participants first scored.
    """

    def __init__(self) -> None:
        self._scores: Dict[str, int] = {}

    def award(self, participant_id: str, points: int) -> int:
        if points <= 0:
            raise ValueError(f'points must be positive, got {points}')
        total = self._scores.get(participant_id, 0) + points
        self._scores[participant_id] = total
        return total

    def score(self, participant_id: str) -> int:
        return self._scores.get(participant_id, 0)

    def top(self, n: int = 10) -> List[LeaderboardEntry]:
        # sorted() is stable and dicts keep insertion order
        ranked = sorted(self._scores.items(), key=lambda item: -item[1])
        return [LeaderboardEntry(pid, score) for pid, score in ranked[:max(0, n)]]

    def reset(self) -> None:
        self._scores.clear()

    def __len__(self) -> int:
        return len(self._scores)
