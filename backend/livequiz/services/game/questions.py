from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Question:
    prompt: str
    options: Tuple[str, ...] = ()
    answer: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Question':
        """Build a question from an admin payload.

        Accepts either ``question`` or ``prompt`` for the text. Missing or
        malformed ``options``/``answer`` are tolerated rather than rejected.
        """
        prompt = data.get('question', data.get('prompt'))
        raw_options = data.get('options')
        if isinstance(raw_options, (list, tuple)):
            options = tuple(str(o) for o in raw_options)
        else:
            options = ()
        answer = data.get('answer')
        if answer is not None:
            answer = str(answer)
            if not answer.strip():
                answer = None
        return cls(prompt='' if prompt is None else str(prompt), options=options, answer=answer)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'question': self.prompt,
            'options': list(self.options),
            'answer': self.answer,
        }


class QuestionStore:
    """Ordered question list with change observers."""

    def __init__(self) -> None:
        self._questions: List[Question] = []
        self._observers: List[Callable[[List[Dict[str, Any]]], None]] = []

    def subscribe(self, callback: Callable[[List[Dict[str, Any]]], None]) -> None:
        self._observers.append(callback)

    def append(self, question: Question) -> None:
        self._questions.append(question)
        self._notify()

    def get(self, index: int) -> Optional[Question]:
        if 0 <= index < len(self._questions):
            return self._questions[index]
        return None

    def reset(self) -> None:
        self._questions.clear()
        self._notify()

    def to_list(self) -> List[Dict[str, Any]]:
        return [q.to_dict() for q in self._questions]

    def __len__(self) -> int:
        return len(self._questions)

    def _notify(self) -> None:
        snapshot = self.to_list()
        for callback in list(self._observers):
            callback(snapshot)
