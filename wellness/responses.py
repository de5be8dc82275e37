"""
In-memory answers for one assessment session
"""
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

ResponseValue = Union[str, List[str]]


class ResponseStore:
    """
    Answers keyed by position in the question set.

    Unanswered positions are simply absent. Re-answering a question replaces
    the previous value; nothing is ever removed except by un-ticking every
    checkbox option.
    """

    def __init__(self, initial: Optional[Mapping[int, ResponseValue]] = None):
        self._answers: Dict[int, ResponseValue] = {}
        for index, value in (initial or {}).items():
            self.record(int(index), value)

    def record(self, index: int, value: ResponseValue) -> None:
        self._check_index(index)
        if isinstance(value, list):
            value = list(value)
        self._answers[index] = value

    def toggle(self, index: int, option: str, checked: bool) -> List[str]:
        """Add or remove one option of a multi-select answer."""
        self._check_index(index)
        current = self._answers.get(index) or []
        selected = list(current) if isinstance(current, list) else [current]

        if checked:
            if option not in selected:
                selected.append(option)
        else:
            selected = [item for item in selected if item != option]

        if selected:
            self._answers[index] = selected
        else:
            self._answers.pop(index, None)
        return selected

    def get(self, index: int) -> Optional[ResponseValue]:
        return self._answers.get(index)

    def is_answered(self, index: int) -> bool:
        return bool(self._answers.get(index))

    @property
    def answered_count(self) -> int:
        return sum(1 for value in self._answers.values() if value)

    def progress(self, current_step: int, total: int) -> int:
        """Form progress bar value for the question at ``current_step``."""
        if total <= 0:
            return 0
        return min(100, int((current_step + 1) / total * 100 + 0.5))

    def items(self) -> Iterator[Tuple[int, ResponseValue]]:
        return iter(sorted(self._answers.items()))

    def as_dict(self) -> Dict[int, ResponseValue]:
        return dict(self.items())

    def to_document(self) -> Dict[str, ResponseValue]:
        # MongoDB document keys must be strings.
        return {str(index): value for index, value in self.items()}

    def __getitem__(self, index: int) -> ResponseValue:
        return self._answers[index]

    def __contains__(self, index: object) -> bool:
        return index in self._answers

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._answers))

    def __len__(self) -> int:
        return len(self._answers)

    @staticmethod
    def _check_index(index: int) -> None:
        if index < 0:
            raise ValueError(f"Question index must be non-negative, got {index}")
