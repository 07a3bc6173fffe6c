# Area: Session
"""
quiz_battle._session.shuffle — Question/option shuffling
========================================================

Each client shuffles the question order and each question's options
locally when a unit starts. The correct answer index is remapped so it
still points at the same option text, and every shuffled question
remembers where it came from so answers can be stored against the
snapshot's original order.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .._match.records import Question

UNANSWERED = -1


@dataclass(frozen=True)
class ShuffledQuestion:
    """A question as shown to the player, with the way back to the source."""
    question: Question
    source_index: int
    option_order: Tuple[int, ...]

    def source_option(self, shown_index: int) -> int:
        """Map an option index as shown back to the snapshot's index."""
        if shown_index == UNANSWERED:
            return UNANSWERED
        return self.option_order[shown_index]


def shuffle_options(question: Question, rng: random.Random) -> Tuple[Question, Tuple[int, ...]]:
    """Return ``question`` with its options shuffled, and the order used."""
    order = list(range(len(question.options)))
    rng.shuffle(order)
    shuffled = Question(
        question=question.question,
        options=[question.options[i] for i in order],
        correct_answer=order.index(question.correct_answer),
    )
    return shuffled, tuple(order)


def shuffle_questions(
    questions: Sequence[Question], rng: Optional[random.Random] = None
) -> List[ShuffledQuestion]:
    """Shuffle the question order and, independently, each question's options."""
    rng = rng or random.Random()
    played = []
    for index, question in enumerate(questions):
        shuffled, order = shuffle_options(question, rng)
        played.append(ShuffledQuestion(question=shuffled, source_index=index, option_order=order))
    rng.shuffle(played)
    return played
