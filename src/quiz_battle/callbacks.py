# Area: Player Callbacks
"""
quiz_battle.callbacks — The player seam
=======================================

A BattlePlayer stands in for the person in front of the screen. The
battle runner asks it for an answer to each question as it is shown,
and tells it once the match is over for it.

Type Definitions
----------------
All input/output types are defined in types.py:

    from quiz_battle import QuestionContext, AnswerResponse, ResultContext
"""

from abc import ABC, abstractmethod

from .types import AnswerResponse, QuestionContext, ResultContext


class BattlePlayer(ABC):
    """
    Abstract base class for a battle participant.

    Subclass this and implement ``choose_answer``. ``on_match_over`` is
    optional.
    """

    @abstractmethod
    def choose_answer(self, ctx: QuestionContext) -> AnswerResponse:
        """
        Called for the question currently shown.

        Parameters
        ----------
        ctx : QuestionContext
            {
                "match_id": str,
                "participant_id": str,
                "subject_id": str,          # e.g. "math"
                "unit_number": int,         # 1-based
                "total_units": int,
                "question_number": int,     # 1-based within the unit
                "question_count": int,
                "question": str,
                "options": [str, ...],      # in the order shown
                "remaining_seconds": float
            }

        Returns
        -------
        AnswerResponse
            {
                "answer": int | None        # index into options, None to wait
            }
        """
        pass

    def on_match_over(self, ctx: ResultContext) -> None:
        """Called once when the match is over for this player."""
        pass
