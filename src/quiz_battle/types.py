"""
quiz_battle.types — TypedDict schemas for player callbacks
==========================================================

Structure of the context dictionaries passed to BattlePlayer callbacks
and of the values they return. All types are exported from the main
package:

    from quiz_battle import QuestionContext, AnswerResponse, ResultContext

Use __annotations__ to inspect fields:

    >>> QuestionContext.__annotations__
    {'match_id': str, 'participant_id': str, 'unit_number': int, ...}
"""

from typing import List, Optional, TypedDict


# ============================================
# choose_answer() Input/Output
# ============================================

class QuestionContext(TypedDict):
    """Context passed to choose_answer().

    Fields
    ------
    unit_number / total_units : int
        1-based unit being played, out of total.
    question_number / question_count : int
        1-based question within the unit.
    options : List[str]
        Options in the order shown; answer with an index into this list.
    remaining_seconds : float
        Time left on the unit countdown.
    """
    match_id: str
    participant_id: str
    subject_id: str
    unit_number: int
    total_units: int
    question_number: int
    question_count: int
    question: str
    options: List[str]
    remaining_seconds: float


class AnswerResponse(TypedDict):
    """Expected return from choose_answer().

    Fields
    ------
    answer : Optional[int]
        Index into ``options``. None means no answer yet; the player is
        asked again on the next tick until the countdown runs out.
    """
    answer: Optional[int]


# ============================================
# on_match_over() Input
# ============================================

class ResultContext(TypedDict):
    """Context passed to on_match_over().

    Fields
    ------
    kind : str
        One of "won", "lost", "draw", "won_forfeit", "lost_forfeit",
        "cancelled", or "waiting" when the player finished first.
    points_earned : int
        10 for a win, 5 for a draw, 0 otherwise.
    """
    match_id: str
    viewer_id: str
    kind: str
    my_score: int
    opponent_score: int
    winner_id: Optional[str]
    points_earned: int
