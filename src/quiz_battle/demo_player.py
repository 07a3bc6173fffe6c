"""
quiz_battle.demo_player — Demo BattlePlayer
===========================================

A BattlePlayer that answers by itself, for the command line demo and
for tests.

Usage:
    from quiz_battle import BattleRunner, DemoPlayer

    runner = BattleRunner(client, DemoPlayer(seed=7))
    runner.run()
"""

import logging
import random
from typing import List, Optional

from .callbacks import BattlePlayer
from .types import AnswerResponse, QuestionContext, ResultContext

logger = logging.getLogger("quiz_battle.demo_player")


class DemoPlayer(BattlePlayer):
    """
    Picks a random option for every question.

    Args:
        seed: Seed for reproducible answers
        hesitation: Probability of not answering on a given tick
    """

    def __init__(self, seed: Optional[int] = None, hesitation: float = 0.0):
        if not 0.0 <= hesitation < 1.0:
            raise ValueError("hesitation must be in [0, 1)")
        self._rng = random.Random(seed)
        self.hesitation = hesitation
        self.results: List[ResultContext] = []

    def choose_answer(self, ctx: QuestionContext) -> AnswerResponse:
        if self.hesitation and self._rng.random() < self.hesitation:
            return {"answer": None}
        return {"answer": self._rng.randrange(len(ctx["options"]))}

    def on_match_over(self, ctx: ResultContext) -> None:
        self.results.append(ctx)
        logger.info(
            "Match %s over for %s: %s (%d - %d, +%d points)",
            ctx["match_id"], ctx["viewer_id"], ctx["kind"],
            ctx["my_score"], ctx["opponent_score"], ctx["points_earned"],
        )
