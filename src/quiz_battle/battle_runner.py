# Area: Client
"""
quiz_battle.battle_runner — Blocking battle loop
================================================

Plays one match for one participant until it is over: opens the
client, asks the BattlePlayer for answers as questions come up, ticks
the countdown and the monitor, and reports the result to the player.

Usage:
    client = BattleClient(store, match_id, "alice", config=config)
    BattleRunner(client, DemoPlayer(seed=1), poll_interval=0.2).run()
"""

from __future__ import annotations

import logging
import signal
import time
from typing import Optional

from ._match.outcome import MatchOutcome
from ._session.state import SessionPhase
from .callbacks import BattlePlayer
from .client import BattleClient
from .types import QuestionContext, ResultContext

logger = logging.getLogger("quiz_battle.runner")


class BattleRunner:
    """
    Drives a BattleClient with a BattlePlayer.

    The loop ends when the match is terminal, on SIGINT, or after
    ``max_ticks`` iterations when given.
    """

    def __init__(
        self,
        client: BattleClient,
        player: BattlePlayer,
        poll_interval: Optional[float] = None,
        max_ticks: Optional[int] = None,
    ):
        self.client = client
        self.player = player
        if poll_interval is None:
            poll_interval = client.config["poll_interval_seconds"]
        self.poll_interval = poll_interval
        self.max_ticks = max_ticks
        self._running = False

    def stop(self) -> None:
        self._running = False

    def run(self) -> MatchOutcome:
        """Play until the match is over. Blocks until then or until interrupted."""
        self._running = True
        previous_handler = signal.getsignal(signal.SIGINT)
        try:
            signal.signal(signal.SIGINT, lambda s, f: self.stop())
        except ValueError:
            # Not on the main thread; rely on stop() or max_ticks.
            previous_handler = None

        try:
            self.client.open()
            ticks = 0
            while self._running and not self.client.is_over:
                try:
                    self.step()
                except Exception as e:
                    logger.error("Error in battle loop: %s", e, exc_info=True)

                ticks += 1
                if self.max_ticks is not None and ticks >= self.max_ticks:
                    logger.info("[%s] Stopping after %d ticks", self.client.match_id, ticks)
                    break
                if self.poll_interval:
                    time.sleep(self.poll_interval)
        finally:
            if previous_handler is not None:
                signal.signal(signal.SIGINT, previous_handler)

        outcome = self.client.outcome()
        self.client.close()
        self.player.on_match_over(ResultContext(**outcome.to_dict()))
        return outcome

    def step(self) -> None:
        """One loop iteration: play the session, then tick the client."""
        session = self.client.session
        if session is not None and not self.client.is_over:
            phase = session.phase
            if phase in (SessionPhase.AWAITING_MODE, SessionPhase.UNIT_COMPLETE):
                session.start_unit()
            elif phase is SessionPhase.QUESTION_TRANSITION:
                session.next_question()
            elif phase is SessionPhase.PLAYING:
                response = self.player.choose_answer(self._question_context())
                answer = response.get("answer")
                if answer is not None:
                    session.answer(answer)
        self.client.tick()

    def _question_context(self) -> QuestionContext:
        session = self.client.session
        question = session.current_question
        return QuestionContext(
            match_id=self.client.match_id,
            participant_id=self.client.participant_id,
            subject_id=session.current_assignment.subject_id,
            unit_number=session.state.unit_index + 1,
            total_units=session.total_units,
            question_number=session.state.question_index + 1,
            question_count=len(session.state.questions),
            question=question.question,
            options=list(question.options),
            remaining_seconds=session.remaining_seconds,
        )
