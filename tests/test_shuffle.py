# Area: Session Tests
"""Tests for answer-preserving question/option shuffling."""

import random

from quiz_battle._match.records import QuizContent
from quiz_battle._session.shuffle import UNANSWERED, shuffle_options, shuffle_questions

from conftest import quiz


def questions():
    return QuizContent.model_validate(quiz(0, 1, 2, 3, 1, 0)).questions


def score(played, answers, points=10):
    return sum(points for q, a in zip(played, answers) if a == q.correct_answer)


class TestShuffle:
    """Tests for shuffle_questions and shuffle_options."""

    def test_correct_option_text_is_preserved(self):
        rng = random.Random(3)
        for original in questions():
            shuffled, order = shuffle_options(original, rng)
            assert sorted(shuffled.options) == sorted(original.options)
            assert (shuffled.options[shuffled.correct_answer]
                    == original.options[original.correct_answer])
            assert [original.options[i] for i in order] == shuffled.options

    def test_solving_shuffled_scores_like_unshuffled(self):
        source = questions()
        for seed in range(20):
            played = shuffle_questions(source, random.Random(seed))
            shuffled_score = score(
                [p.question for p in played], [p.question.correct_answer for p in played]
            )
            assert shuffled_score == score(source, [q.correct_answer for q in source])

    def test_answers_map_back_to_source(self):
        source = questions()
        played = shuffle_questions(source, random.Random(5))
        for p in played:
            original = source[p.source_index]
            assert p.source_option(p.question.correct_answer) == original.correct_answer
        assert played[0].source_option(UNANSWERED) == UNANSWERED

    def test_every_question_kept_once(self):
        played = shuffle_questions(questions(), random.Random(9))
        assert sorted(p.source_index for p in played) == list(range(6))

    def test_attempts_differ(self):
        source = questions()
        orders = {
            tuple(p.source_index for p in shuffle_questions(source, random.Random(seed)))
            for seed in range(10)
        }
        assert len(orders) > 1
