import random

from db.store import QUIZ_HISTORY_KEY, load_list
from models.plan import PlanCreate
from models.quiz import QuizAttempt, RawQuizResult
from models.session import SessionSource
from utils.bookmarks import list_bookmarks
from utils.history import get_saved_result
from utils.plans import PlanProgressionEngine
from utils.questions import build_options, build_questions
from utils.scoring import QuizScorer, evaluate, quiz_score
from utils.sessions import SessionBuilder, get_session

from conftest import add_chapter, make_words


def _session(store, clock, words, source=SessionSource.SMART_REVISION):
    return SessionBuilder(store, clock=clock).build(words, source, shuffle=False)


def _scorer(store, clock):
    return QuizScorer(store, PlanProgressionEngine(store, clock=clock), clock=clock)


def _answers(correct, incorrect, skipped):
    results = [RawQuizResult(word_id=f"w{i}", selected_option_id=f"w{i}", time_taken=2000) for i in correct]
    results += [RawQuizResult(word_id=f"w{i}", selected_option_id="w9", time_taken=3000) for i in incorrect]
    results += [RawQuizResult(word_id=f"w{i}") for i in skipped]
    return results


def test_score_ignores_skipped_questions(store, clock):
    session = _session(store, clock, make_words(10))
    score, results = evaluate(session, _answers(range(6), [6, 7], [8, 9]))

    assert score.score == 75
    assert results.correct == ["w0", "w1", "w2", "w3", "w4", "w5"]
    assert results.incorrect == ["w6", "w7"]
    assert results.skipped == ["w8", "w9"]


def test_score_rounds_half_up_and_handles_no_answers():
    assert quiz_score(1, 1) == 50
    assert quiz_score(1, 2) == 33
    assert quiz_score(2, 1) == 67
    assert quiz_score(1, 7) == 13
    assert quiz_score(0, 0) == 0


def test_answers_carry_selected_text(store, clock):
    session = _session(store, clock, make_words(3))
    score, _ = evaluate(
        session,
        [
            RawQuizResult(word_id="w0", selected_option_id="w1"),
            RawQuizResult(word_id="w1", selected_option_id="fake_2", selected_option_text="made up"),
            RawQuizResult(word_id="w2"),
            RawQuizResult(word_id="other", selected_option_id="other"),
        ],
    )
    by_word = {answer.word_id: answer for answer in score.answers}

    assert set(by_word) == {"w0", "w1", "w2"}
    assert by_word["w0"].selected_answer_text == "meaning of w1"
    assert by_word["w0"].correct_answer == "meaning of w0"
    assert by_word["w1"].selected_answer_text == "made up"
    assert by_word["w2"].skipped is True
    assert by_word["w2"].is_correct is False


def test_scoring_completes_session_and_logs_attempts(store, clock):
    session = _session(store, clock, make_words(4))
    outcome = _scorer(store, clock).score(session, _answers([0, 1], [2], [3]))

    stored = get_session(store, session.id)
    assert outcome.score == 67
    assert stored.completed is True
    assert stored.score == 67
    assert stored.results.skipped == ["w3"]

    history = load_list(store, QUIZ_HISTORY_KEY, QuizAttempt)
    assert [(row.word_id, row.correct) for row in history] == [("w0", True), ("w1", True), ("w2", False)]
    assert history[2].time_taken == 3000
    assert all(row.session_id == session.id for row in history)


def test_resubmission_replaces_quiz_history(store, clock):
    session = _session(store, clock, make_words(3))
    scorer = _scorer(store, clock)
    scorer.score(session, _answers([0], [1, 2], []))
    scorer.score(get_session(store, session.id), _answers([0, 1, 2], [], []))

    history = load_list(store, QUIZ_HISTORY_KEY, QuizAttempt)
    assert len(history) == 3
    assert all(row.correct for row in history)


def test_bookmark_labels_prefer_chapter_then_plan_then_source(store, clock):
    words = make_words(2)
    words[0].chapter = "Food"
    session = _session(store, clock, words, SessionSource.CHALLENGING_WORDS)

    _scorer(store, clock).score(session, _answers([0, 1], [], []), bookmarked_ids=["w0", "w1", "w1", "zz"])

    labels = {bookmark.id: bookmark.chapter for bookmark in list_bookmarks(store)}
    assert labels == {"w0": "Food", "w1": "Challenging Words"}
    assert get_session(store, session.id).results.bookmarked == ["w0", "w1"]


def test_plan_quiz_updates_set_and_saves_one_result(store, clock):
    add_chapter(store, "c1", make_words(4))
    engine = PlanProgressionEngine(store, clock=clock)
    plan = engine.create_plan(PlanCreate(title="Trip", chapter_id="c1", daily_word_goal=2))
    builder = SessionBuilder(store, clock=clock)
    engine.record_flashcard_completion(plan.id, 0, [], [])
    session = engine.start_set(plan.id, 0, builder).session
    scorer = QuizScorer(store, engine, clock=clock)

    scorer.score(session, _answers([0], [], [1]), bookmarked_ids=["w1"])
    scorer.score(get_session(store, session.id), _answers([0, 1], [], []))

    updated = engine.get_plan(plan.id)
    assert updated.sets[0].is_completed is True
    assert updated.sets[0].known_word_ids == ["w0", "w1"]
    assert updated.sets[1].is_unlocked is True
    assert updated.completed_sets == ["set_0"]
    saved = get_saved_result(store, plan.id, 0)
    assert saved.score == 100
    assert saved.session_id == session.id
    assert [bookmark.chapter for bookmark in list_bookmarks(store)] == ["Trip"]


def test_first_plan_submission_records_skips_as_unknown(store, clock):
    add_chapter(store, "c1", make_words(3))
    engine = PlanProgressionEngine(store, clock=clock)
    plan = engine.create_plan(PlanCreate(title="Trip", chapter_id="c1", daily_word_goal=3))
    session = engine.start_set(plan.id, 0, SessionBuilder(store, clock=clock)).session

    QuizScorer(store, engine, clock=clock).score(session, _answers([0], [1], [2]))

    plan_set = engine.get_plan(plan.id).sets[0]
    assert plan_set.quiz_completed is True
    assert plan_set.is_completed is False
    assert plan_set.known_word_ids == ["w0"]
    assert plan_set.unknown_word_ids == ["w1", "w2"]


def test_deleted_plan_still_scores_the_session(store, clock):
    add_chapter(store, "c1", make_words(2))
    engine = PlanProgressionEngine(store, clock=clock)
    plan = engine.create_plan(PlanCreate(title="Trip", chapter_id="c1", daily_word_goal=2))
    session = engine.start_set(plan.id, 0, SessionBuilder(store, clock=clock)).session
    engine.delete_plan(plan.id)

    outcome = QuizScorer(store, engine, clock=clock).score(session, _answers([0, 1], [], []))

    assert outcome.score == 100
    assert get_session(store, session.id).completed is True
    assert get_saved_result(store, plan.id, 0) is None


def test_options_include_the_answer_once():
    words = make_words(6)
    options = build_options(words, 2, rng=random.Random(4))

    assert len(options) == 4
    assert [option.id for option in options].count("w2") == 1
    assert len({option.id for option in options}) == 4


def test_options_are_padded_for_small_sessions():
    questions = build_questions(make_words(2), rng=random.Random(2))
    ids = {option.id for option in questions[0].options}
    assert len(questions[0].options) == 4
    assert {"w0", "w1"} <= ids
    assert any(option_id.startswith("fake_") for option_id in ids)
