import random
from collections import Counter

from models.session import SessionSource
from utils.sessions import SessionBuilder, get_session, load_sessions, shuffle_words

from conftest import make_words


def test_shuffle_is_a_permutation():
    items = list(range(20))
    shuffled = shuffle_words(items, random.Random(7))
    assert sorted(shuffled) == items
    assert items == list(range(20))


def test_session_is_capped_at_fifty(store, clock):
    words = make_words(120)
    session = SessionBuilder(store, clock=clock, rng=random.Random(1)).build(words, SessionSource.SMART_REVISION)

    assert len(session.words) == 50
    assert len({word.id for word in session.words}) == 50
    assert {word.id for word in session.words} <= {word.id for word in words}


def test_short_pool_keeps_every_word(store, clock):
    words = make_words(7)
    session = SessionBuilder(store, clock=clock, rng=random.Random(3)).build(words, SessionSource.SMART_REVISION)

    assert Counter(word.id for word in session.words) == Counter(word.id for word in words)
    assert session.completed is False
    assert session.score is None
    assert session.date == clock().isoformat()


def test_empty_pool_builds_nothing(store, clock):
    assert SessionBuilder(store, clock=clock).build([], SessionSource.SMART_REVISION) is None
    assert load_sessions(store) == []


def test_sessions_are_persisted_with_source_prefixed_ids(store, clock):
    session = SessionBuilder(store, clock=clock).build(make_words(3), SessionSource.SMART_REVISION)

    assert session.id.startswith("smart-revision-")
    assert get_session(store, session.id) == session


def test_daily_session_is_reused_on_the_same_day(store, clock):
    builder = SessionBuilder(store, clock=clock, rng=random.Random(5))
    first = builder.build(make_words(10), SessionSource.DAILY_REVISION)
    clock.advance(hours=3)

    second = builder.build(make_words(30, prefix="x"), SessionSource.DAILY_REVISION)

    assert second.id == first.id
    assert [word.id for word in second.words] == [word.id for word in first.words]
    assert len(load_sessions(store)) == 1


def test_daily_session_is_reused_even_without_candidates(store, clock):
    builder = SessionBuilder(store, clock=clock)
    first = builder.build(make_words(4), SessionSource.DAILY_REVISION)
    assert builder.build([], SessionSource.DAILY_REVISION).id == first.id


def test_next_day_builds_a_new_daily_session(store, clock):
    builder = SessionBuilder(store, clock=clock)
    first = builder.build(make_words(4), SessionSource.DAILY_REVISION)
    clock.advance(days=1)

    second = builder.build(make_words(4), SessionSource.DAILY_REVISION)

    assert second.id != first.id
    assert len(load_sessions(store)) == 2


def test_unshuffled_build_keeps_order_and_explicit_cap(store, clock):
    words = make_words(80)
    session = SessionBuilder(store, clock=clock).build(
        words, SessionSource.LEARNING_PLAN, cap=len(words), shuffle=False
    )
    assert [word.id for word in session.words] == [word.id for word in words]


def test_non_positive_cap_builds_nothing(store, clock):
    builder = SessionBuilder(store, cap=0, clock=clock)
    assert builder.build(make_words(3), SessionSource.SMART_REVISION) is None
    assert builder.build(make_words(3), SessionSource.SMART_REVISION, cap=-2) is None
    assert load_sessions(store) == []
