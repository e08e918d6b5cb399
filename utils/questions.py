from __future__ import annotations

import random
from typing import List, Optional, Sequence

from models.quiz import QuizOption, QuizQuestion
from models.word import Word
from utils.sessions import shuffle_words

DEFAULT_OPTION_COUNT = 4


def build_options(
    words: Sequence[Word],
    index: int,
    option_count: int = DEFAULT_OPTION_COUNT,
    rng: Optional[random.Random] = None,
) -> List[QuizOption]:
    """Options for ``words[index]``: the correct definition plus distractors.

    Distractors come from the other words; when there are too few, synthesized
    fillers pad the list. The correct option's id is the target word's id.
    """
    rng = rng or random
    target = words[index]
    options = [QuizOption(id=target.id, definition=target.definition)]
    others = [word for position, word in enumerate(words) if position != index]
    for word in rng.sample(others, min(len(others), option_count - 1)):
        options.append(QuizOption(id=word.id, definition=word.definition))
    while len(options) < option_count:
        options.append(
            QuizOption(
                id=f"fake_{len(options)}",
                definition=f"{target.definition} (option {len(options)})",
            )
        )
    return shuffle_words(options, rng)


def build_questions(
    words: Sequence[Word],
    option_count: int = DEFAULT_OPTION_COUNT,
    rng: Optional[random.Random] = None,
) -> List[QuizQuestion]:
    return [
        QuizQuestion(
            word_id=word.id,
            word=word.word,
            phonetic=word.phonetic,
            options=build_options(words, index, option_count, rng),
        )
        for index, word in enumerate(words)
    ]
