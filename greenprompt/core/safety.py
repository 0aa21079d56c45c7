import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

_SENTENCE_BOUNDARY = re.compile(r'[.!?]+')


class SafetyCheck(str, Enum):
    WORD_COUNT_RATIO = "word-count-ratio"
    QUESTION_PRESERVATION = "question-preservation"
    SENTENCE_COUNT_RATIO = "sentence-count-ratio"


@dataclass(frozen=True)
class SafetyVerdict:
    accepted: bool
    failed_check: Optional[SafetyCheck] = None


def count_words(text: str) -> int:
    return len(text.split())


def count_sentences(text: str) -> int:
    return sum(1 for part in _SENTENCE_BOUNDARY.split(text) if part.strip())


class SafetyValidator:
    """Decides whether a remote rewrite kept the content of the original prompt.

    A candidate is rejected when it lost too many words, dropped every
    question, or lost too many sentences. Checks run in that order and the
    first failing one is reported.
    """

    def __init__(self, min_word_ratio: float = 0.9, min_sentence_ratio: float = 0.8):
        self.min_word_ratio = min_word_ratio
        self.min_sentence_ratio = min_sentence_ratio

    def validate(self, original: str, candidate: str) -> SafetyVerdict:
        original_words = count_words(original)
        candidate_words = count_words(candidate)
        if candidate_words < original_words * self.min_word_ratio:
            logger.warning("Remote rewrite dropped too many words: %d -> %d", original_words, candidate_words)
            return SafetyVerdict(accepted=False, failed_check=SafetyCheck.WORD_COUNT_RATIO)

        if '?' in original and '?' not in candidate:
            logger.warning("Remote rewrite removed the questions of the original")
            return SafetyVerdict(accepted=False, failed_check=SafetyCheck.QUESTION_PRESERVATION)

        original_sentences = count_sentences(original)
        candidate_sentences = count_sentences(candidate)
        if candidate_sentences < original_sentences * self.min_sentence_ratio:
            logger.warning("Remote rewrite dropped too many sentences: %d -> %d",
                           original_sentences, candidate_sentences)
            return SafetyVerdict(accepted=False, failed_check=SafetyCheck.SENTENCE_COUNT_RATIO)

        return SafetyVerdict(accepted=True)
