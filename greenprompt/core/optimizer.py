import logging
import re
from typing import Dict, Iterable

from greenprompt.nl import nl_data
from greenprompt.nl.nl_data import TransformationRule

logger = logging.getLogger(__name__)


def _compile_table(rules: Iterable[TransformationRule]) -> re.Pattern:
    phrases = sorted({rule.pattern.lower() for rule in rules}, key=len, reverse=True)
    alternation = '|'.join(r'\s+'.join(re.escape(word) for word in phrase.split()) for phrase in phrases)
    return re.compile(r'\b(?:' + alternation + r')\b', re.IGNORECASE)


def _lookup_table(rules: Iterable[TransformationRule]) -> Dict[str, str]:
    return {rule.pattern.lower(): rule.replacement for rule in rules}


_FILLER_PATTERN = _compile_table(nl_data.fillers)

_PHRASE_PATTERN = _compile_table(nl_data.verbose_replacements)
_PHRASE_LOOKUP = _lookup_table(nl_data.verbose_replacements)

_TYPO_PATTERNS = {
    True: _compile_table(nl_data.typos),
    False: _compile_table(rule for rule in nl_data.typos if not rule.aggressive),
}
_TYPO_LOOKUP = _lookup_table(nl_data.typos)

_REPEATED_WORD = re.compile(r'\b(\w+)(?:\s+\1\b)+', re.IGNORECASE)
_SENTENCE_START = re.compile(r'(^[\W\d_]*|[.!?]\s+)([^\W\d_])')

_SPACE_BEFORE_PUNCT = re.compile(r'\s+([.,!?;:])')
_REPEATED_COMMAS = re.compile(r',{2,}')
_ORPHAN_BEFORE_TERMINAL = re.compile(r'[,;:]+(?=[.!?])')
_PUNCT_WITHOUT_SPACE = re.compile(r'[.,!?;:](?=[^\s.,!?;:"\')\]])')
_LEADING_ORPHANS = re.compile(r'^[,;:]+\s*')
_TRAILING_ORPHANS = re.compile(r'[,;:]+$')


def _pad_punctuation(match) -> str:
    text, start, end = match.string, match.start(), match.end()
    if start > 0 and text[start - 1].isdigit() and text[end].isdigit():
        return match.group(0)
    return match.group(0) + ' '


def _phrase_key(match) -> str:
    return ' '.join(match.group(0).lower().split())


class RuleBasedOptimizer:
    """Deterministic prompt rewriter.

    Stages run in a fixed order: normalize, strip fillers, compress verbose
    phrases, collapse repeated words, correct typos, capitalize, finalize.
    The four cleanup stages repeat until the text stops changing, so a second
    run over the output has nothing left to remove.
    """

    def __init__(self, aggressive_typos: bool = True):
        self.aggressive_typos = aggressive_typos
        self._typo_pattern = _TYPO_PATTERNS[aggressive_typos]

    def _normalize(self, text: str) -> str:
        result = re.sub(r'\s+', ' ', text).strip()
        result = _SPACE_BEFORE_PUNCT.sub(r'\1', result)
        result = _REPEATED_COMMAS.sub(',', result)
        result = _ORPHAN_BEFORE_TERMINAL.sub('', result)
        result = _PUNCT_WITHOUT_SPACE.sub(_pad_punctuation, result)
        result = _LEADING_ORPHANS.sub('', result)
        return result.strip()

    def _remove_filler_words(self, text: str) -> str:
        # removing one filler can expose another ("I really think"), so repeat until stable
        result = text
        while True:
            stripped = _FILLER_PATTERN.sub('', result)
            if stripped == result:
                return stripped
            result = stripped

    def _replace_verbose_phrases(self, text: str) -> str:
        return _PHRASE_PATTERN.sub(lambda m: _PHRASE_LOOKUP[_phrase_key(m)], text)

    def _remove_repeated_words(self, text: str) -> str:
        return _REPEATED_WORD.sub(r'\1', text)

    def _correct_typos(self, text: str) -> str:
        def replace(match) -> str:
            correction = _TYPO_LOOKUP[match.group(0).lower()]
            if correction and match.group(0)[0].isupper():
                return correction[0].upper() + correction[1:]
            return correction

        return self._typo_pattern.sub(replace, text)

    def _capitalize_sentences(self, text: str) -> str:
        return _SENTENCE_START.sub(lambda m: m.group(1) + m.group(2).upper(), text)

    def _finalize(self, text: str) -> str:
        result = _TRAILING_ORPHANS.sub('', text.strip())
        if not re.search(r'\w', result):
            return ""
        if not result.endswith(('.', '!', '?')):
            result += '.'
        return self._normalize(result)

    def optimize(self, text: str) -> str:
        if not text or not text.strip():
            return ""

        optimized = self._normalize(text)
        # a correction or compression can create a new duplicate or filler ("teh the", "u know")
        while True:
            previous = optimized
            optimized = self._remove_filler_words(optimized)
            optimized = self._replace_verbose_phrases(optimized)
            optimized = self._remove_repeated_words(optimized)
            optimized = self._correct_typos(optimized)
            if optimized == previous:
                break
        optimized = self._capitalize_sentences(optimized)
        optimized = self._finalize(optimized)

        logger.debug("Rule-based optimization: %d -> %d chars", len(text), len(optimized))
        return optimized
