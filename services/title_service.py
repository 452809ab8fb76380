"""
Title service that turns a free-form user message into a short conversation title.
Rule-based token scoring does the work; a model-suggested title is only a candidate that
goes through the same cleanup and is discarded when it looks degenerate.
"""
import re
from typing import Dict, List, Optional

from config import Config
from utils.constants import Patterns, TITLE_SYSTEM_PROMPT
from utils.logger import app_logger
from utils.vocabulary import TitleVocabulary, load_vocabulary

# lowercase token -> spelling the user typed first
CasingMap = Dict[str, str]

_UNSAFE_CHAR_RE = re.compile(Patterns.UNSAFE_CHAR)
_UNSAFE_TOKEN_CHAR_RE = re.compile(Patterns.UNSAFE_TOKEN_CHAR)
_QUOTES_RE = re.compile(Patterns.QUOTES)
_TRAILING_PUNCTUATION_RE = re.compile(Patterns.TRAILING_PUNCTUATION)
_UPPERCASE_RE = re.compile(Patterns.UPPERCASE)

MAX_TITLE_WORDS = 5
MAX_WINDOW_WORDS = 4
MAX_CANDIDATE_CHARS = 80

_vocabulary: TitleVocabulary = load_vocabulary(Config.TITLE_VOCABULARY_PATH)


def get_vocabulary() -> TitleVocabulary:
    """Get the vocabulary table loaded at start-up."""
    return _vocabulary


def turkish_lower(text: str) -> str:
    """Lowercase with Turkish dotted/dotless i rules."""
    return text.replace("I", "ı").replace("İ", "i").lower()


def turkish_upper(text: str) -> str:
    """Uppercase with Turkish dotted/dotless i rules."""
    return text.replace("i", "İ").replace("ı", "I").upper()


def capitalize_first(text: str) -> str:
    """Uppercase the first letter and lowercase the rest."""
    if not text:
        return text
    lowered = turkish_lower(text)
    return turkish_upper(lowered[0]) + lowered[1:]


class TitleService:
    """Service for deriving conversation titles."""

    TOKEN_SCORES = {
        "excluded": -100,
        "verb_suffix": -80,
        "time_location": 6,
        "finance": 5,
        "weather": 5,
        "long_word": 2,
        "uppercase": 3,
        "topic_in_window": 3,
    }

    @staticmethod
    def normalize_text(text: str) -> str:
        """Flatten newlines, drop quotes and unsafe characters, collapse whitespace."""
        text = re.sub(r"\r?\n+", " ", text or "")
        text = _QUOTES_RE.sub("", text)
        text = _UNSAFE_CHAR_RE.sub(" ", text)
        return re.sub(r"\s+", " ", text).strip()

    @staticmethod
    def normalize_candidate(candidate: Optional[str]) -> str:
        """Clean a model-suggested title and soft-cap its length."""
        text = TitleService.normalize_text(candidate or "")
        text = _TRAILING_PUNCTUATION_RE.sub("", text).strip()
        text = text[:MAX_CANDIDATE_CHARS].strip()
        return _TRAILING_PUNCTUATION_RE.sub("", text).strip()

    @staticmethod
    def clean_token(token: str) -> str:
        """Keep letters, digits and inner apostrophes; quote marks around the word are dropped."""
        return _UNSAFE_TOKEN_CHAR_RE.sub("", token).strip(Patterns.TOKEN_QUOTES)

    @staticmethod
    def tokenize(message: str) -> List[str]:
        """Split the raw message on whitespace into cleaned, non-empty tokens."""
        tokens = (TitleService.clean_token(t) for t in (message or "").split())
        return [t for t in tokens if t]

    @staticmethod
    def build_casing_map(tokens: List[str]) -> CasingMap:
        """Map each lowercased token to its first original spelling."""
        casing: CasingMap = {}
        for token in tokens:
            casing.setdefault(turkish_lower(token), token)
        return casing

    @staticmethod
    def proper_casing(word: str, casing: CasingMap) -> Optional[str]:
        """The user's spelling of word if they typed it with capitals, else None."""
        original = casing.get(turkish_lower(word))
        if original and original != turkish_lower(original):
            return original
        return None

    @staticmethod
    def is_verb_like(word: str, vocabulary: TitleVocabulary) -> bool:
        """True for verbs, verb-suffixed words, question particles and polite fillers."""
        low = turkish_lower(TitleService.clean_token(word))
        if not low:
            return False
        return (
            low in vocabulary.common_verbs
            or low.endswith(vocabulary.verb_suffixes)
            or low in vocabulary.question_particles
            or low in vocabulary.polite_fillers
        )

    @staticmethod
    def strip_trailing_verbs(phrase: str, vocabulary: TitleVocabulary) -> str:
        """Drop trailing verb-like tokens so the phrase does not end mid-sentence."""
        parts = [p for p in (TitleService.clean_token(w) for w in (phrase or "").split()) if p]
        while parts and TitleService.is_verb_like(parts[-1], vocabulary):
            parts.pop()
        return " ".join(parts)

    @staticmethod
    def score_token(token: str, vocabulary: TitleVocabulary) -> int:
        """Score a single token; negative scores mark words a title should not contain."""
        scores = TitleService.TOKEN_SCORES
        low = turkish_lower(token)
        if low in vocabulary.stopwords or low in vocabulary.common_verbs:
            return scores["excluded"]

        score = 0
        if low.endswith(vocabulary.verb_suffixes):
            score += scores["verb_suffix"]
        if low in vocabulary.time_location:
            score += scores["time_location"]
        if low in vocabulary.finance:
            score += scores["finance"]
        if low in vocabulary.weather:
            score += scores["weather"]
        if len(low) >= 4:
            score += scores["long_word"]
        if _UPPERCASE_RE.search(token):
            score += scores["uppercase"]
        return score

    @staticmethod
    def pick_keyword_window(
        tokens: List[str],
        vocabulary: TitleVocabulary,
        max_words: int = MAX_WINDOW_WORDS
    ) -> str:
        """
        Find the contiguous window of at most max_words tokens with the best total score.

        Window lengths are tried longest first and the search stops at the first length
        whose best window scores above zero, so longer windows win positive ties.

        Args:
            tokens: Cleaned tokens of the original message
            vocabulary: Word tables to score with
            max_words: Largest window length

        Returns:
            The winning window without stopwords, or the first three raw tokens
        """
        n = len(tokens)
        if n == 0:
            return ""

        lowered = [turkish_lower(t) for t in tokens]
        scores = [TitleService.score_token(t, vocabulary) for t in tokens]
        topic_bonus = TitleService.TOKEN_SCORES["topic_in_window"]

        best_start, best_len, best_score = 0, min(max_words, n), float("-inf")
        for length in range(min(max_words, n), 0, -1):
            for start in range(n - length + 1):
                window = range(start, start + length)
                total = sum(scores[i] for i in window)
                total += sum(topic_bonus for i in window if vocabulary.is_topic_word(lowered[i]))
                if total > best_score:
                    best_start, best_len, best_score = start, length, total
            if best_score > 0:
                break

        words = [
            t for t in tokens[best_start:best_start + best_len]
            if turkish_lower(t) not in vocabulary.stopwords
        ]
        if not words:
            return " ".join(tokens[:3])
        return " ".join(words)

    @staticmethod
    def locative_suffix(word: str) -> str:
        """Turkish locative case ending (da/de/ta/te) for a place name."""
        low = turkish_lower(word)
        last_vowel = next((ch for ch in reversed(low) if ch in "aıoueiöü"), "a")
        vowel = "e" if last_vowel in "eiöü" else "a"
        consonant = "t" if low and low[-1] in "çfhkpsşt" else "d"
        return consonant + vowel

    @staticmethod
    def special_case_title(lowered: List[str], vocabulary: TitleVocabulary) -> Optional[str]:
        """Hand-composed titles for topic combinations the scorer handles badly."""
        words = set(lowered)
        has_stock = bool(words & vocabulary.stock)
        has_crypto = bool(words & vocabulary.crypto)
        has_investment = bool(words & vocabulary.investment)
        if vocabulary.finance_title and (
            (has_stock and has_crypto) or (has_investment and (has_crypto or has_stock))
        ):
            return vocabulary.finance_title

        has_weather = bool(words & vocabulary.weather)
        # Prefix match so inflected forms like "istanbulda" still count
        city = next(
            (c for w in lowered for c in sorted(vocabulary.cities) if w.startswith(c)),
            None
        )
        if has_weather and city:
            place = f"{capitalize_first(city)}'{TitleService.locative_suffix(city)}"
            title = vocabulary.weather_title.format(city=place)
            time_phrase = next(
                (phrase for trigger, phrase in vocabulary.time_phrases if trigger in words),
                None
            )
            return f"{time_phrase} {title}" if time_phrase else title

        return None

    @staticmethod
    def is_question(message: str, vocabulary: TitleVocabulary) -> bool:
        """True if the message has a question mark or a question particle."""
        if "?" in (message or ""):
            return True
        return any(
            turkish_lower(TitleService.clean_token(t)) in vocabulary.question_particles
            for t in (message or "").split()
        )

    @staticmethod
    def _is_degenerate(result: str, vocabulary: TitleVocabulary) -> bool:
        low = turkish_lower(result)
        return (
            len(result) < 2
            or low in vocabulary.degenerate_candidates
            or low.startswith(vocabulary.degenerate_prefixes)
        )

    @staticmethod
    def _strip_polite_prefix(candidate: str, vocabulary: TitleVocabulary) -> str:
        parts = candidate.split(maxsplit=1)
        if len(parts) == 2 and turkish_lower(parts[0]) in vocabulary.polite_prefixes:
            return parts[1]
        return candidate

    @staticmethod
    def _apply_casing(words: List[str], casing: CasingMap) -> List[str]:
        cased = []
        for i, word in enumerate(words):
            proper = TitleService.proper_casing(word, casing)
            if proper:
                cased.append(proper)
            elif i == 0:
                cased.append(capitalize_first(word))
            else:
                cased.append(turkish_lower(word))
        return cased

    @staticmethod
    def _collapse_repeats(words: List[str], vocabulary: TitleVocabulary) -> List[str]:
        repeatable = {vocabulary.about_word, vocabulary.question_word}
        collapsed: List[str] = []
        for word in words:
            low = turkish_lower(word)
            if collapsed and low in repeatable and turkish_lower(collapsed[-1]) == low:
                continue
            collapsed.append(word)
        return collapsed

    @staticmethod
    def _finalize(
        message: str,
        tokens: List[str],
        casing: CasingMap,
        candidate: Optional[str],
        vocabulary: TitleVocabulary
    ) -> str:
        """Run the cleanup pipeline over one candidate (None means heuristic only)."""
        cand = TitleService.normalize_candidate(candidate)
        cand = TitleService._strip_polite_prefix(cand, vocabulary)
        cand = cand.strip("\" " + Patterns.TOKEN_QUOTES)
        cand = TitleService.strip_trailing_verbs(cand, vocabulary)

        words = [
            w for w in cand.split()
            if turkish_lower(w) not in vocabulary.stopwords
            and turkish_lower(w) not in vocabulary.common_verbs
        ]
        result = " ".join(words)

        if TitleService._is_degenerate(result, vocabulary):
            result = TitleService.pick_keyword_window(tokens, vocabulary)
        result = TitleService.strip_trailing_verbs(result, vocabulary)

        special = TitleService.special_case_title([turkish_lower(t) for t in tokens], vocabulary)
        if special:
            return " ".join(special.split()[:MAX_TITLE_WORDS])

        parts = result.split()
        if parts and TitleService.is_question(message, vocabulary):
            low = turkish_lower(result)
            if vocabulary.question_word not in low and vocabulary.about_word not in low:
                if len(parts) == 1:
                    parts += [vocabulary.about_word, vocabulary.question_word]
                else:
                    parts.append(vocabulary.question_word)

        words = TitleService._apply_casing(parts[:MAX_TITLE_WORDS], casing)
        return " ".join(TitleService._collapse_repeats(words, vocabulary))

    @staticmethod
    def is_acceptable(title: str, vocabulary: TitleVocabulary) -> bool:
        """A usable title has 1-5 tokens and does not end in a verb-like token."""
        parts = title.split()
        return 0 < len(parts) <= MAX_TITLE_WORDS and not TitleService.is_verb_like(parts[-1], vocabulary)

    @staticmethod
    def derive_title(
        message: str,
        candidate: Optional[str] = None,
        vocabulary: Optional[TitleVocabulary] = None
    ) -> str:
        """
        Derive a short title from a user message.

        Args:
            message: Raw user message
            candidate: Optional model-suggested title
            vocabulary: Word tables (default: the configured vocabulary)

        Returns:
            A 1-5 word title that never ends in a verb-like token
        """
        vocabulary = vocabulary or get_vocabulary()
        tokens = TitleService.tokenize(message)
        casing = TitleService.build_casing_map(tokens)

        title = TitleService._finalize(message, tokens, casing, candidate, vocabulary)
        if not TitleService.is_acceptable(title, vocabulary):
            app_logger.debug(f"Title '{title}' rejected, recomputing from message tokens")
            title = TitleService._finalize(message, tokens, casing, None, vocabulary)
        if not TitleService.is_acceptable(title, vocabulary):
            title = vocabulary.default_title

        return title

    @staticmethod
    async def request_candidate(client, model: str, message: str) -> Optional[str]:
        """Ask the LLM for a title suggestion. Failures are logged and yield None."""
        try:
            response = await client.chat(
                model=model,
                messages=[
                    {"role": "system", "content": TITLE_SYSTEM_PROMPT},
                    {"role": "user", "content": message},
                ],
                options={"num_predict": 32, "temperature": 0.0},
            )
            text = response['message']['content'] or ""
        except Exception as e:
            app_logger.warning(f"Title model call failed, using heuristic only: {e}")
            return None

        return text.strip() or None

    @staticmethod
    async def generate_title(client, model: str, message: str) -> str:
        """Title for message, with a model suggestion when TITLE_USE_MODEL is on."""
        candidate = None
        if Config.TITLE_USE_MODEL:
            candidate = await TitleService.request_candidate(client, model, message)

        title = TitleService.derive_title(message, candidate)
        app_logger.info(f"Title derived: '{title}' (model candidate: {candidate is not None})")
        return title
