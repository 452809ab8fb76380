"""
Word tables used by the title heuristic.
The scoring code only sees a TitleVocabulary; swap the table to change language or tune it.
"""
import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import FrozenSet, Tuple


@dataclass(frozen=True)
class TitleVocabulary:
    """Category -> word set mapping consumed by TitleService."""
    stopwords: FrozenSet[str] = frozenset()
    common_verbs: FrozenSet[str] = frozenset()
    verb_suffixes: Tuple[str, ...] = ()
    question_particles: FrozenSet[str] = frozenset()
    polite_fillers: FrozenSet[str] = frozenset()
    polite_prefixes: FrozenSet[str] = frozenset()
    time_location: FrozenSet[str] = frozenset()
    finance: FrozenSet[str] = frozenset()
    weather: FrozenSet[str] = frozenset()
    cities: FrozenSet[str] = frozenset()
    stock: FrozenSet[str] = frozenset()
    crypto: FrozenSet[str] = frozenset()
    investment: FrozenSet[str] = frozenset()
    # (trigger word, phrase) pairs, first match wins
    time_phrases: Tuple[Tuple[str, str], ...] = ()
    degenerate_candidates: FrozenSet[str] = frozenset()
    degenerate_prefixes: Tuple[str, ...] = ()
    finance_title: str = ""
    weather_title: str = "{city} hava durumu"
    question_word: str = "soru"
    about_word: str = "hakkında"
    default_title: str = "Yeni Sohbet"
    topic_sets: Tuple[str, ...] = field(default=("time_location", "finance", "weather"))

    def is_topic_word(self, word: str) -> bool:
        """True if word belongs to any bonus-carrying topic set."""
        return any(word in getattr(self, name) for name in self.topic_sets)

    @classmethod
    def from_dict(cls, data: dict) -> "TitleVocabulary":
        """Build a vocabulary from plain JSON-style data; unknown keys are ignored."""
        kwargs = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if f.name == "time_phrases":
                kwargs[f.name] = tuple((str(k), str(v)) for k, v in value)
            elif f.name in ("verb_suffixes", "degenerate_prefixes", "topic_sets"):
                kwargs[f.name] = tuple(str(v) for v in value)
            elif isinstance(value, str):
                kwargs[f.name] = value
            else:
                kwargs[f.name] = frozenset(str(v) for v in value)
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: str) -> "TitleVocabulary":
        """Load a vocabulary table from a JSON file."""
        with Path(path).open(encoding="utf-8") as fh:
            return cls.from_dict(json.load(fh))


TURKISH_VOCABULARY = TitleVocabulary(
    stopwords=frozenset({
        've', 'ile', 'da', 'de', 'mi', 'mı', 'mu', 'mü', 'bir', 'bu', 'o', 'ben', 'sen', 'siz', 'biz',
        'bana', 'sence', 'lütfen', 'acaba', 'neden', 'kadar', 'için', 'gibi', 'merhaba', 'selam', 'please',
    }),
    common_verbs=frozenset({
        'olmak', 'etmek', 'yapmak', 'sormak', 'almak', 'gitmek', 'gelmek', 'bilmek', 'görmek',
        'kullanmak', 'istemek', 'düşünmek', 'vermek', 'söylemek',
    }),
    verb_suffixes=(
        'mak', 'mek', 'ma', 'me', 'maya', 'meye', 'mayı', 'meyi', 'ması', 'mesi', 'mış', 'miş',
        'iyor', 'ıyor', 'di', 'dı', 'du', 'dü', 'acak', 'ecek', 'muş', 'müş',
        'ebil', 'abilir', 'ebilir', 'ebiliriz', 'verebilir', 'verir', 'ver',
    ),
    question_particles=frozenset({
        'mi', 'mı', 'mu', 'mü', 'misin', 'mısın', 'musun', 'müsün',
        'miyiz', 'miydi', 'midir', 'misiniz', 'mısınız', 'miydiniz',
    }),
    polite_fillers=frozenset({'lütfen', 'lutfen', 'lgt'}),
    polite_prefixes=frozenset({'bana', 'sence', 'lütfen', 'merhaba', 'selam'}),
    time_location=frozenset({
        'yarın', 'bugün', 'sabah', 'akşam', 'öğle', 'istanbul', 'ankara', 'izmir', 'antalya',
        'hafta', 'haftasonu', 'dün', 'geçen', 'şimdi',
    }),
    finance=frozenset({'hisse', 'kripto', 'borsa', 'yatırım', 'döviz', 'altın', 'coin'}),
    weather=frozenset({'hava', 'sıcaklık', 'rüzgar', 'yağmur', 'yağış', 'bulut', 'sis'}),
    cities=frozenset({'istanbul', 'ankara', 'izmir', 'antalya'}),
    stock=frozenset({'hisse', 'hisseler'}),
    crypto=frozenset({'kripto', 'coin'}),
    investment=frozenset({'yatırım', 'yatir', 'borsa'}),
    time_phrases=(('geçen', 'Geçen hafta'), ('yarın', 'Yarın'), ('bugün', 'Bugün')),
    degenerate_candidates=frozenset({'model', 'user', 'assistant'}),
    degenerate_prefixes=('düşünüyorum', 'düşünmek', 'düşünüyor', 'verebilir', 'vermek', 'söyle', 'söylemek'),
    finance_title="Hisse ve kripto yatırım tercihi",
    weather_title="{city} hava durumu",
    question_word="soru",
    about_word="hakkında",
    default_title="Yeni Sohbet",
)


def load_vocabulary(path: str = "") -> TitleVocabulary:
    """The configured vocabulary file if given, otherwise the built-in Turkish table."""
    if path:
        return TitleVocabulary.from_json(path)
    return TURKISH_VOCABULARY
