import pytest

from services.title_service import TitleService, turkish_lower, turkish_upper, capitalize_first
from utils.vocabulary import TURKISH_VOCABULARY, TitleVocabulary
from tests.fixtures.mock_clients import FlexibleLLMClient
from tests.fixtures.responses import TITLE_EXAMPLES
from tests.helpers import assert_title_shape


@pytest.mark.parametrize("message, expected", TITLE_EXAMPLES)
def test_derive_title_matches_known_examples(message, expected):
    """Given a known message, when derive_title runs without a model candidate, it should produce the reference title."""
    assert TitleService.derive_title(message) == expected


def test_derive_title_strips_trailing_verb_phrase_from_candidate():
    """Given a model candidate ending in a verb phrase, derive_title should drop the verbs."""
    title = TitleService.derive_title(
        "Bana Türkiye hakkında bilgi verebilir misin?",
        candidate='"Türkiye hakkında bilgi verebilir misin."'
    )
    assert title == "Türkiye hakkında bilgi"


def test_derive_title_lowercases_title_cased_candidate_except_proper_nouns():
    """Given a Title Cased candidate, only words the user capitalised keep their capitals."""
    title = TitleService.derive_title(
        "Bana Türkiye hakkında bilgi verebilir misin?",
        candidate="Türkiye Hakkında Bilgi"
    )
    assert title == "Türkiye hakkında bilgi"


def test_derive_title_preserves_mixed_case_technical_terms():
    """Given a message with a camelCase term, the title should keep its exact casing."""
    title = TitleService.derive_title("React useEffect örnekleri lazım")
    assert "useEffect" in title.split()
    assert title.split()[0] == "React"


def test_derive_title_adds_question_suffix_to_single_word_titles():
    """Given a yes/no question that reduces to one word, the title should read 'X hakkında soru'."""
    assert TitleService.derive_title("Sence Türkiye bir ülke mi?", candidate="Türkiye") == "Türkiye hakkında soru"


def test_derive_title_adds_question_word_to_multi_word_titles():
    """Given a question reducing to several words, only 'soru' should be appended."""
    title = TitleService.derive_title("Ankara'nın nüfusu ne kadar?", candidate="Ankara nüfus bilgisi")
    assert title == "Ankara nüfus bilgisi soru"


def test_derive_title_does_not_duplicate_question_words():
    """Given a candidate already containing 'soru', no second 'soru' is appended."""
    title = TitleService.derive_title("Matematik sorusu var mı?", candidate="Matematik soru soru")
    assert title == "Matematik soru"


def test_derive_title_finance_special_case_overrides_candidate():
    """Given stock and crypto vocabulary, the finance template should win over any candidate."""
    title = TitleService.derive_title("Hisse mi almalıyım kripto mu?", candidate="Bir şey")
    assert title == TURKISH_VOCABULARY.finance_title


def test_derive_title_weather_special_case_uses_vowel_harmony():
    """Given weather and a front-vowel city, the locative suffix should be 'de'."""
    assert TitleService.derive_title("izmirde bugün hava nasıl") == "Bugün İzmir'de hava durumu"


def test_derive_title_weather_without_time_token():
    """Given weather and a city but no time word, the template has no time prefix."""
    assert TitleService.derive_title("Ankara hava durumu") == "Ankara'da hava durumu"


def test_derive_title_returns_short_message_whole():
    """Given a message shorter than the window, the whole filtered message is returned."""
    assert TitleService.derive_title("Kuantum fiziği") == "Kuantum fiziği"


def test_derive_title_all_stopwords_falls_back_to_raw_tokens():
    """Given only stopwords, the first three raw tokens become the title."""
    assert TitleService.derive_title("ve bu da ile") == "Ve bu da"


def test_derive_title_uses_default_when_nothing_survives():
    """Given a message made only of verbs, the default title is returned."""
    assert TitleService.derive_title("gelmek gitmek") == TURKISH_VOCABULARY.default_title


def test_derive_title_rejects_degenerate_candidate():
    """Given a role-name candidate, the heuristic window should be used instead."""
    title = TitleService.derive_title("Elektrik faturası çok yüksek geldi", candidate="model")
    assert title == "Elektrik faturası çok yüksek"


@pytest.mark.parametrize("message, expected", [
    ("'Dune' kitabı", "Dune kitabı"),
    ("‘Dune’ kitabı nasıl", "Dune kitabı nasıl"),
])
def test_derive_title_drops_quotes_around_message_words(message, expected):
    """Given quoted words in the message, the title carries the words without their quotes."""
    assert TitleService.derive_title(message) == expected


def test_derive_title_drops_quotes_around_candidate_words():
    assert TitleService.derive_title("x", candidate="'Sefiller' romanı") == "Sefiller romanı"


def test_clean_token_keeps_suffix_apostrophes():
    assert TitleService.clean_token("'Ankara'nın'") == "Ankara'nın"
    assert TitleService.clean_token("İstanbul’da?") == "İstanbul’da"


def test_derive_title_caps_length_at_five_words():
    """Given a long candidate, only five words survive."""
    title = TitleService.derive_title(
        "Proje planı",
        candidate="Proje planı bütçe takvim ekip riskler kapsam"
    )
    assert len(title.split()) == 5


@pytest.mark.parametrize("message", [
    "Bana Türkiye hakkında bilgi verebilir misin?",
    "Ülkemizde elektrik sorununu nasıl çözebiliriz?",
    "İş görüşmesi için hangi kıyafetleri tercih etmeliyim?",
    "Bana React'ta useEffect hook'unu örneklerle açıklar mısın?",
    "geçen hafta ankara hava nasıldı",
    "lütfen lütfen lütfen",
    "?",
    "   ",
    "selam",
    "Yarın toplantıya gelecek misiniz",
])
def test_derive_title_output_is_well_formed(message):
    """Given any message, the title has 1-5 tokens and never ends in a verb-like token."""
    title = TitleService.derive_title(message)
    assert_title_shape(title)
    assert not TitleService.is_verb_like(title.split()[-1], TURKISH_VOCABULARY)


def test_pick_keyword_window_prefers_scored_words():
    """Given time and city words, the window should centre on them."""
    tokens = TitleService.tokenize("ve yarın ankara gezisi güzel olur")
    assert TitleService.pick_keyword_window(tokens, TURKISH_VOCABULARY) == "yarın ankara gezisi güzel"


def test_pick_keyword_window_empty_tokens():
    assert TitleService.pick_keyword_window([], TURKISH_VOCABULARY) == ""


def test_strip_trailing_verbs_removes_particles_and_fillers():
    """Given trailing particles, verbs and polite words, all are removed."""
    phrase = "Python dersi anlatır mısın lütfen"
    assert TitleService.strip_trailing_verbs(phrase, TURKISH_VOCABULARY) == "Python dersi anlatır"


def test_build_casing_map_first_occurrence_wins():
    casing = TitleService.build_casing_map(["İstanbul", "istanbul", "React", "REACT"])
    assert casing == {"istanbul": "İstanbul", "react": "React"}


def test_normalize_candidate_cleans_quotes_and_punctuation():
    raw = '“Yapay zeka\nve etik”?!'
    assert TitleService.normalize_candidate(raw) == "Yapay zeka ve etik"


def test_normalize_candidate_soft_caps_length():
    assert len(TitleService.normalize_candidate("kelime " * 40)) <= 80


@pytest.mark.parametrize("text, lower, upper", [
    ("İstanbul", "istanbul", "İSTANBUL"),
    ("IRMAK", "ırmak", "IRMAK"),
])
def test_turkish_case_mapping(text, lower, upper):
    assert turkish_lower(text) == lower
    assert turkish_upper(lower) == upper


def test_capitalize_first_uses_dotted_capital_i():
    assert capitalize_first("izmir") == "İzmir"


@pytest.mark.parametrize("word, suffix", [
    ("istanbul", "da"), ("izmir", "de"), ("ankara", "da"), ("sinop", "ta"), ("tokat", "ta"), ("köln", "de"),
])
def test_locative_suffix_follows_vowel_harmony(word, suffix):
    assert TitleService.locative_suffix(word) == suffix


def test_derive_title_with_custom_vocabulary():
    """Given a swapped vocabulary, scoring follows the new tables."""
    vocabulary = TitleVocabulary(stopwords=frozenset({"the", "a", "about"}), default_title="New Chat")
    assert TitleService.derive_title("the Moon landing about", vocabulary=vocabulary) == "Moon landing"


@pytest.mark.anyio
async def test_generate_title_uses_model_candidate(monkeypatch):
    """Given a model suggestion, generate_title should run it through the heuristic."""
    from config import Config
    monkeypatch.setattr(Config, "TITLE_USE_MODEL", True)
    client = FlexibleLLMClient(by_model={"title-model": "React useEffect örneği."})

    title = await TitleService.generate_title(client, "title-model", "Bana React'ta useEffect hook'unu örneklerle açıklar mısın?")

    assert title == "React useEffect örneği soru"
    assert client.call_history[0]["options"]["num_predict"] == 32


@pytest.mark.anyio
async def test_generate_title_survives_model_failure(monkeypatch):
    """Given a failing model, generate_title should fall back to the heuristic alone."""
    from config import Config
    monkeypatch.setattr(Config, "TITLE_USE_MODEL", True)
    client = FlexibleLLMClient(by_model={"title-model": ConnectionError("down")})

    title = await TitleService.generate_title(client, "title-model", "Bana Türkiye hakkında bilgi verebilir misin?")

    assert title == "Türkiye hakkında bilgi"


@pytest.mark.anyio
async def test_generate_title_skips_model_when_disabled(monkeypatch):
    from config import Config
    monkeypatch.setattr(Config, "TITLE_USE_MODEL", False)
    client = FlexibleLLMClient()

    await TitleService.generate_title(client, "title-model", "Kuantum fiziği")

    assert client.call_history == []
