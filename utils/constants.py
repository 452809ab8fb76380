"""
Constants and system prompts for the Sohbet Bridge application.
"""

BASE_SYSTEM_PROMPT = """Sen Türkçe konuşan yardımcı bir sohbet asistanısın.
Bugünün tarihi: {current_date}"""

# Deep mode adds reasoning guidance and the user's memory summary
THINK_SYSTEM_PROMPT = """Sen Türkçe konuşan yardımcı bir sohbet asistanısın.
Bugünün tarihi: {current_date}
{memory_context}
Cevap vermeden önce soruyu adım adım düşün, sonra net ve eksiksiz bir cevap ver.
Kullanıcı hakkında bildiklerini yalnızca ilgili olduğunda kullan."""

TITLE_SYSTEM_PROMPT = """Sen bir başlık üretim aracısın.
Kullanıcının metnini analiz et ve 1-5 kelimelik Türkçe başlık üret.

KURAL:
Sadece başlığı yaz. Başka hiçbir şey yazma.
Emoji kullanma. Tırnak kullanma. Sonuna noktalama koyma.
Fiilleri ve dolgu kelimelerini at, isim öbeği tercih et.
Özel isimlerin ve teknik terimlerin yazımını koru (React, useEffect, Türkiye, İstanbul).

ÖRNEKLER:
Bana Türkiye hakkında bilgi verebilir misin? -> Türkiye hakkında bilgi
Sence Türkiye bir ülke mi? -> Türkiye hakkında soru
İş görüşmesi için hangi kıyafetleri tercih etmeliyim? -> İş görüşmesi kıyafet tercihi
Ülkemizde elektrik sorununu nasıl çözebiliriz? -> Elektrik sorunu çözümleri"""

MEMORY_SYSTEM_PROMPT = """Sen bir hafıza özetleyicisisin.
Aşağıda kullanıcı hakkında mevcut hafıza özeti ve son konuşma var.
Kullanıcı hakkındaki KALICI bilgileri (isim, meslek, tercihler, hedefler, devam eden projeler) güncelle.

KURALLAR:
- Her bilgi "- " ile başlayan ayrı bir satır olsun.
- Geçici sorular, selamlaşmalar ve asistanın cevapları hafızaya girmesin.
- Çelişen eski bilgileri yenisiyle değiştir.
- Toplam {max_chars} karakteri geçme.
- Sadece güncellenmiş listeyi yaz, başka açıklama yapma."""

MEMORY_CONTEXT_TEMPLATE = """Kullanıcı hakkında bildiklerin:
{memory}
"""

MEMORY_USER_TEMPLATE = """MEVCUT HAFIZA:
{memory}

SON KONUŞMA:
{conversation}"""

QUOTA_EXCEEDED_MESSAGE = "Günlük limit aşıldı. Yarın tekrar deneyin."
GENERATION_FAILED_MESSAGE = "Model çağrısı başarısız."
TITLE_REQUIRED_MESSAGE = "Request must include { firstMessage: string }"

# Used when every configured model is missing or exhausted
LAST_RESORT_MODEL = "llama3.2:1b"

# Answers shorter than this, or a bare role word, count as no answer
MIN_ANSWER_CHARS = 3
UNUSABLE_ANSWERS = frozenset({"model", "user", "assistant"})


class ModeBudget:
    """Maximum generated tokens per mode."""
    FAST, THINK = 256, 1024


class Patterns:
    """Regular expression patterns for title text handling."""
    # Letters (ASCII, Latin-1, Turkish), digits, whitespace and light punctuation
    SAFE_CHARS = r"A-Za-zÀ-ÖØ-öø-ÿÇĞİÖŞÜçğıöşü0-9\s\-.,'’"
    UNSAFE_CHAR = rf"[^{SAFE_CHARS}]"
    UNSAFE_TOKEN_CHAR = r"[^A-Za-zÀ-ÖØ-öø-ÿÇĞİÖŞÜçğıöşü0-9'’]"
    QUOTES = r"[“”\"„«»]+"
    # Single quotes that wrap a word rather than mark a suffix (Ankara'nın)
    TOKEN_QUOTES = "'’‘"
    TRAILING_PUNCTUATION = r"[.?!;:]+$"
    UPPERCASE = r"[A-ZÇĞİÖŞÜ]"
