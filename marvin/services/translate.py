from typing import Optional

from marvin.services import http
from marvin.services.errors import ServiceError

MYMEMORY_URL = "https://api.mymemory.translated.net/get"

LANGUAGES = {
    "hindi": "hi",
    "tamil": "ta",
    "kannada": "kn",
    "french": "fr",
    "spanish": "es",
    "german": "de",
    "japanese": "ja",
}


def language_code(name: str) -> Optional[str]:
    return LANGUAGES.get((name or "").strip().lower())


class TranslationClient:
    service = "translation"

    def __init__(self, timeout: float = http.DEFAULT_TIMEOUT, url: str = MYMEMORY_URL):
        self.timeout = timeout
        self.url = url

    def translate(self, text: str, target_code: str, source_code: str = "en") -> str:
        params = {"q": text, "langpair": f"{source_code}|{target_code}"}
        r = http.get(self.url, self.service, self.timeout, params=params)
        data = http.json_body(r, self.service)
        try:
            translated = data["responseData"]["translatedText"]
        except (KeyError, TypeError) as e:
            raise ServiceError(self.service, "missing responseData.translatedText") from e
        if not translated:
            raise ServiceError(self.service, "empty translation")
        return translated
