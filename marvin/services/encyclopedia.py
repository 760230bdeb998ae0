from urllib.parse import quote

from marvin.services import http
from marvin.services.errors import ServiceError

WIKIPEDIA_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary/"


class EncyclopediaClient:
    service = "encyclopedia"

    def __init__(self, timeout: float = http.DEFAULT_TIMEOUT, base_url: str = WIKIPEDIA_SUMMARY_URL):
        self.timeout = timeout
        self.base_url = base_url

    def summary(self, topic: str) -> str:
        """Plain-text summary for `topic`. Raises ServiceError when there is none."""
        r = http.get(self.base_url + quote(topic, safe=""), self.service, self.timeout)
        data = http.json_body(r, self.service)
        extract = data.get("extract") if isinstance(data, dict) else None
        if not extract:
            raise ServiceError(self.service, f"no extract for {topic!r}")
        return extract
