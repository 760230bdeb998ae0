import logging
import xml.etree.ElementTree as ET
from typing import Optional

from marvin.services import http
from marvin.services.errors import ServiceError

logger = logging.getLogger(__name__)

NEWSDATA_URL = "https://newsdata.io/api/1/news"
RSS_FEED_URL = "https://feeds.bbci.co.uk/news/rss.xml"
RSS_PROXY_URL = "https://api.allorigins.win/raw"


def first_rss_title(xml_text: str) -> Optional[str]:
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise ServiceError("news", f"malformed RSS: {e}") from e
    title = root.find(".//item/title")
    if title is None or not (title.text or "").strip():
        return None
    return title.text.strip()


class NewsClient:
    """
    Top headline from newsdata.io, falling back to the BBC RSS feed
    (fetched through a proxy) when the primary source fails.
    """

    service = "news"

    def __init__(self, api_key: str = "", timeout: float = http.DEFAULT_TIMEOUT):
        self.api_key = api_key
        self.timeout = timeout

    def primary_headline(self) -> Optional[str]:
        if not self.api_key:
            raise ServiceError(self.service, "no newsdata API key configured")
        params = {"apikey": self.api_key, "country": "in", "language": "en", "category": "top"}
        r = http.get(NEWSDATA_URL, self.service, self.timeout, params=params)
        data = http.json_body(r, self.service)
        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            return None
        try:
            return results[0]["title"]
        except (KeyError, TypeError) as e:
            raise ServiceError(self.service, "result without title") from e

    def fallback_headline(self) -> Optional[str]:
        r = http.get(RSS_PROXY_URL, self.service, self.timeout, params={"url": RSS_FEED_URL})
        return first_rss_title(r.text)

    def latest_headline(self) -> Optional[str]:
        """None means both sources answered but had nothing. Raises ServiceError if the fallback fails too."""
        try:
            return self.primary_headline()
        except ServiceError as e:
            logger.warning("Primary news source failed (%s), trying RSS fallback", e.detail)
            return self.fallback_headline()
