from typing import NamedTuple
from urllib.parse import quote

from marvin.services import http
from marvin.services.errors import ServiceError

WTTR_URL = "https://wttr.in/"
# condition, temperature, wind
WTTR_FORMAT = "%C+%t+%w"


class WeatherReport(NamedTuple):
    condition: str
    temperature: str
    wind: str


def parse_report(text: str) -> WeatherReport:
    tokens = (text or "").split()
    if len(tokens) != 3:
        raise ServiceError("weather", f"expected 3 tokens, got {len(tokens)}: {text!r}")
    return WeatherReport(*tokens)


class WeatherClient:
    service = "weather"

    def __init__(self, timeout: float = http.DEFAULT_TIMEOUT, base_url: str = WTTR_URL):
        self.timeout = timeout
        self.base_url = base_url

    def current(self, location: str) -> WeatherReport:
        # format is passed literally; requests would escape the % and + signs
        url = f"{self.base_url}{quote(location, safe='')}?format={WTTR_FORMAT}"
        r = http.get(url, self.service, self.timeout)
        return parse_report(r.text)
