from unittest.mock import Mock, patch

import pytest
import requests

from marvin.brain.online_llm import OnlineBrain
from marvin.services.encyclopedia import EncyclopediaClient
from marvin.services.errors import ServiceError
from marvin.services.news import NewsClient, first_rss_title
from marvin.services.translate import TranslationClient, language_code
from marvin.services.weather import WeatherClient, WeatherReport, parse_report

RSS = """<?xml version="1.0"?>
<rss><channel><title>BBC News</title>
<item><title>First story</title></item>
<item><title>Second story</title></item>
</channel></rss>"""


def response(status=200, text="", json_data=None):
    r = Mock()
    r.status_code = status
    r.ok = status < 400
    r.text = text
    if json_data is None:
        r.json.side_effect = ValueError("no json")
    else:
        r.json.return_value = json_data
    return r


# ---------------- transport ----------------

def test_timeout_is_retryable():
    with patch("requests.request", side_effect=requests.Timeout("slow")):
        with pytest.raises(ServiceError) as exc:
            WeatherClient(timeout=2).current("Paris")
    assert exc.value.retryable
    assert exc.value.service == "weather"
    assert "timed out after 2s" in exc.value.detail


def test_connection_error_is_retryable():
    with patch("requests.request", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(ServiceError) as exc:
            EncyclopediaClient().summary("python")
    assert exc.value.retryable


@pytest.mark.parametrize("status,retryable", [(404, False), (429, False), (503, True)])
def test_http_status_errors(status, retryable):
    with patch("requests.request", return_value=response(status)):
        with pytest.raises(ServiceError) as exc:
            EncyclopediaClient().summary("python")
    assert exc.value.detail == f"API error: {status}"
    assert exc.value.retryable is retryable


# ---------------- weather ----------------

def test_weather_report():
    with patch("requests.request", return_value=response(text="Sunny +25°C ↗10km/h\n")) as req:
        report = WeatherClient(timeout=3).current("New York")
    assert report == WeatherReport("Sunny", "+25°C", "↗10km/h")
    req.assert_called_once_with("GET", "https://wttr.in/New%20York?format=%C+%t+%w", timeout=3)


def test_weather_needs_exactly_three_tokens():
    with pytest.raises(ServiceError):
        parse_report("Partly cloudy +20°C ↗5km/h")
    with pytest.raises(ServiceError):
        parse_report("")


# ---------------- encyclopedia ----------------

def test_encyclopedia_extract():
    data = {"title": "Python", "extract": "Python is a programming language."}
    with patch("requests.request", return_value=response(json_data=data)) as req:
        assert EncyclopediaClient().summary("alan turing") == "Python is a programming language."
    assert req.call_args[0][1] == "https://en.wikipedia.org/api/rest_v1/page/summary/alan%20turing"


def test_encyclopedia_without_extract():
    with patch("requests.request", return_value=response(json_data={"title": "x"})):
        with pytest.raises(ServiceError):
            EncyclopediaClient().summary("x")


def test_encyclopedia_malformed_json():
    with patch("requests.request", return_value=response(text="<html>")):
        with pytest.raises(ServiceError) as exc:
            EncyclopediaClient().summary("x")
    assert exc.value.detail == "malformed JSON body"


# ---------------- translation ----------------

def test_language_codes():
    assert language_code("Hindi") == "hi"
    assert language_code(" japanese ") == "ja"
    assert language_code("klingon") is None


def test_translate():
    data = {"responseData": {"translatedText": "Bonjour"}}
    with patch("requests.request", return_value=response(json_data=data)) as req:
        assert TranslationClient().translate("good morning", "fr") == "Bonjour"
    assert req.call_args.kwargs["params"] == {"q": "good morning", "langpair": "en|fr"}


def test_translate_missing_field():
    with patch("requests.request", return_value=response(json_data={"responseStatus": 403})):
        with pytest.raises(ServiceError):
            TranslationClient().translate("good morning", "fr")


# ---------------- news ----------------

def test_first_rss_title():
    assert first_rss_title(RSS) == "First story"
    assert first_rss_title("<rss><channel></channel></rss>") is None
    with pytest.raises(ServiceError):
        first_rss_title("not xml <")


def test_news_primary_source():
    data = {"status": "success", "results": [{"title": "Top story"}, {"title": "Other"}]}
    with patch("requests.request", return_value=response(json_data=data)) as req:
        assert NewsClient(api_key="k").latest_headline() == "Top story"
    assert req.call_count == 1
    assert req.call_args.kwargs["params"]["apikey"] == "k"


def test_news_primary_empty_results():
    with patch("requests.request", return_value=response(json_data={"results": []})):
        assert NewsClient(api_key="k").latest_headline() is None


def test_news_falls_back_to_rss_without_key():
    with patch("requests.request", return_value=response(text=RSS)) as req:
        assert NewsClient().latest_headline() == "First story"
    assert req.call_args.kwargs["params"] == {"url": "https://feeds.bbci.co.uk/news/rss.xml"}


def test_news_falls_back_to_rss_on_error():
    with patch("requests.request", side_effect=[response(500), response(text=RSS)]):
        assert NewsClient(api_key="k").latest_headline() == "First story"


def test_news_both_sources_fail():
    with patch("requests.request", side_effect=requests.ConnectionError("offline")):
        with pytest.raises(ServiceError):
            NewsClient(api_key="k").latest_headline()


# ---------------- language model ----------------

def test_llm_answer():
    data = {"choices": [{"message": {"content": "  Forty-two.  "}}]}
    with patch("requests.request", return_value=response(json_data=data)) as req:
        assert OnlineBrain("http://proxy.local/llm").ask("meaning of life?") == "Forty-two."
    assert req.call_args[0] == ("POST", "http://proxy.local/llm")
    assert req.call_args.kwargs["json"] == {"message": "meaning of life?"}


@pytest.mark.parametrize("body", [{}, {"choices": []}, {"choices": [{"message": {"content": "  "}}]}])
def test_llm_malformed_body(body):
    with patch("requests.request", return_value=response(json_data=body)):
        with pytest.raises(ServiceError):
            OnlineBrain("http://proxy.local/llm").ask("hi")
