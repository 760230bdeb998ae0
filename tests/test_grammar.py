import pytest

from marvin.brain.grammar import classify, is_basic_command
from marvin.bus.messages import Intent


@pytest.mark.parametrize("text,intent", [
    ("turn on vision", Intent.VISION_ON),
    ("please start camera", Intent.VISION_ON),
    ("what do you see", Intent.DESCRIBE_VISION),
    ("turn off vision", Intent.VISION_OFF),
    ("stop camera", Intent.VISION_OFF),
    ("start emotion detection", Intent.EMOTION_START),
    ("stop emotion detection", Intent.EMOTION_STOP),
    ("how am i feeling", Intent.EMOTION_QUERY),
    ("hello there", Intent.GREETING),
    ("translate good morning to hindi", Intent.TRANSLATE),
    ("search for python tutorials", Intent.SEARCH_WEB),
    ("who are you", Intent.WHO_ARE_YOU),
    ("who created you", Intent.CREATOR),
    ("tell me a joke", Intent.JOKE),
    ("thanks a lot", Intent.THANKS),
    ("how are you", Intent.HOW_ARE_YOU),
    ("goodbye", Intent.SHUTDOWN),
    ("that's great", Intent.ACKNOWLEDGE),
    ("latest news", Intent.NEWS),
    ("play despacito on youtube", Intent.PLAY_ON_YOUTUBE),
    ("room temperature", Intent.ROOM_TEMPERATURE),
    ("book tickets for train", Intent.BOOK_TICKETS),
    ("introduce yourself to alice", Intent.INTRODUCE_TO),
    ("easiest route from mg road to airport", Intent.ROUTE_BETWEEN),
    ("what time is it", Intent.TIME_OR_DATE),
    ("weather in paris", Intent.WEATHER),
    ("wikipedia search python", Intent.ENCYCLOPEDIA_LOOKUP),
    ("who is alan turing", Intent.ENCYCLOPEDIA_LOOKUP),
    ("what is photosynthesis", Intent.ENCYCLOPEDIA_LOOKUP),
    ("how does a rainbow work", Intent.ENCYCLOPEDIA_LOOKUP),
    ("how to bake bread", Intent.ENCYCLOPEDIA_LOOKUP),
    ("how tall is everest", Intent.ENCYCLOPEDIA_LOOKUP),
    ("xyzzy", Intent.FALLBACK),
])
def test_intents(text, intent):
    assert classify(text).intent == intent


def test_earlier_rule_wins_on_overlap():
    # "weather" is checked before "what is"
    assert classify("what is the weather").intent == Intent.WEATHER
    # the acknowledgement rule sits above time/date
    assert classify("good morning what time is it").intent == Intent.ACKNOWLEDGE
    # "how are you" beats the bare "how" lookup
    assert classify("how are you doing").intent == Intent.HOW_ARE_YOU


def test_greeting_matches_whole_words_only():
    assert classify("hi marvin").intent == Intent.GREETING
    assert classify("translate good night to hindi").intent == Intent.TRANSLATE


def test_input_is_normalized():
    cmd = classify("  HELLO There ")
    assert cmd.intent == Intent.GREETING
    assert cmd.raw == "  HELLO There "


def test_translate_params():
    cmd = classify("translate good morning to hindi")
    assert cmd.params == {"sourceText": "good morning", "targetLanguage": "hindi", "languageCode": "hi"}


def test_translate_unknown_language_has_no_code():
    cmd = classify("translate good night to klingon")
    assert cmd.intent == Intent.TRANSLATE
    assert cmd.param("targetLanguage") == "klingon"
    assert "languageCode" not in cmd.params


def test_translate_without_target():
    cmd = classify("translate")
    assert cmd.intent == Intent.TRANSLATE
    assert cmd.params == {}


def test_lookup_queries():
    assert classify("what is photosynthesis").param("query") == "photosynthesis"
    assert classify("who is alan turing").param("query") == "alan turing"
    assert classify("wikipedia search python").param("query") == "python"
    assert classify("how does a rainbow work").param("query") == "a rainbow"
    assert classify("how to bake bread").param("query") == "bake bread"
    assert classify("how tall is everest").param("query") == "tall is everest"


def test_search_and_youtube_queries():
    assert classify("search for python tutorials").param("query") == "python tutorials"
    assert classify("play despacito on youtube").param("query") == "despacito"


def test_ticket_mode():
    for mode in ("bus", "train", "flight", "movie"):
        assert classify(f"book tickets for {mode}").param("ticketMode") == mode


def test_route_and_introduction():
    cmd = classify("easiest route from mg road to airport")
    assert cmd.param("from") == "mg road"
    assert cmd.param("to") == "airport"
    assert classify("introduce yourself to alice").param("name") == "alice"


def test_weather_location():
    assert classify("weather in new york").param("location") == "new york"
    assert classify("what is the weather").params == {}
    # "in" only counts as a whole word
    assert classify("weather for lincoln").params == {}


def test_basic_commands():
    assert is_basic_command("Tell me a joke")
    assert is_basic_command("what is love")
    assert not is_basic_command("explain quantum entanglement")
    assert not is_basic_command("")
