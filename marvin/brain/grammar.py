"""
Ordered command grammar.

Rules are tried top to bottom and the first match wins. Several triggers
overlap ("weather" vs "temperature", "how does" vs bare "how", "good" vs
anything containing the word good), so the order below is behavior.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from marvin.bus.messages import Intent, ParsedCommand
from marvin.services.translate import language_code

Extract = Callable[[str], Dict[str, str]]


def _no_params(text: str) -> Dict[str, str]:
    return {}


@dataclass(frozen=True)
class Rule:
    intent: Intent
    matches: Callable[[str], bool]
    extract: Extract = _no_params


# ---------------- matchers ----------------

def has(*phrases: str):
    return lambda text: any(p in text for p in phrases)


def has_all(*phrases: str):
    return lambda text: all(p in text for p in phrases)


def starts(*prefixes: str):
    return lambda text: text.startswith(prefixes)


def word(*patterns: str):
    compiled = [re.compile(p) for p in patterns]
    return lambda text: any(c.search(text) for c in compiled)


# ---------------- extractors ----------------

TRANSLATE_RE = re.compile(r"translate (.+?) to (.+)", re.IGNORECASE)
ROUTE_RE = re.compile(r"easiest route from (.+?) to (.+)", re.IGNORECASE)
LOCATION_RE = re.compile(r"\bin\s+(.+)$")

TICKET_MODES = ("bus", "train", "flight", "movie")


def strip_first(text: str, phrase: str) -> str:
    return text.replace(phrase, "", 1).strip()


def _translate(text):
    m = TRANSLATE_RE.search(text)
    if not m:
        return {}
    target = m.group(2).strip().lower()
    params = {"sourceText": m.group(1).strip(), "targetLanguage": target}
    code = language_code(target)
    if code:
        params["languageCode"] = code
    return params


def _search(text):
    return {"query": strip_first(text, "search for")}


def _youtube(text):
    return {"query": strip_first(strip_first(text, "play"), "on youtube")}


def _ticket_mode(text):
    for mode in TICKET_MODES:
        if f"book tickets for {mode}" in text:
            return mode
    return None


def _tickets(text):
    return {"ticketMode": _ticket_mode(text)}


def _introduce(text):
    return {"name": text.split("introduce yourself to", 1)[1].strip()}


def _route(text):
    m = ROUTE_RE.search(text)
    if not m:
        return {}
    return {"from": m.group(1).strip(), "to": m.group(2).strip()}


def _weather(text):
    m = LOCATION_RE.search(text)
    if m and m.group(1).strip():
        return {"location": m.group(1).strip()}
    return {}


def _wikipedia(text):
    return {"query": strip_first(text, "wikipedia search")}


def _who_is(text):
    return {"query": strip_first(text, "who is")}


def _what_is(text):
    return {"query": strip_first(text, "what is")}


def _how_does(text):
    return {"query": strip_first(re.sub(r"^how (does|do)", "", text), "work")}


def _how_to(text):
    return {"query": strip_first(re.sub(r"^how (to|can i)", "", text), "do")}


def _how(text):
    return {"query": strip_first(text, "how")}


RULES: Tuple[Rule, ...] = (
    Rule(Intent.VISION_ON, has("turn on vision", "activate vision", "start camera")),
    Rule(Intent.DESCRIBE_VISION, has("what do you see")),
    Rule(Intent.VISION_OFF, has("turn off vision", "stop camera")),
    Rule(Intent.EMOTION_START, has("start emotion detection", "detect emotions")),
    Rule(Intent.EMOTION_STOP, has("stop emotion detection", "end emotion detection")),
    Rule(Intent.EMOTION_QUERY, has("how am i feeling", "what is my emotion", "analyze my emotions")),
    Rule(Intent.GREETING, word(r"\bhello\b", r"\bhi\b")),
    Rule(Intent.TRANSLATE, has("translate"), _translate),
    Rule(Intent.SEARCH_WEB, starts("search for"), _search),
    Rule(Intent.WHO_ARE_YOU, has("who are you", "what are you", "tell me about yourself")),
    Rule(Intent.CREATOR, has("creator", "created you")),
    Rule(Intent.JOKE, has("tell me a joke")),
    Rule(Intent.THANKS, has("thank you", "thanks")),
    Rule(Intent.HOW_ARE_YOU, word(r"\bhow are you\b", r"\bhow is it going\b")),
    Rule(Intent.SHUTDOWN, has("shutdown", "goodbye")),
    Rule(Intent.ACKNOWLEDGE, word(r"\bgood\b", r"\bgreat\b")),
    Rule(Intent.NEWS, has("latest news", "news updates")),
    Rule(Intent.PLAY_ON_YOUTUBE, has_all("play", "on youtube"), _youtube),
    Rule(Intent.ROOM_TEMPERATURE, has("room temperature")),
    Rule(Intent.BOOK_TICKETS, lambda text: _ticket_mode(text) is not None, _tickets),
    Rule(Intent.INTRODUCE_TO, has("introduce yourself to"), _introduce),
    Rule(Intent.ROUTE_BETWEEN, has("easiest route from"), _route),
    Rule(Intent.TIME_OR_DATE, has("time", "date")),
    Rule(Intent.WEATHER, has("weather", "temperature"), _weather),
    Rule(Intent.ENCYCLOPEDIA_LOOKUP, has_all("wikipedia", "search"), _wikipedia),
    Rule(Intent.ENCYCLOPEDIA_LOOKUP, starts("who is"), _who_is),
    Rule(Intent.ENCYCLOPEDIA_LOOKUP, starts("what is"), _what_is),
    Rule(Intent.ENCYCLOPEDIA_LOOKUP, starts("how does", "how do"), _how_does),
    Rule(Intent.ENCYCLOPEDIA_LOOKUP, starts("how to", "how can i"), _how_to),
    Rule(Intent.ENCYCLOPEDIA_LOOKUP, starts("how"), _how),
)

# Phrases that keep a command on the local path even in pro mode (substring test).
BASIC_COMMANDS = (
    "turn on vision", "activate vision", "start camera", "what do you see", "turn off vision", "stop camera",
    "start emotion detection", "detect emotions", "stop emotion detection", "end emotion detection",
    "how am i feeling", "what is my emotion",
    "hello", "hi", "translate", "search for", "who are you", "what are you", "tell me about yourself",
    "creator", "created you", "tell me a joke", "thank you", "thanks", "how are you", "how is it going",
    "shutdown", "goodbye", "good", "great", "latest news", "news updates", "play", "on youtube",
    "room temperature", "book tickets", "introduce yourself to", "easiest route from", "time", "date",
    "weather", "temperature", "wikipedia search", "who is", "what is", "how does", "how do", "how to", "how can i",
)


def normalize(text: str) -> str:
    return (text or "").strip().lower()


def is_basic_command(text: str) -> bool:
    text = normalize(text)
    return any(phrase in text for phrase in BASIC_COMMANDS)


def classify(text: str) -> ParsedCommand:
    raw = text or ""
    text = normalize(raw)
    for rule in RULES:
        if rule.matches(text):
            params = {k: v for k, v in rule.extract(text).items() if v is not None}
            return ParsedCommand(intent=rule.intent, raw=raw, params=params)
    return ParsedCommand(intent=Intent.FALLBACK, raw=raw)
