import asyncio
import logging
import random
import webbrowser
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from marvin.brain import narrator
from marvin.brain.grammar import classify, is_basic_command, normalize
from marvin.bus.messages import Intent, ParsedCommand
from marvin.services.errors import ServiceError
from marvin.utils.camera import CameraError
from marvin.vision.scene_summary import describe

logger = logging.getLogger(__name__)

GOOGLE_SEARCH_URL = "https://www.google.com/search?q={query}"
YOUTUBE_LUCKY_URL = "https://www.google.com/search?q=site:youtube.com+{query}&btnI"
MAPS_ROUTE_URL = "https://www.google.com/maps/dir/?api=1&origin={origin}&destination={destination}"

TICKET_SITES = {
    "bus": "https://www.redbus.in",
    "train": "https://www.irctc.co.in",
    "flight": "https://www.expedia.com",
    "movie": "https://in.bookmyshow.com/explore/home/bengaluru",
}

SHUTDOWN_DELAY = 1.0


class CommandRouter:
    """
    Turns one input string into one handler run.

    Every handler ends in responder.say(); the value returned by
    classify_and_dispatch() is the last thing said.
    """

    def __init__(self, session, responder, perception, encyclopedia, weather, news, translator, llm,
                 open_url=webbrowser.open, clock=datetime.now, rng: Optional[random.Random] = None,
                 default_city: str = "Bangalore", shutdown_delay: float = SHUTDOWN_DELAY):
        self.session = session
        self.responder = responder
        self.perception = perception
        self.encyclopedia = encyclopedia
        self.weather = weather
        self.news = news
        self.translator = translator
        self.llm = llm
        self.open_url = open_url
        self.clock = clock
        self.rng = rng or random.Random()
        self.default_city = default_city
        self.shutdown_delay = shutdown_delay

        self._handlers = {
            Intent.VISION_ON: self._vision_on,
            Intent.DESCRIBE_VISION: self._describe_vision,
            Intent.VISION_OFF: self._vision_off,
            Intent.EMOTION_START: self._emotion_start,
            Intent.EMOTION_STOP: self._emotion_stop,
            Intent.EMOTION_QUERY: self._emotion_query,
            Intent.GREETING: self._fixed(narrator.GREETING),
            Intent.TRANSLATE: self._translate,
            Intent.SEARCH_WEB: self._search_web,
            Intent.WHO_ARE_YOU: self._fixed(narrator.WHO_ARE_YOU),
            Intent.CREATOR: self._fixed(narrator.CREATOR),
            Intent.JOKE: self._joke,
            Intent.THANKS: self._fixed(narrator.THANKS),
            Intent.HOW_ARE_YOU: self._fixed(narrator.HOW_ARE_YOU),
            Intent.SHUTDOWN: self._shutdown,
            Intent.ACKNOWLEDGE: self._fixed(narrator.ACKNOWLEDGE),
            Intent.NEWS: self._news,
            Intent.PLAY_ON_YOUTUBE: self._play_on_youtube,
            Intent.ROOM_TEMPERATURE: self._fixed(narrator.ROOM_TEMPERATURE),
            Intent.BOOK_TICKETS: self._book_tickets,
            Intent.INTRODUCE_TO: self._introduce,
            Intent.ROUTE_BETWEEN: self._route,
            Intent.TIME_OR_DATE: self._time_or_date,
            Intent.WEATHER: self._weather,
            Intent.ENCYCLOPEDIA_LOOKUP: self._encyclopedia,
            Intent.FALLBACK: self._fallback,
        }

    # ---------------- entry points ----------------

    async def classify_and_dispatch(self, text: str) -> str:
        text = normalize(text)

        # pro mode: anything that isn't a basic command goes to the LLM first
        if self.session.pro_mode and not is_basic_command(text):
            answer = await self._ask_llm_quietly(text)
            if answer is not None:
                return await self.responder.say(answer)

        command = classify(text)
        logger.info("Command %r -> %s %s", text, command.intent.value, command.params or "")
        return await self._handlers[command.intent](command)

    async def query_llm(self, message: str) -> str:
        """Direct LLM question. Failures are reported to the user, not swallowed."""
        if not self.session.pro_mode:
            return await self.responder.say(narrator.PRO_MODE_REQUIRED)
        try:
            answer = await asyncio.to_thread(self.llm.ask, message)
        except ServiceError as e:
            logger.warning("LLM request failed: %s", e)
            answer = narrator.llm_unavailable(e.detail)
        return await self.responder.say(answer)

    async def set_pro_mode(self, enabled: bool) -> str:
        self.session.set_pro_mode(enabled)
        logger.info("Pro mode %s", "on" if enabled else "off")
        return await self.responder.say(narrator.PRO_MODE_ON if enabled else narrator.PRO_MODE_OFF)

    async def stop_all_detection(self) -> str:
        await self.perception.stop_camera()
        return await self.responder.say(narrator.ALL_DETECTION_OFF)

    def welcome(self) -> str:
        self.responder.show(narrator.WELCOME)
        return narrator.WELCOME

    async def _ask_llm_quietly(self, text: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self.llm.ask, text)
        except ServiceError as e:
            logger.warning("LLM fallback failed, using basic commands: %s", e)
            return None

    # ---------------- camera / perception ----------------

    async def _vision_on(self, command: ParsedCommand) -> str:
        try:
            started = await self.perception.start_camera()
        except CameraError as e:
            logger.warning("Camera unavailable (%s): %s", e.kind.value, e.detail)
            return await self.responder.say(narrator.camera_error(e.kind))
        return await self.responder.say(narrator.CAMERA_ON if started else narrator.CAMERA_ALREADY_ON)

    async def _vision_off(self, command: ParsedCommand) -> str:
        await self.perception.stop_camera()
        return await self.responder.say(narrator.CAMERA_OFF)

    async def _describe_vision(self, command: ParsedCommand) -> str:
        return await self.responder.say(describe(self.perception.current_detections()))

    async def _emotion_start(self, command: ParsedCommand) -> str:
        if self.perception.emotion_active:
            return await self.responder.say(narrator.EMOTION_ALREADY_ON)

        if not self.perception.camera_active:
            await self.responder.say(narrator.EMOTION_STARTING_CAMERA)
        try:
            camera_started = await self.perception.start_emotion_detection()
        except CameraError as e:
            logger.warning("Camera unavailable for emotion detection (%s): %s", e.kind.value, e.detail)
            return await self.responder.say(narrator.camera_error(e.kind))

        if camera_started:
            await self.responder.say(narrator.CAMERA_ON)
        return await self.responder.say(narrator.EMOTION_ON)

    async def _emotion_stop(self, command: ParsedCommand) -> str:
        await self.perception.stop_emotion_detection()
        return await self.responder.say(narrator.EMOTION_OFF)

    async def _emotion_query(self, command: ParsedCommand) -> str:
        if not self.perception.emotion_active:
            return await self.responder.say(narrator.EMOTION_INACTIVE)
        return await self.responder.say(narrator.emotion_report(self.perception.current_emotion()))

    # ---------------- small talk ----------------

    def _fixed(self, text: str):
        async def handler(command: ParsedCommand) -> str:
            return await self.responder.say(text)
        return handler

    async def _joke(self, command: ParsedCommand) -> str:
        return await self.responder.say(narrator.joke(self.rng))

    async def _time_or_date(self, command: ParsedCommand) -> str:
        return await self.responder.say(narrator.time_and_date(self.clock()))

    async def _introduce(self, command: ParsedCommand) -> str:
        name = command.param("name")
        if not name:
            return await self.responder.say(narrator.INTRODUCE_EMPTY)
        return await self.responder.say(narrator.introduce(name))

    async def _shutdown(self, command: ParsedCommand) -> str:
        # hide shortly after the goodbye starts; the process keeps running
        asyncio.get_running_loop().call_later(self.shutdown_delay, self.session.shutdown)
        return await self.responder.say(narrator.GOODBYE)

    async def _fallback(self, command: ParsedCommand) -> str:
        if self.session.pro_mode:
            answer = await self._ask_llm_quietly(normalize(command.raw))
            if answer is not None:
                return await self.responder.say(answer)
        return await self.responder.say(narrator.FALLBACK)

    # ---------------- browser actions ----------------

    async def _speak_then_open(self, first: str, second: str, url: str) -> str:
        # both lines finish before the page opens
        await self.responder.say(first)
        last = await self.responder.say(second)
        self.open_url(url)
        return last

    async def _search_web(self, command: ParsedCommand) -> str:
        query = command.param("query")
        if not query:
            return await self.responder.say(narrator.SEARCH_EMPTY)
        url = GOOGLE_SEARCH_URL.format(query=quote(query, safe=""))
        return await self._speak_then_open(narrator.search_preparing(query), narrator.SEARCH_DONE, url)

    async def _play_on_youtube(self, command: ParsedCommand) -> str:
        query = command.param("query")
        if not query:
            return await self.responder.say(narrator.YOUTUBE_EMPTY)
        url = YOUTUBE_LUCKY_URL.format(query=quote(query, safe=""))
        return await self._speak_then_open(narrator.youtube_preparing(query), narrator.YOUTUBE_DONE, url)

    async def _book_tickets(self, command: ParsedCommand) -> str:
        mode = command.param("ticketMode")
        said = await self.responder.say(narrator.tickets_opened(mode))
        self.open_url(TICKET_SITES[mode])
        return said

    async def _route(self, command: ParsedCommand) -> str:
        origin, destination = command.param("from"), command.param("to")
        if not origin or not destination:
            return await self.responder.say(narrator.ROUTE_HELP)
        url = MAPS_ROUTE_URL.format(origin=quote(origin, safe=""), destination=quote(destination, safe=""))
        said = await self.responder.say(narrator.route(origin, destination))
        self.open_url(url)
        return said

    # ---------------- remote services ----------------

    async def _translate(self, command: ParsedCommand) -> str:
        text = command.param("sourceText")
        language = command.param("targetLanguage")
        if not text or not language:
            return await self.responder.say(narrator.TRANSLATE_HELP)

        code = command.param("languageCode")
        if not code:
            return await self.responder.say(narrator.unsupported_language(language))

        try:
            translated = await asyncio.to_thread(self.translator.translate, text, code)
        except ServiceError as e:
            logger.warning("Translation failed: %s", e)
            return await self.responder.say(narrator.TRANSLATE_FAILED)
        return await self.responder.say(narrator.translation(language, text, translated))

    async def _weather(self, command: ParsedCommand) -> str:
        location = command.param("location", self.default_city)
        try:
            report = await asyncio.to_thread(self.weather.current, location)
        except ServiceError as e:
            logger.warning("Weather lookup failed: %s", e)
            return await self.responder.say(narrator.weather_failed(location))
        return await self.responder.say(narrator.weather(location, report))

    async def _news(self, command: ParsedCommand) -> str:
        try:
            title = await asyncio.to_thread(self.news.latest_headline)
        except ServiceError as e:
            logger.warning("News unavailable: %s", e)
            return await self.responder.say(narrator.NEWS_FAILED)
        if not title:
            return await self.responder.say(narrator.NEWS_EMPTY)
        return await self.responder.say(narrator.headline(title))

    async def _encyclopedia(self, command: ParsedCommand) -> str:
        query = command.param("query")
        if not query:
            return await self.responder.say(narrator.ENCYCLOPEDIA_MISS)
        try:
            extract = await asyncio.to_thread(self.encyclopedia.summary, query)
        except ServiceError as e:
            logger.warning("Encyclopedia lookup failed: %s", e)
            return await self.responder.say(narrator.ENCYCLOPEDIA_MISS)
        return await self.responder.say(extract)
