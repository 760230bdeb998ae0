from dataclasses import dataclass
from typing import Optional

from marvin.brain.online_llm import OnlineBrain
from marvin.brain.router import CommandRouter
from marvin.brain.speaker import Conversation, Responder
from marvin.brainloop.state import SessionState
from marvin.config import Settings
from marvin.perception.emotion import EmotionSimulator
from marvin.perception.loops import PerceptionLoopManager
from marvin.services.encyclopedia import EncyclopediaClient
from marvin.services.news import NewsClient
from marvin.services.translate import TranslationClient
from marvin.services.weather import WeatherClient
from marvin.storage.detection_log import DetectionLog
from marvin.storage.kv import JsonStore
from marvin.utils.camera import Camera


@dataclass
class Assistant:
    settings: Settings
    session: SessionState
    conversation: Conversation
    responder: Responder
    perception: PerceptionLoopManager
    router: CommandRouter
    detection_log: DetectionLog

    async def handle(self, text: str) -> str:
        """Show what the user said, then route it."""
        self.responder.heard(text)
        return await self.router.classify_and_dispatch(text)

    async def close(self) -> None:
        await self.perception.stop_camera()


def build_detector(settings: Settings):
    if settings.disable_yolo:
        from marvin.perception.yolo_stub import NullDetector
        return NullDetector()
    from marvin.perception.yolo import YOLODetector
    return YOLODetector(settings.yolo_weights, conf=settings.yolo_conf)


def build_assistant(settings: Optional[Settings] = None, voice=None, conversation: Optional[Conversation] = None,
                    store=None, camera=None, detector=None, **router_overrides) -> Assistant:
    """Wire every component. Anything passed in replaces the real implementation."""
    settings = settings or Settings.from_env()
    store = store if store is not None else JsonStore(settings.store_path)
    session = SessionState.load(store)
    conversation = conversation or Conversation()
    responder = Responder(conversation, voice=voice)
    detection_log = DetectionLog(store)

    perception = PerceptionLoopManager(
        session,
        camera or Camera(settings.camera_index, settings.frame_width, settings.frame_height),
        detector if detector is not None else build_detector(settings),
        simulator=EmotionSimulator(),
        detection_log=detection_log,
    )

    timeout = settings.http_timeout
    services = dict(
        encyclopedia=EncyclopediaClient(timeout),
        weather=WeatherClient(timeout),
        news=NewsClient(settings.newsdata_api_key, timeout),
        translator=TranslationClient(timeout),
        llm=OnlineBrain(settings.llm_proxy_url, timeout),
    )
    services.update(router_overrides)
    router = CommandRouter(session, responder, perception, default_city=settings.default_city, **services)

    return Assistant(settings, session, conversation, responder, perception, router, detection_log)
