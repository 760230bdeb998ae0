from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Intent(str, Enum):
    VISION_ON = "vision_on"
    VISION_OFF = "vision_off"
    DESCRIBE_VISION = "describe_vision"
    EMOTION_START = "emotion_start"
    EMOTION_STOP = "emotion_stop"
    EMOTION_QUERY = "emotion_query"
    GREETING = "greeting"
    TRANSLATE = "translate"
    SEARCH_WEB = "search_web"
    WHO_ARE_YOU = "who_are_you"
    CREATOR = "creator"
    JOKE = "joke"
    THANKS = "thanks"
    HOW_ARE_YOU = "how_are_you"
    SHUTDOWN = "shutdown"
    ACKNOWLEDGE = "acknowledge"
    NEWS = "news"
    PLAY_ON_YOUTUBE = "play_on_youtube"
    ROOM_TEMPERATURE = "room_temperature"
    BOOK_TICKETS = "book_tickets"
    INTRODUCE_TO = "introduce_to"
    ROUTE_BETWEEN = "route_between"
    TIME_OR_DATE = "time_or_date"
    WEATHER = "weather"
    ENCYCLOPEDIA_LOOKUP = "encyclopedia_lookup"
    FALLBACK = "fallback"


class Emotion(str, Enum):
    NEUTRAL = "neutral"
    HAPPY = "happy"
    FOCUSED = "focused"
    CALM = "calm"
    SURPRISED = "surprised"
    SAD = "sad"
    ANGRY = "angry"
    FEARFUL = "fearful"
    DISGUSTED = "disgusted"


class ParsedCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    intent: Intent
    raw: str
    params: Dict[str, str] = {}

    def param(self, name: str, default: str = "") -> str:
        return self.params.get(name, default)


class Detection(BaseModel):
    label: str
    confidence: float = Field(1.0, ge=0.0, le=1.0)
    bbox: Tuple[float, float, float, float]  # x, y, w, h

    def display(self) -> str:
        return f"{self.label} ({round(self.confidence * 100)}%)"


class EmotionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: Optional[Emotion] = None
    confidence: int = 0
    face_detected: bool = False


NO_FACE = EmotionState()


class DetectionLogEntry(BaseModel):
    timestamp: str
    detections: List[Detection] = []


class ConversationMessage(BaseModel):
    sender: str
    text: str


# ---- HTTP surface ----

class CommandRequest(BaseModel):
    text: str


class CommandReply(BaseModel):
    say: str
    responses: List[str] = []


class AskRequest(BaseModel):
    message: str


class ProModeRequest(BaseModel):
    enabled: bool


class PerceptionSnapshot(BaseModel):
    webcam_active: bool
    emotion_active: bool
    detections: List[Detection] = []
    detection_text: str
    emotion: EmotionState
