import logging
import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    data_dir: Path = Path("data")

    camera_index: int = 0
    frame_width: int = 640
    frame_height: int = 480

    disable_yolo: bool = False
    yolo_weights: str = "yolov8n.pt"
    yolo_conf: float = 0.35

    http_timeout: float = 10.0
    llm_proxy_url: str = "http://localhost:8888/.netlify/functions/groq-proxy"
    newsdata_api_key: str = ""
    default_city: str = "Bangalore"

    whisper_model: str = "base"
    listen_seconds: float = 4.0

    log_level: str = "INFO"

    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def store_path(self) -> Path:
        return self.data_dir / "marvin_store.json"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_dir=Path(os.environ.get("MARVIN_DATA_DIR", "data")),
            camera_index=int(os.environ.get("MARVIN_CAMERA_INDEX", "0")),
            frame_width=int(os.environ.get("MARVIN_FRAME_WIDTH", "640")),
            frame_height=int(os.environ.get("MARVIN_FRAME_HEIGHT", "480")),
            disable_yolo=_env_bool("MARVIN_DISABLE_YOLO"),
            yolo_weights=os.environ.get("MARVIN_YOLO_WEIGHTS", "yolov8n.pt"),
            yolo_conf=float(os.environ.get("MARVIN_YOLO_CONF", "0.35")),
            http_timeout=float(os.environ.get("MARVIN_HTTP_TIMEOUT", "10")),
            llm_proxy_url=os.environ.get("MARVIN_LLM_PROXY_URL", cls.llm_proxy_url),
            newsdata_api_key=os.environ.get("MARVIN_NEWSDATA_API_KEY", ""),
            default_city=os.environ.get("MARVIN_DEFAULT_CITY", "Bangalore"),
            whisper_model=os.environ.get("MARVIN_WHISPER_MODEL", "base"),
            listen_seconds=float(os.environ.get("MARVIN_LISTEN_SECONDS", "4")),
            log_level=os.environ.get("MARVIN_LOG_LEVEL", "INFO").upper(),
            host=os.environ.get("MARVIN_HOST", "127.0.0.1"),
            port=int(os.environ.get("MARVIN_PORT", "8000")),
        )


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
