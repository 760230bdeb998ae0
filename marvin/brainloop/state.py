from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional

from marvin.storage.kv import PRO_MODE_KEY


@dataclass
class SessionState:
    """
    Process-wide mode flags, owned explicitly and passed to whoever needs them.

    listening      -> speech input (voice/stt_whisper.py)
    webcam_active  -> perception loop manager only
    emotion_active -> perception loop manager only
    pro_mode       -> this object, persisted under PRO_MODE_KEY
    """
    listening: bool = False
    webcam_active: bool = False
    emotion_active: bool = False
    pro_mode: bool = False
    visible: bool = True
    input_mode: str = "voice"
    store: Optional[Any] = field(default=None, repr=False)

    @classmethod
    def load(cls, store) -> SessionState:
        # only pro mode survives a reload; everything else starts off
        saved = store.get(PRO_MODE_KEY, False)
        return cls(pro_mode=saved is True or saved == "true", store=store)

    def set_pro_mode(self, enabled: bool) -> None:
        self.pro_mode = bool(enabled)
        if self.store is not None:
            self.store.set(PRO_MODE_KEY, self.pro_mode)

    def set_input_mode(self, mode: str) -> None:
        if mode not in ("voice", "text"):
            raise ValueError(f"unknown input mode: {mode}")
        self.input_mode = mode

    def shutdown(self) -> None:
        self.visible = False
