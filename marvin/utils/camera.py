import logging
import os
import platform
import threading
from enum import Enum

import cv2

logger = logging.getLogger(__name__)


class CameraErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    NOT_SUPPORTED = "not_supported"
    OTHER = "other"


class CameraError(Exception):
    def __init__(self, kind: CameraErrorKind, detail: str = ""):
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail


def _classify_open_failure(index: int) -> CameraErrorKind:
    if not cv2.videoio_registry.getCameraBackends():
        return CameraErrorKind.NOT_SUPPORTED
    if platform.system().lower() == "linux":
        dev = f"/dev/video{index}"
        if not os.path.exists(dev):
            return CameraErrorKind.NOT_FOUND
        if not os.access(dev, os.R_OK | os.W_OK):
            return CameraErrorKind.PERMISSION_DENIED
        return CameraErrorKind.OTHER
    return CameraErrorKind.NOT_FOUND


def open_camera(index: int = 0, width: int = 640, height: int = 480):
    try:
        cap = cv2.VideoCapture(index)
    except PermissionError as e:
        raise CameraError(CameraErrorKind.PERMISSION_DENIED, str(e)) from e
    except cv2.error as e:
        raise CameraError(CameraErrorKind.NOT_SUPPORTED, str(e)) from e

    if not cap.isOpened():
        cap.release()
        kind = _classify_open_failure(index)
        raise CameraError(kind, f"Could not open camera index {index}")

    # Try to set resolution (not guaranteed depending on camera)
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
    return cap


def read_frame(cap):
    ok, frame = cap.read()
    if not ok or frame is None:
        return None
    return frame


class Camera:
    """
    One webcam handle. read() and release() are serialized so a release
    never lands in the middle of a read running on a worker thread.
    """

    def __init__(self, index: int = 0, width: int = 640, height: int = 480):
        self.index = index
        self.width = width
        self.height = height
        self._cap = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def open(self) -> None:
        with self._lock:
            if self._cap is None:
                self._cap = open_camera(self.index, self.width, self.height)
                logger.info("Camera %s opened", self.index)

    def read(self):
        with self._lock:
            if self._cap is None:
                return None
            return read_frame(self._cap)

    def release(self) -> None:
        with self._lock:
            cap, self._cap = self._cap, None
        if cap is not None:
            cap.release()
            logger.info("Camera %s released", self.index)
