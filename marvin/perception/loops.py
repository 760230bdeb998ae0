import asyncio
import logging
from typing import List, Optional

from marvin.bus.messages import NO_FACE, Detection, EmotionState
from marvin.perception.emotion import EmotionSimulator
from marvin.utils.camera import CameraError, CameraErrorKind
from marvin.vision.draw import draw_detections, draw_emotion_box
from marvin.vision.scene_summary import detection_text, label_set

logger = logging.getLogger(__name__)

FRAME_INTERVAL = 1 / 30        # next display refresh
DETECTION_RETRY_DELAY = 0.5    # after a missing frame or a detector failure
EMOTION_INTERVAL = 3.0


class PerceptionLoopManager:
    """
    Owns the webcam, the object-detection loop and the emotion loop.

    Both loops are asyncio tasks that check their flag before doing work and
    before sleeping again, so clearing the flag stops them within one tick.
    Stopping also cancels the tasks outright and releases the camera.
    """

    def __init__(self, session, camera, detector, simulator: Optional[EmotionSimulator] = None,
                 detection_log=None, frame_interval: float = FRAME_INTERVAL,
                 retry_delay: float = DETECTION_RETRY_DELAY,
                 emotion_interval: float = EMOTION_INTERVAL):
        self.session = session
        self.camera = camera
        self.detector = detector
        self.simulator = simulator or EmotionSimulator()
        self.detection_log = detection_log
        self.frame_interval = frame_interval
        self.retry_delay = retry_delay
        self.emotion_interval = emotion_interval

        self._detections: List[Detection] = []
        self._emotion: EmotionState = NO_FACE
        self._frame = None
        self._last_logged_labels = None

        self._detection_task: Optional[asyncio.Task] = None
        self._emotion_task: Optional[asyncio.Task] = None
        self._lifecycle = asyncio.Lock()

    # ---------------- state readers ----------------

    @property
    def camera_active(self) -> bool:
        return self.session.webcam_active

    @property
    def emotion_active(self) -> bool:
        return self.session.emotion_active

    def current_detections(self) -> List[Detection]:
        return list(self._detections)

    def current_emotion(self) -> EmotionState:
        return self._emotion

    def detection_text(self) -> str:
        return detection_text(self._detections)

    def current_frame(self):
        """Latest frame with detection boxes and, when a face is present, the emotion box."""
        if self._frame is None:
            return None
        frame = self._frame.copy()
        emotion = self._emotion
        if self.session.emotion_active and emotion.face_detected:
            draw_emotion_box(frame, emotion)
        return frame

    # ---------------- camera ----------------

    async def start_camera(self) -> bool:
        """Returns False if the camera was already running. Raises CameraError."""
        async with self._lifecycle:
            if self.session.webcam_active:
                return False
            await asyncio.to_thread(self.camera.open)
            self.session.webcam_active = True
            self._detection_task = asyncio.create_task(self._detection_loop(), name="marvin-detection")
            logger.info("Camera active, object detection running")
            return True

    async def stop_camera(self) -> bool:
        """Idempotent. Returns whether anything was running."""
        async with self._lifecycle:
            was_active = self.session.webcam_active or self.session.emotion_active
            await self._stop_emotion()
            self.session.webcam_active = False
            await _cancel(self._detection_task)
            self._detection_task = None
            await asyncio.to_thread(self.camera.release)
            self._detections = []
            self._frame = None
            if was_active:
                logger.info("Camera stopped")
            return was_active

    # ---------------- emotion ----------------

    async def start_emotion_detection(self) -> bool:
        """
        Starts the camera first when needed. Returns True if it had to.
        Raises CameraError and leaves emotion detection off if the camera fails.
        """
        camera_started = False
        if not self.session.webcam_active:
            camera_started = await self.start_camera()

        async with self._lifecycle:
            if self.session.emotion_active:
                return camera_started
            if not self.session.webcam_active:
                # camera was stopped between the two steps
                raise CameraError(CameraErrorKind.OTHER, "camera stopped before emotion detection started")
            self.session.emotion_active = True
            self._emotion_task = asyncio.create_task(self._emotion_loop(), name="marvin-emotion")
            logger.info("Emotion detection active")
        return camera_started

    async def stop_emotion_detection(self) -> bool:
        async with self._lifecycle:
            return await self._stop_emotion()

    async def _stop_emotion(self) -> bool:
        was_active = self.session.emotion_active
        self.session.emotion_active = False
        await _cancel(self._emotion_task)
        self._emotion_task = None
        self._emotion = NO_FACE
        if was_active:
            logger.info("Emotion detection stopped")
        return was_active

    # ---------------- loops ----------------

    async def _detection_loop(self):
        # only stop_camera() ends this loop; a failed iteration backs off and retries
        while self.session.webcam_active:
            try:
                published = await self._detect_once()
            except Exception:
                logger.warning("Object detection failed, retrying in %.1fs", self.retry_delay, exc_info=True)
                published = False
            if not self.session.webcam_active:
                break
            await asyncio.sleep(self.frame_interval if published else self.retry_delay)

    async def _detect_once(self) -> bool:
        frame = await asyncio.to_thread(self.camera.read)
        if frame is None:
            return False
        detections = await asyncio.to_thread(self.detector.detect, frame)
        if not self.session.webcam_active:
            return False
        self._publish_detections(frame, detections)
        return True

    def _publish_detections(self, frame, detections):
        self._detections = list(detections)
        self._frame = draw_detections(frame.copy(), self._detections)

        labels = label_set(self._detections)
        if self.detection_log is not None and labels and labels != self._last_logged_labels:
            self.detection_log.append(self._detections)
            self._last_logged_labels = labels

    async def _emotion_loop(self):
        while self.session.emotion_active and self.session.webcam_active:
            try:
                frame = await asyncio.to_thread(self.camera.read)
                if not (self.session.emotion_active and self.session.webcam_active):
                    break
                self._emotion = self.simulator.analyze(frame)
            except Exception:
                logger.warning("Emotion analysis failed, retrying in %.1fs", self.retry_delay, exc_info=True)
                await asyncio.sleep(self.retry_delay)
                continue
            await asyncio.sleep(self.emotion_interval)


async def _cancel(task: Optional[asyncio.Task]) -> None:
    if task is None or task.done():
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
