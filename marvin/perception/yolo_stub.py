"""
Stub detector used when YOLO is disabled (MARVIN_DISABLE_YOLO=1), e.g. on a
machine without torch. Returns no detections, so the loop still runs and
emotion simulation still works.
"""


class NullDetector:
    """No-op object detection."""

    def __init__(self, model_name="yolov8n.pt", conf: float = 0.35):
        pass

    def detect(self, frame):
        return []
