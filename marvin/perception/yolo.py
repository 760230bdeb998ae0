import logging
from typing import List

from marvin.bus.messages import Detection

logger = logging.getLogger(__name__)


class YOLODetector:
    """Object detector service backed by an ultralytics YOLO model."""

    def __init__(self, model_name="yolov8n.pt", conf: float = 0.35):
        from ultralytics import YOLO

        logger.info("Loading YOLO model %s...", model_name)
        self.model = YOLO(model_name)
        self.conf = conf
        logger.info("YOLO ready.")

    def detect(self, frame) -> List[Detection]:
        # BGR straight from OpenCV, which is what ultralytics assumes for arrays
        results = self.model.predict(frame, conf=self.conf, verbose=False)

        detections: List[Detection] = []
        for r in results:
            if r.boxes is None:
                continue

            boxes = r.boxes.xyxy.cpu().numpy()
            classes = r.boxes.cls.cpu().numpy()
            scores = r.boxes.conf.cpu().numpy()

            for i in range(len(boxes)):
                x1, y1, x2, y2 = (float(v) for v in boxes[i])
                detections.append(Detection(
                    label=self.model.names[int(classes[i])],
                    confidence=float(scores[i]),
                    bbox=(x1, y1, x2 - x1, y2 - y1),
                ))

        # Sort highest confidence first
        detections.sort(key=lambda d: d.confidence, reverse=True)
        return detections
