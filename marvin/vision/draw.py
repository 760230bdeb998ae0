import cv2

DETECTION_COLOR = (0, 255, 0)

# emotion -> hex, converted to BGR when drawing
EMOTION_COLORS = {
    "happy": "#00ff88",
    "sad": "#0095ff",
    "angry": "#ff4444",
    "surprised": "#ffaa00",
    "fearful": "#aa00ff",
    "disgusted": "#8844ff",
    "neutral": "#00c6ff",
    "focused": "#ff6b00",
    "calm": "#00b894",
}
DEFAULT_EMOTION_COLOR = "#00c6ff"


def hex_to_bgr(value: str):
    value = value.lstrip("#")
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return (b, g, r)


def emotion_color(emotion) -> str:
    key = getattr(emotion, "value", emotion)
    return EMOTION_COLORS.get(key, DEFAULT_EMOTION_COLOR)


def draw_detections(frame, detections):
    for det in detections:
        x, y, w, h = (int(v) for v in det.bbox)
        cv2.rectangle(frame, (x, y), (x + w, y + h), DETECTION_COLOR, 2)
        cv2.putText(frame, det.display(), (x, y - 5 if y > 10 else 10),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, DETECTION_COLOR, 2)
    return frame


def emotion_box(width: int, height: int):
    """Fixed face box in the upper middle of the frame. It does not track anything."""
    box_w = width * 0.4
    box_h = height * 0.5
    x = (width - box_w) / 2
    y = (height - box_h) / 3
    return x, y, box_w, box_h


def draw_emotion_box(frame, state):
    h, w = frame.shape[:2]
    x, y, bw, bh = (int(v) for v in emotion_box(w, h))
    color = hex_to_bgr(emotion_color(state.label))
    cv2.rectangle(frame, (x, y), (x + bw, y + bh), color, 3)
    label = getattr(state.label, "value", state.label)
    cv2.putText(frame, f"{label} ({state.confidence}%)", (x, y - 10 if y > 20 else 20),
                cv2.FONT_HERSHEY_SIMPLEX, 0.7, color, 2)
    return frame


def frame_to_jpeg(frame) -> bytes:
    ok, buf = cv2.imencode(".jpg", frame)
    if not ok:
        raise RuntimeError("cv2.imencode failed")
    return buf.tobytes()
