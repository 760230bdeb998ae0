def describe(detections) -> str:
    """Spoken answer to "what do you see"."""
    if not detections:
        return "I'm not detecting any objects right now."
    return "I can see the following objects: " + ", ".join(d.label for d in detections) + "."


def detection_text(detections) -> str:
    """Status line for the display: "person (91%), chair (55%)"."""
    if not detections:
        return "No objects detected"
    return ", ".join(d.display() for d in detections)


def label_set(detections):
    return frozenset(d.label for d in detections)
