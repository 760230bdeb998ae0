"""
Emotion "detection" for the camera view.

This is a simulation, not inference. A brightness check stands in for a
face detector, and the label comes from a weighted random draw that
mostly keeps the previous label so the on-screen value stays steady.
"""

import random
from typing import Optional

import numpy as np

from marvin.bus.messages import NO_FACE, Emotion, EmotionState

LUMINANCE_MIN = 50
LUMINANCE_MAX = 200

KEEP_PROBABILITY = 0.7

# Order matters: cumulative sampling walks this list.
EMOTION_WEIGHTS = (
    (Emotion.NEUTRAL, 0.40),
    (Emotion.HAPPY, 0.25),
    (Emotion.FOCUSED, 0.15),
    (Emotion.CALM, 0.10),
    (Emotion.SURPRISED, 0.05),
    (Emotion.SAD, 0.03),
    (Emotion.ANGRY, 0.02),
)

FALLBACK_EMOTION = Emotion.NEUTRAL
FALLBACK_CONFIDENCE = 80


def mean_luminance(frame) -> float:
    pixels = np.asarray(frame, dtype=np.float64)
    if pixels.ndim == 3:
        pixels = pixels[:, :, :3]
    return float(pixels.mean())


def face_present(frame) -> bool:
    """Treat "reasonable lighting" as a face being there."""
    if frame is None or np.asarray(frame).size == 0:
        return False
    lum = mean_luminance(frame)
    return LUMINANCE_MIN < lum < LUMINANCE_MAX


class EmotionSimulator:
    def __init__(self, rng: Optional[random.Random] = None, initial: Emotion = Emotion.NEUTRAL):
        self.rng = rng or random.Random()
        # last drawn label; survives no-face frames
        self.last_label: Optional[Emotion] = initial

    def draw_new(self) -> EmotionState:
        r = self.rng.random()
        cumulative = 0.0
        for emotion, weight in EMOTION_WEIGHTS:
            cumulative += weight
            if r <= cumulative:
                confidence = int(70 + self.rng.random() * 25)
                return EmotionState(label=emotion, confidence=confidence, face_detected=True)
        return EmotionState(label=FALLBACK_EMOTION, confidence=FALLBACK_CONFIDENCE, face_detected=True)

    def next_state(self) -> EmotionState:
        if self.last_label is not None and self.rng.random() < KEEP_PROBABILITY:
            confidence = int(75 + self.rng.random() * 20)
            state = EmotionState(label=self.last_label, confidence=confidence, face_detected=True)
        else:
            state = self.draw_new()
        self.last_label = state.label
        return state

    def analyze(self, frame) -> EmotionState:
        if not face_present(frame):
            return NO_FACE
        return self.next_state()
