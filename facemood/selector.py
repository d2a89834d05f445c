"""
Emotion selection with a fixed confidence threshold.
"""
from __future__ import annotations
from typing import Mapping, Optional
import logging

from facemood.models import EmotionState, SelectionResult

logger = logging.getLogger(__name__)

EMOTION_THRESHOLD = 0.4


def select_emotion(
    expressions: Mapping[str, float],
    previous: Optional[str],
    previous_confidence: float = 0.0,
) -> SelectionResult:
    """
    Pick the most confident label and decide whether it replaces `previous`.

    A change is reported only when the best confidence is strictly above
    EMOTION_THRESHOLD and the label differs from `previous`; otherwise the
    returned state keeps `previous` and `previous_confidence`. An empty mapping
    selects "neutral" at 0.0. Equal confidences keep the first label seen.
    """
    best_label = "neutral"
    best = 0.0
    for label, confidence in expressions.items():
        if confidence > best:
            best_label = label
            best = float(confidence)

    changed = best > EMOTION_THRESHOLD and best_label != previous
    if changed:
        state = EmotionState(label=best_label, confidence=best, confirmed=True)
    else:
        state = EmotionState(label=previous, confidence=previous_confidence,
                             confirmed=previous is not None)
    return SelectionResult(label=best_label, confidence=best, changed=changed, emotion=state)


class EmotionSelector:
    """Holds the reported EmotionState; the only place it is mutated."""
    def __init__(self):
        self.state = EmotionState()

    def update(self, expressions: Mapping[str, float]) -> SelectionResult:
        result = select_emotion(expressions, self.state.label, self.state.confidence)
        if result.changed:
            logger.debug(f"[selector] {self.state.label} -> {result.label} ({result.confidence:.2f})")
            self.state = result.emotion
        return result
