"""Feedback submission."""

from __future__ import annotations

import logging

from studylog.domain.schemas import Feedback, FeedbackCreate

logger = logging.getLogger(__name__)


class FeedbackService:
    def __init__(self, store) -> None:
        self.store = store

    def submit(self, payload: FeedbackCreate) -> Feedback:
        feedback = self.store.add_feedback(payload)
        logger.info("Feedback %s received (%d chars)", feedback.id, len(feedback.message))
        return feedback

    def list_feedback(self) -> list[Feedback]:
        return self.store.list_feedback()
