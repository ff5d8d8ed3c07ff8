"""
Feedback accuracy tracking
Counts user confirmations of the classifier's answers
"""

from dataclasses import replace

from ..models.state import Feedback, RecyclingState


def record_correct(state: RecyclingState) -> RecyclingState:
    """User confirmed the classification"""
    feedback = replace(state.feedback, correct=state.feedback.correct + 1)
    return replace(state, feedback=feedback)


def record_incorrect(state: RecyclingState) -> RecyclingState:
    """User rejected the classification"""
    feedback = replace(state.feedback, incorrect=state.feedback.incorrect + 1)
    return replace(state, feedback=feedback)


def accuracy(feedback: Feedback) -> float:
    """
    Share of confirmed-correct answers, in percent.
    With no feedback yet the accuracy is 100.
    """
    if feedback.total == 0:
        return 100.0
    return (feedback.correct / feedback.total) * 100


def format_accuracy(feedback: Feedback) -> str:
    return f"{accuracy(feedback):.1f}%"
