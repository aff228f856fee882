"""Keyword tagging for check-in transcripts."""

from __future__ import annotations

DEFAULT_TAG = "general"

TAG_KEYWORDS: dict[str, tuple[str, ...]] = {
    "nutrition": ("food", "eat", "diet", "nutrition", "meal", "calories"),
    "exercise": ("workout", "exercise", "gym", "training", "fitness", "run", "lift"),
    "motivation": ("motivated", "motivation", "goal", "progress", "achievement"),
    "challenge": ("difficult", "hard", "struggle", "challenge", "problem"),
    "success": ("success", "accomplished", "achieved", "completed", "won"),
    "energy": ("energy", "tired", "exhausted", "energetic", "fatigue"),
    "mood": ("happy", "sad", "frustrated", "excited", "mood", "feeling"),
}


def suggest_tags(transcript: str) -> list[str]:
    """Every category with a keyword in the text, in table order; never empty."""
    lowered = (transcript or "").lower()
    tags = [
        tag
        for tag, keywords in TAG_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    ]
    return tags or [DEFAULT_TAG]
