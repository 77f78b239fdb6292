"""Summarize prior chat turns into a compact prompt block."""

from typing import List, Optional, Sequence

from src.database.schemas import ChatTurn
from src.matching.vocabulary import DEFAULT_VOCABULARY, MatchingVocabulary

NEW_CONVERSATION = "New conversation - no previous context."

RECENT_TURNS = 10
MESSAGE_PREVIEW_CHARS = 100
MAX_INTERESTS = 3


def truncate_message(message: str, max_length: int = MESSAGE_PREVIEW_CHARS) -> str:
    if len(message) <= max_length:
        return message
    return message[:max_length] + "..."


def _user_messages(chat_history: Sequence[ChatTurn]) -> List[str]:
    return [turn.message for turn in chat_history if turn.role == "user"]


def extract_child_age(
    chat_history: Sequence[ChatTurn], vocabulary: Optional[MatchingVocabulary] = None
) -> Optional[str]:
    """First age mentioned by the user, e.g. ``"3 year"``."""
    vocab = vocabulary or DEFAULT_VOCABULARY
    for message in _user_messages(chat_history):
        match = vocab.age_pattern.search(message)
        if match:
            return f"{vocab.parse_age(match.group(1))} {match.group(2).lower()}"
    return None


def extract_interests(
    chat_history: Sequence[ChatTurn],
    vocabulary: Optional[MatchingVocabulary] = None,
    limit: int = MAX_INTERESTS,
) -> List[str]:
    """Interest keywords mentioned by the user, first-seen order."""
    vocab = vocabulary or DEFAULT_VOCABULARY
    interests: List[str] = []
    for message in _user_messages(chat_history):
        lowered = message.lower()
        for keyword in vocab.interest_keywords:
            if keyword in lowered and keyword not in interests:
                interests.append(keyword)
    return interests[:limit]


def summarize_context(
    chat_history: Sequence[ChatTurn], vocabulary: Optional[MatchingVocabulary] = None
) -> str:
    parts = []
    child_age = extract_child_age(chat_history, vocabulary)
    if child_age:
        parts.append(f"Child age: {child_age}.")
    interests = extract_interests(chat_history, vocabulary)
    if interests:
        parts.append(f"Interests: {', '.join(interests)}.")
    return " ".join(parts)


def format_chat_history_for_ai(
    chat_history: Sequence[ChatTurn], vocabulary: Optional[MatchingVocabulary] = None
) -> str:
    """Format chat history (oldest first) for the system prompt.

    Only the last ten turns are rendered, each cut to 100 characters, but the
    child age and interests are taken from every user turn.
    """
    if not chat_history:
        return NEW_CONVERSATION

    recent_history = "\n".join(
        f"{turn.role}: {truncate_message(turn.message)}"
        for turn in chat_history[-RECENT_TURNS:]
    )

    lines = []
    summary = summarize_context(chat_history, vocabulary)
    if summary:
        lines.append(f"Context: {summary}")
    lines.append("Recent messages:")
    lines.append(recent_history)
    return "\n".join(lines)
