from __future__ import annotations

# Ordered: the first phrase contained in the transcript wins.
COMMAND_PHRASES: tuple[tuple[str, str], ...] = (
    ("next", "next"),
    ("previous", "previous"),
    ("repeat", "repeat"),
    ("stop", "stop"),
    ("help", "help"),
    ("answer", "repeat"),
    ("go back", "previous"),
    ("say again", "repeat"),
    ("end session", "stop"),
    ("where am i", "progress"),
    ("how many cards", "progress"),
    ("progress", "progress"),
)

COMMAND_HELP: dict[str, str] = {
    "next": "go to the next flashcard",
    "previous": "go back one flashcard",
    "repeat": "hear the question again",
    "stop": "end the session",
    "help": "list the commands",
    "progress": "hear which card you are on",
}


def match_command(transcript: str) -> str | None:
    text = (transcript or "").lower().strip()
    if not text:
        return None
    for phrase, action in COMMAND_PHRASES:
        if phrase in text:
            return action
    return None
