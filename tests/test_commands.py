import pytest

from studydeck.commands import COMMAND_HELP, match_command


@pytest.mark.parametrize(
    "transcript, command",
    [
        ("next", "next"),
        ("next please", "next"),
        ("Previous", "previous"),
        ("go back", "previous"),
        ("can you say again", "repeat"),
        ("repeat the question", "repeat"),
        ("what is the answer", "repeat"),
        ("stop answering", "stop"),
        ("end session", "stop"),
        ("help me", "help"),
        ("where am i", "progress"),
        ("how many cards are left", "progress"),
    ],
)
def test_commands(transcript, command):
    assert match_command(transcript) == command


@pytest.mark.parametrize("transcript", ["", "   ", "database", "caching"])
def test_plain_answers_are_not_commands(transcript):
    assert match_command(transcript) is None


def test_every_command_has_help():
    assert set(COMMAND_HELP) == {"next", "previous", "repeat", "stop", "help", "progress"}
