INTRO = (
    "Voice flashcard session started. I will ask you one question at a time. "
    "Answer with a single word, or say next, previous, repeat, help, or stop."
)

QUESTION = "Question: {question}. Please answer with one word."

CORRECT = "Correct! Well done."

INCORRECT = "Not quite. The correct answer is {answer}. Press continue when you are ready."

MOVING_NEXT = "Moving to next flashcard."

MOVING_PREVIOUS = "Moving to previous flashcard."

FIRST_CARD = "This is the first flashcard. Say next to continue."

PROGRESS = "Card {current} of {total}."

NOTHING_HEARD = "I did not catch that. Please answer again."

SESSION_ENDED = "Session ended. You reviewed {count} flashcards in {minutes} minutes."

UNSUPPORTED = "Voice flashcards are not supported here. Speech recognition or speech synthesis is unavailable."

RECOGNITION_ERRORS = {
    "not-allowed": "Microphone access denied. Please allow microphone access.",
    "no-speech": "No speech detected. Please try again.",
    "audio-capture": "Audio capture error. Please check your microphone.",
    "network": "Network error. Please check your connection.",
    "service-not-allowed": "Speech recognition service not allowed.",
}

PAUSED_AFTER_ERROR = "Press continue to hear the question again."
