import os


class Config:
    DATABASE_URL = os.environ.get("DATABASE_URL") or "sqlite:///parlor.db"
    DATABASE_ECHO = os.environ.get("DATABASE_ECHO", "0") == "1"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Rules that the games allow to tune
    WORDLE_MAX_GUESSES = int(os.environ.get("WORDLE_MAX_GUESSES", "6"))
    HANGMAN_LIVES = int(os.environ.get("HANGMAN_LIVES", "6"))
    # Per player chess clock (seconds)
    CHESS_CLOCK_SECONDS = int(os.environ.get("CHESS_CLOCK_SECONDS", "600"))
    # Memorize phase at the start of a memory game (seconds). 0 disables.
    MEMORY_PREVIEW_SECONDS = int(os.environ.get("MEMORY_PREVIEW_SECONDS", "5"))

    # Conditional writes the coordinator attempts before reporting a conflict
    MAX_WRITE_ATTEMPTS = int(os.environ.get("MAX_WRITE_ATTEMPTS", "3"))
