"""Game-related constants shared by the session core and the API layer."""

DEFAULT_QUESTIONS_PER_GAME: int = 10
DEFAULT_TIME_PER_QUESTION_SECONDS: int = 30
DEFAULT_CATEGORIES: tuple[str, ...] = (
    "recycling",
    "biodiversity",
    "energy",
    "climate-change",
    "sustainable-consumption",
    "pollution",
    "conservation",
)

MIXED_DIFFICULTY: str = "mixed"

# The time bonus is measured against this window, not against the configured
# per-question time limit.
TIME_BONUS_WINDOW_SECONDS: int = 30
TIME_BONUS_POINTS_PER_SECOND: int = 2

ROOM_ID_LENGTH: int = 9
ROOM_ID_ALPHABET: str = "0123456789abcdefghijklmnopqrstuvwxyz"

DEFAULT_LEADERBOARD_SIZE: int = 3

DIFFICULTIES: tuple[str, ...] = ("easy", "medium", "hard")
DEFAULT_POINTS_BY_DIFFICULTY: dict[str, int] = {"easy": 100, "medium": 150, "hard": 200}
