"""Parser for the plain-text question catalogue format.

File format (repeat blocks separated by blank lines or '---'):

    Q: Question prompt (supports markdown). Additional lines until the
       next marker are treated as part of the prompt.
    A: First option text
    B: Second option text
    C: ...                (two to six options, lettered A-F)
    CORRECT: A|B|...
    CATEGORY: recycling
    DIFFICULTY: easy|medium|hard
    POINTS: integer       (optional, defaults by difficulty)

Lines starting with "#" are comments and are ignored.

Example:

    Q: Which bin does a glass jar belong in?
    A: Paper
    B: Glass
    C: Organic
    D: Residual waste
    CORRECT: B
    CATEGORY: recycling
    DIFFICULTY: easy
"""

from __future__ import annotations

from pathlib import Path

from trivia_app.constants.game_constants import DEFAULT_POINTS_BY_DIFFICULTY
from trivia_app.core.models import Question


class CatalogueImportError(Exception):
    """Raised when a catalogue definition cannot be parsed."""


_OPTION_ORDER = ["A", "B", "C", "D", "E", "F"]


def load_questions_from_file(file_path: Path) -> list[Question]:
    text = file_path.read_text(encoding="utf-8")
    questions = parse_catalogue_text(text)
    if not questions:
        raise CatalogueImportError(f"Catalogue file {file_path} did not contain any questions.")
    return questions


def parse_catalogue_text(text: str) -> list[Question]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped.startswith("#"):
            continue
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [_parse_block(block, number) for number, block in enumerate(blocks, start=1) if block]


def _parse_block(block: str, number: int) -> Question:
    prompt_lines: list[str] = []
    options: dict[str, str] = {}
    fields: dict[str, str] = {}
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            prompt_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        key = upper.split(":", 1)[0]
        if ":" in line and key in ("CORRECT", "CATEGORY", "DIFFICULTY", "POINTS"):
            fields[key] = line.split(":", 1)[1].strip()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_ORDER and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            prompt_lines.append(line)
        elif current_section in _OPTION_ORDER:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise CatalogueImportError(
                f"Question {number}: text outside of a known section: '{line}'."
            )

    prompt = "\n".join(prompt_lines).strip()
    if not prompt:
        raise CatalogueImportError(f"Question {number}: prompt missing (Q: ...).")

    letters = _OPTION_ORDER[: len(options)]
    if len(options) < 2 or sorted(options) != letters:
        raise CatalogueImportError(
            f"Question {number}: options must be lettered consecutively from A (at least two)."
        )
    option_list = tuple(options[letter].strip() for letter in letters)

    correct_letter = fields.get("CORRECT", "").upper()
    if correct_letter not in letters:
        raise CatalogueImportError(
            f"Question {number}: CORRECT must be one of {', '.join(letters)}."
        )

    category = fields.get("CATEGORY", "").lower()
    if not category:
        raise CatalogueImportError(f"Question {number}: CATEGORY is required.")

    difficulty = fields.get("DIFFICULTY", "").lower()
    if difficulty not in DEFAULT_POINTS_BY_DIFFICULTY:
        raise CatalogueImportError(
            f"Question {number}: DIFFICULTY must be easy, medium or hard."
        )

    raw_points = fields.get("POINTS")
    if raw_points is None:
        points = DEFAULT_POINTS_BY_DIFFICULTY[difficulty]
    else:
        try:
            points = int(raw_points)
        except ValueError as exc:
            raise CatalogueImportError(f"Question {number}: POINTS must be an integer.") from exc

    return Question(
        id=0,  # assigned by QuestionCatalogue when loaded
        prompt=prompt,
        options=option_list,
        correct_answer=letters.index(correct_letter),
        category=category,
        difficulty=difficulty,
        points=points,
    )
