"""Anti-gaming pre-check for submitted answers.

Answers formatted as bullet lists or decorated with emoji are a common way
to pad an answer for the grader. Such answers are rejected before any LLM
call is made.
"""

import re

BULLET_GLYPHS: frozenset[str] = frozenset("•◦▪▫‣⁃∙●○■□◆◇►▶")

# Emoji code points only; CJK and Hangul ranges must never match.
_EMOJI_PATTERN = re.compile(
    "["
    "\U0001F600-\U0001F64F"  # Emoticons
    "\U0001F300-\U0001F5FF"  # Symbols & pictographs
    "\U0001F680-\U0001F6FF"  # Transport & map symbols
    "\U0001F1E6-\U0001F1FF"  # Regional indicators (flags)
    "\U0001F900-\U0001F9FF"  # Supplemental symbols & pictographs
    "\U0001FA70-\U0001FAFF"  # Symbols & pictographs extended-A
    "\U0001F000-\U0001F02F"  # Mahjong tiles
    "\U0001F0A0-\U0001F0FF"  # Playing cards
    "\U0001F170-\U0001F251"  # Enclosed alphanumeric/ideographic supplement
    "\U00002600-\U000026FF"  # Misc symbols
    "\U00002700-\U000027BF"  # Dingbats
    "\U00002B50-\U00002B55"  # Stars and circles
    "\U0000231A-\U0000231B"  # Watch, hourglass
    "\U00002328"             # Keyboard
    "\U000023CF"             # Eject
    "\U000023E9-\U000023FA"  # Media controls
    "\U000000A9\U000000AE"  # Copyright, registered
    "\U0000203C\U00002049"  # Double exclamation, exclamation question
    "\U00002122\U00002139"  # Trade mark, information
    "\U00002194-\U000021AA"  # Arrows
    "\U000024C2"             # Circled M
    "\U000025AA\U000025AB\U000025B6\U000025C0"  # Geometric shapes
    "\U000025FB-\U000025FE"  # Medium squares
    "\U00002934-\U00002935"  # Curved arrows
    "\U00002B05-\U00002B07"  # Directional arrows
    "\U00002B1B-\U00002B1C"  # Large squares
    "\U00003030\U0000303D"  # Wavy dash, part alternation mark
    "\U00003297\U00003299"  # Circled ideographs congratulation, secret
    "]"
)

_BULLET_PATTERN = re.compile("[" + re.escape("".join(sorted(BULLET_GLYPHS))) + "]")


def contains_bullet(text: str) -> bool:
    """True if ``text`` contains a list-bullet glyph."""
    return _BULLET_PATTERN.search(text) is not None


def contains_emoji(text: str) -> bool:
    """True if ``text`` contains a pictographic/emoji character."""
    return _EMOJI_PATTERN.search(text) is not None


def is_suspected_gaming(answer: str) -> bool:
    """Check whether an answer should be rejected without evaluation."""
    if not answer:
        return False
    return contains_bullet(answer) or contains_emoji(answer)
