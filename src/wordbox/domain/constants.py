"""Centralized constants for the wordbox engine.

All magic numbers and defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Leitner boxes ----------
MIN_BOX = 1
MAX_BOX = 6
MASTERED_BOX = MAX_BOX

# Days until the next review, indexed by box
BOX_INTERVALS = {1: 0, 2: 1, 3: 3, 4: 7, 5: 14, 6: 30}

# Wrong answers in boxes above this drop to box 2 instead of box 1
DEMOTION_THRESHOLD = 3
SOFT_DEMOTION_BOX = 2

BOX_LABELS = {
    1: "New",
    2: "1 Day",
    3: "3 Days",
    4: "1 Week",
    5: "2 Weeks",
    6: "Mastered",
}

# ---------- Study queue ----------
DEFAULT_QUEUE_LIMIT = 20

# ---------- Leveling ----------
DEFAULT_LEVEL_THRESHOLDS = (
    0, 100, 250, 450, 700,
    1000, 1350, 1750, 2200, 2700,
    3250, 3850, 4500, 5200, 6000,
    6900, 7900, 9000, 10200, 11500,
    13000, 14700, 16600, 18700, 21000,
)

LEVEL_TITLES = (
    (20, "Vocabulary Master"),
    (15, "Word Expert"),
    (10, "Language Learner"),
    (5, "Word Explorer"),
    (1, "Beginner"),
)

DEFAULT_DAILY_GOAL = 20

# ---------- Session XP ----------
CORRECT_REWARD = 10
PARTICIPATION_REWARD = 2
PERFECT_BONUS = 25
COMBO_TIER_SIZE = 5
COMBO_TIER_REWARD = 10
SPEED_THRESHOLD_SECONDS = 3.0
SPEED_REWARD = 5
HINT_COST = 2

# ---------- Other actions ----------
READ_ARTICLE_REWARD = 20
ADD_WORD_REWARD = 5

# ---------- Clock ----------
DEFAULT_TIMEZONE = "UTC"
DATE_KEY_FORMAT = "%Y-%m-%d"
