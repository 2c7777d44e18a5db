# Named configuration constants
"""
Every tunable number of the scheduling engine lives here. Nothing in this module
is loaded at runtime; change the value and restart.
"""

# Text category thresholds (character counts)
SHORT_TEXT_THRESHOLD = 150
MEDIUM_TEXT_THRESHOLD = 400

# Complexity score thresholds that can bump a category up
LOW_COMPLEXITY_THRESHOLD = 0.15
HIGH_COMPLEXITY_THRESHOLD = 0.30

# Night window (local hours)
NIGHT_WINDOW_START_HOUR = 22
MORNING_WAKE_HOUR = 7

# Reminders shorter than this are meant for immediate review.
# The conflict check realizes it positionally, see NIGHT_WINDOW_SKIPPED_ENTRIES.
NIGHT_WINDOW_MINIMUM_INTERVAL_TO_CHECK = 600
NIGHT_WINDOW_SKIPPED_ENTRIES = 3

# Adaptive learning
MINIMUM_INTERVAL_MULTIPLIER = 0.5
MAXIMUM_INTERVAL_MULTIPLIER = 2.0
HARD_DIFFICULTY_MULTIPLIER = 0.7
GOOD_DIFFICULTY_MULTIPLIER = 1.0
EASY_DIFFICULTY_MULTIPLIER = 1.3

# Bounds for adjusted intervals, in seconds (5 s to ~5 years)
MIN_ADJUSTED_INTERVAL = 5.0
MAX_ADJUSTED_INTERVAL = 157_680_000.0

# Delay before running a full complexity analysis while typing (seconds)
TEXT_ANALYSIS_DEBOUNCE_DELAY = 0.3

# Preview lengths
FRONT_CONTENT_PREVIEW_LENGTH = 100
BACK_CONTENT_PREVIEW_LENGTH = 150

# Category used for stored records that predate the category field
DEFAULT_LEGACY_CATEGORY = "medium"

# Notification titles
RECALL_NOTIFICATION_TITLE = "Time to recall!"
FLASHCARD_NOTIFICATION_TITLE = "Time to review flashcard!"
