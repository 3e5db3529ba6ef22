"""Application constants."""

# Body composition bounds for progress entries (inclusive)
MIN_BODY_FAT_PERCENTAGE = 2
MAX_BODY_FAT_PERCENTAGE = 50

# Upper bound for the exercise history ``limit`` query parameter
MAX_HISTORY_LIMIT = 100
