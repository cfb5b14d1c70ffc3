GRID_ROWS = 8
GRID_COLS = 8
# Number of distinct base elements; six of them own a dedicated special effect.
ELEMENTS_COUNT = 6

# Shortest run that clears, and shortest run that leaves a special behind.
MIN_MATCH_LENGTH = 3
SPECIAL_MATCH_LENGTH = 4

# Extra tiles removed by a random-scatter special.
RANDOM_CLEAR_COUNT = 5
