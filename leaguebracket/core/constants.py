"""Global constants for the leaguebracket application."""

# Collection names
TEAMS_COLLECTION = "teams"
TOURNAMENTS_COLLECTION = "tournaments"

# Tournament setup limits
MIN_TOURNAMENT_TEAMS = 2
MAX_TOURNAMENT_TEAMS = 16

# Tournament types
SINGLE_ELIMINATION = "single-elimination"
DOUBLE_ELIMINATION = "double-elimination"
ROUND_ROBIN = "round-robin"

# Tournament statuses (advisory)
TOURNAMENT_SETUP = "setup"
TOURNAMENT_IN_PROGRESS = "in-progress"
TOURNAMENT_COMPLETED = "completed"

# Match statuses; in_progress and cancelled are reserved
MATCH_PENDING = "pending"
MATCH_IN_PROGRESS = "in_progress"
MATCH_COMPLETED = "completed"
MATCH_CANCELLED = "cancelled"

# Display placeholders
TBD_TEAM_NAME = "TBD"
UNKNOWN_TEAM_NAME = "Unknown Team"

# Round labels keyed by distance from the final
ROUND_NAMES = {
    1: "Final",
    2: "Semifinals",
    3: "Quarterfinals",
    4: "Round of 16",
    5: "Round of 32",
}
