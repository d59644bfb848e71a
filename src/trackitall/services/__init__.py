"""Domain services for habits, check-ins, statistics and accounts."""
