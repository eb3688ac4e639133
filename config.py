import os

# -----------------------------
# Storage
# -----------------------------
DB_FILE = os.getenv("BUDGET_DB_FILE", "budget.duckdb")

# -----------------------------
# Logging
# -----------------------------
LOG_FILE = os.getenv("BUDGET_LOG_FILE", "projection.log")
LOG_LEVEL = os.getenv("BUDGET_LOG_LEVEL", "INFO")

# -----------------------------
# Projection engine
# -----------------------------
# Optional hard cap on collected steps per enumeration call. Unset means the
# cap is sized to the window being enumerated.
_max_steps = os.getenv("BUDGET_MAX_ENUMERATION_STEPS")
MAX_ENUMERATION_STEPS = int(_max_steps) if _max_steps else None

# How far past today recurrences are materialized into pending transactions.
DEFAULT_MONTHS_AHEAD = int(os.getenv("BUDGET_MONTHS_AHEAD", "3"))

# Longest base-to-target distance accepted by the what-if chain.
MAX_CHAIN_MONTHS = int(os.getenv("BUDGET_MAX_CHAIN_MONTHS", "120"))
