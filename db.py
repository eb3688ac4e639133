import duckdb
import logging

import config
from models.errors import DataFetchError

# -----------------------------
# Logging
# -----------------------------
logging.basicConfig(
    filename=config.LOG_FILE,
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s"
)

def log_info(msg):
    logging.info(msg)
    print(msg)

def log_error(msg):
    logging.error(msg)
    print(msg)

# -----------------------------
# Get a DB connection
# -----------------------------
def get_db(path=None):
    """
    Returns a new DuckDB connection.
    ``path`` defaults to ``config.DB_FILE``, resolved at call time.
    """
    return duckdb.connect(path or config.DB_FILE)

# -----------------------------
# Query helpers
# -----------------------------
def fetch_dicts(conn, query, params=None):
    """
    Run a read query and return rows as dicts keyed by column name.
    Any DuckDB failure is raised as DataFetchError; no partial results.
    """
    try:
        result = conn.execute(query, params or [])
        columns = [col[0] for col in result.description]
        rows = result.fetchall()
    except duckdb.Error as e:
        logging.error(f"Query failed: {e}")
        raise DataFetchError(str(e)) from e

    return [dict(zip(columns, row)) for row in rows]

# -----------------------------
# Initialize database schema
# -----------------------------
def init_db(conn=None):
    own_conn = conn is None
    if own_conn:
        conn = get_db()
    try:
        conn.execute("CREATE SEQUENCE IF NOT EXISTS accounts_id_seq START 1")
        conn.execute("CREATE SEQUENCE IF NOT EXISTS recurrences_id_seq START 1")
        conn.execute("CREATE SEQUENCE IF NOT EXISTS transactions_id_seq START 1")

        # Accounts table
        conn.execute("""
        CREATE TABLE IF NOT EXISTS accounts (
            id BIGINT PRIMARY KEY DEFAULT nextval('accounts_id_seq'),
            user_id VARCHAR NOT NULL,
            name VARCHAR NOT NULL,
            initial_balance DECIMAL(14,2) NOT NULL DEFAULT 0,
            include_in_total BOOLEAN NOT NULL DEFAULT TRUE,
            is_archived BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Accounts table ensured.")

        # Recurrences table
        conn.execute("""
        CREATE TABLE IF NOT EXISTS recurrences (
            id BIGINT PRIMARY KEY DEFAULT nextval('recurrences_id_seq'),
            user_id VARCHAR NOT NULL,
            type VARCHAR NOT NULL CHECK(type IN ('income','expense')),
            amount DECIMAL(14,2) NOT NULL CHECK(amount >= 0),
            description VARCHAR NOT NULL DEFAULT '',
            category_id VARCHAR,
            account_id BIGINT,
            credit_card_id VARCHAR,
            frequency VARCHAR NOT NULL
                CHECK(frequency IN ('daily','weekly','biweekly','monthly','yearly')),
            start_date DATE NOT NULL,
            end_date DATE,
            next_occurrence DATE,
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Recurrences table ensured.")

        # Transactions table; one row per (recurrence, date) at most
        conn.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id BIGINT PRIMARY KEY DEFAULT nextval('transactions_id_seq'),
            user_id VARCHAR NOT NULL,
            type VARCHAR NOT NULL
                CHECK(type IN ('income','expense','transfer','adjustment')),
            status VARCHAR NOT NULL DEFAULT 'confirmed'
                CHECK(status IN ('confirmed','pending')),
            amount DECIMAL(14,2) NOT NULL CHECK(amount >= 0),
            description VARCHAR NOT NULL DEFAULT '',
            date DATE NOT NULL,
            category_id VARCHAR,
            account_id BIGINT,
            credit_card_id VARCHAR,
            recurrence_id BIGINT,
            savings_goal_id VARCHAR,
            is_recurring BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(recurrence_id, date)
        );
        """)
        log_info("Transactions table ensured.")

        # Indexes
        conn.execute("CREATE INDEX IF NOT EXISTS idx_tx_user_date ON transactions(user_id, date);")
        log_info("Indexes created/ensured.")

    except duckdb.Error as e:
        log_error(f"Error initializing DB: {e}")
        raise
    finally:
        if own_conn:
            conn.close()
            log_info("Database setup complete and connection closed.")

def get_conn():
    """
    FastAPI dependency: one connection per request, closed afterwards.
    """
    conn = get_db()
    try:
        yield conn
    finally:
        conn.close()
