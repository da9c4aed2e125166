import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Scoring and reporting settings"""

    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_FILE = os.getenv('LOG_FILE', '')

    # Accounts left out of every report (organiser test accounts)
    EXCLUDED_USERS = os.getenv('EXCLUDED_USERS', '')

    # Per-participant contribution to the pick leaderboard prize pool
    ENTRY_FEE = int(os.getenv('ENTRY_FEE', 35))

    # Timeout for fetching round snapshots over HTTP
    FETCH_TIMEOUT = float(os.getenv('FETCH_TIMEOUT', 30.0))

    @classmethod
    def get_excluded_users(cls) -> set[str]:
        """Get the set of user ids excluded from reports"""
        return {user_id.strip() for user_id in cls.EXCLUDED_USERS.split(',') if user_id.strip()}

    @classmethod
    def validate(cls):
        """Validate that configured values are usable"""
        if cls.ENTRY_FEE < 0:
            raise ValueError("ENTRY_FEE must not be negative")
        if cls.FETCH_TIMEOUT <= 0:
            raise ValueError("FETCH_TIMEOUT must be positive")
