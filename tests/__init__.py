"""Test package. Environment defaults must be in place before studentms settings load."""

import os

os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("DATABASE_URL", "sqlite://")
# Cheapest bcrypt cost keeps the password-history tests fast.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
