import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./rentmimi.db")

# CORS origins for the client, partner and admin frontends
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:5173,http://localhost:3000",
).split(",")

# Payout rate card
TRANSPORT_FEE = int(os.getenv("TRANSPORT_FEE", "10000"))
# Partner's share after the platform cut (string so it can be fed to Decimal unchanged)
PARTNER_TAKE_RATE = os.getenv("PARTNER_TAKE_RATE", "0.967")

# When a booking is completed without a partner, pick one at random from partner users.
# Set to false to reject completion instead.
AUTO_ASSIGN_PARTNER_ON_COMPLETE = (
    os.getenv("AUTO_ASSIGN_PARTNER_ON_COMPLETE", "true").lower() == "true"
)

# Secure chat opens this many hours before the meeting and closes this many hours after it ends
SECURE_CHAT_WINDOW_HOURS = int(os.getenv("SECURE_CHAT_WINDOW_HOURS", "1"))
