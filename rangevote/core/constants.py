"""Application constants.

This module contains magic strings and numbers used throughout the application.
Centralizing these values makes them easier to maintain and modify.
"""

# Score Range
# Range votes are whole numbers between these bounds (inclusive)
MIN_SCORE = 0
MAX_SCORE = 99

# Share Link Tokens
# 32 random bytes = 256 bits, encoded as 43 URL-safe base64 characters
SHARE_TOKEN_BYTES = 32

# Marketplace
# A ballot is "closing soon" when its close date falls within this window
CLOSING_SOON_DAYS = 7

# Auto-close Scheduler
# Seconds between sweeps for expired ballots (1 hour)
AUTO_CLOSE_INTERVAL_SECONDS = 3600

# Organization Roles
ROLE_OWNER = "Owner"
ROLE_ADMIN = "Admin"
ROLE_MEMBER = "Member"

# JWT Token Configuration
# Token expiration time in minutes (8 hours)
ACCESS_TOKEN_EXPIRE_MINUTES = 480
