"""`.env` text parsing and file discovery."""
