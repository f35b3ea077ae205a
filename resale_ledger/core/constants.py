UNKNOWN_STORE_NAME = "Unknown"

DEFAULT_MOST_PROFITABLE_LIMIT = 10

CONFIG_ERROR_MESSAGE = (
    "Database is not configured. Set DATABASE_URL in the environment or the "
    ".env file and restart the service."
)

PLACEHOLDER_MARKERS = ("placeholder",)
