"""Internal constants shared across the library."""

BASE_URL = "http://localhost:8080"
USER_AGENT = "pydocbind/1"
API_PREFIX = "/v1/collections"

# Path grammar.
PATH_SEPARATOR = "."
