"""HTTP constants for the transport layer.

Centralizes status codes and alias API settings shared by the transport
adapter and the alias fallback controller.
"""

# HTTP Status Codes
HTTP_STATUS_OK = 200
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_NOT_FOUND = 404
HTTP_STATUS_URI_TOO_LONG = 414

# Longest request URI sent directly before switching to an alias
MAX_URI_LENGTH = 2000

# Alias management endpoint, relative to the instance base URL
ALIAS_API_PATH = "api/query/alias"

DEFAULT_TIMEOUT_SECONDS = 30.0
