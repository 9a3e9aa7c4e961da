"""Configuration constants for model-search."""

import os

from model_search.errors import ConfigurationError

# Environment variable holding the search backend base URL.
BACKEND_URL_ENV: str = "MODEL_SEARCH_BACKEND_URL"

# Number of results shown when filters are cleared.
DEFAULT_RESULT_LIMIT: int = 40

# Choices offered for the result cap.
RESULT_LIMIT_CHOICES: tuple[int, ...] = (10, 20, 40, 60, 100)

# The backend is always asked for at least this many candidates,
# so local filtering has enough to work with.
MIN_TOP_K: int = 100

# Seconds before an HTTP request to the backend is abandoned.
REQUEST_TIMEOUT: float = 30.0

PROFILE_HOST: str = "https://huggingface.co"


def resolve_backend_url(override: str | None = None) -> str:
    """Return the backend base URL, without a trailing slash.

    Raises:
        ConfigurationError: if neither override nor environment provide one.
    """
    url = override or os.environ.get(BACKEND_URL_ENV, "")
    url = url.strip()
    if not url:
        msg = f"Backend URL is not configured, set {BACKEND_URL_ENV} or pass --backend-url"
        raise ConfigurationError(msg)
    return url.rstrip("/")
