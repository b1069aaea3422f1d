"""Internal constants shared across the library."""

BASE_URL = "https://api.openweathermap.org"
WEATHER_ENDPOINT = "/data/2.5/weather"
USER_AGENT = "pyweatherfetch"

#: Seconds a cached record stays fresh.
CACHE_DURATION: float = 5 * 60

#: Default quiet period before a debounced location change is fetched.
DEBOUNCE_DELAY: float = 0.5

#: Consecutive failures tolerated before escalating to the fallback state.
FAILURE_THRESHOLD = 2

# ------------------------------------------------------------------
# User-visible error messages
# ------------------------------------------------------------------

GENERIC_FETCH_ERROR = "Failed to fetch weather data"

STATUS_MESSAGES: dict[int, str] = {
    401: "Invalid API key",
    404: "Location not found",
    429: "Too many requests, try again later",
    500: "Server error",
}
