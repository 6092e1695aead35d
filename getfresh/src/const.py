"""
Constants for the GetFresh web API.

The API is undocumented. The endpoints, client id, and header set below are
the ones used by the official Android app; the service gates requests on the
app's User-Agent.

CHANGELOG:
- 2026-10-18: Initial creation
"""

SERVICE_HOST = "getfresh.energy"
"""Host probed for reachability before every update cycle."""

BASE_URL = "https://www.getfresh.energy"
TOKEN_URL = f"{BASE_URL}/oauth/token"
LINKS_URL = f"{BASE_URL}/links"

CLIENT_ID = "fresh-webclient"
CLIENT_SECRET = ""

HTTP_TIMEOUT_S: float = 10.0
"""Timeout for every HTTP request in seconds."""

REACHABILITY_TIMEOUT_S: float = 1.0
REACHABILITY_PORT = 443

BASE_HEADERS: dict[str, str] = {
    "Connection": "keep-alive",
    "Accept-Encoding": "gzip",
    "User-Agent": "okhttp/3.2.0",
}

API_HEADERS: dict[str, str] = {
    **BASE_HEADERS,
    "Content-Type": "application/json",
}

LOGIN_HEADERS: dict[str, str] = {
    **BASE_HEADERS,
    "Content-Type": "application/x-www-form-urlencoded",
}

# Logical resource names published in the discovery document.
RESOURCE_CURRENT_READINGS = "currentReadings"
RESOURCE_CONSUMPTION = "consumption"
RESOURCE_PROFILE = "profile"
RESOURCE_CONSUMPTION_CURRENT_MONTH = "consumptionCurrentMonth"

KNOWN_RESOURCES: tuple[str, ...] = (
    RESOURCE_CURRENT_READINGS,
    RESOURCE_CONSUMPTION,
    RESOURCE_PROFILE,
    RESOURCE_CONSUMPTION_CURRENT_MONTH,
)

TARIFF_INTERVAL_S = 60
"""Fixed cadence of the tariff update timer."""

TARIFF_POSITION_OFFSET = 0
READING_POSITION_OFFSET = 10
