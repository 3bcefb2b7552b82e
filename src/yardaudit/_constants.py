"""Internal constants shared across the library."""

LOCATION_BASE_URL = "https://api.samsara.com"
LOCATIONS_ENDPOINT = "/v1/fleet/locations"
USER_AGENT = "yardaudit/1.0"

#: Credential value that selects the simulated location provider.
SIMULATION_TOKEN = "demo"

#: Mean Earth radius used by the haversine distance.
EARTH_RADIUS_M = 6_371_000.0

# ------------------------------------------------------------------
# Location simulator
# ------------------------------------------------------------------

#: Cumulative thresholds: first yard, second yard, everything else away.
SIMULATED_FIRST_YARD_SHARE = 0.4
SIMULATED_SECOND_YARD_SHARE = 0.3
SIMULATED_JITTER_DEGREES = 0.002
#: Far outside every yard (New Mexico).
SIMULATED_AWAY_COORDINATE: tuple[float, float] = (32.0, -105.0)
SIMULATED_DELAY_SECONDS = 1.5

# ------------------------------------------------------------------
# Generative AI
# ------------------------------------------------------------------

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
