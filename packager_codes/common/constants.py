"""Application constants."""

USER_AGENT = "packager-codes/0.3 (batch export)"
DIRECTORY_SOURCE = "directory"
GEOCODER_SOURCE = "geocoder"
VALID_COUNTRY_STATUS = "V"
PACKAGER_CODE_SUFFIX = "EC"
CSV_HEADERS = ("name", "code", "lat", "lng")
EXIT_SUCCESS = 0
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "country",
    "source",
    "event",
    "status",
    "attempt",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
