# util/enums.py
from dataclasses import dataclass
from enum import Enum


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


@dataclass(frozen=True)
class ErrorInfo:
    message: str
    http_status: int


class ErrorMessage(Enum):
    INVALID_API_KEY = ErrorInfo("Invalid API key.", 401)
    MISSING_API_KEY = ErrorInfo("Missing API key.", 400)
    MISSING_JOB_ID = ErrorInfo("Missing jobId.", 400)
    MISSING_CLAIM_ID = ErrorInfo("Missing claimId.", 400)
    MISSING_FILE = ErrorInfo("Missing file.", 400)
    MISSING_VERIFICATION_FILE = ErrorInfo("Missing verification PDF.", 400)
    UNKNOWN_CLAIM = ErrorInfo("Unknown claim.", 404)
    STREAM_FAILED = ErrorInfo("Stream failed to start.", 502)
    STREAM_ERROR = ErrorInfo("Stream failed.", 502)
    NO_RESPONSE_BODY = ErrorInfo("No response body", 502)
    UPLOAD_FAILED = ErrorInfo("Upload failed.", 502)
    VERIFY_FAILED = ErrorInfo("Verify failed.", 502)
    SUGGESTIONS_FAILED = ErrorInfo("Could not fetch suggestions.", 502)
    MALFORMED_LINE = ErrorInfo("Malformed NDJSON line.", 422)
    NETWORK_ERROR = ErrorInfo("Network error", 503)
    INTERNAL_ERROR = ErrorInfo("Internal server error.", 500)
