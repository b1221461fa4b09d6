from enum import Enum


class EnumEnvironment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class EnumLogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnumOutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


# Execution engine defaults
DEFAULT_CHECK_TIMEOUT_S = 5.0
DEFAULT_RETRY_BACKOFF_S = 0.2
CONCURRENCY_PER_CPU = 4
MAX_DEFAULT_CONCURRENCY = 64

# Checker defaults
DEFAULT_HTTP_TIMEOUT_S = 5.0
