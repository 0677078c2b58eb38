from decouple import config
from pathlib import Path

# Device Configuration
MUSO_HOST = config('MUSO_HOST', default=config('MUSO_IP', default='mu-so'))
MUSO_PORT = config('MUSO_PORT', default=15081, cast=int)

# Transport Configuration
TIMEOUT_BOUNDS = (1.0, 5.0)
RETRY_BOUNDS = (0, 1)


def clamp_to(value, bounds):
    low, high = bounds
    return max(low, min(high, value))


REQUEST_TIMEOUT = clamp_to(config('MSC_TIMEOUT', default=2.0, cast=float), TIMEOUT_BOUNDS)
REQUEST_RETRIES = clamp_to(config('MSC_RETRIES', default=1, cast=int), RETRY_BOUNDS)

# Logging Configuration
LOG_LEVEL = config('MSC_LOG_LEVEL', default='WARNING')
LOG_FILE = config('MSC_LOG_FILE', default=None)

# Seek Configuration
# Off: `seek -N` targets N - position. On: position - N.
SEEK_REWIND_RELATIVE = config('MSC_SEEK_REWIND_RELATIVE', default=False, cast=bool)
SEEK_MAX_SECONDS = 3600


def base_url(host: str | None = None, port: int | None = None) -> str:
    """Build the device base URL, falling back to the configured host and port."""
    return f"http://{host or MUSO_HOST}:{port or MUSO_PORT}"


def get_version():
    """Get version from pyproject.toml"""
    import tomllib

    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        with open(pyproject_path, 'rb') as f:
            data = tomllib.load(f)
            return data.get("project", {}).get("version", "unknown")
    return "unknown"


__version__ = get_version()
