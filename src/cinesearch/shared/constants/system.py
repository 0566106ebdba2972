"""Base system constants."""

# Base time units (seconds)
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE
BASE_DAY = 24 * BASE_HOUR


class FileSystem:
    """File system locations."""

    HOME_DIR = ".cinesearch"
    CONFIG_FILE = "config.toml"
    STORAGE_DIR = "store"
    STORAGE_SUFFIX = ".json"
