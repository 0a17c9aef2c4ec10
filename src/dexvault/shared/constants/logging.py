"""
Logging constants.
"""


class Logging:
    """Logging defaults."""

    ROOT_LOGGER = "dexvault"
    DEFAULT_LEVEL = "INFO"
    DEFAULT_FILE_PATH = ""
    FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
