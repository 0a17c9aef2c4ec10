"""
CLI constants.
"""


class CLIDefaults:
    """CLI defaults and exit codes."""

    VERSION = "0.1.0"
    EXIT_SUCCESS = 0
    EXIT_ERROR = 1
    EXIT_NOT_FOUND = 2
    EXIT_CANCELLED = 130
    MOVES_SHOWN = 4
    FLAVOR_LANGUAGE = "en"


class CLIHelp:
    """Help strings."""

    APP_NAME = "dexvault"
    APP_DESCRIPTION = "Pokédex data access: cached lookups and fuzzy name search."
    LOOKUP_HELP = "Resolve a Pokémon by national dex number or name."
    SEARCH_HELP = "Search the name index, tolerating typos and alternate forms."
    INDEX_HELP = "Load the name index and report where it came from."
    CONFIG_HELP = "Path to a TOML configuration file."
    JSON_HELP = "Enable machine-readable JSON output."
    LIMIT_HELP = "Maximum number of suggestions to print."


class CLIMessages:
    """User-facing messages."""

    EMPTY_QUERY = "Enter a Pokémon name or number."
    NOT_FOUND = "Pokémon not found. Check spelling."
    OUT_OF_RANGE = "Pokémon #{id} out of range."
    NO_ENTRY = "No Pokédex entry available."
    SUGGESTIONS = "Suggestions:"
