"""
Upstream catalog API constants.
"""


class PokeAPIConfig:
    """PokeAPI connection defaults."""

    BASE_URL = "https://pokeapi.co/api/v2"

    # Completion-to-start spacing between two requests, in seconds
    MIN_REQUEST_INTERVAL = 0.05

    # Page size used while building the name index
    PAGE_SIZE = 200

    # Request timeouts in seconds
    TIMEOUT = 20
    CONNECT_TIMEOUT = 10

    USER_AGENT = "DexVault/0.1.0"


class PokeAPIEndpoints:
    """Endpoint collection names."""

    POKEMON = "pokemon"
    SPECIES = "pokemon-species"
    EVOLUTION_CHAIN = "evolution-chain"


class HTTPStatusCodes:
    """HTTP status codes used by the transport."""

    OK = 200
    NOT_FOUND = 404
    TOO_MANY_REQUESTS = 429
    SERVER_ERROR = 500
