"""
Cache and local storage constants.
"""

SECONDS_PER_DAY = 24 * 60 * 60


class CacheConfig:
    """In-memory record cache defaults."""

    TTL = 7 * SECONDS_PER_DAY
    MAX_SIZE = 300


class CacheKeys:
    """Namespaces for string cache keys.

    Numeric identifiers are used as keys directly; everything else is
    prefixed with its record kind so namespaces never collide.
    """

    NAME_PREFIX = "name_"
    POKEMON_PREFIX = "pokemon_"
    SPECIES_PREFIX = "species_"
    EVOLUTION_PREFIX = "evolution_"

    @classmethod
    def name(cls, name: str) -> str:
        return f"{cls.NAME_PREFIX}{name.strip().lower()}"

    @classmethod
    def pokemon(cls, id_or_name: int | str) -> str:
        key = id_or_name.strip().lower() if isinstance(id_or_name, str) else id_or_name
        return f"{cls.POKEMON_PREFIX}{key}"

    @classmethod
    def species(cls, species_id: int | str) -> str:
        return f"{cls.SPECIES_PREFIX}{species_id}"

    @classmethod
    def evolution(cls, chain_id: int | str) -> str:
        return f"{cls.EVOLUTION_PREFIX}{chain_id}"


class StorageConfig:
    """Durable storage defaults for the persisted name list."""

    DIRECTORY_NAME = ".dexvault"
    NAME_LIST_KEY = "pokedex_name_list_v1"
    NAME_LIST_TS_KEY = "pokedex_name_list_ts_v1"
    NAME_LIST_TTL = 7 * SECONDS_PER_DAY
    FILE_SUFFIX = ".json"
