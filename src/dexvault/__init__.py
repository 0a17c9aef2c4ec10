"""
DexVault - Pokédex Data Access Layer

Cached, throttled access to the PokeAPI catalog with composite record
assembly and typo-tolerant name search.
"""

__version__ = "0.1.0"
