"""DexVault command-line interface."""
