"""Configuration management for dfakit."""

from dfakit.config.settings import (
    DfakitSettings,
    ServerConfig,
    MachineConfig,
)

__all__ = [
    "DfakitSettings",
    "ServerConfig",
    "MachineConfig",
]
