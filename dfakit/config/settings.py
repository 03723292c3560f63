"""
dfakit configuration management using Pydantic Settings.

Configuration can be provided via:
1. dfakit.yaml config file
2. DFAKIT_* env vars (nested settings use double underscore)
3. .env file
4. Direct instantiation

Priority (highest wins): init kwargs > dfakit.yaml > env vars > .env > defaults

The flat dfakit.yaml format:
    machine: mod-three          # built-in name, or a path to a definition file
    host: 127.0.0.1
    port: 8000
    max_input_length: 50
    log_level: INFO
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple, Type

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from dfakit.machine.parser import MachineParser
from dfakit.machine.schema import MachineDefinition

logger = logging.getLogger(__name__)

DEFAULT_MACHINE = "mod-three"


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    workers: int = Field(default=1, ge=1)
    # Longest input the HTTP endpoints will run
    max_input_length: int = Field(default=50, ge=0)
    # Failure fragment /modthree returns for the page to swap in
    error_text: str = '<strong class="error">Error!</strong>'


class MachineConfig(BaseModel):
    """Which machine the server and CLI run by default."""

    # Built-in machine name
    name: str = DEFAULT_MACHINE
    # Definition file; takes precedence over name when set
    path: Optional[str] = None


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that reads from a dfakit.yaml config file.

    Discovers config at:
    1. Explicit path passed via _config_path init kwarg
    2. $DFAKIT_CONFIG env var
    3. ./dfakit.yaml
    4. ./dfakit.yml

    Maps flat YAML keys to the nested DfakitSettings structure.
    """

    def __init__(
        self, settings_cls: Type[BaseSettings], config_path: Optional[str] = None
    ):
        super().__init__(settings_cls)
        self._config_path = config_path
        self._yaml_data: Optional[Dict[str, Any]] = None
        self._load()

    def _discover_config_file(self) -> Optional[Path]:
        """Find the config file to load."""
        if self._config_path:
            p = Path(self._config_path)
            return p if p.is_file() else None

        env_path = os.environ.get("DFAKIT_CONFIG")
        if env_path:
            p = Path(env_path)
            return p if p.is_file() else None

        for name in ("dfakit.yaml", "dfakit.yml"):
            p = Path(name)
            if p.is_file():
                return p

        return None

    def _load(self) -> None:
        """Load and parse the YAML config file."""
        path = self._discover_config_file()
        if path is None:
            self._yaml_data = {}
            return

        import yaml

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        self._yaml_data = data if isinstance(data, dict) else {}
        logger.debug(f"Loaded config from {path}")

    _SERVER_KEYS = ("host", "port", "workers", "max_input_length", "error_text")

    def _map_to_settings(self) -> Dict[str, Any]:
        """Map flat YAML keys to the nested DfakitSettings structure."""
        if not self._yaml_data:
            return {}

        data = self._yaml_data
        result: Dict[str, Any] = {}

        # machine -> machine.path (file) or machine.name (built-in)
        machine = data.get("machine")
        if isinstance(machine, str):
            if machine.endswith((".yaml", ".yml", ".json")):
                result.setdefault("machine", {})["path"] = machine
            else:
                result.setdefault("machine", {})["name"] = machine
        elif isinstance(machine, dict):
            result["machine"] = dict(machine)

        # host, port, ... -> server.*
        for key in self._SERVER_KEYS:
            if key in data:
                result.setdefault("server", {})[key] = data[key]
        if isinstance(data.get("server"), dict):
            result.setdefault("server", {}).update(data["server"])

        if "debug" in data:
            result["debug"] = data["debug"]

        if "log_level" in data:
            result["log_level"] = data["log_level"]

        return result

    def get_field_value(self, field: Any, field_name: str) -> Tuple[Any, str, bool]:
        mapped = self._map_to_settings()
        value = mapped.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> Dict[str, Any]:
        return self._map_to_settings()


class DfakitSettings(BaseSettings):
    """
    Main dfakit configuration.

    All settings can be overridden via environment variables with DFAKIT_ prefix.
    Nested settings use double underscore: DFAKIT_SERVER__PORT

    A dfakit.yaml config file is also supported (config takes priority).
    Pass _config_path to override the config file location.
    """

    model_config = SettingsConfigDict(
        env_prefix="DFAKIT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Path to dfakit.yaml (set via _config_path kwarg, not a real setting field)
    _config_path: Optional[str] = None

    # General settings
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Component configurations
    server: ServerConfig = Field(default_factory=ServerConfig)
    machine: MachineConfig = Field(default_factory=MachineConfig)

    def __init__(self, _config_path: Optional[str] = None, **kwargs: Any):
        self.__class__._config_path = _config_path
        super().__init__(**kwargs)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Insert YAML config source before env vars.

        Priority (highest first): init > yaml > env > dotenv > file_secret
        """
        yaml_source = YamlConfigSource(settings_cls, config_path=cls._config_path)
        return (
            init_settings,
            yaml_source,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    def validate(self) -> None:
        """
        Check that the configured machine can be loaded.

        Raises:
            ValueError: If the machine file is missing or the name is unknown
        """
        if self.machine.path:
            if not Path(self.machine.path).is_file():
                raise ValueError(f"Machine definition file not found: {self.machine.path}")
            return

        from dfakit.machines import BUILTIN_MACHINES

        if self.machine.name not in BUILTIN_MACHINES:
            raise ValueError(
                f"Unknown machine '{self.machine.name}'. "
                f"Built-in machines: {', '.join(sorted(BUILTIN_MACHINES))}"
            )

    def load_definition(self) -> MachineDefinition:
        """Load the configured machine definition."""
        self.validate()
        if self.machine.path:
            return MachineParser.parse_file(self.machine.path)

        from dfakit.machines import BUILTIN_MACHINES

        return BUILTIN_MACHINES[self.machine.name]()
