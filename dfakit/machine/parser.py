"""
Machine definition parser.

Loads and validates machine definitions from YAML or JSON files.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml

from dfakit.machine.engine import FiniteStateMachine
from dfakit.machine.errors import MachineError
from dfakit.machine.schema import MachineDefinition

logger = logging.getLogger(__name__)


class MachineParser:
    """
    Parse and validate machine definitions.

    Supports:
    - YAML files (.yaml, .yml)
    - JSON files (.json)
    - Direct string parsing

    Example:
        ```python
        # From file
        definition = MachineParser.parse_file("mod_three.yaml")

        # From string
        yaml_content = '''
        name: parity
        alphabet: "01"
        initial_state: even
        states:
          even: {output: 0}
          odd: {output: 1}
        transitions:
          even: {"0": even, "1": odd}
          odd: {"0": odd, "1": even}
        '''
        definition = MachineParser.parse_string(yaml_content)
        machine = definition.build()
        ```
    """

    @staticmethod
    def parse_file(path: Union[str, Path]) -> MachineDefinition:
        """
        Parse a machine definition from file.

        Args:
            path: Path to definition file (YAML or JSON)

        Returns:
            Validated MachineDefinition

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is unsupported
            ValidationError: If the definition is malformed
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Machine file not found: {path}")

        content = path.read_text(encoding="utf-8")

        if path.suffix in (".yaml", ".yml"):
            return MachineParser.parse_string(content, format="yaml")
        elif path.suffix == ".json":
            return MachineParser.parse_string(content, format="json")
        else:
            raise ValueError(f"Unsupported file format: {path.suffix}")

    @staticmethod
    def parse_string(content: str, format: str = "yaml") -> MachineDefinition:
        """
        Parse a machine definition from string content.

        Args:
            content: YAML or JSON string
            format: "yaml" or "json"

        Returns:
            Validated MachineDefinition

        Raises:
            ValueError: If format is unsupported or the content is empty
            ValidationError: If the definition is malformed
        """
        if format == "yaml":
            data = yaml.safe_load(content)
        elif format == "json":
            data = json.loads(content)
        else:
            raise ValueError(f"Unsupported format: {format}")

        if data is None:
            raise ValueError("Empty machine definition")

        return MachineDefinition.model_validate(data)

    @staticmethod
    def parse_dict(data: dict) -> MachineDefinition:
        """Parse a machine definition from a dictionary."""
        return MachineDefinition.model_validate(data)

    @staticmethod
    def load_machine(path: Union[str, Path]) -> FiniteStateMachine:
        """Parse a definition file and build its machine."""
        return MachineParser.parse_file(path).build()

    @staticmethod
    def validate_file(path: Union[str, Path]) -> tuple[bool, str]:
        """
        Validate a definition file, including building the machine.

        Args:
            path: Path to definition file

        Returns:
            Tuple of (is_valid, message)
        """
        try:
            definition = MachineParser.parse_file(path)
            definition.build()
            return True, f"Valid machine: {definition.name} v{definition.version}"
        except FileNotFoundError as e:
            return False, f"File not found: {e}"
        except MachineError as e:
            return False, f"Inconsistent machine ({e.kind.value}): {e}"
        except (ValueError, yaml.YAMLError) as e:
            return False, f"Invalid format: {e}"


class MachineRegistry:
    """
    Store machine definitions by name and build machines from them.

    Each ``build()`` returns an independent machine, so callers never share
    one unless they choose to.
    """

    def __init__(self):
        self._definitions: Dict[str, MachineDefinition] = {}
        self._default: Optional[str] = None

    @classmethod
    def with_builtins(cls) -> "MachineRegistry":
        """Create a registry holding the built-in machines."""
        from dfakit.machines import BUILTIN_MACHINES

        registry = cls()
        for factory in BUILTIN_MACHINES.values():
            registry.register(factory())
        return registry

    def register(self, definition: MachineDefinition) -> None:
        """Register a machine definition, replacing any with the same name."""
        self._definitions[definition.name] = definition
        logger.info(f"Registered machine: {definition.name}")

    def register_from_file(self, path: Union[str, Path]) -> str:
        """
        Register a machine definition from file.

        Returns:
            Name of registered machine
        """
        definition = MachineParser.parse_file(path)
        self.register(definition)
        return definition.name

    def get(self, name: str) -> Optional[MachineDefinition]:
        """Get a definition by name."""
        return self._definitions.get(name)

    def build(self, name: Optional[str] = None) -> FiniteStateMachine:
        """
        Build a fresh machine from a registered definition.

        Args:
            name: Machine name; the default machine if omitted

        Raises:
            KeyError: If no such machine is registered
        """
        name = name or self.default
        if name is None or name not in self._definitions:
            raise KeyError(f"Unknown machine: {name}")
        return self._definitions[name].build()

    def set_default(self, name: str) -> None:
        """Set the default machine."""
        if name not in self._definitions:
            raise ValueError(f"Unknown machine: {name}")
        self._default = name

    @property
    def default(self) -> Optional[str]:
        """The default machine name (the only one if just one is registered)."""
        if self._default:
            return self._default
        if len(self._definitions) == 1:
            return next(iter(self._definitions))
        return None

    def list_machines(self) -> List[str]:
        """List all registered machine names."""
        return list(self._definitions.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._definitions
