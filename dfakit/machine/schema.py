"""
Machine definition schema using Pydantic models.

A MachineDefinition is the single configuration structure a caller builds
once. Raw, loosely-typed input is normalized here, before the engine sees
it:

- an alphabet given as a string is split into characters
- scalar alphabet entries and transition token keys are stringified
- a state given as a bare scalar (or null) is shorthand for its output
- states may be a list of entries with inline transitions

Cross-references (initial state, transition sources, targets and tokens)
are not checked by the schema; ``build()`` delegates them to the engine,
which raises the machine error taxonomy.

Example YAML:
```yaml
name: mod-three
alphabet: "01"
initial_state: S0

states:
  S0: {output: 0}
  S1: {output: 1}
  S2: {output: 2}

transitions:
  S0: {"0": S0, "1": S1}
  S1: {"0": S2, "1": S0}
  S2: {"0": S1, "1": S2}
```
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from dfakit.machine.alphabet import Alphabet
from dfakit.machine.engine import INITIAL_STATE_INVALID, FiniteStateMachine
from dfakit.machine.states import StateRegistry, describe
from dfakit.machine.transitions import TransitionTable

SCALAR_TYPES = (str, int, float, bool)


class StateDefinition(BaseModel):
    """
    A state definition.

    A state with an ``output`` is accepting: a run may end there and
    yields that output unchanged. A state without one is non-accepting.
    """

    output: Optional[Any] = None
    description: Optional[str] = None

    @field_validator("output")
    @classmethod
    def validate_output(cls, v: Any) -> Any:
        """Outputs must be scalars (str, int, float or bool)."""
        if v is not None and not isinstance(v, SCALAR_TYPES):
            raise ValueError(f"State output must be a scalar value, got {type(v).__name__}")
        return v

    @property
    def is_accepting(self) -> bool:
        return self.output is not None


class MachineDefinition(BaseModel):
    """
    Complete machine definition.

    A machine defines:
    - Alphabet: single-character input tokens
    - States: valid state names, with outputs for accepting states
    - Initial state: where every run starts
    - Transitions: source state -> token -> target state
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="machine", min_length=1, max_length=100)
    version: str = "1.0"
    description: Optional[str] = None

    alphabet: List[str]
    states: Dict[str, StateDefinition]
    initial_state: str = Field(..., validation_alias=AliasChoices("initial_state", "initial"))
    transitions: Dict[str, Dict[str, str]] = Field(default_factory=dict)

    metadata: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_states(cls, data: Any) -> Any:
        """Normalize state shorthand and merge inline transitions into the table."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        states = data.get("states")
        transitions = _stringify_table(data.get("transitions") or {})

        if isinstance(states, list):
            entries = {}
            for entry in states:
                if not isinstance(entry, dict) or "name" not in entry:
                    raise ValueError("State list entries must be mappings with a 'name'")
                entry = dict(entry)
                entries[str(entry.pop("name"))] = entry
            states = entries

        if isinstance(states, dict):
            normalized: Dict[str, Any] = {}
            for name, entry in states.items():
                name = str(name)
                if entry is None or isinstance(entry, SCALAR_TYPES):
                    entry = {"output": entry}
                elif (
                    isinstance(entry, dict)
                    and "transitions" in entry
                    and isinstance(transitions, dict)
                ):
                    entry = dict(entry)
                    inline = _stringify_table({name: entry.pop("transitions") or {}})
                    _merge_row(transitions, name, inline.get(name, {}))
                normalized[name] = entry
            data["states"] = normalized

        data["transitions"] = transitions

        for key in ("initial_state", "initial"):
            if isinstance(data.get(key), (int, float)) and not isinstance(data[key], bool):
                data[key] = str(data[key])

        return data

    @field_validator("alphabet", mode="before")
    @classmethod
    def normalize_alphabet(cls, v: Any) -> Any:
        """Split a string alphabet into characters and stringify scalars."""
        if isinstance(v, str):
            return list(v)
        if isinstance(v, (list, tuple, set, frozenset)):
            return [str(item) for item in v]
        return v

    @field_validator("alphabet")
    @classmethod
    def validate_tokens(cls, v: List[str]) -> List[str]:
        """Tokens are single characters; duplicates collapse."""
        for token in v:
            if len(token) != 1:
                raise ValueError(f"Alphabet tokens must be single characters: {token!r}")
        return list(dict.fromkeys(v))

    def build(self) -> FiniteStateMachine:
        """
        Build a machine from this definition.

        The initial state is checked before the transition table, so an
        unknown initial state is reported whatever the table contains.

        Returns:
            A validated FiniteStateMachine

        Raises:
            InvalidState: If the initial state or a transition state is unknown
            InvalidToken: If a transition token is not in the alphabet
        """
        alphabet = Alphabet(self.alphabet)
        states = StateRegistry({name: describe(s.output) for name, s in self.states.items()})
        states.require(self.initial_state, INITIAL_STATE_INVALID)
        transitions = TransitionTable(self.transitions, alphabet, states)
        return FiniteStateMachine(
            alphabet=alphabet,
            states=states,
            initial_state=self.initial_state,
            transitions=transitions,
            name=self.name,
        )

    def get_accepting_states(self) -> List[str]:
        """Get the names of all accepting states."""
        return [name for name, s in self.states.items() if s.is_accepting]


def build_machine(
    alphabet: Any,
    states: Mapping[str, Any],
    initial_state: str,
    transitions: Mapping[str, Mapping[Any, str]],
    name: str = "machine",
) -> FiniteStateMachine:
    """
    Build a machine from the four raw configuration values.

    Args:
        alphabet: String, sequence of scalars, or set of tokens
        states: State name -> {"output": ...} (or the output itself)
        initial_state: Name of the initial state
        transitions: State name -> token -> state name

    Returns:
        A validated FiniteStateMachine
    """
    definition = MachineDefinition.model_validate(
        {
            "name": name,
            "alphabet": alphabet,
            "states": states,
            "initial_state": initial_state,
            "transitions": transitions,
        }
    )
    return definition.build()


def _stringify_table(table: Any) -> Any:
    """Stringify state names and token keys of a raw transition table."""
    if not isinstance(table, dict):
        return table
    result: Dict[str, Any] = {}
    for source, row in table.items():
        if isinstance(row, dict):
            row = {str(token): _stringify_name(target) for token, target in row.items()}
        result[str(source)] = row
    return result


def _stringify_name(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _merge_row(table: Dict[str, Any], source: str, row: Dict[str, str]) -> None:
    existing = table.setdefault(source, {})
    if not isinstance(existing, dict):
        return
    for token, target in row.items():
        if token in existing and existing[token] != target:
            raise ValueError(
                f"Conflicting transitions from '{source}' on {token!r}: "
                f"'{existing[token]}' and '{target}'"
            )
        existing[token] = target
