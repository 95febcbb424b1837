"""
Schema definitions for the universe world models.
"""

from dataclasses import dataclass, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Type, Union


NAMESPACE = "universe"


@dataclass(frozen=True)
class UniversePlayer:
    """`universe::models::universe_player::UniversePlayer` struct."""
    id: int = 0
    user_id: int = 0
    created_at: int = 0
    last_updated_at: int = 0
    last_login_at: int = 0

    # Attributes
    fame: int = 0
    charisma: int = 0
    stamina: int = 0
    strength: int = 0
    agility: int = 0
    intelligence: int = 0

    universe_currency: int = 0

    # Appearance
    body_type: int = 0
    skin_color: int = 0
    beard_type: int = 0
    hair_type: int = 0
    hair_color: int = 0


@dataclass(frozen=True)
class User:
    """`universe::models::user::User` struct."""
    owner: str = ""
    username: int = 0
    created_at: int = 0


class ModelsMapping(str, Enum):
    """Model tags used to address records in the world."""
    UniversePlayer = f"{NAMESPACE}-UniversePlayer"
    User = f"{NAMESPACE}-User"


SCHEMA: Mapping[str, Mapping[str, Any]] = MappingProxyType({
    NAMESPACE: MappingProxyType({
        "UniversePlayer": UniversePlayer(),
        "User": User(),
    }),
})

MODEL_TYPES: Mapping[str, Type] = MappingProxyType({
    ModelsMapping.UniversePlayer.value: UniversePlayer,
    ModelsMapping.User.value: User,
})

# Fields kept as text instead of felts
_STRING_FIELDS = {(User, "owner")}

ModelRef = Union[Type, str, ModelsMapping]


def resolve_model(model: ModelRef) -> Type:
    """Resolve a model class from a class, a bare name or a tag."""
    if isinstance(model, type):
        if model not in MODEL_TYPES.values():
            raise KeyError(f"Unknown model: {model.__name__}")
        return model
    if isinstance(model, ModelsMapping):
        model = model.value
    if model in MODEL_TYPES:
        return MODEL_TYPES[model]
    tag = f"{NAMESPACE}-{model}"
    if tag in MODEL_TYPES:
        return MODEL_TYPES[tag]
    raise KeyError(f"Unknown model: {model}")


def default_fields(model: ModelRef) -> Dict[str, Any]:
    """Field name to default value, in declaration order."""
    cls = resolve_model(model)
    return {f.name: f.default for f in fields(cls)}


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Expected a felt-like value, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text)
    raise ValueError(f"Expected a felt-like value, got {value!r}")


def model_from_dict(model: ModelRef, data: Mapping[str, Any]):
    """Build a model record from an indexer row.

    Missing keys fall back to their defaults and unknown keys are ignored.
    """
    cls = resolve_model(model)
    values: Dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in data or data[f.name] is None:
            continue
        raw = data[f.name]
        if (cls, f.name) in _STRING_FIELDS:
            values[f.name] = str(raw)
        else:
            values[f.name] = _to_int(raw)
    return cls(**values)
