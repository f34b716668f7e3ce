"""Configuration classes for markup navigation.

This module provides configuration objects for the tokenizer, the tree builder,
the navigation engine and the tree cache, together with an immutable aggregate
that can be serialized to and from JSON.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

# HTML void elements: never closed, never have children.
DEFAULT_VOID_ELEMENTS: FrozenSet[str] = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_COMPONENT_FIELDS = ["tokenizer", "tree", "navigation", "cache", "global_"]


@dataclass
class TokenizerConfig:
    """Configuration for tag tokenization."""

    void_elements: FrozenSet[str] = DEFAULT_VOID_ELEMENTS
    enable_metrics: bool = True

    def __post_init__(self) -> None:
        """Normalize and validate tokenizer configuration."""
        if isinstance(self.void_elements, str):
            raise ValueError("void_elements must be a collection of tag names")
        names = frozenset(name.lower() for name in self.void_elements)
        if any(not name for name in names):
            raise ValueError("void_elements cannot contain empty names")
        self.void_elements = names

    def is_void(self, tag_name: str) -> bool:
        """Check whether ``tag_name`` is a void element (case-insensitive)."""
        return tag_name.lower() in self.void_elements


@dataclass
class TreeConfig:
    """Configuration for tree building."""

    flush_unclosed_at_eof: bool = False
    record_diagnostics: bool = True
    max_tree_depth: int = 1000

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if self.max_tree_depth <= 0:
            raise ValueError("max_tree_depth must be > 0")


@dataclass
class NavigationConfig:
    """Configuration for the navigation engine."""

    enable_descent_memory: bool = True
    skip_line_end_nodes: bool = True
    reveal_after_move: bool = True


@dataclass
class CacheConfig:
    """Configuration for the per-document tree cache."""

    max_documents: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate cache configuration."""
        if self.max_documents is not None and self.max_documents <= 0:
            raise ValueError("max_documents must be > 0 or None")


@dataclass
class GlobalConfig:
    """Global settings that apply across all components."""

    logging_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {VALID_LOGGING_LEVELS}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class NavigatorConfig:
    """Complete configuration for markup navigation.

    Immutable aggregate of the component configurations. Use :meth:`override`
    to derive a modified copy.
    """

    tokenizer: TokenizerConfig = field(default_factory=TokenizerConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    # Metadata
    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.tokenizer.__post_init__()
            self.tree.__post_init__()
            self.cache.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "NavigatorConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; nested fields use ``component__field``

        Returns:
            New NavigatorConfig instance with overrides applied

        Example:
            >>> config = NavigatorConfig()
            >>> new_config = config.override(
            ...     tree__flush_unclosed_at_eof=True,
            ...     cache__max_documents=8,
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENT_FIELDS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENT_FIELDS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for component in _COMPONENT_FIELDS:
                current = getattr(self, component)
                if component in nested_overrides:
                    new_fields[component] = replace(
                        current, **nested_overrides.pop(component)
                    )
            new_fields.update(nested_overrides)
            return replace(self, **new_fields)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"Invalid override: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            if isinstance(obj, (set, frozenset)):
                return sorted(_dataclass_to_dict(item) for item in obj)
            if isinstance(obj, (list, tuple)):
                return [_dataclass_to_dict(item) for item in obj]
            if isinstance(obj, dict):
                return {key: _dataclass_to_dict(value) for key, value in obj.items()}
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NavigatorConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files surface
        instead of being silently ignored.
        """
        def _dict_to_dataclass(data_dict: Dict[str, Any], target_class: type) -> Any:
            if not isinstance(data_dict, dict):
                raise ConfigValidationError(
                    f"Expected mapping for {target_class.__name__}, "
                    f"got {type(data_dict).__name__}"
                )
            known = target_class.__dataclass_fields__
            unknown = sorted(set(data_dict) - set(known))
            if unknown:
                raise ConfigValidationError(
                    f"Unknown {target_class.__name__} fields: {', '.join(unknown)}",
                    field_name=unknown[0],
                    suggestions=sorted(known),
                )

            field_values: Dict[str, Any] = {}
            for field_name, value in data_dict.items():
                field_type = known[field_name].type
                if hasattr(field_type, "__dataclass_fields__"):
                    field_values[field_name] = _dict_to_dataclass(value, field_type)
                else:
                    field_values[field_name] = value
            return target_class(**field_values)

        try:
            return _dict_to_dataclass(data, cls)
        except ConfigValidationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "NavigatorConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def reference(cls) -> "NavigatorConfig":
        """Preset reproducing the reference tree-building behaviour exactly."""
        return cls(
            name="reference",
            description="Unclosed tags stay invisible; unbounded cache",
        )

    @classmethod
    def editor_friendly(cls) -> "NavigatorConfig":
        """Preset for long editing sessions over partially typed markup."""
        return cls(
            tree=TreeConfig(flush_unclosed_at_eof=True),
            cache=CacheConfig(max_documents=64),
            name="editor_friendly",
            description=(
                "Unclosed tags are flushed at end of input so half-typed "
                "markup stays navigable; cache bounded to 64 documents"
            ),
        )
