"""ContextVar-based generator configuration for pugsrc.

Provides thread-local default configuration using Python's ContextVars
(PEP 567). ``generate()`` reads the active config and merges per-call
keyword overrides on top of it.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed.

Usage:
    # Per call
    generate(ast, indent_unit="\\t")

    # For a region of code
    with generator_config_context(GeneratorConfig(use_colon=True)):
        source = generate(ast)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Literal

from pugsrc.errors import ConfigError

# Option names used by the JavaScript generator, accepted by from_dict
_ALIASES: dict[str, str] = {
    "indentChar": "indent_unit",
    "useColon": "use_colon",
    "preferredQuote": "preferred_quote",
}


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """Immutable generator configuration.

    Attributes:
        indent_unit: Literal string repeated once per indent level
        use_colon: Prefer block expansion (``li: a``) when possible
        preferred_quote: Quote character used for quoted attribute names

    """

    indent_unit: str = "  "
    use_colon: bool = False
    preferred_quote: Literal["'", '"'] = "'"

    def __post_init__(self) -> None:
        if self.preferred_quote not in ("'", '"'):
            msg = f"preferred_quote must be ' or \", got {self.preferred_quote!r}"
            raise ConfigError(msg)
        if not self.indent_unit:
            msg = "indent_unit must not be empty"
            raise ConfigError(msg)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "GeneratorConfig":
        """Create GeneratorConfig from dictionary.

        Accepts both the snake_case field names and the JavaScript option
        names (``indentChar``, ``useColon``, ``preferredQuote``). Unknown keys
        are silently ignored.

        Example:
            >>> config = GeneratorConfig.from_dict({"useColon": True, "other": 1})
            >>> config.use_colon
            True

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered: dict[str, Any] = {}
        for key, value in config_dict.items():
            name = _ALIASES.get(key, key)
            if name in valid_fields:
                filtered[name] = value
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: GeneratorConfig = GeneratorConfig()

_generator_config: ContextVar[GeneratorConfig] = ContextVar(
    "generator_config",
    default=_DEFAULT_CONFIG,
)


def get_generator_config() -> GeneratorConfig:
    """Get current generator configuration (thread-local)."""
    return _generator_config.get()


def set_generator_config(config: GeneratorConfig) -> None:
    """Set generator configuration for current context.

    Args:
        config: GeneratorConfig instance to use for this context.

    """
    _generator_config.set(config)


def reset_generator_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton.

    """
    _generator_config.set(_DEFAULT_CONFIG)


@contextmanager
def generator_config_context(config: GeneratorConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with generator_config_context(GeneratorConfig(indent_unit="\\t")):
        ...     get_generator_config().indent_unit
        '\\t'

    """
    previous = _generator_config.get()
    _generator_config.set(config)
    try:
        yield
    finally:
        _generator_config.set(previous)


__all__ = [
    "GeneratorConfig",
    "generator_config_context",
    "get_generator_config",
    "reset_generator_config",
    "set_generator_config",
]
