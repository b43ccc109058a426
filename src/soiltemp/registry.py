"""Model registry for soiltemp soil temperature models.

Provides a global registry of model variants, enabling runtime model selection
by name. Each registered engine class must follow the StepEngine contract.

Required class attributes:
    - name: str - Registry name
    - PARAM_NAMES: tuple[str, ...] - Names of the scalar model constants
    - DEFAULT_BOUNDS: dict[str, tuple[float, float]] - Physical (min, max) per constant
    - State: class - Dataclass with from_array() classmethod and __array__() method
    - initialize: method - Build the initial state
    - step: method - Advance one day
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from soiltemp.engine import StepEngine

logger = logging.getLogger(__name__)

# Required class-level attributes
_REQUIRED_ATTRIBUTES: tuple[str, ...] = (
    "name",
    "PARAM_NAMES",
    "DEFAULT_BOUNDS",
    "State",
    "initialize",
    "step",
)

# Required methods for State class
_REQUIRED_STATE_METHODS: tuple[str, ...] = ("from_array", "__array__")

# Global registry: {name: engine class}
_models: dict[str, type[StepEngine]] = {}


def _validate_engine(engine_cls: type) -> None:
    """Validate that an engine class satisfies the model contract.

    Args:
        engine_cls: The engine class to validate.

    Raises:
        ValueError: If the class is missing required attributes or methods.
    """
    missing = [attr for attr in _REQUIRED_ATTRIBUTES if not hasattr(engine_cls, attr)]
    if missing:
        missing_str = ", ".join(missing)
        msg = f"Model '{getattr(engine_cls, '__name__', engine_cls)}' is missing required attributes: {missing_str}"
        raise ValueError(msg)

    name = engine_cls.name
    if not callable(engine_cls.initialize) or not callable(engine_cls.step):
        msg = f"Model '{name}' initialize and step must be callable"
        raise ValueError(msg)

    missing_state = [method for method in _REQUIRED_STATE_METHODS if not hasattr(engine_cls.State, method)]
    if missing_state:
        missing_str = ", ".join(missing_state)
        msg = f"Model '{name}' State class is missing required methods: {missing_str}"
        raise ValueError(msg)

    unbounded = [param for param in engine_cls.PARAM_NAMES if param not in engine_cls.DEFAULT_BOUNDS]
    if unbounded:
        missing_str = ", ".join(unbounded)
        msg = f"Model '{name}' DEFAULT_BOUNDS is missing entries for: {missing_str}"
        raise ValueError(msg)


def register(engine_cls: type[StepEngine]) -> None:
    """Register a model engine class under its ``name``.

    Args:
        engine_cls: StepEngine subclass to register.

    Raises:
        ValueError: If the class does not follow the model contract.

    Example:
        >>> from soiltemp import registry
        >>> from soiltemp.models.swat_lag import SwatLagModel
        >>> registry.register(SwatLagModel)
    """
    _validate_engine(engine_cls)
    _models[engine_cls.name] = engine_cls
    logger.debug("Registered model '%s'", engine_cls.name)


def get_model(name: str) -> type[StepEngine]:
    """Get a registered engine class by name.

    Raises:
        KeyError: If the model name is not registered.

    Example:
        >>> model = registry.get_model("swat_lag")()
        >>> result = model.run(profile, site, forcing)
    """
    if name not in _models:
        available = ", ".join(sorted(_models.keys())) if _models else "(none)"
        msg = f"Unknown model '{name}'. Available models: {available}"
        raise KeyError(msg)
    return _models[name]


def create_model(name: str, **overrides: Any) -> StepEngine:
    """Instantiate a registered model, overriding some of its default constants.

    Raises:
        KeyError: If the model name is not registered.
        TypeError: If an override is not a field of the model.
    """
    return get_model(name)(**overrides)


def list_models() -> list[str]:
    """Return sorted list of registered model names.

    Example:
        >>> registry.list_models()
        ['damping_depth', 'lagged_decay', 'snow_insulated', 'swat_lag']
    """
    return sorted(_models.keys())


def get_model_info(name: str) -> dict[str, object]:
    """Get metadata about a registered model.

    Returns:
        Dictionary containing:
            - param_names: tuple[str, ...] - Scalar constant names
            - default_bounds: dict[str, tuple[float, float]] - Physical bounds
            - defaults: dict[str, object] - Default value of every model field

    Raises:
        KeyError: If the model name is not registered.
    """
    engine_cls = get_model(name)
    defaults = {field.name: field.default for field in dataclasses.fields(engine_cls)}

    return {
        "param_names": engine_cls.PARAM_NAMES,
        "default_bounds": engine_cls.DEFAULT_BOUNDS,
        "defaults": defaults,
    }
