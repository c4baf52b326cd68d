"""Registry for pluggable optimizers in parclust."""

from parclust.utils.logging import ParclustLogger

from .interfaces import Optimizer

logger = ParclustLogger.get_logger(__name__)

OPTIMIZER_REGISTRY: dict[str, type[Optimizer]] = {}

__all__ = [
    "register_optimizer",
    "get_optimizer",
    "OPTIMIZER_REGISTRY",
]


def register_optimizer(name: str):
    """Decorator to register an optimizer implementation."""

    def decorator(cls: type[Optimizer]):
        if name in OPTIMIZER_REGISTRY:
            raise ValueError(f"Optimizer '{name}' is already registered")
        OPTIMIZER_REGISTRY[name] = cls
        return cls

    return decorator


def get_optimizer(name: str) -> type[Optimizer]:
    """Look up a registered optimizer class by name."""
    optimizer_class = OPTIMIZER_REGISTRY.get(name)
    if optimizer_class is None:
        available = ", ".join(sorted(OPTIMIZER_REGISTRY))
        logger.error(f"❌ Unknown optimizer: {name}")
        raise ValueError(f"Unknown optimizer '{name}'. Available: {available}")
    return optimizer_class
