# rte_ted/components.py
import logging
from typing import Callable, Dict, Optional

from rte_ted.config import COMPONENT_SECTION, DistanceConfig
from rte_ted.distance.fixed_weight import FixedWeightTreeEditDistance
from rte_ted.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Имя компонента в конфигурации -> фабрика (DistanceConfig -> компонент)
COMPONENT_REGISTRY: Dict[str, Callable[..., object]] = {
    COMPONENT_SECTION: FixedWeightTreeEditDistance,
    # Короткий псевдоним
    "fixed_weight": FixedWeightTreeEditDistance,
}


def register_component(name: str, factory: Callable[..., object]):
    if name in COMPONENT_REGISTRY:
        raise ConfigurationError(f"Component '{name}' is already registered")
    COMPONENT_REGISTRY[name] = factory


def create_component(config: Optional[DistanceConfig] = None, name: Optional[str] = None, **kwargs):
    """Создает компонент по имени (по умолчанию - config.component)."""
    config = config or DistanceConfig()
    name = name or config.component

    factory = COMPONENT_REGISTRY.get(name)
    if factory is None:
        raise ConfigurationError(
            f"Unknown component: '{name}'. Available: {', '.join(sorted(COMPONENT_REGISTRY))}"
        )

    logger.info(f"Creating component '{name}'")
    return factory(config, **kwargs)
