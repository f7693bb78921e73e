# rte_ted/config.py
import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from rte_ted.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Базовые пути относительно пакета (конфигурация ставится вместе с ним)
BASE_DIR = Path(__file__).resolve().parent
CONFIG_DIR = BASE_DIR / "resources"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "default.yaml"

# Имя секции компонента в YAML (как в исходных конфигурациях EDA)
COMPONENT_SECTION = "FixedWeightTreeEditDistance"


class DistanceConfig(BaseModel):
    """Параметры компонента расстояния и извлечения признаков."""

    # Веса операций (fixed weight edit distance)
    match_weight: float = Field(default=0.0, ge=0)
    delete_weight: float = Field(default=1.0, ge=0)
    insert_weight: float = Field(default=1.0, ge=0)
    substitute_weight: float = Field(default=1.0, ge=0)

    # True: LOCAL-ENTAILMENT замена стоит match_weight (выравнивание уменьшает расстояние).
    # False: стоимость считается только по леммам, выравнивание лишь переразмечает операции.
    alignment_affects_cost: bool = True

    punctuation_removal: bool = False
    # Файл ручных выравниваний: "form_POS\tform_POS" на строку
    alignments_file: Optional[Path] = None
    # Ограничение размера дерева на входе оркестратора (None - без ограничения)
    max_tree_size: Optional[int] = Field(default=None, gt=0)

    # Какие трансформации попадают в признаки: match, ins, del, rep
    transformations: str = "match,ins,del,rep"
    verbosity_level: str = "INFO"
    component: str = COMPONENT_SECTION


def load_config(path: Union[str, Path, None] = None) -> DistanceConfig:
    """
    Читает YAML-конфигурацию. Параметры могут лежать в корне файла
    или в секции FixedWeightTreeEditDistance.
    """
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config {path} must be a mapping, got {type(raw).__name__}")

    section = raw.get(COMPONENT_SECTION, raw)
    try:
        cfg = DistanceConfig(**section)
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    logger.debug(f"Loaded config from {path}: {cfg}")
    return cfg
