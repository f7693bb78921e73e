from rte_ted.alignment.lookup import AlignmentLookup
from rte_ted.config import DistanceConfig, load_config
from rte_ted.core.data_structures import AlignmentEntry, Direction, Fragment, Token
from rte_ted.distance.fixed_weight import DistanceResult, FixedWeightTreeEditDistance
from rte_ted.distance.labeled_tree import LabeledTree
from rte_ted.distance.tree_edit_distance import TreeEditDistance
from rte_ted.exceptions import (
    ConfigurationError,
    MalformedInputError,
    MalformedTreeError,
    RTETedError,
    TreeSizeLimitError,
)

__version__ = "0.1.0"

__all__ = [
    "AlignmentLookup",
    "DistanceConfig",
    "load_config",
    "AlignmentEntry",
    "Direction",
    "Fragment",
    "Token",
    "DistanceResult",
    "FixedWeightTreeEditDistance",
    "LabeledTree",
    "TreeEditDistance",
    "ConfigurationError",
    "MalformedInputError",
    "MalformedTreeError",
    "RTETedError",
    "TreeSizeLimitError",
]
