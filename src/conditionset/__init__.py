"""Condition sets.

A small rule engine for named integer conditions: parse a data-file
block of expressions into a tree, then test it against a mapping of
condition values or apply it to mutate them.
"""

from conditionset.condition_set import ConditionSet, read_condition, update_condition
from conditionset.config import EngineConfig, configure, load_config
from conditionset.datafile import DataFile, DataNode, DataWriter, Diagnostic
from conditionset.errors import ConditionSetError, ConfigError, DataFileError, DataWriterError
from conditionset.expression import Expression
from conditionset.operators import Operator, lookup
from conditionset.randomness import RandomSource, StdRandom, default_source, seed

__all__ = [
    # Engine
    "ConditionSet",
    "Expression",
    "Operator",
    "lookup",
    "read_condition",
    "update_condition",
    # Data files
    "DataFile",
    "DataNode",
    "DataWriter",
    "Diagnostic",
    # Randomness
    "RandomSource",
    "StdRandom",
    "default_source",
    "seed",
    # Config
    "EngineConfig",
    "load_config",
    "configure",
    # Errors
    "ConditionSetError",
    "ConfigError",
    "DataFileError",
    "DataWriterError",
]
