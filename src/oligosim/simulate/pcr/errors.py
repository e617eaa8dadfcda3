"""Exception taxonomy for the PCR random access simulator."""


class OligoSimError(Exception):
    """Base class for all simulation errors."""


class ConfigError(OligoSimError, ValueError):
    """Bad distribution or run configuration parameters."""


class InvalidParameterError(OligoSimError, ValueError):
    """Efficiency outside [1, 2], bad cycle count or malformed pool."""


class InvalidPartitionError(InvalidParameterError):
    """target_percent yields an empty target or non-target segment."""


class InvalidStageError(OligoSimError, ValueError):
    """Nesting requested without a usable prior stage."""


class NumericOverflowError(OligoSimError, OverflowError):
    """Amplified copy numbers left the representable range."""
