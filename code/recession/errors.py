"""Exception hierarchy for the recession simulation kernel."""


class SimulationError(Exception):
    """Base exception for all simulation kernel errors."""


class InvalidTrialCountError(SimulationError, ValueError):
    """Trial count is not a positive integer."""


class NumericAnomalyError(SimulationError, ArithmeticError):
    """A sampled value, score or probability came out NaN or infinite."""


class ModelConfigurationError(SimulationError, ValueError):
    """Coefficient/volatility table or scenario definition is unusable."""


class SimulationCancelled(SimulationError):
    """The caller asked the run to stop before all trials completed."""
