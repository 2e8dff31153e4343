"""Custom exceptions for GridCase."""

class GridCaseError(Exception):
    """Base exception for GridCase errors."""
    pass

class ValidationError(GridCaseError):
    """Base exception for validation errors."""
    pass

class ValidationTypeError(ValidationError):
    """Exception raised for type validation errors."""
    pass

class ValidationRangeError(ValidationError):
    """Exception raised for range validation errors."""
    pass

class InvalidScenarioError(ValidationError):
    """Exception raised when a scenario cannot be simulated.

    Raised before a run starts, never partway through one.
    """
    pass

class ConfigurationError(GridCaseError):
    """Exception raised for configuration errors."""
    pass

class NetworkError(GridCaseError):
    """Exception raised for malformed network reference data."""
    pass

class SimulationError(GridCaseError):
    """Exception raised for simulation-related errors."""
    pass
