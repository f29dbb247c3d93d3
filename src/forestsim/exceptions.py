"""
Custom exceptions for ForestSim.
Provides domain-specific error handling with informative messages.
"""
from typing import Optional


class ForestSimError(Exception):
    """Base exception for all ForestSim errors."""
    pass


class ConfigurationError(ForestSimError):
    """Raised when there are configuration-related issues."""
    pass


class InvalidSpeciesError(ForestSimError, ValueError):
    """Raised when a species name does not match a known species."""
    def __init__(self, species_name: str, valid_names: Optional[list] = None):
        self.species_name = species_name
        message = f"Invalid species '{species_name}'"
        if valid_names:
            message += f". Valid species: {', '.join(valid_names)}"
        super().__init__(message)


class ForestError(ForestSimError):
    """Raised when forest-level operations fail."""
    pass


class IndexOutOfRangeError(ForestError, IndexError):
    """Raised when a tree position does not exist in a forest."""
    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Tree number {index} does not exist.")


class PersistenceError(ForestError):
    """Raised when a forest snapshot cannot be saved or loaded.

    The underlying exception is kept on ``cause`` and is also chained as
    ``__cause__`` by the code raising this error.
    """
    def __init__(self, path: str, operation: str, cause: Exception):
        self.path = str(path)
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to {operation} forest '{self.path}': {cause}")


class DataError(ForestSimError):
    """Raised when there are data-related issues."""
    pass


class ForestFileNotFoundError(DataError):
    """Raised when a required file is not found."""
    def __init__(self, file_path: str, file_type: str = "file"):
        self.file_path = str(file_path)
        self.file_type = file_type
        super().__init__(f"Required {file_type} not found: {self.file_path}")


class InvalidDataError(DataError):
    """Raised when data is malformed or invalid."""
    def __init__(self, data_description: str, reason: str):
        self.data_description = data_description
        self.reason = reason
        super().__init__(f"Invalid {data_description}: {reason}")
