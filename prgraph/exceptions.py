# Custom exceptions for the dependency graph builder

class PrGraphError(Exception):
    pass

class FileSystemError(PrGraphError):
    pass

class FileReadError(FileSystemError):
    pass

class EncodingError(FileSystemError):
    pass

class ConfigurationError(PrGraphError):
    pass

class InvalidConfigError(ConfigurationError):
    pass
