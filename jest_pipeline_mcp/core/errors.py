"""Exceptions raised by the core pipeline components."""


class PipelineError(Exception):
    """Base class for pipeline errors."""


class FileAccessError(PipelineError):
    """A source file could not be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class ParseFailureError(PipelineError):
    """Source could not be parsed as TypeScript/JavaScript."""

    def __init__(self, path: str, line: int | None = None, column: int | None = None):
        self.path = path
        self.line = line
        self.column = column
        where = f" at line {line}, column {column}" if line is not None else ""
        super().__init__(f"Failed to parse {path}{where}")


class MethodNotFoundError(PipelineError):
    """The requested method filter matched nothing in the entry file."""

    def __init__(self, method: str, path: str):
        self.method = method
        self.path = path
        super().__init__(f'Method "{method}" not found in {path}')


class ProviderError(PipelineError):
    """The text-generation provider failed or returned a malformed response."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class MissingAPIKeyError(ProviderError):
    """No API key was given or found in the environment."""

    def __init__(self, provider: str, env_var: str):
        self.env_var = env_var
        super().__init__(provider, f"API key not configured (set {env_var})")
