"""Exception hierarchy for consolidate."""

from typing import Optional, Sequence


class ConsolidateError(Exception):
    """Base exception for all consolidate errors."""

    pass


class ReadError(ConsolidateError):
    """A template or partial file could not be read."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class EngineError(ConsolidateError):
    """Error raised by a wrapped template library."""

    def __init__(
        self,
        message: str,
        engine: str,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.engine = engine
        self.original_exception = original_exception


class CompileError(EngineError):
    """The wrapped library rejected the template source."""

    pass


class RenderError(EngineError):
    """The wrapped library failed while evaluating a template."""

    pass


class EngineNotInstalledError(ConsolidateError):
    """The library behind an engine cannot be imported."""

    def __init__(self, engine: str, modules: Sequence[str]):
        tried = ", ".join(modules)
        super().__init__(
            f"Engine '{engine}' is not installed (tried: {tried}). "
            f"Suggestion: pip install 'consolidate-engines[{engine}]'"
        )
        self.engine = engine
        self.modules = list(modules)


class UnknownEngineError(ConsolidateError):
    """No engine is registered under the requested name."""

    pass


class SyncAdapterError(ConsolidateError):
    """An asynchronous operation could not be turned into a return value."""

    pass


class ConfigError(ConsolidateError):
    """Invalid consolidate configuration."""

    pass
