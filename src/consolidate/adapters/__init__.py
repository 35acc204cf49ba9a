from .base import EngineAdapter
from .custom import CallbackAdapter, CoroutineAdapter, FunctionAdapter
from .registry import (
    EngineRegistry,
    get_engine_adapter,
    get_registry,
    list_engines,
    register_engine,
)

__all__ = [
    "EngineAdapter",
    "FunctionAdapter",
    "CallbackAdapter",
    "CoroutineAdapter",
    "EngineRegistry",
    "get_engine_adapter",
    "get_registry",
    "list_engines",
    "register_engine",
]
