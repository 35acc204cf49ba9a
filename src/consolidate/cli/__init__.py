from .main import consolidate

__all__ = ["consolidate"]
