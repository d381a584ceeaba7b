from .linear import LinearPredictor

__all__ = ["LinearPredictor"]
