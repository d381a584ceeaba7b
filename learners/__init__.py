from .asgd import AsgdOptimizer, OptimizerStateError

__all__ = ["AsgdOptimizer", "OptimizerStateError"]
