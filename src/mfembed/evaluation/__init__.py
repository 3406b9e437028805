"""
mfembed Evaluation

Held-out error metrics for trained factor stores.
"""

from .metrics import rmse, squared_error_sum

__all__ = ["rmse", "squared_error_sum"]
