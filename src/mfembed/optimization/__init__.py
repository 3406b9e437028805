"""
mfembed Optimization

Initialization, the SGD epoch update and the epoch driver:
1. init_store (initializer.py): data-scaled random factors, zero biases/momentum
2. run_epoch (sgd.py): one sequential SGD-with-momentum pass, returns epoch RMSE
3. EmbedTrainer (trainer.py): shuffling, stopping on th/maxit, history, save/load
"""

from .initializer import init_store, init_scale
from .sgd import run_epoch
from .trainer import EmbedTrainer

__all__ = [
    'init_store',
    'init_scale',
    'run_epoch',
    'EmbedTrainer',
]
