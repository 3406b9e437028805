"""
EmbedTrainer: epoch driver for SGD factor training.

Wraps the core operations (init_store, run_epoch, rmse, persistence) in a
fit/predict/evaluate interface:

1. Derive entity counts from the training entries (symmetric mode folds the
   column space into the row space)
2. Initialize a fresh store, unless one was loaded
3. Shuffle entries (once by default, or before every epoch)
4. Run epochs until the epoch RMSE drops below `th` or `maxit` epochs ran
5. Record the RMSE history

Training and evaluation never overlap: `fit` runs epochs to completion
before `evaluate` can read the store.
"""

import sys
import warnings
import numpy as np
from typing import Optional, Dict, List, Literal

from ..config import TRAINING_CONFIG, EVALUATION_CONFIG
from ..data.entries import make_entries, entity_counts
from ..evaluation.metrics import rmse
from ..models.options import Options
from ..models.factor_store import FactorStore
from ..models.persistence import save_store, load_store
from .initializer import init_store
from .sgd import run_epoch


ShuffleMode = Literal['once', 'epoch', 'none']


class EmbedTrainer:
    """
    Main training loop for factor embeddings.

    Attributes:
        options: Options used for initialization and updates
        symmetric: Whether rows and columns share one entity space
        shuffle: 'once' (shuffle before the first epoch), 'epoch' (before
                 every epoch) or 'none' (keep the given order)
        store: FactorStore (None until fit() or load())
        history: Training history ({'rmse': [...]}, one value per epoch)
        n_iter_: Epochs run by the last fit()
        converged_: Whether the last fit() reached rmse < th

    Example:
        >>> from mfembed.data import generate_low_rank_entries
        >>> from mfembed.optimization import EmbedTrainer
        >>>
        >>> entries, _ = generate_low_rank_entries(50, 40, random_state=0)
        >>> trainer = EmbedTrainer(Options(dim=5, maxit=30), random_seed=0)
        >>> trainer.fit(entries)
        >>> print(f"Final RMSE: {trainer.history['rmse'][-1]:.4f}")
        >>> trainer.save("model.bin")
    """

    def __init__(
        self,
        options: Optional[Options] = None,
        symmetric: bool = TRAINING_CONFIG["symmetric"],
        shuffle: ShuffleMode = TRAINING_CONFIG["shuffle"],
        verbose: bool = True,
        random_seed: Optional[int] = TRAINING_CONFIG["random_seed"]
    ):
        """
        Initialize the trainer.

        Parameters:
            options: Model options; defaults to Options()
            symmetric: Fold column ids into the row space (single store)
            shuffle: Entry ordering policy, see class docstring
            verbose: Print training progress to stderr
            random_seed: Seed for factor initialization and shuffling

        Raises:
            ValueError: If shuffle is not a known mode
        """
        if shuffle not in ('once', 'epoch', 'none'):
            raise ValueError(f"Unknown shuffle mode: {shuffle}")

        self.options = options if options is not None else Options()
        self.symmetric = symmetric
        self.shuffle = shuffle
        self.verbose = verbose
        self.random_seed = random_seed
        self.rng = np.random.default_rng(random_seed)

        self.store: Optional[FactorStore] = None
        self.history: Dict[str, List[float]] = {'rmse': []}
        self.converged_ = False
        self.n_iter_ = 0

    def _log(self, message: str):
        if self.verbose:
            print(message, file=sys.stderr)

    def load(self, path, override: bool = TRAINING_CONFIG["override"]) -> 'EmbedTrainer':
        """
        Load a persisted store to continue training or to predict.

        Parameters:
            path: Model file written by save()
            override: Replace the stored options with this trainer's options.
                      Otherwise the trainer adopts the stored options; the
                      stopping criteria (th, maxit) stay the trainer's own.

        Returns:
            self: Trainer holding the loaded store
        """
        self._log(f"Loading model {path} ...")
        store = load_store(path)
        if override:
            store.with_options(self.options)
        else:
            self.options = store.options.replace(th=self.options.th, maxit=self.options.maxit)
            store.with_options(self.options)
        self.store = store
        self.symmetric = store.symmetric
        self._log(f"Loaded {store!r}")
        return self

    def save(self, path) -> None:
        """Persist the current store."""
        self._check_fitted()
        save_store(self.store, path)
        self._log(f"Model saved to: {path}")

    def fit(self, entries) -> 'EmbedTrainer':
        """
        Train on `entries` until the stopping condition is met.

        A store is initialized from the entries when none exists; otherwise
        training continues on the current (fitted or loaded) store.

        Parameters:
            entries: Training entries (non-empty)

        Returns:
            self: Fitted trainer (for method chaining)

        Raises:
            ValueError: If entries are empty, or th == 0 and maxit == 0
                        (training would never stop)
            IndexError: If entries fall outside a loaded store
        """
        entries = make_entries(entries)
        if len(entries) == 0:
            raise ValueError("Cannot train on zero entries")
        th, maxit = self.options.th, self.options.maxit
        if th == 0 and maxit == 0:
            raise ValueError("Either th or maxit must be positive, otherwise training never stops")

        if self.store is None:
            size1, size2 = entity_counts(entries, symmetric=self.symmetric)
            if size2:
                self._log(f"{size1} rows, {size2} columns.")
            else:
                self._log(f"{size1} rows.")
            self.store = init_store(
                self.options, size1, size2, entries,
                rng=self.rng, verbose=self.verbose
            )
        else:
            self.store.check_entries(entries, name="training entries")

        if self.shuffle != 'none':
            entries = entries[self.rng.permutation(len(entries))]

        self.history = {'rmse': []}
        self.converged_ = False
        self._log("Training ...")

        iteration = 0
        while maxit == 0 or iteration < maxit:
            if self.shuffle == 'epoch' and iteration > 0:
                entries = entries[self.rng.permutation(len(entries))]
            epoch_rmse = run_epoch(self.store, entries, check=False)
            self.history['rmse'].append(epoch_rmse)
            self._log(f"{iteration}\t{epoch_rmse}")
            iteration += 1
            if epoch_rmse < th:
                self.converged_ = True
                break
        self.n_iter_ = iteration

        if not self.converged_ and th > 0:
            warnings.warn(
                f"Training did not reach RMSE < {th} after {maxit} epochs. "
                f"Consider increasing maxit or adjusting eps.",
                RuntimeWarning
            )
        return self

    def predict(self, rows, cols) -> np.ndarray:
        """
        Predict values for parallel arrays of (row, col) ids.

        Returns:
            predictions: float32 array (n,)
        """
        self._check_fitted()
        return self.store.predict_batch(rows, cols)

    def evaluate(self, entries, n_jobs: int = EVALUATION_CONFIG["n_jobs"]) -> float:
        """
        RMSE of the current store on held-out entries.

        Example:
            >>> test_rmse = trainer.evaluate(test_entries)
            >>> print(f"RMSE: {test_rmse}")
        """
        self._check_fitted()
        return rmse(self.store, entries, n_jobs=n_jobs)

    def _check_fitted(self):
        if self.store is None:
            raise ValueError("Model not fitted. Call fit() or load() first.")

    def plot_loss_curves(self, figsize=(6, 4)):
        """
        Plot the per-epoch training RMSE.

        Parameters:
            figsize: Figure size (width, height)
        """
        try:
            import matplotlib.pyplot as plt
        except ImportError:
            print("matplotlib not available. Install with: pip install matplotlib")
            return

        if len(self.history['rmse']) == 0:
            print("No training history. Fit the model first.")
            return

        fig, ax = plt.subplots(figsize=figsize)
        ax.plot(range(len(self.history['rmse'])), self.history['rmse'], 'b-', linewidth=2)
        if self.options.th > 0:
            ax.axhline(y=self.options.th, color='red', linestyle='--', alpha=0.5, label='th')
            ax.legend()
        ax.set_xlabel('Epoch')
        ax.set_ylabel('RMSE')
        ax.set_title('Training RMSE')
        ax.grid(True, alpha=0.3)

        plt.tight_layout()
        plt.show()
