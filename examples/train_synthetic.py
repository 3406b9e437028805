"""
Train Factor Embeddings on Synthetic Low-Rank Data

This example generates noisy observations of a low-rank matrix, trains
embeddings with SGD and momentum, and compares the training RMSE curve with
the held-out RMSE. The trained model is saved, reloaded and checked to give
identical predictions.

Expected outcome: the training RMSE decreases over epochs and the held-out
RMSE ends well below the initial training RMSE.
"""

import argparse
from pathlib import Path
import numpy as np

from mfembed.data import generate_low_rank_entries
from mfembed.models import Options, load_store
from mfembed.optimization import EmbedTrainer


def split(entries, train_fraction=0.8, random_state=0):
    rng = np.random.default_rng(random_state)
    order = rng.permutation(len(entries))
    n_train = int(len(entries) * train_fraction)
    return entries[order[:n_train]], entries[order[n_train:]]


def main(output_dir='results/synthetic', dim=5, maxit=100, plot=False):
    """Main demonstration function.

    Parameters
    ----------
    output_dir : str
        Directory for the saved model
    dim : int
        Factor dimension
    maxit : int
        Number of epochs
    plot : bool
        Show the RMSE curve (requires matplotlib)
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    entries, M = generate_low_rank_entries(
        n_rows=200, n_cols=150, rank=4, density=0.1, noise=0.05, random_state=42
    )
    train, test = split(entries)
    print(f"Data: {len(train)} training / {len(test)} held-out entries, true rank 4")

    options = Options(dim=dim, r1=0.02, r2=0.02, mom=0.9, eps=0.002, maxit=maxit)
    trainer = EmbedTrainer(options, verbose=False, random_seed=0)
    trainer.fit(train)

    history = trainer.history['rmse']
    for epoch in range(0, len(history), max(1, len(history) // 10)):
        print(f"Epoch {epoch:3d}: train RMSE={history[epoch]:.4f}")
    print(f"Final train RMSE: {history[-1]:.4f}")
    print(f"Held-out RMSE:    {trainer.evaluate(test):.4f}")

    model_path = output_dir / "model.bin"
    trainer.save(model_path)
    restored = load_store(model_path)
    same = np.array_equal(
        restored.predict_batch(test['row'], test['col']),
        trainer.predict(test['row'], test['col'])
    )
    print(f"Saved to {model_path} ({model_path.stat().st_size} bytes); reload identical: {same}")

    if plot:
        trainer.plot_loss_curves()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Train factor embeddings on synthetic low-rank data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default run
  python examples/train_synthetic.py

  # Larger factors, fewer epochs, with a plot
  python examples/train_synthetic.py --dim 10 --maxit 30 --plot
        """
    )
    parser.add_argument('--output-dir', '-o', type=str, default='results/synthetic',
                        help='Directory for the saved model')
    parser.add_argument('--dim', type=int, default=5, help='Factor dimension')
    parser.add_argument('--maxit', type=int, default=100, help='Number of epochs')
    parser.add_argument('--plot', action='store_true', help='Plot the RMSE curve')
    args = parser.parse_args()

    main(output_dir=args.output_dir, dim=args.dim, maxit=args.maxit, plot=args.plot)
