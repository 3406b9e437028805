"""
Command-line front end for mfembed.

Train a factor model on a data file, save/load model files, and report the
RMSE on held-out data.

Examples:
  # Train on a text file for 50 epochs and save the model
  mfembed --train train.txt --maxit 50 --save model.bin

  # Continue training a saved model with a smaller learning rate
  mfembed --load model.bin --train train.txt --override --eps 0.001 --maxit 10

  # Evaluate a saved model on binary test data
  mfembed --load model.bin --test test.bin --binary
"""

import argparse
import sys
from typing import Optional, Sequence

from .config import EMBED_CONFIG, TRAINING_CONFIG
from .data.io import read_entries
from .models.options import Options
from .optimization.trainer import EmbedTrainer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mfembed",
        description="Train low-rank factor embeddings with SGD and momentum",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Examples:" + __doc__.split("Examples:", 1)[1]
    )
    parser.add_argument('--train', type=str, help='training data')
    parser.add_argument('--test', type=str, help='testing data')
    parser.add_argument('--save', type=str, help='save model file')
    parser.add_argument('--load', type=str, help='load model file')
    parser.add_argument('--binary', action='store_true', help='data files use the binary record format')
    parser.add_argument('--symmetric', action='store_true', help='rows and columns share one entity space')
    parser.add_argument('--override', action='store_true',
                        help='override loaded model options with command-line values')
    parser.add_argument('--maxit', type=int, default=TRAINING_CONFIG["maxit"],
                        help='max epochs (0 = unbounded)')
    parser.add_argument('--th', type=float, default=TRAINING_CONFIG["th"],
                        help='stop once the epoch RMSE drops below this')
    parser.add_argument('--shuffle', choices=['once', 'epoch', 'none'], default=TRAINING_CONFIG["shuffle"],
                        help='entry shuffling policy')
    parser.add_argument('--seed', type=int, default=TRAINING_CONFIG["random_seed"],
                        help='random seed for initialization and shuffling')
    parser.add_argument('--jobs', type=int, default=1, help='threads used for evaluation')
    parser.add_argument('--quiet', '-q', action='store_true', help='suppress progress output')

    group = parser.add_argument_group('model options')
    group.add_argument('--dim', type=int, default=EMBED_CONFIG["dim"], help='dimension')
    group.add_argument('--r1', type=float, default=EMBED_CONFIG["r1"], help='row regularization')
    group.add_argument('--r2', type=float, default=EMBED_CONFIG["r2"], help='column regularization')
    group.add_argument('--mom', type=float, default=EMBED_CONFIG["mom"], help='momentum')
    group.add_argument('--eps', type=float, default=EMBED_CONFIG["eps"], help='learning rate')
    group.add_argument('--init', type=float, default=EMBED_CONFIG["init"], help='init scale')
    group.add_argument('--min', type=float, default=EMBED_CONFIG["min"],
                       help='fixed global minimum (default: detect from data)')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.train is None and args.load is None:
        print("Usage:", file=sys.stderr)
        print(f"\t{parser.prog} [options] --train FILE and/or --load FILE", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    if args.train and args.th == 0 and args.maxit == 0:
        parser.error("--train needs --maxit or a positive --th, otherwise training never stops")

    options = Options.from_dict(vars(args))
    trainer = EmbedTrainer(
        options,
        symmetric=args.symmetric,
        shuffle=args.shuffle,
        verbose=not args.quiet,
        random_seed=args.seed
    )

    if args.load:
        trainer.load(args.load, override=args.override)

    if args.train:
        entries = read_entries(args.train, binary=args.binary, verbose=not args.quiet)
        trainer.fit(entries)

    if args.save:
        trainer.save(args.save)

    if args.test:
        entries = read_entries(args.test, binary=args.binary, verbose=not args.quiet)
        print(f"RMSE: {trainer.evaluate(entries, n_jobs=args.jobs)}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
