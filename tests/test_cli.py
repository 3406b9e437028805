"""
Tests for the command-line front end.

Run with: pytest tests/test_cli.py -v
"""

import pytest

from mfembed.cli import main, build_parser
from mfembed.data import write_text, write_binary
from mfembed.models import load_store


@pytest.fixture
def data_files(tmp_path, split_entries):
    train, test = split_entries
    paths = {
        'train_txt': tmp_path / "train.txt",
        'test_txt': tmp_path / "test.txt",
        'train_bin': tmp_path / "train.bin",
        'test_bin': tmp_path / "test.bin",
    }
    write_text(paths['train_txt'], train)
    write_text(paths['test_txt'], test)
    write_binary(paths['train_bin'], train)
    write_binary(paths['test_bin'], test)
    return paths


class TestParser:
    """Test argument defaults."""

    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.dim == 10
        assert args.mom == pytest.approx(0.9)
        assert args.min is None
        assert args.maxit == 0
        assert not args.symmetric


class TestMain:
    """Test end-to-end runs."""

    def test_requires_train_or_load(self, capsys):
        assert main([]) == 1
        assert "Usage:" in capsys.readouterr().err

    def test_unbounded_training_rejected(self, data_files):
        with pytest.raises(SystemExit) as excinfo:
            main(['--train', str(data_files['train_txt'])])
        assert excinfo.value.code == 2

    def test_train_save_test(self, data_files, tmp_path, capsys):
        model = tmp_path / "model.bin"

        code = main([
            '--train', str(data_files['train_txt']),
            '--test', str(data_files['test_txt']),
            '--save', str(model),
            '--dim', '3', '--maxit', '4', '--eps', '0.005', '--seed', '0', '-q'
        ])

        assert code == 0
        assert model.exists()
        assert "RMSE:" in capsys.readouterr().err
        store = load_store(model)
        assert store.options.dim == 3
        assert store.options.maxit == 4

    def test_binary_and_symmetric(self, data_files, tmp_path):
        model = tmp_path / "sym.bin"

        code = main([
            '--train', str(data_files['train_bin']), '--binary', '--symmetric',
            '--save', str(model), '--dim', '2', '--maxit', '2', '--seed', '0', '-q'
        ])

        assert code == 0
        store = load_store(model)
        assert store.size2 == 0
        assert store.size1 == 30

    def test_load_and_evaluate(self, data_files, tmp_path, capsys):
        model = tmp_path / "model.bin"
        main(['--train', str(data_files['train_txt']), '--save', str(model),
              '--dim', '3', '--maxit', '2', '--seed', '0', '-q'])
        capsys.readouterr()

        code = main(['--load', str(model), '--test', str(data_files['test_bin']), '--binary', '-q'])

        assert code == 0
        assert capsys.readouterr().err.startswith("RMSE:")

    def test_override_on_load(self, data_files, tmp_path):
        model = tmp_path / "model.bin"
        main(['--train', str(data_files['train_txt']), '--save', str(model),
              '--dim', '3', '--maxit', '1', '--eps', '0.01', '--seed', '0', '-q'])

        main(['--load', str(model), '--train', str(data_files['train_txt']), '--save', str(model),
              '--dim', '3', '--maxit', '1', '--eps', '0.002', '--override', '-q'])
        assert load_store(model).options.eps == pytest.approx(0.002)

        main(['--load', str(model), '--train', str(data_files['train_txt']), '--save', str(model),
              '--maxit', '1', '--eps', '0.5', '-q'])
        assert load_store(model).options.eps == pytest.approx(0.002)
