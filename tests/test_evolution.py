"""
Test Suite for the DE Consumer, Loader and Runner
=================================================

Tests for:
- Boundary repair
- End-to-end DE runs driven by every example document
- Top-level loader
- Command-line runner

Run with: python -m pytest tests/test_evolution.py -v
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import json
import tempfile
import textwrap
import unittest

import numpy as np
import pandas as pd

from adapt_de import (
    ConfigurationError,
    TypeMismatchError,
    from_data,
    load_system,
    midpoint_repair,
)
from adapt_de.cli import main


CONFIG_DIR = Path(__file__).parent.parent / 'configs'
CONFIG_NAMES = ['constant', 'jde', 'sade', 'isade', 'depd', 'sde', 'indirect']


# =============================================================================
# Test Functions
# =============================================================================

def sphere(x):
    """Sphere function (unimodal)."""
    x = np.atleast_2d(x)
    return np.sum(x ** 2, axis=1)


def document(name, dimension=5, max_generation=20, **overrides):
    """Example document with a shortened run."""
    data = json.loads((CONFIG_DIR / f"{name}.json").read_text(encoding="utf-8"))
    de = data["DifferentialEvolution"]
    de["dimension"] = dimension
    de["max_generation"] = max_generation
    de.update(overrides)
    return data


# =============================================================================
# Boundary Repair Tests
# =============================================================================

class TestMidpointRepair(unittest.TestCase):

    def test_out_of_bounds_moved_to_midpoint(self):
        trials = np.array([[-150.0, 120.0, 10.0]])
        parents = np.array([[0.0, 50.0, 5.0]])
        midpoint_repair(trials, parents, np.full(3, -100.0), np.full(3, 100.0))
        np.testing.assert_array_almost_equal(trials, [[-50.0, 75.0, 10.0]])


# =============================================================================
# DE Tests
# =============================================================================

class TestDifferentialEvolution(unittest.TestCase):
    """End-to-end runs on the sphere function."""

    def test_every_document_runs(self):
        for name in CONFIG_NAMES:
            with self.subTest(config=name):
                system = load_system(from_data(document(name)))
                result = system.run(sphere)
                self.assertEqual(result.generations, 20)
                self.assertEqual(len(result.history), 20)
                self.assertEqual(result.nfes_used, 50 * 21)
                self.assertTrue(np.isfinite(result.best_f))
                self.assertEqual(result.best_x.shape, (5,))
                self.assertAlmostEqual(float(sphere(result.best_x)[0]), result.best_f)
                self.assertTrue(np.all(np.diff(result.convergence) <= 0))
                frame = result.history_frame()
                self.assertTrue(np.all(frame['mean_F'] > 0.0))
                self.assertTrue(np.all(frame['mean_F'] <= 2.0))
                self.assertTrue(np.all((frame['mean_CR'] >= 0.0) & (frame['mean_CR'] <= 1.0)))

    def test_sphere_improves(self):
        result = load_system(from_data(document('jde', max_generation=40))).run(sphere)
        self.assertLess(result.convergence[-1], result.convergence[0])

    def test_same_seed_same_run(self):
        a = load_system(from_data(document('sade'))).run(sphere)
        b = load_system(from_data(document('sade'))).run(sphere)
        self.assertEqual(a.best_f, b.best_f)
        np.testing.assert_array_equal(a.convergence, b.convergence)

    def test_constant_parameters(self):
        result = load_system(from_data(document('constant'))).run(sphere)
        frame = result.history_frame()
        np.testing.assert_array_almost_equal(frame['mean_F'], 0.5)
        np.testing.assert_array_almost_equal(frame['std_F'], 0.0)
        np.testing.assert_array_almost_equal(frame['mean_CR'], 0.9)

    def test_history_frame(self):
        result = load_system(from_data(document('jde', max_generation=5))).run(sphere)
        frame = result.history_frame()
        self.assertIsInstance(frame, pd.DataFrame)
        self.assertEqual(len(frame), 5)
        for column in ('generation', 'nfes', 'best_f', 'mean_F', 'std_F', 'mean_CR', 'std_CR',
                       'success_rate'):
            self.assertIn(column, frame.columns)
        self.assertEqual(frame['generation'].tolist(), [1, 2, 3, 4, 5])

    def test_max_nfes_stops_early(self):
        result = load_system(from_data(document('constant', max_nfes=300))).run(sphere)
        self.assertEqual(result.generations, 5)
        self.assertEqual(result.nfes_used, 300)

    def test_generation_callback(self):
        seen = []
        system = load_system(from_data(document('constant', max_generation=3)))
        system.evolution.run(sphere, system.random, generation_callback=lambda log: seen.append(log.generation))
        self.assertEqual(seen, [1, 2, 3])

    def test_small_population_rejected(self):
        with self.assertRaises(ConfigurationError):
            load_system(from_data(document('constant', population_size=3)))

    def test_inverted_bounds_rejected(self):
        with self.assertRaises(ConfigurationError):
            load_system(from_data(document('constant', lower_bound=1.0, upper_bound=-1.0)))

    def test_integer_f_rejected(self):
        integer_f = {
            "classname": "IntegerControlMechanism",
            "ControlRange": {"classname": "IntegerControlRange", "lower_bound": 0, "upper_bound": 1},
            "ControlParameter": {"classname": "IntegerMultipleControlParameter", "number_of_objects": 50},
            "ControlFunction": {
                "classname": "SingleControlFunction",
                "Function": {"classname": "IntegerConstantFunction", "object": 1},
            },
            "ControlSelection": {"classname": "NonInfoControlSelection"},
        }
        with self.assertRaises(TypeMismatchError):
            load_system(from_data(document('constant', F=integer_f)))

    def test_objective_shape_checked(self):
        system = load_system(from_data(document('constant')))
        with self.assertRaises(ValueError):
            system.run(lambda X: np.zeros(1))


# =============================================================================
# Loader Tests
# =============================================================================

class TestLoader(unittest.TestCase):

    def test_load_from_path(self):
        system = load_system(CONFIG_DIR / 'jde.json')
        self.assertEqual(system.random.seed, 1)
        self.assertEqual(system.evolution.population_size, 50)
        self.assertIs(system.evolution.F.function.at(0).random, system.random)

    def test_random_is_optional(self):
        data = document('constant')
        del data['Random']
        system = load_system(from_data(data))
        self.assertIsNone(system.random.seed)

    def test_missing_algorithm(self):
        with self.assertRaises(ConfigurationError):
            load_system(from_data({"Random": {"classname": "Random", "seed": 1}}))


# =============================================================================
# Command-Line Tests
# =============================================================================

class TestCommandLine(unittest.TestCase):

    def write(self, directory, name, data):
        path = Path(directory) / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def test_validate_only(self):
        self.assertEqual(main(['--config', str(CONFIG_DIR / 'sade.json'), '--no-color']), 0)

    def test_invalid_document(self):
        with tempfile.TemporaryDirectory() as tmp:
            data = document('constant')
            data['DifferentialEvolution']['F']['classname'] = 'RealUnknownMechanism'
            path = self.write(tmp, 'bad.json', data)
            self.assertEqual(main(['--config', str(path), '--no-color']), 1)

    def test_bad_objective(self):
        self.assertEqual(
            main(['--config', str(CONFIG_DIR / 'constant.json'), '--objective', 'nocolon', '--no-color']),
            1,
        )

    def test_runs_must_be_positive(self):
        self.assertEqual(
            main(['--config', str(CONFIG_DIR / 'constant.json'), '--objective', 'math:fabs',
                  '--runs', '0', '--no-color']),
            1,
        )

    def test_runs_write_results(self):
        with tempfile.TemporaryDirectory() as tmp:
            module = Path(tmp) / 'adapt_de_cli_objective.py'
            module.write_text(textwrap.dedent("""
                import numpy as np

                def sphere(X):
                    return np.sum(np.atleast_2d(X) ** 2, axis=1)
            """), encoding="utf-8")
            sys.path.insert(0, tmp)
            try:
                config = self.write(tmp, 'run.json', document('constant', max_generation=3))
                output = Path(tmp) / 'results'
                code = main([
                    '--config', str(config),
                    '--objective', 'adapt_de_cli_objective:sphere',
                    '--runs', '2',
                    '--output', str(output),
                    '--quiet', '--no-color',
                ])
            finally:
                sys.path.remove(tmp)
                sys.modules.pop('adapt_de_cli_objective', None)

            self.assertEqual(code, 0)
            summaries = list(output.glob('*/summary.json'))
            self.assertEqual(len(summaries), 1)
            summary = json.loads(summaries[0].read_text(encoding="utf-8"))
            self.assertEqual([r['seed'] for r in summary['runs']], [1, 2])
            histories = sorted(p.name for p in summaries[0].parent.glob('history_run*.csv'))
            self.assertEqual(histories, ['history_run001.csv', 'history_run002.csv'])


if __name__ == '__main__':
    unittest.main(verbosity=2)
