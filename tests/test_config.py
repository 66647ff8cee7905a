import os
import tempfile
import unittest

import yaml

from simplemc.utils.config import (
    DEFAULT_CONFIG,
    get_random_walk_config,
    get_regression_config,
    get_sampler_config,
    load_config,
    save_config,
)

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


class TestLoadConfig(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, data, name='cfg.yaml'):
        path = os.path.join(self.tmp.name, name)
        with open(path, 'w') as fh:
            yaml.safe_dump(data, fh)
        return path

    def test_defaults_without_file(self):
        cfg = load_config()
        self.assertEqual(get_sampler_config(cfg)['num_steps'], 5000)
        self.assertEqual(get_sampler_config(cfg)['burnin'], 1000)
        self.assertNotIn('_config_path', cfg)
        # defaults are copied, never shared
        cfg['sampler']['num_steps'] = 1
        self.assertEqual(DEFAULT_CONFIG['sampler']['num_steps'], 5000)

    def test_partial_file_merges_over_defaults(self):
        path = self._write({'sampler': {'num_steps': 200, 'proposal': {'scale': 0.5}}})
        cfg = load_config(path)
        sampler = get_sampler_config(cfg)
        self.assertEqual(sampler['num_steps'], 200)
        self.assertEqual(sampler['proposal'], {'name': 'normal', 'scale': 0.5})
        self.assertEqual(sampler['target']['name'], 'gaussian')
        self.assertEqual(cfg['_config_path'], os.path.abspath(path))

    def test_overrides_win(self):
        path = self._write({'random_walk': {'num_trials': 10}})
        cfg = load_config(path, {'random_walk': {'num_trials': 3}, 'seed': 9})
        self.assertEqual(get_random_walk_config(cfg)['num_trials'], 3)
        self.assertEqual(cfg['seed'], 9)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config(os.path.join(self.tmp.name, 'absent.yaml'))

    def test_invalid_values(self):
        bad = [
            {'sampler': {'dtype': 'float16'}},
            {'sampler': {'burnin': 10, 'num_steps': 5}},
            {'sampler': {'proposal': {'name': 'cauchy'}}},
            {'regression': {'rho': 1.5}},
            {'random_walk': 'fast'},
        ]
        for i, data in enumerate(bad):
            with self.assertRaises(ValueError, msg=str(data)):
                load_config(self._write(data, f'bad_{i}.yaml'))

    def test_fractional_counts_rejected(self):
        for i, data in enumerate([
            {'sampler': {'burnin': 2.7}},
            {'sampler': {'num_steps': 100.5}},
            {'random_walk': {'num_trials': 3.2}},
        ]):
            with self.assertRaises(ValueError, msg=str(data)):
                load_config(self._write(data, f'frac_{i}.yaml'))

    def test_non_mapping_file(self):
        with self.assertRaises(ValueError):
            load_config(self._write([1, 2, 3]))

    def test_save_drops_private_keys(self):
        cfg = load_config(self._write({'seed': 4}))
        out = os.path.join(self.tmp.name, 'nested', 'saved.yaml')
        save_config(cfg, out)
        with open(out) as fh:
            saved = yaml.safe_load(fh)
        self.assertNotIn('_config_path', saved)
        self.assertEqual(load_config(out)['seed'], 4)

    def test_shipped_config_is_valid(self):
        cfg = load_config(os.path.join(PROJECT_ROOT, 'configs', 'experiments.yaml'))
        self.assertEqual(cfg['seed'], 0)
        self.assertEqual(get_regression_config(cfg)['num_points'], 20)


if __name__ == '__main__':
    unittest.main()
