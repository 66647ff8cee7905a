import math
import unittest

import numpy as np
import torch

from simplemc.samplers import (
    FIXED_RUN_BURNIN,
    FIXED_RUN_STEPS,
    NormalProposal,
    UniformProposal,
    fixed_run,
    run_chain,
    stop_after,
)
from simplemc.targets import build_target


class _StepUp:
    """Deterministic +0.5 increment, declared symmetric so the core accepts it."""

    symmetric = True

    def sample(self, generator, dtype=torch.float64):
        return torch.tensor(0.5, dtype=dtype)


class _Asymmetric:
    def sample(self, generator, dtype=torch.float64):
        return torch.rand((), generator=generator, dtype=dtype)


def standard_normal_shape(x):
    return math.exp(-float(x) ** 2 / 2.0)


class TestStopAfter(unittest.TestCase):
    def test_length_invariant(self):
        for n in (0, 1, 10, 257):
            gen = torch.Generator().manual_seed(n)
            chain = run_chain(0.0, NormalProposal(1.0), standard_normal_shape, stop_after(n), gen)
            self.assertEqual(len(chain.value), n + 1)
            self.assertEqual(chain.burnin, 0)

    def test_rejects_bad_budget(self):
        for bad in (-1, 2.5, True, '3'):
            with self.assertRaises(ValueError):
                stop_after(bad)

    def test_accepts_numpy_integer_budget(self):
        chain = run_chain(
            0.0, NormalProposal(), standard_normal_shape, stop_after(np.int64(30)), torch.Generator().manual_seed(0)
        )
        self.assertEqual(len(chain), 31)
        with self.assertRaises(ValueError):
            stop_after(np.bool_(True))

    def test_predicate_called_once_per_iteration(self):
        calls = []
        inner = stop_after(20)

        def counting(chain):
            calls.append(len(chain))
            return inner(chain)

        run_chain(0.0, NormalProposal(), standard_normal_shape, counting, torch.Generator().manual_seed(0))
        self.assertEqual(calls, list(range(1, 22)))


class TestRunChain(unittest.TestCase):
    def test_fixed_run_budget_and_burnin(self):
        chain = fixed_run(0.0, NormalProposal(1.0), standard_normal_shape, torch.Generator().manual_seed(0))
        self.assertEqual(chain.burnin, FIXED_RUN_BURNIN)
        self.assertEqual(len(chain.value), FIXED_RUN_STEPS + 1)
        self.assertEqual((chain.burnin, len(chain.value)), (1000, 5001))

    def test_fixed_run_without_generator(self):
        chain = fixed_run(0.0, UniformProposal(0.5), standard_normal_shape)
        self.assertEqual(len(chain), 5001)

    def test_deterministic_under_seed(self):
        target = build_target('gaussian', mu=1.0, sigma=2.0)
        a = run_chain(0.0, NormalProposal(1.0), target, stop_after(500), torch.Generator().manual_seed(42))
        b = run_chain(0.0, NormalProposal(1.0), target, stop_after(500), torch.Generator().manual_seed(42))
        self.assertTrue(torch.equal(a.as_tensor(), b.as_tensor()))

    def test_different_seeds_differ(self):
        a = run_chain(0.0, NormalProposal(), standard_normal_shape, stop_after(50), torch.Generator().manual_seed(1))
        b = run_chain(0.0, NormalProposal(), standard_normal_shape, stop_after(50), torch.Generator().manual_seed(2))
        self.assertFalse(torch.equal(a.as_tensor(), b.as_tensor()))

    def test_increasing_density_always_accepts_without_uniform_draw(self):
        gen = torch.Generator().manual_seed(0)
        state_before = gen.get_state()
        chain = run_chain(0.0, _StepUp(), lambda x: math.exp(float(x)), stop_after(100), gen)
        self.assertEqual(chain.acceptance_rate(), 1.0)
        self.assertAlmostEqual(chain.current.item(), 50.0)
        self.assertTrue(torch.equal(gen.get_state(), state_before))

    def test_constant_density_accepts_almost_everything(self):
        gen = torch.Generator().manual_seed(3)
        chain = run_chain(0.0, NormalProposal(1.0), lambda x: 1.0, stop_after(2000), gen)
        self.assertGreater(chain.acceptance_rate(), 0.99)

    def test_acceptance_matches_ratio_statistically(self):
        # Unit steps on exp(-0.5|x|): every move away from 0 has ratio exp(-0.5).
        class _Flip:
            symmetric = True

            def sample(self, generator, dtype=torch.float64):
                return torch.tensor(1.0 if float(torch.rand((), generator=generator)) < 0.5 else -1.0, dtype=dtype)

        gen = torch.Generator().manual_seed(7)
        chain = run_chain(0.0, _Flip(), lambda x: math.exp(-0.5 * abs(float(x))), stop_after(20000), gen)
        dist = chain.as_tensor().abs()
        change = dist[1:] - dist[:-1]
        away = (change > 0).sum().item()
        stay = (change == 0).sum().item()
        self.assertGreater(away + stay, 5000)
        self.assertAlmostEqual(away / (away + stay), math.exp(-0.5), delta=0.03)

    def test_float32_state(self):
        chain = run_chain(
            0.0, NormalProposal(), standard_normal_shape, stop_after(100),
            torch.Generator().manual_seed(0), dtype=torch.float32,
        )
        self.assertEqual(chain.as_tensor().dtype, torch.float32)
        self.assertEqual(len(chain), 101)

    def test_asymmetric_proposal_refused_before_running(self):
        calls = []
        with self.assertRaises(TypeError):
            run_chain(0.0, _Asymmetric(), lambda x: calls.append(x) or 1.0, stop_after(10), torch.Generator())
        self.assertEqual(calls, [])

    def test_zero_density_everywhere_never_moves(self):
        chain = run_chain(1.5, NormalProposal(), lambda x: 0.0, stop_after(200), torch.Generator().manual_seed(0))
        self.assertTrue(bool((chain.as_tensor() == 1.5).all()))

    def test_negative_current_density_accepts_freely(self):
        chain = run_chain(
            0.0, NormalProposal(), lambda x: -1.0 - abs(float(x)), stop_after(200),
            torch.Generator().manual_seed(0),
        )
        self.assertGreater(chain.acceptance_rate(), 0.99)

    def test_negative_candidate_rejected_from_positive_state(self):
        chain = run_chain(
            0.0, UniformProposal(1.0), lambda x: 1.0 if abs(float(x)) < 0.5 else -1.0, stop_after(500),
            torch.Generator().manual_seed(0),
        )
        self.assertTrue(bool((chain.as_tensor().abs() < 0.5).all()))
        self.assertLess(chain.acceptance_rate(), 0.9)

    def test_zero_density_at_start_accepts_first_positive_candidate(self):
        chain = run_chain(
            0.0, NormalProposal(), lambda x: 0.0 if float(x) == 0.0 else 1.0, stop_after(1),
            torch.Generator().manual_seed(0),
        )
        self.assertNotEqual(chain.value[1].item(), 0.0)


class TestStandardNormalScenario(unittest.TestCase):
    def test_moments_after_burnin(self):
        target = build_target('gaussian', mu=0.0, sigma=1.0)
        for seed in range(5):
            gen = torch.Generator().manual_seed(seed)
            chain = run_chain(0.0, NormalProposal(1.0), target, stop_after(5000), gen)
            chain.burnin = 1000
            posterior = chain.posterior()
            self.assertEqual(posterior.shape, (4001,))
            self.assertLess(abs(posterior.mean().item()), 0.15, f"seed {seed}")
            self.assertLess(abs(posterior.std().item() - 1.0), 0.15, f"seed {seed}")


if __name__ == '__main__':
    unittest.main()
