"""
Command-line driver for the sampler and the numerical experiments.

Usage examples:
  - Metropolis chain on the default standard-normal target:
      python main.py mcmc --seed 0

  - Same, with a YAML config and no plots:
      python main.py mcmc --config configs/experiments.yaml --no-plots

  - Random-walk first-passage experiment:
      python main.py walk --trials 2000

  - Regression fitting comparison:
      python main.py regression --seed 3

Notes:
  - Plots go to <output_dir>/plots, chains to <output_dir>/chains as
    mcmc_{target}.pt (a dict holding the trace and the burn-in index).
"""

from __future__ import annotations

import argparse
import os
from typing import Any, Dict, List, Optional

import torch

from .experiments import random_walk, regression
from .samplers import NormalProposal, UniformProposal, run_chain, stop_after
from .targets import build_target
from .utils.config import (
    get_random_walk_config,
    get_regression_config,
    get_sampler_config,
    load_config,
    print_config_summary,
)
from .utils.plotting import plot_chain, plot_latency_histograms, plot_random_walks

_DTYPES = {"float32": torch.float32, "float64": torch.float64}


def _make_generator(seed: Optional[int]) -> torch.Generator:
    gen = torch.Generator()
    if seed is None:
        gen.seed()
    else:
        gen.manual_seed(int(seed))
    return gen


def _build_proposal(proposal_cfg: Dict[str, Any]):
    kwargs = {k: v for k, v in proposal_cfg.items() if k != "name"}
    name = proposal_cfg["name"]
    if name == "normal":
        return NormalProposal(**kwargs)
    if name == "uniform":
        return UniformProposal(**kwargs)
    raise ValueError(f"Unknown proposal '{name}'. Available: normal, uniform")


# -----------------------------------------------------------------------------
# Experiments
# -----------------------------------------------------------------------------


def run_mcmc(cfg: Dict[str, Any], *, plots: bool = True, progress: bool = False) -> Dict[str, Any]:
    """Run one chain as configured and return the chain plus summary statistics."""
    s_cfg = get_sampler_config(cfg)
    tgt_cfg = dict(s_cfg["target"])
    target_name = tgt_cfg.pop("name")
    target = build_target(target_name, **tgt_cfg)
    proposal = _build_proposal(s_cfg["proposal"])
    generator = _make_generator(cfg.get("seed"))

    print(
        f"[MCMC] target={target!r} proposal={proposal!r} steps={s_cfg['num_steps']} burnin={s_cfg['burnin']}",
        flush=True,
    )
    chain = run_chain(
        float(s_cfg["initial_state"]),
        proposal,
        target,
        stop_after(int(s_cfg["num_steps"])),
        generator,
        dtype=_DTYPES[s_cfg["dtype"]],
        progress=progress,
    )
    chain.burnin = int(s_cfg["burnin"])

    posterior = chain.posterior().double()
    stats = {
        "mean": posterior.mean().item() if posterior.numel() else float("nan"),
        "std": posterior.std().item() if posterior.numel() > 1 else float("nan"),
        "acceptance_rate": chain.acceptance_rate(),
    }
    print(
        f"[MCMC] FINISHED: {len(chain)} states  mean={stats['mean']: .4f}  std={stats['std']: .4f}  "
        f"acc={stats['acceptance_rate']: .3f}",
        flush=True,
    )

    out_dir = cfg.get("output_dir", "outputs")
    chain_dir = os.path.join(out_dir, "chains")
    os.makedirs(chain_dir, exist_ok=True)
    torch.save(
        {"value": chain.as_tensor(), "burnin": chain.burnin, "config": s_cfg},
        os.path.join(chain_dir, f"mcmc_{target_name}.pt"),
    )
    if plots:
        plot_chain(chain, os.path.join(out_dir, "plots", f"mcmc_{target_name}.png"), target_density=target)

    return {"chain": chain, **stats}


def run_random_walk(cfg: Dict[str, Any], *, plots: bool = True, progress: bool = False) -> Dict[str, Any]:
    w_cfg = get_random_walk_config(cfg)
    generator = _make_generator(cfg.get("seed"))
    drift, sd, criterion = float(w_cfg["drift"]), float(w_cfg["sd"]), float(w_cfg["criterion"])

    print(f"[WALK] INITIALIZE: drift: {drift}, sd: {sd}, criterion: {criterion}", flush=True)
    results = random_walk.simulate_walks(
        int(w_cfg["num_trials"]),
        drift,
        sd,
        criterion,
        generator,
        max_steps=int(w_cfg["max_steps"]),
        progress=progress,
    )
    summary = random_walk.summarise_walks(results)
    print(f"[WALK] FINISHED: {len(results)} samples", flush=True)
    for side in ("top", "bottom"):
        print(
            f"[WALK] {side}: proportion={summary.proportion[side]:.2f} "
            f"latency={summary.mean_latency[side]:.2f}",
            flush=True,
        )

    if plots and results:
        plot_dir = os.path.join(cfg.get("output_dir", "outputs"), "plots")
        plot_random_walks(
            results, criterion, os.path.join(plot_dir, "random_walk.png"), num_traces=int(w_cfg["num_traces"])
        )
        plot_latency_histograms(results, summary, os.path.join(plot_dir, "histo.png"))

    return {"results": results, "summary": summary}


def run_regression(cfg: Dict[str, Any]) -> Dict[str, regression.LinearModel]:
    r_cfg = get_regression_config(cfg)
    generator = _make_generator(cfg.get("seed"))
    problem = regression.simulate_regression_problem(
        float(r_cfg["rho"]), float(r_cfg["intercept"]), int(r_cfg["num_points"]), generator
    )
    fits = regression.compare_fits(
        problem,
        temperature=float(r_cfg["temperature"]),
        stall_best=int(r_cfg["stall_best"]),
        max_iters=int(r_cfg["max_iters"]),
        generator=generator,
    )
    for method, model in fits.items():
        print(
            f"[FIT] {method:<14} gradient={model.gradient: .4f}  intercept={model.intercept: .4f}  "
            f"cost={problem.cost(model):.4f}",
            flush=True,
        )
    return fits


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Metropolis sampler and numerical experiments")
    parser.add_argument("--config", type=str, default=None, help="YAML config file (defaults used if omitted)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the torch generator")
    parser.add_argument("--output-dir", type=str, default=None, help="Directory for plots and chains")
    parser.add_argument("--no-plots", action="store_true", help="Skip matplotlib output")
    parser.add_argument("--progress", action="store_true", help="Show tqdm progress bars")

    sub = parser.add_subparsers(dest="command", required=True)

    p_mcmc = sub.add_parser("mcmc", help="Run a single Metropolis chain")
    p_mcmc.add_argument("--steps", type=int, default=None, help="Number of Metropolis steps")
    p_mcmc.add_argument("--burnin", type=int, default=None, help="Burn-in index")
    p_mcmc.add_argument("--target", type=str, default=None, help="Registered target name")
    p_mcmc.add_argument("--dtype", choices=sorted(_DTYPES), default=None)

    p_walk = sub.add_parser("walk", help="Random-walk first-passage experiment")
    p_walk.add_argument("--trials", type=int, default=None)
    p_walk.add_argument("--drift", type=float, default=None)

    sub.add_parser("regression", help="Compare annealing, Nelder-Mead and least squares")
    return parser


def _overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.output_dir is not None:
        overrides["output_dir"] = args.output_dir

    if args.command == "mcmc":
        sampler: Dict[str, Any] = {}
        if args.steps is not None:
            sampler["num_steps"] = args.steps
        if args.burnin is not None:
            sampler["burnin"] = args.burnin
        if args.dtype is not None:
            sampler["dtype"] = args.dtype
        if sampler:
            overrides["sampler"] = sampler
    elif args.command == "walk":
        walk: Dict[str, Any] = {}
        if args.trials is not None:
            walk["num_trials"] = args.trials
        if args.drift is not None:
            walk["drift"] = args.drift
        if walk:
            overrides["random_walk"] = walk
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = load_config(args.config, _overrides_from_args(args))
    if args.command == "mcmc" and args.target is not None:
        # Parameters of the configured target do not carry over to another one
        cfg["sampler"]["target"] = {"name": args.target}
    print_config_summary(cfg)

    if args.command == "mcmc":
        run_mcmc(cfg, plots=not args.no_plots, progress=args.progress)
    elif args.command == "walk":
        run_random_walk(cfg, plots=not args.no_plots, progress=args.progress)
    elif args.command == "regression":
        run_regression(cfg)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
