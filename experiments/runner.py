"""
Batch runner for ZEST convergence experiments.

Loads a YAML config listing true thresholds, run counts and optional ZEST
overrides, simulates synthetic observers and writes a JSON report to
results/<id>/convergence.json.
"""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from acuity.models import ZestConfig
from experiments.simulation import ConvergenceReport, evaluate_convergence

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    id: str
    description: str
    thresholds: List[float]
    runs_per_threshold: int = 20
    tolerance: float = 0.15
    noise: float = 0.05
    seed: int = 42
    zest: Dict[str, Any] = field(default_factory=dict)


def load_config(path: str) -> SimulationConfig:
    with open(path, "r") as f:
        cfg = yaml.safe_load(f) or {}
    return SimulationConfig(
        id=cfg["id"],
        description=cfg.get("description", ""),
        thresholds=[float(t) for t in cfg.get("thresholds", [])],
        runs_per_threshold=int(cfg.get("runs_per_threshold", 20)),
        tolerance=float(cfg.get("tolerance", 0.15)),
        noise=float(cfg.get("noise", 0.05)),
        seed=int(cfg.get("seed", 42)),
        zest=cfg.get("zest") or {},
    )


def run(cfg: SimulationConfig) -> ConvergenceReport:
    zest_config = ZestConfig(**cfg.zest)
    return evaluate_convergence(
        cfg.thresholds,
        runs_per_threshold=cfg.runs_per_threshold,
        tolerance=cfg.tolerance,
        noise=cfg.noise,
        seed=cfg.seed,
        config=zest_config,
    )


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", required=True, help="Path to YAML simulation config")
    parser.add_argument("--out", default="results", help="Directory for result files")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    cfg = load_config(args.config)
    report = run(cfg)

    results_root = Path(args.out) / cfg.id
    results_root.mkdir(parents=True, exist_ok=True)
    result_path = results_root / "convergence.json"
    with result_path.open("w") as f:
        json.dump({"id": cfg.id, "description": cfg.description, **report.as_dict()}, f, indent=2)
    logger.info(
        "Simulated %d runs: hit rate %.2f within %.2f logMAR, saved %s",
        report.runs,
        report.hit_rate,
        report.tolerance,
        result_path,
    )


if __name__ == "__main__":
    main()
