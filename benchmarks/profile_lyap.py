"""Benchmark the Lyapunov/CLV routines on a coupled Henon lattice.

Each lattice site is a Henon map diffusively coupled to its neighbours, so
the state dimension can be scaled freely. The script times the Householder
and Gram-Schmidt (Numba) QR kernels of the NumPy backend and, when torch is
installed, the PyTorch backend. Each backend receives a configurable number
of warm-up runs (to trigger JIT compilation where applicable) before the
timed repetitions.
"""

from __future__ import annotations

import argparse
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

import numpy as np

from numclv import DiscreteMap, covariant_lyapunov_vectors, lyapunov_exponents


@dataclass
class BenchmarkConfig:
    steps: int = 200
    repeats: int = 2
    warmup: int = 1
    alpha: float = 1e-7
    coupling: float = 0.05
    clv: bool = False
    dims: Sequence[int] = field(default_factory=lambda: (2, 4, 8, 16, 32, 64))


@dataclass
class BackendSpec:
    name: str
    run: Callable[[np.ndarray, BenchmarkConfig], object]


@dataclass
class BackendResult:
    name: str
    dim: int
    timings: np.ndarray


def henon_lattice(x: np.ndarray, coupling: float, a: float = 1.4, b: float = 0.3) -> np.ndarray:
    """Diffusively coupled Henon maps; ``x`` holds (u_0, v_0, u_1, v_1, ...)."""
    u = x[0::2]
    v = x[1::2]
    lap = np.roll(u, 1) + np.roll(u, -1) - 2.0 * u
    u_c = u + coupling * lap
    out = np.empty_like(x)
    out[0::2] = 1.0 - a * u_c**2 + v
    out[1::2] = b * u_c
    return out


def _numpy_backend(qr_method: str) -> Callable[[np.ndarray, BenchmarkConfig], object]:
    def run(x0: np.ndarray, config: BenchmarkConfig):
        system = DiscreteMap(henon_lattice, config.coupling, dim=x0.size)
        if config.clv:
            return covariant_lyapunov_vectors(
                system, x0, config.alpha, config.steps, qr_method=qr_method
            )
        return lyapunov_exponents(system, x0, config.alpha, config.steps, qr_method=qr_method)

    return run


def _torch_backend() -> Callable[[np.ndarray, BenchmarkConfig], object]:
    import torch

    from numclv import pytorch as numclv_torch

    class TorchLattice:
        def __init__(self, coupling: float):
            self.coupling = coupling

        def advance(self, x):
            return torch.as_tensor(henon_lattice(x.numpy(), self.coupling))

        def time_step(self):
            return 1.0

    def run(x0: np.ndarray, config: BenchmarkConfig):
        system = TorchLattice(config.coupling)
        x = torch.as_tensor(x0, dtype=torch.float64)
        if config.clv:
            return numclv_torch.covariant_lyapunov_vectors(system, x, config.alpha, config.steps)
        return numclv_torch.lyapunov_exponents(system, x, config.alpha, config.steps)

    return run


def _initial_state(dim: int) -> np.ndarray:
    rng = np.random.default_rng(dim)
    return rng.uniform(-0.1, 0.1, size=dim)


def _benchmark_backend(backend: BackendSpec, x0: np.ndarray, config: BenchmarkConfig) -> np.ndarray:
    for _ in range(max(config.warmup, 0)):
        backend.run(x0, config)

    timings: List[float] = []
    for _ in range(config.repeats):
        start = time.perf_counter()
        backend.run(x0, config)
        timings.append(time.perf_counter() - start)

    return np.array(timings, dtype=np.float64)


def run_benchmark(config: BenchmarkConfig) -> None:
    dims = [d for d in config.dims if d % 2 == 0]
    if not dims:
        raise ValueError("No even state dimensions provided for benchmarking.")

    backends: List[BackendSpec] = [
        BackendSpec("householder", _numpy_backend("householder")),
        BackendSpec("gram-schmidt", _numpy_backend("gs")),
    ]
    try:
        backends.append(BackendSpec("torch", _torch_backend()))
    except ModuleNotFoundError:
        print("torch not installed, skipping the PyTorch backend")

    print(
        f"Benchmark settings: steps={config.steps}, alpha={config.alpha}, "
        f"coupling={config.coupling}, clv={config.clv}, "
        f"warmup={config.warmup}, repeats={config.repeats}"
    )

    for dim in dims:
        print("\n" + "=" * 20)
        print(f"Dimension: {dim}")
        x0 = _initial_state(dim)

        results: List[BackendResult] = []
        for backend in backends:
            try:
                timings = _benchmark_backend(backend, x0, config)
            except Exception as exc:  # noqa: BLE001
                print(f"[{backend.name}] failed for dim={dim}: {exc}")
                continue
            results.append(BackendResult(backend.name, dim, timings))

        for result in results:
            timings = result.timings
            print(
                f"[{result.name}] timings (s): "
                + ", ".join(f"{val:.4f}" for val in timings)
            )
            std = timings.std(ddof=1) if timings.size > 1 else 0.0
            print(
                f"[{result.name}] mean ± std: {timings.mean():.4f} ± {std:.4f} s"
            )

        if len(results) >= 2:
            baseline = results[0]
            for result in results[1:]:
                ratio = result.timings.mean() / baseline.timings.mean()
                print(f"Speed ratio {result.name}/{baseline.name}: {ratio:.2f}x")


def parse_args() -> BenchmarkConfig:
    default_cfg = BenchmarkConfig()
    parser = argparse.ArgumentParser(
        description="Benchmark the Lyapunov analysis backends on a coupled Henon lattice"
    )
    parser.add_argument("--steps", type=int, default=default_cfg.steps, help="Averaged steps (duration)")
    parser.add_argument("--repeats", type=int, default=default_cfg.repeats, help="Number of timed runs")
    parser.add_argument("--warmup", type=int, default=default_cfg.warmup, help="Warm-up runs for JIT compilation")
    parser.add_argument("--alpha", type=float, default=default_cfg.alpha, help="Finite-difference scale")
    parser.add_argument("--coupling", type=float, default=default_cfg.coupling, help="Lattice coupling strength")
    parser.add_argument("--clv", action="store_true", help="Time the CLV estimator instead of the exponents")
    parser.add_argument("--dims", type=int, nargs="+", default=None, help="Even state dimensions to benchmark")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging from numclv")

    args = parser.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    dims = tuple(args.dims) if args.dims is not None else tuple(default_cfg.dims)

    return BenchmarkConfig(
        steps=args.steps,
        repeats=args.repeats,
        warmup=args.warmup,
        alpha=args.alpha,
        coupling=args.coupling,
        clv=args.clv,
        dims=dims,
    )


def main() -> None:
    config = parse_args()
    run_benchmark(config)


if __name__ == "__main__":
    main()
