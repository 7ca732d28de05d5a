import matplotlib.pyplot as plt
import numpy as np

from numclv import DiscreteMap, clv_angles, covariant_lyapunov_vectors, lyapunov_exponents, stack_records


def henon(x: np.ndarray, a: float, b: float) -> np.ndarray:
    """Henon map (pure NumPy)."""
    return np.array([1.0 - a * x[0] ** 2 + x[1], b * x[0]])


def main():
    a, b = 1.4, 0.3
    system = DiscreteMap(henon, a, b, dim=2)
    x0 = np.array([0.1, 0.1])
    duration = 3000

    LE = lyapunov_exponents(system, x0, 1e-7, duration)
    print(f"Lyapunov exponents: {LE} (sum {LE.sum():.6f}, ln b = {np.log(b):.6f})")

    records = covariant_lyapunov_vectors(system, x0, 1e-7, duration)
    states, V, _ = stack_records(records)
    theta = clv_angles(records, 0, 1)

    fig, (ax0, ax1) = plt.subplots(1, 2, figsize=(11, 4.5))
    ax0.plot(states[:, 0], states[:, 1], ",", color="0.3")
    stride = 60
    for k, color in ((0, "tab:red"), (1, "tab:blue")):
        ax0.quiver(
            states[::stride, 0], states[::stride, 1],
            V[::stride, 0, k], V[::stride, 1, k],
            color=color, angles="xy", scale=25, width=0.003,
        )
    ax0.set_xlabel("$x$")
    ax0.set_ylabel("$y$")
    ax0.set_title("Henon attractor with CLVs")

    ax1.hist(np.degrees(theta), bins=60, color="tab:gray")
    ax1.set_xlabel("angle between CLV 1 and CLV 2 (deg)")
    ax1.set_ylabel("count")
    fig.tight_layout()
    fig.savefig("benchmarks/henon_clvs.png", dpi=150)
    plt.show()


if __name__ == "__main__":
    main()
