# src/rlcsim_core/simulation/integrators.py
"""
Fixed-step forward Euler integration for arbitrary (sampled) inputs.

Both integrators take the input already sampled on the grid, `u[k] = u(t_k)`,
and return `y[k]`, the state right after the update driven by `u[k]`. The
seed itself is never reported, so `y[0]` is already one step away from it.
The methods are only conditionally stable: roughly `dt < 2 tau` for first
order and `wn dt < 2` for second order. Outside that range the series grows
without bound; nothing here tries to prevent it.
"""
import numpy as np


def euler_first_order(u: np.ndarray, dt: float, tau: float, y0: float) -> np.ndarray:
    """y_{k+1} = y_k + dt (-y_k / tau + u_k / tau), reported at t_k."""
    y = np.empty(len(u), dtype=float)
    state = np.float64(y0)
    tau = np.float64(tau)
    with np.errstate(all='ignore'):
        for k in range(len(u)):
            state = state + dt * (-state / tau + u[k] / tau)
            y[k] = state
    return y


def euler_second_order(
    u: np.ndarray, dt: float, wn: float, zeta: float, y0: float, dy0: float = 0.0
) -> np.ndarray:
    """
    y'' = wn^2 (u - y) - 2 zeta wn y'

    The velocity is updated first and the position uses the new velocity.
    """
    y = np.empty(len(u), dtype=float)
    position = np.float64(y0)
    velocity = np.float64(dy0)
    wn = np.float64(wn)
    zeta = np.float64(zeta)
    with np.errstate(all='ignore'):
        for k in range(len(u)):
            acceleration = wn * wn * (u[k] - position) - 2.0 * zeta * wn * velocity
            velocity = velocity + dt * acceleration
            position = position + dt * velocity
            y[k] = position
    return y
