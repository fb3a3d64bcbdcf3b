"""Convenience exports for the Lyapunov solver and the Kalman filter."""

from .filter import KalmanResult, kalman_filter, split_joint_covariance
from .lyapunov import solve_discrete_lyapunov

__all__ = ["KalmanResult", "kalman_filter", "split_joint_covariance", "solve_discrete_lyapunov"]
