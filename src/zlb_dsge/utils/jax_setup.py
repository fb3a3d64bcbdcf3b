"""JAX configuration shared by every module that builds JAX arrays."""

from __future__ import annotations

import os

os.environ.setdefault("JAX_PLATFORMS", "cpu")

import jax

jax.config.update("jax_enable_x64", True)

__all__: list[str] = []
