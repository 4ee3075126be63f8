"""Integrators: light-transport algorithms and the render loop.

Components:
    base: Integrator base class, render loop and shared lighting terms
    whitted: Direct light plus ideal specular recursion
    path_tracing: Unbiased path tracing with Russian roulette
    importance: Inverse-density weighted direct and indirect estimates
"""

from .base import Integrator, RenderCancelled
from .importance import ImportanceIntegrator
from .path_tracing import PathTracingIntegrator
from .whitted import WhittedIntegrator

__all__ = [
    "Integrator",
    "RenderCancelled",
    "WhittedIntegrator",
    "PathTracingIntegrator",
    "ImportanceIntegrator",
]
