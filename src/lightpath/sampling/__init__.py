"""Sampling module: sample generation strategies and random streams.

Components:
    streams: Uniform, stratified and best-candidate RandomStreams
    sample: The Sample handed to an integrator for one eye path
    sampler: Abstract Sampler with splitting and pre-generation
    pseudorandom: Independent uniform samples
    stratified: Jittered-grid samples
    best_candidate: Dart-throwing samples with blue-noise spacing

Every sampler covers each pixel of its rectangle with exactly
samples_per_pixel samples before it is exhausted.
"""

from .best_candidate import BestCandidateSampler
from .pseudorandom import PseudorandomSampler
from .sample import Sample, continuous_to_discrete, discrete_to_continuous
from .sampler import Sampler
from .stratified import StratifiedSampler
from .streams import BestCandidateStream, RandomStream, StratifiedStream, UniformStream

__all__ = [
    "Sample",
    "continuous_to_discrete",
    "discrete_to_continuous",
    "Sampler",
    "PseudorandomSampler",
    "StratifiedSampler",
    "BestCandidateSampler",
    "RandomStream",
    "UniformStream",
    "StratifiedStream",
    "BestCandidateStream",
]
