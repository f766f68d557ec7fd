"""
Samples Layer - Deterministic fixture note generation.
"""

from clinote.samples.sample_generator import CONTENT_POOLS, build_bundle, build_note, generate_samples

__all__ = ["CONTENT_POOLS", "build_bundle", "build_note", "generate_samples"]
