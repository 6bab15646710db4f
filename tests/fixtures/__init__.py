"""
Test fixtures package for CREATE4 plan tests.

Usage:
    from fixtures import make_plan_spec, SAMPLE_ROOT

    def test_something():
        spec = make_plan_spec(chain_ids=(10, 25))
"""

from .plans import (
    SAMPLE_FACTORY,
    SAMPLE_ROOT,
    SAMPLE_ADDRESS,
    SAMPLE_DEPLOYMENT_SALT,
    ZERO_SALT,
    INIT_CODE_A,
    INIT_CODE_B,
    INIT_CODE_C,
    FALLBACK_CODE,
    make_sample_spec,
    make_plan_spec,
    make_plan,
)

__all__ = [
    "SAMPLE_FACTORY",
    "SAMPLE_ROOT",
    "SAMPLE_ADDRESS",
    "SAMPLE_DEPLOYMENT_SALT",
    "ZERO_SALT",
    "INIT_CODE_A",
    "INIT_CODE_B",
    "INIT_CODE_C",
    "FALLBACK_CODE",
    "make_sample_spec",
    "make_plan_spec",
    "make_plan",
]
