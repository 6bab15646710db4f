"""
CREATE4 Plan CLI

Command-line interface for building, inspecting and verifying CREATE4
deployment plans.

Usage:
    python -m create4_cli build --input spec.json --pretty
    python -m create4_cli address --input spec.json --factory 0x...
    python -m create4_cli proof --input spec.json --chain 1
    python -m create4_cli verify --plan plan.json
"""

__version__ = "0.1.0"
