"""
CLI command modules.
"""

from create4_cli.commands import address, build, gap, proof, verify, view

__all__ = ["address", "build", "gap", "proof", "verify", "view"]
