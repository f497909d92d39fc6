"""
Host-side helpers that drive the provider from manifests and the CLI.
"""

from .runner import BlockResult, ProviderRunner, RunResult

__all__ = ["BlockResult", "ProviderRunner", "RunResult"]
