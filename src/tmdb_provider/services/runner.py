"""
Host-side runner that drives the provider the way an orchestration engine does.

The runner configures the provider once, gives every data source instance the
same client, then runs all reads concurrently. Reads share nothing but the
client, so results do not depend on scheduling order; they are returned in
manifest order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..core.context import ExecutionContext
from ..core.diagnostics import Diagnostics
from ..core.logging import bind_tags, log_progress
from ..core.manifest import DataBlock, Manifest
from ..core.registry import DataSourceRegistry, RegistryLoadError
from ..datasources.base import ReadResponse
from ..provider import ConfigureResponse, TMDBProvider


@dataclass(slots=True)
class BlockResult:
    """Read outcome for one manifest block."""

    block: DataBlock
    response: ReadResponse

    @property
    def address(self) -> str:
        return f"data.{self.block.type_name}.{self.block.name}"

    def to_dict(self) -> Dict[str, Any]:
        payload = self.response.to_dict()
        payload["address"] = self.address
        return payload


@dataclass(slots=True)
class RunResult:
    """Aggregated outcome of a manifest run."""

    configure: ConfigureResponse
    blocks: List[BlockResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.configure.ok and all(result.response.ok for result in self.blocks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": {"diagnostics": self.configure.diagnostics.to_list()},
            "data": [result.to_dict() for result in self.blocks],
        }


@dataclass(slots=True)
class ProviderRunner:
    """Configure-then-read driver used by the CLI."""

    context: ExecutionContext
    provider: Optional[TMDBProvider] = None
    logger: LoggerAdapter = field(init=False, repr=False)
    _registry: DataSourceRegistry = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.provider is None:
            self.provider = TMDBProvider(settings=self.context.settings)
        self.logger = self.context.get_logger(self.__class__.__name__)
        self._registry = self.provider.registry()

    @property
    def registry(self) -> DataSourceRegistry:
        return self._registry

    def configure(self, provider_config: Mapping[str, Any]) -> ConfigureResponse:
        return self.provider.configure(provider_config, self.context.environ)

    def read_one(self, type_name: str, config: Mapping[str, Any], provider_config: Optional[Mapping[str, Any]] = None) -> RunResult:
        """Configure the provider and read a single data source."""

        manifest = Manifest(provider=provider_config or {}, data=(DataBlock(type_name=type_name, name="cli", config=config),))
        return self.run(manifest)

    def run(self, manifest: Manifest) -> RunResult:
        """
        Execute a manifest.

        Unsupported block types and provider configuration errors are reported
        per block as diagnostics; no block is read without a configured client.
        """

        configured = self.configure(manifest.provider)
        result = RunResult(configure=configured)
        if not configured.ok:
            log_progress(self.logger, "Provider configuration failed", phase="configure", status="failed", level=logging.ERROR)
            result.blocks = [BlockResult(block, ReadResponse(diagnostics=_skipped())) for block in manifest.data]
            return result

        result.blocks = self._read_all(manifest.data, configured)
        log_progress(
            self.logger,
            "Manifest run finished",
            phase="read",
            status="done" if result.ok else "failed",
            extra={"blocks": len(result.blocks)},
        )
        return result

    def _read_all(self, blocks: Sequence[DataBlock], configured: ConfigureResponse) -> List[BlockResult]:
        if not blocks:
            return []
        workers = max(1, min(self.context.options.max_workers, len(blocks)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._read_block, block, configured) for block in blocks]
            return [BlockResult(block, future.result()) for block, future in zip(blocks, futures)]

    def _read_block(self, block: DataBlock, configured: ConfigureResponse) -> ReadResponse:
        logger = bind_tags(self.logger, [block.type_name])
        try:
            descriptor = self._registry.require(block.type_name)
        except RegistryLoadError as exc:
            diagnostics = Diagnostics()
            diagnostics.add_error("Invalid Data Source", str(exc))
            return ReadResponse(diagnostics=diagnostics)

        data_source = descriptor.create()
        data_source.configure(configured.client)
        log_progress(logger, "Reading data block", phase="read", step=block.name)
        response = data_source.read(block.config)
        log_progress(logger, "Read data block", phase="read", step=block.name, status="ok" if response.ok else "failed")
        return response


def _skipped() -> Diagnostics:
    diagnostics = Diagnostics()
    diagnostics.add_error(
        "Provider Not Configured",
        "The data block was not read because provider configuration reported errors.",
    )
    return diagnostics
