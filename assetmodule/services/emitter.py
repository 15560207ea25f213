"""
Asset module emitter.

For every asset module the host build discovers, writes a stub module to
a parallel output tree. The stub evaluates to the asset's public URL, so
a server process requiring the same module graph gets the same strings
the bundle uses.

Lifecycle per build pass:
1. build.started      → fresh BuildPass
2. module.succeeded   → filter, dedupe, compute destination (no I/O)
3. build.after_emit   → render stubs, write to every backend concurrently,
                         wait for all writes to settle
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

from assetmodule.config import Settings, get_settings
from assetmodule.config_loader import options_from_settings
from assetmodule.core.eligibility import should_emit
from assetmodule.core.errors import ConfigurationError, EmissionError
from assetmodule.core.events import (
    ASSETS_EMITTED,
    ASSETS_FAILED,
    BUILD_AFTER_EMIT,
    BUILD_STARTED,
    MODULE_SUCCEEDED,
    Event,
)
from assetmodule.core.models import (
    AssetModuleOptions,
    BuildPass,
    CustomBackend,
    DestinationTarget,
    DiscoveredModule,
    PassResult,
    PendingEmission,
    WarningKind,
)
from assetmodule.core.paths import compute_destination, is_same_path
from assetmodule.core.stubs import render_stub
from assetmodule.services.base import Service
from assetmodule.storage.base import Backend, backend_name, ensure_directory
from assetmodule.storage.local import LocalFileSystem

logger = logging.getLogger(__name__)


class AssetModuleEmitter(Service):
    """
    Emits stub modules for asset modules found during a build.

    Pass state is kept per build id, so overlapping passes (watch-mode
    rebuilds) never see each other's resources, warnings or errors.

    Example:
        bus = EventBus()
        emitter = AssetModuleEmitter(AssetModuleOptions(
            source_base="src/web",
            destination_base="build/web",
            test=re.compile(r"\\.(png|svg|css)$"),
        ))
        emitter.register(bus)

        await bus.publish(build_started("b1", public_path="/static/"))
        await bus.publish(module_succeeded("b1", module))
        await bus.publish(build_after_emit("b1"))
    """

    service_id = "asset_module"
    subscribes_to = [BUILD_STARTED, MODULE_SUCCEEDED, BUILD_AFTER_EMIT]

    def __init__(
        self,
        options: AssetModuleOptions,
        default_backend: Backend | None = None,
        public_path: str = "",
    ):
        self.options = options
        self.default_backend = default_backend or LocalFileSystem()
        self.public_path = public_path
        self._passes: dict[str, BuildPass] = {}

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> AssetModuleEmitter:
        """Create an emitter configured from environment settings."""
        settings = settings or get_settings()
        return cls(options_from_settings(settings), public_path=settings.public_path)

    # =========================================================================
    # Pass lifecycle
    # =========================================================================

    def start_pass(
        self,
        build_id: str | None = None,
        public_path: str | None = None,
        output_file_system: Backend | None = None,
    ) -> BuildPass:
        """
        Create a fresh pass, replacing any unfinished pass with the same id.

        ``public_path=None`` falls back to the emitter default; an empty
        string is a valid public path and is kept.
        """
        kwargs: dict[str, Any] = {
            "default_backend": output_file_system or self.default_backend,
            "public_path": self.public_path if public_path is None else public_path,
        }
        if build_id is not None:
            kwargs["build_id"] = build_id
        build_pass = BuildPass(**kwargs)

        if build_pass.build_id in self._passes:
            logger.warning(f"Restarting unfinished build pass {build_pass.build_id}")
        self._passes[build_pass.build_id] = build_pass
        return build_pass

    def get_pass(self, build_id: str) -> BuildPass:
        """Return the pass for ``build_id``, starting one if needed."""
        if build_id not in self._passes:
            logger.warning(
                f"No active build pass {build_id}; starting one implicitly. "
                "Events arriving after build.after_emit start a pass that is never finalized"
            )
            return self.start_pass(build_id)
        return self._passes[build_id]

    @property
    def active_passes(self) -> list[str]:
        return list(self._passes)

    async def finalize(self, build_id: str) -> PassResult:
        """Write everything collected for ``build_id`` and discard the pass."""
        build_pass = self._passes.pop(build_id, None)
        if build_pass is None:
            build_pass = BuildPass(
                default_backend=self.default_backend,
                public_path=self.public_path,
                build_id=build_id,
            )
        return await self.run_pass(build_pass)

    # =========================================================================
    # Discovery
    # =========================================================================

    def collect(self, build_pass: BuildPass, module: DiscoveredModule) -> bool:
        """
        Record a discovered module for emission.

        Returns:
            True if the module was scheduled, False if it was filtered out,
            already scheduled in this pass, or would overwrite its source
        """
        resource = module.resource
        if resource in build_pass.emitted_resources:
            return False
        if not should_emit(resource, self.options):
            return False
        build_pass.claim(resource)

        destination = compute_destination(
            resource,
            self.options.source_base,
            self.options.destination_base,
        )
        if is_same_path(resource, destination):
            build_pass.warn(
                WarningKind.PATH_COLLISION,
                resource,
                f"Destination path for {resource} matches the source path; "
                "skipping instead of overwriting the file",
            )
            return False

        build_pass.pending.append(PendingEmission(module=module, destination=destination))
        return True

    def prepare_targets(self, build_pass: BuildPass) -> list[DestinationTarget]:
        """
        Render stub content for every pending module in the pass.

        A module that fails to render is recorded as an error on the pass
        and skipped; the rest are still rendered.
        """
        for pending in build_pass.pending:
            try:
                content = render_stub(
                    pending.module,
                    self.options.source_base,
                    build_pass.public_path,
                    strategy=self.options.strategy,
                    stub_format=self.options.stub_format,
                    build_pass=build_pass,
                )
            except ConfigurationError:
                raise
            except Exception as exc:
                error = EmissionError(pending.destination, "render", f"Unable to render stub module: {exc}")
                error.__cause__ = exc
                build_pass.record_error(pending.module.resource, pending.destination, "render", error)
                continue
            build_pass.targets.append(DestinationTarget(
                resource=pending.module.resource,
                path=pending.destination,
                content=content,
            ))
        build_pass.pending.clear()
        return build_pass.targets

    # =========================================================================
    # Writing
    # =========================================================================

    def resolve_backends(self, build_pass: BuildPass) -> list[Backend]:
        backends: list[Backend] = []
        for target in self.options.backend_targets:
            if isinstance(target, CustomBackend):
                backends.append(target.handle)
            else:
                backends.append(build_pass.default_backend)
        return backends

    async def write_target(
        self,
        build_pass: BuildPass,
        target: DestinationTarget,
        backend: Backend,
    ) -> tuple[str, str]:
        """
        Create parent directories and write one stub to one backend.

        Failures are recorded on the pass and re-raised as EmissionError.
        """
        name = backend_name(backend)
        try:
            await ensure_directory(backend, os.path.dirname(target.path))
            await backend.write_file(target.path, target.content)
        except Exception as exc:
            error = EmissionError(target.path, name, f"Unable to write stub module: {exc}")
            build_pass.record_error(target.resource, target.path, name, error)
            raise error from exc

        logger.debug(f"[{build_pass.build_id}] Wrote {target.path} to {name}")
        return name, target.path

    async def emit_target(
        self,
        build_pass: BuildPass,
        target: DestinationTarget,
        backends: list[Backend],
    ) -> list[tuple[str, str] | BaseException]:
        """Write one target to every backend; one outcome per backend."""
        return await asyncio.gather(
            *(self.write_target(build_pass, target, backend) for backend in backends),
            return_exceptions=True,
        )

    async def run_pass(self, build_pass: BuildPass) -> PassResult:
        """
        Write every target of the pass to every backend.

        All writes run concurrently and are awaited until each has
        settled. Successful writes stay on disk even when others fail.
        """
        targets = self.prepare_targets(build_pass)
        backends = self.resolve_backends(build_pass)

        outcomes = await asyncio.gather(
            *(self.emit_target(build_pass, target, backends) for target in targets)
        )

        written = [
            outcome
            for per_backend in outcomes
            for outcome in per_backend
            if not isinstance(outcome, BaseException)
        ]
        result = PassResult(
            build_id=build_pass.build_id,
            written=written,
            warnings=list(build_pass.warnings),
            errors=list(build_pass.errors),
        )

        if result.ok:
            logger.info(
                f"[{build_pass.build_id}] Emitted {len(targets)} asset modules "
                f"({len(written)} writes, {len(result.warnings)} warnings)"
            )
        else:
            logger.error(
                f"[{build_pass.build_id}] Asset module emission failed: "
                f"{len(result.errors)} errors, "
                f"{len(written)} of {len(targets) * len(backends)} writes succeeded"
            )
        return result

    # =========================================================================
    # Event handling
    # =========================================================================

    async def handle(self, event: Event) -> list[Event]:
        if event.event_type == BUILD_STARTED:
            self.start_pass(
                event.build_id,
                public_path=event.payload.get("public_path"),
                output_file_system=event.payload.get("output_file_system"),
            )
            return []

        if event.event_type == MODULE_SUCCEEDED:
            module = event.payload["module"]
            if not isinstance(module, DiscoveredModule):
                module = DiscoveredModule.model_validate(module)
            self.collect(self.get_pass(event.build_id), module)
            return []

        if event.event_type == BUILD_AFTER_EMIT:
            if "public_path" in event.payload:
                self.get_pass(event.build_id).public_path = event.payload["public_path"]
            result = await self.finalize(event.build_id)
            return [Event(
                event_type=ASSETS_EMITTED if result.ok else ASSETS_FAILED,
                build_id=event.build_id,
                payload={"result": result, "error": result.first_error},
            )]

        return []
