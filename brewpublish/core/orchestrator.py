"""Publish orchestrator: the central coordinator for a publish run.

The orchestrator sequences fingerprinting, release get-or-create, asset
conflict removal, upload, manifest rendering and the tap file upsert. It
turns each step's outcome into a ``PublishEvent`` and ends every run with a
single ``PublishResult``.

Remote side effects are at-least-once: a release or asset created before a
failure or cancellation stays in place. The get-or-create and
delete-then-upload steps make re-running the same request converge on the
intended state instead.
"""

from __future__ import annotations

import asyncio
import logging

from brewpublish.config import PublisherConfig
from brewpublish.core.asset_conflict import clear_conflicting_asset
from brewpublish.core.client import RemoteRepositoryClient
from brewpublish.core.errors import (
    PublishCancelled,
    PublishError,
    PublishInProgress,
)
from brewpublish.core.event_log import EventListener, PublishEventLog
from brewpublish.core.file_upserter import FileUpserter
from brewpublish.core.hasher import fingerprint_artifact
from brewpublish.core.manifest import commit_message, install_command, render_manifest
from brewpublish.core.release_resolver import resolve_release
from brewpublish.core.run_lock import RunLockRegistry, default_registry
from brewpublish.core.state_machine import PublishStateMachine
from brewpublish.models.events import EventSeverity, PublishResult
from brewpublish.models.github import AssetRecord, ReleaseRecord
from brewpublish.models.manifest import ManifestSpec, RenderedManifest
from brewpublish.models.request import PackageKind, PublishRequest
from brewpublish.models.states import PublishState

logger = logging.getLogger(__name__)


class _PublishRun:
    """Cross-step state of one run. Owned by the orchestrator, never shared."""

    def __init__(self, request: PublishRequest) -> None:
        self.request = request
        self.machine = PublishStateMachine()
        self.log = PublishEventLog()
        self.digest: str | None = None
        self.release: ReleaseRecord | None = None
        self.release_created = False
        self.asset: AssetRecord | None = None
        self.replaced_asset: AssetRecord | None = None
        self.manifest: RenderedManifest | None = None
        self.install_command: str | None = None

    def emit(self, severity: EventSeverity, message: str) -> None:
        self.log.append(severity, message, self.machine.state)

    def result(
        self,
        *,
        error: str | None = None,
        error_status: int | None = None,
        cancelled: bool = False,
    ) -> PublishResult:
        return PublishResult(
            succeeded=self.machine.state == PublishState.SUCCEEDED,
            state=self.machine.state,
            events=self.log.events,
            digest=self.digest,
            release=self.release,
            release_created=self.release_created,
            asset=self.asset,
            replaced_asset=self.replaced_asset,
            manifest=self.manifest,
            install_command=self.install_command,
            error=error,
            error_status=error_status,
            cancelled=cancelled,
        )


class PublishOrchestrator:
    """Runs the publish workflow against a ``RemoteRepositoryClient``.

    Parameters
    ----------
    client:
        Stateless GitHub client; may be shared between orchestrators.
    config:
        Publisher configuration. Uses defaults if not provided.
    locks:
        Registry enforcing one in-flight run per (repository, tag).
        Defaults to the process-wide registry.
    strict_file_lookup:
        Overrides ``config.strict_file_lookup`` when given.
    """

    def __init__(
        self,
        client: RemoteRepositoryClient,
        *,
        config: PublisherConfig | None = None,
        locks: RunLockRegistry | None = None,
        strict_file_lookup: bool | None = None,
    ) -> None:
        self.client = client
        self.config = config or PublisherConfig()
        self.locks = locks or default_registry
        strict = (
            self.config.strict_file_lookup
            if strict_file_lookup is None
            else strict_file_lookup
        )
        self.upserter = FileUpserter(client, strict=strict)

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------

    async def run(
        self,
        request: PublishRequest,
        *,
        listener: EventListener | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> PublishResult:
        """Publish ``request`` and return the terminal result.

        ``listener`` is called with each event as it is appended.
        Setting ``cancel_event`` stops the run before its next step.
        Only task cancellation escapes as an exception; every other failure
        is reported through the result.
        """
        run = _PublishRun(request)
        if listener is not None:
            run.log.subscribe(listener)

        repo, tag = request.target_key
        try:
            self.locks.acquire(repo, tag)
        except PublishInProgress as exc:
            return self._fail(run, exc)

        try:
            return await self._execute(run, cancel_event)
        finally:
            self.locks.release(repo, tag)

    async def _execute(
        self, run: _PublishRun, cancel_event: asyncio.Event | None
    ) -> PublishResult:
        request = run.request
        kind_label = "Cask" if request.kind == PackageKind.CASK else "Formula"
        run.emit(
            EventSeverity.INFO,
            f"Publishing {request.artifact_name} to {request.source_slug} "
            f"as {request.package_name} {request.version} ({kind_label})",
        )

        try:
            # 1. Fingerprint
            self._advance(run, PublishState.HASHING, cancel_event)
            run.emit(EventSeverity.INFO, "Computing SHA-256...")
            request.validate_artifact()
            # Upload these exact bytes so the manifest digest always matches the asset.
            run.digest, payload = await fingerprint_artifact(request.artifact_path)
            run.emit(EventSeverity.INFO, f"SHA-256: {run.digest}")

            # 2. Release get-or-create
            self._advance(run, PublishState.RESOLVING_RELEASE, cancel_event)
            run.emit(EventSeverity.INFO, f"Checking release {request.version}...")
            run.release, run.release_created = await resolve_release(
                self.client,
                request.source_slug,
                request.version,
                body=self.config.release_body,
            )
            if run.release_created:
                run.emit(EventSeverity.INFO, f"Created release {request.version}")
            else:
                run.emit(
                    EventSeverity.WARNING,
                    f"Release {request.version} already exists, reusing it",
                )

            # 3. Same-name asset conflict
            self._advance(run, PublishState.RESOLVING_ASSET_CONFLICT, cancel_event)
            run.replaced_asset = await clear_conflicting_asset(
                self.client, request.source_slug, run.release, request.artifact_name
            )
            if run.replaced_asset is not None:
                run.emit(
                    EventSeverity.WARNING,
                    f"Deleted existing asset {run.replaced_asset.name} "
                    f"(id {run.replaced_asset.id})",
                )

            # 4. Upload
            self._advance(run, PublishState.UPLOADING, cancel_event)
            run.emit(EventSeverity.INFO, f"Uploading {request.artifact_name}...")
            run.asset = await self.client.upload_asset(
                run.release.upload_url, request.artifact_path, data=payload
            )
            run.emit(
                EventSeverity.SUCCESS,
                f"Uploaded {run.asset.name}: {run.asset.browser_download_url}",
            )

            # 5. Manifest
            self._advance(run, PublishState.GENERATING_MANIFEST, cancel_event)
            spec = ManifestSpec(
                kind=request.kind,
                name=request.package_name,
                description=request.description,
                homepage=request.homepage,
                version=request.version,
                sha256=run.digest,
                url=run.asset.browser_download_url,
            )
            run.manifest = render_manifest(spec)
            run.emit(EventSeverity.INFO, f"Rendered {run.manifest.path}")

            # 6. Tap file upsert
            self._advance(run, PublishState.UPSERTING_FILE, cancel_event)
            run.emit(
                EventSeverity.INFO,
                f"Updating {run.manifest.path} in {request.tap_slug}...",
            )
            outcome = await self.upserter.upsert(
                request.tap_slug,
                run.manifest.path,
                run.manifest.content,
                commit_message(spec),
            )
            if outcome.lookup_failed:
                run.emit(
                    EventSeverity.WARNING,
                    f"Could not read the current {run.manifest.path}; wrote it as a new file",
                )
            verb = "Created" if outcome.created else "Updated"
            run.emit(EventSeverity.SUCCESS, f"{verb} {run.manifest.path}")
        except PublishCancelled as exc:
            run.emit(
                EventSeverity.WARNING,
                "Cancellation requested; remote changes made so far are kept",
            )
            return self._fail(run, exc, cancelled=True)
        except PublishError as exc:
            return self._fail(run, exc)
        except asyncio.CancelledError:
            self._fail(run, PublishCancelled("Publish task was cancelled"), cancelled=True)
            raise
        except Exception as exc:
            logger.exception("Unexpected error during publish of %s", request.artifact_name)
            return self._fail(run, exc)

        run.machine.transition(PublishState.SUCCEEDED)
        run.install_command = install_command(
            request.kind, request.tap_slug, request.package_name
        )
        run.emit(
            EventSeverity.SUCCESS,
            f"Published {request.package_name} {request.version}. "
            f"Install with: {run.install_command}",
        )
        return run.result()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _advance(
        run: _PublishRun,
        target: PublishState,
        cancel_event: asyncio.Event | None,
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise PublishCancelled(f"Publish cancelled before {target.value}")
        run.machine.transition(target)

    @staticmethod
    def _fail(
        run: _PublishRun, exc: BaseException, *, cancelled: bool = False
    ) -> PublishResult:
        step = run.machine.state.value.replace("_", " ")
        message = str(exc) or type(exc).__name__
        if not run.machine.is_terminal:
            run.machine.fail()
        run.emit(EventSeverity.ERROR, f"Publish failed during {step}: {message}")
        return run.result(
            error=message,
            error_status=getattr(exc, "status", None),
            cancelled=cancelled,
        )
