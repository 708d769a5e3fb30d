"""Core sync engine for deploying a local tree into a BSP container."""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from ..api import FileStoreClient
from ..exceptions import FileStoreError
from ..models import Artifact
from ..output import OutputFormatter
from ..session import SessionManager
from .comparator import ArtifactComparator, ChangeItem, Disposition
from .executor import SyncExecutor
from .operations import SyncOperations
from .planner import order_changes
from .scanner import RemoteTreeWalker, resolve_local_artifacts
from .target import SyncTarget

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of one synchronization run."""

    plan: list[ChangeItem] = field(default_factory=list)
    """Ordered change items computed for the run"""

    completed: list[ChangeItem] = field(default_factory=list)
    """Items applied on the server"""

    remaining: list[ChangeItem] = field(default_factory=list)
    """Items not applied (all of them for a dry run or an early failure)"""

    error: Optional[FileStoreError] = None
    """Error that stopped the run"""

    index_error: Optional[FileStoreError] = None
    """Failure of the application index calculation after a successful sync"""

    container_created: bool = False
    """Whether the BSP container was created by this run"""

    dry_run: bool = False

    @property
    def success(self) -> bool:
        return self.error is None

    def counts(self) -> dict[str, int]:
        """Count completed items per disposition."""
        counts = {d.value: 0 for d in Disposition}
        for item in self.completed:
            counts[item.disposition.value] += 1
        return counts

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "dry_run": self.dry_run,
            "error": str(self.error) if self.error else None,
            "index_error": str(self.index_error) if self.index_error else None,
            "container_created": self.container_created,
            "plan": [item.to_dict() for item in self.plan],
            "completed": [item.to_dict() for item in self.completed],
            "remaining": [item.to_dict() for item in self.remaining],
        }


class SyncEngine:
    """Orchestrates scanning, diffing, ordering and applying changes."""

    def __init__(
        self,
        client: FileStoreClient,
        output: Optional[OutputFormatter] = None,
    ):
        """Initialize sync engine.

        Args:
            client: File store client
            output: Output formatter for displaying progress/status
        """
        self.client = client
        self.output = output or OutputFormatter()

    def sync_files(
        self,
        files: Iterable[str],
        target: SyncTarget,
        dry_run: bool = False,
    ) -> SyncResult:
        """Make the BSP container match the selected local files.

        Stages run strictly one after another: resolve local artifacts,
        walk the container, classify and order changes, provision the
        container, apply the plan and finally re-calculate the application
        index when enabled.

        Args:
            files: Selected file paths relative to ``target.base_dir``
            target: Container and local directory to synchronize
            dry_run: Only compute and display the plan

        Returns:
            SyncResult; remote and local failures are reported in
            ``error`` and ``index_error`` instead of being raised

        Examples:
            >>> engine = SyncEngine(client)
            >>> target = SyncTarget(Path("dist"), "ZAPP", "$TMP")
            >>> result = engine.sync_files(["index.html"], target, dry_run=True)
            >>> print(len(result.plan))
        """
        if not target.base_dir.exists():
            raise ValueError(f"Local directory does not exist: {target.base_dir}")
        if not target.base_dir.is_dir():
            raise ValueError(f"Local path is not a directory: {target.base_dir}")

        result = SyncResult(dry_run=dry_run)
        start_time = time.time()

        # Step 1: Resolve local artifacts, split off the ones deleted on disk
        local, removed = self._resolve_local(files, target)

        # Step 2: Walk the container
        try:
            remote = RemoteTreeWalker(self.client, target.container).walk()
        except FileStoreError as e:
            result.error = e
            return result

        # Step 3: Classify and order changes
        comparator = ArtifactComparator(target.preserve_unselected)
        result.plan = order_changes(comparator.compare(local, remote, removed))
        result.remaining = list(result.plan)
        logger.debug(
            "Planned %d change(s) in %.2fs", len(result.plan), time.time() - start_time
        )

        if dry_run:
            self._display_plan(result.plan)
            return result

        sessions = SessionManager(self.client)
        operations = SyncOperations(
            self.client,
            sessions,
            container=target.container,
            package=target.package,
            base_dir=target.base_dir,
            transport=target.transport,
            container_description=target.container_description,
        )

        # Step 4: Make sure the container exists
        try:
            result.container_created = operations.ensure_container()
        except FileStoreError as e:
            self.output.result(False, "BSP-Container", target.container, "created")
            result.error = e
            return result
        if result.container_created:
            self.output.result(True, "BSP-Container", target.container, "created")

        # Step 5: Apply the plan
        execution = SyncExecutor(operations, self.output).execute(result.plan)
        result.completed = execution.completed
        result.remaining = execution.remaining
        if execution.error is not None:
            result.error = execution.error
            return result

        # Step 6: Application index
        if target.calc_app_index:
            self._refresh_index(operations, result)

        logger.debug("Sync finished in %.2fs", time.time() - start_time)
        self._display_summary(result)
        return result

    def _resolve_local(
        self, files: Iterable[str], target: SyncTarget
    ) -> tuple[set[Artifact], set[Artifact]]:
        """Resolve selected paths and split them by existence on disk.

        Returns:
            Tuple of (present artifacts, artifacts missing on disk)
        """
        selected = resolve_local_artifacts(files)
        present = {
            a for a in selected if (target.base_dir / a.id.lstrip("/")).exists()
        }
        removed = selected - present
        if removed:
            logger.debug("%d selected artifact(s) missing on disk", len(removed))
        return present, removed

    def _refresh_index(self, operations: SyncOperations, result: SyncResult) -> None:
        try:
            operations.refresh_index()
        except FileStoreError as e:
            result.index_error = e
            self.output.result(False, "Application index", "", "calculated")
            return
        self.output.result(True, "Application index", "", "calculated")

    def _display_plan(self, plan: list[ChangeItem]) -> None:
        self.output.info("Dry run: No changes will be made")
        if not plan:
            self.output.info("No changes needed - everything is in sync!")
            return
        for item in plan:
            label = "folder" if item.is_folder else "file"
            self.output.print(f"  {item.disposition.value} {label} {item.id}")
        self.output.info(f"Total actions: {len(plan)}")

    def _display_summary(self, result: SyncResult) -> None:
        self.output.print("")
        self.output.success("Sync complete!")

        counts = result.counts()
        total = sum(counts.values())
        if total == 0:
            self.output.info("No changes needed - everything is in sync!")
            return

        self.output.info(f"Total actions: {total}")
        for disposition in Disposition:
            if counts[disposition.value] > 0:
                self.output.info(
                    f"  {disposition.past_tense.capitalize()}: "
                    f"{counts[disposition.value]}"
                )
