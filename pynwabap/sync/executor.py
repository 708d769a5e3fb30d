"""Sequential execution of an ordered sync plan."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from ..exceptions import FileStoreError
from ..output import OutputFormatter
from .comparator import ChangeItem
from .operations import SyncOperations

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Outcome of executing a plan."""

    completed: list[ChangeItem] = field(default_factory=list)
    """Items applied successfully, in order"""

    remaining: list[ChangeItem] = field(default_factory=list)
    """Items not applied, starting with the failed one"""

    error: Optional[FileStoreError] = None
    """Error that stopped execution"""


class SyncExecutor:
    """Applies change items strictly one after another.

    Later items may depend on earlier ones (a file needs its folder), so
    the first failure stops the run. Applied changes are not rolled back.
    """

    def __init__(
        self, operations: SyncOperations, output: Optional[OutputFormatter] = None
    ):
        self.operations = operations
        self.output = output or OutputFormatter(quiet=True)

    def execute(self, plan: Sequence[ChangeItem]) -> ExecutionResult:
        """Apply every item of the plan in order.

        Args:
            plan: Ordered change items

        Returns:
            ExecutionResult with completed and remaining items
        """
        result = ExecutionResult()

        for index, item in enumerate(plan):
            try:
                self.operations.apply(item)
            except FileStoreError as e:
                self._report(item, ok=False)
                logger.debug("Stopping after failure on %s: %s", item.id, e)
                result.remaining = list(plan[index:])
                result.error = e
                return result

            self._report(item, ok=True)
            result.completed.append(item)

        return result

    def _report(self, item: ChangeItem, ok: bool) -> None:
        label = "Folder" if item.is_folder else "File"
        outcome = getattr(item.disposition, "past_tense", str(item.disposition))
        self.output.result(ok, label, item.id, outcome)
