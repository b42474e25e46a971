"""Module apply engine.

The :class:`ModuleExecutor` turns modules into side effects on this machine.
For every item it runs, in order: the ``skip_if`` guard, the idempotency
check, item hooks, a snapshot of the destination path, the action itself,
and the ``verify`` command. When any item fails, the module's snapshot is
restored so its filesystem mutations are undone as a unit.

Execution is strictly sequential. Items may rely on the side effects of
earlier items, so declaration order is part of the contract.
"""

import logging
from collections.abc import Callable, Iterable
from enum import Enum

from dotular.core.audit import AuditSink, NullAuditSink
from dotular.core.builder import ActionBuilder, ActionBuildError, is_sync_item
from dotular.core.platform import current_os
from dotular.core.snapshot import Snapshot, SnapshotError
from dotular.core.tags import matches
from dotular.models.audit import AuditEntry, AuditOutcome
from dotular.models.config import BaseItem, Direction, Module
from dotular.utils.formatting import (
    print_check,
    print_detail,
    print_module_header,
    print_step,
    print_warning,
)
from dotular.utils.shell import ShellError, ShellEvaluator

logger = logging.getLogger(__name__)

TagMatcher = Callable[[list[str], list[str], list[str]], bool]
SnapshotFactory = Callable[[], Snapshot]


class ApplyPhase(str, Enum):
    """Step of the apply flow in which an error occurred."""

    BUILD = "build"
    HOOK = "hook"
    SKIP_IF = "skip_if"
    IDEMPOTENCY = "idempotency check"
    SNAPSHOT = "snapshot"
    RUN = "run"
    VERIFY = "verify"


class ModuleState(str, Enum):
    """Lifecycle of a module within one run.

    PENDING -> SKIPPED (tag mismatch), PENDING -> RUNNING -> COMMITTED, or
    RUNNING -> ROLLED_BACK when an item fails and a snapshot was restored.
    FAILED covers failures with no snapshot to restore (dry-run, non-atomic,
    or a failing ``after_apply`` hook).
    """

    PENDING = "pending"
    SKIPPED = "skipped"
    RUNNING = "running"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    FAILED = "failed"


class ApplyError(Exception):
    """A module failed to apply.

    Attributes:
        module: Name of the module.
        phase: Step that failed.
        item: Description of the item involved, if any.
        hook: Hook name for hook failures.
        cause: Original exception (also available as ``__cause__``).
    """

    def __init__(
        self,
        module: str,
        phase: ApplyPhase,
        cause: BaseException,
        *,
        item: str | None = None,
        hook: str | None = None,
    ) -> None:
        self.module = module
        self.phase = phase
        self.item = item
        self.hook = hook
        self.cause = cause
        super().__init__(self._format())

    def _format(self) -> str:
        step = f"{self.hook} hook" if self.hook else self.phase.value
        target = f' for "{self.item}"' if self.item else ""
        return f'module "{self.module}": {step} failed{target}: {self.cause}'


class ModuleExecutor:
    """Applies and verifies modules on the current machine.

    Collaborators are injected so the executor holds no global state: the
    action builder, the shell evaluator for hooks and checks, the audit
    sink, the tag matcher, and the snapshot factory.

    Attributes:
        os_name: OS the actions are built for.
        machine_tags: Tags of this machine, matched against module filters.
        dry_run: Print intended effects without mutating anything.
        verbose: Report skipped items and hooks.
        atomic: Snapshot each module and roll back on failure.
        command: Command name recorded in audit entries.
        direction_override: Forced direction for non-link file items.
    """

    def __init__(
        self,
        *,
        builder: ActionBuilder | None = None,
        shell: ShellEvaluator | None = None,
        audit: AuditSink | None = None,
        tag_matcher: TagMatcher = matches,
        snapshot_factory: SnapshotFactory = Snapshot.create,
        os_name: str | None = None,
        machine_tags: list[str] | None = None,
        dry_run: bool = False,
        verbose: bool = False,
        atomic: bool = True,
        command: str = "apply",
        direction_override: Direction | None = None,
    ) -> None:
        self._builder = builder or ActionBuilder()
        self._shell = shell or ShellEvaluator()
        self._audit: AuditSink = audit or NullAuditSink()
        self._tag_matcher = tag_matcher
        self._snapshot_factory = snapshot_factory
        self.os_name = os_name or current_os()
        self.machine_tags = list(machine_tags or [])
        self.dry_run = dry_run
        self.verbose = verbose
        self.atomic = atomic
        self.command = command
        self.direction_override = direction_override
        self._states: dict[str, ModuleState] = {}

    @property
    def module_states(self) -> dict[str, ModuleState]:
        """State of every module seen by this executor, by name."""
        return dict(self._states)

    def matches_tags(self, module: Module) -> bool:
        """Whether the module's tag filters allow it on this machine."""
        return self._tag_matcher(self.machine_tags, module.only_tags, module.exclude_tags)

    # --- public apply API ---------------------------------------------------

    def apply_all(self, modules: Iterable[Module]) -> None:
        """Apply every module in order, skipping tag mismatches.

        Stops at the first module that fails; later modules are not attempted.

        Raises:
            ApplyError: From the first failing module.
        """
        pending = list(modules)
        for module in pending:
            self._states.setdefault(module.name, ModuleState.PENDING)

        for module in pending:
            if not self.matches_tags(module):
                self._states[module.name] = ModuleState.SKIPPED
                if self.verbose:
                    print_module_header(module.name, "skip: tag mismatch")
                continue
            self.apply_module(module)

    def apply_module(self, module: Module) -> None:
        """Apply one module with hooks, snapshot/rollback and auditing.

        Raises:
            ApplyError: If any hook, check, or item fails. When a snapshot was
                taken it has already been restored.
        """
        print_module_header(module.name)
        self._states[module.name] = ModuleState.RUNNING
        try:
            self._run_hook(module.hooks.before_apply, module, "before_apply")

            snapshot: Snapshot | None = None
            if self.atomic and not self.dry_run:
                try:
                    snapshot = self._snapshot_factory()
                except SnapshotError as e:
                    raise ApplyError(module.name, ApplyPhase.SNAPSHOT, e) from e

            try:
                self._apply_items(module, snapshot)
            except BaseException:
                if snapshot is not None:
                    self._rollback(module, snapshot)
                raise
            finally:
                if snapshot is not None:
                    snapshot.discard()

            self._run_hook(module.hooks.after_apply, module, "after_apply")
        except BaseException:
            if self._states[module.name] == ModuleState.RUNNING:
                self._states[module.name] = ModuleState.FAILED
            raise

        self._states[module.name] = ModuleState.COMMITTED

    # --- public verify API --------------------------------------------------

    def verify_all(self, modules: Iterable[Module]) -> bool:
        """Run verify checks for every tag-matching module.

        Returns:
            True if every declared check passed.
        """
        all_passed = True
        for module in modules:
            if not self.matches_tags(module):
                continue
            if not self.verify_module(module):
                all_passed = False
        return all_passed

    def verify_module(self, module: Module) -> bool:
        """Run the ``verify`` command of every item that declares one.

        Nothing is applied. Items without a check, items that do not apply
        to this OS, and items that cannot be built are left out.

        Returns:
            True if every check that ran exited zero.
        """
        print_module_header(module.name)
        all_passed = True

        for item in module.items:
            if not item.verify:
                if self.verbose:
                    print_detail(f"----  {item.kind.value}  [no verify]")
                continue

            try:
                result = self._builder.build(item, self.os_name, self.direction_override)
            except ActionBuildError as e:
                logger.debug("Skipping verify for %s: %s", item.label, e)
                continue
            if result.skip or result.action is None:
                continue

            description = result.action.describe()
            error: str | None = None
            try:
                self._shell.run(item.verify)
            except ShellError as e:
                error = str(e)

            passed = error is None
            if not passed:
                all_passed = False
            print_check(passed, description)
            self._emit(
                module,
                description,
                AuditOutcome.SUCCESS if passed else AuditOutcome.FAILURE,
                error=error,
                command="verify",
            )
        return all_passed

    # --- internal apply flow ------------------------------------------------

    def _apply_items(self, module: Module, snapshot: Snapshot | None) -> None:
        """Apply every item, firing module sync hooks around them if needed."""
        has_sync_item = any(is_sync_item(item, self.direction_override) for item in module.items)

        if has_sync_item:
            self._run_hook(module.hooks.before_sync, module, "before_sync")

        for item in module.items:
            self._apply_item(module, item, snapshot)

        if has_sync_item:
            self._run_hook(module.hooks.after_sync, module, "after_sync")

    def _apply_item(self, module: Module, item: BaseItem, snapshot: Snapshot | None) -> None:
        try:
            result = self._builder.build(item, self.os_name, self.direction_override)
        except ActionBuildError as e:
            raise ApplyError(module.name, ApplyPhase.BUILD, e, item=item.label) from e
        if result.skip or result.action is None:
            if self.verbose:
                print_detail(f"skip ({item.kind.value} not applicable on {self.os_name})")
            return

        action = result.action
        description = action.describe()

        if item.skip_if:
            try:
                should_skip = self._shell.eval(item.skip_if)
            except ShellError as e:
                raise ApplyError(module.name, ApplyPhase.SKIP_IF, e, item=description) from e
            if should_skip:
                if self.verbose:
                    print_detail(f"skip [skip_if] {description}")
                self._emit(module, description, AuditOutcome.SKIPPED)
                return

        if result.idempotent is not None:
            try:
                applied = result.idempotent.is_applied()
            except Exception as e:
                raise ApplyError(module.name, ApplyPhase.IDEMPOTENCY, e, item=description) from e
            if applied:
                if self.verbose:
                    print_detail(f"skip [already applied] {description}")
                self._emit(module, description, AuditOutcome.SKIPPED)
                return

        is_sync = is_sync_item(item, self.direction_override)
        self._run_hook(item.hooks.before_apply, module, "before_apply", item=description)
        if is_sync:
            self._run_hook(item.hooks.before_sync, module, "before_sync", item=description)

        if snapshot is not None and item.is_file_kind:
            if result.target is None:
                cause = SnapshotError(f"no destination path to record for {description}")
                raise ApplyError(
                    module.name, ApplyPhase.SNAPSHOT, cause, item=description
                ) from cause
            try:
                snapshot.record(result.target)
            except SnapshotError as e:
                raise ApplyError(module.name, ApplyPhase.SNAPSHOT, e, item=description) from e

        print_step(description)
        try:
            action.run(dry_run=self.dry_run)
        except Exception as e:
            self._emit(module, description, AuditOutcome.FAILURE, error=str(e))
            raise ApplyError(module.name, ApplyPhase.RUN, e, item=description) from e
        self._emit(module, description, AuditOutcome.SUCCESS)

        if item.verify and not self.dry_run:
            try:
                self._shell.run(item.verify)
            except ShellError as e:
                raise ApplyError(module.name, ApplyPhase.VERIFY, e, item=description) from e

        if is_sync:
            self._run_hook(item.hooks.after_sync, module, "after_sync", item=description)
        self._run_hook(item.hooks.after_apply, module, "after_apply", item=description)

    def _rollback(self, module: Module, snapshot: Snapshot) -> None:
        print_warning(f'[rollback] restoring snapshot after failure in "{module.name}"')
        try:
            snapshot.restore()
        except SnapshotError as e:
            print_warning(f"[rollback] restore error: {e}")
            logger.error("Rollback of module %s incomplete: %s", module.name, e)
        self._states[module.name] = ModuleState.ROLLED_BACK

    # --- helpers ------------------------------------------------------------

    def _run_hook(
        self,
        command: str | None,
        module: Module,
        hook_name: str,
        *,
        item: str | None = None,
    ) -> None:
        if not command:
            return
        scope = "item" if item else "module"
        if self.dry_run:
            print_detail(f"[dry-run] hook {hook_name}.{scope}: {command}")
            return
        if self.verbose:
            print_detail(f'hook {hook_name} ({scope} "{item or module.name}")')
        try:
            self._shell.run(command)
        except ShellError as e:
            raise ApplyError(module.name, ApplyPhase.HOOK, e, item=item, hook=hook_name) from e

    def _emit(
        self,
        module: Module,
        description: str,
        outcome: AuditOutcome,
        *,
        error: str | None = None,
        command: str | None = None,
    ) -> None:
        entry = AuditEntry(
            command=command or self.command,
            module=module.name,
            item=description,
            outcome=outcome,
            error=error,
        )
        try:
            self._audit.log(entry)
        except Exception as e:
            logger.debug("Audit sink rejected entry: %s", e)
