"""
Synchronization driver for the Syncing context.

Replays the entries of one CV category onto a remote profile surface, one
entry at a time: open the entry form, fill every field the profile knows,
save, and wait until the surface shows its read view again.

Nothing a single entry does can abort the run. Missing fields, a missing save
control, a navigation that never completes or a save that is never confirmed
all become that entry's SyncOutcome, and the driver moves on.
"""

import threading
from dataclasses import dataclass
from typing import Callable, Optional, Union

from cvrelay.contexts.intake.cv_data_structure import (
    CVDocument,
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
)
from cvrelay.contexts.intake.dates import DateRange, parse_date_range
from cvrelay.contexts.syncing.locators import LocatorRegistry, resolve
from cvrelay.contexts.syncing.logger import (
    _log_debug,
    _log_error,
    _log_info,
    _log_warning,
    log_entry_outcome,
    log_entry_start,
    log_field_result,
)
from cvrelay.contexts.syncing.outcomes import OutcomeKind, SyncOutcome, SyncReport
from cvrelay.contexts.syncing.polling import BoundedPoll, Clock, SystemClock
from cvrelay.contexts.syncing.progress import compute_progress, progress_after
from cvrelay.contexts.syncing.surface import RemoteSurface
from cvrelay.contexts.syncing.surface_profiles import CategorySpec, FieldSpec, SurfaceProfile

Entry = Union[ExperienceEntry, EducationEntry, PersonalInfo, str]

MAX_LABEL_LENGTH = 60


@dataclass(frozen=True)
class SyncOptions:
    """
    Run parameters.

    Attributes:
        start_index: 0-based index of the first entry to replay
        max_entries: Entry limit for this run (None = all remaining)
        category: One of REPLAY_CATEGORIES ("experience", "summary", ...)
    """

    start_index: int = 0
    max_entries: Optional[int] = None
    category: str = "experience"


# =============================================================================
# FIELD PLAN
# =============================================================================


def format_description(lines, bullet: str = "", max_length: Optional[int] = None) -> str:
    """
    Join description bullets one per line.

    Args:
        lines: Description bullets
        bullet: Prefix for every line (e.g. "• ")
        max_length: Cut the result to this many characters

    Returns:
        Description text, "" when there are no bullets
    """
    text = "\n".join(f"{bullet}{line}" for line in lines if line)
    if max_length is not None and len(text) > max_length:
        text = text[:max_length].rstrip()
    return text


def _date_fields(dates: Optional[DateRange], category: CategorySpec, with_current: bool) -> list[tuple[str, str]]:
    # No parsable range: date controls stay untouched
    if dates is None:
        return []

    fields = []
    if dates.start.month is not None:
        fields.append(("start_month", category.format_month(dates.start.month)))
    fields.append(("start_year", dates.start.year))

    if dates.open_ended:
        if with_current:
            fields.append(("currently_working", "true"))
        return fields

    if with_current:
        # Unchecking "currently working" reveals the end date controls
        fields.append(("currently_working", "false"))
    if dates.end.month is not None:
        fields.append(("end_month", category.format_month(dates.end.month)))
    fields.append(("end_year", dates.end.year))
    return fields


def build_field_plan(entry: Entry, category: CategorySpec) -> list[tuple[str, str]]:
    """
    Ordered (logical field, value) pairs to put into the form.

    Entry values come first, in form order; profile defaults fill empty values
    and add fields the entry has no value for. Only fields the profile defines
    and that end up with a non-empty value are planned.

    Args:
        entry: ExperienceEntry, EducationEntry, PersonalInfo (intro), or the
            summary text / a skill name
        category: Category spec of the surface profile

    Returns:
        Field plan in fill order
    """
    if isinstance(entry, PersonalInfo):
        first_name, last_name = entry.name_parts()
        plan = [
            ("first_name", first_name),
            ("last_name", last_name),
            ("location", entry.location or ""),
        ]
    elif isinstance(entry, ExperienceEntry):
        plan = [
            ("title", entry.title),
            ("company", entry.company),
            ("location", entry.location),
            (
                "description",
                format_description(
                    entry.description, category.description_bullet, category.max_description_length
                ),
            ),
        ]
        plan += _date_fields(parse_date_range(entry.duration), category, with_current=True)
    elif isinstance(entry, EducationEntry):
        plan = [
            ("school", entry.institution),
            ("degree", entry.degree),
            ("location", entry.location),
        ]
        plan += _date_fields(parse_date_range(entry.duration), category, with_current=False)
    elif category.name == "summary":
        plan = [("summary", format_description([str(entry)], max_length=category.max_description_length))]
    else:
        plan = [("skill", str(entry))]

    planned = {name for name, _ in plan}
    plan = [(name, value or category.defaults.get(name, "")) for name, value in plan]
    plan += [(name, value) for name, value in category.defaults.items() if name not in planned]

    result = []
    for name, value in plan:
        if name not in category.fields:
            _log_debug(f"  {name}: not defined by profile, skipped")
            continue
        if value:
            result.append((name, value))
    return result


def entry_label(entry: Entry) -> str:
    if isinstance(entry, (ExperienceEntry, EducationEntry, PersonalInfo)):
        return entry.label()
    # Summary text can run to paragraphs
    text = " ".join(str(entry).split())
    if len(text) > MAX_LABEL_LENGTH:
        return text[: MAX_LABEL_LENGTH - 1].rstrip() + "…"
    return text


# =============================================================================
# DRIVER
# =============================================================================


class SyncDriver:
    """
    Replays CV entries onto a remote surface.

    Args:
        surface: RemoteSurface to drive
        profile: Surface profile with form URLs, markers and strategies
        navigation_poll: Wait for the entry form (default from profile polling)
        save_poll: Wait for the read view after saving (default from profile polling)
        clock: Clock for the default polls and fixed delays
        stop_event: Operator stop signal; checked before every entry
        on_outcome: Called with each SyncOutcome as soon as it is known

    Example:
        driver = SyncDriver(surface, registry.get_profile("xing"))
        report = driver.sync(document, SyncOptions(start_index=2, max_entries=3))
    """

    def __init__(
        self,
        surface: RemoteSurface,
        profile: SurfaceProfile,
        navigation_poll: Optional[BoundedPoll] = None,
        save_poll: Optional[BoundedPoll] = None,
        clock: Optional[Clock] = None,
        stop_event: Optional[threading.Event] = None,
        on_outcome: Optional[Callable[[SyncOutcome], None]] = None,
    ):
        self.surface = surface
        self.profile = profile
        self.stop_event = stop_event or threading.Event()
        self.clock = clock or SystemClock(self.stop_event)

        polling = profile.polling
        self.navigation_poll = navigation_poll or BoundedPoll(
            polling.interval, polling.navigation_attempts, self.clock, self.stop_event
        )
        self.save_poll = save_poll or BoundedPoll(
            polling.interval, polling.save_attempts, self.clock, self.stop_event
        )
        self.on_outcome = on_outcome

    # =========================================================================
    # RUN
    # =========================================================================

    def sync(self, document: CVDocument, options: Optional[SyncOptions] = None) -> SyncReport:
        """
        Replay the selected window of one category.

        Args:
            document: Parsed CV
            options: Start index, entry limit and category

        Returns:
            SyncReport with one outcome per processed entry and the resume tuple

        Raises:
            SurfaceProfileError: If the profile has no form for the category
        """
        options = options or SyncOptions()
        category = self.profile.category(options.category)
        entries = document.entries_for(options.category)
        total = len(entries)

        window = compute_progress(total, options.start_index, options.max_entries)
        _log_info(
            f"Replaying {len(window.processed_range)} of {total} {options.category} entries "
            f"on '{self.profile.name}'"
        )

        outcomes = []
        interrupted = False

        for index in window.processed_range:
            if self.stop_event.is_set():
                interrupted = True
                break

            outcome = self.sync_entry(index, entries[index], category, total)

            # An entry cut short by a stop is retried by the next run
            if self.stop_event.is_set() and not outcome.is_applied:
                _log_warning(f"Entry {index + 1} interrupted, it will be retried on resume")
                interrupted = True
                break

            outcomes.append(outcome)
            log_entry_outcome(outcome)
            if self.on_outcome:
                self.on_outcome(outcome)

            try:
                self._delay(self.profile.polling.settle)
            except Exception as e:
                # A dead surface shows up again as the next entry's outcome
                _log_warning(f"Settle delay after entry {index + 1} failed: {e}")

        progress = progress_after(total, window, len(outcomes))
        return SyncReport(outcomes=tuple(outcomes), progress=progress, interrupted=interrupted)

    def sync_entry(self, index: int, entry: Entry, category: CategorySpec, total: int) -> SyncOutcome:
        """Replay a single entry and classify what happened."""
        label = entry_label(entry)
        log_entry_start(index, total, label)

        try:
            if not self._open_form(category):
                return SyncOutcome(
                    OutcomeKind.NAVIGATION_FAILED,
                    index,
                    label,
                    detail=f"'{category.form_marker}' not reached within {self.navigation_poll.ceiling:.0f}s",
                )
        except Exception as e:
            _log_error(f"Navigation error: {e}")
            return SyncOutcome(OutcomeKind.NAVIGATION_FAILED, index, label, detail=str(e))

        locators = category.locators()
        unresolved = []
        try:
            for name, value in build_field_plan(entry, category):
                if not self._fill_field(category.fields[name], locators, value):
                    unresolved.append(name)

            save = locators.resolve(self.surface, "save")
            if not save:
                log_field_result("save")
                return SyncOutcome(
                    OutcomeKind.PARTIALLY_APPLIED, index, label, tuple(unresolved) + ("save",)
                )

            self.surface.click(save.handle)
        except Exception as e:
            _log_error(f"Surface error while filling entry {index + 1}: {e}")
            return SyncOutcome(
                OutcomeKind.PARTIALLY_APPLIED, index, label, tuple(unresolved), detail=str(e)
            )

        try:
            saved = self.save_poll.wait(lambda: self._on_read_view(category))
        except Exception as e:
            _log_error(f"Surface error while waiting for save of entry {index + 1}: {e}")
            return SyncOutcome(
                OutcomeKind.SAVE_TIMED_OUT, index, label, tuple(unresolved), detail=str(e)
            )

        if not saved:
            return SyncOutcome(
                OutcomeKind.SAVE_TIMED_OUT,
                index,
                label,
                tuple(unresolved),
                detail=f"read view not reached within {self.save_poll.ceiling:.0f}s",
            )

        kind = OutcomeKind.PARTIALLY_APPLIED if unresolved else OutcomeKind.APPLIED
        return SyncOutcome(kind, index, label, tuple(unresolved))

    # =========================================================================
    # STEPS
    # =========================================================================

    def _open_form(self, category: CategorySpec) -> bool:
        self.surface.navigate(category.form_url)
        return self.navigation_poll.wait(lambda: category.form_marker in self.surface.current_location())

    def _on_read_view(self, category: CategorySpec) -> bool:
        """Back on a read view: no edit marker left, read marker present if configured."""
        try:
            location = self.surface.current_location()
        except Exception as e:
            _log_debug(f"Location unavailable while waiting for save: {e}")
            return False

        if any(marker in location for marker in category.edit_markers):
            return False
        if category.read_marker and category.read_marker not in location:
            return False
        return True

    def _fill_field(self, spec: FieldSpec, locators: LocatorRegistry, value: str) -> bool:
        """
        Resolve one field and put the value in.

        Returns:
            False when no strategy located the control or the surface refused the value
        """
        resolution = locators.resolve(self.surface, spec.name)

        if not resolution and spec.reveal:
            reveal = resolve(self.surface, spec.reveal)
            if reveal:
                _log_debug(f"  {spec.name}: revealing via '{reveal.strategy.name}'")
                self.surface.click(reveal.handle)
                self._delay(self.profile.polling.ui_delay)
                resolution = locators.resolve(self.surface, spec.name)

        if not resolution:
            log_field_result(spec.name)
            return False

        try:
            self.surface.set_value(resolution.handle, value)
        except Exception as e:
            _log_warning(f"  {spec.name}: value rejected ({e})")
            return False

        if spec.suggestion:
            self._delay(self.profile.polling.ui_delay)
            suggestion = resolve(self.surface, spec.suggestion)
            if suggestion:
                self.surface.click(suggestion.handle)
            else:
                _log_debug(f"  {spec.name}: no suggestion offered")

        log_field_result(spec.name, resolution.strategy.name)
        return True

    def _delay(self, seconds: float) -> None:
        if seconds > 0 and not self.stop_event.is_set():
            self.clock.sleep(seconds)
