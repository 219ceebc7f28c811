"""Pick the first offered slot that fits the caller's availability."""

from dataclasses import replace
from typing import Optional, Sequence, Union
from zoneinfo import ZoneInfo

from loguru import logger

from ...models.availability import AvailabilityWindow
from ...models.booking import SlotCandidate
from .slot_label_parser import SlotLabelParser
from .time_resolver import TimeResolver


class SlotMatcher:
    """
    Match booking-page slots against availability windows.

    Slots are examined in the order the page lists them; that order is the
    expert's, so it is never re-sorted.
    """

    def __init__(
        self,
        resolver: Optional[TimeResolver] = None,
        label_parser: Optional[SlotLabelParser] = None,
    ):
        self.resolver = resolver or TimeResolver()
        self.label_parser = label_parser or SlotLabelParser()

    def resolve_slot(
        self, slot: SlotCandidate, expert_timezone: Union[str, ZoneInfo]
    ) -> Optional[SlotCandidate]:
        """Return the slot with its instant filled in, or None if unparseable."""
        if slot.instant is not None:
            if slot.instant.tzinfo is None:
                return replace(slot, instant=self.resolver.localize(slot.instant, expert_timezone))
            return slot
        instant = self.label_parser.parse(slot.raw_label, expert_timezone)
        if instant is None:
            return None
        return replace(slot, instant=instant)

    def find_matching_slot(
        self,
        available_slots: Sequence[SlotCandidate],
        availability_windows: Sequence[AvailabilityWindow],
        expert_timezone: Union[str, ZoneInfo],
    ) -> Optional[SlotCandidate]:
        """
        Find the first slot inside any availability window.

        Args:
            available_slots: Slots in page order
            availability_windows: Caller windows, each in its own timezone
            expert_timezone: Timezone the slot labels are expressed in

        Returns:
            Matching slot with a resolved instant, or None when nothing fits
        """
        if not available_slots or not availability_windows:
            return None

        for slot in available_slots:
            resolved = self.resolve_slot(slot, expert_timezone)
            if resolved is None or resolved.instant is None:
                logger.warning(f"Skipping unparseable slot label: {slot.raw_label!r}")
                continue
            if self.resolver.is_instant_within_any_window(resolved.instant, availability_windows):
                logger.debug(
                    f"Slot {slot.raw_label!r} fits availability "
                    f"({self.resolver.to_utc(resolved.instant).isoformat()})"
                )
                return resolved

        logger.info(f"No slot out of {len(available_slots)} fits caller availability")
        return None
