"""Timezone resolution and slot matching."""

from .slot_label_parser import SlotLabelParser
from .slot_matcher import SlotMatcher
from .time_resolver import TimeResolver

__all__ = ["SlotLabelParser", "SlotMatcher", "TimeResolver"]
