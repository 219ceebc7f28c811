"""Named marketplace selectors with ordered fallbacks.

The marketplace ships hashed CSS-module class names that change on redeploys,
so every entry lists the exact class first and looser attribute matches after.
"""

from typing import Dict, Final, List

MARKETPLACE_SELECTORS: Final[Dict[str, List[str]]] = {
    # Search page
    "search.input": ["input#message", "textarea#message", "textarea[placeholder]"],
    "search.expert_card": [
        ".HitoProfileCard_ES_Expert_Card__7CmLV",
        "[class*='ES_Expert_Card__']",
    ],
    "search.expert_name": [
        ".HitoProfileCard_ES_Expert_Card_Name__d6i_j",
        "[class*='Expert_Card_Name']",
    ],
    "search.expert_desc": [
        ".HitoProfileCard_ES_Expert_Card_Desc__Mk6Ei",
        "[class*='Expert_Card_Desc']",
    ],
    # Profile page
    "profile.service_card": [".PublicServiceCard_ServiceCard__srMMU", "[id^='service-']"],
    # Booking page
    "booking.slot_container": [".slot-card", ".mobile-slots", "[class*='SlotCard']"],
    "booking.date_chip": [".slot-card", "[class*='DateCard']", "[data-date]"],
    "booking.time_slot": [".slot-time", ".time-slot", "[class*='TimeSlot'] button"],
    "booking.name": ["#name", "input[name='name']"],
    "booking.email": ["#email", "input[name='email']", "input[type='email']"],
    "booking.phone": ["#phone", "input[name='phone']", "input[type='tel']"],
    "booking.questions": ["[id^='questions_']"],
    "booking.submit": [".sp-cta", "button:has-text('Confirm')", "button:has-text('Book')"],
}


def service_card_selector(service_id: str) -> str:
    """Selector of a specific service card on a profile page."""
    return f"#service-{service_id}"
