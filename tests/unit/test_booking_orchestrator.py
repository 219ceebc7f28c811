"""Tests for BookingOrchestrator."""

import asyncio
from datetime import datetime, timezone

import pytest

from callbooker.core.enums import RunState, ServiceType, SkipReason
from callbooker.core.exceptions import SearchError
from callbooker.models import AvailabilityWindow
from callbooker.services.booking.booking_orchestrator import BookingOrchestrator

# Monday 6 January 2025 and Sunday 5 January 2025, 10:00 wall clock
MONDAY_10AM = "2025-01-06T10:00:00"
SUNDAY_10AM = "2025-01-05T10:00:00"


def _skips(outcome):
    return [(s.username, s.reason) for s in outcome.skipped]


@pytest.fixture
def build(caller, fake_search, fake_profiles, fake_driver):
    """Assemble an orchestrator from fakes; returns (orchestrator, search, profiles, driver)."""

    def _build(candidates, profiles=None, slots=None, **kwargs):
        search = kwargs.pop("search", None) or fake_search(candidates)
        profile_provider = kwargs.pop("profile_provider", None) or fake_profiles(profiles or {})
        driver = kwargs.pop("driver", None) or fake_driver(slots=slots or {})
        orchestrator = BookingOrchestrator(
            search_provider=search,
            profile_provider=profile_provider,
            page_driver=driver,
            caller=caller,
            **kwargs,
        )
        return orchestrator, search, profile_provider, driver

    return _build


class TestHappyPath:
    """Bookings are made in search order until the target is reached."""

    @pytest.mark.asyncio
    async def test_books_single_candidate(self, build, make_candidate, make_profile, make_request):
        orchestrator, search, _, driver = build(
            [make_candidate("alice")],
            profiles={"alice": make_profile("alice", full_name="Alice Doe")},
            slots={"alice": [MONDAY_10AM]},
        )

        outcome = await orchestrator.run(make_request())

        assert search.queries == ["Netflix Product Manager"]
        assert outcome.booked_count == 1
        record = outcome.bookings[0]
        assert record.expert_username == "alice"
        assert record.expert_name == "Alice Doe"
        assert record.expert_title == "Product Manager at Netflix"
        assert record.price == 0
        assert record.instant == datetime(2025, 1, 6, 10, 0, tzinfo=timezone.utc)
        assert record.caller_timezone == "UTC"
        assert record.profile_url == "https://topmate.io/alice"
        assert record.booking_url == "https://topmate.io/alice/booked"
        assert outcome.skipped == []
        assert driver.submitted[0][1].email == "caller@example.com"
        assert orchestrator.state == RunState.DONE

    @pytest.mark.asyncio
    async def test_stops_at_target_without_touching_remaining(
        self, build, make_candidate, make_profile, make_request
    ):
        """N=2 with #1 and #3 bookable: booked 2, only #2 skipped, #4 and #5 untouched."""
        names = ["c1", "c2", "c3", "c4", "c5"]
        profiles = {n: make_profile(n) for n in names}
        slots = {n: [MONDAY_10AM] for n in names}
        slots["c2"] = [SUNDAY_10AM]

        orchestrator, _, profile_provider, driver = build(
            [make_candidate(n) for n in names], profiles=profiles, slots=slots
        )
        outcome = await orchestrator.run(make_request(num_calls=2))

        assert [b.expert_username for b in outcome.bookings] == ["c1", "c3"]
        assert _skips(outcome) == [("c2", SkipReason.NO_SLOT_IN_AVAILABILITY)]
        assert profile_provider.requested == ["c1", "c2", "c3"]
        assert [u for u, _ in driver.opened] == ["c1", "c2", "c3"]

    @pytest.mark.asyncio
    async def test_fewer_bookable_than_requested(
        self, build, make_candidate, make_profile, make_request
    ):
        orchestrator, _, _, _ = build(
            [make_candidate("a"), make_candidate("b")],
            profiles={"a": make_profile("a"), "b": make_profile("b")},
            slots={"a": [MONDAY_10AM], "b": []},
        )

        outcome = await orchestrator.run(make_request(num_calls=3))

        assert outcome.booked_count == 1
        assert _skips(outcome) == [("b", SkipReason.NO_SLOT_IN_AVAILABILITY)]

    @pytest.mark.asyncio
    async def test_no_candidates(self, build, make_request):
        orchestrator, _, _, _ = build([])

        outcome = await orchestrator.run(make_request())

        assert outcome.booked_count == 0
        assert outcome.skipped == []

    @pytest.mark.asyncio
    async def test_duplicate_usernames_processed_once(
        self, build, make_candidate, make_profile, make_request
    ):
        orchestrator, _, profile_provider, _ = build(
            [make_candidate("dup"), make_candidate("dup", "Dup Again"), make_candidate("other")],
            profiles={"dup": make_profile("dup", headline="Chef"), "other": make_profile("other")},
            slots={"other": [MONDAY_10AM]},
        )

        outcome = await orchestrator.run(make_request())

        assert profile_provider.requested == ["dup", "other"]
        assert _skips(outcome) == [("dup", SkipReason.CRITERIA_MISMATCH)]
        assert outcome.bookings[0].expert_username == "other"

    @pytest.mark.asyncio
    async def test_only_first_qualifying_service_attempted(
        self, build, make_candidate, make_profile, make_service, make_request
    ):
        services = [
            make_service("doc", "Resume Review", 0, ServiceType.DOCUMENT),
            make_service("s1", "Quick Chat", 0),
            make_service("s2", "Deep Dive", 0),
        ]
        orchestrator, _, _, driver = build(
            [make_candidate("x")],
            profiles={"x": make_profile("x", services=services)},
            slots={"x": [SUNDAY_10AM]},
        )

        outcome = await orchestrator.run(make_request())

        assert driver.opened == [("x", "s1")]
        assert _skips(outcome) == [("x", SkipReason.NO_SLOT_IN_AVAILABILITY)]

    @pytest.mark.asyncio
    async def test_record_uses_matching_window_timezone(
        self, build, make_candidate, make_profile, make_request
    ):
        tokyo = AvailabilityWindow.from_strings(["Mon"], "18:00", "20:00", "Asia/Tokyo")
        utc = AvailabilityWindow.from_strings(["Mon"], "09:00", "12:00", "UTC")
        orchestrator, _, _, _ = build(
            [make_candidate("a")],
            profiles={"a": make_profile("a")},
            slots={"a": [MONDAY_10AM]},
        )

        outcome = await orchestrator.run(make_request(windows=[tokyo, utc]))

        record = outcome.bookings[0]
        # 10:00 UTC is 19:00 in Tokyo, so the first window matches
        assert record.caller_timezone == "Asia/Tokyo"
        assert record.to_dict()["time_user_tz"] == "2025-01-06T19:00:00+09:00"


class TestSkipReasons:
    """Every per-candidate failure becomes exactly one skip entry."""

    @pytest.mark.asyncio
    async def test_profile_not_found(self, build, make_candidate, make_request):
        orchestrator, _, _, _ = build([make_candidate("ghost")])

        outcome = await orchestrator.run(make_request())

        assert _skips(outcome) == [("ghost", SkipReason.PROFILE_FETCH_FAILED)]

    @pytest.mark.asyncio
    async def test_profile_provider_raises(
        self, build, make_candidate, make_request, fake_profiles
    ):
        provider = fake_profiles(errors={"boom": RuntimeError("api down")})
        orchestrator, _, _, _ = build([make_candidate("boom")], profile_provider=provider)

        outcome = await orchestrator.run(make_request())

        assert _skips(outcome) == [("boom", SkipReason.PROFILE_FETCH_FAILED)]

    @pytest.mark.asyncio
    async def test_criteria_mismatch(self, build, make_candidate, make_profile, make_request):
        orchestrator, _, _, driver = build(
            [make_candidate("g")],
            profiles={"g": make_profile("g", headline="Engineer at Google")},
        )

        outcome = await orchestrator.run(make_request())

        assert _skips(outcome) == [("g", SkipReason.CRITERIA_MISMATCH)]
        assert driver.opened == []

    @pytest.mark.asyncio
    async def test_no_affordable_live_service(
        self, build, make_candidate, make_profile, make_service, make_request
    ):
        services = [
            make_service("p", "Paid Call", 500),
            make_service("d", "Doc", 0, ServiceType.DOCUMENT),
        ]
        orchestrator, _, _, _ = build(
            [make_candidate("p")], profiles={"p": make_profile("p", services=services)}
        )

        outcome = await orchestrator.run(make_request(max_price=100))

        assert _skips(outcome) == [("p", SkipReason.NO_AFFORDABLE_LIVE_SERVICE)]

    @pytest.mark.parametrize(
        "step,reason",
        [
            ("open", SkipReason.BOOKING_PAGE_ERROR),
            ("list", SkipReason.BOOKING_PAGE_ERROR),
            ("select", SkipReason.SUBMISSION_FAILED),
            ("submit", SkipReason.SUBMISSION_FAILED),
        ],
    )
    @pytest.mark.asyncio
    async def test_page_step_failures(
        self, step, reason, build, make_candidate, make_profile, make_request, fake_driver
    ):
        driver = fake_driver(
            slots={"a": [MONDAY_10AM], "b": [MONDAY_10AM]}, failures={"a": step}
        )
        orchestrator, _, _, _ = build(
            [make_candidate("a"), make_candidate("b")],
            profiles={"a": make_profile("a"), "b": make_profile("b")},
            driver=driver,
        )

        outcome = await orchestrator.run(make_request())

        assert _skips(outcome) == [("a", reason)]
        assert [b.expert_username for b in outcome.bookings] == ["b"]

    @pytest.mark.asyncio
    async def test_unparseable_labels_only(self, build, make_candidate, make_profile, make_request):
        orchestrator, _, _, _ = build(
            [make_candidate("a")],
            profiles={"a": make_profile("a")},
            slots={"a": ["whenever", "soon-ish"]},
        )

        outcome = await orchestrator.run(make_request())

        assert _skips(outcome) == [("a", SkipReason.NO_SLOT_IN_AVAILABILITY)]


class TestTimeouts:
    """Slow collaborators are bounded and turned into skips."""

    @pytest.mark.asyncio
    async def test_slow_profile_fetch(
        self, build, make_candidate, make_profile, make_request, fake_profiles
    ):
        provider = fake_profiles(
            profiles={"slow": make_profile("slow"), "fast": make_profile("fast")},
            delays={"slow": 5},
        )
        orchestrator, _, _, _ = build(
            [make_candidate("slow"), make_candidate("fast")],
            profile_provider=provider,
            slots={"fast": [MONDAY_10AM]},
            api_timeout=0.05,
        )

        outcome = await orchestrator.run(make_request())

        assert _skips(outcome) == [("slow", SkipReason.PROFILE_FETCH_FAILED)]
        assert outcome.bookings[0].expert_username == "fast"

    @pytest.mark.asyncio
    async def test_slow_booking_page(
        self, build, make_candidate, make_profile, make_request, fake_driver
    ):
        driver = fake_driver(slots={"a": [MONDAY_10AM]}, delays={("a", "open"): 5})
        orchestrator, _, _, _ = build(
            [make_candidate("a")],
            profiles={"a": make_profile("a")},
            driver=driver,
            navigation_timeout=0.05,
        )

        outcome = await orchestrator.run(make_request())

        assert _skips(outcome) == [("a", SkipReason.BOOKING_PAGE_ERROR)]

    @pytest.mark.asyncio
    async def test_slow_submission(
        self, build, make_candidate, make_profile, make_request, fake_driver
    ):
        driver = fake_driver(slots={"a": [MONDAY_10AM]}, delays={("a", "submit"): 5})
        orchestrator, _, _, _ = build(
            [make_candidate("a")],
            profiles={"a": make_profile("a")},
            driver=driver,
            navigation_timeout=0.05,
        )

        outcome = await orchestrator.run(make_request())

        assert _skips(outcome) == [("a", SkipReason.SUBMISSION_FAILED)]

    @pytest.mark.asyncio
    async def test_slot_listing_has_own_budget(
        self, build, make_candidate, make_profile, make_request, fake_driver
    ):
        driver = fake_driver(slots={"a": [MONDAY_10AM]}, delays={("a", "list"): 0.2})
        orchestrator, _, _, _ = build(
            [make_candidate("a")],
            profiles={"a": make_profile("a")},
            driver=driver,
            navigation_timeout=0.05,
            slot_listing_timeout=1.0,
        )

        outcome = await orchestrator.run(make_request())

        assert outcome.booked_count == 1
        assert outcome.skipped == []

    @pytest.mark.asyncio
    async def test_slot_listing_budget_exceeded(
        self, build, make_candidate, make_profile, make_request, fake_driver
    ):
        driver = fake_driver(slots={"a": [MONDAY_10AM]}, delays={("a", "list"): 5})
        orchestrator, _, _, _ = build(
            [make_candidate("a")],
            profiles={"a": make_profile("a")},
            driver=driver,
            navigation_timeout=0.05,
            slot_listing_timeout=0.1,
        )

        outcome = await orchestrator.run(make_request())

        assert _skips(outcome) == [("a", SkipReason.BOOKING_PAGE_ERROR)]

    def test_slot_listing_budget_defaults_to_multiple_of_navigation(self, build):
        orchestrator, _, _, _ = build([], navigation_timeout=30)
        assert orchestrator.slot_listing_timeout == 120


class TestFatalErrors:
    """Search failures abort the run; cancellation propagates."""

    @pytest.mark.asyncio
    async def test_search_error_propagates(self, build, make_request, fake_search):
        search = fake_search(error=SearchError("page layout changed", "Netflix Product Manager"))
        orchestrator, _, _, _ = build([], search=search)

        with pytest.raises(SearchError, match="page layout changed"):
            await orchestrator.run(make_request())

    @pytest.mark.asyncio
    async def test_unexpected_search_failure_wrapped(self, build, make_request, fake_search):
        orchestrator, _, _, _ = build([], search=fake_search(error=RuntimeError("browser died")))

        with pytest.raises(SearchError) as exc_info:
            await orchestrator.run(make_request())

        assert exc_info.value.query == "Netflix Product Manager"
        assert exc_info.value.error_code == "BOOKING_FAILED"

    @pytest.mark.asyncio
    async def test_search_timeout(self, build, make_request, fake_search):
        orchestrator, _, _, _ = build([], search=fake_search(delay=5), search_timeout=0.05)

        with pytest.raises(SearchError, match="timed out"):
            await orchestrator.run(make_request())

    @pytest.mark.asyncio
    async def test_cancellation_propagates(
        self, build, make_candidate, make_profile, make_request, fake_profiles
    ):
        provider = fake_profiles(profiles={"a": make_profile("a")}, delays={"a": 10})
        orchestrator, _, _, _ = build([make_candidate("a")], profile_provider=provider)

        task = asyncio.create_task(orchestrator.run(make_request()))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task


class TestSlotTimezone:
    """Slot labels are read in the driver's display timezone, else the expert's."""

    @pytest.mark.asyncio
    async def test_expert_timezone_used_without_display_timezone(
        self, build, make_candidate, make_profile, make_request, fake_driver
    ):
        # 10:00 in Kolkata is 04:30 UTC, outside the 09:00-17:00 UTC window
        driver = fake_driver(slots={"a": [MONDAY_10AM]}, display_timezone=None)
        orchestrator, _, _, _ = build(
            [make_candidate("a")],
            profiles={"a": make_profile("a", timezone="Asia/Kolkata")},
            driver=driver,
        )

        outcome = await orchestrator.run(make_request())

        assert _skips(outcome) == [("a", SkipReason.NO_SLOT_IN_AVAILABILITY)]

    @pytest.mark.asyncio
    async def test_unknown_expert_timezone_falls_back_to_utc(
        self, build, make_candidate, make_profile, make_request, fake_driver
    ):
        driver = fake_driver(slots={"a": [MONDAY_10AM]}, display_timezone=None)
        orchestrator, _, _, _ = build(
            [make_candidate("a")],
            profiles={"a": make_profile("a", timezone="Mars/Olympus")},
            driver=driver,
        )

        outcome = await orchestrator.run(make_request())

        assert outcome.booked_count == 1
