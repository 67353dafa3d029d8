"""Property-based tests for the eligibility and capacity rules."""

from types import SimpleNamespace

from hypothesis import assume, given
from hypothesis import strategies as st

from hotel_booking.models import TicketStatus
from hotel_booking.services.rules import DenialKind, DenialReason, check_capacity, check_eligibility

# Strategies for generating test data
statuses = st.one_of(
    st.sampled_from(list(TicketStatus)),
    st.text(min_size=1, max_size=20),
)
tickets = st.builds(
    SimpleNamespace,
    status=statuses,
    is_remote=st.booleans(),
    includes_hotel=st.booleans(),
)
capacities = st.integers(min_value=1, max_value=1000)


@given(ticket=tickets)
def test_unpaid_ticket_is_always_denied(ticket):
    """Any status other than PAID is refused, whatever the other flags say."""
    assume(ticket.status != TicketStatus.PAID)

    verdict = check_eligibility(ticket)

    assert verdict.denial.reason == DenialReason.TICKET_NOT_PAID


@given(ticket=tickets)
def test_admitted_only_for_paid_in_person_ticket_with_hotel(ticket):
    verdict = check_eligibility(ticket)

    expected = (
        ticket.status == TicketStatus.PAID
        and not ticket.is_remote
        and ticket.includes_hotel
    )
    assert verdict.admitted == expected


@given(ticket=tickets)
def test_ticket_denials_are_payment_required(ticket):
    verdict = check_eligibility(ticket)

    if not verdict.admitted:
        assert verdict.denial.kind == DenialKind.PAYMENT_REQUIRED


@given(capacity=capacities)
def test_room_at_capacity_is_full(capacity):
    verdict = check_capacity(SimpleNamespace(capacity=capacity, occupancy=capacity))

    assert verdict.denial.reason == DenialReason.ROOM_FULL


@given(capacity=capacities)
def test_room_one_short_of_capacity_is_admitted(capacity):
    verdict = check_capacity(SimpleNamespace(capacity=capacity, occupancy=capacity - 1))

    assert verdict.admitted


@given(capacity=capacities, occupancy=st.integers(min_value=0, max_value=2000))
def test_capacity_admits_exactly_when_a_bed_is_free(capacity, occupancy):
    verdict = check_capacity(SimpleNamespace(capacity=capacity, occupancy=occupancy))

    assert verdict.admitted == (occupancy < capacity)
