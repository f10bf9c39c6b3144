import pytest

from lease_schedule.models import ColumnTemplate, RoutingState
from lease_schedule.router import LEASE, PROPERTY, REGISTRATION, route_line, route_lines
from lease_schedule.template import infer_template

TEMPLATE_LINE = "09.07.2009      Endeavour House, 47 Cuba      06.07.2009      EGL557357  "


@pytest.fixture()
def template():
    return infer_template(TEMPLATE_LINE)


def test_aligned_line_is_sliced_by_template(template):
    line = "Edged and       Street, London                125 years from             "
    placements, state = route_line(line, template, RoutingState(continue_lease=True))

    assert placements == [
        (REGISTRATION, "Edged and"),
        (PROPERTY, "Street, London"),
        (LEASE, "125 years from"),
    ]
    assert state.continue_lease is False


def test_aligned_line_skips_blank_slices(template):
    line = "numbered 2 in                                 1.1.2009                   "
    placements, _ = route_line(line, template, RoutingState())

    assert placements == [(REGISTRATION, "numbered 2 in"), (LEASE, "1.1.2009")]


def test_gap_separated_trimmed_line_splits_property_and_lease(template):
    line = "shop)                         Beginning on               "
    placements, state = route_line(line, template, RoutingState())

    assert placements == [(PROPERTY, "shop)"), (LEASE, "Beginning on")]
    assert state.continue_lease is False


def test_extra_chunks_are_joined_into_lease(template):
    line = "shop)     Beginning on     and including"
    placements, _ = route_line(line, template, RoutingState())

    assert placements == [(PROPERTY, "shop)"), (LEASE, "Beginning on and including")]


def test_right_padded_trimmed_line_goes_to_lease_and_allows_one_continuation(template):
    placements, state = route_line("including 19               ", template, RoutingState())
    assert placements == [(LEASE, "including 19")]
    assert state.continue_lease is True

    placements, state = route_line("April 2028", template, state)
    assert placements == [(LEASE, "April 2028")]
    assert state.continue_lease is False

    placements, state = route_line("blue (part of)", template, state)
    assert placements == [(REGISTRATION, "blue (part of)")]
    assert state.continue_lease is False


def test_unpadded_trimmed_line_without_carry_goes_to_registration(template):
    placements, state = route_line("blue (part of)", template, RoutingState())

    assert placements == [(REGISTRATION, "blue (part of)")]
    assert state.continue_lease is False


def test_single_padding_space_is_not_right_padding(template):
    placements, state = route_line("blue (part of) ", template, RoutingState())

    assert placements == [(REGISTRATION, "blue (part of)")]
    assert state.continue_lease is False


def test_indented_unaligned_line_goes_to_closest_column(template):
    line = " " * 64 + "extra"
    placements, state = route_line(line, template, RoutingState(continue_lease=True))

    assert placements == [(LEASE, "extra")]
    assert state.continue_lease is False


def test_blank_line_is_skipped_and_clears_carry(template):
    placements, state = route_line("      ", template, RoutingState(continue_lease=True))

    assert placements == []
    assert state.continue_lease is False


def test_closest_column_prefers_lower_column_on_tie():
    template = ColumnTemplate(
        col1_start=0, col2_start=10, col3_start=20, col4_start=30, width=40, lessees_title="T"
    )

    assert template.closest_column(5) == 1
    assert template.closest_column(15) == 2
    assert template.closest_column(16) == 3
    assert template.closest_column(29) == 3


def test_route_lines_collects_fragments_per_column(template):
    lines = [
        TEMPLATE_LINE,
        "Edged and       Street, London                125 years from             ",
        "numbered 2 in                                 1.1.2009                   ",
        "blue (part of)",
    ]
    registration, prop, lease = route_lines(lines, template)

    assert registration == ["09.07.2009", "Edged and", "numbered 2 in", "blue (part of)"]
    assert prop == ["Endeavour House, 47 Cuba", "Street, London"]
    assert lease == ["06.07.2009", "125 years from", "1.1.2009"]


def test_route_lines_starts_each_call_with_fresh_state(template):
    route_lines(["including 19               "], template)
    registration, _, lease = route_lines(["April 2028"], template)

    assert registration == ["April 2028"]
    assert lease == []
