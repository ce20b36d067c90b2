"""
Tests for the weekly load projector.
"""

from datetime import date

import pytest

from rfq_capacity.services.capacity_planning.projector import (
    count_unresolved_lines,
    line_step_label,
    project_weekly_load,
    spread_weeks,
    spread_window,
)
from rfq_capacity.services.capacity_planning.snapshot import WorksharingLine
from rfq_capacity.services.capacity_planning.week_grid import LoadDetail, generate_weeks


@pytest.fixture
def weeks():
    """Twelve weeks starting Monday Jan 1 2024."""
    return generate_weeks(12, date(2024, 1, 1))


class TestSpreadWindow:
    """Tests for the spreading window."""

    def test_window_from_pin_and_eoq(self, boundary_rfq):
        """Test the window is bounded by the PIN and EOQ planned dates."""
        assert spread_window(boundary_rfq) == (date(2024, 1, 2), date(2024, 1, 8))

    def test_missing_milestone(self, make_rfq):
        """Test an RFQ without EOQ has no window."""
        assert spread_window(make_rfq(planning={'PIN': date(2024, 1, 2)})) is None

    def test_spread_weeks(self):
        """Test the week count rounds up and is at least one."""
        assert spread_weeks(date(2024, 1, 2), date(2024, 1, 8)) == 1
        assert spread_weeks(date(2024, 1, 2), date(2024, 1, 16)) == 2
        assert spread_weeks(date(2024, 1, 1), date(2024, 1, 16)) == 3
        assert spread_weeks(date(2024, 1, 8), date(2024, 1, 8)) == 1
        assert spread_weeks(date(2024, 1, 8), date(2024, 1, 1)) == 1

    def test_line_step_label(self):
        """Test the detail label of a worksharing line."""
        assert line_step_label(WorksharingLine('Proc1', 'Plant1', 10)) == 'Proc1 (10 pcs)'


class TestProjectWeeklyLoad:
    """Tests for project_weekly_load."""

    def test_window_start_after_monday(self, weeks, boundary_rfq, resolver):
        """Test a window opening on Tuesday skips that week and lands on the next Monday."""
        projected = project_weekly_load([boundary_rfq], weeks, resolver, 'DIV1')

        assert projected[0].loads == {}
        cell = projected[1].loads['Plant1-Proc1']
        assert cell.total == pytest.approx(10.0)
        assert cell.details == [LoadDetail('RFQ1', 'Proc1 (10 pcs)', 10.0)]
        assert all(week.loads == {} for week in projected[2:])

    def test_input_weeks_untouched(self, weeks, boundary_rfq, resolver):
        """Test projection returns new buckets."""
        project_weekly_load([boundary_rfq], weeks, resolver, 'DIV1')
        assert all(week.loads == {} for week in weeks)

    def test_missing_milestone_contributes_nothing(self, weeks, make_rfq, resolver):
        """Test an RFQ without PIN is ignored."""
        rfq = make_rfq(planning={'EOQ': date(2024, 1, 8)}, lines=[('Proc1', 'Plant1', 10)])
        projected = project_weekly_load([rfq], weeks, resolver, 'DIV1')
        assert all(week.loads == {} for week in projected)

    def test_single_day_window(self, weeks, make_rfq, resolver):
        """Test PIN equal to EOQ on a Monday puts the full load on that week."""
        rfq = make_rfq(
            planning={'PIN': date(2024, 1, 15), 'EOQ': date(2024, 1, 15)},
            lines=[('Proc1', 'Plant1', 6)],
        )
        projected = project_weekly_load([rfq], weeks, resolver, 'DIV1')
        assert projected[2].hours('Plant1-Proc1') == pytest.approx(6.0)

    def test_inverted_window(self, weeks, make_rfq, resolver):
        """Test EOQ before PIN matches no week and does not fail."""
        rfq = make_rfq(
            planning={'PIN': date(2024, 1, 15), 'EOQ': date(2024, 1, 1)},
            lines=[('Proc1', 'Plant1', 6)],
        )
        projected = project_weekly_load([rfq], weeks, resolver, 'DIV1')
        assert all(week.loads == {} for week in projected)

    def test_load_conserved_when_all_weeks_matched(self, weeks, make_rfq, resolver):
        """Test hours sum to qty * load per unit when matched weeks equal the spread."""
        rfq = make_rfq(
            planning={'PIN': date(2024, 1, 2), 'EOQ': date(2024, 1, 16)},
            lines=[('Proc1', 'Plant1', 10)],
        )
        projected = project_weekly_load([rfq], weeks, resolver, 'DIV1')

        assert projected[1].hours('Plant1-Proc1') == pytest.approx(5.0)
        assert projected[2].hours('Plant1-Proc1') == pytest.approx(5.0)
        assert sum(w.hours('Plant1-Proc1') for w in projected) == pytest.approx(10.0)

    def test_horizon_truncates_load(self, make_rfq, resolver):
        """Test weeks outside the horizon are not represented."""
        rfq = make_rfq(
            planning={'PIN': date(2024, 1, 2), 'EOQ': date(2024, 1, 16)},
            lines=[('Proc1', 'Plant1', 10)],
        )
        projected = project_weekly_load(
            [rfq], generate_weeks(2, date(2024, 1, 1)), resolver, 'DIV1'
        )
        assert sum(w.hours('Plant1-Proc1') for w in projected) == pytest.approx(5.0)

    def test_division_filter(self, weeks, make_rfq, resolver):
        """Test lines of another division are excluded."""
        rfq = make_rfq(
            planning={'PIN': date(2024, 1, 8), 'EOQ': date(2024, 1, 8)},
            lines=[('Proc1', 'Plant1', 10), ('Proc1', 'Plant3', 3)],
        )

        div1 = project_weekly_load([rfq], weeks, resolver, 'DIV1')
        div2 = project_weekly_load([rfq], weeks, resolver, 'DIV2')

        assert set(div1[1].loads) == {'Plant1-Proc1'}
        assert set(div2[1].loads) == {'Plant3-Proc1'}
        assert div2[1].hours('Plant3-Proc1') == pytest.approx(6.0)

    def test_unresolved_lines_skipped(self, weeks, make_rfq, resolver):
        """Test unknown plant, unknown process and missing site are skipped."""
        rfq = make_rfq(
            planning={'PIN': date(2024, 1, 8), 'EOQ': date(2024, 1, 8)},
            lines=[
                ('Proc1', 'Nowhere', 10),
                ('Painting', 'Plant1', 10),
                ('Proc1', 'PlantX', 10),
                ('Proc1', 'Plant2', 4),
            ],
        )
        projected = project_weekly_load([rfq], weeks, resolver, 'DIV1')

        assert set(projected[1].loads) == {'Plant2-Proc1'}
        assert projected[1].hours('Plant2-Proc1') == pytest.approx(2.0)

    def test_unconfigured_load_per_unit(self, weeks, make_rfq, resolver):
        """Test a line without load per unit creates a zero-hour cell."""
        rfq = make_rfq(
            planning={'PIN': date(2024, 1, 8), 'EOQ': date(2024, 1, 8)},
            lines=[('Proc2', 'Plant1', 10)],
        )
        projected = project_weekly_load([rfq], weeks, resolver, 'DIV1')

        assert projected[1].loads['Plant1-Proc2'].total == 0
        assert len(projected[1].loads['Plant1-Proc2'].details) == 1

    def test_multiple_rfqs_accumulate(self, weeks, make_rfq, resolver):
        """Test contributions of several RFQs share a cell."""
        planning = {'PIN': date(2024, 1, 8), 'EOQ': date(2024, 1, 8)}
        rfqs = [
            make_rfq('RFQ1', planning, [('Proc1', 'Plant1', 10)]),
            make_rfq('RFQ2', planning, [('Proc1', 'Plant1', 5)]),
        ]
        projected = project_weekly_load(rfqs, weeks, resolver, 'DIV1')

        cell = projected[1].loads['Plant1-Proc1']
        assert cell.total == pytest.approx(15.0)
        assert [d.rfq_reference for d in cell.details] == ['RFQ1', 'RFQ2']

    def test_status_is_not_filtered(self, weeks, make_rfq, resolver):
        """Test the projection uses every RFQ regardless of status."""
        rfq = make_rfq(
            planning={'PIN': date(2024, 1, 8), 'EOQ': date(2024, 1, 8)},
            lines=[('Proc1', 'Plant1', 10)],
            status='CLOSED',
        )
        projected = project_weekly_load([rfq], weeks, resolver, 'DIV1')
        assert projected[1].hours('Plant1-Proc1') == pytest.approx(10.0)


def test_count_unresolved_lines(make_rfq, resolver):
    """Test lines with broken references are counted."""
    rfq = make_rfq(lines=[
        ('Proc1', 'Nowhere', 1),
        ('Proc1', 'PlantX', 1),
        ('Painting', 'Plant1', 1),
        ('Proc1', 'Plant1', 1),
        ('Proc1', 'Plant3', 1),
    ])
    assert count_unresolved_lines([rfq], resolver) == 3
