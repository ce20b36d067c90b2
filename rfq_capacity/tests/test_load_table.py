"""
Tests for the load table flattener and sorting.
"""

from datetime import date

import pytest

from rfq_capacity.services.capacity_planning.load_table import (
    LoadTableRow,
    SortKey,
    corporate_step_hours,
    flatten_load_table,
    parse_sort_spec,
    sort_load_table,
)
from rfq_capacity.services.capacity_planning.policy import (
    CORPORATE_STEPS,
    banded_hours,
)

PLANNING = {
    'BLU': date(2024, 1, 1),
    'PIN': date(2024, 1, 8),
    'EOQ': date(2024, 1, 15),
    'GRE': date(2024, 1, 22),
}


@pytest.fixture
def active_rfq(make_rfq):
    return make_rfq(
        planning=PLANNING,
        lines=[
            ('Proc1', 'Plant1', 60),
            ('Proc1', 'Plant3', 40),
            ('Proc1', 'Nowhere', 5),
        ],
        total_qty=100,
        proposal_leader='Alice',
    )


class TestBandedHours:
    """Tests for quantity-banded corporate hours."""

    @pytest.mark.parametrize('quantity,hours', [
        (0, 20),
        (1, 16),
        (10, 16),
        (11, 32),
        (50, 32),
        (51, 50),
        (250, 50),
        (251, 80),
        (999, 80),
        (1000, 160),
        (50000, 160),
    ])
    def test_bands(self, quantity, hours):
        """Test band boundaries are inclusive upper bounds."""
        assert banded_hours(quantity) == hours

    def test_negative_quantity(self):
        """Test a negative quantity is rejected."""
        with pytest.raises(ValueError):
            banded_hours(-1)


class TestCorporateStepHours:
    """Tests for corporate step hours."""

    def test_review_per_unit(self):
        """Test the review step charges half an hour per unit."""
        assert corporate_step_hours(CORPORATE_STEPS[0], 100) == (50.0, 0.5)

    def test_review_zero_quantity(self):
        """Test the review step charges a flat amount for zero units."""
        assert corporate_step_hours(CORPORATE_STEPS[0], 0) == (20.0, 20.0)

    def test_banded_step(self):
        """Test banded steps spread band hours over the quantity."""
        assert corporate_step_hours(CORPORATE_STEPS[1], 100) == (50.0, 0.5)
        assert corporate_step_hours(CORPORATE_STEPS[2], 0) == (20.0, 20.0)


class TestFlattenLoadTable:
    """Tests for flatten_load_table."""

    def test_corporate_rows_first(self, active_rfq, resolver):
        """Test three corporate rows precede the worksharing rows."""
        rows = flatten_load_table([active_rfq], resolver)

        assert [r.planning_step for r in rows] == [
            'CBOM/SPH', 'COSTING', 'PRICING', 'Proc1', 'Proc1'
        ]
        assert all(r.is_corporate for r in rows[:3])
        assert not any(r.is_corporate for r in rows[3:])

    def test_corporate_rows(self, active_rfq, resolver):
        """Test corporate rows are charged to the leader's division."""
        cbom, costing, pricing = flatten_load_table([active_rfq], resolver)[:3]

        for row in (cbom, costing, pricing):
            assert row.plant == 'CORPORATE DIV1'
            assert row.division == 'DIV1'
            assert row.qty_parts == 100

        assert (cbom.hours, cbom.load_per_unit) == (50.0, 0.5)
        assert (cbom.start_date, cbom.end_date) == (PLANNING['BLU'], PLANNING['PIN'])
        assert (costing.hours, costing.load_per_unit) == (50.0, 0.5)
        assert (costing.start_date, costing.end_date) == (PLANNING['PIN'], PLANNING['EOQ'])
        assert pricing.hours == 50.0
        assert (pricing.start_date, pricing.end_date) == (PLANNING['EOQ'], PLANNING['GRE'])

    def test_worksharing_rows(self, active_rfq, resolver):
        """Test worksharing rows carry their own division and hours."""
        plant1, plant3 = flatten_load_table([active_rfq], resolver)[3:]

        assert plant1 == LoadTableRow(
            reference='RFQ1',
            planning_step='Proc1',
            plant='Plant1',
            qty_parts=60,
            load_per_unit=1.0,
            hours=60.0,
            start_date=PLANNING['PIN'],
            end_date=PLANNING['EOQ'],
            division='DIV1',
        )
        assert plant3.division == 'DIV2'
        assert plant3.hours == 80.0

    def test_status_filter(self, make_rfq, resolver):
        """Test only RFQs with the requested status are flattened."""
        rfqs = [
            make_rfq('RFQ1', PLANNING, status='PROPOSAL'),
            make_rfq('RFQ2', PLANNING, status='NEGOTIATION'),
        ]

        assert {r.reference for r in flatten_load_table(rfqs, resolver)} == {'RFQ1'}
        assert {
            r.reference for r in flatten_load_table(rfqs, resolver, 'NEGOTIATION')
        } == {'RFQ2'}

    def test_unknown_leader(self, make_rfq, resolver):
        """Test corporate rows fall back to the UNKNOWN division."""
        rows = flatten_load_table([make_rfq(planning=PLANNING)], resolver)

        assert len(rows) == 3
        assert {r.plant for r in rows} == {'CORPORATE UNKNOWN'}
        assert {r.division for r in rows} == {'UNKNOWN'}

    def test_zero_quantity(self, make_rfq, resolver):
        """Test zero quantity RFQs still carry corporate hours."""
        rows = flatten_load_table([make_rfq(planning=PLANNING)], resolver)
        assert [r.hours for r in rows] == [20.0, 20.0, 20.0]

    def test_missing_dates(self, make_rfq, resolver):
        """Test unset milestones leave dates empty."""
        rows = flatten_load_table([make_rfq(lines=[('Proc1', 'Plant1', 1)])], resolver)
        assert all(r.start_date is None and r.end_date is None for r in rows)


class TestSorting:
    """Tests for load table sorting."""

    @pytest.fixture
    def rows(self):
        def row(reference, plant, hours, start=None):
            return LoadTableRow(reference, 'Proc1', plant, 1, 1.0, hours, start, None)

        return [
            row('RFQ1', 'Plant2', 10.0, date(2024, 1, 8)),
            row('RFQ2', 'Plant1', 30.0),
            row('RFQ3', 'Plant1', 20.0, date(2024, 1, 1)),
            row('RFQ4', 'Plant2', 10.0, date(2024, 1, 15)),
        ]

    def test_numeric_descending(self, rows):
        """Test numeric columns sort by value."""
        ordered = sort_load_table(rows, [SortKey('hours', descending=True)])
        assert [r.reference for r in ordered] == ['RFQ2', 'RFQ3', 'RFQ1', 'RFQ4']

    def test_stable_ties(self, rows):
        """Test equal keys keep their original order."""
        ordered = sort_load_table(rows, [SortKey('hours')])
        assert [r.reference for r in ordered] == ['RFQ1', 'RFQ4', 'RFQ3', 'RFQ2']

    def test_multi_key(self, rows):
        """Test the first key is primary."""
        ordered = sort_load_table(rows, [SortKey('plant'), SortKey('hours', descending=True)])
        assert [r.reference for r in ordered] == ['RFQ2', 'RFQ3', 'RFQ1', 'RFQ4']

    def test_dates_with_missing_values(self, rows):
        """Test missing dates sort first."""
        ordered = sort_load_table(rows, [SortKey('start_date')])
        assert [r.reference for r in ordered] == ['RFQ2', 'RFQ3', 'RFQ1', 'RFQ4']

    def test_input_untouched(self, rows):
        """Test sorting returns a new list."""
        original = list(rows)
        sort_load_table(rows, [SortKey('hours', descending=True)])
        assert rows == original

    def test_unknown_column(self):
        """Test sort keys validate their column."""
        with pytest.raises(ValueError):
            SortKey('colour')


class TestParseSortSpec:
    """Tests for parse_sort_spec."""

    def test_parse(self):
        """Test directions default to ascending."""
        assert parse_sort_spec('hours:desc, reference') == [
            SortKey('hours', descending=True),
            SortKey('reference'),
        ]

    def test_empty(self):
        """Test empty specs give no keys."""
        assert parse_sort_spec(None) == []
        assert parse_sort_spec('') == []

    def test_bad_direction(self):
        """Test an unknown direction is rejected."""
        with pytest.raises(ValueError):
            parse_sort_spec('hours:sideways')
