"""
Unit tests for the turn advancement algorithm.

The algorithm only reads its inputs, so roster entries are plain
namespaces rather than database rows.
"""

import itertools
from types import SimpleNamespace

import pytest

from apps.rooms.services import advance_turn, TurnOutcome, EmptyRosterError


def make_roster(*entries):
    """Build a roster from (skip_credits, is_on_leave) pairs."""
    return [
        SimpleNamespace(id=f'm{i}', skip_credits=credits, is_on_leave=on_leave)
        for i, (credits, on_leave) in enumerate(entries)
    ]


def plain_roster(n):
    return make_roster(*[(0, False)] * n)


class TestNormalRotation:

    def test_advances_to_next_member(self):
        """Three members, no skips: turn moves from 0 to 1 without a new cycle."""
        result = advance_turn(roster=plain_roster(3), current_index=0, buyer_debt=0)

        assert result.outcome == TurnOutcome.ROTATED
        assert result.next_index == 1
        assert result.cycle_completed is False
        assert result.cycle_increment == 0
        assert result.debt_decrement == 0

    def test_skip_credit_is_consumed(self):
        """Member 1 holds a skip credit, so member 2 buys next."""
        roster = make_roster((0, False), (1, False), (0, False))

        result = advance_turn(roster=roster, current_index=0, buyer_debt=0)

        assert result.next_index == 2
        assert result.consumed_credit_member_ids == ('m1',)
        assert result.skipped_member_ids == ('m1',)
        assert result.cycle_completed is False

    def test_only_one_credit_consumed_per_pass(self):
        roster = make_roster((0, False), (3, False), (0, False))

        result = advance_turn(roster=roster, current_index=0, buyer_debt=0)

        assert result.consumed_credit_member_ids.count('m1') == 1

    def test_on_leave_member_skipped_without_spending_credit(self):
        roster = make_roster((0, False), (2, True), (0, False))

        result = advance_turn(roster=roster, current_index=0, buyer_debt=0)

        assert result.next_index == 2
        assert result.skipped_member_ids == ('m1',)
        assert result.consumed_credit_member_ids == ()

    def test_last_position_completes_cycle(self):
        result = advance_turn(roster=plain_roster(3), current_index=2, buyer_debt=0)

        assert result.next_index == 0
        assert result.cycle_completed is True

    def test_skipping_past_end_completes_cycle(self):
        roster = make_roster((0, False), (0, False), (1, False))

        result = advance_turn(roster=roster, current_index=1, buyer_debt=0)

        assert result.next_index == 0
        assert result.cycle_completed is True

    def test_single_member_room(self):
        result = advance_turn(roster=plain_roster(1), current_index=0, buyer_debt=0)

        assert result.next_index == 0
        assert result.cycle_completed is True

    def test_out_of_range_index_is_wrapped(self):
        result = advance_turn(roster=plain_roster(3), current_index=4, buyer_debt=0)

        assert result.next_index == 2


class TestDebtPayment:

    def test_debt_remaining_keeps_turn(self):
        result = advance_turn(roster=plain_roster(3), current_index=0, buyer_debt=2)

        assert result.outcome == TurnOutcome.DEBT_CONTINUES
        assert result.next_index == 0
        assert result.debt_decrement == 1
        assert result.cycle_completed is False
        assert result.consumed_credit_member_ids == ()

    def test_debt_paid_off_rotates_past_buyer(self):
        result = advance_turn(roster=plain_roster(3), current_index=0, buyer_debt=1)

        assert result.outcome == TurnOutcome.ROTATED
        assert result.next_index == 1
        assert result.debt_decrement == 1

    def test_debt_paid_off_still_honours_skip_credits(self):
        roster = make_roster((0, False), (1, False), (0, False))

        result = advance_turn(roster=roster, current_index=0, buyer_debt=1)

        assert result.next_index == 2
        assert result.consumed_credit_member_ids == ('m1',)


class TestStarvation:

    def test_everyone_on_leave_terminates(self):
        """All members on leave: one bounded pass, then a candidate anyway."""
        roster = make_roster((0, True), (0, True), (0, True))

        result = advance_turn(roster=roster, current_index=0, buyer_debt=0)

        assert result.next_index == 1
        assert len(result.skipped_member_ids) == 3
        assert result.consumed_credit_member_ids == ()
        assert result.cycle_completed is True

    def test_everyone_credited_spends_one_credit_each(self):
        roster = make_roster((1, False), (1, False), (1, False))

        result = advance_turn(roster=roster, current_index=0, buyer_debt=0)

        assert result.next_index == 1
        assert sorted(result.consumed_credit_member_ids) == ['m0', 'm1', 'm2']

    def test_empty_roster_rejected(self):
        with pytest.raises(EmptyRosterError):
            advance_turn(roster=[], current_index=0, buyer_debt=0)

    @pytest.mark.parametrize('size', [1, 2, 3, 4])
    def test_next_index_always_in_range(self, size):
        """Every mix of leave and credits yields an index inside the roster."""
        states = [(0, False), (1, False), (0, True), (2, True)]
        for entries in itertools.product(states, repeat=size):
            roster = make_roster(*entries)
            for current in range(size):
                result = advance_turn(roster=roster, current_index=current, buyer_debt=0)
                assert 0 <= result.next_index < size
                assert len(result.skipped_member_ids) <= size


class TestCycleCounting:

    def _simulate(self, roster, purchases):
        index, cycles = 0, 0
        credits = {member.id: member.skip_credits for member in roster}
        for _ in range(purchases):
            snapshot = [
                SimpleNamespace(id=m.id, skip_credits=credits[m.id], is_on_leave=m.is_on_leave)
                for m in roster
            ]
            result = advance_turn(roster=snapshot, current_index=index, buyer_debt=0)
            for member_id in result.consumed_credit_member_ids:
                credits[member_id] -= 1
            index = result.next_index
            cycles += result.cycle_increment
        return index, cycles

    def test_one_cycle_per_pass_with_member_on_leave(self):
        """Members 0, 1 and 3 buy in turn; member 2 is away."""
        roster = make_roster((0, False), (0, False), (0, True), (0, False))

        index, cycles = self._simulate(roster, purchases=6)

        assert index == 0
        assert cycles == 2

    def test_one_cycle_per_pass_with_skip_credit(self):
        roster = make_roster((0, False), (1, False), (0, False))

        # 0 -> 2 (1 spends credit), 2 -> 0 (cycle), 0 -> 1, 1 -> 2, 2 -> 0 (cycle)
        index, cycles = self._simulate(roster, purchases=5)

        assert index == 0
        assert cycles == 2
