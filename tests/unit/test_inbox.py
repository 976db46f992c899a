from datetime import date

import pytest

from rollover.core.models import COMPLETED
from rollover.inbox import InboxDueSweep
from rollover.migrate import TaskMigrator

TODAY = date(2025, 7, 10)


@pytest.fixture(autouse=True)
def _isolated(tmp_rollover_dir):
    return tmp_rollover_dir


@pytest.fixture
def lists(store):
    return store.add_list("Inbox"), store.add_list("[Daily] July 10, 2025")


def _sweep(store, inbox, today_list):
    return InboxDueSweep(store, TaskMigrator(store)).sweep(inbox.id, today_list.id, TODAY)


def test_moves_non_recurring_due_today(store, lists):
    inbox, today = lists
    store.add_task(inbox.id, "Pay rent", due="2025-07-10T00:00:00.000Z")
    store.add_task(inbox.id, "Water plants", due="2025-07-10T00:00:00.000Z", recurrence="RRULE:FREQ=DAILY")

    moved = _sweep(store, inbox, today)

    assert moved == 1
    assert store.titles(today.id) == ["Pay rent"]
    assert store.titles(inbox.id) == ["Water plants"]


def test_date_only_matching(store, lists):
    inbox, today = lists
    store.add_task(inbox.id, "late", due="2025-07-10T23:59:00Z")
    store.add_task(inbox.id, "early", due="2025-07-10T00:00:00Z")

    assert _sweep(store, inbox, today) == 2
    assert sorted(store.titles(today.id)) == ["early", "late"]


def test_skips_other_days_and_undated(store, lists):
    inbox, today = lists
    store.add_task(inbox.id, "yesterday", due="2025-07-09T00:00:00.000Z")
    store.add_task(inbox.id, "tomorrow", due="2025-07-11T00:00:00.000Z")
    store.add_task(inbox.id, "whenever")

    assert _sweep(store, inbox, today) == 0
    assert store.titles(today.id) == []


@pytest.mark.parametrize("due", ["2025-07-10T00:00:00.000Z", "2025-07-09T00:00:00.000Z", None])
def test_recurring_never_moves(store, lists, due):
    inbox, today = lists
    store.add_task(inbox.id, "standup", due=due, recurrence="RRULE:FREQ=WEEKLY;BYDAY=MO")

    assert _sweep(store, inbox, today) == 0
    assert store.titles(inbox.id) == ["standup"]


def test_completed_due_today_stays_in_inbox(store, lists):
    inbox, today = lists
    store.add_task(inbox.id, "done", due="2025-07-10T00:00:00.000Z", status=COMPLETED)

    assert _sweep(store, inbox, today) == 0
    assert store.titles(inbox.id) == ["done"]


def test_no_rollover_counter_on_due_move(store, lists):
    inbox, today = lists
    store.add_task(inbox.id, "Pay rent", notes="landlord", due="2025-07-10T00:00:00.000Z")

    _sweep(store, inbox, today)

    assert store.tasks[today.id][0].notes == "landlord"


def test_second_sweep_is_noop(store, lists):
    inbox, today = lists
    store.add_task(inbox.id, "Pay rent", due="2025-07-10T00:00:00.000Z")

    assert _sweep(store, inbox, today) == 1
    assert _sweep(store, inbox, today) == 0
    assert store.titles(today.id) == ["Pay rent"]
