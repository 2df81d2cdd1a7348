from __future__ import annotations

import pytest

from expense_client.services.notifications import Notifier


def test_subscribers_receive_notifications():
    received = []
    notifier = Notifier()
    notifier.subscribe(received.append)

    notifier.success("Expense created successfully")
    notifier.error("Category not found")

    assert [(n.title, n.variant) for n in received] == [("Success", "default"), ("Error", "destructive")]
    assert notifier.history == received


@pytest.mark.parametrize("size", [0, 1, 3])
def test_history_is_bounded(size):
    notifier = Notifier(history_size=size)
    for i in range(5):
        notifier.publish("Info", str(i))
    assert [n.description for n in notifier.history] == [str(i) for i in range(5 - size, 5)]
