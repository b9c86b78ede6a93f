from moving_person_detector.utils.mailbox import Mailbox


def test_latest_value_wins():
    box = Mailbox()
    box.put("scan-1")
    box.put("scan-2")

    assert box.overwritten == 1
    assert box.take() == "scan-2"
    assert box.take() is None
    assert not box.pending


def test_false_is_a_value():
    box = Mailbox()
    box.put(False)

    assert box.pending
    assert box.take() is False
