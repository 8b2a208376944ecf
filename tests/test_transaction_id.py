import re
import time

from src.models.transaction import TransactionStatus, generate_transaction_id

TRANSACTION_ID_RE = re.compile(r"^TR(\d{13})([0-9A-F]{10})$")


def test_transaction_id_format() -> None:
    before = int(time.time() * 1000)
    tran_id = generate_transaction_id()
    after = int(time.time() * 1000)

    match = TRANSACTION_ID_RE.match(tran_id)
    assert match is not None
    assert before <= int(match.group(1)) <= after


def test_transaction_ids_are_unique() -> None:
    ids = {generate_transaction_id() for _ in range(1000)}
    assert len(ids) == 1000


def test_transaction_ids_sort_by_time() -> None:
    first = generate_transaction_id()
    time.sleep(0.002)
    second = generate_transaction_id()
    assert first[:15] < second[:15]


def test_only_initiated_is_non_terminal() -> None:
    assert not TransactionStatus.INITIATED.is_terminal
    assert TransactionStatus.COMPLETED.is_terminal
    assert TransactionStatus.FAILED.is_terminal
    assert TransactionStatus.CANCELLED.is_terminal
