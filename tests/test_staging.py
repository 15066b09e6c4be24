import pytest

from uniformops.backend import Backend
from uniformops.errors import BackendError, StagingNotFound, StagingNotPending
from uniformops.models import ImportStatus
from uniformops.parsing import parse_orders
from uniformops.staging import StagingStore


class FlakyBackend(Backend):
    """Fails every insert after the first ``ok_inserts`` calls."""

    def __init__(self, engine, ok_inserts):
        super().__init__(engine)
        self.ok_inserts = ok_inserts

    def insert(self, table, rows):
        if self.ok_inserts <= 0:
            raise BackendError("insert", table)
        self.ok_inserts -= 1
        return super().insert(table, rows)


def _orders(n):
    text = "\n".join(f"TRINUM\nAluno {chr(65 + i)}\n1 polo tam 4" for i in range(n))
    return parse_orders(text)


def test_insert_batch_in_chunks(store, backend):
    rows = store.insert_batch(_orders(5))
    assert len(rows) == 5
    assert all(r["status"] == "pending" for r in rows)
    assert rows[0]["original_text"] == "Aluno A\n1 polo tam 4"
    assert rows[0]["parsed_items"] == [{"quantity": 1, "product": "polo", "size": "4"}]
    assert rows[0]["raw_items"] == ["1 polo tam 4"]
    assert rows[0]["phone"] is None
    assert len(backend.select("imported_orders")) == 5


def test_failed_chunk_keeps_earlier_chunks(engine):
    store = StagingStore(FlakyBackend(engine, ok_inserts=1), chunk_size=2)
    with pytest.raises(BackendError):
        store.insert_batch(_orders(5))
    assert len(Backend(engine).select("imported_orders")) == 2


def test_list_pending_skips_reviewed(store):
    rows = store.insert_batch(_orders(3))
    store.set_status(rows[1]["id"], ImportStatus.IGNORED)
    pending = store.list_pending()
    assert [r["id"] for r in pending] == [rows[0]["id"], rows[2]["id"]]


def test_get_missing(store):
    with pytest.raises(StagingNotFound):
        store.get(999)


def test_update_fields(store):
    row = store.insert_batch(_orders(1))[0]
    updated = store.update_fields(row["id"], {"customer_name": "Beatriz", "phone": "98911112222"})
    assert updated["customer_name"] == "Beatriz"
    assert updated["phone"] == "98911112222"


def test_update_rejects_unknown_fields(store):
    row = store.insert_batch(_orders(1))[0]
    with pytest.raises(ValueError):
        store.update_fields(row["id"], {"status": "approved"})


def test_reviewed_rows_are_frozen(store):
    row = store.insert_batch(_orders(1))[0]
    store.set_status(row["id"], ImportStatus.APPROVED)
    with pytest.raises(StagingNotPending) as exc:
        store.update_fields(row["id"], {"customer_name": "X"})
    assert exc.value.status == "approved"
    with pytest.raises(StagingNotPending):
        store.update_fields(row["id"], {})
    with pytest.raises(StagingNotPending):
        store.set_status(row["id"], ImportStatus.IGNORED)


def test_cannot_reset_to_pending(store):
    row = store.insert_batch(_orders(1))[0]
    with pytest.raises(ValueError):
        store.set_status(row["id"], ImportStatus.PENDING)
