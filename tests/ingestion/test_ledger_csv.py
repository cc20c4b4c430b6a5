import io
from collections import Counter
from datetime import date

from ingestion.ledger_csv import HEADER, export, ingest, ingest_file, sanitize
from models.transaction import Expense, Income, Transfer, TransactionType, build_transaction

HEADER_LINE = ",".join(HEADER)


def fixed_ids():
    counter = iter(range(1, 1000))
    return lambda: f"new-{next(counter)}"


def today():
    return date(2025, 3, 15)


def sample_transactions():
    return [
        build_transaction(
            TransactionType.EXPENSE,
            id="e1",
            transaction_date=date(2025, 3, 2),
            amount_cents=45000,
            account_from_id="visa",
            category_id="mercado",
            payment_method="VISA",
            note="Mercado, semana 1",
        ),
        build_transaction(
            TransactionType.INCOME,
            id="i1",
            transaction_date=date(2025, 3, 1),
            amount_cents=5000000,
            account_to_id="empresa",
            category_id="trabajos",
        ),
        build_transaction(
            TransactionType.TRANSFER,
            id="t1",
            transaction_date=date(2025, 2, 28),
            amount_cents=120000,
            account_from_id="ahorros",
            account_to_id="visa",
        ),
    ]


def key(t):
    return (
        t.type,
        t.transaction_date,
        t.amount_cents,
        t.account_from_id,
        t.account_to_id,
        t.category_id,
        t.payment_method,
    )


class TestExport:
    """Tests for export function."""

    def test_writes_header_and_rows(self):
        out = io.StringIO()

        count = export(sample_transactions(), out)

        lines = out.getvalue().splitlines()
        assert count == 3
        assert lines[0] == "id,type,date,amountCents,accountFromId,accountToId,categoryId,paymentMethod,note"
        assert lines[1] == "e1,GASTO,2025-03-02,45000,visa,,mercado,VISA,Mercado; semana 1"
        assert lines[2] == "i1,INGRESO,2025-03-01,5000000,,empresa,trabajos,,"
        assert lines[3] == "t1,TRANSFERENCIA,2025-02-28,120000,ahorros,visa,,,"

    def test_every_row_has_nine_fields(self):
        out = io.StringIO()

        export(sample_transactions(), out)

        for line in out.getvalue().splitlines():
            assert len(line.split(",")) == 9

    def test_empty_log_writes_header_only(self):
        out = io.StringIO()

        assert export([], out) == 0
        assert out.getvalue() == HEADER_LINE + "\n"


class TestSanitize:
    """Tests for sanitize function."""

    def test_replaces_commas_and_line_breaks(self):
        assert sanitize("a,b\nc\r\nd") == "a;b c d"

    def test_none_is_empty(self):
        assert sanitize(None) == ""


class TestIngest:
    """Tests for ingest function."""

    def test_round_trip_preserves_fields(self):
        out = io.StringIO()
        export(sample_transactions(), out)

        imported = ingest(io.StringIO(out.getvalue()), new_id=fixed_ids(), today=today)

        assert Counter(map(key, imported)) == Counter(map(key, sample_transactions()))

    def test_variants_are_restored(self):
        out = io.StringIO()
        export(sample_transactions(), out)

        imported = ingest(io.StringIO(out.getvalue()))

        assert [type(t) for t in imported] == [Expense, Income, Transfer]
        assert [t.id for t in imported] == ["e1", "i1", "t1"]

    def test_empty_input(self):
        assert ingest(io.StringIO("")) == []

    def test_header_only(self):
        assert ingest(io.StringIO(HEADER_LINE + "\n")) == []

    def test_blank_lines_and_carriage_returns_ignored(self):
        text = HEADER_LINE + "\r\n\r\nx1,GASTO,2025-01-05,300,nequi,,,,\r\n\n"

        imported = ingest(io.StringIO(text))

        assert len(imported) == 1
        assert imported[0].account_from_id == "nequi"

    def test_missing_id_is_generated(self):
        text = HEADER_LINE + "\n,INGRESO,2025-01-05,300,,nequi,,,\n"

        imported = ingest(io.StringIO(text), new_id=fixed_ids())

        assert imported[0].id == "new-1"

    def test_unparseable_amount_becomes_zero(self):
        text = HEADER_LINE + "\nx1,GASTO,2025-01-05,lots,nequi,,,,\nx2,GASTO,2025-01-05,,nequi,,,,\n"

        imported = ingest(io.StringIO(text))

        assert [t.amount_cents for t in imported] == [0, 0]

    def test_empty_type_defaults_to_expense(self):
        text = HEADER_LINE + "\nx1,,2025-01-05,300,nequi,,,,\n"

        imported = ingest(io.StringIO(text))

        assert imported[0].type is TransactionType.EXPENSE

    def test_unknown_type_is_skipped(self):
        text = HEADER_LINE + "\nx1,REFUND,2025-01-05,300,nequi,,,,\nx2,GASTO,2025-01-05,300,nequi,,,,\n"

        imported = ingest(io.StringIO(text))

        assert [t.id for t in imported] == ["x2"]

    def test_short_row_is_padded(self):
        text = HEADER_LINE + "\nx1,INGRESO,2025-01-05,300\n"

        imported = ingest(io.StringIO(text))

        assert imported[0].amount_cents == 300
        assert imported[0].account_to_id is None
        assert imported[0].note is None

    def test_extra_fields_are_dropped(self):
        text = HEADER_LINE + "\nx1,GASTO,2025-01-05,300,nequi,,,,lunch,with friends\n"

        imported = ingest(io.StringIO(text))

        assert imported[0].note == "lunch"

    def test_missing_date_is_today(self):
        text = HEADER_LINE + "\nx1,GASTO,,300,nequi,,,,\n"

        imported = ingest(io.StringIO(text), today=today)

        assert imported[0].transaction_date == date(2025, 3, 15)

    def test_non_iso_date_is_parsed(self):
        text = HEADER_LINE + "\nx1,GASTO,2025/01/05,300,nequi,,,,\n"

        imported = ingest(io.StringIO(text), today=today)

        assert imported[0].transaction_date == date(2025, 1, 5)

    def test_unreadable_date_is_today(self):
        text = HEADER_LINE + "\nx1,GASTO,someday,300,nequi,,,,\n"

        imported = ingest(io.StringIO(text), today=today)

        assert imported[0].transaction_date == date(2025, 3, 15)

    def test_quotes_are_not_special(self):
        text = HEADER_LINE + '\nx1,GASTO,2025-01-05,300,nequi,,,,"quoted\n'

        imported = ingest(io.StringIO(text))

        assert imported[0].note == '"quoted'

    def test_fields_the_variant_does_not_carry_are_dropped(self):
        text = HEADER_LINE + "\nx1,TRANSFERENCIA,2025-01-05,300,nequi,visa,mercado,VISA,\n"

        transfer = ingest(io.StringIO(text))[0]

        assert transfer.category_id is None
        assert transfer.payment_method is None


class TestIngestFile:
    """Tests for ingest_file function."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "export.csv"
        path.write_text(HEADER_LINE + "\nx1,GASTO,2025-01-05,300,nequi,,,,Piña\n", encoding="utf-8")

        [transaction] = ingest_file(path, new_id=fixed_ids(), today=today)

        assert transaction.id == "x1"
        assert transaction.note == "Piña"

    def test_invalid_utf8_byte_is_replaced(self, tmp_path):
        """A Latin-1 byte in one note does not abort the import."""
        path = tmp_path / "latin1.csv"
        path.write_bytes(
            HEADER_LINE.encode("utf-8")
            + b"\nx1,GASTO,2025-01-05,300,nequi,,,,Pi\xf1a\n"
            + b"x2,INGRESO,2025-01-06,700,,nequi,,,\n"
        )

        transactions = ingest_file(path, new_id=fixed_ids(), today=today)

        assert [t.id for t in transactions] == ["x1", "x2"]
        assert transactions[0].note == "Pi\ufffda"
        assert transactions[0].amount_cents == 300
