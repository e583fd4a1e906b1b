import csv
import io

from models.keyword_models import KeywordRecord
from models.table_models import TableViewState
from services.csv_export import EXPORT_HEADER, export_csv
from services.table_view import apply_table_view


def test_header_row():
    text = export_csv([])
    assert text.splitlines() == [
        "Keyword,Classification,Intent Score,Est. Volume,Competition,Recommendation,Reasoning"
    ]


def test_row_layout_and_quoted_reasoning():
    record = KeywordRecord(
        term="wireless earbuds",
        classification="Attack",
        intent_score=9,
        competition="Low",
        search_volume_est=12000,
        is_organic=True,
        is_sponsored=True,
        asin_overlap=3,
        recommendation="PPC-Exact",
        reasoning="High intent",
    )
    lines = export_csv([record]).splitlines()
    assert lines[1] == 'wireless earbuds,Attack,9,12000,Low,PPC-Exact,"High intent"'


def test_reasoning_with_quotes_and_commas_is_escaped(make_record):
    record = make_record(
        term="earbuds, kids",
        classification="Support",
        intent_score=6.5,
        reasoning='Says "safe", often',
    )
    text = export_csv([record])
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[1] == ["earbuds, kids", "Support", "6.5", "0", "Medium", "Ignore", 'Says "safe", often']


def test_export_follows_filtered_view(sample_records):
    view = TableViewState(filter_text="earbud", sort_field="term", sort_direction="asc")
    visible = apply_table_view(sample_records, view)

    rows = list(csv.reader(io.StringIO(export_csv(visible))))

    assert rows[0] == EXPORT_HEADER
    assert len(rows) - 1 == len(visible) == 4
    assert len(rows) - 1 != len(sample_records)
    assert [r[0] for r in rows[1:]] == [r.term for r in visible]
