"""Unit tests for the CSV sink."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import csv
import io

from processor.export import HEADER, iter_csv, write_csv
from processor.models import ResultRow


def row(id_=1, table="<table><tr><td>x</td></tr></table>", **kwargs) -> ResultRow:
    values = {
        "title": "US weekly",
        "category_name": "US Economics Weekly",
        "formatted_date": "03/14/2025 - 09:30",
    }
    values.update(kwargs)
    return ResultRow(id=id_, table_html=table, **values)


class TestIterCsv:

    def test_header_first(self):
        lines = list(iter_csv([]))
        assert lines == ["Node ID,Title,Tag,Publication Date,Table\r\n"]

    def test_one_line_per_row(self):
        lines = list(iter_csv([row(1), row(2)]))
        assert len(lines) == 3
        assert lines[1].startswith("1,US weekly,US Economics Weekly,03/14/2025 - 09:30,")

    def test_fields_with_commas_and_quotes_are_quoted(self):
        lines = list(iter_csv([row(title='Rates, "higher" for longer', table="<td>1,5</td>")]))
        assert lines[1] == '1,"Rates, ""higher"" for longer",US Economics Weekly,03/14/2025 - 09:30,"<td>1,5</td>"\r\n'

    def test_round_trips_through_csv_reader(self):
        rows = [row(10, title="a,b"), row("n-20", table='<table><tr><td>"q"</td></tr></table>')]
        parsed = list(csv.reader(io.StringIO("".join(iter_csv(rows)))))
        assert parsed[0] == list(HEADER)
        assert parsed[1:] == [r.as_list() for r in rows]

    def test_lazy_over_rows(self):
        def rows():
            yield row(1)
            raise RuntimeError("source died")

        lines = iter_csv(rows())
        assert next(lines).startswith("Node ID")
        assert next(lines).startswith("1,")


class TestWriteCsv:

    def test_returns_row_count(self):
        fh = io.StringIO()
        assert write_csv([row(1), row(2), row(3)], fh) == 3
        assert fh.getvalue().count("\r\n") == 4

    def test_empty_input_writes_header_only(self):
        fh = io.StringIO()
        assert write_csv([], fh) == 0
        assert fh.getvalue() == "Node ID,Title,Tag,Publication Date,Table\r\n"

    def test_same_output_as_streaming(self):
        rows = [row(1), row(2, title="x, y")]
        fh = io.StringIO()
        write_csv(rows, fh)
        assert fh.getvalue() == "".join(iter_csv(rows))
