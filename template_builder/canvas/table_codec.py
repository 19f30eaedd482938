"""
Table Codec
===========

Converts TableData into the table fragment embedded in exported documents,
and parses raw table markup back into headers and rows.

Header cells carry their semantic metadata as HTML comment markers:

    <!-- {{SPLIT}}##Column Name##:Order_Id:##Column Name## -->
    <!-- ##Column Description##:Unique order number:##Column Description## -->
    <!-- ##Column Value##:Order:##Column Value## -->
     <th ...>Order</th>

Decoding is structural only. Markers are not read back; names and
descriptions come out as positional defaults.
"""

import logging
from html.parser import HTMLParser
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..models.canvas_models import TableColumn, TableData
from ..models.element_config import format_number

logger = logging.getLogger(__name__)

SPLIT_SENTINEL = "{{SPLIT}}"
NAME_MARKER = "##Column Name##"
DESCRIPTION_MARKER = "##Column Description##"
VALUE_MARKER = "##Column Value##"

CELL_STYLE = "border: 1px solid #ccc; padding: 8px;"

_ROW_INDENT = " " * 20
_CELL_INDENT = " " * 24


def normalize_name(name: str) -> str:
    """
    Trim a semantic name and replace its first space with an underscore.

    Only the first space is replaced. Downstream consumers match on this
    exact form, so it must not be widened to all spaces.
    """
    return name.strip().replace(" ", "_", 1)


def comment_safe(text: str) -> str:
    """Keep a value from terminating the HTML comment it is embedded in."""
    # Differs from the legacy marker bytes only for payloads containing "-->"
    return text.replace("-->", "--&gt;")


def column_width(header_count: int) -> str:
    if header_count > 0:
        return f"{format_number(100 / header_count)}%"
    return "auto"


def encode_table_html(table: Optional[TableData]) -> str:
    """
    Generate the inner HTML of a <table> tag from structured table data.

    Args:
        table: Table data; None is treated as an empty table

    Returns:
        Fragment starting with a newline, with a thead when there are
        headers and a tbody when there are rows
    """
    table = table or TableData()
    width = column_width(len(table.headers))
    parts: List[str] = ["\n"]

    if table.headers:
        parts.append(f"{' ' * 16}<thead>\n{_ROW_INDENT}<tr>\n")
        for column in table.headers:
            if column.name:
                parts.append(
                    f"{_CELL_INDENT}<!-- {SPLIT_SENTINEL}{NAME_MARKER}:"
                    f"{comment_safe(normalize_name(column.name))}:{NAME_MARKER} -->\n"
                )
            if column.description:
                parts.append(
                    f"{_CELL_INDENT}<!-- {DESCRIPTION_MARKER}:"
                    f"{comment_safe(column.description)}:{DESCRIPTION_MARKER} -->\n"
                )
            parts.append(
                f"{_CELL_INDENT}<!-- {VALUE_MARKER}:{comment_safe(column.content)}:{VALUE_MARKER} -->\n"
                f' <th style="{CELL_STYLE} width: {width};">{column.content}</th>\n'
            )
        parts.append(f"{_ROW_INDENT}</tr>\n{' ' * 16}</thead>\n")

    if table.body_rows:
        parts.append(f"{' ' * 16}<tbody>\n")
        for row in table.body_rows:
            parts.append(f"{_ROW_INDENT}<tr>\n")
            for cell in row:
                parts.append(f'{_CELL_INDENT}<td style="{CELL_STYLE} width: {width};">{cell}</td>\n')
            parts.append(f"{_ROW_INDENT}</tr>\n")
        parts.append(f"{' ' * 16}</tbody>\n")

    return "".join(parts)


class ParsedTable(BaseModel):
    """Headers and rows recovered from raw markup; rows may be ragged."""
    model_config = ConfigDict(populate_by_name=True)

    headers: List[TableColumn] = Field(default_factory=list)
    body_rows: List[List[str]] = Field(default_factory=list, alias="bodyRows")

    def to_table_data(self, filler: str = "") -> TableData:
        """Pad or truncate every row to the header count."""
        width = len(self.headers)
        rows = [(row + [filler] * width)[:width] for row in self.body_rows]
        return TableData(headers=list(self.headers), body_rows=rows if width else [])


_SECTIONS = ("thead", "tbody", "tfoot")


class _TableCellParser(HTMLParser):
    """
    Collects the inner markup of the first header row and the rows of the
    first body section of a <table>.

    Rows outside any section belong to an implicit tbody. Tables nested
    inside a cell are kept as cell content.
    """

    def __init__(self):
        super().__init__(convert_charrefs=False)
        self.header_cells: List[str] = []
        self.body_rows: List[List[str]] = []
        self._section: Optional[str] = None
        self._thead_count = 0
        self._tbody_count = 0
        self._header_row_done = False
        self._row: Optional[List[str]] = None
        self._cell: Optional[List[str]] = None
        self._nested_tables = 0
        self._table_depth = 0

    # --- bookkeeping ---

    def _finish_cell(self):
        if self._cell is not None and self._row is not None:
            self._row.append("".join(self._cell))
        self._cell = None

    def _finish_row(self):
        self._finish_cell()
        if self._row is None:
            return
        if self._section == "thead" and self._thead_count == 1 and not self._header_row_done:
            self.header_cells = self._row
            self._header_row_done = True
        elif self._section == "tbody" and self._tbody_count == 1:
            self.body_rows.append(self._row)
        self._row = None

    def _finish_section(self):
        self._finish_row()
        self._section = None

    def _start_section(self, tag: str):
        self._finish_section()
        self._section = tag
        if tag == "thead":
            self._thead_count += 1
        elif tag == "tbody":
            self._tbody_count += 1

    # --- HTMLParser hooks ---

    def handle_starttag(self, tag, attrs):
        if self._cell is not None:
            if self._nested_tables == 0 and tag in ("td", "th"):
                self._finish_cell()
                self._cell = []
                return
            if self._nested_tables == 0 and tag == "tr":
                self._finish_row()
                self._row = []
                return
            if self._nested_tables == 0 and tag in _SECTIONS:
                self._start_section(tag)
                return
            if tag == "table":
                self._nested_tables += 1
            self._cell.append(self.get_starttag_text() or "")
            return

        if tag == "table":
            self._table_depth += 1
            return
        if self._table_depth != 1:
            return
        if tag in _SECTIONS:
            self._start_section(tag)
        elif tag == "tr":
            self._finish_row()
            if self._section is None:
                # Stray rows open an implicit body section
                self._start_section("tbody")
            self._row = []
        elif tag in ("td", "th") and self._row is not None:
            self._cell = []

    def handle_startendtag(self, tag, attrs):
        if self._cell is not None:
            self._cell.append(self.get_starttag_text() or "")

    def handle_endtag(self, tag):
        if self._cell is not None:
            if tag == "table" and self._nested_tables > 0:
                self._nested_tables -= 1
            elif self._nested_tables == 0 and tag in ("td", "th"):
                self._finish_cell()
                return
            elif self._nested_tables == 0 and tag == "tr":
                self._finish_row()
                return
            elif self._nested_tables == 0 and tag in _SECTIONS + ("table",):
                self._finish_section()
                if tag == "table":
                    self._table_depth -= 1
                return
            self._cell.append(f"</{tag}>")
            return

        if tag == "table":
            if self._table_depth == 1:
                self._finish_section()
            self._table_depth = max(0, self._table_depth - 1)
        elif self._table_depth == 1:
            if tag == "tr":
                self._finish_row()
            elif tag in _SECTIONS:
                self._finish_section()

    def handle_data(self, data):
        if self._cell is not None:
            self._cell.append(data)

    def handle_entityref(self, name):
        if self._cell is not None:
            self._cell.append(f"&{name};")

    def handle_charref(self, name):
        if self._cell is not None:
            self._cell.append(f"&#{name};")

    def handle_comment(self, data):
        if self._cell is not None:
            self._cell.append(f"<!--{data}-->")

    def close(self):
        super().close()
        self._finish_section()


def parse_table_html(html: str) -> ParsedTable:
    """
    Parse the inner HTML of a <table> tag into headers and rows.

    Markers embedded by encode_table_html are ignored. Each header gets
    ``Column N`` / ``Description for column N`` as name and description.
    Markup without table structure yields an empty table.

    Args:
        html: A whole <table> or just its inner HTML (thead/tbody/tr/th/td)

    Returns:
        ParsedTable with header contents and body cell contents
    """
    parser = _TableCellParser()
    markup = html or ""
    if not markup.lstrip().lower().startswith("<table"):
        markup = f"<table>{markup}</table>"
    parser.feed(markup)
    parser.close()

    headers = [
        TableColumn(
            content=content,
            name=f"Column {index + 1}",
            description=f"Description for column {index + 1}",
        )
        for index, content in enumerate(parser.header_cells)
    ]
    logger.debug(
        f"[TABLE-CODEC] Parsed {len(headers)} headers, {len(parser.body_rows)} rows"
    )
    return ParsedTable(headers=headers, body_rows=parser.body_rows)
