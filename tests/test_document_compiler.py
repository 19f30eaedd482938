"""
Document compiler tests: HTML output, JSON descriptors and column extraction.
"""

import json

from template_builder.canvas.css import css_property, style_string
from template_builder.canvas.table_codec import encode_table_html
from template_builder.models.canvas_models import CanvasElement, ElementType, Point, TableColumn, TableData
from template_builder.models.export_models import VALUE_PLACEHOLDER
from template_builder.services.document_compiler import (
    COLUMN_CONTENT_TEMPLATE,
    HTML_FOOTER,
    HTML_HEADER,
    JSON_FOOTER,
    DocumentCompiler,
    extract_columns,
)


def paragraph(**fields) -> CanvasElement:
    data = {
        "id": "element-p",
        "type": ElementType.PARAGRAPH,
        "content": "Hello",
        "name": "Customer Name",
        "description": "",
        "styles": {"position": "absolute", "left": "10px", "top": "20px", "minWidth": "50px"},
    }
    data.update(fields)
    return CanvasElement(**data)


# =============================================================================
# Style serialization
# =============================================================================


class TestStyles:

    def test_kebab_case(self):
        assert css_property("backgroundColor") == "background-color"
        assert css_property("borderTopLeftRadius") == "border-top-left-radius"
        assert css_property("color") == "color"

    def test_render_hints_excluded(self):
        styles = {"left": "0px", "minWidth": "50px", "minHeight": "30px", "fontSize": "16px"}

        assert style_string(styles) == "left: 0px; font-size: 16px;"


# =============================================================================
# HTML document
# =============================================================================


class TestHtml:

    def test_empty_canvas(self):
        compiled = DocumentCompiler().compile([])

        assert compiled.html == HTML_HEADER + HTML_FOOTER
        assert compiled.document.elements == []

    def test_paragraph_block(self):
        compiled = DocumentCompiler().compile([paragraph()])

        expected = (
            "        <!-- Element Name: Customer_Name -->\n"
            '        <p style="position: absolute; left: 10px; top: 20px;">Hello</p>\n'
            "\n"
        )
        assert compiled.html == HTML_HEADER + expected + HTML_FOOTER

    def test_description_comment(self):
        html, _ = DocumentCompiler().compile_element(paragraph(description="Shown on top"))

        assert "        <!-- Description: Shown on top -->\n" in html

    def test_comment_terminator_neutralized(self):
        html, _ = DocumentCompiler().compile_element(paragraph(description="a --> b"))

        assert "<!-- Description: a --&gt; b -->" in html

    def test_attribute_values_escaped(self):
        element = paragraph(styles={"fontFamily": '"Inter", sans-serif'})
        html, _ = DocumentCompiler().compile_element(element)

        assert 'style="font-family: &quot;Inter&quot;, sans-serif;"' in html

    def test_content_is_raw_markup(self):
        html, _ = DocumentCompiler().compile_element(paragraph(content="<b>bold</b>"))

        assert "><b>bold</b></p>" in html

    def test_image_and_rules(self):
        image = CanvasElement(id="i", type=ElementType.IMAGE,
                              styles={"width": "100px", "src": "https://x.test/a.png?w=1&h=2"})
        hr = CanvasElement(id="h", type=ElementType.HORIZONTAL_RULE, styles={"height": "2px"})
        vline = CanvasElement(id="v", type=ElementType.VERTICAL_RULE, styles={"width": "2px"})
        compiler = DocumentCompiler()

        image_html, _ = compiler.compile_element(image)
        assert image_html == (
            '        <img src="https://x.test/a.png?w=1&amp;h=2" alt="Generated Image" '
            'style="width: 100px; src: https://x.test/a.png?w=1&amp;h=2;">\n\n'
        )
        assert compiler.compile_element(hr)[0] == '        <hr style="height: 2px;">\n\n'
        assert compiler.compile_element(vline)[0] == '        <div style="width: 2px;"></div>\n\n'

    def test_table_wraps_encoded_fragment(self, two_column_table):
        table = CanvasElement(id="t", type=ElementType.TABLE, styles={"width": "100%"},
                              table_data=two_column_table)
        html, _ = DocumentCompiler().compile_element(table)

        assert html == (
            f'        <table style="width: 100%;">{encode_table_html(two_column_table)}</table>\n\n'
        )

    def test_order_preserved(self):
        first = paragraph(id="a", content="First", name="")
        second = paragraph(id="b", content="Second", name="")
        html = DocumentCompiler().compile([first, second]).html

        assert html.index("First") < html.index("Second")


# =============================================================================
# JSON document
# =============================================================================


class TestJson:

    def test_text_element_descriptor(self):
        compiled = DocumentCompiler().compile([paragraph()], name="Invoice", description="Monthly")
        document = json.loads(compiled.json_text)

        assert document["header"] == HTML_HEADER
        assert document["footer"] == JSON_FOOTER
        assert document["name"] == "Invoice"
        assert document["description"] == "Monthly"

        entry = document["elements"][0]
        assert list(entry) == ["name", "type", "content", "value"]
        assert entry["name"] == "Customer_Name"
        assert entry["type"] == "p"
        assert entry["value"] == "Hello"
        assert entry["content"] == (
            f'        <p style="position: absolute; left: 10px; top: 20px;">{VALUE_PLACEHOLDER}</p>\n'
        )

    def test_unnamed_element_omits_metadata(self):
        _, descriptor = DocumentCompiler().compile_element(paragraph(name="", description=""))
        entry = descriptor.model_dump(exclude_none=True)

        assert "name" not in entry
        assert "description" not in entry

    def test_image_descriptor_carries_full_tag(self):
        image = CanvasElement(id="i", type=ElementType.IMAGE, styles={"src": "a.png"})
        _, descriptor = DocumentCompiler().compile_element(image)

        assert descriptor.content.startswith('        <img src="a.png"')
        assert descriptor.value is None
        assert descriptor.columns is None

    def test_table_descriptor_lists_columns(self, two_column_table):
        table = CanvasElement(id="t", type=ElementType.TABLE, name="Orders",
                              styles={"width": "100%"}, table_data=two_column_table)
        document = json.loads(DocumentCompiler().compile([table]).json_text)
        entry = document["elements"][0]

        assert entry["content"] == f'        <table style="width: 100%;">{VALUE_PLACEHOLDER}</table>\n'
        assert entry["columns"] == [
            {
                "type": "column",
                "columnName": "Order_Id",
                "columnDescription": "Unique order number",
                "columnValue": "Order",
                "columnContent": COLUMN_CONTENT_TEMPLATE,
            },
            {
                "type": "column",
                "columnName": "Order_Total",
                "columnDescription": "Amount in EUR",
                "columnValue": "Total",
                "columnContent": COLUMN_CONTENT_TEMPLATE,
            },
        ]

    def test_json_text_keeps_non_ascii(self):
        compiled = DocumentCompiler().compile([paragraph(content="Größe")])

        assert "Größe" in compiled.json_text


class TestExtractColumns:

    def test_missing_description_takes_segment_prefix(self):
        table = TableData(headers=[TableColumn(content="V", name="N", description="")])
        columns = extract_columns(encode_table_html(table))

        assert len(columns) == 1
        assert columns[0].column_name == "N"
        assert columns[0].column_value == "V"
        assert columns[0].column_description == "##Column Name##:N:##Co"

    def test_unnamed_columns_not_listed(self):
        table = TableData(headers=[
            TableColumn(content="A", name="", description=""),
            TableColumn(content="B", name="Second", description="x"),
        ])
        columns = extract_columns(encode_table_html(table))

        assert [c.column_name for c in columns] == ["Second"]

    def test_empty_table_has_no_columns(self):
        assert extract_columns(encode_table_html(TableData())) == []

    def test_new_table_from_store(self, store):
        table = store.create(ElementType.TABLE, Point(x=0, y=0))
        _, descriptor = DocumentCompiler().compile_element(table)

        assert descriptor.columns == []
