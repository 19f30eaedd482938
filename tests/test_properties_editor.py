"""
Properties editor tests: form layout, field edits and table column controls.
"""

import pytest

from template_builder.canvas.element_store import ElementStore
from template_builder.canvas.properties_editor import (
    PropertiesEditor,
    PropertyError,
    add_column,
    remove_last_column,
)
from template_builder.models.canvas_models import ElementType, Point, TableData


def editor_for(store: ElementStore, element_type: ElementType) -> PropertiesEditor:
    element = store.create(element_type, Point(x=0, y=0))
    return PropertiesEditor(store, element.id)


# =============================================================================
# Form fields
# =============================================================================


class TestFormFields:

    def test_paragraph_has_content_and_basic_styles(self, store):
        keys = [f.key for f in editor_for(store, ElementType.PARAGRAPH).form_fields()]

        assert keys[:3] == ["name", "description", "content"]
        assert "styles.backgroundColor" in keys
        assert "styles.borderRadius" in keys
        assert "styles.display" not in keys

    def test_image_has_source_but_no_content(self, store):
        fields = {f.key: f for f in editor_for(store, ElementType.IMAGE).form_fields()}

        assert "content" not in fields
        assert fields["styles.src"].value.startswith("https://placehold.co/")

    def test_flex_controls_only_for_flex_div(self, store):
        editor = editor_for(store, ElementType.TEXT_BLOCK)
        keys = [f.key for f in editor.form_fields()]
        assert "styles.flexDirection" in keys
        assert "styles.alignItems" in keys

        editor.set_style("display", "block")
        keys = [f.key for f in editor.form_fields()]
        assert "styles.display" in keys
        assert "styles.flexDirection" not in keys

    def test_table_lists_column_fields(self, store):
        editor = editor_for(store, ElementType.TABLE)
        editor.add_column()
        editor.add_column()
        fields = editor.form_fields()

        header_fields = [f for f in fields if f.column_index is not None]
        assert len(header_fields) == 6
        assert header_fields[3].label == "Header 2 Content"
        assert "content" not in [f.key for f in fields]

    def test_unknown_element_has_no_fields(self, store):
        assert PropertiesEditor(store, "element-missing").form_fields() == []


# =============================================================================
# Field edits
# =============================================================================


class TestEdits:

    def test_edits_write_through(self, store):
        editor = editor_for(store, ElementType.HEADING)
        editor.edit("name", "Title")
        editor.edit("description", "Main title")
        editor.edit("content", "Invoice")
        editor.edit("styles.fontSize", "32px")

        element = store.get(editor.element_id)
        assert (element.name, element.description, element.content) == ("Title", "Main title", "Invoice")
        assert element.styles["fontSize"] == "32px"

    def test_content_rejected_for_contentless_types(self, store):
        for element_type in (ElementType.IMAGE, ElementType.TABLE, ElementType.HORIZONTAL_RULE):
            with pytest.raises(PropertyError):
                editor_for(store, element_type).set_content("text")

    def test_image_source(self, store):
        editor = editor_for(store, ElementType.IMAGE)
        editor.edit("styles.src", "https://example.com/logo.png")

        assert store.get(editor.element_id).styles["src"] == "https://example.com/logo.png"

    def test_image_source_only_on_images(self, store):
        with pytest.raises(PropertyError):
            editor_for(store, ElementType.PARAGRAPH).set_image_source("x.png")

    def test_unknown_key(self, store):
        editor = editor_for(store, ElementType.PARAGRAPH)

        with pytest.raises(PropertyError):
            editor.edit("styles.", "x")
        with pytest.raises(PropertyError):
            editor.edit("colour", "red")

    def test_delete(self, store):
        editor = editor_for(store, ElementType.PARAGRAPH)

        assert editor.delete() is True
        assert len(store) == 0
        assert editor.element is None


# =============================================================================
# Table columns
# =============================================================================


class TestColumns:

    def test_add_column_defaults(self):
        table = add_column(add_column(TableData()))

        assert [h.content for h in table.headers] == ["Header 1", "Header 2"]
        assert table.headers[1].name == "Column 2 Name"
        assert table.headers[1].description == "Description for column 2"

    def test_add_column_extends_rows(self, two_column_table):
        table = add_column(two_column_table)

        assert table.body_rows == [["A-1", "10.00", "New Cell"], ["A-2", "12.50", "New Cell"]]

    def test_remove_last_column_trims_rows(self, two_column_table):
        table = remove_last_column(two_column_table)

        assert [h.content for h in table.headers] == ["Order"]
        assert table.body_rows == [["A-1"], ["A-2"]]

    def test_removing_only_column_empties_table(self, two_column_table):
        table = remove_last_column(remove_last_column(two_column_table))

        assert table == TableData()

    def test_add_twice_remove_twice(self, store, table_element):
        editor = PropertiesEditor(store, table_element.id)
        editor.add_column()
        editor.add_column()
        editor.remove_last_column()
        editor.remove_last_column()

        assert store.get(table_element.id).table_data == TableData()

    def test_remove_on_empty_table_is_no_op(self, store, table_element):
        editor = PropertiesEditor(store, table_element.id)

        assert editor.remove_last_column().table_data == TableData()

    def test_header_edits(self, store, table_element, two_column_table):
        store.update(table_element.id, {"tableData": two_column_table})
        editor = PropertiesEditor(store, table_element.id)
        editor.set_header_content(1, "Sum")
        editor.set_header_name(1, "Grand Total")
        editor.set_header_description(0, "Order reference")

        headers = store.get(table_element.id).table_data.headers
        assert (headers[1].content, headers[1].name) == ("Sum", "Grand Total")
        assert headers[0].description == "Order reference"
        assert store.get(table_element.id).table_data.body_rows == two_column_table.body_rows

    def test_header_index_checked(self, store, table_element):
        editor = PropertiesEditor(store, table_element.id)

        with pytest.raises(PropertyError):
            editor.set_header_content(0, "x")

    def test_columns_only_on_tables(self, store):
        with pytest.raises(PropertyError):
            editor_for(store, ElementType.PARAGRAPH).add_column()

    def test_import_table_html(self, store, table_element):
        editor = PropertiesEditor(store, table_element.id)
        element = editor.import_table_html(
            "<table><thead><tr><th>Item</th><th>Qty</th></tr></thead>"
            "<tbody><tr><td>Pen</td><td>2</td></tr><tr><td>Ink</td></tr></tbody></table>"
        )

        assert [h.content for h in element.table_data.headers] == ["Item", "Qty"]
        assert element.table_data.headers[1].name == "Column 2"
        assert element.table_data.body_rows == [["Pen", "2"], ["Ink", ""]]

    def test_unknown_element_column_ops_return_none(self, store):
        editor = PropertiesEditor(store, "element-missing")

        assert editor.add_column() is None
        assert editor.import_table_html("<table></table>") is None
