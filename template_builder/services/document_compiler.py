"""
Document Compiler
=================

Compiles the canvas elements into a standalone HTML document and a
structurally parallel JSON document.

Each element becomes one tag inside ``.canvas-container``, optionally
preceded by ``Element Name`` / ``Description`` comments. The JSON side
carries the same element with its payload replaced by ``{{##Value##}}``;
tables list their columns, recovered from the header markers of the
generated fragment.
"""

import json
import logging
from typing import List

from ..canvas.css import attr, style_string
from ..canvas.table_codec import (
    SPLIT_SENTINEL, NAME_MARKER, DESCRIPTION_MARKER, VALUE_MARKER,
    CELL_STYLE, comment_safe, encode_table_html, normalize_name,
)
from ..models.canvas_models import CanvasElement, ElementType
from ..models.export_models import (
    CompiledTemplate, ExportColumn, ExportDocument, ExportElement, VALUE_PLACEHOLDER
)

logger = logging.getLogger(__name__)

INDENT = " " * 8

HTML_HEADER = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Generated HTML Template</title>
    <style>
        body {
            font-family: 'Inter', sans-serif;
            margin: 0;
            padding: 20px;
            background-color: #f4f7fa;
            color: #333;
        }
        .canvas-container {
            position: relative;
            width: 100%;
            height: auto; /* Adjust height dynamically or set a min-height */
            min-height: 1500px;
            background-color: #fff;
            border: 1px solid #e0e0e0;
            border-radius: 8px;
            box-shadow: 0 4px 6px rgba(0,0,0,0.1);
            overflow: hidden; /* Hide anything outside its bounds */
        }
    </style>
</head>
<body>
    <div class="canvas-container">
"""

HTML_FOOTER = """    </div>
</body>
</html>"""

JSON_FOOTER = """</div>
</body>
</html>"""

COLUMN_CONTENT_TEMPLATE = f'<th style="{CELL_STYLE}">{VALUE_PLACEHOLDER}</th>\n'


def _slice_between(segment: str, opener: str, closer: str) -> str:
    """
    Text between the first ``opener`` and the last ``closer`` in a segment.

    A missing marker does not produce an empty string: the bounds are
    clamped into the segment and swapped when reversed, so a missing
    description yields the leading characters of the segment. A value
    containing a closing marker shifts the end bound. Consumers of the
    exported JSON rely on this exact slicing.
    """
    start = segment.find(opener) + len(opener)
    end = segment.rfind(closer)
    length = len(segment)
    start = min(max(start, 0), length)
    end = min(max(end, 0), length)
    if start > end:
        start, end = end, start
    return segment[start:end]


def extract_columns(fragment: str) -> List[ExportColumn]:
    """
    Re-split a generated table fragment on the sentinel and read each
    column's marker payloads.

    Columns without a name emit no sentinel, so their markers fall into the
    preceding segment and are not listed separately.
    """
    columns = []
    for segment in fragment.split(SPLIT_SENTINEL):
        if f"{NAME_MARKER}:" not in segment.strip():
            continue
        columns.append(ExportColumn(
            column_name=_slice_between(segment, f"{NAME_MARKER}:", f":{NAME_MARKER}"),
            column_description=_slice_between(segment, f"{DESCRIPTION_MARKER}:", f":{DESCRIPTION_MARKER}"),
            column_value=_slice_between(segment, f"{VALUE_MARKER}:", f":{VALUE_MARKER}"),
            column_content=COLUMN_CONTENT_TEMPLATE,
        ))
    return columns


class DocumentCompiler:
    """Single-pass, order-preserving compiler over a list of elements."""

    def compile(
        self,
        elements: List[CanvasElement],
        name: str = "",
        description: str = "",
    ) -> CompiledTemplate:
        """
        Compile elements into the HTML document and its JSON description.

        Args:
            elements: Elements in canvas order
            name: Template name, copied into the JSON document
            description: Template description, copied into the JSON document

        Returns:
            CompiledTemplate with html, the JSON document and its text
        """
        parts: List[str] = [HTML_HEADER]
        exported: List[ExportElement] = []

        for element in elements:
            html, descriptor = self.compile_element(element)
            parts.append(html)
            exported.append(descriptor)

        parts.append(HTML_FOOTER)

        document = ExportDocument(
            header=HTML_HEADER,
            elements=exported,
            footer=JSON_FOOTER,
            name=name,
            description=description,
        )
        json_text = json.dumps(document.to_dict(), indent=2, ensure_ascii=False)

        logger.info(f"[COMPILER] Compiled {len(elements)} elements for template '{name}'")
        return CompiledTemplate(
            name=name,
            description=description,
            html="".join(parts),
            document=document,
            json_text=json_text,
        )

    def compile_element(self, element: CanvasElement):
        """HTML for one element (comments, tag, trailing blank line) and its JSON descriptor."""
        parts: List[str] = []
        fields = {}

        if element.name:
            normalized = normalize_name(element.name)
            parts.append(f"{INDENT}<!-- Element Name: {comment_safe(normalized)} -->\n")
            fields["name"] = normalized
        if element.description:
            parts.append(f"{INDENT}<!-- Description: {comment_safe(element.description)} -->\n")
            fields["description"] = element.description

        style = attr(style_string(element.styles))
        element_type = element.type

        if element_type == ElementType.IMAGE:
            src = attr(element.styles.get("src", ""))
            tag = f'{INDENT}<img src="{src}" alt="Generated Image" style="{style}">\n'
            parts.append(tag)
            descriptor = ExportElement(type=element_type.value, content=tag, **fields)
        elif element_type == ElementType.HORIZONTAL_RULE:
            tag = f'{INDENT}<hr style="{style}">\n'
            parts.append(tag)
            descriptor = ExportElement(type=element_type.value, content=tag, **fields)
        elif element_type == ElementType.VERTICAL_RULE:
            tag = f'{INDENT}<div style="{style}"></div>\n'
            parts.append(tag)
            descriptor = ExportElement(type=element_type.value, content=tag, **fields)
        elif element_type == ElementType.TABLE:
            fragment = encode_table_html(element.table_data)
            parts.append(f'{INDENT}<table style="{style}">{fragment}</table>\n')
            descriptor = ExportElement(
                type=element_type.value,
                content=f'{INDENT}<table style="{style}">{VALUE_PLACEHOLDER}</table>\n',
                columns=extract_columns(fragment),
                **fields,
            )
        else:
            tag = element_type.value
            parts.append(f'{INDENT}<{tag} style="{style}">{element.content}</{tag}>\n')
            descriptor = ExportElement(
                type=tag,
                content=f'{INDENT}<{tag} style="{style}">{VALUE_PLACEHOLDER}</{tag}>\n',
                value=element.content,
                **fields,
            )

        parts.append("\n")
        return "".join(parts), descriptor
