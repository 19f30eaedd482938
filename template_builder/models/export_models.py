"""
Export Models for Template Builder
===================================

Compiled template documents and the queue item envelope.
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

VALUE_PLACEHOLDER = "{{##Value##}}"
QUEUE_PRIORITY = "Normal"
QUEUE_ITEM_NAME = "Document Template Queue"


class ExportColumn(BaseModel):
    """Per-column metadata recovered from a table's header markers."""
    model_config = ConfigDict(populate_by_name=True)

    type: str = "column"
    column_name: str = Field(alias="columnName")
    column_description: str = Field(alias="columnDescription")
    column_value: str = Field(alias="columnValue")
    column_content: str = Field(alias="columnContent")


class ExportElement(BaseModel):
    """JSON descriptor of one element; unset fields are left out."""
    name: Optional[str] = None
    description: Optional[str] = None
    type: str
    content: str
    value: Optional[str] = None
    columns: Optional[List[ExportColumn]] = None


class ExportDocument(BaseModel):
    """JSON companion of the exported HTML document."""
    header: str
    elements: List[ExportElement] = Field(default_factory=list)
    footer: str
    name: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CompiledTemplate(BaseModel):
    """Compiler output: HTML document plus its JSON description."""
    name: str = ""
    description: str = ""
    html: str
    document: ExportDocument
    json_text: str


class QueueSpecificContent(BaseModel):
    temp_name: str = Field(alias="tempName")
    temp_description: str = Field(alias="tempDescription")
    temp_html: str = Field(alias="tempHTML")
    temp_json: str = Field(alias="tempJSON")

    model_config = ConfigDict(populate_by_name=True)


class QueueItemData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    priority: str = Field(default=QUEUE_PRIORITY, alias="Priority")
    name: str = Field(default=QUEUE_ITEM_NAME, alias="Name")
    specific_content: QueueSpecificContent = Field(alias="SpecificContent")


class QueueItemEnvelope(BaseModel):
    """Request body submitted to the relay."""
    model_config = ConfigDict(populate_by_name=True)

    item_data: QueueItemData = Field(alias="itemData")

    @classmethod
    def from_compiled(cls, compiled: CompiledTemplate) -> "QueueItemEnvelope":
        return cls(
            item_data=QueueItemData(
                specific_content=QueueSpecificContent(
                    temp_name=compiled.name,
                    temp_description=compiled.description,
                    temp_html=compiled.html,
                    temp_json=compiled.json_text,
                )
            )
        )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class SubmissionResult(BaseModel):
    """Outcome of one export submission, as shown to the user."""
    success: bool
    message: str
    status_code: Optional[int] = None
    error: Optional[str] = None
