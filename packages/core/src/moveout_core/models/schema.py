"""Assignment schema: the field and evidence definitions of the worksheet.

The schema document is owned by the form layer. The engine reads it to
learn which fields and evidence categories are required, what each field is
labelled, and which fields a pinned alternative should snapshot.
"""

from typing import Optional

from pydantic import BaseModel, Field

from moveout_core.models.enums import FieldRole, FieldType, PinCategory


class TableColumn(BaseModel):
    """Column definition for a tabular field."""
    id: str
    label: str = ""
    type: str = "text"
    derived_formula: Optional[str] = None
    source_column_id: Optional[str] = None


class FieldUi(BaseModel):
    """Presentation hints. The engine only reads ``source_for_field_id``."""

    model_config = {"extra": "allow"}

    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    source_for_field_id: Optional[str] = None
    table_columns: list[TableColumn] = Field(default_factory=list)
    default_rows: Optional[int] = None


class AssignmentField(BaseModel):
    id: str
    section_id: str = ""
    label: str = ""
    type: FieldType = FieldType.TEXT
    role: FieldRole = FieldRole.INPUT
    required: bool = False
    compute_key: Optional[str] = None
    ui: Optional[FieldUi] = None

    @property
    def display_label(self) -> str:
        """Label shown to the user, falling back to the field id."""
        return self.label or self.id


class AssignmentSection(BaseModel):
    id: str
    title: str = ""
    description: Optional[str] = None


class EvidenceRequirement(BaseModel):
    """An evidence category (e.g. ``rental_ad``) the student may need to attach."""
    id: str
    label: str = ""
    description: Optional[str] = None
    required: bool = False
    section_id: str = ""


class PinCategoryConfig(BaseModel):
    """Which fields a pinned alternative of this category captures."""
    id: PinCategory
    section_id: str = ""
    label_field_id: str
    snapshot_field_ids: list[str] = Field(default_factory=list)


class PinningConfig(BaseModel):
    categories: list[PinCategoryConfig] = Field(default_factory=list)


class AssignmentSchema(BaseModel):
    """Versioned list of worksheet fields and evidence requirements."""

    schema_version: str = "1.0.0"
    title: str = ""
    description: Optional[str] = None
    sections: list[AssignmentSection] = Field(default_factory=list)
    fields: list[AssignmentField] = Field(default_factory=list)
    evidence_requirements: list[EvidenceRequirement] = Field(default_factory=list)
    pinning: PinningConfig = Field(default_factory=PinningConfig)

    def get_field(self, field_id: str) -> Optional[AssignmentField]:
        """Return the field definition with ``field_id``, if any."""
        for field in self.fields:
            if field.id == field_id:
                return field
        return None

    def has_field(self, field_id: str) -> bool:
        return self.get_field(field_id) is not None

    def label_for(self, field_id: str) -> str:
        """Display label for a field id; unknown ids label themselves."""
        field = self.get_field(field_id)
        return field.display_label if field else field_id

    def pin_category(self, category: PinCategory) -> Optional[PinCategoryConfig]:
        for config in self.pinning.categories:
            if config.id == category:
                return config
        return None
