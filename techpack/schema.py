from typing import Literal

from pydantic import BaseModel, Field


ArtifactStatus = Literal["idle", "streaming"]


class BomRowModel(BaseModel):
    label: str
    item: str = ""
    description: str = ""
    color: str = ""
    code: str = ""
    quantity: str = ""
    supplier: str = ""
    source_placeholder: str | None = None

    def cells(self) -> list[str]:
        return [self.item, self.description, self.color, self.code, self.quantity, self.supplier]


class TechPackInfoModel(BaseModel):
    brand: str = "THE BRAND NAME"
    designer: str = "CLIENT NAME HERE"
    description: str = "WOMENSWEAR"
    season: str = "N/A"
    date: str = ""
    main_fabric: str = "FABRIC"
    style_name: str = "STYLE NAME HERE"
    style_number: str = "ABC123"
    size_range: str = "XS S [M] L XL XXL"


class TechPackRecordModel(BaseModel):
    schema_version: str = "1.0"
    document_title: str = "Document"
    info: TechPackInfoModel = Field(default_factory=TechPackInfoModel)
    bom_items: list[BomRowModel] = Field(default_factory=list, max_length=11)
    sketch_image_url: str | None = None


class ToolResultModel(BaseModel):
    id: str
    title: str
    kind: str
    content: str
    fields_needing_input: list[str] = Field(default_factory=list)


class ToolErrorModel(BaseModel):
    error: str
