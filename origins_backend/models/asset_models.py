from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class Asset(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    paid: str = Field(..., min_length=1, description="Globally unique PROVENIQ Asset ID.")
    sourceApp: Optional[str] = Field(None, description="App that originally registered the asset.")
    sourceAssetId: Optional[str] = Field(None, description="Identifier of the asset within its source app.")
    assetType: Optional[str] = None
    category: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    ownerId: Optional[str] = Field(None, description="Identifier of the current owner.")
    currentValueMicros: Optional[int] = Field(None, description="Current value in currency units scaled by 1e6.")
    anchorId: Optional[str] = Field(None, description="Grouping key linking related assets.")
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
