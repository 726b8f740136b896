from typing import Literal

from pydantic import BaseModel


class SignatureRequest(BaseModel):
    folder: str = ""
    resource_type: Literal["image", "video", "raw", "auto"] = "auto"


class SignatureResponse(BaseModel):
    signature: str
    timestamp: int
    folder: str
    resource_type: str
    api_key: str
    cloud_name: str
