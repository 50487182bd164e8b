"""
Pydantic schemas for the inventory API.

Request bodies are deliberately loose: fields are parsed as-is and the
routes apply the presence check themselves so a missing field is a 400
with the usual envelope rather than a schema error.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Any = None
    name: Any = None
    amount: Any = None
    price: Any = None
    coastprice: Any = None
    lastpurchase: Any = None
    idsupplier: Any = None
    lastupdate: Any = None
    idcategorie: Any = None


class Credentials(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    password: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class DataResponse(BaseModel):
    message: str
    data: Any = None


class UploadUrlResponse(BaseModel):
    signedUrl: str
    key: str
    publicUrl: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
