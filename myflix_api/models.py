from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from pydantic import BaseModel, Field


class GenreInfo(BaseModel):
    Name: Optional[str] = None
    Description: Optional[str] = None


class DirectorInfo(BaseModel):
    Name: Optional[str] = None
    Bio: Optional[str] = None
    BirthYear: Optional[int] = None


class Movie(BaseModel):
    """Shape of a document in the `movies` collection."""

    Title: str
    Description: str
    Genre: GenreInfo = Field(default_factory=GenreInfo)
    Director: DirectorInfo = Field(default_factory=DirectorInfo)
    Year: Optional[int] = None
    Rating: Optional[float] = None
    Actors: List[str] = Field(default_factory=list)
    ImagePath: Optional[str] = None
    Featured: bool = False


class UserPayload(BaseModel):
    """Request body for registration and profile updates.

    Every field is optional here so that missing values are reported by
    `myflix_api.validation` together with the other field errors.
    """

    Username: Optional[str] = None
    Password: Optional[str] = None
    Email: Optional[str] = None
    Birthday: Optional[str] = None


def serialize_doc(doc: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Make a MongoDB document JSON-safe (ObjectIds become strings)."""
    if doc is None:
        return None
    return {k: _serialize_value(v) for k, v in doc.items()}


def serialize_docs(docs: Any) -> List[Dict[str, Any]]:
    return [d for d in (serialize_doc(x) for x in docs) if d is not None]


def _serialize_value(v: Any) -> Any:
    if isinstance(v, ObjectId):
        return str(v)
    if isinstance(v, Mapping):
        return {k: _serialize_value(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_serialize_value(x) for x in v]
    return v
