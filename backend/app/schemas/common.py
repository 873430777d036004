"""
Shared schema building blocks.
"""

from typing import Annotated
from pydantic import BaseModel, ConfigDict, StringConstraints

# Required text: absent, empty and whitespace-only values are all "missing"
RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class APIModel(BaseModel):
    """
    Base schema exposing the PascalCase field names used by the web client.
    
    Fields are declared in snake_case with a PascalCase alias; input is
    accepted under either name and responses are serialized by alias.
    """
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str
