"""Pydantic models for the name tree export shape and the lookup API."""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


def validate_name(name: str) -> str:
    """
    Check that a name is usable as a key in the service.

    A valid name starts with "/", has at least one component and no empty
    components ("/a//b" and "/a/" are rejected).
    """
    if not name.startswith("/"):
        raise ValueError(f"Name must start with '/': {name!r}")
    components = name.split("/")[1:]
    if any(component == "" for component in components):
        raise ValueError(f"Name has an empty component: {name!r}")
    return name


class TreeNode(BaseModel):
    """Exported shape of a name tree node (entries are not part of it)."""

    component: str = Field(..., description="Component label of the node")
    children: Optional[List["TreeNode"]] = Field(
        default=None,
        description="Child nodes in insertion order, omitted when there are none"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "component": "",
                    "children": [
                        {"component": "a", "children": [{"component": "b"}, {"component": "c"}]}
                    ]
                }
            ]
        }
    }


TreeNode.model_rebuild()


class InsertRequest(BaseModel):
    """Request body for adding a name to the tree."""

    name: str = Field(..., description="Hierarchical name", examples=["/a/b/c"])
    entry: str = Field(..., description="Payload attached to the name", examples=["face-1"])

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return validate_name(v)


class InsertResponse(BaseModel):
    """Response model for insert operations."""

    status: Literal["created", "exists"] = Field(
        ...,
        description="'exists' when the name was already present and nothing changed"
    )
    created_nodes: int = Field(..., ge=0, description="Number of tree nodes created")
    size: int = Field(..., ge=0, description="Number of named nodes after the insert")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "created",
                    "created_nodes": 2,
                    "size": 5
                }
            ]
        }
    }


class ExactMatchResponse(BaseModel):
    """Response model for exact match lookups."""

    name: str = Field(..., description="Queried name")
    entry: Any = Field(..., description="Payload stored at the name")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "/a/b",
                    "entry": "face-2"
                }
            ]
        }
    }


class LongestMatchResponse(BaseModel):
    """Response model for longest prefix match lookups."""

    name: str = Field(..., description="Queried name")
    longest: str = Field(
        ...,
        description="Longest matching prefix; the queried name itself on an exact match"
    )
    entry: Any = Field(..., description="Payload stored at the longest prefix")
    exact: bool = Field(..., description="Whether the whole name matched")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "/a/b/d",
                    "longest": "a/b",
                    "entry": "face-2",
                    "exact": False
                }
            ]
        }
    }


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: Literal["healthy"] = Field(
        default="healthy",
        description="Service health status"
    )
    names_loaded: int = Field(
        ...,
        ge=0,
        description="Number of names read from the names file at startup"
    )
    tree_size: int = Field(
        ...,
        ge=0,
        description="Number of named nodes currently in the tree"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "healthy",
                    "names_loaded": 1200,
                    "tree_size": 3417
                }
            ]
        }
    }
