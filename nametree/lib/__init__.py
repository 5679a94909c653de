"""Library module containing the name tree, its models and data utilities."""

from nametree.lib.models import (
    ExactMatchResponse,
    HealthResponse,
    InsertRequest,
    InsertResponse,
    LongestMatchResponse,
    TreeNode,
    validate_name,
)
from nametree.lib.export import dump_json, load_json
from nametree.lib.name_tree import Node, WalkResult, new, split_name
from nametree.lib.data import get_df_polars, prep_df, build_name_tree

__all__ = [
    # Models
    'TreeNode',
    'InsertRequest',
    'InsertResponse',
    'ExactMatchResponse',
    'LongestMatchResponse',
    'HealthResponse',
    'validate_name',
    # Name tree
    'Node',
    'WalkResult',
    'new',
    'split_name',
    # JSON export
    'dump_json',
    'load_json',
    # Data utilities
    'get_df_polars',
    'prep_df',
    'build_name_tree',
]
