from hierarchy.builder import build_categorized_forest, build_root_tree, category_options
from hierarchy.filtering import ArticleFilter, Page, paginate
from hierarchy.records import ArticleRecord, TreeNode
from hierarchy.view_state import ExpansionState, category_key

__all__ = [
    "ArticleFilter",
    "ArticleRecord",
    "ExpansionState",
    "Page",
    "TreeNode",
    "build_categorized_forest",
    "build_root_tree",
    "category_key",
    "category_options",
    "paginate",
]
