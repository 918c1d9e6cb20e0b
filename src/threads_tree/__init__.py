"""Threads: hierarchy assembly and tree rendering for threads of work."""

from threads_tree.core.classify import is_container, is_thread
from threads_tree.core.temperature import derive_temperature
from threads_tree.core.tree.builder import EntityNode, GroupNode, UngroupedNode, build_forest
from threads_tree.core.tree.render import render_tree
from threads_tree.errors import DataQualityWarning, InvalidTimestamp, MalformedEntity
from threads_tree.store import JsonFileStore

__all__ = [
    "DataQualityWarning",
    "EntityNode",
    "GroupNode",
    "InvalidTimestamp",
    "JsonFileStore",
    "MalformedEntity",
    "UngroupedNode",
    "build_forest",
    "derive_temperature",
    "is_container",
    "is_thread",
    "render_tree",
]
