"""Tool handler implementations for toolhost."""

from toolhost.tools.filesystem import FileSystemTools
from toolhost.tools.search import GrepOptions, SearchTools
from toolhost.tools.shell import ShellTools
from toolhost.tools.todo import TodoItem, TodoTools
from toolhost.tools.toolset import HostToolset
from toolhost.tools.web import WebTools

__all__ = [
    "HostToolset",
    "FileSystemTools",
    "SearchTools",
    "GrepOptions",
    "ShellTools",
    "TodoTools",
    "TodoItem",
    "WebTools",
]
