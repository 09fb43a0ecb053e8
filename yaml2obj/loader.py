import io
import os
from typing import Any, Optional
import yaml
from yaml.loader import SafeLoader
from yaml.composer import Composer
from yaml.constructor import Constructor

# every mapping loaded by this loader carries a "__line__" entry:
#   {"<key>": <line number of key>, ..., "__begin__": <first line of the mapping>}
# so that configuration errors can point at the offending line.

LINE_KEY = "__line__"
BEGIN_KEY = "__begin__"
FULLPATH_KEY = "__fullpath__"


class YamlLoaderWithLineNumber(SafeLoader):
    def __init__(self, stream):
        super().__init__(stream)

    def compose_node(self, parent, index):
        node = Composer.compose_node(self, parent, index)
        # self.line is 0 origin and already points after the node
        node.__line__ = node.start_mark.line + 1
        return node

    def construct_mapping(self, node, deep=False):
        line_info = {}
        for k, _ in node.value:
            line_info[k.value] = k.__line__
        line_info[BEGIN_KEY] = min(line_info.values(), default=node.__line__)

        mapping = Constructor.construct_mapping(self, node, deep=deep)
        mapping[LINE_KEY] = line_info
        return mapping

    @classmethod
    def from_file(cls, path: str) -> Any:
        with open(path) as file:
            o = yaml.load(file, Loader=YamlLoaderWithLineNumber)
        if o is None:  # empty document
            o = {LINE_KEY: {BEGIN_KEY: 1}}
        if isinstance(o, dict):
            o[FULLPATH_KEY] = os.path.abspath(path)
        return o

    @classmethod
    def from_string(cls, body: str) -> Any:
        return yaml.load(io.StringIO(body), Loader=YamlLoaderWithLineNumber)


def line_of(data: dict, key: Optional[str] = None) -> int:
    """line number of 'key' in a loaded mapping, or of the mapping itself"""
    line_info = data.get(LINE_KEY, {})
    if key is not None and key in line_info:
        return line_info[key]
    return line_info.get(BEGIN_KEY, 0)
