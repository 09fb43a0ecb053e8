# write configuration to a text stream as YAML, keeping comments in place.
# yaml.dump cannot emit comments.

import re
from typing import Any, Iterable, List, TextIO

# scalars that would be read back as something else (or are not plain) are quoted
_PLAIN_RE = re.compile(r"^[A-Za-z0-9_./$]([A-Za-z0-9_./%$ -]*[A-Za-z0-9_./%$-])?$")


def to_scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    s = str(value)
    if _PLAIN_RE.match(s) and not _looks_like_other_type(s):
        return s
    return "'" + s.replace("'", "''") + "'"


def _looks_like_other_type(s: str) -> bool:
    if s.lower() in ("null", "true", "false", "yes", "no", "on", "off"):
        return True
    try:
        float(s)
        return True
    except ValueError:
        return False


class YamlWriter:
    def __init__(self, stream: TextIO):
        self.stream = stream
        self.level = 0
        self.array_levels: List[int] = []  # levels where a sequence is open

    def name(self, key: str) -> "YamlWriter":
        self.__indent()
        self.stream.write(key)
        self.stream.write(":")
        return self

    def value(self, value: Any) -> "YamlWriter":
        if self.level in self.array_levels:
            self.__indent()
            self.stream.write("- ")
        else:
            self.stream.write(" ")
        self.stream.write(to_scalar(value))
        self.stream.write("\n")
        return self

    def values(self, values: Iterable[Any]) -> "YamlWriter":
        """write a block sequence of scalars after name()"""
        self.begin_array()
        for v in values:
            self.value(v)
        return self.end_array()

    def begin_object(self) -> "YamlWriter":
        if self.level in self.array_levels:
            self.__indent()
            self.stream.write("-")
        self.stream.write("\n")
        self.level += 1
        return self

    def end_object(self) -> "YamlWriter":
        if self.level <= 0:
            raise Exception("no object is open")
        self.level -= 1
        return self

    def begin_array(self) -> "YamlWriter":
        self.array_levels.insert(0, self.level)
        self.stream.write("\n")
        return self

    def end_array(self) -> "YamlWriter":
        if len(self.array_levels) == 0:
            raise Exception("no array is open")
        self.array_levels.pop(0)
        return self

    def comment(self, body: str) -> "YamlWriter":
        self.__indent()
        self.stream.write("# ")
        self.stream.write(body)
        self.stream.write("\n")
        return self

    def __indent(self) -> "YamlWriter":
        self.stream.write("  " * (self.level + len(self.array_levels)))
        return self
