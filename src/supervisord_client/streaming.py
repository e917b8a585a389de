"""Path-keyed streaming processing of XML-RPC replies.

Some replies are not uniform: ``supervisor.reloadConfig`` answers with an
array of three unlabeled string arrays (added, changed, removed groups) and
only their position tells them apart. :class:`PathProcessor` walks the reply
once, element by element, and fires callbacks registered against exact
slash-joined element paths; :class:`GroupAccumulator` turns the resulting
pulses back into the three groups.
"""

from __future__ import annotations

from typing import Callable, Iterable
from xml.etree import ElementTree

from .errors import FaultError, ParseError
from .logger import BoundLogger, create_logger
from .types import ReloadConfigResult

LeafCallback = Callable[[str], None]
ContainerCallback = Callable[[], None]

RELOAD_ARRAY_PATH = "methodResponse/params/param/value/array"
RELOAD_GROUP_PATH = RELOAD_ARRAY_PATH + "/data/value/array/data"
RELOAD_VALUE_PATHS = (RELOAD_GROUP_PATH + "/value", RELOAD_GROUP_PATH + "/value/string")

FAULT_MEMBER_PATH = "methodResponse/fault/value/struct/member"
FAULT_VALUE_PATHS = tuple(
    FAULT_MEMBER_PATH + suffix for suffix in ("/value", "/value/int", "/value/i4", "/value/string")
)


class PathProcessor:
    """Single-pass dispatcher over a streamed XML document.

    Container callbacks run when an element with a registered path starts and
    again when it ends. Leaf callbacks run when an element with no child
    elements ends, receiving its text. Paths match exactly.
    """

    def __init__(self, *, logger: BoundLogger | None = None) -> None:
        self._leaf_callbacks: dict[str, LeafCallback] = {}
        self._container_callbacks: dict[str, ContainerCallback] = {}
        self._logger = (logger or create_logger()).child("stream")

    def add_leaf_callback(self, path: str, fn: LeafCallback) -> None:
        self._leaf_callbacks[path] = fn

    def add_container_callback(self, path: str, fn: ContainerCallback) -> None:
        self._container_callbacks[path] = fn

    def process(self, chunks: Iterable[bytes]) -> None:
        parser = ElementTree.XMLPullParser(events=("start", "end"))
        stack: list[str] = []
        has_children: list[bool] = []
        try:
            for chunk in chunks:
                parser.feed(chunk)
                self._dispatch(parser, stack, has_children)
            parser.close()
        except ElementTree.ParseError as exc:
            raise ParseError(f"Malformed XML document: {exc}") from exc
        self._dispatch(parser, stack, has_children)
        if stack:
            raise ParseError(f"Truncated XML document inside {'/'.join(stack)}")

    def _dispatch(
        self,
        parser: ElementTree.XMLPullParser,
        stack: list[str],
        has_children: list[bool],
    ) -> None:
        for event, elem in parser.read_events():
            if event == "start":
                if has_children:
                    has_children[-1] = True
                stack.append(elem.tag)
                has_children.append(False)
                path = "/".join(stack)
                container = self._container_callbacks.get(path)
                if container is not None:
                    self._logger.trace("enter %s", path)
                    container()
                continue

            path = "/".join(stack)
            if not has_children[-1]:
                leaf = self._leaf_callbacks.get(path)
                if leaf is not None:
                    self._logger.trace("leaf %s", path)
                    leaf(elem.text or "")
            container = self._container_callbacks.get(path)
            if container is not None:
                self._logger.trace("exit %s", path)
                container()
            stack.pop()
            has_children.pop()
            elem.clear()


class GroupAccumulator:
    """Buckets strings into added/changed/removed by group position.

    Each group container produces two pulses, one on entry and one on exit.
    The ``inside`` flag pairs them so the index advances once per group,
    whether the group holds values or is empty. Groups past the third are
    dropped.
    """

    def __init__(self) -> None:
        self.index = -1
        self._inside = False
        self._groups: tuple[list[str], list[str], list[str]] = ([], [], [])

    def pulse(self) -> None:
        if self._inside:
            self._inside = False
        else:
            self.index += 1
            self._inside = True

    def add(self, value: str) -> None:
        if 0 <= self.index < len(self._groups):
            self._groups[self.index].append(value)

    def result(self) -> ReloadConfigResult:
        added, changed, removed = self._groups
        return ReloadConfigResult(added=list(added), changed=list(changed), removed=list(removed))


def decode_reload_config(chunks: Iterable[bytes], *, logger: BoundLogger | None = None) -> ReloadConfigResult:
    """Decode a ``supervisor.reloadConfig`` reply streamed as ``chunks``."""
    processor = PathProcessor(logger=logger)
    groups = GroupAccumulator()
    seen_array = False
    fault: dict[str, str] = {}
    member_name: list[str] = []

    def on_array() -> None:
        nonlocal seen_array
        seen_array = True

    def on_fault_name(value: str) -> None:
        member_name[:] = [value.strip()]

    def on_fault_value(value: str) -> None:
        if member_name:
            fault[member_name[0]] = value

    processor.add_container_callback(RELOAD_ARRAY_PATH, on_array)
    processor.add_container_callback(RELOAD_GROUP_PATH, groups.pulse)
    for path in RELOAD_VALUE_PATHS:
        processor.add_leaf_callback(path, groups.add)
    processor.add_leaf_callback(FAULT_MEMBER_PATH + "/name", on_fault_name)
    for path in FAULT_VALUE_PATHS:
        processor.add_leaf_callback(path, on_fault_value)

    processor.process(chunks)

    if fault:
        try:
            code = int(fault.get("faultCode", "0").strip())
        except ValueError as exc:
            raise ParseError(f"Invalid fault code {fault.get('faultCode')!r}") from exc
        raise FaultError(code, fault.get("faultString", ""))
    if not seen_array:
        raise ParseError("reloadConfig reply carries no group array")
    return groups.result()


__all__ = [
    "ContainerCallback",
    "GroupAccumulator",
    "LeafCallback",
    "PathProcessor",
    "decode_reload_config",
]
