"""
JSON export of a name tree.

Trees built from long names nest far deeper than recursive encoders and
parsers allow, so both directions walk the tree with an explicit stack. The
output has the same layout as `json.dumps(..., indent=n)`:

    {
      "component": "",
      "children": [
        {
          "component": "a"
        }
      ]
    }

`children` is left out for nodes without children.
"""

import json
import re
from json.decoder import scanstring
from typing import Any, Callable, List, Optional, Tuple

_TOKEN = re.compile(r'[ \t\n\r]*(?:([{}\[\],:])|(")|(null)|$)')


def dump_json(root: Any, indent: int = 2) -> str:
    """
    Render a tree as indented JSON.

    Args:
        root: Node with `component` and `children` attributes
        indent: Indent width in spaces

    Returns:
        JSON text holding only the component labels
    """
    pad = " " * indent
    out: List[str] = []
    # Items are either (node, level) to render or literal text to emit
    stack: List[Any] = [(root, 0)]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
            continue

        node, level = item
        inner = pad * (level + 1)
        out.append("{\n" + inner + '"component": ' + json.dumps(node.component, ensure_ascii=False))
        if not node.children:
            out.append("\n" + pad * level + "}")
            continue

        out.append(",\n" + inner + '"children": [')
        stack.append("\n" + inner + "]\n" + pad * level + "}")
        item_pad = "\n" + pad * (level + 2)
        for i in range(len(node.children) - 1, -1, -1):
            stack.append((node.children[i], level + 2))
            stack.append(("," if i else "") + item_pad)

    return "".join(out)


def _next_token(data: str, pos: int) -> Tuple[Optional[str], Any, int]:
    """Return (kind, value, end) of the token at `pos`; kind is None at the end of input."""
    match = _TOKEN.match(data, pos)
    if match is None:
        raise ValueError(f"Unexpected character at position {pos}: {data[pos:pos + 10]!r}")
    if match.group(1):
        return match.group(1), None, match.end()
    if match.group(2):
        value, end = scanstring(data, match.end())
        return "string", value, end
    if match.group(3):
        return "null", None, match.end()
    if match.end() < len(data):
        raise ValueError(f"Unexpected character at position {match.end()}: {data[match.end():match.end() + 10]!r}")
    return None, None, match.end()


def load_json(data: str, make_node: Callable[[str], Any]) -> Any:
    """
    Rebuild a tree from JSON produced by `dump_json`.

    Objects may only hold "component" (a string, required) and "children"
    (a list of objects or null), in any order.

    Args:
        data: JSON text
        make_node: Factory creating an empty node from a component label

    Returns:
        The root node

    Raises:
        ValueError: If the text is not a tree in the exported shape
    """
    root = None
    # Open objects as (node, keys seen)
    frames: List[Tuple[Any, set]] = []
    state = "value"
    pos = 0

    while True:
        kind, value, pos = _next_token(data, pos)

        if state in ("value", "item") and kind == "{":
            node = make_node("")
            if frames:
                frames[-1][0].children.append(node)
            else:
                root = node
            frames.append((node, set()))
            state = "key"

        elif state == "item" and kind == "]":
            state = "member_end"

        elif state in ("key", "next_key") and kind == "string":
            node, seen = frames[-1]
            colon, _, pos = _next_token(data, pos)
            if colon != ":":
                raise ValueError(f"Expected ':' after key {value!r} at position {pos}")
            kind, label, pos = _next_token(data, pos)
            if value == "component" and kind == "string":
                node.component = label
                state = "member_end"
            elif value == "children" and kind == "null":
                state = "member_end"
            elif value == "children" and kind == "[":
                state = "item"
            else:
                raise ValueError(f"Unexpected value for key {value!r} at position {pos}")
            seen.add(value)

        elif (state == "key" or state == "member_end") and kind == "}":
            _, seen = frames.pop()
            if "component" not in seen:
                raise ValueError(f"Object without 'component' closed at position {pos}")
            if not frames:
                state = "end"
            else:
                state = "item_end"

        elif state == "member_end" and kind == ",":
            state = "next_key"

        elif state == "item_end" and kind == ",":
            state = "value"

        elif state == "item_end" and kind == "]":
            state = "member_end"

        elif state == "end" and kind is None:
            return root

        else:
            raise ValueError(f"Unexpected {kind or 'end of input'} at position {pos} while expecting {state}")
