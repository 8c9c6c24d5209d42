"""
XML decoding of status payloads into CheckResponse models.

The payload shape is::

    <CheckResponse>
      <minorVersion>1</minorVersion>
      <application>
        <longName>...</longName>
        <shortName>...</shortName>
        <componentVersion>...</componentVersion>
        <success>true</success>
        <failureReason>...</failureReason>
        <check>
          <name>...</name>
          <success>true</success>
          <failureReason>...</failureReason>
        </check>
      </application>
    </CheckResponse>

Unknown elements are ignored at every level.
"""
import re
import xml.etree.ElementTree as ElementTree
from typing import Any, Dict

from pydantic import ValidationError

from .models import CheckResponse

ROOT_TAG = "CheckResponse"

TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}
INT_PATTERN = re.compile(r"^[+-]?\d+$")

# Field kinds per element; anything not listed is skipped.
CHECK_FIELDS = {
    "name": "str",
    "success": "bool",
    "failureReason": "str",
}
APPLICATION_FIELDS = {
    "longName": "str",
    "shortName": "str",
    "componentVersion": "str",
    "success": "bool",
    "failureReason": "str",
    "check": CHECK_FIELDS,
}
RESPONSE_FIELDS = {
    "minorVersion": "int",
    "application": APPLICATION_FIELDS,
}


class PayloadDecodeError(Exception):
    """Raised when a response body is not a valid CheckResponse document."""
    pass


def _local_name(tag: str) -> str:
    # ElementTree spells namespaced tags as "{uri}local"
    return tag.rsplit("}", 1)[-1]


def _parse_bool(tag: str, text: str) -> bool:
    text = text.strip()
    if text == "" or text in FALSE_VALUES:
        return False
    if text in TRUE_VALUES:
        return True
    raise PayloadDecodeError(f"invalid boolean value {text!r} in <{tag}>")


def _parse_int(tag: str, text: str) -> int:
    text = text.strip()
    if text == "":
        return 0
    if not INT_PATTERN.match(text):
        raise PayloadDecodeError(f"invalid integer value {text!r} in <{tag}>")
    return int(text)


def _element_to_dict(elem: ElementTree.Element, fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Collects the known children of elem into a dict keyed by wire name.
    Nested element kinds become lists in document order; a repeated scalar
    element keeps its last value.
    """
    data: Dict[str, Any] = {}
    for child in elem:
        tag = _local_name(child.tag)
        kind = fields.get(tag)
        if kind is None:
            continue
        if isinstance(kind, dict):
            data.setdefault(tag, []).append(_element_to_dict(child, kind))
            continue
        text = "".join(child.itertext())
        if kind == "bool":
            data[tag] = _parse_bool(tag, text)
        elif kind == "int":
            data[tag] = _parse_int(tag, text)
        else:
            data[tag] = text
    return data


def decode_check_response(body: bytes) -> CheckResponse:
    """
    Parses an XML status payload into a CheckResponse.

    Only the wire fields are populated; run metadata is left at its defaults.
    Raises PayloadDecodeError for malformed XML, an unexpected root element,
    or field values that cannot be converted.
    """
    try:
        root = ElementTree.fromstring(body)
    except ElementTree.ParseError as e:
        raise PayloadDecodeError(f"malformed XML: {e}") from e

    root_tag = _local_name(root.tag)
    if root_tag != ROOT_TAG:
        raise PayloadDecodeError(f"expected element type <{ROOT_TAG}> but have <{root_tag}>")

    data = _element_to_dict(root, RESPONSE_FIELDS)
    try:
        return CheckResponse.model_validate(data)
    except ValidationError as e:
        raise PayloadDecodeError(f"invalid CheckResponse payload: {e}") from e
