import base64
import json
from typing import Any, Union


def to_str(data: Union[str, bytes]) -> str:
    """Turn `bytes` or `str` to `str`, bytes are decoded as strict UTF-8"""
    if isinstance(data, bytes):
        return data.decode('utf-8')
    return data


def to_bytes(data: Union[str, bytes]) -> bytes:
    """Turn `bytes` or `str` to UTF-8 encoded `bytes`"""
    if isinstance(data, str):
        return data.encode('utf-8')
    return data


def encode_base64_json(value: Any) -> str:
    """Serialize a value to JSON and wrap it in standard base64, the way the platform injects it"""
    return to_str(base64.b64encode(to_bytes(json.dumps(value))))


def decode_base64_json(data: Union[str, bytes]) -> Any:
    """Decode a standard base64 string and parse the UTF-8 JSON document inside it

    Line-wrapped base64 (`base64` command, `base64.encodebytes`) is accepted.

    Args:
        data (AnyStr): base64 encoded JSON

    Raises:
        binascii.Error: data is not valid base64
        UnicodeDecodeError: decoded bytes are not UTF-8
        json.JSONDecodeError: decoded text is not a JSON document

    Returns:
        Any: the parsed JSON value
    """
    # bytes.split() without arguments drops all ASCII whitespace
    raw = base64.b64decode(b''.join(to_bytes(data).split()), validate=True)
    return json.loads(to_str(raw))
