from __future__ import annotations

import base64
import binascii

from relaypage import exc


def encode_cursor(value: str) -> str:
    """ Encode a plain cursor value as an opaque cursor: base64 over UTF-8 """
    return base64.b64encode(value.encode('utf-8')).decode('ascii')


def decode_cursor(cursor: str) -> str:
    """ Decode an opaque cursor into its plain value

    Raises:
        exc.InvalidCursorError: not base64, or not UTF-8 inside
    """
    try:
        data = base64.b64decode(cursor.encode('ascii'), validate=True)  # binascii.Error, UnicodeEncodeError
        return data.decode('utf-8')  # UnicodeDecodeError
    except (binascii.Error, UnicodeError) as e:
        raise exc.InvalidCursorError(cursor, str(e)) from e
