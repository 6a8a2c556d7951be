"""
Copyright 2017-2019 Government of Canada - Public Services and Procurement Canada - buyandsell.gc.ca

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""


import binascii
import json
import logging

from base64 import b64decode
from typing import Any, Mapping

from von_match.error import DecodeError, MissingRequestError


LOGGER = logging.getLogger(__name__)

REQUEST_ALIASES = ('presentation_request', 'pres_request', 'proof_request', 'request')
ATTACH_KEY = 'request_presentations~attach'
FORMAT_KEYS = ('indy', 'anoncreds', 'dif')


def b64_to_json(payload: str) -> Any:
    """
    Base64-decode then JSON-parse input payload, tolerating absent padding and the URL-safe alphabet.
    Raise DecodeError, carrying the underlying exception message, on failure.

    :param payload: base64 payload
    :return: parsed JSON
    """

    try:
        text = str(payload).strip()
        text += '=' * (-len(text) % 4)
        decoded = b64decode(text.replace('-', '+').replace('_', '/'), validate=True)
        return json.loads(decoded.decode('utf-8'))
    except (binascii.Error, UnicodeDecodeError, ValueError) as x_decode:
        LOGGER.debug('b64_to_json <!< cannot decode attachment payload: %s', x_decode)
        raise DecodeError('Cannot decode attachment payload: {}'.format(x_decode))


def decode_attachment(attach: Mapping) -> Any:
    """
    Return the content of a DIDComm attachment: its inline JSON content verbatim if present,
    otherwise its base64 payload decoded and parsed. Return None for an attachment carrying neither.

    Raise DecodeError on base64 payload that does not decode or parse.

    :param attach: attachment; e.g.,

    ::

        {
            "@id": "libindy-request-presentation-0",
            "mime-type": "application/json",
            "data": {
                "base64": "eyJuYW1lIjogIlByb29mIHJlcXVlc3QiLCAicmVxdWVzdGVkX2F0dHJpYnV0ZXMiOiB7fX0="
            }
        }

    :return: attachment content
    """

    LOGGER.debug('decode_attachment >>> attach: %s', attach)

    data = attach.get('data') if isinstance(attach, Mapping) else None
    if not isinstance(data, Mapping):
        data = attach if isinstance(attach, Mapping) else {}

    rv = None
    if data.get('json') is not None:
        rv = data['json']
    elif data.get('base64') is not None:
        rv = b64_to_json(data['base64'])

    LOGGER.debug('decode_attachment <<< %s', rv)
    return rv


def first_attachment(obj: Mapping) -> Mapping:
    """
    Return first element of object's request presentations attachment array, None for no such element.

    :param obj: candidate request object
    :return: first attachment
    """

    attachments = obj.get(ATTACH_KEY) if isinstance(obj, Mapping) else None
    if isinstance(attachments, list) and attachments:
        return attachments[0]
    return None


def _unwrap_format(obj: Any) -> Any:
    """
    Unwrap request nested under its sole format key (present-proof v2 by-format shape).
    """

    if isinstance(obj, Mapping) and len(obj) == 1:
        (key, value) = next(iter(obj.items()))
        if key in FORMAT_KEYS and isinstance(value, Mapping):
            return value
    return obj


def _locate_candidate(record: Mapping) -> Any:
    """
    Return first candidate request object within record: by-format request, then known aliases in order,
    then the record itself.
    """

    by_format = record.get('by_format')
    if isinstance(by_format, Mapping) and isinstance(by_format.get('pres_request'), Mapping):
        if by_format['pres_request']:
            return by_format['pres_request']
    for alias in REQUEST_ALIASES:
        if record.get(alias):
            return record[alias]
    return record


def locate_request(record: Mapping) -> dict:
    """
    Extract the canonical proof request object from a proof exchange record, which may carry it
    directly, under a known field name, or within a DIDComm attachment (inline JSON or base64).

    Raise MissingRequestError if the record holds no candidate request object, or DecodeError on
    an attachment that does not decode.

    :param record: proof exchange record; e.g.,

    ::

        {
            "pres_ex_id": "5ad1ddca-2b0c-4a3f-b0a3-9b2d3f3a2b1c",
            "state": "request-received",
            "pres_request": {
                "@type": "https://didcomm.org/present-proof/1.0/request-presentation",
                "request_presentations~attach": [
                    {
                        "@id": "libindy-request-presentation-0",
                        "mime-type": "application/json",
                        "data": {
                            "base64": "eyJyZXF1ZXN0ZWRfYXR0cmlidXRlcyI6IHt9fQ=="
                        }
                    }
                ]
            }
        }

    :return: canonical request object
    """

    LOGGER.debug('locate_request >>> record: %s', record)

    if not isinstance(record, Mapping) or not record:
        LOGGER.debug('locate_request <!< no request object in record %s', record)
        raise MissingRequestError('No proof request in record {}'.format(record))

    rv = _unwrap_format(_locate_candidate(record))

    attach = first_attachment(rv)
    if attach is not None:
        content = decode_attachment(attach)
        if content is not None:
            rv = _unwrap_format(content)

    if not isinstance(rv, Mapping) or not rv:
        LOGGER.debug('locate_request <!< no request object in record %s', record)
        raise MissingRequestError('No proof request in record {}'.format(record))

    LOGGER.debug('locate_request <<< %s', rv)
    return dict(rv)
