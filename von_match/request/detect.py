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


import logging

from collections import OrderedDict
from typing import Any, Mapping

import jsonschema

from von_match.canon import canon, canon_set, field_path
from von_match.error import UnsupportedFormatError
from von_match.indytween import Predicate
from von_match.request.model import (
    AttributeRequirement,
    DifProofRequest,
    IndyProofRequest,
    InputDescriptor,
    PredicateRequirement,
    ProofFormat,
    ProofRequest)
from von_match.request.normalize import decode_attachment, first_attachment


LOGGER = logging.getLogger(__name__)

DIF_KEYS = ('presentation_definition', 'input_descriptors')
INDY_KEYS = ('requested_attributes', 'requested_predicates')

REQUEST_JSON_SCHEMA = {
    ProofFormat.INDY: {
        '$schema': 'http://json-schema.org/draft-04/schema',
        'type': 'object',
        'properties': {
            'requested_attributes': {
                'type': 'object',
                'additionalProperties': {
                    'type': 'object',
                    'properties': {
                        'name': {
                            'type': 'string'
                        },
                        'names': {
                            'type': 'array',
                            'items': {
                                'type': 'string'
                            }
                        },
                        'restrictions': {
                            'type': 'array',
                            'items': {
                                'type': 'object'
                            }
                        },
                        'non_revoked': {
                            'type': ['object', 'null']
                        }
                    }
                }
            },
            'requested_predicates': {
                'type': 'object',
                'additionalProperties': {
                    'type': 'object',
                    'properties': {
                        'name': {
                            'type': 'string'
                        },
                        'p_type': {
                            'type': 'string'
                        },
                        'p_value': {
                            'type': ['integer', 'string']
                        },
                        'restrictions': {
                            'type': 'array',
                            'items': {
                                'type': 'object'
                            }
                        },
                        'non_revoked': {
                            'type': ['object', 'null']
                        }
                    },
                    'required': ['name', 'p_type', 'p_value']
                }
            },
            'non_revoked': {
                'type': ['object', 'null']
            }
        }
    },
    ProofFormat.DIF: {
        '$schema': 'http://json-schema.org/draft-04/schema',
        'type': 'object',
        'properties': {
            'input_descriptors': {
                'type': 'array',
                'items': {
                    'type': 'object',
                    'properties': {
                        'id': {
                            'type': 'string',
                            'minLength': 1
                        },
                        'name': {
                            'type': ['string', 'null']
                        },
                        'purpose': {
                            'type': ['string', 'null']
                        },
                        'schema': {
                            'type': ['array', 'object']
                        },
                        'constraints': {
                            'type': 'object',
                            'properties': {
                                'fields': {
                                    'type': 'array',
                                    'items': {
                                        'type': 'object',
                                        'properties': {
                                            'path': {
                                                'type': 'array',
                                                'items': {
                                                    'type': 'string'
                                                },
                                                'minItems': 1
                                            },
                                            'optional': {
                                                'type': 'boolean'
                                            }
                                        },
                                        'required': ['path']
                                    }
                                }
                            }
                        }
                    },
                    'required': ['id']
                }
            }
        },
        'required': ['input_descriptors']
    }
}


def _has_any(obj: Any, keys: tuple) -> bool:
    return isinstance(obj, Mapping) and any(k in obj for k in keys)


def _attachment_payload(request: Mapping) -> Any:
    attach = first_attachment(request)
    return None if attach is None else decode_attachment(attach)


def detect_format(request: Mapping) -> ProofFormat:
    """
    Classify canonical request object as indy or DIF presentation exchange. First match wins:

      * a 'formats' element whose 'format' contains 'dif' (any case): DIF
      * presentation_definition or input_descriptors in object or in its decoded attachment payload: DIF
      * requested_attributes or requested_predicates in object or in its decoded attachment payload: indy.

    Raise UnsupportedFormatError for a request of neither format, DecodeError for an attachment
    payload that does not decode.

    :param request: canonical request object, as locate_request() returns
    :return: proof format
    """

    LOGGER.debug('detect_format >>> request: %s', request)

    if not isinstance(request, Mapping):
        LOGGER.debug('detect_format <!< request %s is not an object', request)
        raise UnsupportedFormatError('Proof request {} is not an object'.format(request))

    formats = request.get('formats')
    if isinstance(formats, list):
        for fmt in formats:
            if isinstance(fmt, Mapping) and 'dif' in str(fmt.get('format', '')).lower():
                LOGGER.debug('detect_format <<< %s', ProofFormat.DIF)
                return ProofFormat.DIF

    payload = _attachment_payload(request)

    rv = None
    if _has_any(request, DIF_KEYS) or _has_any(payload, DIF_KEYS):
        rv = ProofFormat.DIF
    elif _has_any(request, INDY_KEYS) or _has_any(payload, INDY_KEYS):
        rv = ProofFormat.INDY
    else:
        LOGGER.debug('detect_format <!< request %s is neither indy nor DIF', request)
        raise UnsupportedFormatError('Proof request is neither indy nor DIF: {}'.format(sorted(request)))

    LOGGER.debug('detect_format <<< %s', rv)
    return rv


def _content(request: Mapping) -> Mapping:
    """
    Return request content bearing the format signal: the request itself, or its decoded attachment payload.
    """

    if _has_any(request, DIF_KEYS + INDY_KEYS):
        return request
    payload = _attachment_payload(request)
    return payload if isinstance(payload, Mapping) else request


def _validate(fmt: ProofFormat, content: Mapping) -> None:
    try:
        jsonschema.validate(content, REQUEST_JSON_SCHEMA[fmt])
    except jsonschema.ValidationError as x_valid:
        LOGGER.debug('_validate <!< malformed %s proof request: %s', fmt.value, x_valid.message)
        raise UnsupportedFormatError('Malformed {} proof request: {}'.format(fmt.value, x_valid.message))


def _restrictions(spec: Mapping) -> tuple:
    return tuple(dict(r) for r in spec.get('restrictions') or ())


def parse_indy(content: Mapping) -> IndyProofRequest:
    """
    Parse indy proof request content into typed proof request. Requested attributes take
    'names' or single 'name'; predicate types accept math (e.g., '>=') or fortran (e.g., 'GE') notation;
    request-level non-revocation interval applies to items without their own.

    Raise UnsupportedFormatError on malformed content, or on a referent naming both a requested attribute
    and a requested predicate.

    :param content: indy proof request content
    :return: indy proof request
    """

    _validate(ProofFormat.INDY, content)
    dflt_interval = content.get('non_revoked') or None

    req_attrs = OrderedDict()
    for (referent, spec) in (content.get('requested_attributes') or {}).items():
        names = list(spec.get('names') or []) + ([spec['name']] if spec.get('name') else [])
        names = frozenset(canon(n) for n in names if n)
        if not names:
            LOGGER.debug('parse_indy <!< requested attribute %s has no name', referent)
            raise UnsupportedFormatError('Requested attribute {} has neither name nor names'.format(referent))
        req_attrs[referent] = AttributeRequirement(
            names,
            _restrictions(spec),
            spec.get('non_revoked') or dflt_interval)

    req_preds = OrderedDict()
    for (referent, spec) in (content.get('requested_predicates') or {}).items():
        if referent in req_attrs:
            LOGGER.debug('parse_indy <!< referent %s names both attribute and predicate', referent)
            raise UnsupportedFormatError('Referent {} names both requested attribute and predicate'.format(referent))
        pred = Predicate.get(spec['p_type'])
        try:
            p_value = Predicate.to_int(spec['p_value'])
        except ValueError:
            p_value = None
        if pred is None or p_value is None or not spec['name']:
            LOGGER.debug('parse_indy <!< bad requested predicate %s: %s', referent, spec)
            raise UnsupportedFormatError('Bad requested predicate {}: {}'.format(referent, spec))
        req_preds[referent] = PredicateRequirement(
            canon(spec['name']),
            pred,
            p_value,
            _restrictions(spec),
            spec.get('non_revoked') or dflt_interval)

    return IndyProofRequest(req_attrs, req_preds)


def schema_uris(schema: Any) -> frozenset:
    """
    Return lower-cased schema URIs from input descriptor schema specification: a list of {'uri': ...}
    objects or of strings, or an object with a 'oneof_filter' list of such lists.

    :param schema: input descriptor schema specification
    :return: frozenset of lower-cased schema URIs
    """

    if isinstance(schema, Mapping):
        groups = schema.get('oneof_filter') or []
        if isinstance(schema.get('uri'), str):
            groups = [[schema]]
        return frozenset().union(*[schema_uris(g) for g in groups])

    uris = []
    for item in schema or []:
        if isinstance(item, Mapping):
            uris.append(item.get('uri'))
        elif isinstance(item, list):  # nested group, as in oneof_filter
            uris.extend(schema_uris(item))
        else:
            uris.append(item)
    return canon_set(uris)


def parse_dif(content: Mapping) -> DifProofRequest:
    """
    Parse DIF presentation exchange request content into typed proof request. Each required field
    contributes the path segments of its first path; fields marked optional contribute nothing.

    Raise UnsupportedFormatError on malformed content, repeated descriptor identifiers, or a required field
    path that does not parse as JSONPath naming a field.

    :param content: DIF request content, carrying input descriptors at top level or within presentation_definition
    :return: DIF proof request
    """

    pres_def = content.get('presentation_definition')
    if isinstance(pres_def, Mapping):
        content = pres_def
    _validate(ProofFormat.DIF, content)

    descriptors = []
    seen = set()
    for spec in content['input_descriptors']:
        if spec['id'] in seen:
            LOGGER.debug('parse_dif <!< repeated input descriptor id %s', spec['id'])
            raise UnsupportedFormatError('Repeated input descriptor id {}'.format(spec['id']))
        seen.add(spec['id'])
        fields = [
            field_path(f['path'][0])
            for f in (spec.get('constraints') or {}).get('fields') or []
            if not f.get('optional', False)
        ]
        descriptors.append(InputDescriptor(
            spec['id'],
            spec.get('name'),
            spec.get('purpose'),
            schema_uris(spec.get('schema')),
            fields))

    return DifProofRequest(descriptors)


def parse_request(request: Mapping, fmt: ProofFormat = None) -> ProofRequest:
    """
    Build typed proof request from canonical request object.

    Raise UnsupportedFormatError for request of neither format or malformed in its format.

    :param request: canonical request object, as locate_request() returns
    :param fmt: proof format if already detected
    :return: indy or DIF proof request
    """

    LOGGER.debug('parse_request >>> request: %s, fmt: %s', request, fmt)

    fmt = fmt or detect_format(request)
    content = _content(request)
    rv = parse_dif(content) if fmt == ProofFormat.DIF else parse_indy(content)

    LOGGER.debug('parse_request <<< %s', rv)
    return rv
