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
from typing import Any, Iterable, Iterator, Mapping, Tuple

from von_match.canon import canon, canon_set, raw
from von_match.creds.model import IndyCred, StoredCredential, W3cCred


LOGGER = logging.getLogger(__name__)

CRED_ID_KEYS = ('referent', 'credential_id', 'cred_id', 'record_id', 'id')
ATTR_KEYS = ('attrs', 'attributes')
SUBJECT_KEYS = ('credentialSubject', 'subject')
TYPE_KEYS = ('type', '@type')


def _first(record: Mapping, keys: Iterable[str]) -> Any:
    """
    Return value of first key present with a non-empty value in input mapping, None for none.
    """

    for key in keys:
        value = record.get(key)
        if value not in (None, '', [], {}):
            return value
    return None


def _as_list(value: Any) -> list:
    if value is None:
        return []
    return list(value) if isinstance(value, (list, tuple, set, frozenset)) else [value]


def cred_payload(record: Mapping) -> Mapping:
    """
    Return the credential payload of a stored-credential record: the first mapping among
    cred_value.credential, cred_value, credential, and the record itself.

    :param record: stored-credential record
    :return: credential payload
    """

    cred_value = record.get('cred_value')
    if isinstance(cred_value, Mapping):
        if isinstance(cred_value.get('credential'), Mapping):
            return cred_value['credential']
        return cred_value
    if isinstance(record.get('credential'), Mapping):
        return record['credential']
    if isinstance(record.get('cred'), Mapping):
        return record['cred']
    return record


def cred_id(record: Mapping, payload: Mapping = None) -> str:
    """
    Resolve the credential identifier of a stored-credential record, trying in order
    referent, credential_id, cred_id, record_id, id on the record and then on its payload.

    :param record: stored-credential record
    :param payload: credential payload, if already resolved
    :return: credential identifier, None if the record carries none
    """

    rv = _first(record, CRED_ID_KEYS)
    if rv is None and payload is not None and payload is not record:
        rv = _first(payload, CRED_ID_KEYS)
    return None if rv is None else str(rv)


def attr_values(attrs: Any) -> dict:
    """
    Reduce an indy attribute structure to a dict mapping canonical attribute names to raw values.
    Accept a dict mapping names to raw values or to {'raw': ..., 'encoded': ...} dicts, or a
    sequence of names or of {'name': ..., 'value': ...} dicts (credential preview style).
    Names without values map to None.

    :param attrs: indy attribute structure from stored-credential record
    :return: dict mapping canonical attribute names to raw values
    """

    rv = {}
    if isinstance(attrs, Mapping):
        for (name, value) in attrs.items():
            if isinstance(value, Mapping) and 'raw' in value:
                value = value['raw']
            rv[canon(str(name))] = None if value is None else raw(value)
    else:
        for attr in _as_list(attrs):
            if isinstance(attr, Mapping) and attr.get('name'):
                rv[canon(str(attr['name']))] = raw(attr.get('value')) if 'value' in attr else None
            elif isinstance(attr, str) and attr:
                rv[canon(attr)] = None
    return rv


def subject_fields(subject: Any) -> frozenset:
    """
    Return the lower-cased field names of a credentialSubject, which may be one object or a list thereof.

    :param subject: credential subject
    :return: frozenset of lower-cased field names
    """

    return canon_set(k for s in _as_list(subject) if isinstance(s, Mapping) for k in s)


def issuer_id(issuer: Any) -> str:
    """
    Return issuer identifier from W3C issuer, which may be a string or an object with an id.

    :param issuer: W3C issuer
    :return: issuer identifier, None for none
    """

    if isinstance(issuer, Mapping):
        issuer = issuer.get('id')
    return None if issuer is None else str(issuer)


def to_stored_credential(record: Mapping) -> StoredCredential:
    """
    Normalize one stored-credential record, indy flat attribute record or W3C record,
    to a stored credential. Return None for a record that yields no credential identifier,
    or neither attributes nor credential subject and types.

    :param record: stored-credential record as agent credential listing returns it; e.g.,

    ::

        {
            "referent": "c15674a9-7321-440d-bbed-e1ac9273abd5",
            "attrs": {
                "legalName": "Tart City",
                "greenLevel": "Silver"
            },
            "schema_id": "WgWxqztrNooG92RXvxSTWv:2:green:1.0",
            "cred_def_id": "WgWxqztrNooG92RXvxSTWv:3:CL:17:tag",
            "rev_reg_id": null,
            "cred_rev_id": null
        }

    or

    ::

        {
            "record_id": "6f0a1c8e5e3f4d3c9d1d7a5b2c3e4f5a",
            "cred_value": {
                "@context": ["https://www.w3.org/2018/credentials/v1"],
                "type": ["VerifiableCredential", "PermanentResidentCard"],
                "issuer": "did:example:489398593",
                "credentialSubject": {
                    "givenName": "JOHN",
                    "familyName": "SMITH"
                }
            },
            "expanded_types": ["https://w3id.org/citizenship#PermanentResidentCard"]
        }

    :return: stored credential, or None
    """

    if not isinstance(record, Mapping):
        return None

    payload = cred_payload(record)
    c_id = cred_id(record, payload)
    if c_id is None:
        return None

    attrs = _first(payload, ATTR_KEYS)
    if attrs is None and payload is not record:
        attrs = _first(record, ATTR_KEYS)
    if attrs is not None:
        values = attr_values(attrs)
        if values:
            return IndyCred(
                c_id,
                payload.get('cred_def_id') or record.get('cred_def_id'),
                payload.get('schema_id') or record.get('schema_id'),
                frozenset(values),
                {k: v for (k, v) in values.items() if v is not None},
                payload.get('rev_reg_id') or record.get('rev_reg_id'),
                payload.get('cred_rev_id') or record.get('cred_rev_id'))

    fields = subject_fields(_first(payload, SUBJECT_KEYS))
    types = canon_set(
        _as_list(_first(payload, TYPE_KEYS))
        + _as_list(record.get('expanded_types'))
        + _as_list(record.get('schema_ids')))
    if fields or types:
        return W3cCred(c_id, types, fields, issuer_id(payload.get('issuer') or record.get('issuer_id')))

    return None


class CredentialIndex:
    """
    Holder's stored credentials, normalized once from heterogeneous agent listings
    (indy-format and W3C-format) into indy and W3C stored credentials, keyed by credential identifier
    and retaining listing order.
    """

    def __init__(self, *listings: Iterable[Mapping]) -> None:
        """
        Initialize on one or more stored-credential listings. Drop, with a warning, any record
        that does not normalize or that repeats a credential identifier already indexed.

        :param listings: sequences of stored-credential records, as agent credential listings return them;
            each listing may also be a dict with its records under 'results'
        """

        LOGGER.debug('CredentialIndex.__init__ >>> listings: %s', listings)

        self._creds = OrderedDict()
        self._dropped = 0
        for listing in listings:
            if isinstance(listing, Mapping):
                listing = listing.get('results', [])
            for record in listing or []:
                cred = to_stored_credential(record)
                if cred is None:
                    LOGGER.warning('CredentialIndex dropping unrecognized stored-credential record %s', record)
                    self._dropped += 1
                elif cred.credential_id in self._creds:
                    LOGGER.warning('CredentialIndex dropping duplicate credential id %s', cred.credential_id)
                    self._dropped += 1
                else:
                    self._creds[cred.credential_id] = cred

        LOGGER.debug('CredentialIndex.__init__ <<< indexed %s, dropped %s', len(self._creds), self._dropped)

    @property
    def dropped(self) -> int:
        """
        Accessor for count of dropped records.

        :return: number of records dropped at index build
        """

        return self._dropped

    def get(self, credential_id: str) -> StoredCredential:
        """
        Return stored credential by credential identifier, None for no such credential.

        :param credential_id: credential identifier
        :return: stored credential
        """

        return self._creds.get(credential_id)

    def indy_creds(self) -> Tuple[IndyCred, ...]:
        """
        Return indy credentials in index order.
        """

        return tuple(c for c in self._creds.values() if isinstance(c, IndyCred))

    def w3c_creds(self) -> Tuple[W3cCred, ...]:
        """
        Return W3C credentials in index order.
        """

        return tuple(c for c in self._creds.values() if isinstance(c, W3cCred))

    def __iter__(self) -> Iterator[StoredCredential]:
        return iter(self._creds.values())

    def __len__(self) -> int:
        return len(self._creds)

    def __contains__(self, credential_id: str) -> bool:
        return credential_id in self._creds

    def __repr__(self) -> str:
        """
        Return representation.

        :return: string representation
        """

        return 'CredentialIndex({})'.format(list(self._creds.values()))

