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

import pytest

from von_match.creds.index import CredentialIndex, to_stored_credential
from von_match.creds.model import IndyCred, W3cCred
from von_match.frill import Ink


def test_index(indy_creds, w3c_creds, ids):
    print(Ink.YELLOW('\n\n== Testing credential index build =='))

    index = CredentialIndex(indy_creds, w3c_creds)
    assert len(index) == 4
    assert [c.credential_id for c in index] == ['c-bc-reg', 'c-green', 'w-prc', 'w-degree']
    assert [c.credential_id for c in index.indy_creds()] == ['c-bc-reg', 'c-green']
    assert [c.credential_id for c in index.w3c_creds()] == ['w-prc', 'w-degree']
    assert index.dropped == 0
    assert 'c-green' in index
    assert 'c-nope' not in index
    assert index.get('c-nope') is None
    print('\n\n== 1 == Index holds credentials in listing order: {}'.format(index))

    green = index.get('c-green')
    assert isinstance(green, IndyCred)
    assert green.attribute_names == {'legalname', 'greenlevel', 'auditdate'}
    assert green.attrs['greenlevel'] == 'Silver'
    assert green.cred_def_id == ids['cred_def_id']['green']
    assert green.schema_id == ids['schema_id']['green']
    assert green.revocable
    assert not index.get('c-bc-reg').revocable
    print('\n\n== 2 == Indy credentials normalize as expected')

    prc = index.get('w-prc')
    assert isinstance(prc, W3cCred)
    assert prc.types == {'verifiablecredential', 'permanentresidentcard', ids['prc_uri'].lower()}
    assert prc.subject_fields == {'id', 'givenname', 'familyname', 'birthcountry'}
    assert prc.issuer == 'did:example:489398593'

    degree = index.get('w-degree')
    assert degree.types == {'verifiablecredential', 'universitydegreecredential'}
    assert degree.subject_fields == {'id', 'degree'}
    assert degree.issuer == 'did:example:76e12ec712ebc6f1c221ebfeb1f'
    print('\n\n== 3 == W3C credentials normalize as expected, flat or nested')

    assert len(CredentialIndex()) == 0
    assert len(CredentialIndex([], None)) == 0
    assert [c.credential_id for c in CredentialIndex({'results': w3c_creds})] == ['w-prc', 'w-degree']
    print('\n\n== 4 == Index builds on empty and paged listings')


def test_aliases():
    print(Ink.YELLOW('\n\n== Testing stored-credential record aliases =='))

    cred = to_stored_credential({'credential_id': 'x1', 'attributes': {'Legal Name': {'raw': 'A', 'encoded': '1'}}})
    assert cred == IndyCred('x1', attribute_names={'legalname'}, attrs={'legalname': 'A'})

    cred = to_stored_credential({'cred_id': 'x2', 'cred': {'attrs': [{'name': 'score', 'value': 7}]}})
    assert cred.credential_id == 'x2'
    assert cred.attrs == {'score': '7'}

    cred = to_stored_credential({'id': 'x3', 'attrs': ['name', 'age']})
    assert cred.attribute_names == {'name', 'age'}
    assert cred.attrs == {}

    cred = to_stored_credential({'referent': 'x4', 'record_id': 'ignored', 'attrs': {'name': 'Alice'}})
    assert cred.credential_id == 'x4'
    print('\n\n== 1 == Indy record aliases resolve as expected')

    cred = to_stored_credential({
        'credential': {
            'id': 'urn:uuid:3978344f-8596-4c3a-a978-8fcaba3903c5',
            'type': 'VerifiableCredential',
            'credentialSubject': [{'id': 'did:example:abc', 'alumniOf': 'x'}, {'name': 'y'}]
        }
    })
    assert cred == W3cCred(
        'urn:uuid:3978344f-8596-4c3a-a978-8fcaba3903c5',
        {'verifiablecredential'},
        {'id', 'alumniof', 'name'})

    cred = to_stored_credential({
        'record_id': 'x5',
        'cred_value': {'type': ['VerifiableCredential'], 'credentialSubject': {'givenName': 'JOHN'}},
        'schema_ids': ['https://example.org/examples/degree.json']
    })
    assert cred.types == {'verifiablecredential', 'https://example.org/examples/degree.json'}
    print('\n\n== 2 == W3C record aliases resolve as expected')


def test_drop(indy_creds, caplog):
    print(Ink.YELLOW('\n\n== Testing credential index drops =='))

    with caplog.at_level(logging.WARNING):
        index = CredentialIndex(
            indy_creds,
            [
                {'foo': 'bar'},
                {'referent': 'x-empty'},
                'junk',
                dict(indy_creds[1], attrs={'other': 'value'})
            ])
    assert [c.credential_id for c in index] == ['c-bc-reg', 'c-green']
    assert index.get('c-green').attribute_names == {'legalname', 'greenlevel', 'auditdate'}
    assert index.dropped == 4
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING and r.name == 'von_match.creds.index']
    assert len(warnings) == 4
    assert any('duplicate credential id c-green' in r.getMessage() for r in warnings)
    print('\n\n== 1 == Index drops unrecognized and duplicate records with warning')
