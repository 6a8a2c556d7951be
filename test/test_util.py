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

import pytest

from von_match.creds.model import IndyCred
from von_match.frill import Ink
from von_match.indytween import Predicate, Restriction
from von_match.util import (
    cred_def_id2issuer_did,
    ok_cred_def_id,
    ok_schema_id,
    schema_key,
    SchemaKey)


def test_ids():
    print(Ink.YELLOW('\n\n== Testing Identifier Checks =='))

    assert ok_schema_id('Q4zqM7aXqm7gDQkUVLng9h:2:bc-reg:1.0')
    assert not ok_schema_id('Q4zqM7aXqm7gDQkUVLng9h:3:bc-reg:1.0')
    assert not ok_schema_id('Q4zqM7aXqm7gDQkUVLng9h::bc-reg:1.0')
    assert not ok_schema_id('Q4zqM7aXqm7gDQkUVLng9h:bc-reg:1.0')
    assert not ok_schema_id('Q4zqM7aXqm7gDQkUVLng9h:2:1.0')
    assert not ok_schema_id('Q4zqM7aXqm7gDQkUVLng9I:2:bc-reg:1.0')
    assert not ok_schema_id(None)
    assert schema_key('Q4zqM7aXqm7gDQkUVLng9h:2:bc-reg:1.0') == SchemaKey('Q4zqM7aXqm7gDQkUVLng9h', 'bc-reg', '1.0')
    print('\n\n== 1 == Schema identifier checks pass OK')

    assert ok_cred_def_id('Q4zqM7aXqm7gDQkUVLng9h:3:CL:18:tag')
    assert ok_cred_def_id('Q4zqM7aXqm7gDQkUVLng9h:3:CL:18:tag', 'Q4zqM7aXqm7gDQkUVLng9h')
    assert not ok_cred_def_id('Q4zqM7aXqm7gDQkUVLng9h:3:CL:18:tag', 'Xxxxxxxxxxxxxxxxxxxxxx')
    assert ok_cred_def_id('Q4zqM7aXqm7gDQkUVLng9h:3:CL:18')  # protocol 1.3
    assert not ok_cred_def_id('Q4zqM7aXqm7gDQkUVLng9h:4:CL:18:0')
    assert not ok_cred_def_id('Q4zqM7aXqm7gDQkUVLng9h:3:CL:18z:tag')
    assert cred_def_id2issuer_did('Q4zqM7aXqm7gDQkUVLng9h:3:CL:18:tag') == 'Q4zqM7aXqm7gDQkUVLng9h'
    assert cred_def_id2issuer_did('not-a-cred-def-id') is None
    print('\n\n== 2 == Credential definition identifier checks pass OK')


def test_restrictions(ids):
    print(Ink.YELLOW('\n\n== Testing indy restrictions =='))

    cred = IndyCred(
        'c-green',
        ids['cred_def_id']['green'],
        ids['schema_id']['green'],
        ['legalname', 'greenlevel'],
        {'legalname': 'Tart City', 'greenlevel': 'Silver'})

    assert Restriction.get('cred_def_id') == Restriction.CRED_DEF_ID
    assert Restriction.get('SCHEMA_NAME') == Restriction.SCHEMA_NAME
    assert Restriction.get('get') is None
    assert Restriction.get('attr::legalname::value') is None
    print('\n\n== 1 == Restriction lookup by specifier works as expected')

    assert Restriction.CRED_DEF_ID.applies(cred, ids['cred_def_id']['green'])
    assert not Restriction.CRED_DEF_ID.applies(cred, ids['cred_def_id']['bc-reg'])
    assert Restriction.SCHEMA_ID.applies(cred, ids['schema_id']['green'])
    assert Restriction.SCHEMA_NAME.applies(cred, 'green')
    assert Restriction.SCHEMA_VERSION.applies(cred, '1.0')
    assert Restriction.SCHEMA_ISSUER_DID.applies(cred, ids['did'])
    assert Restriction.ISSUER_DID.applies(cred, ids['did'])
    assert not Restriction.ISSUER_DID.applies(cred, 'Xxxxxxxxxxxxxxxxxxxxxx')
    print('\n\n== 2 == Restrictions apply to indy credentials as expected')

    assert Restriction.all_apply_dict(cred, {})
    assert Restriction.all_apply_dict(cred, {'cred_def_id': ids['cred_def_id']['green'], 'schema_name': 'green'})
    assert Restriction.all_apply_dict(cred, {'schema_name': 'green', 'attr::legalname::marker': '1'})
    assert not Restriction.all_apply_dict(cred, {'cred_def_id': ids['cred_def_id']['green'], 'schema_name': 'bc-reg'})
    print('\n\n== 3 == Restriction dicts apply to indy credentials as expected')


def test_predicates():
    print(Ink.YELLOW('\n\n== Testing indy predicates =='))

    assert Predicate.get('>=') == Predicate.GE
    assert Predicate.get('GE') == Predicate.GE
    assert Predicate.get('ge') == Predicate.GE
    assert Predicate.get('$lt') == Predicate.LT
    assert Predicate.get('<=') == Predicate.LE
    assert Predicate.get('GT') == Predicate.GT
    assert Predicate.get('==') is None
    print('\n\n== 1 == Predicate lookup by relation works as expected')

    assert Predicate.to_int(True) == 1
    assert Predicate.to_int('-12') == -12
    assert Predicate.to_int(50) == 50
    with pytest.raises(ValueError):
        Predicate.to_int('1.5')
    print('\n\n== 2 == Predicate argument coercion works as expected')

    assert Predicate.GE.holds('70', 50)
    assert Predicate.GE.holds('50', 50)
    assert not Predicate.GT.holds('50', 50)
    assert Predicate.LT.holds('49', 50)
    assert Predicate.LE.holds(50, 50)
    assert not Predicate.GE.holds('Silver', 50)
    assert not Predicate.GE.holds(None, 50)
    print('\n\n== 3 == Predicates hold as expected')
