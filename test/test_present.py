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

from collections import OrderedDict

import pytest

from von_match.creds.index import CredentialIndex
from von_match.error import BadOverride, EmptySelectionError, ErrorCode, UnsatisfiableRequestError
from von_match.frill import Ink
from von_match.match.attribute import AttributeMatcher
from von_match.match.descriptor import DescriptorMatcher
from von_match.match.result import MatchResult
from von_match.present.builder import DifSpec, IndySpec, build_presentation
from von_match.request.detect import parse_request
from von_match.request.model import ProofFormat


def test_indy_spec(indy_creds, indy_request):
    print(Ink.YELLOW('\n\n== Testing indy presentation specification =='))

    proof_req = parse_request(indy_request)
    index = CredentialIndex(indy_creds)
    result = AttributeMatcher(index).match(proof_req)

    spec = build_presentation(proof_req, result, index)
    assert isinstance(spec, IndySpec)
    assert spec.format == ProofFormat.INDY
    assert spec.to_dict() == {
        'requested_attributes': {
            '17_legalname_uuid': {'cred_id': 'c-green', 'revealed': True},
            '18_busid_uuid': {'cred_id': 'c-bc-reg', 'revealed': True}
        },
        'requested_predicates': {
            '18_employees_GE_uuid': {'cred_id': 'c-bc-reg'}
        },
        'self_attested_attributes': {}
    }
    assert spec.submission() == {'indy': spec.to_dict()}
    assert build_presentation(proof_req, result) == spec
    print('\n\n== 1 == Indy presentation specification builds as expected: {}'.format(spec))

    proof_req = parse_request(dict(indy_request, non_revoked={'from': 1532448000, 'to': 1532448939}))
    result = AttributeMatcher(index).match(proof_req)
    spec = build_presentation(proof_req, result, index)
    assert spec.requested_attributes['17_legalname_uuid'] == {
        'cred_id': 'c-green',
        'revealed': True,
        'timestamp': 1532448939
    }
    assert 'timestamp' not in spec.requested_attributes['18_busid_uuid']
    assert 'timestamp' not in spec.requested_predicates['18_employees_GE_uuid']
    assert 'timestamp' not in build_presentation(proof_req, result).requested_attributes['17_legalname_uuid']
    print('\n\n== 2 == Revocable credentials carry non-revocation timestamp')

    spec.requested_attributes['17_legalname_uuid']['revealed'] = False
    assert spec.requested_attributes['17_legalname_uuid']['revealed']
    print('\n\n== 3 == Indy presentation specification is immutable through its accessors')


def test_dif_spec(w3c_creds, dif_request):
    print(Ink.YELLOW('\n\n== Testing DIF presentation specification =='))

    proof_req = parse_request(dif_request)
    index = CredentialIndex(w3c_creds)
    spec = build_presentation(proof_req, DescriptorMatcher(index).match(proof_req), index)
    assert isinstance(spec, DifSpec)
    assert spec.format == ProofFormat.DIF
    assert spec == DifSpec(OrderedDict([('citizenship_input_1', 'w-prc'), ('degree_input_1', 'w-degree')]))
    assert spec.to_dict() == {'record_ids': {'citizenship_input_1': 'w-prc', 'degree_input_1': 'w-degree'}}
    assert spec.submission() == {
        'dif': {
            'record_ids': {
                'citizenship_input_1': ['w-prc'],
                'degree_input_1': ['w-degree']
            }
        }
    }
    print('\n\n== 1 == DIF presentation specification builds as expected: {}'.format(spec))


def test_build_errors(indy_request):
    print(Ink.YELLOW('\n\n== Testing presentation specification errors =='))

    proof_req = parse_request(indy_request)

    for result in (MatchResult(), MatchResult({}, ['18_busid_uuid'])):
        with pytest.raises(EmptySelectionError) as x_empty:
            build_presentation(proof_req, result)
        assert x_empty.value.error_code == ErrorCode.EmptySelection
    print('\n\n== 1 == Empty selection raises EmptySelectionError')

    with pytest.raises(UnsatisfiableRequestError) as x_unsat:
        build_presentation(
            proof_req,
            MatchResult({'17_legalname_uuid': 'c-green'}, ['18_employees_GE_uuid', '18_busid_uuid']))
    assert x_unsat.value.unsatisfied == ['18_busid_uuid', '18_employees_GE_uuid']
    assert x_unsat.value.error_code == ErrorCode.UnsatisfiableRequest
    assert str(x_unsat.value) == '({}) No matching credential for 18_busid_uuid, 18_employees_GE_uuid'.format(
        ErrorCode.UnsatisfiableRequest)
    print('\n\n== 2 == Partial match raises UnsatisfiableRequestError listing unsatisfied referents')

    proof_req = parse_request({'requested_attributes': {'a1': {'name': 'legalName'}}})
    with pytest.raises(EmptySelectionError):
        build_presentation(proof_req, MatchResult({'zzz': 'c-green'}, []))
    print('\n\n== 3 == Assignments only to requirements absent from request raise EmptySelectionError')

    with pytest.raises(BadOverride) as x_extra:
        build_presentation(proof_req, MatchResult({'a1': 'c-green', 'zzz': 'c-green'}, []))
    assert x_extra.value.error_code == ErrorCode.BadOverride
    print('\n\n== 4 == Assignments to requirements absent from request raise BadOverride')

    proof_req = parse_request({'requested_attributes': {'a1': {'name': 'legalName'}, 'a2': {'name': 'greenLevel'}}})
    with pytest.raises(UnsatisfiableRequestError) as x_unsat:
        build_presentation(proof_req, MatchResult({'a1': 'c-green'}, []))
    assert x_unsat.value.unsatisfied == ['a2']
    print('\n\n== 5 == Requirements missing from assignments raise UnsatisfiableRequestError')
