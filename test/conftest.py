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

import json
import logging

from base64 import b64encode

import pytest


logging.basicConfig(level=logging.WARNING, format='%(levelname)-8s | %(name)-12s | %(message)s')
logging.getLogger('test.conftest').setLevel(logging.INFO)
logging.getLogger('von_match').setLevel(logging.WARNING)


DID = 'Q4zqM7aXqm7gDQkUVLng9h'
S_ID = {
    'bc-reg': '{}:2:bc-reg:1.0'.format(DID),
    'green': '{}:2:green:1.0'.format(DID)
}
CD_ID = {
    'bc-reg': '{}:3:CL:18:tag'.format(DID),
    'green': '{}:3:CL:17:tag'.format(DID)
}
RR_ID = {
    'green': '{}:4:{}:CL_ACCUM:0'.format(DID, CD_ID['green'])
}
PRC_URI = 'https://w3id.org/citizenship#PermanentResidentCard'


def b64_json(obj) -> str:
    """
    Return base64 encoding of input object's JSON serialization, as DIDComm attachments carry it.
    """

    return b64encode(json.dumps(obj).encode()).decode()


@pytest.fixture
def ids():
    logger = logging.getLogger(__name__)
    logger.debug("ids: >>>")

    res = {'did': DID, 'schema_id': S_ID, 'cred_def_id': CD_ID, 'rev_reg_id': RR_ID, 'prc_uri': PRC_URI}

    logger.debug("ids: <<< res: %r", res)
    return res


@pytest.fixture
def indy_creds():
    logger = logging.getLogger(__name__)
    logger.debug("indy_creds: >>>")

    res = [
        {
            'referent': 'c-bc-reg',
            'attrs': {
                'legalName': 'Tart City',
                'busId': '11144444',
                'orgTypeId': '2',
                'employees': '70'
            },
            'schema_id': S_ID['bc-reg'],
            'cred_def_id': CD_ID['bc-reg'],
            'rev_reg_id': None,
            'cred_rev_id': None
        },
        {
            'referent': 'c-green',
            'attrs': {
                'legalName': 'Tart City',
                'greenLevel': 'Silver',
                'auditDate': '2018-07-30'
            },
            'schema_id': S_ID['green'],
            'cred_def_id': CD_ID['green'],
            'rev_reg_id': RR_ID['green'],
            'cred_rev_id': '48'
        }
    ]

    logger.debug("indy_creds: <<< res: %r", res)
    return res


@pytest.fixture
def w3c_creds():
    logger = logging.getLogger(__name__)
    logger.debug("w3c_creds: >>>")

    res = [
        {
            'record_id': 'w-prc',
            'cred_value': {
                '@context': ['https://www.w3.org/2018/credentials/v1', 'https://w3id.org/citizenship/v1'],
                'type': ['VerifiableCredential', 'PermanentResidentCard'],
                'issuer': 'did:example:489398593',
                'credentialSubject': {
                    'id': 'did:example:b34ca6cd37bbf23',
                    'givenName': 'JOHN',
                    'familyName': 'SMITH',
                    'birthCountry': 'Bahamas'
                }
            },
            'expanded_types': [PRC_URI]
        },
        {
            'record_id': 'w-degree',
            'cred_value': {
                'credential': {
                    '@context': ['https://www.w3.org/2018/credentials/v1'],
                    'type': ['VerifiableCredential', 'UniversityDegreeCredential'],
                    'issuer': {
                        'id': 'did:example:76e12ec712ebc6f1c221ebfeb1f'
                    },
                    'credentialSubject': {
                        'id': 'did:example:ebfeb1f712ebc6f1c276e12ec21',
                        'degree': {
                            'type': 'BachelorDegree',
                            'name': 'Bachelor of Science and Arts'
                        }
                    }
                }
            }
        }
    ]

    logger.debug("w3c_creds: <<< res: %r", res)
    return res


@pytest.fixture
def indy_request():
    logger = logging.getLogger(__name__)
    logger.debug("indy_request: >>>")

    res = {
        'name': 'proof-req',
        'version': '1.0',
        'nonce': '1234567890',
        'requested_attributes': {
            '17_legalname_uuid': {
                'name': 'legalName',
                'restrictions': [{'cred_def_id': CD_ID['green']}]
            },
            '18_busid_uuid': {
                'names': ['busId', 'orgTypeId']
            }
        },
        'requested_predicates': {
            '18_employees_GE_uuid': {
                'name': 'employees',
                'p_type': '>=',
                'p_value': 50
            }
        }
    }

    logger.debug("indy_request: <<< res: %r", res)
    return res


@pytest.fixture
def dif_request():
    logger = logging.getLogger(__name__)
    logger.debug("dif_request: >>>")

    res = {
        'options': {
            'challenge': '3fa85f64-5717-4562-b3fc-2c963f66afa7',
            'domain': '4jt78h47fh47'
        },
        'presentation_definition': {
            'id': '32f54163-7166-48f1-93d8-ff217bdb0654',
            'input_descriptors': [
                {
                    'id': 'citizenship_input_1',
                    'name': 'Permanent Resident Card',
                    'schema': [
                        {
                            'uri': PRC_URI
                        }
                    ],
                    'constraints': {
                        'fields': [
                            {
                                'path': ['$.credentialSubject.givenName']
                            }
                        ]
                    }
                },
                {
                    'id': 'degree_input_1',
                    'schema': [],
                    'constraints': {
                        'fields': [
                            {
                                'path': ['$.credentialSubject.degree', '$.vc.credentialSubject.degree']
                            },
                            {
                                'path': ['$.credentialSubject.gpa'],
                                'optional': True
                            }
                        ]
                    }
                }
            ]
        }
    }

    logger.debug("dif_request: <<< res: %r", res)
    return res


@pytest.fixture
def v1_record(indy_request):
    logger = logging.getLogger(__name__)
    logger.debug("v1_record: >>> indy_request: %r", indy_request)

    res = {
        'presentation_exchange_id': '5ad1ddca-2b0c-4a3f-b0a3-9b2d3f3a2b1c',
        'state': 'request_received',
        'role': 'prover',
        'pres_request': {
            '@type': 'https://didcomm.org/present-proof/1.0/request-presentation',
            '@id': 'a1c8e14b-8a2b-4b1f-8d3c-1c2a3b4c5d6e',
            'request_presentations~attach': [
                {
                    '@id': 'libindy-request-presentation-0',
                    'mime-type': 'application/json',
                    'data': {
                        'base64': b64_json(indy_request)
                    }
                }
            ]
        }
    }

    logger.debug("v1_record: <<< res: %r", res)
    return res


@pytest.fixture
def v2_record(dif_request):
    logger = logging.getLogger(__name__)
    logger.debug("v2_record: >>> dif_request: %r", dif_request)

    res = {
        'pres_ex_id': '9b8f0a4c-4d22-4a53-a2f1-8d4b0c6e7f10',
        'state': 'request-received',
        'role': 'prover',
        'by_format': {
            'pres_request': {
                'dif': dif_request
            }
        }
    }

    logger.debug("v2_record: <<< res: %r", res)
    return res
