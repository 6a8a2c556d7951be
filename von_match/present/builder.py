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
from copy import deepcopy
from typing import Mapping, Union

from von_match.creds.index import CredentialIndex
from von_match.creds.model import StoredCredential
from von_match.error import BadOverride, EmptySelectionError, UnsatisfiableRequestError
from von_match.match.attribute import Requirement
from von_match.match.result import MatchResult
from von_match.request.model import DifProofRequest, IndyProofRequest, ProofFormat, ProofRequest


LOGGER = logging.getLogger(__name__)


class IndySpec:
    """
    Indy presentation specification: requested attributes and predicates mapping referents to
    credential selections, and self-attested attributes (always empty here).
    """

    def __init__(
            self,
            requested_attributes: Mapping[str, dict] = None,
            requested_predicates: Mapping[str, dict] = None,
            self_attested_attributes: Mapping[str, str] = None) -> None:
        """
        Initialize on requested attributes and predicates.

        :param requested_attributes: mapping from attribute referents to {'cred_id', 'revealed'[, 'timestamp']}
        :param requested_predicates: mapping from predicate referents to {'cred_id'[, 'timestamp']}
        :param self_attested_attributes: mapping from attribute referents to self-attested values
        """

        self._requested_attributes = OrderedDict(requested_attributes or {})
        self._requested_predicates = OrderedDict(requested_predicates or {})
        self._self_attested_attributes = OrderedDict(self_attested_attributes or {})

    @property
    def format(self) -> ProofFormat:
        return ProofFormat.INDY

    @property
    def requested_attributes(self) -> dict:
        return deepcopy(self._requested_attributes)

    @property
    def requested_predicates(self) -> dict:
        return deepcopy(self._requested_predicates)

    @property
    def self_attested_attributes(self) -> dict:
        return dict(self._self_attested_attributes)

    def to_dict(self) -> dict:
        """
        Return requested credentials structure for the agent's presentation submission; e.g.,

        ::

            {
                "requested_attributes": {
                    "17_legalname_uuid": {
                        "cred_id": "c15674a9-7321-440d-bbed-e1ac9273abd5",
                        "revealed": true
                    }
                },
                "requested_predicates": {
                    "17_score_GE_uuid": {
                        "cred_id": "c15674a9-7321-440d-bbed-e1ac9273abd5",
                        "timestamp": 1532448939
                    }
                },
                "self_attested_attributes": {}
            }

        :return: requested credentials dict
        """

        return {
            'requested_attributes': {k: dict(v) for (k, v) in self._requested_attributes.items()},
            'requested_predicates': {k: dict(v) for (k, v) in self._requested_predicates.items()},
            'self_attested_attributes': dict(self._self_attested_attributes)
        }

    def submission(self) -> dict:
        """
        Return present-proof v2 send-presentation body.

        :return: body keyed by format
        """

        return {'indy': self.to_dict()}

    def __eq__(self, other: 'IndySpec') -> bool:
        return isinstance(other, IndySpec) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return 'IndySpec({}, {}, {})'.format(
            dict(self._requested_attributes),
            dict(self._requested_predicates),
            dict(self._self_attested_attributes))


class DifSpec:
    """
    DIF presentation specification: record identifiers mapping input descriptor identifiers to credential identifiers.
    """

    def __init__(self, record_ids: Mapping[str, str] = None) -> None:
        """
        Initialize on record identifiers.

        :param record_ids: mapping from input descriptor identifiers to credential identifiers
        """

        self._record_ids = OrderedDict(record_ids or {})

    @property
    def format(self) -> ProofFormat:
        return ProofFormat.DIF

    @property
    def record_ids(self) -> dict:
        return dict(self._record_ids)

    def to_dict(self) -> dict:
        """
        Return DIF presentation specification; e.g.,

        ::

            {
                "record_ids": {
                    "citizenship_input_1": "6f0a1c8e5e3f4d3c9d1d7a5b2c3e4f5a"
                }
            }

        :return: dict on record ids
        """

        return {'record_ids': dict(self._record_ids)}

    def submission(self) -> dict:
        """
        Return present-proof v2 send-presentation body. The agent takes a list of record ids per descriptor.

        :return: body keyed by format
        """

        return {'dif': {'record_ids': {k: [v] for (k, v) in self._record_ids.items()}}}

    def __eq__(self, other: 'DifSpec') -> bool:
        return isinstance(other, DifSpec) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return 'DifSpec({})'.format(dict(self._record_ids))


PresentationSpec = Union[IndySpec, DifSpec]


def _timestamp(req: Requirement, cred: StoredCredential) -> int:
    """
    Return non-revocation interval end for requirement when credential is revocable, None otherwise.
    """

    interval = req.non_revoked or {}
    if interval.get('to') is not None and getattr(cred, 'revocable', False):
        return int(interval['to'])
    return None


def build_indy_spec(proof_req: IndyProofRequest, result: MatchResult, index: CredentialIndex = None) -> IndySpec:
    """
    Build indy presentation specification from match result, revealing every requested attribute.
    Given the credential index, add revocation state timestamp (non-revocation interval end) for
    each revocable credential.

    :param proof_req: indy proof request
    :param result: match result
    :param index: credential index, for revocation timestamps
    :return: indy presentation specification
    """

    assignments = result.assignments
    req_attrs = OrderedDict()
    for (referent, req) in proof_req.requested_attributes.items():
        if referent not in assignments:
            continue
        req_attrs[referent] = {'cred_id': assignments[referent], 'revealed': True}
        timestamp = _timestamp(req, index.get(assignments[referent])) if index is not None else None
        if timestamp is not None:
            req_attrs[referent]['timestamp'] = timestamp

    req_preds = OrderedDict()
    for (referent, req) in proof_req.requested_predicates.items():
        if referent not in assignments:
            continue
        req_preds[referent] = {'cred_id': assignments[referent]}
        timestamp = _timestamp(req, index.get(assignments[referent])) if index is not None else None
        if timestamp is not None:
            req_preds[referent]['timestamp'] = timestamp

    return IndySpec(req_attrs, req_preds, {})


def build_dif_spec(proof_req: DifProofRequest, result: MatchResult) -> DifSpec:
    """
    Build DIF presentation specification from match result.

    :param proof_req: DIF proof request
    :param result: match result
    :return: DIF presentation specification
    """

    assignments = result.assignments
    return DifSpec(OrderedDict(
        (d.id, assignments[d.id]) for d in proof_req.input_descriptors if d.id in assignments))


def build_presentation(
        proof_req: ProofRequest,
        result: MatchResult,
        index: CredentialIndex = None) -> PresentationSpec:
    """
    Build presentation specification from match result assigning a credential to every requirement
    of the proof request and to nothing else.

    Raise EmptySelectionError on match result with no assignments to requirements of the proof request,
    BadOverride on match result assigning requirements absent from the proof request, and
    UnsatisfiableRequestError on match result leaving any requirement of the proof request unassigned.

    :param proof_req: proof request that the match result answers
    :param result: match result
    :param index: credential index, for indy revocation timestamps
    :return: presentation specification of proof request's format
    """

    LOGGER.debug('build_presentation >>> proof_req: %s, result: %s', proof_req, result)

    req_ids = proof_req.requirement_ids
    assignments = result.assignments
    if not any(req_id in assignments for req_id in req_ids):
        LOGGER.debug('build_presentation <!< no assignments to present')
        raise EmptySelectionError('No credential assignments to present')

    extras = sorted(set(assignments) - set(req_ids))
    if extras:
        LOGGER.debug('build_presentation <!< assignments for requirements %s absent from request', extras)
        raise BadOverride('Assignments name requirements absent from proof request: {}'.format(extras))

    unsatisfied = result.unsatisfied | {req_id for req_id in req_ids if req_id not in assignments}
    if unsatisfied:
        LOGGER.debug('build_presentation <!< unsatisfied requirements %s', sorted(unsatisfied))
        raise UnsatisfiableRequestError(unsatisfied)

    if proof_req.format == ProofFormat.INDY:
        rv = build_indy_spec(proof_req, result, index)
    else:
        rv = build_dif_spec(proof_req, result)

    LOGGER.debug('build_presentation <<< %s', rv)
    return rv
