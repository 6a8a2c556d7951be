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
from typing import Iterable, Mapping, Union

from von_match.creds.index import CredentialIndex
from von_match.creds.model import IndyCred, W3cCred
from von_match.error import BadOverride, JSONValidation
from von_match.request.model import ProofFormat, ProofRequest
from von_match.validcfg import validate_config


LOGGER = logging.getLogger(__name__)


class MatchResult:
    """
    Outcome of matching a proof request against a credential index: assignments mapping requirement
    identifiers (referents or input descriptor identifiers) to credential identifiers, in request order,
    and the set of requirement identifiers without matching credential.
    """

    def __init__(self, assignments: Mapping[str, str] = None, unsatisfied: Iterable[str] = None) -> None:
        """
        Initialize on assignments and unsatisfied requirement identifiers.

        :param assignments: mapping from requirement identifiers to credential identifiers
        :param unsatisfied: requirement identifiers without matching credential
        """

        self._assignments = OrderedDict(assignments or {})
        self._unsatisfied = frozenset(unsatisfied or ())

    @property
    def assignments(self) -> OrderedDict:
        """
        Accessor for assignments

        :return: mapping from requirement identifiers to credential identifiers
        """

        return OrderedDict(self._assignments)

    @property
    def unsatisfied(self) -> frozenset:
        """
        Accessor for unsatisfied requirement identifiers

        :return: unsatisfied requirement identifiers
        """

        return self._unsatisfied

    @property
    def can_fulfill(self) -> bool:
        """
        Whether every requirement has an assignment.

        :return: whether result is a complete match
        """

        return not self._unsatisfied

    @property
    def requirement_ids(self) -> frozenset:
        """
        Return all requirement identifiers that the result covers, assigned or not.

        :return: union of assigned and unsatisfied requirement identifiers
        """

        return frozenset(self._assignments) | self._unsatisfied

    def to_dict(self) -> dict:
        """
        Return dict representation for display.

        :return: dict with assignments and (sorted) unsatisfied requirement identifiers
        """

        return {
            'assignments': dict(self._assignments),
            'unsatisfied': sorted(self._unsatisfied),
            'can_fulfill': self.can_fulfill
        }

    def __eq__(self, other: 'MatchResult') -> bool:
        """
        Equivalence operator. Two MatchResults are equivalent when their assignments and unsatisfied sets are.

        :param other: MatchResult to test for equivalence
        :return: whether MatchResults are equivalent
        """

        return (
            isinstance(other, MatchResult)
            and list(self._assignments.items()) == list(other._assignments.items())
            and self._unsatisfied == other._unsatisfied)

    def __repr__(self) -> str:
        """
        Return representation.

        :return: string representation evaluating to construction call
        """

        return 'MatchResult({}, {})'.format(dict(self._assignments), set(self._unsatisfied))


def check_override(
        proof_req: ProofRequest,
        index: CredentialIndex,
        override: Union[Mapping[str, str], MatchResult] = None) -> OrderedDict:
    """
    Validate a human override of assignments against proof request and credential index; return its
    assignments in request order.

    Raise BadOverride for override naming a requirement absent from the request, a credential absent
    from the index, a credential of the wrong kind for the request format, or (for DIF requests)
    a credential repeated across input descriptors.

    :param proof_req: proof request
    :param index: credential index
    :param override: mapping from requirement identifiers to credential identifiers, or a prior MatchResult
    :return: ordered mapping from requirement identifiers to credential identifiers
    """

    LOGGER.debug('check_override >>> proof_req: %s, override: %s', proof_req, override)

    if isinstance(override, MatchResult):
        override = override.assignments
    override = dict(override or {})
    try:
        validate_config('override', override)
    except JSONValidation as x_json:
        LOGGER.debug('check_override <!< bad override %s', override)
        raise BadOverride(x_json.message)

    req_ids = proof_req.requirement_ids
    orphans = sorted(set(override) - set(req_ids))
    if orphans:
        LOGGER.debug('check_override <!< override names requirements %s absent from request', orphans)
        raise BadOverride('Override names requirements absent from proof request: {}'.format(orphans))

    cred_type = IndyCred if proof_req.format == ProofFormat.INDY else W3cCred
    rv = OrderedDict()
    for req_id in req_ids:
        if req_id not in override:
            continue
        cred = index.get(override[req_id])
        if cred is None:
            LOGGER.debug('check_override <!< no credential %s in index', override[req_id])
            raise BadOverride('Override credential {} for {} is not in index'.format(override[req_id], req_id))
        if not isinstance(cred, cred_type):
            LOGGER.debug('check_override <!< credential %s does not suit %s request', cred, proof_req.format)
            raise BadOverride('Override credential {} for {} is not {}'.format(
                override[req_id],
                req_id,
                'indy' if cred_type == IndyCred else 'W3C'))
        if cred_type == W3cCred and cred.credential_id in rv.values():
            LOGGER.debug('check_override <!< override repeats credential %s across descriptors', cred.credential_id)
            raise BadOverride('Override repeats credential {} across input descriptors'.format(cred.credential_id))
        rv[req_id] = cred.credential_id

    LOGGER.debug('check_override <<< %s', rv)
    return rv
