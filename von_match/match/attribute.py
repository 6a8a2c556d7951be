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
from typing import Mapping, Union

from von_match.creds.index import CredentialIndex
from von_match.creds.model import IndyCred
from von_match.indytween import Restriction
from von_match.match.result import MatchResult, check_override
from von_match.request.model import AttributeRequirement, IndyProofRequest, PredicateRequirement


LOGGER = logging.getLogger(__name__)


Requirement = Union[AttributeRequirement, PredicateRequirement]


class AttributeMatcher:
    """
    Matcher for indy proof requests. For each referent, attributes first then predicates, take the first
    indy credential in index order whose cred def id a restriction names; failing that, the first whose
    attribute names cover the requirement's. A credential may satisfy any number of referents.
    """

    def __init__(self, index: CredentialIndex, strict_restrictions: bool = False, check_predicates: bool = False):
        """
        Initialize on credential index and matching options.

        :param index: credential index
        :param strict_restrictions: whether a requirement carrying restrictions forgoes attribute-coverage fallback
        :param check_predicates: whether to exclude, for a predicate referent, credentials whose
            (known) attribute value fails the predicate
        """

        self._index = index
        self._strict_restrictions = strict_restrictions
        self._check_predicates = check_predicates

    @staticmethod
    def restriction_match(req: Requirement, cred: IndyCred) -> bool:
        """
        Whether a restriction of the requirement names the credential's cred def id. Any other indy
        restriction keys in that restriction (schema id, issuer DID, etc.) must apply too.

        :param req: attribute or predicate requirement
        :param cred: candidate indy credential
        :return: whether credential matches a cred def id restriction
        """

        return any(
            r.get('cred_def_id') and r['cred_def_id'] == cred.cred_def_id and Restriction.all_apply_dict(cred, r)
            for r in req.restrictions)

    @staticmethod
    def coverage_match(req: Requirement, cred: IndyCred) -> bool:
        """
        Whether credential's attribute names cover all the requirement's (canonical) names.

        :param req: attribute or predicate requirement
        :param cred: candidate indy credential
        :return: whether credential covers requirement
        """

        return req.names <= cred.attribute_names

    def _admissible(self, req: Requirement, cred: IndyCred) -> bool:
        if not (self._check_predicates and isinstance(req, PredicateRequirement)):
            return True
        value = cred.attrs.get(req.name)
        return value is None or req.p_type.holds(value, req.p_value)

    def find(self, req: Requirement) -> str:
        """
        Return identifier of first credential satisfying requirement, None for none.

        :param req: attribute or predicate requirement
        :return: credential identifier
        """

        candidates = [c for c in self._index.indy_creds() if self._admissible(req, c)]

        if req.cred_def_ids:
            for cred in candidates:
                if self.restriction_match(req, cred):
                    return cred.credential_id

        if req.restrictions and self._strict_restrictions:
            return None

        for cred in candidates:
            if self.coverage_match(req, cred):
                return cred.credential_id

        return None

    def match(self, proof_req: IndyProofRequest, override: Mapping[str, str] = None) -> MatchResult:
        """
        Match indy proof request against credential index. Visit every referent, so that the result
        reports all unsatisfied referents.

        Raise BadOverride on override inconsistent with proof request or index.

        :param proof_req: indy proof request
        :param override: mapping of referents to credential identifiers to take as given, or prior MatchResult
        :return: match result
        """

        LOGGER.debug('AttributeMatcher.match >>> proof_req: %s, override: %s', proof_req, override)

        seeded = check_override(proof_req, self._index, override)
        assignments = OrderedDict()
        unsatisfied = set()
        reqs = list(proof_req.requested_attributes.items()) + list(proof_req.requested_predicates.items())
        for (referent, req) in reqs:
            cred_id = seeded[referent] if referent in seeded else self.find(req)
            if cred_id is None:
                LOGGER.debug('AttributeMatcher.match: no credential for referent %s', referent)
                unsatisfied.add(referent)
            else:
                assignments[referent] = cred_id

        rv = MatchResult(assignments, unsatisfied)
        LOGGER.debug('AttributeMatcher.match <<< %s', rv)
        return rv
