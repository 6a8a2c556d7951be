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
from enum import IntEnum
from typing import Dict, List, Mapping

from von_match.creds.index import CredentialIndex
from von_match.creds.model import W3cCred
from von_match.match.result import MatchResult, check_override
from von_match.request.model import DifProofRequest, InputDescriptor


LOGGER = logging.getLogger(__name__)


class Tier(IntEnum):
    """
    Priority tiers by which a W3C credential may satisfy an input descriptor, best first.
    """

    TYPE = 0
    FIELDS = 1
    UNCONSTRAINED = 2


class DescriptorMatcher:
    """
    Matcher for DIF presentation exchange requests. For each input descriptor in declaration order, take
    the first available W3C credential matching by type (schema URI), failing that by required fields,
    failing that (for a descriptor with neither) any. A credential serves at most one descriptor.

    By default the assignment is greedy and one-pass, so it may miss a fulfillment that
    swapping two picks would find; the bipartite option completes the greedy assignment by augmenting
    paths and so finds a fulfillment whenever one exists.
    """

    def __init__(self, index: CredentialIndex, wildcard: str = 'verifiablecredential', bipartite: bool = False):
        """
        Initialize on credential index and matching options.

        :param index: credential index
        :param wildcard: substring marking a schema URI as matching any credential type
        :param bipartite: whether to complete greedy assignment to a maximum matching
        """

        self._index = index
        self._wildcard = wildcard.lower()
        self._bipartite = bipartite

    def type_match(self, desc: InputDescriptor, cred: W3cCred) -> bool:
        """
        Whether descriptor schema URIs intersect credential types; a URI containing the wildcard
        substring matches any credential.

        :param desc: input descriptor
        :param cred: candidate W3C credential
        :return: whether credential matches by type
        """

        return bool(desc.schema_uris) and (
            bool(desc.schema_uris & cred.types) or any(self._wildcard in uri for uri in desc.schema_uris))

    @staticmethod
    def field_match(desc: InputDescriptor, cred: W3cCred) -> bool:
        """
        Whether the last segment of every required field path is a credential subject field (any case).

        :param desc: input descriptor
        :param cred: candidate W3C credential
        :return: whether credential matches by fields
        """

        return bool(desc.required_fields) and all(
            path[-1].lower() in cred.subject_fields for path in desc.required_fields)

    def tier(self, desc: InputDescriptor, cred: W3cCred) -> Tier:
        """
        Return best tier on which credential satisfies descriptor, None for none.

        :param desc: input descriptor
        :param cred: candidate W3C credential
        :return: tier
        """

        if self.type_match(desc, cred):
            return Tier.TYPE
        if self.field_match(desc, cred):
            return Tier.FIELDS
        if not (desc.schema_uris or desc.required_fields):
            return Tier.UNCONSTRAINED
        return None

    def candidates(self, desc: InputDescriptor) -> List[str]:
        """
        Return identifiers of W3C credentials satisfying descriptor, in priority order:
        by tier, then by index order.

        :param desc: input descriptor
        :return: list of credential identifiers
        """

        ranked = []
        for (position, cred) in enumerate(self._index.w3c_creds()):
            tier = self.tier(desc, cred)
            if tier is not None:
                ranked.append((tier, position, cred.credential_id))
        return [cred_id for (_, _, cred_id) in sorted(ranked)]

    def _augment(
            self,
            desc_id: str,
            edges: Mapping[str, List[str]],
            owner: Dict[str, str],
            fixed: frozenset,
            visited: set) -> bool:
        """
        Look for augmenting path from descriptor; on success, reassign along it.
        """

        for cred_id in edges[desc_id]:
            if cred_id in visited:
                continue
            visited.add(cred_id)
            holder = owner.get(cred_id)
            if holder is None or (holder not in fixed and self._augment(holder, edges, owner, fixed, visited)):
                owner[cred_id] = desc_id
                return True
        return False

    def match(self, proof_req: DifProofRequest, override: Mapping[str, str] = None) -> MatchResult:
        """
        Match DIF presentation exchange request against credential index.

        Raise BadOverride on override inconsistent with proof request or index.

        :param proof_req: DIF proof request
        :param override: mapping of descriptor identifiers to credential identifiers to take as given,
            or prior MatchResult
        :return: match result
        """

        LOGGER.debug('DescriptorMatcher.match >>> proof_req: %s, override: %s', proof_req, override)

        seeded = check_override(proof_req, self._index, override)
        owner = {cred_id: desc_id for (desc_id, cred_id) in seeded.items()}  # credential id -> descriptor id
        edges = OrderedDict((d.id, self.candidates(d)) for d in proof_req.input_descriptors if d.id not in seeded)

        free = []
        for (desc_id, cred_ids) in edges.items():
            pick = next((c for c in cred_ids if c not in owner), None)
            if pick is None:
                free.append(desc_id)
            else:
                owner[pick] = desc_id

        if self._bipartite and free:
            LOGGER.debug('DescriptorMatcher.match: augmenting greedy assignment for %s', free)
            fixed = frozenset(seeded)
            for desc_id in free:
                self._augment(desc_id, edges, owner, fixed, set())

        by_desc = {desc_id: cred_id for (cred_id, desc_id) in owner.items()}
        assignments = OrderedDict(
            (d.id, by_desc[d.id]) for d in proof_req.input_descriptors if d.id in by_desc)
        unsatisfied = [d.id for d in proof_req.input_descriptors if d.id not in by_desc]
        for desc_id in unsatisfied:
            LOGGER.debug('DescriptorMatcher.match: no credential for input descriptor %s', desc_id)

        rv = MatchResult(assignments, unsatisfied)
        LOGGER.debug('DescriptorMatcher.match <<< %s', rv)
        return rv
