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


from collections import OrderedDict, namedtuple
from enum import Enum
from typing import Mapping, Sequence, Tuple, Union

from von_match.canon import FieldPath
from von_match.error import UnsupportedFormatError
from von_match.indytween import Predicate


class ProofFormat(Enum):
    """
    Enum for proof request formats that the engine matches.
    """

    INDY = 'indy'
    DIF = 'dif'


class AttributeRequirement(namedtuple('AttributeRequirement', 'names restrictions non_revoked')):
    """
    Requested attribute specification: one or more attribute names (canonical) to reveal from a single
    credential, restrictions as a sequence of indy restriction dicts, and optional non-revocation interval.
    """

    def __new__(
            cls,
            names: frozenset,
            restrictions: Sequence[Mapping] = (),
            non_revoked: Mapping = None) -> 'AttributeRequirement':
        return super().__new__(cls, frozenset(names), tuple(restrictions), non_revoked)

    @property
    def cred_def_ids(self) -> Tuple[str, ...]:
        """
        Return credential definition identifiers that restrictions name, in order.

        :return: tuple of cred def ids
        """

        return tuple(r['cred_def_id'] for r in self.restrictions if r.get('cred_def_id'))


class PredicateRequirement(namedtuple('PredicateRequirement', 'name p_type p_value restrictions non_revoked')):
    """
    Requested predicate specification: attribute name (canonical), predicate type, integer limit,
    restrictions as a sequence of indy restriction dicts, and optional non-revocation interval.
    """

    def __new__(
            cls,
            name: str,
            p_type: Predicate,
            p_value: int,
            restrictions: Sequence[Mapping] = (),
            non_revoked: Mapping = None) -> 'PredicateRequirement':
        return super().__new__(cls, name, p_type, p_value, tuple(restrictions), non_revoked)

    @property
    def names(self) -> frozenset:
        """
        Return attribute name as singleton set, for coverage checks common with requested attributes.

        :return: frozenset on attribute name
        """

        return frozenset([self.name])

    @property
    def cred_def_ids(self) -> Tuple[str, ...]:
        """
        Return credential definition identifiers that restrictions name, in order.

        :return: tuple of cred def ids
        """

        return tuple(r['cred_def_id'] for r in self.restrictions if r.get('cred_def_id'))


class InputDescriptor(namedtuple('InputDescriptor', 'id name purpose schema_uris required_fields')):
    """
    DIF presentation exchange input descriptor: identifier, optional name and purpose,
    (lower-cased) schema URIs and required field paths.
    """

    def __new__(
            cls,
            id: str,
            name: str = None,
            purpose: str = None,
            schema_uris: frozenset = frozenset(),
            required_fields: Sequence[FieldPath] = ()) -> 'InputDescriptor':
        return super().__new__(cls, id, name, purpose, frozenset(schema_uris), tuple(required_fields))


class IndyProofRequest(namedtuple('IndyProofRequest', 'requested_attributes requested_predicates')):
    """
    Indy proof request: ordered mappings from referents to attribute and predicate requirements.
    A referent may name a requested attribute or a requested predicate, not both.
    """

    def __new__(
            cls,
            requested_attributes: Mapping[str, AttributeRequirement] = None,
            requested_predicates: Mapping[str, PredicateRequirement] = None) -> 'IndyProofRequest':
        shared = sorted(set(requested_attributes or {}) & set(requested_predicates or {}))
        if shared:
            raise UnsupportedFormatError('Referents {} name both requested attributes and predicates'.format(shared))
        return super().__new__(
            cls,
            OrderedDict(requested_attributes or {}),
            OrderedDict(requested_predicates or {}))

    @property
    def format(self) -> ProofFormat:
        return ProofFormat.INDY

    @property
    def requirement_ids(self) -> Tuple[str, ...]:
        """
        Return all referents, attributes first, then predicates, in request order.

        :return: tuple of referents
        """

        return tuple(self.requested_attributes) + tuple(self.requested_predicates)


class DifProofRequest(namedtuple('DifProofRequest', 'input_descriptors')):
    """
    DIF presentation exchange request: input descriptors in declaration order.
    """

    def __new__(cls, input_descriptors: Sequence[InputDescriptor] = ()) -> 'DifProofRequest':
        return super().__new__(cls, tuple(input_descriptors))

    @property
    def format(self) -> ProofFormat:
        return ProofFormat.DIF

    @property
    def requirement_ids(self) -> Tuple[str, ...]:
        """
        Return input descriptor identifiers in declaration order.

        :return: tuple of descriptor identifiers
        """

        return tuple(d.id for d in self.input_descriptors)


ProofRequest = Union[IndyProofRequest, DifProofRequest]
