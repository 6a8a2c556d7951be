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


from collections import namedtuple
from enum import Enum
from typing import Any, Mapping

from von_match.creds.model import IndyCred
from von_match.util import cred_def_id2issuer_did, ok_schema_id, schema_key


Relation = namedtuple('Relation', 'fortran wql math yes no')


class Restriction(Enum):
    """
    Enum for restrictions that indy proof requests may carry.
    """

    SCHEMA_ID = 'schema_id'
    SCHEMA_ISSUER_DID = 'schema_issuer_did'
    SCHEMA_NAME = 'schema_name'
    SCHEMA_VERSION = 'schema_version'
    ISSUER_DID = 'issuer_did'
    CRED_DEF_ID = 'cred_def_id'

    @staticmethod
    def get(specifier: str) -> 'Restriction':
        """
        Return enum instance corresponding to restriction specifier string.

        :param specifier: specifier in proof request
        :return: corresponding Restriction instance, None for unknown specifier
        """

        return Restriction.__members__.get(str(specifier).upper(), None)

    def applies(self, cred: IndyCred, value: str) -> bool:
        """
        Return whether restriction applies to input indy credential.

        :param cred: indy credential from credential index
        :param value: restriction value to check
        :return: whether credential satisfies current restriction
        """

        if self in (Restriction.SCHEMA_ISSUER_DID, Restriction.SCHEMA_NAME, Restriction.SCHEMA_VERSION):
            if not ok_schema_id(cred.schema_id):
                return False
            s_key = schema_key(cred.schema_id)
            return {
                Restriction.SCHEMA_ISSUER_DID: s_key.origin_did,
                Restriction.SCHEMA_NAME: s_key.name,
                Restriction.SCHEMA_VERSION: s_key.version
            }[self] == value
        if self == Restriction.ISSUER_DID:
            return cred_def_id2issuer_did(cred.cred_def_id) == value
        return getattr(cred, self.value) == value

    @staticmethod
    def all_apply_dict(cred: IndyCred, rdict: Mapping[str, str]) -> bool:
        """
        Whether all restrictions specified in dict apply to input indy credential. Restriction keys
        outside indy restriction vocabulary (e.g., attribute value markers) do not disqualify.

        :param cred: indy credential to test
        :param rdict: restriction specification dict
        :return: whether credential satisfies all restrictions specified
        """

        return all(Restriction.get(r).applies(cred, rdict[r]) for r in rdict or {} if Restriction.get(r))


class Predicate(Enum):
    """
    Enum for predicate types that indy proof requests support.
    """

    LT = Relation(
        'LT',
        '$lt',
        '<',
        lambda x, y: Predicate.to_int(x) < Predicate.to_int(y),
        lambda x, y: Predicate.to_int(x) >= Predicate.to_int(y))
    LE = Relation(
        'LE',
        '$lte',
        '<=',
        lambda x, y: Predicate.to_int(x) <= Predicate.to_int(y),
        lambda x, y: Predicate.to_int(x) > Predicate.to_int(y))
    GE = Relation(
        'GE',
        '$gte',
        '>=',
        lambda x, y: Predicate.to_int(x) >= Predicate.to_int(y),
        lambda x, y: Predicate.to_int(x) < Predicate.to_int(y))
    GT = Relation(
        'GT',
        '$gt',
        '>',
        lambda x, y: Predicate.to_int(x) > Predicate.to_int(y),
        lambda x, y: Predicate.to_int(x) <= Predicate.to_int(y))

    @staticmethod
    def get(relation: str) -> 'Predicate':
        """
        Return enum instance corresponding to input relation string, None for no match.
        """

        for pred in Predicate:
            if str(relation).upper() in (pred.value.fortran, pred.value.wql.upper(), pred.value.math):
                return pred
        return None

    @staticmethod
    def to_int(value: Any) -> int:
        """
        Cast a value as its equivalent int for indy predicate argument. Raise ValueError for any input but
        int, stringified int, or boolean.

        :param value: value to coerce.
        """

        if isinstance(value, (bool, int)):
            return int(value)
        return int(str(value))  # kick out floats

    def holds(self, value: Any, limit: int) -> bool:
        """
        Whether credential attribute value satisfies predicate against limit. A value that does
        not coerce to an int satisfies no predicate.

        :param value: credential attribute (raw) value
        :param limit: predicate limit from proof request
        :return: whether predicate holds
        """

        try:
            return self.value.yes(value, limit)
        except (TypeError, ValueError):
            return False
