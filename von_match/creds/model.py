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
from typing import Union


class IndyCred(namedtuple(
        'IndyCred',
        'credential_id cred_def_id schema_id attribute_names attrs rev_reg_id cred_rev_id')):
    """
    Indy (anoncreds) credential as the credential index holds it.

    Attribute names are canonical (see canon.canon()); attrs maps canonical attribute names to raw values
    where the stored record carries values, and is empty otherwise.
    """

    def __new__(
            cls,
            credential_id: str,
            cred_def_id: str = None,
            schema_id: str = None,
            attribute_names: frozenset = frozenset(),
            attrs: dict = None,
            rev_reg_id: str = None,
            cred_rev_id: str = None) -> 'IndyCred':
        return super().__new__(
            cls,
            credential_id,
            cred_def_id,
            schema_id,
            frozenset(attribute_names),
            dict(attrs or {}),
            rev_reg_id,
            cred_rev_id)

    @property
    def revocable(self) -> bool:
        """
        Whether credential lives in a revocation registry.

        :return: whether credential is revocable
        """

        return bool(self.rev_reg_id)


class W3cCred(namedtuple('W3cCred', 'credential_id types subject_fields issuer')):
    """
    W3C verifiable credential as the credential index holds it: types and subject field names lower-cased.
    """

    def __new__(
            cls,
            credential_id: str,
            types: frozenset = frozenset(),
            subject_fields: frozenset = frozenset(),
            issuer: str = None) -> 'W3cCred':
        return super().__new__(cls, credential_id, frozenset(types), frozenset(subject_fields), issuer)


StoredCredential = Union[IndyCred, W3cCred]
