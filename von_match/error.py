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


from enum import IntEnum
from typing import Iterable


class ErrorCode(IntEnum):
    """
    Error codes particular to von_match operation.
    """

    Success = 0

    # Errors to do with locating and decoding proof requests
    DecodeError = 1001
    MissingRequest = 1002
    UnsupportedFormat = 1003

    # Errors to do with matching and presentation
    UnsatisfiableRequest = 2000
    EmptySelection = 2001
    BadOverride = 2002

    # JSON validation
    JSONValidation = 9000


class VonMatchError(Exception):
    """
    Error class for von_match operation.
    """

    def __init__(self, error_code: ErrorCode, message: str):
        """
        Initialize on code and message.

        :param error_code: error code
        :param message: error message
        """

        super().__init__(message)
        self.error_code = error_code
        self.message = message

    def __str__(self):
        """
        String representation of error.
        """

        return '({}) {}'.format(self.error_code, self.message)


class DecodeError(VonMatchError):
    """
    Proof request attachment payload does not base64-decode or JSON-parse.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message, carrying the message of the underlying decode exception
        """

        super().__init__(ErrorCode.DecodeError, message)


class MissingRequestError(VonMatchError):
    """
    Proof exchange record carries no proof request under any known location.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.MissingRequest, message)


class UnsupportedFormatError(VonMatchError):
    """
    Proof request is neither indy nor DIF presentation exchange, or is malformed within its format.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.UnsupportedFormat, message)


class UnsatisfiableRequestError(VonMatchError):
    """
    Matching completed but some requirements (attribute or predicate referents, or input descriptor
    identifiers) have no matching credential.
    """

    def __init__(self, unsatisfied: Iterable[str], message: str = None):
        """
        Initialize on unsatisfied requirement identifiers.

        :param unsatisfied: identifiers of requirements without matching credential
        :param message: error message (default lists unsatisfied identifiers)
        """

        self.unsatisfied = sorted(unsatisfied)
        super().__init__(
            ErrorCode.UnsatisfiableRequest,
            message or 'No matching credential for {}'.format(', '.join(self.unsatisfied)))


class EmptySelectionError(VonMatchError):
    """
    Attempt to build presentation on no credential assignments.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.EmptySelection, message)


class BadOverride(VonMatchError):
    """
    Human override names a requirement absent from the proof request, or a credential absent
    from the credential index or unsuitable for the requirement's format.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.BadOverride, message)


class JSONValidation(VonMatchError):
    """
    Configuration does not validate against its JSON schema.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.JSONValidation, message)
