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

from typing import Any, Iterable, Mapping, Tuple, Union

from von_match.creds.index import CredentialIndex
from von_match.error import UnsatisfiableRequestError
from von_match.match.attribute import AttributeMatcher
from von_match.match.descriptor import DescriptorMatcher
from von_match.match.result import MatchResult
from von_match.present.builder import PresentationSpec, build_presentation
from von_match.request.detect import detect_format, parse_request
from von_match.request.model import DifProofRequest, IndyProofRequest, ProofFormat, ProofRequest
from von_match.request.normalize import locate_request
from von_match.validcfg import engine_config


LOGGER = logging.getLogger(__name__)


class Engine:
    """
    Presentation matching engine: locate and type the proof request in a proof exchange record, match it
    against the holder's stored credentials, and build the presentation specification to submit.

    The engine holds only its configuration; every call builds its own request, index and result, so one
    engine serves concurrent callers and re-invocation after a human override.
    """

    def __init__(self, cfg: dict = None) -> None:
        """
        Initialize on configuration. Raise JSONValidation on bad configuration.

        :param cfg: engine configuration dict; e.g.,

        ::

            {
                'matching': 'greedy',  # or 'bipartite' to find DIF fulfillment whenever one exists
                'strict-restrictions': False,  # True: restricted indy items never fall back to attribute coverage
                'check-predicates': False,  # True: exclude credentials whose known values fail indy predicates
                'vc-wildcard': 'verifiablecredential'  # schema URI substring matching any W3C credential
            }

        """

        LOGGER.debug('Engine.__init__ >>> cfg: %s', cfg)

        self._cfg = engine_config(cfg)

        LOGGER.debug('Engine.__init__ <<<')

    @property
    def cfg(self) -> dict:
        """
        Accessor for configuration, with defaults filled in.

        :return: configuration dict
        """

        return dict(self._cfg)

    def normalize(self, record: Mapping) -> ProofRequest:
        """
        Locate, classify and type the proof request within a proof exchange record.

        Raise MissingRequestError, DecodeError, or UnsupportedFormatError as request extraction fails.

        :param record: proof exchange record
        :return: typed proof request
        """

        LOGGER.debug('Engine.normalize >>> record: %s', record)

        request = locate_request(record)
        rv = parse_request(request, detect_format(request))

        LOGGER.debug('Engine.normalize <<< %s', rv)
        return rv

    def matcher(self, proof_req: ProofRequest, index: CredentialIndex) -> Union[AttributeMatcher, DescriptorMatcher]:
        """
        Return matcher for proof request format over credential index, as configured.

        :param proof_req: typed proof request
        :param index: credential index
        :return: matcher
        """

        if proof_req.format == ProofFormat.INDY:
            return AttributeMatcher(index, self._cfg['strict-restrictions'], self._cfg['check-predicates'])
        return DescriptorMatcher(index, self._cfg['vc-wildcard'], self._cfg['matching'] == 'bipartite')

    def match(
            self,
            record: Any,
            *listings: Iterable[Mapping],
            override: Union[Mapping[str, str], MatchResult] = None) -> Tuple[ProofRequest, MatchResult]:
        """
        Match proof request against holder's stored credentials.

        :param record: proof exchange record, or proof request already typed
        :param listings: stored-credential listings (e.g., indy and W3C), or one credential index
        :param override: human selection mapping requirement identifiers to credential identifiers,
            or a prior match result, to seed before matching the rest
        :return: typed proof request and match result
        """

        LOGGER.debug('Engine.match >>> record: %s, listings: %s, override: %s', record, listings, override)

        if isinstance(record, (IndyProofRequest, DifProofRequest)):
            proof_req = record
        else:
            proof_req = self.normalize(record)
        index = self._index(listings)
        rv = (proof_req, self.matcher(proof_req, index).match(proof_req, override))

        LOGGER.debug('Engine.match <<< %s', rv)
        return rv

    def present(
            self,
            record: Any,
            *listings: Iterable[Mapping],
            override: Union[Mapping[str, str], MatchResult] = None) -> PresentationSpec:
        """
        Match proof request against holder's stored credentials and build presentation specification.

        Raise UnsatisfiableRequestError, listing unsatisfied requirement identifiers, if any requirement
        has no matching credential; EmptySelectionError if the request has no requirements.

        :param record: proof exchange record, or proof request already typed
        :param listings: stored-credential listings (e.g., indy and W3C), or one credential index
        :param override: human selection to seed before matching the rest
        :return: presentation specification
        """

        LOGGER.debug('Engine.present >>> record: %s, listings: %s, override: %s', record, listings, override)

        index = self._index(listings)
        (proof_req, result) = self.match(record, index, override=override)
        if result.unsatisfied:
            LOGGER.debug('Engine.present <!< unsatisfied requirements %s', sorted(result.unsatisfied))
            raise UnsatisfiableRequestError(result.unsatisfied)
        rv = build_presentation(proof_req, result, index)

        LOGGER.debug('Engine.present <<< %s', rv)
        return rv

    @staticmethod
    def _index(listings: tuple) -> CredentialIndex:
        if len(listings) == 1 and isinstance(listings[0], CredentialIndex):
            return listings[0]
        return CredentialIndex(*listings)
