"""
Challenge solvers, one module per BuidlGuidl CTF challenge
"""

from typing import Dict, Type

from .base import BaseChallenge, ChallengeError, ChallengeResult
from .challenge01 import NameRegistrationChallenge
from .challenge02 import OriginCheckChallenge
from .challenge03 import ConstructorMintChallenge
from .challenge04 import SignatureChallenge
from .challenge05 import ReentrancyChallenge
from .challenge06 import GasLimitChallenge
from .challenge07 import DelegateCallChallenge
from .challenge08 import RawSelectorChallenge
from .challenge09 import StoragePasswordChallenge
from .challenge10 import TokenExchangeChallenge
from .challenge11 import Create2Challenge
from .challenge12 import HeaderProofChallenge

CHALLENGES: Dict[int, Type[BaseChallenge]] = {
    cls.challenge_id: cls
    for cls in (
        NameRegistrationChallenge,
        OriginCheckChallenge,
        ConstructorMintChallenge,
        SignatureChallenge,
        ReentrancyChallenge,
        GasLimitChallenge,
        DelegateCallChallenge,
        RawSelectorChallenge,
        StoragePasswordChallenge,
        TokenExchangeChallenge,
        Create2Challenge,
        HeaderProofChallenge,
    )
}

__all__ = [
    "BaseChallenge",
    "ChallengeError",
    "ChallengeResult",
    "CHALLENGES",
    "NameRegistrationChallenge",
    "OriginCheckChallenge",
    "ConstructorMintChallenge",
    "SignatureChallenge",
    "ReentrancyChallenge",
    "GasLimitChallenge",
    "DelegateCallChallenge",
    "RawSelectorChallenge",
    "StoragePasswordChallenge",
    "TokenExchangeChallenge",
    "Create2Challenge",
    "HeaderProofChallenge",
]
