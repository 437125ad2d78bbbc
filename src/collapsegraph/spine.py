"""
Certification spine.

One run, end to end, from fresh inputs:

    profile            -> asc7 certificate
    homoglyph table    -> asc7_confusables certificate
    QE domain          -> domain digest
    test family        -> tests hash (identifiers normalized by profile)
    quotient           -> entropy, quotient digest
    all of the above   -> sembit certificate
    [asc7, asc7_confusables, sembit] -> chain hash

The six resulting hex digests are what the regression snapshot freezes.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from collapse_kernel.foundation.cert import CertificateChain, CertItem, KernelCertificate
from collapse_kernel.glyph.certs import asc7_kernel_cert, confusables_kernel_cert
from collapse_kernel.glyph.normalize import normalize_str, verify_terminal
from collapse_kernel.glyph.profile import EquivalenceProfile
from collapse_kernel.partition.entropy import sem_entropy_bits
from collapse_kernel.partition.quotient import quotient_digest_hex

from .config import RunConfig
from .numbers import QE, domain_digest_hex, domain_qe_bounded
from .profile_loader import resolve_profile
from .sembit import Test, TestFamily, sembit_kernel_cert, sembit_quotient, tests_hash_hex

logger = logging.getLogger(__name__)

SAMPLE_TEXT = "Hell0 W0r1d (O0I1)"


def t_sign(x: QE) -> bool:
    return x.num > 0


def t_is_int(x: QE) -> bool:
    return x.den == 1


def t_den_gt_3(x: QE) -> bool:
    return x.den > 3


def spine_test_family(profile: EquivalenceProfile) -> TestFamily[QE]:
    return TestFamily((
        Test.named(profile, "sign", t_sign),
        Test.named(profile, "is_int", t_is_int),
        Test.named(profile, "den>3", t_den_gt_3),
    ))


@dataclass(frozen=True)
class SpineDigests:
    asc7_hash: str
    confusables_hash: str
    domain_digest: str
    tests_hash: str
    sembit_hash: str
    chain_hash: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "asc7_hash": self.asc7_hash,
            "chain_hash": self.chain_hash,
            "confusables_hash": self.confusables_hash,
            "domain_digest": self.domain_digest,
            "sembit_hash": self.sembit_hash,
            "tests_hash": self.tests_hash,
        }


@dataclass(frozen=True)
class SpineRun:
    """Everything a spine run produced, for drivers that want more than digests."""
    profile: EquivalenceProfile
    asc7_cert: KernelCertificate
    confusables_cert: KernelCertificate
    sembit_cert: KernelCertificate
    chain: CertificateChain
    class_count: int
    h_sem_bits: float
    quotient_digest: str
    digests: SpineDigests


def run_spine(
    config: Optional[RunConfig] = None,
    profile: Optional[EquivalenceProfile] = None,
) -> SpineRun:
    """
    Run the spine. Every entity is built fresh; nothing is shared
    between runs.
    """
    config = config or RunConfig()
    profile = profile or resolve_profile(config.profile)

    asc7_cert = asc7_kernel_cert(profile)
    conf_cert = confusables_kernel_cert()

    domain = domain_qe_bounded(config.qe_nmax, config.qe_dmax)
    domain_digest = domain_digest_hex(domain)

    family = spine_test_family(profile)
    tests_hash = tests_hash_hex(family, config.impl_tag)

    quotient = sembit_quotient(domain, family)
    h = sem_entropy_bits(quotient.size())
    qdig = quotient_digest_hex(quotient)

    sembit_cert = sembit_kernel_cert(
        asc7_cert.hash_hex,
        conf_cert.hash_hex,
        tests_hash,
        domain_digest,
        quotient.size(),
        h,
        qdig,
    )

    chain = CertificateChain.build([
        CertItem("asc7", asc7_cert.hash_hex),
        CertItem("asc7_confusables", conf_cert.hash_hex),
        CertItem("sembit", sembit_cert.hash_hex),
    ])

    digests = SpineDigests(
        asc7_hash=asc7_cert.hash_hex,
        confusables_hash=conf_cert.hash_hex,
        domain_digest=domain_digest,
        tests_hash=tests_hash,
        sembit_hash=sembit_cert.hash_hex,
        chain_hash=chain.chain_hash_hex,
    )
    logger.info(
        "Spine computed: %d elements, %d classes",
        len(domain), quotient.size(),
        extra={"chain_hash_short": chain.chain_hash_hex[:16], "classes": quotient.size()},
    )
    return SpineRun(
        profile=profile,
        asc7_cert=asc7_cert,
        confusables_cert=conf_cert,
        sembit_cert=sembit_cert,
        chain=chain,
        class_count=quotient.size(),
        h_sem_bits=h,
        quotient_digest=qdig,
        digests=digests,
    )


def compute_spine(
    config: Optional[RunConfig] = None,
    profile: Optional[EquivalenceProfile] = None,
) -> SpineDigests:
    return run_spine(config, profile).digests


def sample_normalization(profile: EquivalenceProfile, text: str = SAMPLE_TEXT):
    """(normalized, is_terminal) for the sample string."""
    normalized = normalize_str(profile, text, strict=True)
    return normalized, verify_terminal(profile, normalized)


__all__ = [
    'SAMPLE_TEXT',
    'SpineDigests',
    'SpineRun',
    'run_spine',
    'compute_spine',
    'spine_test_family',
    'sample_normalization',
    't_sign',
    't_is_int',
    't_den_gt_3',
]
