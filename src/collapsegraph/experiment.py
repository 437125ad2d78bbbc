"""
Collapse trace experiment.

Walks the full pipeline with a larger domain and a six-predicate family,
writing a human-readable account into three trace sinks:

    structural  QE / N_E / Z_E domains and their digests
    sembits     test family, quotient, compression statistics, certificates
    asc7        profile, certificates, sample normalizations

Returns the digest summary (sorted keys). Trace text is presentation
only; the summary digests depend on nothing but the fixed inputs.
"""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, TextIO

from collapse_kernel.foundation.cert import CertificateChain, CertItem, KernelCertificate
from collapse_kernel.glyph.certs import asc7_kernel_cert, confusables_kernel_cert
from collapse_kernel.glyph.normalize import normalize_str
from collapse_kernel.glyph.profile import EquivalenceProfile, code_safe
from collapse_kernel.partition.entropy import sem_entropy_bits
from collapse_kernel.partition.quotient import quotient_digest_hex
from collapse_kernel.partition.signature import describe_signature

from .numbers import (
    QE,
    domain_digest_hex,
    domain_digest_hex_ne,
    domain_digest_hex_ze,
    domain_ne,
    domain_qe_bounded,
    domain_view_ne,
    domain_view_ze,
    domain_ze,
)
from .sembit import Test, TestFamily, sembit_kernel_cert, sembit_quotient, tests_hash_hex
from .trace import FileTrace, TraceSink, run_stamp

logger = logging.getLogger(__name__)

QE_BOUND = 50
NE_BOUND = 40
ZE_BOUND = 20
IMPL_TAG = "impl:static_v3_bucket_bits_proper"
EXAMPLES_SHOWN = 8

NORMALIZE_EXAMPLES = (
    "positive", "integer", "den<=6", "num_even", "den_mod3", "proper",
    "A", "a", "O", "o",
)


def t_positive(x: QE) -> bool:
    return x.num > 0


def t_integer(x: QE) -> bool:
    return x.den == 1


def t_den_small(x: QE) -> bool:
    return x.den <= 6


def t_num_even(x: QE) -> bool:
    return x.num % 2 == 0


def t_den_mod3(x: QE) -> bool:
    return x.den % 3 == 0


def t_proper(x: QE) -> bool:
    return abs(x.num) < x.den


BUCKET_TESTS = (
    ("positive", t_positive),
    ("integer", t_integer),
    ("den<=6", t_den_small),
    ("num_even", t_num_even),
    ("den_mod3", t_den_mod3),
    ("proper", t_proper),
)


@dataclass
class TraceSinks:
    structural: TraceSink
    sembits: TraceSink
    asc7: TraceSink

    def close(self) -> None:
        for sink in (self.structural, self.sembits, self.asc7):
            sink.close()


def open_file_sinks(out_dir: Path, stamp: Optional[str] = None,
                    echo: Optional[TextIO] = None) -> TraceSinks:
    stamp = stamp or run_stamp()
    return TraceSinks(
        structural=FileTrace(out_dir, stamp, "structural", echo=echo),
        sembits=FileTrace(out_dir, stamp, "sembits", echo=echo),
        asc7=FileTrace(out_dir, stamp, "asc7", echo=echo),
    )


def trace_kernel(trace: TraceSink, label: str, cert: KernelCertificate) -> str:
    trace.section(f"KERNEL: {label}")
    trace.bytes_hex_preview("canonical_bytes", cert.canonical_payload_bytes())
    h = cert.hash_hex
    trace.kv("sha256(canonical_bytes)", h)
    trace.kv("kernel_hash_hex", h)
    return h


def _trace_class_stats(trace: TraceSink, quotient, domain_size: int) -> None:
    largest = quotient.largest_class()
    if largest is None:
        return
    sig, members = largest
    trace.section("LARGEST CLASS")
    trace.kv("largest_class_sig", describe_signature(sig))
    trace.kv("largest_class_members", len(members))
    trace.kv("largest_class_percent", f"{len(members) / domain_size * 100:.2f}%")
    for i, q in enumerate(members[:EXAMPLES_SHOWN]):
        trace.kv(f"example_{i + 1}", str(q))
    values = [q.num / q.den for q in members]
    trace.kv("largest_class_avg_value", f"{sum(values) / len(values):.6f}")
    trace.kv("largest_class_min_value", f"{min(values):.6f}")
    trace.kv("largest_class_max_value", f"{max(values):.6f}")

    small_sig, small_members = quotient.smallest_class()
    trace.section("SMALLEST CLASS")
    trace.kv("smallest_class_sig", describe_signature(small_sig))
    trace.kv("smallest_class_members", len(small_members))
    trace.kv("smallest_class_example", str(small_members[0]))


def run_collapse_trace(
    sinks: TraceSinks,
    profile: Optional[EquivalenceProfile] = None,
) -> Dict[str, str]:
    """
    Run the experiment, writing into sinks.

    Returns:
        Sorted mapping of digest names to hex
    """
    tr_struct, tr_sembit, tr_asc7 = sinks.structural, sinks.sembits, sinks.asc7

    tr_struct.banner("Structural Numbers trace (QE, N_E, Z_E)")
    tr_sembit.banner("SemBits trace (tests -> signatures -> quotient -> cert)")
    tr_asc7.banner("ASC7 trace (profile -> normalize -> confusables kernel)")

    # --- ASC7 -------------------------------------------------------------
    tr_asc7.section("ASC7 PROFILE")
    profile = profile or code_safe()
    tr_asc7.kv("profile", profile.name)
    tr_asc7.kv("classes", profile.class_count())
    tr_asc7.kv("witness_alphabet", ''.join(profile.witness_alphabet))

    tr_asc7.section("ASC7 KERNEL CERT")
    asc7_hash = trace_kernel(tr_asc7, "asc7", asc7_kernel_cert(profile))

    tr_asc7.section("CONFUSABLES KERNEL CERT")
    conf_hash = trace_kernel(tr_asc7, "asc7_confusables", confusables_kernel_cert())

    tr_asc7.section("NORMALIZE EXAMPLES (WITH PROFILE)")
    for raw in NORMALIZE_EXAMPLES:
        tr_asc7.kv(f"normalize({raw})", normalize_str(profile, raw, strict=True))

    # --- Structural numbers ---------------------------------------------
    tr_struct.section("QE DOMAIN: CONSTRUCTION")
    domain_qe = domain_qe_bounded(QE_BOUND, QE_BOUND)
    tr_struct.kv(f"domain_qe_bounded(nmax={QE_BOUND}, dmax={QE_BOUND})", f"size={len(domain_qe)}")
    if domain_qe:
        tr_struct.kv("first", str(domain_qe[0]))
        tr_struct.kv("last", str(domain_qe[-1]))

    tr_struct.section("QE DOMAIN DIGEST")
    qe_digest = domain_digest_hex(domain_qe)
    tr_struct.kv("domain_digest_hex(QE)", qe_digest)

    tr_struct.section("N_E DOMAIN: CONSTRUCTION")
    ne = domain_ne(NE_BOUND)
    for k, v in domain_view_ne(ne).items():
        tr_struct.kv(f"N_E.{k}", v)
    ne_digest = domain_digest_hex_ne(ne)
    tr_struct.kv("domain_digest_hex(N_E)", ne_digest)

    tr_struct.section("Z_E DOMAIN: CONSTRUCTION")
    ze = domain_ze(ZE_BOUND)
    for k, v in domain_view_ze(ze).items():
        tr_struct.kv(f"Z_E.{k}", v)
    ze_digest = domain_digest_hex_ze(ze)
    tr_struct.kv("domain_digest_hex(Z_E)", ze_digest)

    # --- SemBits ----------------------------------------------------------
    tr_sembit.section("TEST FAMILY: 6-BIT COLLAPSING BUCKETS WITH PROPER SPLIT")
    tr_sembit.kv(
        "note",
        "Bits signature from 6 coarse predicates; the 6th splits proper vs improper fractions.",
    )
    family = TestFamily(tuple(Test.named(profile, raw, fn) for raw, fn in BUCKET_TESTS))
    tests_hash = tests_hash_hex(family, IMPL_TAG)
    tr_sembit.kv("tests_hash_hex", tests_hash)
    for i, test_id in enumerate(family.ids()):
        tr_sembit.kv(f"test_id_{i + 1}", test_id)

    tr_sembit.section("DOMAIN DIGEST (QE)")
    tr_sembit.kv("domain_digest_hex(QE)", qe_digest)

    tr_sembit.section("QUOTIENT: EXECUTE TESTS -> BUILD SIGNATURES -> PARTITION")
    quotient = sembit_quotient(domain_qe, family)
    tr_sembit.kv("q.classes", quotient.size())

    h = sem_entropy_bits(quotient.size())
    raw_bits = math.log2(len(domain_qe))
    saved_bits = raw_bits - h
    pct_saved = (saved_bits / raw_bits) * 100.0 if raw_bits > 0 else 0.0
    tr_sembit.kv("sem_entropy_bits(classes)", repr(h))
    tr_sembit.kv("raw_entropy_bits(domain)", f"{raw_bits:.6f}")
    tr_sembit.kv("saved_entropy_bits", f"{saved_bits:.6f}")
    tr_sembit.kv("compression_percent", f"{pct_saved:.2f}%")
    _trace_class_stats(tr_sembit, quotient, len(domain_qe))

    qdig = quotient_digest_hex(quotient)
    tr_sembit.kv("quotient_digest_hex", qdig)

    tr_sembit.section("SEMBITS CERT: EMBED UPSTREAM HASHES")
    sb_cert = sembit_kernel_cert(
        asc7_hash, conf_hash, tests_hash, qe_digest, quotient.size(), h, qdig,
    )
    sb_hash = trace_kernel(tr_sembit, "sembit", sb_cert)

    tr_sembit.section("CERT CHAIN: asc7 -> confusables -> sembit")
    chain = CertificateChain.build([
        CertItem("asc7", asc7_hash),
        CertItem("asc7_confusables", conf_hash),
        CertItem("sembit", sb_hash),
    ])
    tr_sembit.kv("chain_hash", chain.chain_hash_hex)

    summary = {
        "asc7_hash": asc7_hash,
        "chain_hash": chain.chain_hash_hex,
        "confusables_hash": conf_hash,
        "domain_ne_digest": ne_digest,
        "domain_qe_digest": qe_digest,
        "domain_ze_digest": ze_digest,
        "sembit_hash": sb_hash,
        "tests_hash": tests_hash,
    }

    tr_sembit.section("SUMMARY (FOR HUMANS)")
    tr_sembit.line(json.dumps(summary, indent=2, sort_keys=True))

    tr_sembit.section("OUTPUT FILES")
    tr_sembit.kv("structural_log", tr_struct.location())
    tr_sembit.kv("sembits_log", tr_sembit.location())
    tr_sembit.kv("asc7_log", tr_asc7.location())

    logger.info(
        "Collapse trace: %d -> %d classes (%.2f%% saved)",
        len(domain_qe), quotient.size(), pct_saved,
        extra={"chain_hash_short": chain.chain_hash_hex[:16]},
    )
    return summary


__all__ = [
    'BUCKET_TESTS',
    'IMPL_TAG',
    'TraceSinks',
    'open_file_sinks',
    'trace_kernel',
    'run_collapse_trace',
]
