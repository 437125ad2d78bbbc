"""
Tests for trace sinks and the collapse trace experiment.
"""

import io
import json
from datetime import datetime

import pytest

from collapse_kernel.glyph.certs import asc7_kernel_cert
from collapsegraph.experiment import (
    BUCKET_TESTS,
    IMPL_TAG,
    TraceSinks,
    open_file_sinks,
    run_collapse_trace,
    trace_kernel,
)
from collapsegraph.numbers import domain_qe_bounded
from collapsegraph.trace import FileTrace, MemoryTrace, TraceError, run_stamp


# ============================================================================
# TEST: TRACE SINKS
# ============================================================================

class TestMemoryTrace:

    def test_kv_and_get(self):
        tr = MemoryTrace("t")
        tr.kv("alpha", 1)
        tr.kv("beta", "x: y")
        assert tr.get("alpha") == "1"
        assert tr.get("beta") == "x: y"
        assert tr.get("gamma") is None

    def test_banner_and_section(self):
        tr = MemoryTrace("sembits")
        tr.banner("Title")
        tr.section("PART")
        assert tr.get("TRACE") == "sembits"
        assert tr.get("TITLE") == "Title"
        assert tr.get("FILE") == "<sembits>"
        assert "PART" in tr.lines

    def test_bytes_preview_short(self):
        tr = MemoryTrace()
        tr.bytes_hex_preview("b", b"\x00\xff")
        assert tr.get("b") == "len=2 hex64=00ff"

    def test_bytes_preview_truncated(self):
        tr = MemoryTrace()
        tr.bytes_hex_preview("b", b"\x01" * 100)
        assert tr.get("b") == "len=100 hex64=" + "01" * 64 + "..."

    def test_text(self):
        tr = MemoryTrace()
        tr.line("a")
        tr.line("b")
        assert tr.text() == "a\nb\n"

    def test_context_manager(self):
        with MemoryTrace() as tr:
            tr.line("x")
        assert tr.lines == ["x"]


class TestFileTrace:

    def test_writes_file_and_echoes(self, tmp_path):
        echo = io.StringIO()
        with FileTrace(tmp_path / "out", "20260101_000000", "asc7", echo=echo) as tr:
            tr.kv("k", "v")
        path = tmp_path / "out" / "run_20260101_000000_asc7.log"
        assert path.read_text(encoding="utf-8") == "k: v\n"
        assert echo.getvalue() == "k: v\n"
        assert tr.location() == str(path)

    def test_no_echo(self, tmp_path):
        tr = FileTrace(tmp_path, "s", "n", echo=None)
        tr.line("quiet")
        tr.close()
        assert (tmp_path / "run_s_n.log").read_text(encoding="utf-8") == "quiet\n"

    def test_write_after_close(self, tmp_path):
        tr = FileTrace(tmp_path, "s", "n", echo=None)
        tr.close()
        with pytest.raises(TraceError):
            tr.line("late")

    def test_unwritable_dir(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(TraceError):
            FileTrace(blocker / "sub", "s", "n", echo=None)

    def test_run_stamp(self):
        assert run_stamp(datetime(2026, 10, 18, 14, 25, 1)) == "20261018_142501"


# ============================================================================
# TEST: COLLAPSE TRACE EXPERIMENT
# ============================================================================

@pytest.fixture
def memory_sinks():
    return TraceSinks(
        structural=MemoryTrace("structural"),
        sembits=MemoryTrace("sembits"),
        asc7=MemoryTrace("asc7"),
    )


class TestTraceKernel:

    def test_preview_and_hash(self, code_safe_profile):
        tr = MemoryTrace()
        cert = asc7_kernel_cert(code_safe_profile)
        h = trace_kernel(tr, "asc7", cert)
        assert h == cert.hash_hex
        assert tr.get("kernel_hash_hex") == cert.hash_hex
        assert tr.get("canonical_bytes").startswith(f"len={len(cert.canonical_payload_bytes())} ")


class TestCollapseTrace:

    def test_summary_keys(self, memory_sinks):
        summary = run_collapse_trace(memory_sinks)
        assert list(summary) == sorted(summary)
        assert set(summary) == {
            "asc7_hash", "chain_hash", "confusables_hash", "domain_ne_digest",
            "domain_qe_digest", "domain_ze_digest", "sembit_hash", "tests_hash",
        }

    def test_deterministic(self):
        def fresh():
            return TraceSinks(MemoryTrace("s"), MemoryTrace("b"), MemoryTrace("a"))
        assert run_collapse_trace(fresh()) == run_collapse_trace(fresh())

    def test_domains_traced(self, memory_sinks):
        run_collapse_trace(memory_sinks)
        structural = memory_sinks.structural
        assert structural.get("N_E.size") == "41"
        assert structural.get("Z_E.size") == "41"
        assert structural.get("first") == "-50/1"
        assert structural.get("last") == "50/1"

    def test_family_and_tag(self, memory_sinks):
        run_collapse_trace(memory_sinks)
        sembits = memory_sinks.sembits
        assert [sembits.get(f"test_id_{i + 1}") for i in range(6)] == [raw for raw, _ in BUCKET_TESTS]
        assert IMPL_TAG == "impl:static_v3_bucket_bits_proper"

    def test_compression_stats(self, memory_sinks):
        run_collapse_trace(memory_sinks)
        sembits = memory_sinks.sembits
        classes = int(sembits.get("q.classes"))
        assert 1 < classes <= 64
        assert sembits.get("compression_percent").endswith("%")
        assert sembits.get("largest_class_sig") is not None
        assert sembits.get("smallest_class_example") is not None

    def test_summary_printed(self, memory_sinks):
        summary = run_collapse_trace(memory_sinks)
        text = memory_sinks.sembits.text()
        assert json.dumps(summary, indent=2, sort_keys=True) in text

    def test_normalize_examples(self, memory_sinks):
        run_collapse_trace(memory_sinks)
        assert memory_sinks.asc7.get("normalize(O)") == "o"
        assert memory_sinks.asc7.get("normalize(A)") == "A"

    def test_profile_changes_asc7_only_upstream(self, auth_safe_profile):
        def fresh():
            return TraceSinks(MemoryTrace("s"), MemoryTrace("b"), MemoryTrace("a"))
        a = run_collapse_trace(fresh())
        b = run_collapse_trace(fresh(), auth_safe_profile)
        assert a["asc7_hash"] != b["asc7_hash"]
        assert a["domain_qe_digest"] == b["domain_qe_digest"]
        assert a["chain_hash"] != b["chain_hash"]

    def test_file_sinks(self, tmp_path):
        sinks = open_file_sinks(tmp_path, stamp="20260101_000000")
        try:
            summary = run_collapse_trace(sinks)
        finally:
            sinks.close()
        for name in ("structural", "sembits", "asc7"):
            assert (tmp_path / f"run_20260101_000000_{name}.log").exists()
        log = (tmp_path / "run_20260101_000000_sembits.log").read_text(encoding="utf-8")
        assert summary["chain_hash"] in log

    def test_qe_domain_size_matches(self, memory_sinks):
        run_collapse_trace(memory_sinks)
        size = len(domain_qe_bounded(50, 50))
        assert memory_sinks.structural.get("domain_qe_bounded(nmax=50, dmax=50)") == f"size={size}"
