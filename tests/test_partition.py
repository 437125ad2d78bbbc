"""
Tests for signatures, the quotient engine and semantic entropy.

Key properties:
- Signature order: Bits < Text < PairInt < Tuple, then within variant
- Classes iterate in signature order, members in encounter order
- The quotient digest covers shape only (signature + count)
- Entropy of zero classes is an error, never -inf
"""

import hashlib
import math

import pytest

from collapse_kernel.foundation.canon import canonical_bytes
from collapse_kernel.partition.entropy import (
    MICROBITS_PER_BIT,
    EmptyPartitionError,
    log2_u64,
    sem_entropy_bits,
    to_microbits,
)
from collapse_kernel.partition.quotient import Quotient, quotient_digest, quotient_digest_hex
from collapse_kernel.partition.signature import (
    BitsSignature,
    PairIntSignature,
    TextSignature,
    TupleSignature,
    bits,
    describe_signature,
    signature_to_canonical,
)


# ============================================================================
# TEST: SIGNATURE ORDER
# ============================================================================

class TestSignatureOrder:

    def test_variant_rank(self):
        ordered = [
            TupleSignature(()),
            PairIntSignature(0, 0),
            TextSignature(""),
            bits([True, True]),
        ]
        assert sorted(ordered) == [
            bits([True, True]),
            TextSignature(""),
            PairIntSignature(0, 0),
            TupleSignature(()),
        ]

    def test_bits_elementwise_then_length(self):
        assert bits([False, True]) < bits([True, False])
        assert bits([True]) < bits([True, False])
        assert bits([]) < bits([False])

    def test_text_order(self):
        assert TextSignature("B") < TextSignature("a")
        assert TextSignature("ab") < TextSignature("b")

    def test_pair_lexicographic(self):
        assert PairIntSignature(1, 9) < PairIntSignature(2, 0)
        assert PairIntSignature(-1, 0) < PairIntSignature(0, -5)
        assert PairIntSignature(2, 1) < PairIntSignature(2, 3)

    def test_tuple_recursive(self):
        a = TupleSignature((bits([True]), TextSignature("x")))
        b = TupleSignature((TextSignature("a"),))
        assert a < b
        assert TupleSignature((bits([True]),)) < a

    def test_total_ordering_helpers(self):
        assert bits([True]) >= bits([False])
        assert TextSignature("a") <= TextSignature("a")

    def test_equality_and_hash(self):
        assert bits([True, False]) == BitsSignature((True, False))
        assert hash(bits([True])) == hash(bits([True]))
        assert TextSignature("1") != PairIntSignature(1, 1)

    def test_bits_require_bool(self):
        with pytest.raises(TypeError):
            BitsSignature((1, 0))

    def test_pair_range(self):
        with pytest.raises(ValueError):
            PairIntSignature(1 << 63, 0)


class TestSignatureCanonical:

    def test_forms(self):
        assert signature_to_canonical(bits([True, False])) == [True, False]
        assert signature_to_canonical(TextSignature("t")) == "t"
        assert signature_to_canonical(PairIntSignature(1, -2)) == {"a": 1, "b": -2}
        nested = TupleSignature((bits([True]), PairIntSignature(0, 1)))
        assert signature_to_canonical(nested) == [[True], {"a": 0, "b": 1}]

    def test_describe(self):
        assert describe_signature(PairIntSignature(3, 4)) == {
            "variant": "PairInt",
            "value": {"a": 3, "b": 4},
        }

    def test_str_of_bits(self):
        assert str(bits([True, False, True])) == "101"


# ============================================================================
# TEST: QUOTIENT
# ============================================================================

def _parity(n):
    return bits([n % 2 == 0])


class TestQuotient:

    def test_grouping(self):
        q = Quotient.from_signatures([1, 2, 3, 4, 5], _parity)
        assert q.size() == 2
        assert q.members(bits([False])) == (1, 3, 5)
        assert q.members(bits([True])) == (2, 4)

    def test_class_order_is_signature_order(self):
        q = Quotient.from_signatures(["b", "a", "c"], lambda s: TextSignature(s))
        assert [sig.text for sig in q] == ["a", "b", "c"]

    def test_encounter_order_within_class(self):
        q = Quotient.from_signatures([5, 3, 1], _parity)
        assert q.members(bits([False])) == (5, 3, 1)

    def test_empty_domain(self):
        q = Quotient.from_signatures([], _parity)
        assert q.size() == 0
        assert q.largest_class() is None
        assert q.smallest_class() is None

    def test_counts(self):
        q = Quotient.from_signatures(range(10), lambda n: PairIntSignature(n % 3, 0))
        assert q.element_count() == 10
        assert q.class_sizes() == [4, 3, 3]
        assert len(q) == 3

    def test_largest_and_smallest(self):
        q = Quotient.from_signatures(range(10), lambda n: PairIntSignature(n % 3, 0))
        sig, members = q.largest_class()
        assert sig == PairIntSignature(0, 0)
        assert members == (0, 3, 6, 9)
        sig, members = q.smallest_class()
        assert sig == PairIntSignature(1, 0)

    def test_largest_tie_takes_last_class(self):
        q = Quotient.from_signatures(range(4), lambda n: PairIntSignature(n % 2, 0))
        sig, members = q.largest_class()
        assert sig == PairIntSignature(1, 0)
        assert members == (1, 3)

    def test_smallest_tie_takes_first_class(self):
        q = Quotient.from_signatures(range(4), lambda n: PairIntSignature(n % 2, 0))
        sig, members = q.smallest_class()
        assert sig == PairIntSignature(0, 0)
        assert members == (0, 2)

    def test_signature_fn_must_return_signature(self):
        with pytest.raises(TypeError):
            Quotient.from_signatures([1], lambda n: n)

    def test_classes_read_only(self):
        q = Quotient.from_signatures([1], _parity)
        with pytest.raises(TypeError):
            q.classes[bits([True])] = (2,)


class TestQuotientDigest:

    def test_digest_definition(self):
        q = Quotient.from_signatures([1, 2, 3], _parity)
        expected = hashlib.sha256(
            b'[{"count":2,"sig":[false]},{"count":1,"sig":[true]}]'
        ).hexdigest()
        assert quotient_digest_hex(q) == expected
        assert quotient_digest(q).hex() == expected

    def test_shape_only(self):
        a = Quotient.from_signatures([1, 2, 3], _parity)
        b = Quotient.from_signatures([7, 100, 9], _parity)
        assert quotient_digest_hex(a) == quotient_digest_hex(b)

    def test_count_change_changes_digest(self):
        a = Quotient.from_signatures([1, 2, 3], _parity)
        b = Quotient.from_signatures([1, 2, 3, 5], _parity)
        assert quotient_digest_hex(a) != quotient_digest_hex(b)

    def test_outcome_flip_changes_digest(self):
        domain = [1, 2, 3, 4]
        a = Quotient.from_signatures(domain, _parity)
        b = Quotient.from_signatures(domain, lambda n: bits([n % 2 == 0 and n != 4]))
        assert a.element_count() == b.element_count()
        assert quotient_digest_hex(a) != quotient_digest_hex(b)

    def test_empty_digest(self):
        q = Quotient.from_signatures([], _parity)
        assert quotient_digest_hex(q) == hashlib.sha256(b"[]").hexdigest()

    def test_shape_is_canonical(self):
        q = Quotient.from_signatures(range(4), lambda n: PairIntSignature(n, -n))
        canonical_bytes(q.shape())


# ============================================================================
# TEST: ENTROPY
# ============================================================================

class TestEntropy:

    def test_powers_of_two(self):
        assert sem_entropy_bits(1) == 0.0
        assert sem_entropy_bits(4) == 2.0
        assert sem_entropy_bits(1024) == 10.0

    def test_strictly_increasing(self):
        values = [sem_entropy_bits(k) for k in range(1, 257)]
        assert all(a < b for a, b in zip(values, values[1:]))

    def test_non_power(self):
        assert sem_entropy_bits(6) == pytest.approx(math.log2(6))

    def test_zero_classes_error(self):
        with pytest.raises(EmptyPartitionError):
            sem_entropy_bits(0)

    def test_log2_u64(self):
        assert log2_u64(8) == 3.0
        with pytest.raises(EmptyPartitionError):
            log2_u64(0)

    def test_microbits(self):
        assert MICROBITS_PER_BIT == 1_000_000
        assert to_microbits(2.0) == 2_000_000
        assert to_microbits(math.log2(6)) == 2_584_963

    def test_microbits_sign_symmetric(self):
        assert to_microbits(0.25) == 250_000
        assert to_microbits(-0.25) == -250_000
        assert to_microbits(-2.0) == -2_000_000
