"""Tests for the query string encoder."""

import pytest
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from qs_transformer.encoder import QueryStringEncoder, CycleGuard, stringify
from qs_transformer.types import CyclicReferenceError, ErrorType


class TestStringifyScalars:
    """Tests for scalar and absent values."""

    def test_simple_mapping(self):
        """Test encoding a flat mapping."""
        assert stringify({"a": 1}) == "a=1"

    def test_preserves_insertion_order(self):
        """Test that keys are emitted in insertion order."""
        assert stringify({"z": "1", "a": "2", "m": "3"}) == "z=1&a=2&m=3"

    def test_booleans_become_numbers(self):
        """Test that booleans are coerced to 1 and 0."""
        assert stringify({"a": True, "b": False}) == "a=1&b=0"

    def test_numbers(self):
        """Test encoding of ints, floats and decimals."""
        assert stringify({"i": 42, "f": 1.5, "d": Decimal("2.50")}) == "i=42&f=1.5&d=2.50"

    def test_none_reserves_key(self):
        """Test that None produces an empty assignment."""
        assert stringify({"a": None, "b": "x"}) == "a=&b=x"

    def test_callables_are_absent(self):
        """Test that functions are treated like missing values."""
        assert stringify({"f": len, "g": lambda: 1, "b": 1}) == "f=&g=&b=1"

    def test_root_none_produces_nothing(self):
        """Test that a bare None root yields an empty string."""
        assert stringify(None) == ""

    def test_root_none_with_prefix(self):
        """Test that None under a key prefix still reserves the key."""
        assert stringify(None, key_prefix="flag") == "flag="

    def test_root_scalar_with_prefix(self):
        """Test encoding a scalar under an explicit key prefix."""
        assert stringify(5, key_prefix="n") == "n=5"

    def test_root_scalar_without_prefix(self):
        """Test that a scalar root has an empty key."""
        assert stringify("x") == "=x"

    def test_bytes_are_strings(self):
        """Test that bytes are encoded as UTF-8 text."""
        assert stringify({"b": b"hi"}) == "b=hi"

    def test_values_are_escaped(self):
        """Test percent-encoding of reserved characters in values."""
        assert stringify({"q": "a&b=c d"}) == "q=a%26b%3Dc%20d"

    def test_unicode_is_escaped(self):
        """Test percent-encoding of non-ASCII characters."""
        assert stringify({"name": "é"}) == "name=%C3%A9"

    def test_non_string_keys(self):
        """Test that mapping keys are converted to text."""
        assert stringify({1: "a", 2.5: "b"}) == "1=a&2.5=b"


class TestStringifyContainers:
    """Tests for sequences and nested mappings."""

    def test_sequence(self):
        """Test encoding a list with repeated append keys."""
        assert stringify({"a": [1, 2]}) == "a[]=1&a[]=2"

    def test_tuple_is_sequence(self):
        """Test that tuples encode like lists."""
        assert stringify({"a": ("x", "y")}) == "a[]=x&a[]=y"

    def test_nested_mapping(self):
        """Test encoding a nested mapping."""
        assert stringify({"a": {"b": 1}}) == "a[b]=1"

    def test_deep_nesting(self):
        """Test encoding of a mapping holding a list several levels down."""
        assert stringify({"a": {"b": {"c": [1, 2]}}}) == "a[b][c][]=1&a[b][c][]=2"

    def test_sequence_of_mappings(self):
        """Test that mappings inside lists nest under the append key."""
        assert stringify({"a": [{"b": 1}, {"b": 2}]}) == "a[][b]=1&a[][b]=2"

    def test_nested_sequences(self):
        """Test that nested lists stack append markers."""
        assert stringify({"a": [[1, 2], 3]}) == "a[][]=1&a[][]=2&a[]=3"

    def test_none_inside_sequence(self):
        """Test that None elements keep their append key."""
        assert stringify({"a": [None, "x"]}) == "a[]=&a[]=x"

    def test_empty_sequence_emits_nothing(self):
        """Test that empty lists disappear entirely."""
        assert stringify({"a": [], "b": 1}) == "b=1"
        assert stringify([], key_prefix="a") == ""

    def test_empty_mapping_reserves_key(self):
        """Test that an empty mapping still emits its key."""
        assert stringify({"a": {}}) == "a="
        assert stringify({"a": {"b": {}}}) == "a[b]="

    def test_empty_mapping_of_empty_sequence(self):
        """Test a mapping whose only child vanishes."""
        assert stringify({"a": {"b": []}}) == "a="

    def test_empty_mapping_key_is_not_escaped(self):
        """Test that the empty-mapping key is emitted verbatim while None escapes it."""
        assert stringify({"a b": {}}) == "a b="
        assert stringify({"a b": None}) == "a%20b="

    def test_empty_root_mapping(self):
        """Test that an empty root produces nothing."""
        assert stringify({}) == ""

    def test_object_attributes(self, point):
        """Test that plain objects encode their instance attributes."""
        assert stringify(point) == "x=3&y=4"
        assert stringify({"p": point}) == "p[x]=3&p[y]=4"

    def test_class_attributes_are_skipped(self):
        """Test that inherited class attributes are not own keys."""

        class Record:
            kind = "record"

            def __init__(self):
                self.id = 7

        assert stringify({"r": Record()}) == "r[id]=7"

    def test_object_without_attributes(self):
        """Test that attribute-less objects behave like empty mappings."""
        assert stringify({"o": object()}) == "o="


class TestStringifyOptions:
    """Tests for separator, assigner and escape options."""

    def test_custom_separator_and_assigner(self):
        """Test custom joining characters."""
        assert stringify({"a": 1, "b": 2}, separator=";", assigner=":") == "a:1;b:2"

    def test_empty_options_fall_back_to_defaults(self):
        """Test that empty separator and assigner use the defaults."""
        assert stringify({"a": 1, "b": 2}, separator="", assigner="") == "a=1&b=2"

    def test_custom_escape(self):
        """Test injecting a custom escape function."""
        assert stringify({"a": "x"}, escape=lambda v: str(v).upper()) == "A=X"

    def test_encoder_instance_reuse(self):
        """Test that a configured encoder can be reused."""
        encoder = QueryStringEncoder(separator=";")
        assert encoder.encode({"a": [1, 2]}) == "a[]=1;a[]=2"
        assert encoder.encode({"b": 3}) == "b=3"


class TestCyclicReferences:
    """Tests for cycle detection."""

    def test_self_referencing_mapping(self):
        """Test that a mapping containing itself raises."""
        data = {}
        data["self"] = data

        with pytest.raises(CyclicReferenceError):
            stringify(data)

    def test_indirect_cycle_reports_key(self, cyclic_mapping):
        """Test that the error carries the key where the cycle closed."""
        with pytest.raises(CyclicReferenceError) as exc_info:
            stringify(cyclic_mapping)

        assert exc_info.value.key_prefix == "child[parent]"
        assert exc_info.value.error_type == ErrorType.CIRCULAR

    def test_self_referencing_sequence(self):
        """Test that a list containing itself raises instead of recursing forever."""
        items = [1]
        items.append(items)

        with pytest.raises(CyclicReferenceError):
            stringify({"a": items})

    def test_shared_reference_is_not_a_cycle(self):
        """Test that siblings may share the same container."""
        shared = {"v": 1}
        assert stringify({"a": shared, "b": shared}) == "a[v]=1&b[v]=1"

    def test_encoder_recovers_after_cycle(self, cyclic_mapping):
        """Test that a failed call leaves no state behind."""
        encoder = QueryStringEncoder()

        with pytest.raises(CyclicReferenceError):
            encoder.encode(cyclic_mapping)

        assert encoder.encode({"a": 1}) == "a=1"

    def test_concurrent_calls_share_no_state(self, sample_form_data):
        """Test that concurrent encodes of the same value all succeed."""
        expected = stringify(sample_form_data)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(stringify, [sample_form_data] * 200))

        assert all(result == expected for result in results)


class TestCycleGuard:
    """Tests for the CycleGuard ancestor stack."""

    def test_visiting_pushes_and_pops(self):
        """Test that the stack reflects only the active block."""
        guard = CycleGuard()
        value = {}

        with guard.visiting(value):
            assert value in guard
            assert len(guard) == 1

        assert value not in guard
        assert len(guard) == 0

    def test_identity_not_equality(self):
        """Test that equal but distinct containers are not ancestors."""
        guard = CycleGuard()

        with guard.visiting({"a": 1}):
            assert {"a": 1} not in guard

    def test_stack_restored_after_error(self):
        """Test that the stack unwinds when the block raises."""
        guard = CycleGuard()
        outer = {}

        with pytest.raises(CyclicReferenceError):
            with guard.visiting(outer):
                with guard.visiting({}):
                    with guard.visiting(outer, "a[b]"):
                        pass

        assert len(guard) == 0
