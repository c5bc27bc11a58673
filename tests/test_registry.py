import numpy as np
import pytest

from telemetry_buffer.core.models import ChannelSpec
from telemetry_buffer.core.registry import ChannelRegistry
from telemetry_buffer.errors import ConfigurationError, DimensionMismatch, UnknownChannel


def test_registry_rejects_empty_channel_list() -> None:
    with pytest.raises(ConfigurationError):
        ChannelRegistry([], window_size=2)


def test_registry_rejects_duplicate_names() -> None:
    with pytest.raises(ConfigurationError):
        ChannelRegistry([("pos", 3, 1), ("pos", 1, 1)], window_size=2)


def test_registry_keeps_declaration_order() -> None:
    registry = ChannelRegistry(
        [("vel", 3, 1), {"name": "acc", "dimensions": [3, 1]}, ChannelSpec("quat", 2, 2)],
        window_size=2,
    )

    assert registry.names() == ["vel", "acc", "quat"]
    assert [spec.name for spec, _ in registry] == ["vel", "acc", "quat"]
    assert registry.dimensions("quat") == (2, 2)


def test_channel_spec_rejects_bad_dimensions() -> None:
    with pytest.raises(ConfigurationError):
        ChannelSpec("pos", 0, 1)
    with pytest.raises(ConfigurationError):
        ChannelSpec("", 1, 1)
    with pytest.raises(ConfigurationError):
        ChannelSpec.coerce({"name": "pos", "dimensions": [3]})


def test_resolve_unknown_name_raises() -> None:
    registry = ChannelRegistry([("pos", 3, 1)], window_size=2)

    with pytest.raises(UnknownChannel):
        registry.resolve("nope")
    assert "nope" not in registry
    assert "pos" in registry


def test_handle_from_other_registry_is_rejected() -> None:
    first = ChannelRegistry([("pos", 3, 1)], window_size=2)
    second = ChannelRegistry([("pos", 3, 1)], window_size=2)

    with pytest.raises(UnknownChannel):
        second.resolve(first.handle("pos"))


def test_validate_checks_flattened_length() -> None:
    registry = ChannelRegistry([("rot", 2, 2)], window_size=2)

    flat = registry.validate("rot", [1, 2, 3, 4])
    np.testing.assert_array_equal(flat, [1.0, 2.0, 3.0, 4.0])

    # 2-D samples are flattened column-major
    values = registry.validate("rot", [[1, 2], [3, 4]])
    np.testing.assert_array_equal(values, [1.0, 3.0, 2.0, 4.0])

    with pytest.raises(DimensionMismatch) as excinfo:
        registry.validate("rot", [1, 2, 3])
    assert excinfo.value.expected == 4
    assert excinfo.value.actual == 3


def test_validate_rejects_2d_sample_with_wrong_shape() -> None:
    registry = ChannelRegistry([("pos", 3, 1)], window_size=2)

    with pytest.raises(DimensionMismatch) as excinfo:
        registry.validate("pos", [[1, 2, 3]])
    assert excinfo.value.shape == (1, 3)

    np.testing.assert_array_equal(registry.validate("pos", [[1], [2], [3]]), [1.0, 2.0, 3.0])


@pytest.mark.parametrize("name", ["_pos", "1vel", "joint-pos", "a b", "x" * 64])
def test_channel_names_must_be_mat_field_names(name: str) -> None:
    with pytest.raises(ConfigurationError):
        ChannelSpec(name, 3, 1)


def test_longest_allowed_channel_name() -> None:
    assert ChannelSpec("x" * 63).name == "x" * 63
