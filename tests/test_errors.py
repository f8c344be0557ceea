"""Tests for the error hierarchy."""

import pytest

from modelfit.errors import ModelFitError, ProfileError, RegistryError, SystemDetectionError, UnknownModelError


@pytest.mark.parametrize("cls", [ProfileError, RegistryError, SystemDetectionError])
def test_errors_share_base(cls):
    """Every error is a ModelFitError."""
    with pytest.raises(ModelFitError):
        raise cls("boom")


def test_profile_error_fields():
    """ProfileError carries source and field."""
    e = ProfileError("bad", source="m", field="memory")
    assert (str(e), e.source, e.field) == ("bad", "m", "memory")


def test_unknown_model_error():
    """UnknownModelError names the id and its tag."""
    e = UnknownModelError("gpt-9")
    assert str(e) == "Unknown model: gpt-9"
    assert e.kind == "model_definition"
    assert isinstance(e, ModelFitError)


def test_system_detection_kind():
    """System detection failures are distinguishable from incompatibility."""
    assert SystemDetectionError("x").kind == "system_detection"
