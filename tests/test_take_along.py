"""Tests for the take-along library."""

import pytest

from capi2argo.exceptions import MalformedKeyError, MissingTargetWarning
from capi2argo.take_along import (
    MetaKind,
    build_take_along_map,
    extract_take_along_key,
    get_meta_type,
)


@pytest.mark.parametrize(
    ("kind", "name", "take_along", "taken_from"),
    [
        (
            MetaKind.LABEL,
            "label",
            "take-along-label.capi-to-argocd.",
            "taken-from-cluster-label.capi-to-argocd.",
        ),
        (
            MetaKind.ANNOTATION,
            "annotation",
            "take-along-annotation.capi-to-argocd.",
            "taken-from-cluster-annotation.capi-to-argocd.",
        ),
    ],
)
def test_get_meta_type(
    kind: MetaKind, name: str, take_along: str, taken_from: str
) -> None:
    """Test the prefixes for each metadata kind."""
    meta_type = get_meta_type(kind)
    assert meta_type.name == name
    assert meta_type.take_along == take_along
    assert meta_type.taken_from == taken_from


def test_get_meta_type_unknown() -> None:
    """Test an unknown kind builds prefixes with an empty name."""
    meta_type = get_meta_type("other")  # type: ignore[arg-type]
    assert meta_type.name == ""
    assert meta_type.take_along == "take-along-.capi-to-argocd."
    assert meta_type.taken_from == "taken-from-cluster-.capi-to-argocd."


def test_extract_take_along_key() -> None:
    """Test extracting the target key of a take-along key."""
    assert extract_take_along_key("label", "take-along-label.capi-to-argocd.foo") == "foo"
    assert (
        extract_take_along_key("label", "take-along-label.capi-to-argocd.a/b.c")
        == "a/b.c"
    )


@pytest.mark.parametrize(
    "key",
    [
        "foo",
        "take-along-annotation.capi-to-argocd.foo",
        "prefix.take-along-label.capi-to-argocd.foo",
        "",
    ],
)
def test_extract_not_take_along_key(key: str) -> None:
    """Test keys that are not take-along requests for labels."""
    assert extract_take_along_key("label", key) == ""


def test_extract_malformed_key() -> None:
    """Test a take-along key with no target key."""
    with pytest.raises(MalformedKeyError, match="missing key") as exc_info:
        extract_take_along_key("annotation", "take-along-annotation.capi-to-argocd.")
    assert exc_info.value.kind == "annotation"
    assert exc_info.value.key == "take-along-annotation.capi-to-argocd."


def test_build_take_along_map() -> None:
    """Test copying a take-along label and its provenance marker."""
    take_along, errors = build_take_along_map(
        {
            "take-along-label.capi-to-argocd.foo": "x",
            "foo": "v",
            "bar": "ignored",
        },
        MetaKind.LABEL,
    )
    assert take_along == {
        "foo": "v",
        "taken-from-cluster-label.capi-to-argocd.foo": "",
    }
    assert not errors


def test_build_take_along_map_annotations() -> None:
    """Test only the take-along keys of the requested kind are used."""
    take_along, errors = build_take_along_map(
        {
            "take-along-annotation.capi-to-argocd.owner": "",
            "take-along-label.capi-to-argocd.env": "",
            "owner": "platform",
            "env": "production",
        },
        MetaKind.ANNOTATION,
    )
    assert take_along == {
        "owner": "platform",
        "taken-from-cluster-annotation.capi-to-argocd.owner": "",
    }
    assert not errors


def test_build_take_along_map_malformed() -> None:
    """Test a malformed take-along key discards every entry for the kind."""
    take_along, errors = build_take_along_map(
        {
            "take-along-label.capi-to-argocd.": "",
            "take-along-label.capi-to-argocd.foo": "",
            "foo": "v",
        },
        MetaKind.LABEL,
    )
    assert take_along == {}
    assert len(errors) == 1
    assert isinstance(errors[0], MalformedKeyError)
    assert errors[0].key == "take-along-label.capi-to-argocd."


def test_build_take_along_map_missing_target() -> None:
    """Test a take-along key without a target is skipped."""
    take_along, errors = build_take_along_map(
        {
            "take-along-label.capi-to-argocd.missing": "",
            "take-along-label.capi-to-argocd.foo": "",
            "foo": "v",
        },
        MetaKind.LABEL,
        resource="prod, namespace: team-a",
    )
    assert take_along == {
        "foo": "v",
        "taken-from-cluster-label.capi-to-argocd.foo": "",
    }
    assert len(errors) == 1
    assert isinstance(errors[0], MissingTargetWarning)
    assert errors[0].key == "missing"
    assert "prod, namespace: team-a" in str(errors[0])


def test_build_take_along_map_only_missing_target() -> None:
    """Test a lone take-along key without a target."""
    take_along, errors = build_take_along_map(
        {"take-along-label.capi-to-argocd.missing": ""},
        MetaKind.LABEL,
    )
    assert take_along == {}
    assert len(errors) == 1
    assert isinstance(errors[0], MissingTargetWarning)


def test_build_take_along_map_empty() -> None:
    """Test metadata without take-along keys."""
    assert build_take_along_map({}, MetaKind.LABEL) == ({}, [])
    assert build_take_along_map({"foo": "bar"}, MetaKind.ANNOTATION) == ({}, [])
