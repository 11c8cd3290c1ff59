"""
Tests del modelo de capacidades (stacks).

Prueba:
- enable / disable / is_enabled
- Migración de claves legacy (sentinel, payload reubicable, payload desconocido)
- Identidad del resultado cuando no hay cambios
"""

from soustack_lite.stacks import (
    Capability,
    STACK_KEYS,
    capabilities,
    disable,
    enable,
    is_enabled,
    legacy_payload,
    migrate,
    plan_migration,
    split_key,
)


def test_enable_timed():
    stacks = enable({}, "timed")

    assert stacks == {"timed": 1}
    assert is_enabled(stacks, "timed") is True


def test_enable_then_disable():
    original = {"prep": 1}
    enabled = enable(original, "storage")
    disabled = disable(enabled, "storage")

    assert is_enabled(enabled, "storage")
    assert not is_enabled(disabled, "storage")
    assert disabled == {"prep": 1}
    # no muta la entrada
    assert original == {"prep": 1}


def test_is_enabled_with_legacy_key():
    assert is_enabled({"timed@1": 1}, "timed")
    assert not is_enabled({"timed@1": 1}, "storage")
    assert not is_enabled(None, "timed")


def test_disable_leaves_legacy_keys():
    assert disable({"timed": 1, "timed@1": 1}, "timed") == {"timed@1": 1}


def test_migrate_prep_payload_relocates():
    """Test: `prep@1` con lista de {text} queda declarado y el payload se reubica."""
    plan = plan_migration({"prep@1": [{"text": "dice onion"}]})

    assert dict(plan.stacks) == {"prep": 1}
    assert plan.relocations == {"prepItems": [{"text": "dice onion"}]}


def test_migrate_sentinel():
    assert migrate({"timed@1": 1, "storage@2": True}) == {"timed": 1, "storage": 1}


def test_migrate_unknown_payload_is_preserved():
    stacks = {"storage@1": {"weird": True}, "custom@1": 1}
    result = migrate(stacks)

    assert result is stacks


def test_migrate_keeps_existing_declaration():
    stacks = {"prep": 1, "prep@1": [{"text": "x"}]}

    assert migrate(stacks) is stacks


def test_migrate_no_change_returns_same_object():
    stacks = {"timed": 1, "prep": 1}

    assert migrate(stacks) is stacks


def test_migrate_is_idempotent():
    stacks = {"prep@1": [{"text": "a"}], "timed@2": 1, "storage@1": "opaque"}
    once = migrate(stacks)
    twice = migrate(once)

    assert twice == once
    assert twice is once


def test_migrate_non_mapping():
    assert migrate(None) == {}


def test_capabilities_view():
    caps = capabilities({"timed": 1, "storage@1": {"a": 1}, "unknown": 1})

    assert [c.name for c in caps] == ["timed", "storage"]
    assert caps[0] == Capability(name="timed", declared=True)
    assert caps[1].declared is False
    assert caps[1].legacy_payload == {"a": 1}
    assert caps[1].enabled


def test_legacy_payload_and_split_key():
    assert legacy_payload({"prep@1": [1]}, "prep") == [1]
    assert legacy_payload({}, "prep") is None
    assert split_key("prep@1") == ("prep", "1")
    assert split_key("prep") == ("prep", None)
    assert "illustrated" in STACK_KEYS


def test_null_value_counts_as_declared():
    """Test: `{"timed": None}` declara la capacidad igual que cualquier otro valor."""
    stacks = {"timed": None}

    assert is_enabled(stacks, "timed")
    view = capabilities(stacks)
    assert [c.name for c in view] == ["timed"]
    assert view[0].declared is True
