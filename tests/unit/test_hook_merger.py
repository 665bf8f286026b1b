import os
import sys
import json
import pytest

# Add repo root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from oci_add_hooks.bundle_handler.config_document import ConfigDocument, HookSet
from oci_add_hooks.bundle_handler.hook_merger import merge_phase, merge_hooks
from oci_add_hooks.utils.constants import HOOK_PHASES

SINGLE = [{"path": "/existing"}]
OTHER = [{"path": "/injected"}]

@pytest.mark.parametrize("existing, injected, expected", [
    (None, None, []),
    ([], [], []),
    (None, OTHER, OTHER),
    (SINGLE, None, SINGLE),
    ([], OTHER, OTHER),
    (SINGLE, [], SINGLE),
    (SINGLE, OTHER, OTHER + SINGLE),
])
def test_merge_phase(existing, injected, expected):
    assert merge_phase(existing, injected) == expected

def test_merge_phase_returns_new_list():
    existing = [{"a": 1}]
    injected = [{"b": 2}]
    for result in (merge_phase(existing, None), merge_phase(None, injected), merge_phase(existing, injected)):
        assert result is not existing
        assert result is not injected
    merge_phase(existing, injected).append({"c": 3})
    assert existing == [{"a": 1}]
    assert injected == [{"b": 2}]

def test_merge_phase_keeps_order_within_sides():
    existing = [{"e": 1}, {"e": 2}]
    injected = [{"i": 1}, {"i": 2}]
    assert merge_phase(existing, injected) == [{"i": 1}, {"i": 2}, {"e": 1}, {"e": 2}]

@pytest.mark.parametrize("phase", HOOK_PHASES)
def test_merge_hooks_prepends_injected_per_phase(phase):
    existing = HookSet()
    injected = HookSet()
    setattr(existing, phase, [{"E": phase}])
    setattr(injected, phase, [{"I": phase}])

    result = merge_hooks(existing, injected)

    assert result is existing
    assert getattr(result, phase) == [{"I": phase}, {"E": phase}]
    for other in HOOK_PHASES:
        if other != phase:
            assert getattr(result, other) == []

def test_merge_hooks_none_leaves_existing():
    existing = HookSet()
    existing.prestart = [{"a": 1}]
    assert merge_hooks(existing, None).prestart == [{"a": 1}]

def test_merge_hooks_keeps_unknown_keys():
    existing = HookSet.from_dict({"prestart": [{"a": 1}], "vendorHooks": {"x": 1}})
    injected = HookSet.from_dict({"prestart": [{"b": 2}], "ignored": True})
    merged = merge_hooks(existing, injected).to_dict()
    assert merged["vendorHooks"] == {"x": 1}
    assert "ignored" not in merged

def test_config_document_merge_scenario_prestart():
    bundle = ConfigDocument.parse(b'{"hooks":{"prestart":[{"a":1}]},"unrelated":"x"}')
    hooks = ConfigDocument.parse(b'{"hooks":{"prestart":[{"b":2}]}}')

    out = json.loads(bundle.merge(hooks).serialize())

    assert out["hooks"]["prestart"] == [{"b": 2}, {"a": 1}]
    assert out["unrelated"] == "x"

def test_config_document_merge_scenario_no_bundle_hooks():
    bundle = ConfigDocument.parse(b'{"ociVersion":"1.0.2"}')
    hooks = ConfigDocument.parse(b'{"hooks":{"createRuntime":[{"c":3}]}}')

    out = json.loads(bundle.merge(hooks).serialize())

    assert out["hooks"]["createRuntime"] == [{"c": 3}]
    for phase in HOOK_PHASES:
        if phase != "createRuntime":
            assert out["hooks"][phase] == []
    assert out["ociVersion"] == "1.0.2"

def test_config_document_merge_none():
    bundle = ConfigDocument.parse(b'{"hooks":{"prestart":[{"a":1}]}}')
    assert bundle.merge(None).hooks.prestart == [{"a": 1}]

def test_hook_merger_has_no_document_import():
    import oci_add_hooks.bundle_handler.hook_merger as hook_merger
    assert not hasattr(hook_merger, "HookSet")
    assert not hasattr(HookSet, "merge")
