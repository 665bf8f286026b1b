from typing import TYPE_CHECKING, Any, List, Optional
from oci_add_hooks.utils.constants import HOOK_PHASES

if TYPE_CHECKING:
    from oci_add_hooks.bundle_handler.config_document import HookSet

def merge_phase(existing: Optional[List[Any]], injected: Optional[List[Any]]) -> List[Any]:
    """
    Merge the entries of one lifecycle phase.

    Injected hooks are placed ahead of the existing ones so they run first.
    The result is always a new list, never one of the inputs.

    Args:
        existing: Entries already declared by the bundle
        injected: Entries to add

    Returns:
        List: injected entries followed by existing entries
    """
    return list(injected or []) + list(existing or [])

def merge_hooks(existing: "HookSet", injected: Optional["HookSet"]) -> "HookSet":
    """
    Merge injected hooks into existing, phase by phase, in place.

    Args:
        existing: Hook set to update
        injected: Hook set to add, None adds nothing

    Returns:
        HookSet: existing, with every phase merged
    """
    if injected is None:
        return existing
    merged = {
        phase: merge_phase(getattr(existing, phase), getattr(injected, phase))
        for phase in HOOK_PHASES
    }
    # Assign only once every phase merged
    for phase, entries in merged.items():
        setattr(existing, phase, entries)
    return existing
