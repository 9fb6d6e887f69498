"""Shared test helpers and constants."""

from stock_kernel.domain.identifiers import IdGenerator
from stock_kernel.services.client_state import ClientState

BRANCH = "riyadh-01"
OTHER_BRANCH = "jeddah-01"


def make_state(store, clock) -> ClientState:
    """A loaded ClientState over ``store``."""
    state = ClientState(store, clock=clock, ids=IdGenerator(clock))
    state.load()
    return state


def item_named(state: ClientState, location_id: str, name_en: str):
    """The cached item called ``name_en`` at ``location_id``."""
    item = state.inventory.find_by_name(location_id, name_en)
    assert item is not None, f"{name_en} not stocked at {location_id}"
    return item
