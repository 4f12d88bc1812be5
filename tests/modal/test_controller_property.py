from __future__ import annotations

import hypothesis.strategies as st
from hypothesis import HealthCheck, given, settings

from modalkit.modal.controller import ModalController
from modalkit.modal.models import PresentationState

_HC = [HealthCheck.function_scoped_fixture]

text_strat = st.text(max_size=40)

show_strat = st.fixed_dictionaries(
    {},
    optional={
        "icon": text_strat,
        "title": text_strat,
        "message": text_strat,
    },
)

op_strat = st.one_of(
    st.tuples(st.just("show"), show_strat),
    st.tuples(st.sampled_from(["success", "error", "info"]), text_strat),
    st.tuples(st.just("confirm"), text_strat),
    st.tuples(st.just("close"), st.none()),
)


def _apply(modal: ModalController, op: tuple) -> None:
    name, arg = op
    if name == "show":
        modal.show(**arg)
    elif name == "close":
        modal.close()
    else:
        getattr(modal, name)(arg)


@settings(deadline=None, max_examples=150, suppress_health_check=_HC)
@given(ops=st.lists(op_strat, max_size=12))
def test_state_shape_invariants(ops: list) -> None:
    modal = ModalController()
    for op in ops:
        _apply(modal, op)
        state = modal.state
        if state.visible:
            assert len(state.buttons) >= 1
        else:
            assert state == PresentationState.hidden()


@settings(deadline=None, max_examples=100, suppress_health_check=_HC)
@given(ops=st.lists(op_strat, max_size=8))
def test_close_after_anything_is_hidden(ops: list) -> None:
    modal = ModalController()
    for op in ops:
        _apply(modal, op)
    modal.close()
    assert modal.state == PresentationState.hidden()
    modal.close()
    assert modal.state == PresentationState.hidden()


@settings(deadline=None, max_examples=100, suppress_health_check=_HC)
@given(first=show_strat, second=show_strat)
def test_second_show_discards_first(first: dict, second: dict) -> None:
    modal = ModalController()
    modal.show(**first)
    modal.show(**second)
    assert modal.icon == second.get("icon", "")
    assert modal.title == second.get("title", "")
    assert modal.message == second.get("message", "")


@settings(deadline=None, max_examples=60, suppress_health_check=_HC)
@given(message=text_strat, title=text_strat)
def test_default_ok_button_always_dismisses(message: str, title: str) -> None:
    modal = ModalController()
    modal.success(message, title)
    assert [b.text for b in modal.buttons] == ["OK"]
    modal.activate(0)
    assert modal.state == PresentationState.hidden()
