import threading

import pytest

from storysim.core.types import ChoiceType, SceneID
from storysim.services import InvalidChoiceError, SessionService, UnknownSessionError


def test_sessions_are_isolated() -> None:
    service = SessionService()
    first = service.create_session()
    second = service.create_session()

    service.apply_choice(first, ChoiceType.VISIT_CASTLE)

    assert first != second
    assert service.view(first).scene is SceneID.CASTLE
    assert service.view(second).scene is SceneID.START
    assert set(service.session_ids()) == {first, second}


def test_reset_only_touches_one_session() -> None:
    service = SessionService()
    first = service.create_session()
    second = service.create_session()
    service.apply_choice(first, ChoiceType.EXPLORE_FOREST)
    service.apply_choice(second, ChoiceType.EXPLORE_FOREST)

    view = service.reset(first)

    assert view.scene is SceneID.START
    assert service.view(second).scene is SceneID.FOREST


def test_unknown_session_raises() -> None:
    service = SessionService()

    with pytest.raises(UnknownSessionError):
        service.view("missing")
    with pytest.raises(KeyError):
        service.apply_choice("missing", ChoiceType.RETREAT)
    with pytest.raises(UnknownSessionError):
        service.close_session("missing")


def test_close_session_removes_it() -> None:
    service = SessionService()
    session_id = service.create_session()

    service.close_session(session_id)

    assert service.session_ids() == []
    with pytest.raises(UnknownSessionError):
        service.reset(session_id)


def test_invalid_choice_propagates() -> None:
    service = SessionService()
    session_id = service.create_session()

    with pytest.raises(InvalidChoiceError):
        service.apply_choice(session_id, ChoiceType.RETREAT)


def test_concurrent_choices_on_one_session_apply_once() -> None:
    service = SessionService()
    session_id = service.create_session()
    outcomes: list[str] = []
    outcomes_lock = threading.Lock()
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        try:
            service.apply_choice(session_id, ChoiceType.VISIT_CASTLE)
            outcome = "applied"
        except InvalidChoiceError:
            outcome = "rejected"
        with outcomes_lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("applied") == 1
    assert outcomes.count("rejected") == 7
    view = service.view(session_id)
    assert view.scene is SceneID.CASTLE
    assert view.morality == -5
