"""
Unit tests for the live-session debrief.
"""

from resus.protocol import EventAction, Session, build_debrief


def session_with(timeline, elapsed, rosc=False):
    session = Session(weight_kg=20)
    for at, action in timeline:
        session.elapsed_seconds = at
        session.append_event(action)
    session.elapsed_seconds = elapsed
    session.rosc_achieved = rosc
    return session


def test_empty_session():
    report = build_debrief(Session(weight_kg=20))
    assert report.total_duration_seconds == 0
    assert report.compression_fraction == 0.0
    assert report.time_to_first_shock is None
    assert report.time_to_first_epi is None
    assert report.critical_delays == []
    assert report.strengths == []
    assert report.outcome == "ongoing"


def test_delays_flagged():
    session = session_with(
        [
            (0, EventAction.CPR_STARTED),
            (120, EventAction.RHYTHM_CHECK),
            (125, EventAction.SHOCK_DELIVERED),
            (200, EventAction.EPINEPHRINE_GIVEN),
            (240, EventAction.RHYTHM_CHECK),
            (400, EventAction.RHYTHM_CHECK),
        ],
        elapsed=400,
    )
    report = build_debrief(session)

    assert report.rhythm_check_intervals == [120, 160]
    assert report.compression_fraction == 92.5
    assert report.time_to_first_shock == 125
    assert report.time_to_first_epi == 200
    assert report.critical_delays == [
        "Epinephrine delayed (3 min)",
        "First shock delayed (2 min)",
        "Rhythm check interval exceeded 2.5 minutes",
    ]
    assert report.strengths == ["Excellent compression fraction (>=80%)"]


def test_strengths_and_rosc():
    session = session_with(
        [
            (0, EventAction.CPR_STARTED),
            (60, EventAction.RHYTHM_CHECK),
            (62, EventAction.SHOCK_DELIVERED),
            (150, EventAction.EPINEPHRINE_GIVEN),
            (180, EventAction.RHYTHM_CHECK),
            (190, EventAction.ROSC_ACHIEVED),
        ],
        elapsed=190,
        rosc=True,
    )
    report = build_debrief(session)

    assert report.outcome == "ROSC"
    assert report.critical_delays == []
    assert "Timely epinephrine administration" in report.strengths
    assert "Rapid defibrillation" in report.strengths


def test_low_compression_fraction():
    session = session_with([(i * 10, EventAction.RHYTHM_CHECK) for i in range(5)], elapsed=50)
    report = build_debrief(session)
    assert report.compression_fraction == 0.0
    assert report.strengths == []
