from acuity.models import ZestTrial
from acuity.reliability import detect_guessing


def _trials(times, correct=True):
    return [
        ZestTrial(stimulus_logmar=0.0, is_correct=correct, response_time_ms=t, trial_number=i + 1)
        for i, t in enumerate(times)
    ]


def test_empty_history_reports_nothing():
    report = detect_guessing([])
    assert report.average_response_time == 0.0
    assert not report.is_likely_guessing
    assert report.too_fast_count == 0


def test_all_fast_responses_flag_guessing():
    report = detect_guessing(_trials([200, 310, 450, 120, 499]))
    assert report.is_likely_guessing
    assert report.too_fast_count == 5
    assert report.average_response_time == 315.8


def test_slow_responses_are_not_guessing():
    report = detect_guessing(_trials([3000] * 6))
    assert not report.is_likely_guessing
    assert report.average_response_time == 3000.0
    assert report.too_fast_count == 0


def test_fast_share_must_exceed_cutoff():
    # 2 of 5 is exactly 40%: not flagged
    assert not detect_guessing(_trials([100, 100, 1500, 1500, 1500])).is_likely_guessing
    assert detect_guessing(_trials([100, 100, 100, 1500, 1500])).is_likely_guessing


def test_custom_threshold():
    trials = _trials([700, 800, 900])
    assert not detect_guessing(trials).is_likely_guessing
    assert detect_guessing(trials, fast_threshold_ms=1000).is_likely_guessing
