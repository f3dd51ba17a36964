import json
import logging

from sortedseq import observability
from sortedseq.config import SequenceSettings
from sortedseq.sequence import SortedSequence


def test_growth_and_shrink_are_counted():
    grows = observability.STORAGE_GROW_COUNTER.value
    shrinks = observability.STORAGE_SHRINK_COUNTER.value
    seq = SortedSequence(settings=SequenceSettings(min_capacity=2))
    seq.update([1, 2, 3])
    assert observability.STORAGE_GROW_COUNTER.value == grows + 2
    seq.reserve(100)
    seq.shrink_to_fit()
    seq.shrink_to_fit()
    assert observability.STORAGE_SHRINK_COUNTER.value == shrinks + 1


def test_generate_metrics_lists_counters():
    body = observability.generate_metrics().decode()
    assert "# TYPE sortedseq_storage_grows_total counter" in body
    assert "sortedseq_storage_shrinks_total" in body


def test_growth_logged_with_extra_fields(caplog):
    caplog.set_level(logging.DEBUG, logger="sortedseq")
    SortedSequence().insert(1)
    records = [r for r in caplog.records if r.getMessage() == "grew sorted sequence storage"]
    assert records
    assert records[0].old_capacity == 0
    assert records[0].length == 0


def test_out_of_order_resize_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="sortedseq")
    SortedSequence([5]).resize(2, 1)
    assert any("resize fill value" in r.getMessage() for r in caplog.records)


def test_growth_threshold_warning(monkeypatch, caplog):
    monkeypatch.setenv("SORTEDSEQ_GROWTH_ALERT_THRESHOLD", "1")
    caplog.set_level(logging.WARNING, logger="sortedseq")
    SortedSequence().insert(1)
    assert any("threshold 1 reached" in r.getMessage() for r in caplog.records)


def test_json_formatter_includes_extra():
    record = logging.LogRecord(
        "sortedseq.sequence", logging.DEBUG, __file__, 1, "grew", None, None
    )
    record.new_capacity = 8
    data = json.loads(observability.JSONFormatter().format(record))
    assert data["level"] == "DEBUG"
    assert data["logger"] == "sortedseq.sequence"
    assert data["message"] == "grew"
    assert data["new_capacity"] == 8


def test_configure_logging_is_idempotent():
    package_logger = observability.configure_logging("INFO")
    observability.configure_logging("DEBUG")
    handlers = [
        h for h in package_logger.handlers
        if isinstance(h.formatter, observability.JSONFormatter)
    ]
    assert len(handlers) == 1
    assert package_logger.level == logging.DEBUG
    for handler in handlers:
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


def test_sequence_settings_threshold_warning(caplog):
    caplog.set_level(logging.WARNING, logger="sortedseq")
    seq = SortedSequence(settings=SequenceSettings(growth_alert_threshold=1))
    seq.insert(1)
    assert any("threshold 1 reached" in r.getMessage() for r in caplog.records)
