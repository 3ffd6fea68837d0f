from loguru import logger

from formsuites.ui_testing.framework.log_sink import ListSink, loguru_sink


def test_list_sink_collects_and_clears():
    sink = ListSink()

    sink("[Field:TextField] Attempt 1")
    sink("[Field:TextField] Result=True")

    assert sink.contains("Attempt 1")
    assert not sink.contains("Attempt 2")

    sink.clear()
    assert sink.messages == []


def test_loguru_sink_forwards_at_debug_level():
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        loguru_sink("[Button] click: clicked button 'Save'")
    finally:
        logger.remove(handler_id)

    assert [r["message"] for r in records] == ["[Button] click: clicked button 'Save'"]
    assert records[0]["level"].name == "DEBUG"
