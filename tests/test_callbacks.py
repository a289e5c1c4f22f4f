import logging
from uuid import uuid4

from langchain_core.callbacks import BaseCallbackHandler

from function_agent.callbacks import (LoggingCallbackHandler,
                                      StreamingCallbackHandler,
                                      build_callbacks)
from function_agent.channels import BufferedChannel
from function_agent.schemas import StreamingTarget


class MarkerHandler(BaseCallbackHandler):
    pass


class OtherHandler(BaseCallbackHandler):
    pass


def test_logging_handler_only_without_target():
    pipeline = build_callbacks()

    assert len(pipeline) == 1
    assert isinstance(pipeline[0], LoggingCallbackHandler)


def test_streaming_handler_sits_after_logging_and_before_external():
    target = StreamingTarget(channel=BufferedChannel(), session_id="s1")
    external = [MarkerHandler(), OtherHandler()]

    pipeline = build_callbacks(None, target, external)

    assert [type(h) for h in pipeline] == [
        LoggingCallbackHandler,
        StreamingCallbackHandler,
        MarkerHandler,
        OtherHandler,
    ]
    assert pipeline[2] is external[0]
    assert pipeline[3] is external[1]


def test_building_twice_gives_same_shape():
    target = StreamingTarget(channel=BufferedChannel(), session_id="s1")
    external = [MarkerHandler()]

    first = build_callbacks(None, target, external)
    second = build_callbacks(None, target, external)

    assert [type(h) for h in first] == [type(h) for h in second]
    assert first is not second


def test_streaming_handler_forwards_tokens_and_skips_empty():
    channel = BufferedChannel()
    handler = StreamingCallbackHandler(StreamingTarget(channel=channel, session_id="s1"))

    for token in ["Hel", "", "lo", " ", "world"]:
        handler.on_llm_new_token(token, run_id=uuid4())

    assert channel.chunks["s1"] == ["Hel", "lo", " ", "world"]
    assert channel.text("s1") == "Hello world"


def test_logging_handler_writes_tool_events(caplog):
    trace = logging.getLogger("tests.trace")
    handler = LoggingCallbackHandler(trace)
    run_id = uuid4()

    with caplog.at_level(logging.INFO, logger="tests.trace"):
        handler.on_tool_start({"name": "search"}, "cats", run_id=run_id)
        handler.on_tool_end("3 results", run_id=run_id)
        handler.on_tool_error(RuntimeError("boom"), run_id=uuid4())

    assert "[tool/start] search input=cats" in caplog.text
    assert "[tool/end]" in caplog.text
    assert "3 results" in caplog.text
    assert "boom" in caplog.text
