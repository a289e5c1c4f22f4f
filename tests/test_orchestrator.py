import pytest
from langchain_core.chat_history import InMemoryChatMessageHistory
from langchain_core.messages import AIMessage, HumanMessage

from function_agent.callbacks import LoggingCallbackHandler, StreamingCallbackHandler
from function_agent.channels import BufferedChannel
from function_agent.errors import MissingVariablesError
from function_agent.memory import OutputMode, external_memory, in_process_memory
from function_agent.orchestrator import run_agent
from function_agent.schemas import ExecutionRequest, StreamingTarget
from tests.fakes import SAMPLE_ANSWER, SAMPLE_QUESTION, RecordingAgent, make_agent


def test_scenario_a_empty_values_single_variable_runs_free_form():
    agent = RecordingAgent(human_message="Tell me about {topic}")

    result = run_agent(agent, ExecutionRequest(raw_input=SAMPLE_QUESTION, prompt_values={}))

    assert result == SAMPLE_ANSWER
    assert [c[:2] for c in agent.calls] == [("invoke", SAMPLE_QUESTION)]


def test_scenario_b_one_missing_variable_takes_the_raw_input():
    agent = RecordingAgent(human_message="Write about {topic} in a {tone} tone")

    result = run_agent(
        agent,
        ExecutionRequest(raw_input="playful", prompt_values={"topic": "cats"}),
    )

    assert agent.calls[0][:2] == (
        "invoke_with_template",
        {"topic": "cats", "tone": "playful"},
    )
    assert result == SAMPLE_ANSWER


def test_scenario_c_three_missing_variables_fail_before_invoking():
    agent = RecordingAgent(human_message="{topic} / {tone} / {length}")

    with pytest.raises(MissingVariablesError) as exc_info:
        run_agent(agent, ExecutionRequest(raw_input=SAMPLE_QUESTION, prompt_values={}))

    assert exc_info.value.missing == ["topic", "tone", "length"]
    assert "topic, tone, length" in str(exc_info.value)
    assert agent.calls == []


def test_scenario_d_streamed_chunks_concatenate_to_the_result():
    agent, _ = make_agent(SAMPLE_ANSWER)
    channel = BufferedChannel()
    target = StreamingTarget(channel=channel, session_id="session-1")

    result = run_agent(
        agent, ExecutionRequest(raw_input=SAMPLE_QUESTION, streaming_target=target)
    )

    assert result == SAMPLE_ANSWER
    assert len(channel.chunks["session-1"]) > 1
    assert channel.text("session-1") == result


def test_scenario_e_fully_bound_values_are_passed_unchanged():
    agent = RecordingAgent(human_message="Write about {topic} in a {tone} tone")
    values = {"topic": "cats", "tone": "dry"}

    run_agent(agent, ExecutionRequest(raw_input="ignored", prompt_values=values))

    assert len(agent.calls) == 1
    kind, bound, _ = agent.calls[0]
    assert kind == "invoke_with_template"
    assert bound == {"topic": "cats", "tone": "dry"}


def test_templated_result_without_text_is_returned_whole():
    structured = {"output": "no text field", "steps": 2}
    agent = RecordingAgent(human_message="{topic}", structured=structured)

    result = run_agent(agent, ExecutionRequest(raw_input="x", prompt_values={"topic": "cats"}))

    assert result is structured


def test_pipeline_passed_to_agent_includes_streaming_only_when_targeted():
    agent = RecordingAgent()
    target = StreamingTarget(channel=BufferedChannel(), session_id="s")

    run_agent(agent, ExecutionRequest(raw_input="a"))
    run_agent(agent, ExecutionRequest(raw_input="b", streaming_target=target))

    blocking, streaming = agent.calls[0][2], agent.calls[1][2]
    assert [type(h) for h in blocking] == [LoggingCallbackHandler]
    assert [type(h) for h in streaming] == [LoggingCallbackHandler, StreamingCallbackHandler]


def test_history_override_replaces_in_process_memory():
    memory = in_process_memory([HumanMessage(content="stale")])
    agent = RecordingAgent(memory=memory)

    run_agent(
        agent,
        ExecutionRequest(
            raw_input="hi",
            chat_history=[{"type": "userMessage", "message": "earlier"},
                          {"type": "apiMessage", "message": "noted"}],
        ),
    )

    assert memory.chat_history.messages == [
        HumanMessage(content="earlier"),
        AIMessage(content="noted"),
    ]
    assert memory.output_mode is OutputMode.STRUCTURED


def test_history_override_never_replaces_external_memory():
    store = InMemoryChatMessageHistory()
    store.add_messages([HumanMessage(content="persisted")])
    memory = external_memory(store)
    agent = RecordingAgent(memory=memory)

    run_agent(
        agent,
        ExecutionRequest(raw_input="hi", chat_history=[{"role": "user", "content": "override"}]),
    )

    assert [m.content for m in store.messages] == ["persisted"]
    assert memory.output_mode is OutputMode.STRUCTURED


def test_agent_errors_propagate_unchanged():
    boom = RuntimeError("provider unavailable")
    agent, _ = make_agent(error=boom)

    with pytest.raises(RuntimeError) as exc_info:
        run_agent(agent, ExecutionRequest(raw_input=SAMPLE_QUESTION))

    assert exc_info.value is boom


def test_templated_text_is_formatted_from_content_blocks():
    structured = {"text": [{"type": "text", "text": "  Cats nap "}, {"type": "text", "text": "a lot.\n"}]}
    agent = RecordingAgent(human_message="{topic}", structured=structured)

    result = run_agent(agent, ExecutionRequest(raw_input="x", prompt_values={"topic": "cats"}))

    assert result == "Cats nap a lot."


def test_templated_streaming_hands_the_streaming_handler_to_the_template_call():
    agent = RecordingAgent(human_message="Tell me about {topic}")
    target = StreamingTarget(channel=BufferedChannel(), session_id="s")

    result = run_agent(
        agent,
        ExecutionRequest(raw_input="x", prompt_values={"topic": "cats"}, streaming_target=target),
    )

    kind, bound, handlers = agent.calls[0]
    assert kind == "invoke_with_template"
    assert bound == {"topic": "cats"}
    assert [type(h) for h in handlers] == [LoggingCallbackHandler, StreamingCallbackHandler]
    assert result == SAMPLE_ANSWER


def test_templated_streaming_forwards_chunks_and_returns_formatted_text():
    agent, runnable = make_agent("  Cats nap a lot.  ", human_message="Tell me about {topic}")
    channel = BufferedChannel()
    target = StreamingTarget(channel=channel, session_id="session-2")

    result = run_agent(
        agent,
        ExecutionRequest(
            raw_input="ignored", prompt_values={"topic": "cats"}, streaming_target=target
        ),
    )

    assert result == "Cats nap a lot."
    assert len(channel.chunks["session-2"]) > 1
    assert channel.text("session-2").strip() == result
    assert runnable.stream_modes == [["messages", "values"]]
    assert runnable.inputs[0][-1] == HumanMessage(content="Tell me about cats")


def test_templated_value_with_open_brace_fills_the_next_variable():
    agent, runnable = make_agent(SAMPLE_ANSWER, human_message="Snippet: {code}{question}")

    result = run_agent(
        agent,
        ExecutionRequest(raw_input=" why?", prompt_values={"code": "def f(): return {"}),
    )

    assert result == SAMPLE_ANSWER
    assert runnable.inputs[0][-1] == HumanMessage(content="Snippet: def f(): return { why?")
