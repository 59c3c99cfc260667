import io

import pytest

from chatcli.cli import main

from conftest import FakeResponse


def run(argv, stdin_text=""):
    stdout, stderr = io.StringIO(), io.StringIO()
    code = main(argv, stdin=io.StringIO(stdin_text), stdout=stdout, stderr=stderr)
    return code, stdout.getvalue(), stderr.getvalue()


def test_message_argument(fake_post):
    fake_post.queue("Paris.")
    code, out, err = run(["What is the capital of France?"])

    assert code == 0
    assert out == "Paris.\n"
    assert err == ""
    assert fake_post.sent_messages == [[{"role": "user", "content": "What is the capital of France?"}]]


def test_piped_stdin_is_read_whole(fake_post):
    fake_post.queue("summary")
    code, out, _ = run([], stdin_text="line one\nline two\n")

    assert code == 0
    assert out == "summary\n"
    assert fake_post.sent_messages[0] == [{"role": "user", "content": "line one\nline two"}]


def test_interactive_flag_takes_precedence_over_argument(fake_post):
    fake_post.queue("from stdin")
    code, out, _ = run(["--interactive", "ignored argument"], stdin_text="hello\nquit\n")

    assert code == 0
    assert out == "from stdin\n"
    assert fake_post.sent_messages[0] == [{"role": "user", "content": "hello"}]


@pytest.mark.parametrize("argv", [["hello"], ["--interactive"], []])
def test_missing_api_key_fails_before_network(fake_post, monkeypatch, argv):
    monkeypatch.delenv("OPENAI_API_KEY")
    code, out, err = run(argv, stdin_text="hello\n")

    assert code == 1
    assert out == ""
    assert "OPENAI_API_KEY" in err
    assert fake_post.calls == []


def test_api_error_exits_nonzero_and_prints_message(fake_post):
    fake_post.queue(FakeResponse(401, '{"error":{"message":"invalid key"}}'))
    code, out, err = run(["hello"])

    assert code == 1
    assert out == ""
    assert "invalid key" in err


def test_truncated_body_exits_nonzero(fake_post):
    fake_post.queue(FakeResponse(200, '{"choices":['))
    code, _, err = run(["hello"])

    assert code == 1
    assert err.startswith("Error: ")


def test_interactive_errors_do_not_change_exit_status(fake_post):
    fake_post.queue(FakeResponse(503, "busy"))
    code, _, err = run(["-i"], stdin_text="hello\n")

    assert code == 0
    assert "busy" in err


def test_empty_input_is_a_usage_error(fake_post):
    code, _, err = run([], stdin_text="   \n")

    assert code == 2
    assert "no message" in err
    assert fake_post.calls == []


def test_flags_override_environment(fake_post, monkeypatch):
    monkeypatch.setenv("CHATCLI_MODEL", "env-model")
    fake_post.queue("ok")
    run(["--model", "flag-model", "--temperature", "0.5", "--system", "Be brief.", "hi"])

    payload = fake_post.calls[0]["payload"]
    assert payload["model"] == "flag-model"
    assert payload["temperature"] == 0.5
    assert payload["messages"][0] == {"role": "system", "content": "Be brief."}


def test_environment_model_is_used_without_flag(fake_post, monkeypatch):
    monkeypatch.setenv("CHATCLI_MODEL", "env-model")
    fake_post.queue("ok")
    run(["hi"])

    assert fake_post.calls[0]["payload"]["model"] == "env-model"


def test_unknown_log_level_is_a_usage_error(fake_post, monkeypatch):
    monkeypatch.setenv("CHATCLI_LOG_LEVEL", "verbose")
    code, out, err = run(["hello"])

    assert code == 2
    assert out == ""
    assert "CHATCLI_LOG_LEVEL" in err
    assert fake_post.calls == []
