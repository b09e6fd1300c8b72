from __future__ import annotations

import io
import json


def test_stdio_server_routes_multiple_requests(make_server, fake_runner) -> None:
    fake_runner.names = ["Good Morning"]
    fake_runner.run_stdout = "Rise and shine"
    server = make_server()
    server.initialize()
    in_stream = io.StringIO(
        "\n".join(
            [
                json.dumps({"id": "req-1", "method": "tools/list", "params": {}}),
                "",
                json.dumps(
                    {
                        "id": "req-2",
                        "method": "tools/call",
                        "params": {
                            "name": "run_shortcut_good_morning",
                            "arguments": {"input": "today"},
                        },
                    }
                ),
                json.dumps({"id": "req-3", "method": "resources/list"}),
                json.dumps({"id": "req-4", "method": "prompts/list", "params": {}}),
            ]
        )
        + "\n"
    )
    out_stream = io.StringIO()

    server.serve(in_stream=in_stream, out_stream=out_stream)
    lines = [json.loads(line) for line in out_stream.getvalue().splitlines() if line]

    assert [line["request_id"] for line in lines] == ["req-1", "req-2", "req-3", "req-4"]
    assert all(line["ok"] is True for line in lines)
    tool_names = [tool["name"] for tool in lines[0]["result"]["tools"]]
    assert tool_names[-1] == "run_shortcut_good_morning"
    assert lines[1]["result"] == {"success": True, "output": "Rise and shine"}
    assert lines[2]["result"] == {"resources": []}
    assert lines[3]["result"] == {"prompts": []}
    assert fake_runner.run_targets() == ["Good Morning"]
    assert fake_runner.input_payloads == ["today"]


def test_direct_method_names_dispatch_tools(make_server) -> None:
    server = make_server()

    response = server.handle_payload(
        {"id": 11, "method": "open_shortcut", "params": {"name": "Alpha"}}
    )

    assert response["request_id"] == "11"
    assert response["result"] == {"success": True, "message": "Opened shortcut: Alpha"}
